"""
Conference Pricing Package

Pricing and form-validation engine for conference registrations.
Resolves the active price tier, computes net/gross fees, validates
admin-defined form fields and keeps admin-ordered lists consistent.
"""

__version__ = "1.0.0"
