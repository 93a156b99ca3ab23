"""API subpackage - FastAPI surface over the pricing and forms engines."""
