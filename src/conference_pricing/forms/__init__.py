"""Forms subpackage - custom field definitions and submission validation."""
from .fields import FieldDefinition, FieldError, FieldType, FieldValidation
from .schema_builder import ValidationResult, Validator, build_validator

__all__ = [
    'FieldDefinition',
    'FieldError',
    'FieldType',
    'FieldValidation',
    'ValidationResult',
    'Validator',
    'build_validator',
]
