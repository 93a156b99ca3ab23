"""
Custom form field definitions authored by conference administrators.

The same shape is used for the registration form and the abstract
submission form; list order is the order fields are rendered in.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional

from ..engine.models import as_int, pick
from ..errors import InvalidConfigurationError


class FieldType(str, Enum):
    TEXT = "text"
    TEXTAREA = "textarea"
    LONGTEXT = "longtext"
    EMAIL = "email"
    TEL = "tel"
    NUMBER = "number"
    DATE = "date"
    SELECT = "select"
    RADIO = "radio"
    CHECKBOX = "checkbox"
    SEPARATOR = "separator"


# Types whose value must be one of the configured options
CHOICE_TYPES = (FieldType.SELECT, FieldType.RADIO)

LONGTEXT_MAX_LENGTH = 5000


@dataclass(frozen=True)
class FieldValidation:
    min: Optional[float] = None
    max: Optional[float] = None
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    pattern: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'FieldValidation':
        min_length = pick(data, 'minLength', 'min_length')
        max_length = pick(data, 'maxLength', 'max_length')
        return cls(
            min=pick(data, 'min'),
            max=pick(data, 'max'),
            min_length=as_int(min_length, "Min length") if min_length is not None else None,
            max_length=as_int(max_length, "Max length") if max_length is not None else None,
            pattern=pick(data, 'pattern') or None,
        )


@dataclass(frozen=True)
class FieldDefinition:
    """One admin-authored field. Separators only partition the rendered form."""
    id: str
    name: str
    type: FieldType
    label: str = ""
    required: bool = False
    placeholder: Optional[str] = None
    description: Optional[str] = None
    options: tuple[str, ...] = ()
    validation: FieldValidation = field(default_factory=FieldValidation)

    @property
    def is_separator(self) -> bool:
        return self.type is FieldType.SEPARATOR

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'FieldDefinition':
        raw_type = data.get('type', 'text')
        try:
            field_type = FieldType(raw_type)
        except ValueError:
            raise InvalidConfigurationError(f"Unsupported field type '{raw_type}'") from None

        options = data.get('options') or ()
        if isinstance(options, str):
            # The editor stores comma separated options as typed
            options = [opt.strip() for opt in options.split(',')]

        return cls(
            id=str(data['id']),
            name=(data.get('name') or "").strip(),
            type=field_type,
            label=data.get('label') or "",
            required=bool(data.get('required', False)) and field_type is not FieldType.SEPARATOR,
            placeholder=data.get('placeholder') or None,
            description=data.get('description') or None,
            options=tuple(opt for opt in options if opt),
            validation=FieldValidation.from_dict(data.get('validation') or {}),
        )


@dataclass(frozen=True)
class FieldError:
    """One failing constraint on one field."""
    field_id: str
    field_name: str
    message: str
