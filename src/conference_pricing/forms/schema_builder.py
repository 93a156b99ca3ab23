"""
Schema Builder - turns field definitions into a submission validator.

Each data field becomes one attribute of a pydantic model created at build
time. Emptiness and "required" are decided before pydantic sees the
payload, so optional fields left blank never reach type validation and are
dropped from the normalized output.
"""
import re
from dataclasses import dataclass, field
from datetime import date
from typing import Annotated, Any, Mapping, Optional, Union

from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict, Field, ValidationError, create_model
from pydantic_core import PydanticCustomError

from ..errors import InvalidConfigurationError, ValidationFailedError
from .fields import (
    CHOICE_TYPES,
    LONGTEXT_MAX_LENGTH,
    FieldDefinition,
    FieldError,
    FieldType,
)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

# Normalized values live under this key, apart from any top-level fields
NAMESPACE = "custom_fields"

REQUIRED_MESSAGE = "This field is required"


def _check_email(value: str) -> str:
    if not EMAIL_PATTERN.match(value):
        raise PydanticCustomError("invalid_email", "Invalid email address")
    return value


def _check_iso_date(value: str) -> str:
    try:
        return date.fromisoformat(value.strip()).isoformat()
    except ValueError:
        raise PydanticCustomError("invalid_date", "Invalid date, expected YYYY-MM-DD") from None


def _one_of(options: tuple[str, ...]):
    def check(value: str) -> str:
        if value not in options:
            raise PydanticCustomError(
                "invalid_option",
                "Must be one of: {options}",
                {"options": ", ".join(options)},
            )
        return value
    return check


def _pattern(pattern: str):
    compiled = re.compile(pattern)

    def check(value: str) -> str:
        if not compiled.fullmatch(value):
            raise PydanticCustomError("invalid_format", "Invalid format")
        return value
    return check


def _not_a_boolean(value: Any) -> Any:
    # float() would read a checkbox value as 1.0 or 0.0
    if isinstance(value, bool):
        raise PydanticCustomError("invalid_number", "Input should be a valid number")
    return value


def _must_be_checked(value: bool) -> bool:
    if value is not True:
        raise PydanticCustomError("must_be_checked", "This field must be checked")
    return value


def _text_type(definition: FieldDefinition) -> Any:
    rules = definition.validation
    max_length = rules.max_length
    if definition.type is FieldType.LONGTEXT:
        max_length = min(max_length or LONGTEXT_MAX_LENGTH, LONGTEXT_MAX_LENGTH)
    metadata = [Field(min_length=rules.min_length, max_length=max_length)]
    if rules.pattern:
        metadata.append(AfterValidator(_pattern(rules.pattern)))
    return Annotated[(str, *metadata)]


def field_type(definition: FieldDefinition) -> Any:
    """The pydantic type a submitted (non-empty) value must satisfy."""
    kind = definition.type
    rules = definition.validation

    if kind in (FieldType.TEXT, FieldType.TEXTAREA, FieldType.LONGTEXT):
        return _text_type(definition)
    if kind is FieldType.EMAIL:
        return Annotated[str, AfterValidator(_check_email)]
    if kind is FieldType.TEL:
        return str
    if kind is FieldType.NUMBER:
        return Annotated[
            float,
            Field(ge=rules.min, le=rules.max, allow_inf_nan=False),
            BeforeValidator(_not_a_boolean),
        ]
    if kind is FieldType.DATE:
        return Annotated[str, AfterValidator(_check_iso_date)]
    if kind in CHOICE_TYPES:
        return Annotated[str, AfterValidator(_one_of(definition.options))]
    if kind is FieldType.CHECKBOX:
        if definition.required:
            return Annotated[bool, AfterValidator(_must_be_checked)]
        return bool
    raise InvalidConfigurationError(f"Unsupported field type '{kind.value}'")


def is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def check_definitions(fields: tuple[FieldDefinition, ...]) -> None:
    """Reject definitions a form could never be validated against."""
    names = set()
    for definition in fields:
        if definition.is_separator:
            continue
        if not definition.name:
            raise InvalidConfigurationError(f"Field '{definition.id}' has no name")
        if definition.name in names:
            raise InvalidConfigurationError(f"Duplicate field name '{definition.name}'")
        names.add(definition.name)
        if definition.type in CHOICE_TYPES and definition.required and not definition.options:
            raise InvalidConfigurationError(
                f"Required field '{definition.name}' has no options to choose from"
            )
        rules = definition.validation
        if rules.min is not None and rules.max is not None and rules.min > rules.max:
            raise InvalidConfigurationError(f"Field '{definition.name}' has min greater than max")
        if rules.min_length is not None and rules.max_length is not None and rules.min_length > rules.max_length:
            raise InvalidConfigurationError(
                f"Field '{definition.name}' has min length greater than max length"
            )
        if rules.pattern:
            try:
                re.compile(rules.pattern)
            except re.error:
                raise InvalidConfigurationError(
                    f"Field '{definition.name}' has an invalid pattern"
                ) from None


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating one submission."""
    ok: bool
    value: Optional[dict] = None
    errors: tuple[FieldError, ...] = ()


@dataclass(frozen=True)
class Validator:
    """
    Validator for one form's custom fields.

    Two validators built from the same definitions compare equal; the
    generated pydantic model is an implementation detail left out of
    equality.
    """
    fields: tuple[FieldDefinition, ...]
    _model: type[BaseModel] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        attributes = {}
        for index, definition in self.data_fields():
            attributes[f"field_{index}"] = (Optional[field_type(definition)], None)
        model = create_model(
            "CustomFieldsSubmission",
            __config__=ConfigDict(extra="ignore"),
            **attributes,
        )
        object.__setattr__(self, "_model", model)

    def data_fields(self) -> list[tuple[int, FieldDefinition]]:
        return [(i, d) for i, d in enumerate(self.fields) if not d.is_separator]

    def defaults(self) -> dict:
        """Initial values for an empty form."""
        values = {}
        for _, definition in self.data_fields():
            if definition.type is FieldType.CHECKBOX:
                values[definition.name] = False
            elif definition.type is FieldType.NUMBER:
                values[definition.name] = None
            else:
                values[definition.name] = ""
        return {NAMESPACE: values}

    def validate(self, payload: Mapping[str, Any]) -> ValidationResult:
        """
        Validate a submission keyed by field name.

        Every failing field is reported; validation never stops at the
        first error.
        """
        # Accept the namespaced shape produced by defaults() as well
        nested = payload.get(NAMESPACE)
        source = nested if isinstance(nested, Mapping) else payload

        errors: list[FieldError] = []
        present: dict[str, Any] = {}
        by_key: dict[str, FieldDefinition] = {}

        for index, definition in self.data_fields():
            key = f"field_{index}"
            by_key[key] = definition
            value = source.get(definition.name)
            if is_empty(value):
                if definition.required:
                    errors.append(FieldError(definition.id, definition.name, REQUIRED_MESSAGE))
                continue
            present[key] = value

        parsed = None
        try:
            parsed = self._model.model_validate(present)
        except ValidationError as exc:
            for error in exc.errors():
                definition = by_key[str(error["loc"][0])]
                errors.append(FieldError(definition.id, definition.name, error["msg"]))

        if errors:
            # Keep errors in form order regardless of which stage found them
            order = {d.id: i for i, d in enumerate(self.fields)}
            errors.sort(key=lambda e: order[e.field_id])
            return ValidationResult(ok=False, errors=tuple(errors))

        values = {}
        for key, definition in by_key.items():
            if key in present:
                values[definition.name] = getattr(parsed, key)
        return ValidationResult(ok=True, value={NAMESPACE: values})

    def validate_or_raise(self, payload: Mapping[str, Any]) -> dict:
        result = self.validate(payload)
        if not result.ok:
            raise ValidationFailedError(list(result.errors))
        return result.value


def build_validator(fields: list[Union[FieldDefinition, Mapping[str, Any]]]) -> Validator:
    """
    Build a validator from field definitions (objects or raw dicts).

    Raises InvalidConfigurationError for definitions that break the
    form invariants.
    """
    definitions = tuple(
        f if isinstance(f, FieldDefinition) else FieldDefinition.from_dict(f)
        for f in fields
    )
    check_definitions(definitions)
    return Validator(fields=definitions)
