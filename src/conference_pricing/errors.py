"""Error kinds raised by the pricing and form engines."""

from enum import Enum


class ErrorKind(Enum):
    """Engine error codes."""

    UNKNOWN_CATEGORY = "UNKNOWN_CATEGORY"
    INDEX_OUT_OF_RANGE = "INDEX_OUT_OF_RANGE"
    VALIDATION_FAILED = "VALIDATION_FAILED"
    INVALID_CONFIGURATION = "INVALID_CONFIGURATION"


class EngineError(Exception):
    """Base engine error with kind and user-safe message."""

    def __init__(self, kind: ErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.message}"


class UnknownCategoryError(EngineError):
    """Raised when no price is configured for a registrant category."""

    def __init__(self, category: str) -> None:
        super().__init__(
            kind=ErrorKind.UNKNOWN_CATEGORY,
            message=f"No price configured for category '{category}'",
        )
        self.category = category


class IndexOutOfRangeError(EngineError):
    """Raised when a move references a position outside the list."""

    def __init__(self, index: int, length: int) -> None:
        super().__init__(
            kind=ErrorKind.INDEX_OUT_OF_RANGE,
            message=f"Index {index} out of range for list of length {length}",
        )
        self.index = index
        self.length = length


class ValidationFailedError(EngineError):
    """Raised by Validator.validate_or_raise; carries every field error."""

    def __init__(self, errors: list) -> None:
        super().__init__(
            kind=ErrorKind.VALIDATION_FAILED,
            message=f"{len(errors)} field(s) failed validation",
        )
        self.errors = tuple(errors)


class InvalidConfigurationError(EngineError):
    """Raised when admin-authored configuration breaks an invariant."""

    def __init__(self, message: str) -> None:
        super().__init__(kind=ErrorKind.INVALID_CONFIGURATION, message=message)
