from enum import Enum
from typing import Literal, TypeAlias

DiagnosticSeverity: TypeAlias = Literal["error"]
DiagnosticValue: TypeAlias = str | int | bool


class ErrorCode(str, Enum):
    """Canonical diagnostic codes for views, expressions, and assignment."""

    INVALID_SHAPE = "invalid_shape"
    BUFFER_TOO_SMALL = "buffer_too_small"
    UNSUPPORTED_BUFFER = "unsupported_buffer"
    NOT_A_VIEW = "not_a_view"
    SHAPE_MISMATCH = "shape_mismatch"
    ASSIGN_SHAPE_MISMATCH = "assign_shape_mismatch"
    INDEX_RANK_MISMATCH = "index_rank_mismatch"
    READONLY_BUFFER = "readonly_buffer"


def _normalize_code(code: str | ErrorCode) -> str:
    if isinstance(code, ErrorCode):
        return code.value
    if not isinstance(code, str):
        raise TypeError("diagnostic code must be a string or ErrorCode")
    if not code or not code[0].isalpha():
        raise ValueError("diagnostic code must start with a letter")
    if not all(char.isalnum() or char == "_" for char in code):
        raise ValueError("diagnostic code must be snake_case or UPPER_SNAKE")
    if code.isupper() or code.islower():
        return code.lower()
    raise ValueError("diagnostic code cannot mix letter case")


class StrideError(ValueError):
    """Structured base error for shape, buffer, and indexing diagnostics."""

    channel = "error"
    severity: DiagnosticSeverity
    code: str
    external_code: str
    help: str | None
    related: tuple[str, ...]
    data: dict[str, DiagnosticValue]
    message: str

    def __init__(
        self,
        *,
        code: str | ErrorCode,
        message: str,
        help: str | None = None,
        related: tuple[str, ...] = (),
        data: dict[str, DiagnosticValue] | None = None,
    ) -> None:
        """Build one structured error."""
        normalized_code = _normalize_code(code)
        if not isinstance(message, str) or not message.strip():
            raise ValueError("diagnostic message must be a non-empty string")
        if help is not None and not isinstance(help, str):
            raise TypeError("diagnostic help must be a string or None")
        for note in related:
            if not isinstance(note, str) or not note.strip():
                raise ValueError("related diagnostic notes must be non-empty strings")

        payload_data = {} if data is None else dict(data)
        for key, value in payload_data.items():
            if not isinstance(key, str):
                raise TypeError("diagnostic data keys must be strings")
            if not isinstance(value, str | int | bool):
                raise TypeError("diagnostic data values must be str, int, or bool")

        self.code = normalized_code
        self.external_code = normalized_code.upper()
        self.severity = "error"
        self.help = help
        self.related = tuple(related)
        self.data = payload_data
        self.message = message
        super().__init__(message)


class ValidationError(StrideError):
    """Construction-time error: bad shapes, buffers, or broadcast operands."""

    channel = "validation_error"


class ExecutionError(StrideError):
    """Access-time error: bad index tuples or writes into readonly storage."""

    channel = "execution_error"


__all__ = [
    "DiagnosticValue",
    "ErrorCode",
    "ExecutionError",
    "StrideError",
    "ValidationError",
]
