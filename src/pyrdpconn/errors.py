from __future__ import annotations

from typing import Any


class RdpError(Exception):
    """Base class for pyrdpconn errors."""


class _Located:
    """Mixin for errors that may be tied to a zero-based input line."""

    line_index: int | None = None

    def __str__(self) -> str:
        base = super().__str__()
        if self.line_index is None:
            return base
        return f"{base} (line index {self.line_index})"


class SchemaError(RdpError):
    """Raised when a type has no usable schema or the schema is inconsistent."""


class LineError(_Located, RdpError):
    """Base class for errors about one input line."""

    def __init__(self, message: str, line_index: int | None = None) -> None:
        super().__init__(message)
        self.line_index = line_index


class InvalidLineSyntaxError(LineError):
    """Raised when a line does not match ``key:type-sign:value``."""

    def __init__(self, line_index: int | None = None, line: str = "") -> None:
        super().__init__(f"Invalid data: {line!r}", line_index)
        self.line = line


class UnknownKeyError(LineError):
    """Raised when a key has no matching field."""

    def __init__(self, key: str, line_index: int | None = None) -> None:
        super().__init__(f"Unknown property name '{key}'", line_index)
        self.key = key


class UnknownTypeSignError(LineError):
    """Raised when a type-sign is not one of ``i``, ``s`` or ``b``."""

    def __init__(self, sign: str, line_index: int | None = None) -> None:
        super().__init__(f"Unknown type sign '{sign}'", line_index)
        self.sign = sign


class DecodeError(_Located, RdpError):
    """Raised when value text cannot be decoded for its type-sign."""


class MalformedIntegerError(DecodeError):
    pass


class OddLengthByteTextError(DecodeError):
    pass


class MalformedHexError(DecodeError):
    pass


class ValidationError(_Located, RdpError):
    """Raised when a typed value violates a field constraint."""

    def __init__(self, field: str, value: Any, message: str) -> None:
        super().__init__(message)
        self.field = field
        self.value = value


class ValueNotAllowedError(ValidationError):
    def __init__(self, field: str, value: Any) -> None:
        super().__init__(
            field, value, f"The property '{field}' has an unsupported value: {value!r}"
        )


class ValueOutOfRangeError(ValidationError):
    def __init__(self, field: str, value: Any) -> None:
        super().__init__(
            field, value, f"The property '{field}' has an out-of-range value: {value!r}"
        )


class UnsupportedValueError(RdpError):
    """Raised when a value cannot be represented in the requested output."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class ProtectionError(_Located, RdpError):
    """Raised when a protected value cannot be protected or recovered."""


class RdpFileError(RdpError):
    """Raised for unexpected failures reading or writing ``.rdp`` files."""
