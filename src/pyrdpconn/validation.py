from __future__ import annotations

from typing import Any

from .errors import ValidationError, ValueNotAllowedError, ValueOutOfRangeError
from .schema import FieldSpec


def _in_range(value: Any, spec: FieldSpec) -> bool:
    if isinstance(value, bool) or not isinstance(value, int):
        return False
    if spec.minimum is not None and value < spec.minimum:
        return False
    if spec.maximum is not None and value > spec.maximum:
        return False
    return True


def _is_allowed(value: Any, spec: FieldSpec) -> bool:
    try:
        return value in spec.allowed  # type: ignore[operator]
    except TypeError:  # unhashable
        return False


def check(value: Any, spec: FieldSpec) -> ValidationError | None:
    """Return the first constraint *value* violates, or ``None``."""

    if spec.allowed is not None and not _is_allowed(value, spec):
        return ValueNotAllowedError(spec.key or spec.name, value)
    if spec.has_range and not _in_range(value, spec):
        return ValueOutOfRangeError(spec.key or spec.name, value)
    return None


def validate(value: Any, spec: FieldSpec) -> None:
    """Raise :class:`ValidationError` if *value* violates *spec*."""

    error = check(value, spec)
    if error is not None:
        raise error


__all__ = ["check", "validate"]
