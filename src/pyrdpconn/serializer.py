"""Line serializer and deserializer for ``key:type-sign:value`` text.

Both directions take a ``strict`` flag.  Strict mode raises the first error
encountered.  Lenient mode skips the offending field or line and carries on,
except for :class:`SchemaError` which always aborts.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Iterator
from typing import Any, TypeVar

from . import codec
from .errors import (
    DecodeError,
    InvalidLineSyntaxError,
    LineError,
    ProtectionError,
    RdpError,
    SchemaError,
    UnknownKeyError,
    UnsupportedValueError,
    ValidationError,
)
from .grammar import format_line, parse_line
from .protection import Protector
from .schema import FieldSpec, PropertySet, Schema, schema_for
from .validation import check

logger = logging.getLogger("pyrdpconn.serializer")

T = TypeVar("T", bound=PropertySet)

_LINE_BREAK_RE = re.compile(r"[\r\n]")


def resolve_schema(cls: type, *, strict: bool) -> Schema | None:
    """Return the schema of *cls*, or ``None`` in lenient mode if it has none."""

    try:
        return schema_for(cls)
    except SchemaError:
        if strict:
            raise
        logger.debug("no usable schema for %r; nothing to do", cls)
        return None


def _missing_key(spec: FieldSpec, schema: Schema, *, strict: bool) -> None:
    if strict:
        raise SchemaError(
            f"The property '{spec.name}' of {schema.owner.__name__} "
            "does not have a valid serialized property name."
        )
    logger.debug("field %s has no serialized key; skipped", spec.name)


def iter_encoded(
    schema: Schema,
    props: PropertySet,
    *,
    strict: bool,
    protector: Protector | None = None,
    kinds: Iterable[str] | None = None,
    single_line: bool = False,
) -> Iterator[tuple[FieldSpec, str, str]]:
    """Yield ``(spec, type_sign, text)`` for every field to be written.

    *kinds* restricts the value kinds the caller can represent; a present,
    non-default value of any other kind is an :class:`UnsupportedValueError`.
    With *single_line* set, text containing a line break is unsupported too.
    """

    supported = None if kinds is None else frozenset(kinds)
    for spec in schema:
        if spec.ignored:
            continue
        if not spec.has_key:
            _missing_key(spec, schema, strict=strict)
            continue
        value = props[spec.name]
        if value is None:
            continue
        if spec.default is not None and value == spec.default:
            continue
        error = check(value, spec)
        if error is not None:
            if strict:
                raise error
            logger.warning("%s (written anyway)", error)
        try:
            if supported is not None and spec.kind not in supported:
                raise UnsupportedValueError(
                    f"The property '{spec.key}' of kind {spec.kind!r} "
                    "cannot be represented here.",
                    spec.key,
                )
            if spec.protected and protector is not None:
                value = protector.protect(codec.as_bytes(value))
            sign, text = codec.encode(value, spec.kind)
            if single_line and _LINE_BREAK_RE.search(text):
                raise UnsupportedValueError(
                    f"The property '{spec.key}' contains a line break.",
                    spec.key,
                )
        except (UnsupportedValueError, ProtectionError) as exc:
            if isinstance(exc, UnsupportedValueError) and exc.field is None:
                exc.field = spec.key
            if strict:
                raise
            logger.debug("skipping %s: %s", spec.key, exc)
            continue
        yield spec, sign, text


def serialize(
    props: PropertySet | None,
    *,
    strict: bool = True,
    protector: Protector | None = None,
) -> Iterator[str]:
    """Return an iterator over the ``key:type-sign:value`` lines of *props*.

    The schema is resolved immediately; the lines themselves are produced
    lazily.
    """

    if props is None:
        return iter(())
    schema = resolve_schema(type(props), strict=strict)
    if schema is None:
        return iter(())
    return (
        format_line(spec.key, sign, text)  # type: ignore[arg-type]
        for spec, sign, text in iter_encoded(
            schema, props, strict=strict, protector=protector, single_line=True
        )
    )


def _skip(line_index: int, exc: RdpError) -> None:
    logger.debug("line %d skipped: %s", line_index, exc)


def _decode_value(spec: FieldSpec, sign: str, text: str, protector: Protector | None) -> Any:
    value = codec.decode(sign, text)
    if spec.protected and protector is not None and isinstance(value, bytes):
        value = protector.unprotect(value)
    return value


def deserialize(
    lines: Iterable[str],
    cls: type[T],
    *,
    strict: bool = True,
    protector: Protector | None = None,
) -> T | None:
    """Build a *cls* instance from ``key:type-sign:value`` *lines*.

    Lines are applied in order, so a later line for the same key replaces
    an earlier one.  Returns ``None`` in lenient mode if *cls* has no schema.
    """

    schema = resolve_schema(cls, strict=strict)
    if schema is None:
        return None
    for spec in schema:
        if not spec.ignored and not spec.has_key:
            _missing_key(spec, schema, strict=strict)

    instance = cls()
    for line_index, line in enumerate(lines):
        parsed = parse_line(line)
        if parsed is None:
            error: RdpError = InvalidLineSyntaxError(line_index, line)
            if strict:
                raise error
            _skip(line_index, error)
            continue

        spec = schema.lookup(parsed.key)
        if spec is None:
            error = UnknownKeyError(parsed.key, line_index)
            if strict:
                raise error
            _skip(line_index, error)
            continue

        try:
            value = _decode_value(spec, parsed.sign, parsed.value, protector)
        except (LineError, DecodeError, ProtectionError) as exc:
            exc.line_index = line_index
            if strict:
                raise
            _skip(line_index, exc)
            continue

        invalid: ValidationError | None = check(value, spec)
        if invalid is not None:
            invalid.line_index = line_index
            if strict:
                raise invalid
            _skip(line_index, invalid)
            continue

        instance[spec.name] = value
    return instance


__all__ = ["serialize", "deserialize", "iter_encoded", "resolve_schema"]
