"""Mapping between typed values and their ``type-sign``/text form.

Each supported value kind has an adapter which knows its single-letter
type-sign and how to render and parse the text that follows it.  The
adapters do no escaping; the surrounding format is responsible for that.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Protocol

from .errors import (
    MalformedHexError,
    MalformedIntegerError,
    OddLengthByteTextError,
    UnknownTypeSignError,
    UnsupportedValueError,
)

_INTEGER_RE = re.compile(r"\s*[+-]?[0-9]+\s*")
_HEX_PAIR_RE = re.compile(r"[0-9A-Fa-f]{2}")

####################
##### ADAPTERS #####
####################


class KindAdapter(Protocol):
    """Adapter for one value kind.

    ``encode`` raises :class:`UnsupportedValueError` for values it cannot
    render and ``decode`` raises a :class:`~pyrdpconn.errors.DecodeError`
    subclass for text it cannot parse.
    """

    sign: str

    def encode(self, value: Any) -> str:
        """Render *value* as wire text."""

    def decode(self, text: str) -> Any:
        """Parse wire *text* into a Python value."""


class IntegerAdapter:
    """Adapter for integer values (type-sign ``i``)."""

    sign = "i"

    def encode(self, value: Any) -> str:
        if isinstance(value, bool) or not isinstance(value, int):
            raise UnsupportedValueError(f"expected int, got {type(value).__name__}")
        return str(value)

    def decode(self, text: str) -> int:
        if not _INTEGER_RE.fullmatch(text):
            raise MalformedIntegerError(f"invalid integer: {text!r}")
        return int(text)


class TextAdapter:
    """Adapter for text values (type-sign ``s``)."""

    sign = "s"

    def encode(self, value: Any) -> str:
        if value is None or isinstance(value, bytes | bytearray | memoryview):
            raise UnsupportedValueError(f"expected text, got {type(value).__name__}")
        return str(value)

    def decode(self, text: str) -> str:  # pragma: no cover - trivial
        return text


class ByteArrayAdapter:
    """Adapter for byte arrays (type-sign ``b``)."""

    sign = "b"

    def encode(self, value: Any) -> str:
        return encode_hex(as_bytes(value))

    def decode(self, text: str) -> bytes:
        return decode_hex(text)


def as_bytes(value: Any) -> bytes:
    """Coerce a bytes-like value or a sequence of ints to ``bytes``."""

    if isinstance(value, bytes | bytearray | memoryview):
        return bytes(value)
    if isinstance(value, Sequence) and not isinstance(value, str):
        try:
            return bytes(value)
        except (TypeError, ValueError) as exc:
            raise UnsupportedValueError(f"not a byte sequence: {exc}") from exc
    raise UnsupportedValueError(f"expected bytes, got {type(value).__name__}")


@dataclass(frozen=True)
class ValueKind:
    """Metadata describing a supported value kind."""

    name: str
    adapter: KindAdapter

    @property
    def sign(self) -> str:
        return self.adapter.sign


KIND_REGISTRY: dict[str, ValueKind] = {
    "integer": ValueKind("integer", IntegerAdapter()),
    "text": ValueKind("text", TextAdapter()),
    "bytes": ValueKind("bytes", ByteArrayAdapter()),
}

SIGN_REGISTRY: dict[str, KindAdapter] = {
    kind.sign: kind.adapter for kind in KIND_REGISTRY.values()
}


###################
##### HELPERS #####
###################


def encode_hex(data: bytes) -> str:
    """Return *data* as uppercase hex pairs without separators."""

    return data.hex().upper()


def decode_hex(text: str) -> bytes:
    """Parse uppercase or lowercase hex pairs into bytes."""

    if len(text) % 2 != 0:
        raise OddLengthByteTextError(f"byte text has odd length {len(text)}")
    for pos in range(0, len(text), 2):
        pair = text[pos : pos + 2]
        if not _HEX_PAIR_RE.fullmatch(pair):
            raise MalformedHexError(f"invalid hex pair {pair!r} at offset {pos}")
    return bytes.fromhex(text)


def encode(value: Any, kind: str) -> tuple[str, str]:
    """Return ``(type_sign, text)`` for *value* of the given *kind*."""

    try:
        adapter = KIND_REGISTRY[kind].adapter
    except KeyError as exc:
        raise UnsupportedValueError(f"unknown value kind: {kind!r}") from exc
    return adapter.sign, adapter.encode(value)


def decode(sign: str, text: str) -> Any:
    """Decode *text* using the branch selected by *sign*.

    The field's declared kind is not consulted.
    """

    try:
        adapter = SIGN_REGISTRY[sign]
    except KeyError as exc:
        raise UnknownTypeSignError(sign) from exc
    return adapter.decode(text)


__all__ = [
    "KindAdapter",
    "IntegerAdapter",
    "TextAdapter",
    "ByteArrayAdapter",
    "ValueKind",
    "KIND_REGISTRY",
    "SIGN_REGISTRY",
    "encode",
    "decode",
    "encode_hex",
    "decode_hex",
    "as_bytes",
]
