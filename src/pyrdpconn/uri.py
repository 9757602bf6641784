"""``rdp://`` URI rendering of a property set."""

from __future__ import annotations

import logging
from urllib.parse import quote

from .schema import PropertySet
from .serializer import iter_encoded, resolve_schema

logger = logging.getLogger("pyrdpconn.uri")

URI_SCHEME = "rdp://"

# Only these kinds have a URI representation.
URI_KINDS = ("integer", "text")


def _escape(text: str) -> str:
    return quote(text, safe="")


def serialize_uri(
    props: PropertySet | None,
    *,
    strict: bool = True,
) -> str:
    """Return *props* as ``rdp://key=sign:value&...``.

    The fragment of the schema's primary field, if present, always comes
    first; the remaining fragments keep schema order.
    """

    if props is None:
        return URI_SCHEME
    schema = resolve_schema(type(props), strict=strict)
    if schema is None:
        return URI_SCHEME

    fragments: list[str] = []
    lead: str | None = None
    for spec, sign, text in iter_encoded(
        schema, props, strict=strict, kinds=URI_KINDS
    ):
        fragment = f"{_escape(spec.key)}={_escape(f'{sign}:{text}')}"  # type: ignore[arg-type]
        if spec.primary:
            lead = fragment
        else:
            fragments.append(fragment)
    if lead is not None:
        fragments.insert(0, lead)
    logger.debug("rendered %d uri fragments", len(fragments))
    return URI_SCHEME + "&".join(fragments)


__all__ = ["URI_SCHEME", "serialize_uri"]
