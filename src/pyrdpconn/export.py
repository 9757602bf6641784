from __future__ import annotations

import json
from typing import Any

from .codec import as_bytes, encode_hex
from .errors import RdpError
from .schema import PropertySet

FORMATS = ("json", "yaml")


def to_mapping(props: PropertySet) -> dict[str, Any]:
    """Return present values keyed by serialized key, in schema order.

    Byte arrays are rendered as uppercase hex text.
    """

    out: dict[str, Any] = {}
    for spec, value in props.present():
        if spec.ignored or not spec.has_key:
            continue
        if spec.kind == "bytes":
            value = encode_hex(as_bytes(value))
        elif spec.kind == "text":
            value = str(value)
        out[spec.key] = value  # type: ignore[index]
    return out


def _require_yaml():
    try:
        import yaml  # type: ignore
    except ModuleNotFoundError as exc:
        raise RdpError("PyYAML is required for YAML output") from exc
    return yaml


def dumps(props: PropertySet, fmt: str = "json") -> str:
    data = to_mapping(props)
    if fmt == "json":
        return json.dumps(data, indent=2, ensure_ascii=False)
    if fmt == "yaml":
        yaml = _require_yaml()
        return yaml.safe_dump(data, sort_keys=False, allow_unicode=True)
    raise ValueError(f"unknown format {fmt!r}; expected one of {FORMATS}")


__all__ = ["to_mapping", "dumps", "FORMATS"]
