from __future__ import annotations

import re
from typing import NamedTuple

LINE_PATTERN = re.compile(r"(?P<key>[^:]+):(?P<sign>[^:]+):(?P<value>[^\r\n]*)")


class RdpLine(NamedTuple):
    key: str
    sign: str
    value: str


def parse_line(line: str) -> RdpLine | None:
    """Split *line* into key, type-sign and value, or return ``None``."""

    match = LINE_PATTERN.match(line)
    if match is None:
        return None
    return RdpLine(match["key"], match["sign"], match["value"])


def format_line(key: str, sign: str, text: str) -> str:
    return f"{key}:{sign}:{text}"


__all__ = ["LINE_PATTERN", "RdpLine", "parse_line", "format_line"]
