"""Reading and writing ``.rdp`` files."""

from __future__ import annotations

import codecs
import logging
import re
from pathlib import Path
from typing import TypeVar

from .config import Settings, load_settings
from .errors import RdpFileError
from .protection import Protector
from .schema import PropertySet
from .serializer import deserialize, serialize

logger = logging.getLogger("pyrdpconn.rdpfile")

T = TypeVar("T", bound=PropertySet)

_NEWLINE_RE = re.compile(r"\r\n|\r|\n")

_BOMS = (
    (codecs.BOM_UTF8, "utf-8-sig"),
    (codecs.BOM_UTF16_LE, "utf-16"),
    (codecs.BOM_UTF16_BE, "utf-16"),
)

# codecs that can only be recognised by their byte-order mark
_BOM_ONLY = frozenset({"utf-16", "utf-32"})


def detect_encoding(data: bytes, fallback: str = "utf-8") -> str:
    """Return the encoding named by *data*'s byte-order mark, or *fallback*."""

    for bom, name in _BOMS:
        if data.startswith(bom):
            return name
    return fallback


def _bomless_fallback(encoding: str | None) -> str:
    if not encoding:
        return "utf-8"
    try:
        family = codecs.lookup(encoding).name
    except LookupError:
        return encoding
    if family in _BOM_ONLY:
        return "utf-8"
    return encoding


def read_lines(path: Path | str, encoding: str | None = None) -> list[str]:
    """Return the lines of *path* without line terminators.

    A byte-order mark takes precedence over *encoding*; without either the
    file is read as UTF-8.  UTF-16 and UTF-32 always carry a byte-order mark
    when written, so a file without one is not read as either.
    """

    path = Path(path)
    try:
        data = path.read_bytes()
    except OSError as exc:
        raise RdpFileError(f"cannot read {path}: {exc}") from exc
    name = detect_encoding(data, _bomless_fallback(encoding))
    try:
        text = data.decode(name)
    except (UnicodeDecodeError, LookupError) as exc:
        raise RdpFileError(f"cannot decode {path} as {name}: {exc}") from exc
    lines = _NEWLINE_RE.split(text)
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def load(
    path: Path | str,
    cls: type[T],
    *,
    strict: bool | None = None,
    protector: Protector | None = None,
    settings: Settings | None = None,
) -> T | None:
    """Read *path* into a new *cls* instance."""

    settings = settings or load_settings()
    if strict is None:
        strict = settings.strict
    lines = read_lines(path, settings.encoding)
    logger.debug("read %d lines from %s", len(lines), path)
    return deserialize(lines, cls, strict=strict, protector=protector)


def dump(
    props: PropertySet,
    path: Path | str,
    *,
    strict: bool | None = None,
    protector: Protector | None = None,
    settings: Settings | None = None,
) -> Path:
    """Write *props* to *path* atomically and return the path."""

    settings = settings or load_settings()
    if strict is None:
        strict = settings.strict
    # materialise first so a strict failure leaves no file behind
    lines = list(serialize(props, strict=strict, protector=protector))
    text = "".join(line + settings.line_ending for line in lines)
    path = Path(path)
    tmp = path.with_suffix(path.suffix + ".tmp")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with tmp.open("w", encoding=settings.encoding, newline="") as fh:
            fh.write(text)
        tmp.replace(path)
    except OSError as exc:
        raise RdpFileError(f"cannot write {path}: {exc}") from exc
    logger.debug("wrote %d lines to %s", len(lines), path)
    return path


__all__ = ["detect_encoding", "read_lines", "load", "dump"]
