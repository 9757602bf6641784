from __future__ import annotations

import codecs
import configparser
import logging
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from platformdirs import user_config_dir

logger = logging.getLogger(__name__)

APP_NAME = "pyrdpconn"
SECTION = "pyrdpconn"
ENV_PREFIX = "PYRDPCONN_"

LINE_ENDINGS = {"crlf": "\r\n", "lf": "\n"}


@dataclass(frozen=True)
class Settings:
    """Defaults applied when a caller does not pass explicit options."""

    strict: bool = True
    encoding: str = "utf-16"
    line_ending: str = "\r\n"


# ---------------------------------------------------------------------------
# Value parsing
# ---------------------------------------------------------------------------


def _parse_bool(val: str) -> bool:
    v = val.strip().lower()
    if v in {"1", "true", "y", "yes", "on"}:
        return True
    if v in {"0", "false", "n", "no", "off"}:
        return False
    raise ValueError(f"invalid boolean: {val!r}")


def _parse_encoding(val: str) -> str:
    name = val.strip()
    codecs.lookup(name)  # raises LookupError
    return name


def _parse_line_ending(val: str) -> str:
    try:
        return LINE_ENDINGS[val.strip().lower()]
    except KeyError:
        raise ValueError(f"line ending must be one of {sorted(LINE_ENDINGS)}") from None


_PARSERS = {
    "strict": _parse_bool,
    "encoding": _parse_encoding,
    "line_ending": _parse_line_ending,
}


def _apply(settings: Settings, raw: dict[str, str], source: str) -> Settings:
    updates: dict[str, Any] = {}
    for name, parser in _PARSERS.items():
        if name not in raw:
            continue
        try:
            updates[name] = parser(raw[name])
        except (ValueError, LookupError) as exc:
            logger.warning("Ignoring %s=%r from %s: %s", name, raw[name], source, exc)
    if updates:
        logger.debug("settings from %s: %s", source, sorted(updates))
    return replace(settings, **updates)


# ---------------------------------------------------------------------------
# Sources
# ---------------------------------------------------------------------------


def settings_file() -> Path:
    """Return the default location of the user settings file."""

    return Path(user_config_dir(APP_NAME)) / "settings.ini"


def read_file(path: Path) -> dict[str, str]:
    parser = configparser.ConfigParser()
    if not path.exists():
        return {}
    try:
        parser.read(path, encoding="utf-8")
    except (configparser.Error, OSError, UnicodeDecodeError) as exc:
        logger.warning("Failed to read config %s: %s", path, exc)
        return {}
    if not parser.has_section(SECTION):
        return {}
    return dict(parser.items(SECTION))


def read_env() -> dict[str, str]:
    result: dict[str, str] = {}
    for name in _PARSERS:
        value = os.environ.get(ENV_PREFIX + name.upper())
        if value is not None:
            result[name] = value
    return result


def load_settings(path: Path | str | None = None) -> Settings:
    """Return settings from defaults, the INI file and the environment.

    Later sources win.  Invalid values are logged and ignored.
    """

    ini = Path(path) if path is not None else settings_file()
    settings = _apply(Settings(), read_file(ini), str(ini))
    return _apply(settings, read_env(), "environment")


__all__ = ["Settings", "load_settings", "settings_file", "LINE_ENDINGS"]
