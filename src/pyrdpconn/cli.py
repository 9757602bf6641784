from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from .catalog import DEFAULT_PROFILE, PROFILES, RemoteDesktopUriProperties
from .config import load_settings
from .errors import RdpError
from .export import dumps
from .protection import store_master_password
from .rdpfile import load, read_lines
from .schema import PropertySet, schema_for
from .serializer import deserialize, serialize
from .uri import serialize_uri

DEBUG_ENV = "PYRDPCONN_DEBUG"

logger = logging.getLogger("pyrdpconn.cli")


def _configure_logging(verbose: bool) -> None:
    if not (verbose or os.environ.get(DEBUG_ENV)):
        return
    root = logging.getLogger("pyrdpconn")
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(levelname)s:%(message)s"))
        root.addHandler(handler)
    root.setLevel(logging.DEBUG)


def _profile(args: argparse.Namespace) -> type[PropertySet]:
    return PROFILES[args.profile]


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def show_cmd(args: argparse.Namespace) -> int:
    strict = False if args.lenient else None
    props = load(args.file, _profile(args), strict=strict)
    if props is None:
        return 1
    if args.format == "rdp":
        for line in serialize(props, strict=False):
            print(line)
    else:
        print(dumps(props, args.format))
    return 0


def check_cmd(args: argparse.Namespace) -> int:
    lines = read_lines(args.file, load_settings().encoding)
    try:
        deserialize(lines, _profile(args), strict=True)
    except RdpError as exc:
        print(f"{args.file}: {exc}", file=sys.stderr)
        return 1
    print("ok")
    return 0


def uri_cmd(args: argparse.Namespace) -> int:
    lines = read_lines(args.file, load_settings().encoding)
    props = deserialize(lines, RemoteDesktopUriProperties, strict=False)
    print(serialize_uri(props, strict=False))
    return 0


def fields_cmd(args: argparse.Namespace) -> int:
    for spec in schema_for(_profile(args)):
        if spec.ignored:
            continue
        print(f"{spec.key}\t{spec.kind}\t{spec.display_name}")
    return 0


def master_key_cmd(args: argparse.Namespace) -> int:  # pragma: no cover - touches keyring
    store_master_password(args.password)
    print("stored")
    return 0


def settings_cmd(_: argparse.Namespace) -> int:
    settings = load_settings()
    print(f"strict: {settings.strict}")
    print(f"encoding: {settings.encoding}")
    print(f"line_ending: {settings.line_ending!r}")
    return 0


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def build_parser(prog: str | None = None) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=prog or "pyrdpconn",
        description="Read, check and convert Remote Desktop connection files.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output")
    subparsers = parser.add_subparsers(dest="cmd")

    def add_profile(p: argparse.ArgumentParser) -> None:
        p.add_argument("--profile", choices=sorted(PROFILES), default=DEFAULT_PROFILE)

    p_show = subparsers.add_parser("show", help="Print the properties of an .rdp file.")
    p_show.add_argument("file", type=Path)
    add_profile(p_show)
    p_show.add_argument("--as", dest="format", choices=["rdp", "json", "yaml"], default="rdp")
    p_show.add_argument("--lenient", action="store_true", help="Skip invalid lines")
    p_show.set_defaults(func=show_cmd)

    p_check = subparsers.add_parser("check", help="Validate an .rdp file strictly.")
    p_check.add_argument("file", type=Path)
    add_profile(p_check)
    p_check.set_defaults(func=check_cmd)

    p_uri = subparsers.add_parser("uri", help="Convert an .rdp file to an rdp:// URI.")
    p_uri.add_argument("file", type=Path)
    p_uri.set_defaults(func=uri_cmd)

    p_fields = subparsers.add_parser("fields", help="List the known properties.")
    add_profile(p_fields)
    p_fields.set_defaults(func=fields_cmd)

    p_master = subparsers.add_parser(
        "master-key", help="Store the password protector key in the keyring."
    )
    p_master.add_argument("password")
    p_master.set_defaults(func=master_key_cmd)

    p_settings = subparsers.add_parser("settings", help="Show effective settings.")
    p_settings.set_defaults(func=settings_cmd)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    func = getattr(args, "func", None)
    if func is None:
        parser.print_help()
        return 1
    _configure_logging(args.verbose)
    try:
        return int(func(args))
    except RdpError as exc:
        logger.debug("command failed", exc_info=True)
        print(f"error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
