from __future__ import annotations

import codecs
from pathlib import Path

import pytest

from pyrdpconn.catalog import RemoteDesktopClientProperties
from pyrdpconn.config import Settings
from pyrdpconn.errors import RdpFileError, UnknownKeyError, ValueOutOfRangeError
from pyrdpconn.rdpfile import detect_encoding, dump, load, read_lines


def test_dump_uses_utf16_and_crlf_by_default(tmp_path: Path) -> None:
    props = RemoteDesktopClientProperties(full_address="host", server_port=3389)
    path = dump(props, tmp_path / "conn.rdp")
    data = path.read_bytes()
    assert data.startswith(codecs.BOM_UTF16_LE) or data.startswith(codecs.BOM_UTF16_BE)
    assert data.decode("utf-16") == "full address:s:host\r\nserver port:i:3389\r\n"
    assert not (tmp_path / "conn.rdp.tmp").exists()
    assert load(path, RemoteDesktopClientProperties) == props


def test_dump_with_custom_settings(tmp_path: Path) -> None:
    settings = Settings(encoding="utf-8", line_ending="\n")
    props = RemoteDesktopClientProperties(username="u")
    path = dump(props, tmp_path / "sub" / "conn.rdp", settings=settings)
    assert path.read_bytes() == b"username:s:u\n"


def test_read_lines_mixed_endings(tmp_path: Path) -> None:
    path = tmp_path / "conn.rdp"
    path.write_bytes(b"username:s:a\r\ndomain:s:b\nfull address:s:c\r")
    assert read_lines(path) == ["username:s:a", "domain:s:b", "full address:s:c"]


def test_read_lines_utf8_bom(tmp_path: Path) -> None:
    path = tmp_path / "conn.rdp"
    path.write_bytes(codecs.BOM_UTF8 + "username:s:ä\n".encode("utf-8"))
    assert read_lines(path) == ["username:s:ä"]


def test_detect_encoding() -> None:
    assert detect_encoding(codecs.BOM_UTF16_LE + b"x\x00") == "utf-16"
    assert detect_encoding(b"plain", "cp1252") == "cp1252"


def test_missing_file(tmp_path: Path) -> None:
    with pytest.raises(RdpFileError):
        read_lines(tmp_path / "missing.rdp")


def test_undecodable_file(tmp_path: Path) -> None:
    path = tmp_path / "conn.rdp"
    path.write_bytes(b"\xff\xfe\x00")
    with pytest.raises(RdpFileError):
        read_lines(path)


def test_load_strict_from_settings(tmp_path: Path) -> None:
    path = tmp_path / "conn.rdp"
    path.write_text("username:s:u\nbogus:i:1\n", encoding="utf-8")
    with pytest.raises(UnknownKeyError):
        load(path, RemoteDesktopClientProperties)
    props = load(path, RemoteDesktopClientProperties, settings=Settings(strict=False))
    assert props.username == "u"


def test_failed_strict_dump_leaves_no_file(tmp_path: Path) -> None:
    props = RemoteDesktopClientProperties(username="u", server_port=70000)
    with pytest.raises(ValueOutOfRangeError):
        dump(props, tmp_path / "conn.rdp")
    assert list(tmp_path.iterdir()) == []


def test_round_trip_with_configured_legacy_encoding(tmp_path: Path) -> None:
    settings = Settings(encoding="cp1252")
    props = RemoteDesktopClientProperties(username="café", full_address="h")
    path = dump(props, tmp_path / "conn.rdp", settings=settings)
    assert "café".encode("cp1252") in path.read_bytes()
    assert load(path, RemoteDesktopClientProperties, settings=settings) == props


def test_bomless_file_not_read_as_utf16(tmp_path: Path) -> None:
    path = tmp_path / "conn.rdp"
    path.write_bytes(b"username:s:u\r\n")
    assert read_lines(path, "utf-16") == ["username:s:u"]
