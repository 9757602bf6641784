from __future__ import annotations

import json
from pathlib import Path

import pytest

from pyrdpconn.cli import main


@pytest.fixture
def rdp_file(tmp_path: Path) -> Path:
    path = tmp_path / "conn.rdp"
    path.write_text(
        "full address:s:host.example.com\r\nserver port:i:3389\r\nusername:s:bob\r\n",
        encoding="utf-16",
    )
    return path


def test_show_rdp(rdp_file: Path, capsys) -> None:
    assert main(["show", str(rdp_file)]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out == [
        "full address:s:host.example.com",
        "username:s:bob",
        "server port:i:3389",
    ]


def test_show_json(rdp_file: Path, capsys) -> None:
    assert main(["show", str(rdp_file), "--as", "json"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["server port"] == 3389


def test_show_lenient_skips_bad_lines(tmp_path: Path, capsys) -> None:
    path = tmp_path / "bad.rdp"
    path.write_text("bogus:i:1\nusername:s:u\n", encoding="utf-8")
    assert main(["show", str(path)]) == 1
    assert "Unknown property name 'bogus'" in capsys.readouterr().err
    assert main(["show", str(path), "--lenient"]) == 0
    assert capsys.readouterr().out.strip() == "username:s:u"


def test_check(rdp_file: Path, tmp_path: Path, capsys) -> None:
    assert main(["check", str(rdp_file)]) == 0
    assert capsys.readouterr().out.strip() == "ok"

    bad = tmp_path / "bad.rdp"
    bad.write_text("desktopwidth:i:50\n", encoding="utf-8")
    assert main(["check", str(bad)]) == 1
    err = capsys.readouterr().err
    assert "desktopwidth" in err
    assert "line index 0" in err


def test_uri(rdp_file: Path, capsys) -> None:
    assert main(["uri", str(rdp_file)]) == 0
    assert capsys.readouterr().out.strip() == (
        "rdp://full%20address=s%3Ahost.example.com&username=s%3Abob"
    )


def test_fields(capsys) -> None:
    assert main(["fields", "--profile", "uri"]) == 0
    out = capsys.readouterr().out.splitlines()
    assert "full address\ttext\tAddress" in out
    assert len(out) == 29


def test_settings(capsys) -> None:
    assert main(["settings"]) == 0
    out = capsys.readouterr().out
    assert "strict: True" in out
    assert "encoding: utf-16" in out


def test_missing_file(tmp_path: Path, capsys) -> None:
    assert main(["check", str(tmp_path / "nope.rdp")]) == 1
    assert capsys.readouterr().err.startswith("error: cannot read")


def test_no_command(capsys) -> None:
    assert main([]) == 1
    assert "usage" in capsys.readouterr().out


def test_check_uses_configured_encoding(isolated_settings: Path, tmp_path: Path, capsys) -> None:
    isolated_settings.parent.mkdir(parents=True)
    isolated_settings.write_text("[pyrdpconn]\nencoding = cp1252\n", encoding="utf-8")
    path = tmp_path / "legacy.rdp"
    path.write_bytes("username:s:café\r\n".encode("cp1252"))
    assert main(["check", str(path)]) == 0
    assert main(["uri", str(path)]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out == ["ok", "rdp://username=s%3Acaf%C3%A9"]
