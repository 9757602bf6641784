from __future__ import annotations

import pytest

from pyrdpconn import protection
from pyrdpconn.errors import ProtectionError
from pyrdpconn.protection import AesGcmProtector, decode_password, encode_password


def test_round_trip_with_master_key() -> None:
    protector = AesGcmProtector("s3cret")
    token = protector.protect(b"hunter2")
    assert token != b"hunter2"
    assert len(token) > 28
    assert protector.unprotect(token) == b"hunter2"


def test_wrong_key_fails() -> None:
    token = AesGcmProtector("right").protect(b"data")
    with pytest.raises(ProtectionError):
        AesGcmProtector("wrong").unprotect(token)


def test_truncated_data() -> None:
    with pytest.raises(ProtectionError, match="truncated"):
        AesGcmProtector("k").unprotect(b"short")


def test_master_password_from_env(monkeypatch) -> None:
    monkeypatch.setenv("PYRDPCONN_MASTER_PWD", "from-env")
    token = AesGcmProtector().protect(b"x")
    assert AesGcmProtector("from-env").unprotect(token) == b"x"


def test_master_password_from_keyring(monkeypatch) -> None:
    calls = []

    def fake_get(service, user):
        calls.append((service, user))
        return "from-keyring"

    monkeypatch.setattr(protection.keyring, "get_password", fake_get)
    protector = AesGcmProtector()
    assert protector.unlocked
    assert calls == [("pyrdpconn", "master")]


def test_locked_protector(monkeypatch) -> None:
    monkeypatch.setattr(protection.keyring, "get_password", lambda s, u: None)
    protector = AesGcmProtector()
    assert not protector.unlocked
    with pytest.raises(ProtectionError, match="No master password"):
        protector.protect(b"x")


def test_store_master_password(monkeypatch) -> None:
    stored = {}
    monkeypatch.setattr(
        protection.keyring,
        "set_password",
        lambda s, u, p: stored.__setitem__((s, u), p),
    )
    protection.store_master_password("pw")
    assert stored == {("pyrdpconn", "master"): "pw"}


def test_password_text_helpers() -> None:
    data = encode_password("pä")
    assert data == b"p\x00\xe4\x00"
    assert decode_password(data) == "pä"
    with pytest.raises(ProtectionError):
        decode_password(b"\x00")
