from __future__ import annotations

from pyrdpconn.schema import FieldSpec, PropertySet, property_set


@property_set
class SampleProperties(PropertySet):
    """Small property set exercising every field option."""

    declared_fields = (
        FieldSpec("username", "username", "text"),
        FieldSpec("server_port", "server port", "integer", minimum=0, maximum=65535),
        FieldSpec("desktop_width", "desktopwidth", "integer", minimum=200, maximum=8192),
        FieldSpec("full_address", "full address", "text", primary=True),
        FieldSpec("audio_mode", "audiomode", "integer", allowed={0, 1, 2}),
        FieldSpec("compression", "compression", "integer", allowed={0, 1}, default=1),
        FieldSpec("password", "password 51", "bytes", protected=True),
        FieldSpec("notes", "notes", "text", ignored=True),
    )


class UnmarkedProperties(PropertySet):
    declared_fields = (FieldSpec("username", "username", "text"),)


@property_set
class KeylessProperties(PropertySet):
    declared_fields = (
        FieldSpec("username", "username", "text"),
        FieldSpec("broken", None, "text"),
    )


class ReversibleProtector:
    """Protector stand-in that reverses the bytes."""

    def __init__(self) -> None:
        self.calls: list[str] = []

    def protect(self, data: bytes) -> bytes:
        self.calls.append("protect")
        return bytes(reversed(data))

    def unprotect(self, data: bytes) -> bytes:
        self.calls.append("unprotect")
        return bytes(reversed(data))
