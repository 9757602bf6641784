from __future__ import annotations

from dataclasses import dataclass
from enum import IntFlag


class SetWindowPositionFlags(IntFlag):
    NO_SIZE = 0x0001
    NO_MOVE = 0x0002
    NO_Z_ORDER = 0x0004
    NO_REDRAW = 0x0008
    NO_ACTIVATE = 0x0010
    FRAME_CHANGED = 0x0020
    DRAW_FRAME = 0x0020
    SHOW_WINDOW = 0x0040
    HIDE_WINDOW = 0x0080
    NO_COPY_BITS = 0x0100
    NO_OWNER_Z_ORDER = 0x0200
    NO_REPOSITION = 0x0200
    NO_SEND_CHANGING = 0x0400


def _int_at(parts: list[str], index: int) -> int:
    try:
        return int(parts[index])
    except (IndexError, ValueError):
        return 0


@dataclass
class WindowPosition:
    """Six-integer window placement stored in the ``winposstr`` property.

    The text form is ``handle,show,left,top,right,bottom``.
    """

    handle: int = 0
    show: SetWindowPositionFlags = SetWindowPositionFlags(0)
    left: int = 0
    top: int = 0
    right: int = 0
    bottom: int = 0

    @classmethod
    def parse(cls, text: str | None) -> WindowPosition:
        """Read *text* leniently; missing or bad positions become ``0``."""

        if text is None or not text.strip():
            return cls()
        parts = [p.strip() for p in text.split(",") if p.strip()]
        return cls(
            handle=_int_at(parts, 0),
            show=SetWindowPositionFlags(_int_at(parts, 1)),
            left=_int_at(parts, 2),
            top=_int_at(parts, 3),
            right=_int_at(parts, 4),
            bottom=_int_at(parts, 5),
        )

    @property
    def width(self) -> int:
        return self.right - self.left

    @property
    def height(self) -> int:
        return self.bottom - self.top

    def __str__(self) -> str:
        return (
            f"{self.handle},{int(self.show)},{self.left},"
            f"{self.top},{self.right},{self.bottom}"
        )


__all__ = ["SetWindowPositionFlags", "WindowPosition"]
