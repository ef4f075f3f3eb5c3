"""Pasteboard capability shared by the poller and the history store."""
from __future__ import annotations

import logging
import sys
from typing import Any, Final, Protocol

log = logging.getLogger(__name__)


# macOS uniform type identifiers for NSPasteboardTypeString / NSPasteboardTypeTIFF.
TEXT_TYPE: Final[str] = "public.utf8-plain-text"
IMAGE_TYPE: Final[str] = "public.tiff"

_IMAGE_SIGNATURES: Final[tuple[bytes, ...]] = (
    b"\x89PNG\r\n\x1a\n",
    b"II*\x00",
    b"MM\x00*",
)


class Pasteboard(Protocol):
    def change_count(self) -> int: ...

    def types(self) -> tuple[str, ...]: ...

    def read_text(self) -> str | None: ...

    def read_image(self) -> bytes | None: ...

    def decode_image(self, data: bytes) -> Any | None:
        """Return a platform image object for *data*, or None if undecodable."""
        ...

    def clear(self) -> None: ...

    def write_text(self, text: str) -> None: ...

    def write_image(self, image: Any) -> None: ...


class MemoryPasteboard:
    """In-process pasteboard used by tests and headless runs."""

    def __init__(self) -> None:
        self._change_count = 0
        self._contents: dict[str, str | bytes | None] = {}

    def put(self, type_tag: str, value: str | bytes | None) -> None:
        """Simulate another application copying *value* under *type_tag*.

        A ``None`` value advertises the type without a readable payload.
        """
        self.clear()
        self._contents[type_tag] = value

    def change_count(self) -> int:
        return self._change_count

    def types(self) -> tuple[str, ...]:
        return tuple(self._contents)

    def read_text(self) -> str | None:
        value = self._contents.get(TEXT_TYPE)
        return value if isinstance(value, str) else None

    def read_image(self) -> bytes | None:
        value = self._contents.get(IMAGE_TYPE)
        return value if isinstance(value, bytes) else None

    def decode_image(self, data: bytes) -> bytes | None:
        if data.startswith(_IMAGE_SIGNATURES):
            return bytes(data)
        return None

    def clear(self) -> None:
        self._contents.clear()
        self._change_count += 1

    def write_text(self, text: str) -> None:
        self._contents[TEXT_TYPE] = text

    def write_image(self, image: bytes) -> None:
        self._contents[IMAGE_TYPE] = image


def create_pasteboard() -> Pasteboard:
    if sys.platform == "darwin":
        from .mac_pasteboard import MacPasteboard

        log.debug("使用 NSPasteboard 剪切板适配器")
        return MacPasteboard()

    from .qt_pasteboard import QtPasteboard

    log.debug("使用 QClipboard 剪切板适配器")
    return QtPasteboard()
