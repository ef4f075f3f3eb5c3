from __future__ import annotations

import logging

from AppKit import NSImage, NSPasteboard, NSPasteboardTypeString, NSPasteboardTypeTIFF
from Foundation import NSData

log = logging.getLogger(__name__)


class MacPasteboard:
    """NSPasteboard.generalPasteboard() seen through the Pasteboard protocol."""

    def __init__(self, pasteboard=None) -> None:
        self._pb = pasteboard if pasteboard is not None else NSPasteboard.generalPasteboard()

    def change_count(self) -> int:
        return int(self._pb.changeCount())

    def types(self) -> tuple[str, ...]:
        return tuple(str(t) for t in (self._pb.types() or ()))

    def read_text(self) -> str | None:
        value = self._pb.stringForType_(NSPasteboardTypeString)
        return str(value) if value is not None else None

    def read_image(self) -> bytes | None:
        data = self._pb.dataForType_(NSPasteboardTypeTIFF)
        if data is None or data.length() == 0:
            return None
        return bytes(data)

    def decode_image(self, data: bytes) -> NSImage | None:
        ns_data = NSData.dataWithBytes_length_(data, len(data))
        image = NSImage.alloc().initWithData_(ns_data)
        if image is None:
            log.debug("NSImage 无法解码图片（%d bytes）", len(data))
        return image

    def clear(self) -> None:
        self._pb.clearContents()

    def write_text(self, text: str) -> None:
        self._pb.setString_forType_(text, NSPasteboardTypeString)

    def write_image(self, image: NSImage) -> None:
        if not self._pb.writeObjects_([image]):
            log.warning("NSPasteboard 写入图片失败")
