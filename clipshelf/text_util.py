"""Display helpers for history rows and the detail pane."""
from __future__ import annotations

import re
from datetime import datetime
from typing import Iterable, Literal

from PySide6.QtCore import QBuffer, QByteArray, QIODevice
from PySide6.QtGui import QImageReader

from .models import ClipboardItem, ImageContent, TextContent

ItemKind = Literal["text", "link", "color", "image"]

_RE_WS = re.compile(r"\s+")
_BYTE_UNITS = ("KB", "MB", "GB", "TB")


def item_kind(item: ClipboardItem) -> ItemKind:
    content = item.content
    if isinstance(content, ImageContent):
        return "image"
    if content.text.startswith("http"):
        return "link"
    if content.text.startswith("#"):
        return "color"
    return "text"


def image_dimensions(data: bytes) -> tuple[int, int] | None:
    """Read the pixel size from the image header without decoding pixels."""
    if not data:
        return None
    buf = QBuffer()
    buf.setData(QByteArray(data))
    if not buf.open(QIODevice.ReadOnly):
        return None
    try:
        size = QImageReader(buf).size()
    finally:
        buf.close()
    if not size.isValid() or size.isEmpty():
        return None
    return size.width(), size.height()


def item_title(item: ClipboardItem, max_len: int = 150) -> str:
    content = item.content
    if isinstance(content, TextContent):
        s = _RE_WS.sub(" ", content.text).strip()
        return s if len(s) <= max_len else s[: max_len - 1] + "…"
    dims = image_dimensions(content.data)
    if dims is None:
        return "图片"
    return f"图片 ({dims[0]}x{dims[1]})"


def format_bytes(size: int) -> str:
    """Decimal file-size string: 999 bytes, 12 KB, 1.5 MB."""
    if size == 1:
        return "1 byte"
    if size < 1000:
        return f"{size} bytes"
    value = float(size)
    for unit in _BYTE_UNITS:
        value /= 1000.0
        shown = round(value) if unit == "KB" else round(value, 1)
        if shown < 1000 or unit == _BYTE_UNITS[-1]:
            if unit == "KB":
                return f"{shown} KB"
            return f"{shown:.1f} {unit}"
    return f"{size} bytes"


def format_timestamp(ts: datetime) -> str:
    return ts.astimezone().strftime("%Y-%m-%d %H:%M")


def format_time(ts: datetime) -> str:
    return ts.astimezone().strftime("%H:%M")


def matches_query(item: ClipboardItem, query: str) -> bool:
    q = query.strip().casefold()
    if not q:
        return True
    content = item.content
    if isinstance(content, TextContent):
        return q in content.text.casefold()
    return False


def filter_items(items: Iterable[ClipboardItem], query: str) -> list[ClipboardItem]:
    return [it for it in items if matches_query(it, query)]
