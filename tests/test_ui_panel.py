from __future__ import annotations

from datetime import datetime, timezone

from PySide6.QtCore import QBuffer, QIODevice
from PySide6.QtGui import QImage

from clipshelf.models import ClipboardItem, ImageContent, TextContent
from clipshelf.text_util import format_bytes, format_timestamp
from clipshelf.ui_panel import _HistoryItemDelegate, describe_item

TS = datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc)


def test_describe_text_item():
    item = ClipboardItem(content=TextContent("hello world"), timestamp=TS)
    assert describe_item(item) == ["类型：文本", "11 个字符", format_timestamp(TS)]


def test_describe_image_item(qapp):
    img = QImage(4, 3, QImage.Format_ARGB32)
    img.fill(0)
    buf = QBuffer()
    buf.open(QIODevice.WriteOnly)
    img.save(buf, "PNG")
    data = bytes(buf.data().data())

    item = ClipboardItem(content=ImageContent(data), timestamp=TS)
    assert describe_item(item) == ["类型：图片", "4x3", format_bytes(len(data)), format_timestamp(TS)]


def test_describe_undecodable_image_omits_dimensions(qapp):
    item = ClipboardItem(content=ImageContent(b"\x00" * 2048), timestamp=TS)
    assert describe_item(item) == ["类型：图片", "2 KB", format_timestamp(TS)]


def test_thumbnail_only_for_decodable_images(qapp):
    delegate = _HistoryItemDelegate()
    assert delegate._image_thumb(ClipboardItem(content=TextContent("x")), 30) is None
    assert delegate._image_thumb(ClipboardItem(content=ImageContent(b"junk")), 30) is None
