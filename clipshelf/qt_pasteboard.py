from __future__ import annotations

import logging

from PySide6.QtCore import QBuffer, QByteArray, QIODevice, QObject
from PySide6.QtGui import QClipboard, QGuiApplication, QImage

from .pasteboard import IMAGE_TYPE, TEXT_TYPE

log = logging.getLogger(__name__)


class QtPasteboard(QObject):
    """QClipboard adapter for hosts without NSPasteboard.

    QClipboard has no change counter, so one is kept here and bumped on every
    ``dataChanged`` signal. Images are captured as PNG.
    """

    def __init__(self, clipboard: QClipboard | None = None, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._clipboard = clipboard if clipboard is not None else QGuiApplication.clipboard()
        self._change_count = 0
        self._clipboard.dataChanged.connect(self._on_data_changed)

    def _on_data_changed(self) -> None:
        self._change_count += 1

    def change_count(self) -> int:
        return self._change_count

    def types(self) -> tuple[str, ...]:
        mime = self._clipboard.mimeData()
        if mime is None:
            return ()
        tags: list[str] = []
        if mime.hasText():
            tags.append(TEXT_TYPE)
        if mime.hasImage():
            tags.append(IMAGE_TYPE)
        return tuple(tags)

    def read_text(self) -> str | None:
        mime = self._clipboard.mimeData()
        if mime is None or not mime.hasText():
            return None
        return mime.text()

    def read_image(self) -> bytes | None:
        image = self._clipboard.image()
        if image.isNull():
            return None
        data = QByteArray()
        buf = QBuffer(data)
        buf.open(QIODevice.WriteOnly)
        ok = image.save(buf, "PNG")
        buf.close()
        if not ok:
            log.debug("QImage 编码剪切板图片失败")
            return None
        return bytes(data.data())

    def decode_image(self, data: bytes) -> QImage | None:
        image = QImage.fromData(data)
        return None if image.isNull() else image

    def clear(self) -> None:
        self._clipboard.clear()

    def write_text(self, text: str) -> None:
        self._clipboard.setText(text)

    def write_image(self, image: QImage) -> None:
        self._clipboard.setImage(image)
