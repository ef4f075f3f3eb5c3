from __future__ import annotations

import logging
from typing import Callable, Final

from PySide6.QtCore import QObject, QTimer

from .models import ClipboardContent, ImageContent, TextContent
from .pasteboard import IMAGE_TYPE, TEXT_TYPE, Pasteboard

log = logging.getLogger(__name__)


POLL_INTERVAL_MS: Final[int] = 1000

ContentCallback = Callable[[ClipboardContent], None]


class ClipboardPoller(QObject):
    """Watches the pasteboard change counter from a QTimer on the GUI thread."""

    def __init__(self, pasteboard: Pasteboard, on_content: ContentCallback, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._pasteboard = pasteboard
        self._on_content = on_content
        self._last_change_count = pasteboard.change_count()
        self._timer = QTimer(self)
        self._timer.setInterval(POLL_INTERVAL_MS)
        self._timer.timeout.connect(self._on_timeout)

    @property
    def is_running(self) -> bool:
        return self._timer.isActive()

    @property
    def last_change_count(self) -> int:
        return self._last_change_count

    def start(self) -> None:
        if self._timer.isActive():
            return
        self._timer.start()
        log.info("开始监听剪切板（changeCount=%d）", self._last_change_count)

    def stop(self) -> None:
        if not self._timer.isActive():
            return
        self._timer.stop()
        log.info("停止监听剪切板")

    def check(self) -> bool:
        count = self._pasteboard.change_count()
        if count == self._last_change_count:
            return False
        self._last_change_count = count

        content = self._extract()
        if content is None:
            return False
        self._on_content(content)
        return True

    def _on_timeout(self) -> None:
        try:
            self.check()
        except Exception:
            log.debug("检查剪切板异常", exc_info=True)

    def _extract(self) -> ClipboardContent | None:
        try:
            types = self._pasteboard.types()
        except Exception:
            log.debug("读取剪切板类型异常", exc_info=True)
            return None

        if TEXT_TYPE in types:
            text = self._read(self._pasteboard.read_text)
            if text is not None:
                return TextContent(text)
        if IMAGE_TYPE in types:
            data = self._read(self._pasteboard.read_image)
            if data is not None:
                return ImageContent(data)
        return None

    @staticmethod
    def _read(reader: Callable[[], object]):
        try:
            return reader()
        except Exception:
            log.debug("读取剪切板内容异常", exc_info=True)
            return None
