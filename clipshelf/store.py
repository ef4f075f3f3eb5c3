from __future__ import annotations

import logging
import uuid
from typing import Iterator

from PySide6.QtCore import QObject, Signal

from .models import ClipboardContent, ClipboardItem, ImageContent, TextContent
from .pasteboard import Pasteboard
from .persistence import SettingsHistoryStore, decode_history, encode_history

log = logging.getLogger(__name__)


class HistoryStore(QObject):
    """Newest-first clipboard history, flushed to settings after every change."""

    history_changed = Signal(list)

    def __init__(
        self,
        pasteboard: Pasteboard,
        storage: SettingsHistoryStore | None = None,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._pasteboard = pasteboard
        self._storage = storage if storage is not None else SettingsHistoryStore()
        self._items: list[ClipboardItem] = []

    @property
    def history(self) -> list[ClipboardItem]:
        return self._items[:]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[ClipboardItem]:
        return iter(self.history)

    def get(self, item_id: uuid.UUID) -> ClipboardItem | None:
        for it in self._items:
            if it.id == item_id:
                return it
        return None

    def record(self, content: ClipboardContent) -> None:
        if self._items and self._items[0].content == content:
            return
        item = ClipboardItem(content=content)
        self._items.insert(0, item)
        log.debug("新增 %s 记录 %s", item.content_type, item.id)
        self._changed()

    def delete(self, item_id: uuid.UUID) -> None:
        self._items = [it for it in self._items if it.id != item_id]
        self._changed()

    def clear(self) -> None:
        self._items.clear()
        self._changed()

    def copy_to_clipboard(self, item: ClipboardItem) -> None:
        self._pasteboard.clear()
        content = item.content
        if isinstance(content, TextContent):
            self._pasteboard.write_text(content.text)
        elif isinstance(content, ImageContent):
            image = self._pasteboard.decode_image(content.data)
            if image is None:
                log.debug("图片无法解码，跳过复制 %s", item.id)
                return
            self._pasteboard.write_image(image)

    def load(self) -> None:
        items: list[ClipboardItem] = []
        try:
            blob = self._storage.read()
            if blob is None:
                log.debug("未找到持久化历史（%s）", self._storage.key)
            else:
                items = decode_history(blob)
        except Exception:
            log.exception("加载历史失败，已重置为空")
        self._items = items
        self.history_changed.emit(self.history)

    def persist(self) -> None:
        try:
            self._storage.write(encode_history(self._items))
        except Exception:
            log.exception("持久化写入失败")

    def _changed(self) -> None:
        self.persist()
        self.history_changed.emit(self.history)
