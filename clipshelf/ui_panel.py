from __future__ import annotations

import uuid
from typing import Callable

from PySide6.QtCore import Qt, QRect, QTimer
from PySide6.QtGui import QColor, QImage, QKeySequence, QPainter, QPainterPath, QPixmap, QShortcut
from PySide6.QtWidgets import (
    QFrame,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QListWidget,
    QListWidgetItem,
    QMenu,
    QPushButton,
    QStackedWidget,
    QStyle,
    QStyledItemDelegate,
    QTextBrowser,
    QToolButton,
    QVBoxLayout,
    QWidget,
)

from .models import ClipboardItem, ImageContent, TextContent
from .text_util import (
    filter_items,
    format_bytes,
    format_time,
    format_timestamp,
    image_dimensions,
    item_kind,
    item_title,
)

ROLE_ITEM = int(Qt.UserRole)
ROLE_TITLE = int(Qt.UserRole + 1)
ROLE_SUBTITLE = int(Qt.UserRole + 2)

MAX_PREVIEW_CHARS = 12000


def _qimage_from_bytes(data: bytes) -> QImage | None:
    if not data:
        return None
    img = QImage.fromData(data)
    return None if img.isNull() else img


def describe_item(item: ClipboardItem) -> list[str]:
    """Metadata lines shown under the preview."""
    content = item.content
    if isinstance(content, TextContent):
        lines = ["类型：文本", f"{len(content.text)} 个字符"]
    else:
        lines = ["类型：图片"]
        dims = image_dimensions(content.data)
        if dims is not None:
            lines.append(f"{dims[0]}x{dims[1]}")
        lines.append(format_bytes(len(content.data)))
    lines.append(format_timestamp(item.timestamp))
    return lines


class _HistoryItemDelegate(QStyledItemDelegate):
    _KIND_COLORS: dict[str, QColor] = {
        "text": QColor("#E0F2FE"),
        "link": QColor("#ECFDF3"),
        "color": QColor("#FCE7F3"),
        "image": QColor("#FEF3C7"),
    }
    _KIND_SYMBOLS: dict[str, str] = {
        "text": "T",
        "link": "L",
        "color": "#",
        "image": "I",
    }

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._thumb_cache: dict[uuid.UUID, QPixmap] = {}

    def clear_caches(self) -> None:
        self._thumb_cache.clear()

    def paint(self, painter: QPainter, option, index):  # type: ignore[override]
        it: ClipboardItem | None = index.data(ROLE_ITEM)
        if it is None:
            super().paint(painter, option, index)
            return

        painter.save()
        rect: QRect = option.rect

        is_selected = bool(option.state & QStyle.State_Selected)
        is_hover = bool(option.state & QStyle.State_MouseOver)
        bg = QColor("#FFFFFF")
        if is_selected:
            bg = QColor("#1D4ED8")
        elif is_hover:
            bg = QColor("#F1F5F9")
        fg = QColor("#0F172A") if not is_selected else QColor("#FFFFFF")
        sub_fg = QColor("#64748B") if not is_selected else QColor(255, 255, 255, 220)
        painter.fillRect(rect, bg)

        badge_size = 30
        badge_rect = QRect(
            rect.left() + 10,
            rect.top() + (rect.height() - badge_size) // 2,
            badge_size,
            badge_size,
        )
        thumb = self._image_thumb(it, badge_size) if isinstance(it.content, ImageContent) else None
        if thumb is not None:
            clip = QPainterPath()
            clip.addRoundedRect(badge_rect, 6, 6)
            painter.setClipPath(clip)
            painter.drawPixmap(badge_rect, thumb)
            painter.setClipping(False)
        else:
            self._paint_icon_badge(painter, badge_rect, item_kind(it), is_selected)

        x0 = badge_rect.right() + 10
        w = max(0, rect.right() - 10 - x0)
        y0 = rect.top() + 7
        fm = option.fontMetrics

        font_title = option.font
        font_title.setBold(True)
        painter.setFont(font_title)
        painter.setPen(fg)
        title = str(index.data(ROLE_TITLE) or "")
        painter.drawText(
            QRect(x0, y0, w, fm.height() + 2),
            Qt.AlignLeft | Qt.AlignVCenter,
            fm.elidedText(title, Qt.ElideRight, w),
        )

        painter.setFont(option.font)
        painter.setPen(sub_fg)
        painter.drawText(
            QRect(x0, y0 + fm.height() + 4, w, fm.height() + 2),
            Qt.AlignLeft | Qt.AlignVCenter,
            str(index.data(ROLE_SUBTITLE) or ""),
        )
        painter.restore()

    def sizeHint(self, option, index):  # type: ignore[override]
        base = super().sizeHint(option, index)
        return base.expandedTo(base.__class__(base.width(), 50))

    def _image_thumb(self, it: ClipboardItem, size: int) -> QPixmap | None:
        cached = self._thumb_cache.get(it.id)
        if cached is not None:
            return cached
        if not isinstance(it.content, ImageContent):
            return None
        img = _qimage_from_bytes(it.content.data)
        if img is None:
            return None
        pix = QPixmap.fromImage(img).scaled(size, size, Qt.KeepAspectRatio, Qt.SmoothTransformation)
        self._thumb_cache[it.id] = pix
        return pix

    def _paint_icon_badge(self, painter: QPainter, rect: QRect, kind: str, is_selected: bool) -> None:
        painter.setBrush(QColor(255, 255, 255, 60) if is_selected else self._KIND_COLORS.get(kind, QColor("#E2E8F0")))
        painter.setPen(Qt.NoPen)
        painter.drawEllipse(rect)

        font = painter.font()
        font.setBold(True)
        painter.setFont(font)
        painter.setPen(QColor("#0F172A") if not is_selected else QColor("#FFFFFF"))
        painter.drawText(rect, Qt.AlignCenter, self._KIND_SYMBOLS.get(kind, "?"))


class HistoryPanel(QWidget):
    """Two-pane history browser: searchable list on the left, detail on the right."""

    def __init__(
        self,
        on_copy: Callable[[ClipboardItem], None],
        on_delete: Callable[[ClipboardItem], None],
        on_clear: Callable[[], None],
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self._on_copy = on_copy
        self._on_delete = on_delete
        self._on_clear = on_clear
        self._all_items: list[ClipboardItem] = []
        self._filtered_items: list[ClipboardItem] = []
        self._selected_id: uuid.UUID | None = None
        self._preview_image: QImage | None = None

        self.setWindowTitle("剪切板历史")

        # ── Left pane: search + list ──
        sidebar = QFrame(self)
        sidebar.setObjectName("sidebar")
        sidebar.setFixedWidth(300)

        self._search = QLineEdit(sidebar)
        self._search.setPlaceholderText("搜索…")
        self._search.setClearButtonEnabled(True)

        self._filter_timer = QTimer(self)
        self._filter_timer.setSingleShot(True)
        self._filter_timer.setInterval(150)  # 150ms debounce
        self._filter_timer.timeout.connect(self._apply_filter)
        self._search.textChanged.connect(lambda: self._filter_timer.start())

        self._list = QListWidget(sidebar)
        self._list.setUniformItemSizes(True)
        self._delegate = _HistoryItemDelegate(self._list)
        self._list.setItemDelegate(self._delegate)
        self._list.setVerticalScrollMode(QListWidget.ScrollPerPixel)
        self._list.setHorizontalScrollBarPolicy(Qt.ScrollBarAlwaysOff)
        self._list.setMouseTracking(True)
        self._list.currentItemChanged.connect(lambda *_: self._on_current_changed())
        self._list.itemActivated.connect(lambda _: self._copy_current())
        self._list.setContextMenuPolicy(Qt.CustomContextMenu)
        self._list.customContextMenuRequested.connect(self._show_context_menu)

        self._btn_delete = QToolButton(sidebar)
        self._btn_delete.setObjectName("btnIcon")
        self._btn_delete.setIcon(self.style().standardIcon(QStyle.SP_TrashIcon))
        self._btn_delete.setToolTip("删除所选")
        self._btn_delete.setFixedSize(32, 32)
        self._btn_delete.clicked.connect(self._delete_current)

        self._btn_clear = QPushButton("清空全部", sidebar)
        self._btn_clear.setObjectName("btnClear")
        self._btn_clear.setIcon(self.style().standardIcon(QStyle.SP_DialogResetButton))
        self._btn_clear.clicked.connect(self._clear_all)

        self._status = QLabel("", sidebar)
        self._status.setObjectName("status")

        footer = QHBoxLayout()
        footer.setSpacing(6)
        footer.addWidget(self._btn_delete)
        footer.addWidget(self._status)
        footer.addStretch(1)
        footer.addWidget(self._btn_clear)

        side_body = QVBoxLayout(sidebar)
        side_body.setContentsMargins(8, 8, 8, 8)
        side_body.setSpacing(8)
        side_body.addWidget(self._search)
        side_body.addWidget(self._list, 1)
        side_body.addLayout(footer)

        # ── Right pane: preview + metadata + copy ──
        detail = QFrame(self)
        detail.setObjectName("detail")

        self._preview_stack = QStackedWidget(detail)
        self._preview_empty = QLabel("选择一条记录", detail)
        self._preview_empty.setAlignment(Qt.AlignCenter)
        self._preview_empty.setObjectName("previewEmpty")

        self._preview_text = QTextBrowser(detail)
        self._preview_text.setOpenExternalLinks(False)
        self._preview_text.setReadOnly(True)
        self._preview_text.setFrameStyle(QFrame.NoFrame)
        self._preview_text.setObjectName("previewText")

        self._preview_image_label = QLabel(detail)
        self._preview_image_label.setAlignment(Qt.AlignCenter)
        self._preview_image_label.setObjectName("previewImage")

        self._preview_stack.addWidget(self._preview_empty)
        self._preview_stack.addWidget(self._preview_text)
        self._preview_stack.addWidget(self._preview_image_label)
        self._preview_stack.setCurrentWidget(self._preview_empty)

        self._meta = QLabel("", detail)
        self._meta.setObjectName("previewMeta")
        self._meta.setTextInteractionFlags(Qt.TextSelectableByMouse)

        self._btn_copy = QPushButton("复制", detail)
        self._btn_copy.setObjectName("btnCopy")
        self._btn_copy.setIcon(self.style().standardIcon(QStyle.SP_DialogSaveButton))
        self._btn_copy.setToolTip("复制到剪切板 (" + QKeySequence(QKeySequence.Copy).toString(QKeySequence.NativeText) + ")")
        self._btn_copy.clicked.connect(self._copy_current)

        copy_row = QHBoxLayout()
        copy_row.addStretch(1)
        copy_row.addWidget(self._btn_copy)

        detail_body = QVBoxLayout(detail)
        detail_body.setContentsMargins(14, 12, 14, 10)
        detail_body.setSpacing(8)
        detail_body.addWidget(self._preview_stack, 1)
        detail_body.addWidget(self._meta)
        detail_body.addLayout(copy_row)

        root = QHBoxLayout(self)
        root.setContentsMargins(0, 0, 0, 0)
        root.setSpacing(0)
        root.addWidget(sidebar)
        root.addWidget(detail, 1)

        sc_copy = QShortcut(QKeySequence(QKeySequence.Copy), self)
        sc_copy.activated.connect(self._copy_current)
        for key in (QKeySequence(QKeySequence.Delete), QKeySequence(Qt.Key_Backspace)):
            sc_delete = QShortcut(key, self._list)
            sc_delete.setContext(Qt.WidgetShortcut)
            sc_delete.activated.connect(self._delete_current)

        self.setMinimumSize(800, 500)
        self._apply_styles()
        self._sync_status()
        self._show_detail(None)

    def set_items(self, items: list[ClipboardItem]) -> None:
        self._all_items = items
        self._delegate.clear_caches()
        self._apply_filter()

    def selected_item(self) -> ClipboardItem | None:
        row = self._list.currentRow()
        if row < 0 or row >= len(self._filtered_items):
            return None
        return self._filtered_items[row]

    def toggle_visible(self) -> None:
        if self.isVisible() and self.isActiveWindow():
            self.hide()
            return
        self.show_and_raise()

    def show_and_raise(self) -> None:
        self.show()
        self.raise_()
        self.activateWindow()
        self._search.setFocus()

    def resizeEvent(self, event):  # type: ignore[override]
        super().resizeEvent(event)
        self._render_preview_image()

    def _apply_filter(self) -> None:
        self._filtered_items = filter_items(self._all_items, self._search.text() or "")

        self._list.blockSignals(True)
        self._list.clear()
        current_row = -1
        for row, it in enumerate(self._filtered_items):
            item = QListWidgetItem()
            item.setData(ROLE_ITEM, it)
            item.setData(ROLE_TITLE, item_title(it))
            item.setData(ROLE_SUBTITLE, format_time(it.timestamp))
            if isinstance(it.content, TextContent):
                item.setToolTip(it.preview(500))
            self._list.addItem(item)
            if it.id == self._selected_id:
                current_row = row
        if current_row >= 0:
            self._list.setCurrentRow(current_row)
        self._list.blockSignals(False)

        if current_row < 0:
            self._selected_id = None
        self._sync_status()
        self._show_detail(self.selected_item())

    def _on_current_changed(self) -> None:
        it = self.selected_item()
        self._selected_id = it.id if it is not None else None
        self._show_detail(it)

    def _show_detail(self, it: ClipboardItem | None) -> None:
        self._btn_copy.setEnabled(it is not None)
        self._btn_delete.setEnabled(it is not None)
        if it is None:
            self._meta.setText("")
            self._preview_image = None
            self._preview_image_label.clear()
            self._preview_stack.setCurrentWidget(self._preview_empty)
            return

        self._meta.setText("\n".join(describe_item(it)))
        content = it.content
        if isinstance(content, ImageContent):
            self._preview_image = _qimage_from_bytes(content.data)
            if self._preview_image is None:
                self._preview_text.setPlainText("图片加载失败")
                self._preview_stack.setCurrentWidget(self._preview_text)
                return
            self._preview_stack.setCurrentWidget(self._preview_image_label)
            self._render_preview_image()
            return

        self._preview_image = None
        self._preview_image_label.clear()
        text = content.text
        if len(text) > MAX_PREVIEW_CHARS:
            text = text[:MAX_PREVIEW_CHARS] + "\n…"
        self._preview_text.setPlainText(text)
        self._preview_stack.setCurrentWidget(self._preview_text)

    def _render_preview_image(self) -> None:
        if self._preview_image is None:
            return
        size = self._preview_stack.size()
        if size.width() <= 0 or size.height() <= 0:
            return
        pix = QPixmap.fromImage(self._preview_image)
        if pix.width() > size.width() or pix.height() > size.height():
            pix = pix.scaled(size, Qt.KeepAspectRatio, Qt.SmoothTransformation)
        self._preview_image_label.setPixmap(pix)

    def _copy_current(self) -> None:
        it = self.selected_item()
        if it is not None:
            self._on_copy(it)

    def _delete_current(self) -> None:
        it = self.selected_item()
        if it is not None:
            self._on_delete(it)

    def _clear_all(self) -> None:
        self._selected_id = None
        self._on_clear()

    def _show_context_menu(self, pos) -> None:
        list_item = self._list.itemAt(pos)
        if list_item is None:
            return
        self._list.setCurrentItem(list_item)
        it: ClipboardItem | None = list_item.data(ROLE_ITEM)
        if it is None:
            return
        menu = QMenu(self)
        act_copy = menu.addAction("复制")
        act_delete = menu.addAction("删除")
        chosen = menu.exec(self._list.viewport().mapToGlobal(pos))
        if chosen == act_copy:
            self._on_copy(it)
        elif chosen == act_delete:
            self._on_delete(it)

    def _sync_status(self) -> None:
        total = len(self._all_items)
        shown = len(self._filtered_items)
        self._status.setText(f"{total} 条" if shown == total else f"{shown} / {total} 条")
        self._btn_clear.setEnabled(total > 0)

    def _apply_styles(self) -> None:
        self.setStyleSheet(
            """
            #sidebar {
              background: #F1F5F9;
              border-right: 1px solid rgba(148, 163, 184, 0.45);
            }
            #detail {
              background: #FFFFFF;
            }
            QLabel#status {
              color: #64748B;
            }
            QLineEdit {
              padding: 6px 10px;
              border-radius: 8px;
              border: 1px solid rgba(148, 163, 184, 0.6);
              background: #FFFFFF;
            }
            QLineEdit:focus {
              border: 1px solid #3B82F6;
            }
            QListWidget {
              border: 1px solid rgba(148, 163, 184, 0.5);
              border-radius: 10px;
              background: #FFFFFF;
              outline: 0;
            }
            QListWidget::item {
              border-bottom: 1px solid rgba(148, 163, 184, 0.25);
            }
            QToolButton#btnIcon {
              border-radius: 8px;
              border: 1px solid transparent;
              background: transparent;
            }
            QToolButton#btnIcon:hover {
              background: rgba(148, 163, 184, 0.22);
              border: 1px solid rgba(148, 163, 184, 0.35);
            }
            QPushButton#btnCopy, QPushButton#btnClear {
              padding: 5px 12px;
              border-radius: 8px;
            }
            QLabel#previewMeta {
              color: #64748B;
              font-size: 11px;
            }
            QLabel#previewEmpty {
              color: #94A3B8;
            }
            QTextBrowser#previewText {
              background: transparent;
              color: #0F172A;
              border: 0;
            }
            QLabel#previewImage {
              background: #F8FAFC;
              border-radius: 10px;
            }
            """
        )
