from __future__ import annotations

import logging
import os
import sys

log = logging.getLogger(__name__)

from PySide6.QtGui import QAction, QIcon
from PySide6.QtWidgets import QApplication, QMenu, QStyle, QSystemTrayIcon

from .models import ClipboardItem
from .pasteboard import Pasteboard, create_pasteboard
from .persistence import SettingsHistoryStore
from .poller import ClipboardPoller
from .settings import AppSettings, load_settings
from .store import HistoryStore
from .ui_panel import HistoryPanel


class ClipShelfApp:
    def __init__(
        self,
        settings: AppSettings | None = None,
        pasteboard: Pasteboard | None = None,
        storage: SettingsHistoryStore | None = None,
    ) -> None:
        self.qt_app = QApplication.instance() or QApplication(sys.argv)
        self.qt_app.setApplicationName("ClipShelf")
        self.qt_app.setOrganizationName("ClipShelf")

        self.settings = settings or load_settings()
        self.qt_app.setQuitOnLastWindowClosed(not self.settings.tray_enabled)

        self.pasteboard = pasteboard if pasteboard is not None else create_pasteboard()
        self.history = HistoryStore(self.pasteboard, storage)
        self.history.load()

        self.panel = HistoryPanel(
            on_copy=self._copy_item,
            on_delete=self._delete_item,
            on_clear=self._clear_history,
        )
        self.panel.setWindowIcon(self._default_icon())
        self.history.history_changed.connect(self.panel.set_items)
        self.panel.set_items(self.history.history)

        self.tray: QSystemTrayIcon | None = None
        if self.settings.tray_enabled and QSystemTrayIcon.isSystemTrayAvailable():
            self.tray = QSystemTrayIcon(self._default_icon(), self.qt_app)
            self.tray.setToolTip("ClipShelf")
            self.tray.activated.connect(self._on_tray_activated)
            self.tray.setContextMenu(self._build_tray_menu())
            self.tray.show()

        self.poller = ClipboardPoller(self.pasteboard, on_content=self.history.record)
        self.poller.start()

        if self.settings.show_panel_on_start or self.tray is None:
            self.panel.show_and_raise()

    def _default_icon(self) -> QIcon:
        icon_candidates = [
            os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "assets", "icon.png"),
        ]
        for p in icon_candidates:
            if os.path.isfile(p):
                return QIcon(p)
        return self.qt_app.style().standardIcon(QStyle.SP_FileDialogDetailedView)

    def _build_tray_menu(self) -> QMenu:
        menu = QMenu()

        act_open = QAction("打开历史", menu)
        act_open.triggered.connect(self.panel.show_and_raise)
        menu.addAction(act_open)

        act_clear = QAction("清空历史", menu)
        act_clear.triggered.connect(self._clear_history)
        menu.addAction(act_clear)

        menu.addSeparator()

        act_exit = QAction("退出", menu)
        act_exit.triggered.connect(self.quit)
        menu.addAction(act_exit)

        return menu

    def _on_tray_activated(self, reason: QSystemTrayIcon.ActivationReason) -> None:
        if reason == QSystemTrayIcon.Trigger:
            self.panel.toggle_visible()

    def _copy_item(self, item: ClipboardItem) -> None:
        try:
            self.history.copy_to_clipboard(item)
        except Exception:
            log.exception("写入剪切板失败")

    def _delete_item(self, item: ClipboardItem) -> None:
        self.history.delete(item.id)

    def _clear_history(self) -> None:
        self.history.clear()

    def run(self) -> int:
        try:
            return self.qt_app.exec()
        finally:
            self.quit()

    def quit(self) -> None:
        try:
            self.poller.stop()
        except Exception:
            log.debug("停止监听器异常", exc_info=True)
        try:
            if self.tray is not None:
                self.tray.hide()
        except Exception:
            log.debug("隐藏托盘异常", exc_info=True)
        try:
            self.qt_app.quit()
        except Exception:
            log.debug("退出应用异常", exc_info=True)
