from __future__ import annotations

import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PySide6.QtCore import QSettings
from PySide6.QtGui import QGuiApplication

from clipshelf.pasteboard import MemoryPasteboard
from clipshelf.persistence import SettingsHistoryStore
from clipshelf.store import HistoryStore

FAKE_PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 24
FAKE_TIFF = b"II*\x00" + b"\x00" * 24


@pytest.fixture(scope="session")
def qapp():
    app = QGuiApplication.instance() or QGuiApplication([])
    yield app


@pytest.fixture
def settings_path(tmp_path):
    return str(tmp_path / "prefs.ini")


@pytest.fixture
def qsettings(qapp, settings_path):
    return QSettings(settings_path, QSettings.IniFormat)


@pytest.fixture
def storage(qsettings):
    return SettingsHistoryStore(qsettings)


@pytest.fixture
def pasteboard():
    return MemoryPasteboard()


@pytest.fixture
def store(qapp, pasteboard, storage):
    s = HistoryStore(pasteboard, storage)
    s.load()
    return s


@pytest.fixture
def png_payload():
    return FAKE_PNG


@pytest.fixture
def tiff_payload():
    return FAKE_TIFF
