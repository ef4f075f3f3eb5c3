from __future__ import annotations

import base64
import binascii
import json
import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Final, Iterable

from PySide6.QtCore import QByteArray, QSettings

from .models import ClipboardContent, ClipboardItem, ImageContent, TextContent

log = logging.getLogger(__name__)


HISTORY_KEY: Final[str] = "clipboardHistory"
SETTINGS_ORG: Final[str] = "ClipShelf"
SETTINGS_APP: Final[str] = "ClipShelf"

# Foundation encodes dates as seconds since its reference date.
REFERENCE_DATE: Final[datetime] = datetime(2001, 1, 1, tzinfo=timezone.utc)


def _encode_timestamp(ts: datetime) -> float:
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return (ts - REFERENCE_DATE).total_seconds()


def _decode_timestamp(value: object) -> datetime:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"timestamp must be a number, got {type(value).__name__}")
    try:
        return REFERENCE_DATE + timedelta(seconds=value)
    except OverflowError as exc:
        raise ValueError(f"timestamp out of range: {value}") from exc


def _encode_content(content: ClipboardContent) -> dict:
    if isinstance(content, TextContent):
        return {"type": "text", "value": content.text}
    return {"type": "image", "value": base64.b64encode(content.data).decode("ascii")}


def _decode_content(data: object) -> ClipboardContent:
    if not isinstance(data, dict):
        raise ValueError("content must be an object")
    kind = data.get("type")
    value = data.get("value")
    if kind == "text":
        if not isinstance(value, str):
            raise ValueError("text content value must be a string")
        return TextContent(value)
    if kind == "image":
        if not isinstance(value, str):
            raise ValueError("image content value must be a base64 string")
        try:
            return ImageContent(base64.b64decode(value, validate=True))
        except binascii.Error as exc:
            raise ValueError(f"invalid base64 image payload: {exc}") from exc
    raise ValueError(f"unknown content type: {kind!r}")


def _encode_item(it: ClipboardItem) -> dict:
    return {
        "id": str(it.id).upper(),
        "content": _encode_content(it.content),
        "timestamp": _encode_timestamp(it.timestamp),
    }


def _decode_item(data: object) -> ClipboardItem:
    if not isinstance(data, dict):
        raise ValueError("history entry must be an object")
    raw_id = data.get("id")
    if not isinstance(raw_id, str):
        raise ValueError("history entry id must be a string")
    return ClipboardItem(
        id=uuid.UUID(raw_id),
        content=_decode_content(data.get("content")),
        timestamp=_decode_timestamp(data.get("timestamp")),
    )


def encode_history(items: Iterable[ClipboardItem]) -> bytes:
    return json.dumps([_encode_item(it) for it in items], ensure_ascii=False).encode("utf-8")


def decode_history(blob: bytes) -> list[ClipboardItem]:
    """Decode a persisted history blob; any malformed input raises ValueError."""
    try:
        data = json.loads(blob.decode("utf-8"))
    except UnicodeDecodeError as exc:
        raise ValueError(f"history blob is not UTF-8: {exc}") from exc
    if not isinstance(data, list):
        raise ValueError("history blob must be a JSON array")
    return [_decode_item(row) for row in data]


def default_history_settings() -> QSettings:
    return QSettings(SETTINGS_ORG, SETTINGS_APP)


class SettingsHistoryStore:
    """One QSettings key holding the encoded history blob."""

    def __init__(self, settings: QSettings | None = None, key: str = HISTORY_KEY) -> None:
        self._settings = settings if settings is not None else default_history_settings()
        self._key = key

    @property
    def key(self) -> str:
        return self._key

    def read(self) -> bytes | None:
        raw = self._settings.value(self._key)
        if raw is None:
            return None
        if isinstance(raw, QByteArray):
            return bytes(raw.data())
        if isinstance(raw, (bytes, bytearray)):
            return bytes(raw)
        if isinstance(raw, str):
            return raw.encode("utf-8")
        raise ValueError(f"unexpected value type under {self._key!r}: {type(raw).__name__}")

    def write(self, blob: bytes) -> None:
        self._settings.setValue(self._key, QByteArray(blob))
        self._settings.sync()
        if self._settings.status() != QSettings.NoError:
            raise OSError(f"writing {self._key!r} failed: {self._settings.status()}")
