from __future__ import annotations

import base64
import json
import uuid
from datetime import datetime, timezone

import pytest

from clipshelf.models import ClipboardItem, ImageContent, TextContent
from clipshelf.persistence import (
    HISTORY_KEY,
    REFERENCE_DATE,
    SettingsHistoryStore,
    decode_history,
    encode_history,
)

ITEM_ID = uuid.UUID("e621e1f8-c36c-495a-93fc-0c247a3e6e5f")


def test_encoded_shape():
    ts = datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc)
    items = [
        ClipboardItem(id=ITEM_ID, content=TextContent("hi"), timestamp=ts),
        ClipboardItem(id=ITEM_ID, content=ImageContent(b"\x00\x01"), timestamp=REFERENCE_DATE),
    ]
    data = json.loads(encode_history(items))
    assert data == [
        {
            "id": "E621E1F8-C36C-495A-93FC-0C247A3E6E5F",
            "content": {"type": "text", "value": "hi"},
            "timestamp": (ts - REFERENCE_DATE).total_seconds(),
        },
        {
            "id": "E621E1F8-C36C-495A-93FC-0C247A3E6E5F",
            "content": {"type": "image", "value": base64.b64encode(b"\x00\x01").decode("ascii")},
            "timestamp": 0.0,
        },
    ]


def test_decodes_foundation_encoded_blob():
    blob = (
        b'[{"id":"E621E1F8-C36C-495A-93FC-0C247A3E6E5F",'
        b'"content":{"type":"image","value":"AAE="},"timestamp":736259400.5},'
        b'{"id":"0F2D6A4B-1C3E-4F5A-8B7C-9D0E1F2A3B4C",'
        b'"content":{"type":"text","value":"ol\\u00e1"},"timestamp":736259300}]'
    )
    items = decode_history(blob)
    assert [it.content for it in items] == [ImageContent(b"\x00\x01"), TextContent("olá")]
    assert items[0].id == ITEM_ID
    assert items[0].timestamp == datetime(2024, 5, 1, 12, 30, 0, 500000, tzinfo=timezone.utc)


def test_round_trip_preserves_items():
    items = [ClipboardItem(content=TextContent(str(i))) for i in range(5)]
    assert decode_history(encode_history(items)) == items


def test_empty_history():
    assert decode_history(encode_history([])) == []


@pytest.mark.parametrize(
    "blob",
    [
        b"",
        b"{not json",
        b"\xff\xfe",
        b'{"id": "x"}',
        b"[1]",
        b'[{"content": {"type": "text", "value": "a"}, "timestamp": 0}]',
        b'[{"id": "nope", "content": {"type": "text", "value": "a"}, "timestamp": 0}]',
        b'[{"id": "E621E1F8-C36C-495A-93FC-0C247A3E6E5F", "content": {"type": "audio", "value": "a"}, "timestamp": 0}]',
        b'[{"id": "E621E1F8-C36C-495A-93FC-0C247A3E6E5F", "content": {"type": "text", "value": 3}, "timestamp": 0}]',
        b'[{"id": "E621E1F8-C36C-495A-93FC-0C247A3E6E5F", "content": {"type": "image", "value": "***"}, "timestamp": 0}]',
        b'[{"id": "E621E1F8-C36C-495A-93FC-0C247A3E6E5F", "content": {"type": "text", "value": "a"}, "timestamp": "today"}]',
        b'[{"id": "E621E1F8-C36C-495A-93FC-0C247A3E6E5F", "content": {"type": "text", "value": "a"}, "timestamp": 1e20}]',
    ],
)
def test_malformed_blobs_raise_value_error(blob):
    with pytest.raises(ValueError):
        decode_history(blob)


def test_settings_store_missing_key(storage):
    assert storage.read() is None


def test_settings_store_round_trip(storage, qsettings):
    storage.write(b'[{"x": 1}]')
    assert storage.read() == b'[{"x": 1}]'
    assert SettingsHistoryStore(qsettings).read() == b'[{"x": 1}]'


def test_settings_store_accepts_string_values(storage, qsettings):
    qsettings.setValue(HISTORY_KEY, "[]")
    assert storage.read() == b"[]"


def test_settings_store_custom_key(qsettings):
    a = SettingsHistoryStore(qsettings, key="a")
    b = SettingsHistoryStore(qsettings, key="b")
    a.write(b"[]")
    assert b.read() is None
    assert a.key == "a"
