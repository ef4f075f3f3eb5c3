from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Literal, Union


ContentType = Literal["text", "image"]


@dataclass(frozen=True, slots=True)
class TextContent:
    text: str

    @property
    def content_type(self) -> ContentType:
        return "text"


@dataclass(frozen=True, slots=True)
class ImageContent:
    data: bytes

    @property
    def content_type(self) -> ContentType:
        return "image"


ClipboardContent = Union[TextContent, ImageContent]


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True, slots=True)
class ClipboardItem:
    content: ClipboardContent
    timestamp: datetime = field(default_factory=_now_utc)
    id: uuid.UUID = field(default_factory=uuid.uuid4)

    @property
    def content_type(self) -> ContentType:
        return self.content.content_type

    def preview(self, max_len: int = 120) -> str:
        if isinstance(self.content, TextContent):
            s = self.content.text.replace("\r\n", "\n").replace("\r", "\n")
            return s if len(s) <= max_len else s[: max_len - 1] + "…"
        return f"(image {len(self.content.data)} bytes)"
