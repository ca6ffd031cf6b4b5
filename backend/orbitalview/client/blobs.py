"""Local object references for binary payloads (image bytes shown by the session)."""

from __future__ import annotations

import uuid
from dataclasses import dataclass


@dataclass
class Blob:
    content: bytes
    content_type: str


class ObjectUrlRegistry:
    """Hands out ``blob:`` references; a reference holds its bytes until revoked."""

    def __init__(self, origin: str = "orbitalview"):
        self.origin = origin
        self._blobs: dict[str, Blob] = {}

    def create(self, content: bytes, content_type: str) -> str:
        url = f"blob:{self.origin}/{uuid.uuid4()}"
        self._blobs[url] = Blob(content, content_type)
        return url

    def revoke(self, url: str | None) -> None:
        if url:
            self._blobs.pop(url, None)

    def get(self, url: str) -> Blob | None:
        return self._blobs.get(url)

    def __len__(self) -> int:
        return len(self._blobs)
