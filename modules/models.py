"""
データモデル
Captured images and the submission payload sent to the webhook.
"""
from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

import config
from modules.errors import InvalidImageError

JPEG_MIMETYPE = "image/jpeg"
DATA_URL_PREFIX = f"data:{JPEG_MIMETYPE};base64,"
JPEG_MAGIC = b"\xff\xd8"


def utc_timestamp(now: Optional[datetime] = None) -> str:
    """ISO-8601 UTC with milliseconds, e.g. 2024-05-01T09:30:00.123Z"""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(frozen=True)
class CapturedImage:
    """One encoded still frame, held as a JPEG data URL."""

    data_url: str

    @classmethod
    def from_jpeg_bytes(cls, data: bytes) -> "CapturedImage":
        if not data.startswith(JPEG_MAGIC):
            raise InvalidImageError("Encoded frame is not a JPEG")
        return cls(DATA_URL_PREFIX + base64.b64encode(data).decode("ascii"))

    @classmethod
    def from_data_url(cls, data_url: str) -> "CapturedImage":
        """
        ブラウザから送られた data URL を検証する。
        The receiving flow strips exactly the JPEG prefix, so other
        encodings are rejected here rather than stored corrupted.
        """
        if not isinstance(data_url, str) or not data_url.startswith(DATA_URL_PREFIX):
            raise InvalidImageError("画像は JPEG の data URL である必要があります (expected data:image/jpeg;base64,...)")
        encoded = data_url[len(DATA_URL_PREFIX):]
        try:
            raw = base64.b64decode(encoded, validate=True)
        except (binascii.Error, ValueError):
            raise InvalidImageError("画像データの base64 が不正です (invalid base64 body)")
        if not raw.startswith(JPEG_MAGIC):
            raise InvalidImageError("画像データが JPEG ではありません (body is not a JPEG)")
        return cls(data_url)

    @property
    def mimetype(self) -> str:
        return JPEG_MIMETYPE

    def to_bytes(self) -> bytes:
        return base64.b64decode(self.data_url[len(DATA_URL_PREFIX):])

    @property
    def size_bytes(self) -> int:
        return len(self.to_bytes())

    def __repr__(self):
        return f"CapturedImage(size_bytes={self.size_bytes})"


@dataclass(frozen=True)
class SubmissionPayload:
    images: tuple[str, ...]
    user_id: str
    timestamp: str = field(default_factory=utc_timestamp)

    @classmethod
    def build(cls, images, user_id: Optional[str] = None, now: Optional[datetime] = None) -> "SubmissionPayload":
        user = (user_id or "").strip() or config.DEFAULT_USER_ID
        return cls(
            images=tuple(img.data_url for img in images),
            user_id=user,
            timestamp=utc_timestamp(now),
        )

    def to_dict(self) -> dict:
        return {
            "images": list(self.images),
            "userId": self.user_id,
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class SubmitResult:
    status_code: int
    image_count: int
    user_id: str
    timestamp: str

    def to_dict(self):
        return {
            "success": True,
            "count": self.image_count,
            "userId": self.user_id,
            "timestamp": self.timestamp,
        }
