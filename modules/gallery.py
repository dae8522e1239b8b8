"""
ギャラリー (撮影済み画像の一時保持)
Ordered, size-limited in-memory list of captured images.

Positions are the only identity an image has: every mutation must be
followed by a fresh render() so thumbnails carry current indices.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

import config
from modules.errors import GalleryFullError, GalleryIndexError
from modules.models import CapturedImage


@dataclass(frozen=True)
class Thumbnail:
    index: int
    src: str

    def to_dict(self):
        return {"index": self.index, "src": self.src}


class Gallery:
    def __init__(self, max_items: int = config.MAX_PHOTOS):
        if max_items < 1:
            raise ValueError("max_items must be at least 1")
        self.max_items = max_items
        self._items: list[CapturedImage] = []

    def add(self, image: CapturedImage) -> int:
        """Append and return the new image's position."""
        if self.is_full:
            raise GalleryFullError(self.max_items)
        self._items.append(image)
        return len(self._items) - 1

    def delete_at(self, index: int) -> CapturedImage:
        # negative indices are rejected, not wrapped
        if not isinstance(index, int) or index < 0 or index >= len(self._items):
            raise GalleryIndexError(index, len(self._items))
        return self._items.pop(index)

    def clear(self):
        self._items.clear()

    def snapshot(self) -> tuple[CapturedImage, ...]:
        return tuple(self._items)

    def render(self) -> list[Thumbnail]:
        return [Thumbnail(index=i, src=img.data_url) for i, img in enumerate(self._items)]

    @property
    def is_empty(self) -> bool:
        return not self._items

    @property
    def is_full(self) -> bool:
        return len(self._items) >= self.max_items

    def __len__(self):
        return len(self._items)

    def __iter__(self) -> Iterator[CapturedImage]:
        return iter(tuple(self._items))

    def __getitem__(self, index: int) -> CapturedImage:
        return self._items[index]
