from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ImageResult:
    """Image search hit (passthrough of the provider's image record)."""

    id: str
    thumbnail: str
    original: str
    source_url: str
    title: str
    width: int | None = None
    height: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "thumbnail": self.thumbnail,
            "original": self.original,
            "sourceUrl": self.source_url,
            "title": self.title,
            "width": self.width,
            "height": self.height,
        }
