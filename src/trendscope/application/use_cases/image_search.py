"""Image search use case (provider passthrough)."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import structlog

from trendscope.domain.entities import ImageResult, InputError
from trendscope.domain.ports.search_provider import SearchProviderPort

log = structlog.get_logger(__name__)


def _optional_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def _text(record: Mapping[str, Any], key: str) -> str:
    value = record.get(key)
    return value if isinstance(value, str) else ""


def to_image_result(record: Mapping[str, Any], index: int) -> ImageResult:
    return ImageResult(
        id=f"{record.get('position')}-{index}",
        thumbnail=_text(record, "thumbnail"),
        original=_text(record, "original"),
        source_url=_text(record, "link"),
        title=_text(record, "title"),
        width=_optional_int(record.get("original_width")),
        height=_optional_int(record.get("original_height")),
    )


class ImageSearchUseCase:
    def __init__(self, provider: SearchProviderPort) -> None:
        self.provider = provider

    async def execute(self, term: str) -> list[ImageResult]:
        term = (term or "").strip()
        if not term:
            raise InputError("关键词不能为空")

        raw = await self.provider.search_images(term)
        images = [
            to_image_result(record, index)
            for index, record in enumerate(raw)
            if isinstance(record, Mapping)
        ]
        log.info("image_search_completed", query=term, result_count=len(images))
        return images
