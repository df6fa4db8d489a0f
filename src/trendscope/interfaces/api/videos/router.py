"""Ranked video search endpoint."""

from __future__ import annotations

from typing import cast

import structlog
from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse

from trendscope.domain.entities import VideoQuery
from trendscope.interfaces.api.errors import error_response
from trendscope.interfaces.app_state import AppState

log = structlog.get_logger(__name__)

router = APIRouter(tags=["videos"])


@router.get("/videos")
async def search_videos(
    request: Request,
    q: str | None = Query(default=None, description="Search term"),
    page: int = Query(default=1, description="1-based page number"),
) -> JSONResponse:
    """Return one ranked page: ``{"videos": [...], "hasMore": bool}``.

    Results are ordered by engagement score (desc). ``hasMore`` is a hint
    derived from the raw upstream record count of this page.
    """
    state = cast(AppState, request.app.state)

    try:
        result = await state.video_search.execute(VideoQuery(term=q or "", page=page))
    except Exception as e:
        return error_response(e, state, endpoint="videos")

    return JSONResponse(
        status_code=200,
        content={
            "videos": [video.to_dict() for video in result.results],
            "hasMore": result.has_more,
        },
    )
