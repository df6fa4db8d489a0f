from __future__ import annotations

from typing import cast

from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse

from trendscope.interfaces.api.errors import error_response
from trendscope.interfaces.app_state import AppState

router = APIRouter(tags=["images"])


@router.get("/images")
async def search_images(
    request: Request,
    q: str | None = Query(default=None, description="Search term"),
) -> JSONResponse:
    state = cast(AppState, request.app.state)

    try:
        images = await state.image_search.execute(q or "")
    except Exception as e:
        return error_response(e, state, endpoint="images")

    return JSONResponse(
        status_code=200,
        content={"images": [image.to_dict() for image in images]},
    )
