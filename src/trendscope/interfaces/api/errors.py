"""Domain error -> JSON error response mapping shared by the API routers."""

from __future__ import annotations

import structlog
from fastapi.responses import JSONResponse

from trendscope.domain.entities import (
    ConfigError,
    InputError,
    TrendscopeError,
    UpstreamError,
)
from trendscope.interfaces.app_state import AppState

log = structlog.get_logger(__name__)

INTERNAL_ERROR_MESSAGE = "服务器执行异常，请查看服务端日志"

_STATUS_BY_ERROR: tuple[tuple[type[TrendscopeError], int], ...] = (
    (InputError, 400),
    (ConfigError, 401),
    (UpstreamError, 401),
)


def is_prod(state: AppState) -> bool:
    config = getattr(state, "config", None)
    return config is not None and config.environment == "prod"


def error_json(message: str, code: str, status_code: int) -> JSONResponse:
    return JSONResponse(
        status_code=status_code, content={"error": message, "code": code}
    )


def error_response(exc: Exception, state: AppState, *, endpoint: str) -> JSONResponse:
    """Map an exception raised by a use case to ``{"error", "code"}`` JSON."""
    if isinstance(exc, TrendscopeError):
        for error_type, status_code in _STATUS_BY_ERROR:
            if isinstance(exc, error_type):
                log.info(
                    "api_request_rejected",
                    endpoint=endpoint,
                    code=exc.code,
                    status_code=status_code,
                )
                return error_json(str(exc), exc.code, status_code)

        # NetworkError and other server-side failures
        log.warning("api_request_failed", endpoint=endpoint, error=str(exc))
        message = INTERNAL_ERROR_MESSAGE if is_prod(state) else str(exc)
        return error_json(message, exc.code, 500)

    log.exception("api_unhandled_error", endpoint=endpoint)
    message = INTERNAL_ERROR_MESSAGE if is_prod(state) else f"{INTERNAL_ERROR_MESSAGE}: {exc}"
    return error_json(message, "server_error", 500)
