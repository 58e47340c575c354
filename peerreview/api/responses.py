"""Response envelopes and the error-to-envelope mapping.

Success::

    {"success": true, "data": ..., "meta": {"timestamp": "...", "pagination": {...}}}

Error::

    {"success": false, "error": {"code": "...", "message": "...", "details": ...}, "meta": {...}}
"""

import logging
from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from peerreview.errors import PeerReviewError
from peerreview.utils.pagination import Page

logger = logging.getLogger(__name__)

_HTTP_CODES = {
    400: "BAD_REQUEST",
    401: "AUTHENTICATION_REQUIRED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "CONFLICT",
}


def _meta(pagination: Optional[dict[str, Any]] = None) -> dict[str, Any]:
    meta: dict[str, Any] = {"timestamp": datetime.now(timezone.utc).isoformat()}
    if pagination is not None:
        meta["pagination"] = pagination
    return meta


def success(data: Any = None, status_code: int = 200, page: Optional[Page] = None) -> JSONResponse:
    """Wrap ``data`` in the success envelope.

    When ``page`` is given, ``data`` must be a list and pagination info
    is added to ``meta``.
    """
    pagination = page.to_meta(len(data)) if page is not None else None
    return JSONResponse(
        {"success": True, "data": data, "meta": _meta(pagination)},
        status_code=status_code,
    )


def error(code: str, message: str, status_code: int, details: Any = None) -> JSONResponse:
    body: dict[str, Any] = {"code": code, "message": message}
    if details is not None:
        body["details"] = details
    return JSONResponse(
        {"success": False, "error": body, "meta": _meta()},
        status_code=status_code,
    )


# ============================================================================
# Exception handlers
# ============================================================================


async def _app_error_handler(request: Request, exc: PeerReviewError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc, exc_info=exc)
        return error("INTERNAL_ERROR", "Internal server error", 500)
    logger.debug("%s %s rejected: %s", request.method, request.url.path, exc)
    return error(exc.code, exc.message, exc.status_code, exc.details)


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = []
    for err in exc.errors():
        # loc is like ("body", "score") or ("query", "page")
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path", "header")]
        details.append({"field": ".".join(loc) or "request", "message": err.get("msg", "invalid value")})
    return error("VALIDATION_ERROR", "Validation failed", 400, details)


async def _http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    code = _HTTP_CODES.get(exc.status_code, "INTERNAL_ERROR" if exc.status_code >= 500 else "BAD_REQUEST")
    return error(code, str(exc.detail), exc.status_code)


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    # Never leak storage or serialization detail to the caller
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error("INTERNAL_ERROR", "Internal server error", 500)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(PeerReviewError, _app_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, _http_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)
