"""
exception_handlers.py
- Purpose: Convert AppError (and generic exceptions) into consistent API responses.

Every error body carries the request_id so a client report can be matched
to the JSON logs of that upload.
"""

from __future__ import annotations

import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from docintake.core import AppError, ErrorCode, ErrorReason
from docintake.core.request_context import get_context

logger = logging.getLogger("docintake.exceptions")


def _error_response(exc: AppError) -> JSONResponse:
    payload = exc.to_dict()
    rid = get_context().get("request_id")
    if rid:
        payload["error"]["request_id"] = rid
    return JSONResponse(status_code=exc.status_code, content=payload)


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    logger.warning(
        "app_error",
        extra={
            "path": request.url.path,
            "method": request.method,
            "status_code": exc.status_code,
            "code": exc.code.value,
            "reason": exc.reason,
        },
    )
    return _error_response(exc)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "unhandled_exception",
        extra={"path": request.url.path, "method": request.method, "error": repr(exc)},
    )
    return _error_response(
        AppError(
            code=ErrorCode.INTERNAL_ERROR,
            reason=ErrorReason.INTERNAL_ERROR.value,
            status_code=500,
        )
    )
