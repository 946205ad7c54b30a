from __future__ import annotations

import time
import uuid
import logging

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from docintake.core.request_context import set_context, clear_context


logger = logging.getLogger("docintake.http")

REQUEST_ID_HEADER = "x-request-id"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """One request/response log pair per call, correlated by request id."""

    async def dispatch(self, request: Request, call_next):
        # Accept upstream request id if present, else create one
        rid = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        set_context(request_id=rid)

        t0 = time.perf_counter()
        try:
            logger.info(
                "http.request",
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    # uploads are the interesting requests; size helps explain slow extractions
                    "content_length": request.headers.get("content-length"),
                },
            )
            try:
                response: Response = await call_next(request)
            except Exception:
                logger.exception(
                    "http.failed",
                    extra={
                        "method": request.method,
                        "path": request.url.path,
                        "duration_ms": int((time.perf_counter() - t0) * 1000),
                    },
                )
                raise

            logger.info(
                "http.response",
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "status_code": response.status_code,
                    "duration_ms": int((time.perf_counter() - t0) * 1000),
                },
            )

            response.headers[REQUEST_ID_HEADER] = rid
            return response
        finally:
            clear_context()
