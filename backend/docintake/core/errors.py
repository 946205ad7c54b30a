"""
errors.py
- Purpose: AppError used across services for consistent errors.
- Pattern: raise AppError(...) in service/validator, handler converts to JSON response.
- The PDF pipeline never raises AppError; only upload validation does.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from fastapi import status as http_status
from docintake.core.error_codes import ErrorCode
from docintake.core.error_reasons import ErrorReason


@dataclass
class AppError(Exception):
    code: ErrorCode
    reason: str
    status_code: int = http_status.HTTP_400_BAD_REQUEST
    details: dict[str, Any] | None = None
    message: str | None = None  # Optional human-readable message

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "error": {
                "code": self.code,
                "reason": self.reason,
                "message": self.message if self.message else self.reason,
            }
        }
        if self.details:
            payload["error"]["details"] = self.details
        return payload


def _reason_text(reason: str | Enum) -> str:
    return reason.value if isinstance(reason, Enum) else str(reason)


# Convenience constructors (keeps validators short)
def bad_request(reason: str | ErrorReason = ErrorReason.INVALID_INPUT, *, code: ErrorCode = ErrorCode.VALIDATION_ERROR, details: dict | None = None) -> AppError:
    return AppError(code=code, reason=_reason_text(reason), status_code=http_status.HTTP_400_BAD_REQUEST, details=details)


def unprocessable(reason: str | ErrorReason, *, code: ErrorCode, details: dict | None = None) -> AppError:
    return AppError(code=code, reason=_reason_text(reason), status_code=http_status.HTTP_422_UNPROCESSABLE_CONTENT, details=details)


def too_large(reason: str | ErrorReason = ErrorReason.FILE_TOO_LARGE, *, details: dict | None = None) -> AppError:
    return AppError(code=ErrorCode.FILE_TOO_LARGE, reason=_reason_text(reason), status_code=http_status.HTTP_413_CONTENT_TOO_LARGE, details=details)
