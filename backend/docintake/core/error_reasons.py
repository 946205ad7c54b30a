"""
error_reasons.py
- Purpose: Human-friendly "reason" strings.
- Keep these stable; they may be surfaced in UI.
"""

from enum import Enum


class ErrorReason(str, Enum):
    UNKNOWN = "Unknown error"

    INVALID_INPUT = "Invalid input"
    NO_FILE_PROVIDED = "No file provided"
    EMPTY_FILE = "Uploaded file is empty"
    NOT_A_PDF = "Only PDF uploads are supported"
    FILE_TOO_LARGE = "Uploaded file is too large"
    INTERNAL_ERROR = "Internal server error"
