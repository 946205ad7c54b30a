"""
file_validators.py
- Purpose: Centralized validation for file uploads (PDF constraints).
- Design: Raise AppError with stable error codes for UI + logs.
- This is the only place an upload is rejected; the extraction pipeline
  itself accepts any buffer.
"""

from fastapi import UploadFile

from docintake.core import ErrorCode, ErrorReason
from docintake.core.config import settings
from docintake.core.errors import bad_request, too_large, unprocessable

PDF_CONTENT_TYPES = {"application/pdf", "application/x-pdf"}
# Some clients send PDFs as a generic binary upload
GENERIC_CONTENT_TYPES = {"application/octet-stream", ""}


def validate_pdf_upload(pdf: UploadFile | None) -> None:
    # Basic presence check
    if pdf is None or not (pdf.filename or "").strip():
        raise unprocessable(ErrorReason.NO_FILE_PROVIDED, code=ErrorCode.FILE_MISSING)

    # Content-type validation
    content_type = (pdf.content_type or "").lower()
    if content_type in PDF_CONTENT_TYPES:
        return
    if content_type in GENERIC_CONTENT_TYPES and pdf.filename.lower().endswith(".pdf"):
        return
    raise unprocessable(
        ErrorReason.NOT_A_PDF,
        code=ErrorCode.INVALID_FILE_TYPE,
        details={"content_type": content_type},
    )


def validate_pdf_bytes(content: bytes) -> None:
    """Size checks happen after reading because UploadFile doesn't reliably expose size."""
    if not content:
        raise bad_request(ErrorReason.EMPTY_FILE, code=ErrorCode.FILE_EMPTY)
    if len(content) > settings.MAX_UPLOAD_BYTES:
        raise too_large(details={"max_bytes": settings.MAX_UPLOAD_BYTES})
