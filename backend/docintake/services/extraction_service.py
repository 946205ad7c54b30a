# docintake/services/extraction_service.py
"""
extraction_service.py
- Purpose: Runs the "upload PDF -> text" workflow for one request.
- Owns: upload validation, reading the buffer, budget, logging context.
- Design: Thick service; routers remain thin and easy to reason about.
"""

import logging
import threading
import uuid

from fastapi import UploadFile

from docintake.core.config import settings
from docintake.core.request_context import set_context
from docintake.pdf.budget import Deadline
from docintake.pdf.extract import extract_text_from_bytes
from docintake.schemas.extraction import ExtractionResponse
from docintake.validations.file_validators import validate_pdf_bytes, validate_pdf_upload

logger = logging.getLogger("docintake.extraction_service")


class ExtractionService:
    def __init__(self, budget_seconds: float | None = None):
        self.budget_seconds = settings.PDF_TOTAL_BUDGET_SECONDS if budget_seconds is None else budget_seconds

    def read_upload(self, pdf: UploadFile | None) -> bytes:
        validate_pdf_upload(pdf)
        # Read one byte past the limit so oversize uploads are detected without buffering them whole
        content = pdf.file.read(settings.MAX_UPLOAD_BYTES + 1)
        validate_pdf_bytes(content)
        return content

    def extract_upload(
        self,
        pdf: UploadFile | None,
        *,
        filename: str | None = None,
        cancel_event: threading.Event | None = None,
    ) -> ExtractionResponse:
        content = self.read_upload(pdf)
        # Clients may send a display name separate from the multipart filename
        name = (filename or "").strip() or pdf.filename

        document_id = str(uuid.uuid4())
        set_context(document_id=document_id, filename=name)

        deadline = Deadline(self.budget_seconds, cancel_event=cancel_event)
        result = extract_text_from_bytes(content, deadline=deadline, filename=name)

        logger.info(
            "extraction.completed",
            extra={
                "method": result.method.value,
                "quality": result.quality,
                "confidence": result.confidence,
                "pages": result.page_count,
                "chars": len(result.text),
            },
        )
        return ExtractionResponse.from_result(result, document_id=document_id, filename=name)
