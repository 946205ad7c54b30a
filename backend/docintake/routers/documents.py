"""
documents.py
- Purpose: API route for turning an uploaded PDF into text.
- Design: Keep router thin. Delegate validation + extraction to the service.
"""

from fastapi import APIRouter, Depends, File, Form, UploadFile

from docintake.api.deps import get_extraction_service
from docintake.schemas.extraction import ExtractionResponse
from docintake.services.extraction_service import ExtractionService

router = APIRouter(prefix="/api/documents", tags=["Documents"])


@router.post("/extract", response_model=ExtractionResponse)
def extract_document_text(
    file: UploadFile | None = File(None),
    filename: str | None = Form(None),
    svc: ExtractionService = Depends(get_extraction_service),
):
    """Synchronous extraction; bounded by PDF_TOTAL_BUDGET_SECONDS."""
    return svc.extract_upload(file, filename=filename)
