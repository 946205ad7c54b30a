"""
extraction.py (schemas)
- Purpose: Response DTOs for the PDF extraction endpoint.
- Design: Keep API DTOs stable; helper constructor maps the pipeline result.
"""

from typing import Literal

from pydantic import BaseModel, Field

from docintake.pdf.types import ExtractionResult


class ExtractionResponse(BaseModel):
    document_id: str
    filename: str | None = None
    method: Literal["text-objects", "streams", "raw-text-scan", "character-codes", "fallback-summary"]
    quality: float = Field(ge=0.0, le=1.0)
    confidence: float = Field(ge=0.0, le=1.0)
    page_count: int = Field(ge=1)
    char_count: int
    is_scanned: bool
    notes: list[str]
    text: str

    @classmethod
    def from_result(cls, result: ExtractionResult, *, document_id: str, filename: str | None = None) -> "ExtractionResponse":
        """
        DRY mapper from pipeline result -> response DTO.
        """
        return cls(
            document_id=document_id,
            filename=filename,
            method=result.method.value,
            quality=result.quality,
            confidence=result.confidence,
            page_count=result.page_count,
            char_count=len(result.text),
            is_scanned=result.is_scanned,
            notes=list(result.notes),
            text=result.text,
        )
