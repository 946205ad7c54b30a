"""docintake/pdf/fallback.py

Summary fallback: a clearly labeled, human-readable description of the
upload used when no strategy clears the minimum bar.

The text depends only on the buffer and what was attempted (no dates, no
timings) so the pipeline stays a pure function of its input.
"""

import logging
import re

from docintake.pdf.text_utils import as_latin1
from docintake.pdf.types import ExtractionMethod, ExtractionResult, StructureAnalysis

logger = logging.getLogger("docintake.pdf.fallback")

FALLBACK_QUALITY = 0.5
FALLBACK_CONFIDENCE = 0.6

# First match wins
_DOCUMENT_TYPES = [
    ("Discovery Request Document", re.compile(r"\bDISCOVERY\b|REQUESTS?\s+FOR\s+PRODUCTION")),
    ("Interrogatory Document", re.compile(r"\bINTERROGATOR(?:Y|IES)\b")),
    ("Court Filing Document", re.compile(r"\bMOTION\b|\bCOURT\b")),
    ("Contract/Agreement Document", re.compile(r"\bCONTRACT\b|\bAGREEMENT\b")),
]
DEFAULT_DOCUMENT_TYPE = "Legal Document"

_STRATEGY_LABELS = {
    ExtractionMethod.TEXT_OBJECTS: "Text object extraction (BT/ET, Tj/TJ operators)",
    ExtractionMethod.STREAMS: "Stream extraction (ASCII85 / ASCIIHex / raw)",
    ExtractionMethod.RAW_TEXT_SCAN: "Raw text scanning",
    ExtractionMethod.CHARACTER_CODES: "Character code extraction",
}


def classify_document(buffer: bytes) -> str:
    text = as_latin1(buffer)
    for label, regex in _DOCUMENT_TYPES:
        if regex.search(text):
            return label
    return DEFAULT_DOCUMENT_TYPE


def _yes_no(flag: bool) -> str:
    return "Yes" if flag else "No"


def build_summary(
    buffer: bytes,
    structure: StructureAnalysis,
    attempted: list[ExtractionMethod],
    reason: str | None = None,
) -> ExtractionResult:
    size_kb = round(len(buffer) / 1024)
    pages = structure.estimated_page_count
    document_type = classify_document(buffer) if buffer else DEFAULT_DOCUMENT_TYPE
    compression = structure.compression_types
    filters = [name for name, on in (("Flate", compression.flate), ("ASCIIHex", compression.ascii_hex), ("ASCII85", compression.ascii85)) if on]

    lines = [
        "DOCUMENT ANALYSIS SUMMARY",
        f"File Size: {size_kb}KB ({len(buffer)} bytes)",
        f"Pages (estimated): {pages}",
        f"Document Type: {document_type}",
    ]
    if reason:
        lines.append(f"Processing Issue: {reason}")

    lines += [
        "",
        "STRUCTURE ANALYSIS:",
        f"- Objects: {structure.total_objects}",
        f"- Streams: {structure.total_streams}",
        f"- Text Objects: {structure.text_objects}",
        f"- Fonts: {structure.fonts}",
        f"- Images: {structure.images}",
        f"- Compression: {', '.join(filters) if filters else 'None detected'}",
        f"- Likely scanned document: {_yes_no(structure.is_scanned_likely)}",
        "",
        "EXTRACTION ATTEMPTS:",
    ]
    if attempted:
        lines += [f"- {_STRATEGY_LABELS.get(m, m.value)}" for m in attempted]
    else:
        lines.append("- None (no extraction strategy could be run)")

    lines += [
        "",
        "No strategy recovered readable text with sufficient quality.",
        "The document is stored and available for manual review.",
    ]
    if structure.is_scanned_likely:
        lines.append("It appears to be image-based; OCR processing is recommended.")

    logger.info(
        "pdf.fallback",
        extra={"bytes": len(buffer), "document_type": document_type, "attempted": [m.value for m in attempted], "reason": reason},
    )

    notes = [f"Summary fallback after {len(attempted)} strategies"]
    if reason:
        notes.append(reason)

    return ExtractionResult(
        text="\n".join(lines),
        method=ExtractionMethod.FALLBACK_SUMMARY,
        quality=FALLBACK_QUALITY,
        confidence=FALLBACK_CONFIDENCE,
        page_count=pages,
        notes=tuple(notes),
        is_scanned=structure.is_scanned_likely,
    )
