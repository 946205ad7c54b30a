"""docintake/pdf/extractors/char_codes.py

Floor strategy: keep printable-ASCII runs straight from the bytes.

Exists so encrypted or unsupported-filter uploads still produce *some*
signal. The output is often noise, so quality is pinned low on purpose.
"""

import logging
import re

from docintake.core.config import settings
from docintake.pdf.budget import Deadline, unbounded
from docintake.pdf.text_utils import clean_pdf_text, is_valid_text_content, preview
from docintake.pdf.types import ExtractionMethod, ExtractionResult, StructureAnalysis

logger = logging.getLogger("docintake.pdf.char_codes")

METHOD = ExtractionMethod.CHARACTER_CODES

# Printable ASCII plus CR/LF (read as spaces); a run must be longer than 15 chars
_RUN_RE = re.compile(rb"[\x20-\x7e\r\n]{16,}")
_MIN_PRINTABLE = 11

QUALITY_WITH_CONTENT = 0.2
QUALITY_SPARSE = 0.05
SPARSE_CHARS = 100

_POLL_EVERY = 32


def extract(buffer: bytes, structure: StructureAnalysis, deadline: Deadline | None = None) -> ExtractionResult:
    deadline = (deadline or unbounded()).child(settings.PDF_CHAR_CODE_TIME_LIMIT_SECONDS)
    page_count = structure.estimated_page_count

    try:
        window = bytes(buffer[: settings.PDF_CHAR_CODE_MAX_BYTES])
        max_chars = settings.PDF_CHAR_CODE_MAX_CHARS
        parts: list[str] = []
        accepted_chars = 0
        notes: list[str] = []

        for i, m in enumerate(_RUN_RE.finditer(window), start=1):
            if i % _POLL_EVERY == 0 and deadline.exhausted():
                notes.append("Time limit reached")
                break

            run = m.group(0)
            if sum(1 for b in run if 0x20 <= b <= 0x7E) < _MIN_PRINTABLE:
                continue

            fragment = clean_pdf_text(run.decode("ascii").replace("\r", " ").replace("\n", " "))
            if not fragment or not is_valid_text_content(fragment):
                continue

            room = max_chars - accepted_chars
            if room <= 0:
                break
            fragment = fragment[:room]
            parts.append(fragment)
            accepted_chars += len(fragment)

        if accepted_chars >= max_chars:
            notes.append(f"Stopped at {max_chars} characters")
        if len(buffer) > len(window):
            notes.append(f"Scanned first {len(window)} of {len(buffer)} bytes")

        combined = " ".join(parts).strip()
        if not combined:
            quality = 0.0
        elif len(combined) > SPARSE_CHARS:
            quality = QUALITY_WITH_CONTENT
        else:
            quality = QUALITY_SPARSE
        notes.insert(0, f"{len(parts)} printable runs kept")

        logger.info(
            "pdf.strategy",
            extra={
                "strategy": METHOD.value,
                "fragments": len(parts),
                "chars": len(combined),
                "quality": quality,
                "preview": preview(combined),
            },
        )

        return ExtractionResult(
            text=combined,
            method=METHOD,
            quality=quality,
            confidence=0.6 if quality > 0.15 else 0.3,
            page_count=page_count,
            notes=notes,
            is_scanned=structure.is_scanned_likely,
        )
    except Exception as e:
        logger.warning("pdf.strategy_failed", extra={"strategy": METHOD.value, "error": repr(e)}, exc_info=True)
        return ExtractionResult.empty(METHOD, page_count, note=f"Character code extraction failed: {type(e).__name__}")
