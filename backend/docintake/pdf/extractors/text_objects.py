"""docintake/pdf/extractors/text_objects.py

Highest-precision strategy: text-showing operators (BT/ET, Tj, TJ, Td, Tf)
read straight out of the uncompressed parts of the file.

Guards against worst-case cost:
- per-call time ceiling, checked between patterns and inside the scan
- cap on matches examined per pattern
- early exit once enough fragments were collected
"""

import logging

from docintake.core.config import settings
from docintake.pdf.budget import Deadline, unbounded
from docintake.pdf.commands import TEXT_COMMAND_PATTERNS, SpanSet, scan_pattern
from docintake.pdf.quality import score_text
from docintake.pdf.text_utils import as_latin1, preview
from docintake.pdf.types import ExtractionMethod, ExtractionResult, StructureAnalysis

logger = logging.getLogger("docintake.pdf.text_objects")

METHOD = ExtractionMethod.TEXT_OBJECTS


def extract(buffer: bytes, structure: StructureAnalysis, deadline: Deadline | None = None) -> ExtractionResult:
    deadline = (deadline or unbounded()).child(settings.PDF_TEXT_OBJECT_TIME_LIMIT_SECONDS)
    page_count = structure.estimated_page_count

    try:
        text = as_latin1(buffer)
        sufficient = settings.PDF_TEXT_OBJECT_SUFFICIENT_FRAGMENTS
        spans = SpanSet()
        fragments: list[str] = []
        notes: list[str] = []

        for pattern in TEXT_COMMAND_PATTERNS:
            if deadline.exhausted():
                notes.append(f"Time limit reached before pattern '{pattern.name}'")
                break
            if len(fragments) >= sufficient:
                notes.append(f"Sufficient content after {len(fragments)} fragments; skipped remaining patterns")
                break

            found = 0
            for fragment in scan_pattern(
                text,
                pattern,
                spans=spans,
                max_matches=settings.PDF_TEXT_OBJECT_MAX_MATCHES,
                deadline=deadline,
            ):
                fragments.append(fragment)
                found += 1
                if len(fragments) >= sufficient:
                    break
            logger.debug("pdf.pattern", extra={"strategy": METHOD.value, "pattern": pattern.name, "found": found})

        combined = " ".join(fragments).strip()
        quality = score_text(combined)
        notes.insert(0, f"{len(fragments)} text fragments from show operators")

        logger.info(
            "pdf.strategy",
            extra={
                "strategy": METHOD.value,
                "fragments": len(fragments),
                "chars": len(combined),
                "quality": quality,
                "preview": preview(combined),
            },
        )

        return ExtractionResult(
            text=combined,
            method=METHOD,
            quality=quality,
            confidence=0.8 if quality > 0.3 else 0.4,
            page_count=page_count,
            notes=notes,
            is_scanned=structure.is_scanned_likely,
        )
    except Exception as e:
        logger.warning("pdf.strategy_failed", extra={"strategy": METHOD.value, "error": repr(e)}, exc_info=True)
        return ExtractionResult.empty(METHOD, page_count, note=f"Text object extraction failed: {type(e).__name__}")
