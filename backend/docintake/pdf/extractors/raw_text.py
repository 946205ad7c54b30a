"""docintake/pdf/extractors/raw_text.py

Raw-text scanner: ignores PDF syntax entirely.

Some uploads use custom or corrupted encodings that defeat the syntax-aware
strategies but still carry literal readable substrings somewhere in the
bytes. We look for the *shape* of legal prose instead: long uppercase runs,
multi-word runs, boilerplate headings, dates and street addresses.
"""

import logging
import re

from docintake.core.config import settings
from docintake.pdf.budget import Deadline, unbounded
from docintake.pdf.commands import SpanSet, TextPattern, scan_pattern
from docintake.pdf.quality import score_text
from docintake.pdf.text_utils import clean_pdf_text, preview, strip_pdf_syntax
from docintake.pdf.types import ExtractionMethod, ExtractionResult, StructureAnalysis

logger = logging.getLogger("docintake.pdf.raw_text")

METHOD = ExtractionMethod.RAW_TEXT_SCAN

# Printable ASCII minus "." so a phrase runs to the end of its sentence
_SENTENCE_TAIL = r"[\x20-\x2d\x2f-\x7e]{0,200}\.?"

_DIGIT_RE = re.compile(r"\d")
_PRINTABLE_RUN_RE = re.compile(rb"[\x20-\x7e\t\r\n]{6,}")


def _clean_raw(text: str) -> str:
    # Operator keywords are printable too; they are never part of a readable run
    return strip_pdf_syntax(clean_pdf_text(text))


def _is_plausible_signal(text: str) -> bool:
    # Dates and addresses are mostly digits, so the prose gate does not apply
    return len(text) >= 6 and _DIGIT_RE.search(text) is not None


def printable_runs(buffer: bytes) -> str:
    """Printable ASCII runs of the whole buffer, NUL-separated so no pattern spans two runs."""
    return "\x00".join(m.group(0).decode("ascii") for m in _PRINTABLE_RUN_RE.finditer(buffer))


def _phrase(name: str, phrase: str) -> TextPattern:
    return TextPattern(
        name,
        re.compile(r"(\b" + phrase + _SENTENCE_TAIL + ")", re.IGNORECASE),
        min_length=6,
        cleaner=_clean_raw,
    )


RAW_TEXT_PATTERNS: tuple[TextPattern, ...] = (
    # Legal boilerplate first: most specific
    _phrase("request_for_production", r"REQUESTS?\s+FOR\s+PRODUCTION"),
    _phrase("discovery", r"DISCOVERY"),
    _phrase("interrogatory", r"INTERROGATOR(?:Y|IES)"),
    _phrase("case_no", r"(?:CASE|CAUSE)\s+NO\b"),
    _phrase("to_line", r"TO:"),
    _phrase("from_line", r"FROM:"),
    _phrase("re_line", r"RE:"),
    # Shape of prose
    TextPattern("upper_run", re.compile(r"(\b[A-Z][A-Z\s]{10,200}\b)"), min_length=6, cleaner=_clean_raw),
    TextPattern("word_run", re.compile(r"(\b[A-Za-z]{1,40}(?:[ \t]{1,5}[A-Za-z]{1,40}){3,60}\b)"), min_length=6, cleaner=_clean_raw),
    TextPattern("sentence_like", re.compile(r"([A-Z][a-z]{1,40}(?:\s{1,5}[A-Za-z]{1,40}){2,60})"), min_length=6, cleaner=_clean_raw),
    # Dates
    TextPattern("numeric_date", re.compile(r"(\b\d{1,2}/\d{1,2}/\d{4}\b)"), min_length=6, validator=_is_plausible_signal),
    TextPattern("long_date", re.compile(r"(\b[A-Z][a-z]{2,8}\s+\d{1,2},\s+\d{4}\b)"), min_length=6),
    # Street addresses
    TextPattern(
        "street_address",
        re.compile(
            r"(\b\d{1,6}\s+[A-Z][a-z]+(?:\s+[A-Z][a-z]+){0,4}\s+(?:Street|St|Avenue|Ave|Boulevard|Blvd|Road|Rd)\b)",
            re.IGNORECASE,
        ),
        min_length=6,
        validator=_is_plausible_signal,
    ),
)


def extract(buffer: bytes, structure: StructureAnalysis, deadline: Deadline | None = None) -> ExtractionResult:
    deadline = (deadline or unbounded()).child(settings.PDF_RAW_TEXT_TIME_LIMIT_SECONDS)
    page_count = structure.estimated_page_count

    try:
        text = printable_runs(buffer)
        per_pattern = settings.PDF_RAW_TEXT_MAX_MATCHES
        spans = SpanSet()
        parts: list[str] = []
        notes: list[str] = []

        for pattern in RAW_TEXT_PATTERNS:
            if deadline.exhausted():
                notes.append(f"Time limit reached before pattern '{pattern.name}'")
                break
            kept = 0
            # Examine a few more matches than we keep; many are rejected by the gate
            for fragment in scan_pattern(text, pattern, spans=spans, max_matches=per_pattern * 5, deadline=deadline):
                parts.append(fragment)
                kept += 1
                if kept >= per_pattern:
                    break
            if kept:
                logger.debug("pdf.pattern", extra={"strategy": METHOD.value, "pattern": pattern.name, "found": kept})

        combined = " ".join(parts).strip()
        quality = score_text(combined)
        notes.insert(0, f"{len(parts)} readable runs found in raw bytes")

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
            confidence=0.7 if quality > 0.2 else 0.4,
            page_count=page_count,
            notes=notes,
            is_scanned=structure.is_scanned_likely,
        )
    except Exception as e:
        logger.warning("pdf.strategy_failed", extra={"strategy": METHOD.value, "error": repr(e)}, exc_info=True)
        return ExtractionResult.empty(METHOD, page_count, note=f"Raw text scan failed: {type(e).__name__}")
