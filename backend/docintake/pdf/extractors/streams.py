"""docintake/pdf/extractors/streams.py

Stream-by-stream extraction.

Each `N N obj ... stream ... endstream` block is decoded according to its
declared filter and re-parsed with the shared text-command patterns:
- /ASCII85Decode   -> ASCII85
- /ASCIIHexDecode  -> hex pairs
- no filter        -> raw stream text

Flate (and image/other binary codecs) are NOT inflated here: such streams
are counted as unreadable and skipped.
"""

import logging
import re
from typing import Iterator

from docintake.core.config import settings
from docintake.pdf.budget import Deadline, unbounded
from docintake.pdf.commands import TEXT_COMMAND_PATTERNS, extract_fragments
from docintake.pdf.quality import score_text
from docintake.pdf.text_utils import as_latin1, decode_ascii85, decode_ascii_hex, preview
from docintake.pdf.types import ExtractionMethod, ExtractionResult, StructureAnalysis

logger = logging.getLogger("docintake.pdf.streams")

METHOD = ExtractionMethod.STREAMS

# Header text before "stream" may not cross into the next object
_OBJ_STREAM_RE = re.compile(
    r"\b\d+\s+\d+\s+obj\b((?:(?!endobj).){0,4096}?)\bstream(?:\r\n|\r|\n)",
    re.DOTALL,
)
_ENDSTREAM = "endstream"

# Known non-text stream categories
_SKIP_RE = re.compile(r"/XRef\b|/Metadata\b|/OCProperties\b|/Subtype\s*/Image\b|/EmbeddedFile\b")

_UNREADABLE_FILTERS = (
    "/FlateDecode",
    "/LZWDecode",
    "/RunLengthDecode",
    "/DCTDecode",
    "/JPXDecode",
    "/JBIG2Decode",
    "/CCITTFaxDecode",
    "/Crypt",
)


def iter_streams(text: str, max_streams: int) -> Iterator[tuple[str, str]]:
    """Yield (object header, stream payload) pairs in file order."""
    pos = 0
    seen = 0
    while seen < max_streams:
        m = _OBJ_STREAM_RE.search(text, pos)
        if not m:
            return
        end = text.find(_ENDSTREAM, m.end())
        if end == -1:
            return
        seen += 1
        pos = end + len(_ENDSTREAM)
        yield m.group(1), text[m.end():end]


def decode_stream(header: str, payload: str) -> str | None:
    """Decoded stream text, or None when the filter chain is unsupported."""
    if any(f in header for f in _UNREADABLE_FILTERS):
        return None
    if "/ASCII85Decode" in header or "/A85" in header:
        return decode_ascii85(payload)
    if "/ASCIIHexDecode" in header or "/AHx" in header:
        return decode_ascii_hex(payload)
    return payload


def extract(buffer: bytes, structure: StructureAnalysis, deadline: Deadline | None = None) -> ExtractionResult:
    deadline = (deadline or unbounded()).child(settings.PDF_STREAM_TIME_LIMIT_SECONDS)
    page_count = structure.estimated_page_count

    try:
        text = as_latin1(buffer)
        parts: list[str] = []
        processed = skipped = unreadable = failed = 0
        notes: list[str] = []

        for header, payload in iter_streams(text, settings.PDF_STREAM_MAX_STREAMS):
            if deadline.exhausted():
                notes.append(f"Time limit reached after {processed} streams")
                break
            processed += 1

            if len(payload) < settings.PDF_STREAM_MIN_LENGTH or _SKIP_RE.search(header):
                skipped += 1
                continue

            try:
                decoded = decode_stream(header, payload)
            except Exception as e:
                # one bad stream never aborts the strategy
                failed += 1
                logger.debug("pdf.stream_decode_failed", extra={"error": repr(e)})
                continue

            if decoded is None:
                unreadable += 1
                continue
            if len(decoded) <= 5:
                continue

            fragments = extract_fragments(
                decoded,
                TEXT_COMMAND_PATTERNS,
                max_matches=settings.PDF_TEXT_OBJECT_MAX_MATCHES,
                deadline=deadline,
            )
            stream_text = " ".join(fragments)
            if len(stream_text) > 3:
                parts.append(stream_text)

        if processed >= settings.PDF_STREAM_MAX_STREAMS:
            notes.append(f"Stopped at the {settings.PDF_STREAM_MAX_STREAMS}-stream cap")
        if unreadable:
            notes.append(f"{unreadable} compressed/binary streams skipped as unreadable")

        combined = " ".join(parts).strip()
        quality = score_text(combined)
        notes.insert(0, f"{len(parts)} of {processed} streams yielded text")

        logger.info(
            "pdf.strategy",
            extra={
                "strategy": METHOD.value,
                "streams": processed,
                "skipped": skipped,
                "unreadable": unreadable,
                "failed": failed,
                "chars": len(combined),
                "quality": quality,
                "preview": preview(combined),
            },
        )

        return ExtractionResult(
            text=combined,
            method=METHOD,
            quality=quality,
            confidence=0.8 if quality > 0.3 else 0.5,
            page_count=page_count,
            notes=notes,
            is_scanned=structure.is_scanned_likely,
        )
    except Exception as e:
        logger.warning("pdf.strategy_failed", extra={"strategy": METHOD.value, "error": repr(e)}, exc_info=True)
        return ExtractionResult.empty(METHOD, page_count, note=f"Stream extraction failed: {type(e).__name__}")
