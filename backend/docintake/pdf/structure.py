"""docintake/pdf/structure.py

One fast pre-scan of the raw buffer producing structural signals.

Every downstream strategy receives the same StructureAnalysis, so this pass
has to stay linear: object headers and stream keywords are counted rather
than matched as full blocks (a missing endobj/endstream must not turn into
a scan to end-of-file per occurrence).
"""

import logging
import re

from docintake.pdf.budget import Deadline, unbounded
from docintake.pdf.commands import BT_BLOCK_RE
from docintake.pdf.text_utils import as_latin1
from docintake.pdf.types import CompressionTypes, StructureAnalysis

logger = logging.getLogger("docintake.pdf.structure")

SAMPLE_CHARS = 200

_OBJECT_RE = re.compile(r"\b\d+\s+\d+\s+obj\b")
_STREAM_RE = re.compile(r"(?<!end)stream(?:\r\n|\r|\n)")
_FONT_RE = re.compile(r"/Font\b.{0,512}?/F\d+", re.DOTALL)
_PAGE_RE = re.compile(r"/Type\s*/Page\b")
_IMAGE_RE = re.compile(r"/Subtype\s*/Image\b")


def _count(regex: re.Pattern, text: str) -> int:
    return sum(1 for _ in regex.finditer(text))


def analyze_structure(buffer: bytes, deadline: Deadline | None = None) -> StructureAnalysis:
    if not buffer:
        return StructureAnalysis.empty()

    deadline = deadline or unbounded()
    text = as_latin1(buffer)
    counts = {"objects": 0, "streams": 0, "text_objects": 0, "fonts": 0, "pages": 0, "images": 0}
    sample_text_object: str | None = None
    sample_stream: str | None = None

    scans = (
        ("objects", _OBJECT_RE),
        ("streams", _STREAM_RE),
        ("text_objects", BT_BLOCK_RE),
        ("fonts", _FONT_RE),
        ("pages", _PAGE_RE),
        ("images", _IMAGE_RE),
    )
    for key, regex in scans:
        if deadline.exhausted():
            logger.warning("pdf.structure_truncated", extra={"skipped_from": key})
            break
        counts[key] = _count(regex, text)

    if counts["text_objects"]:
        m = BT_BLOCK_RE.search(text)
        sample_text_object = m.group(0)[:SAMPLE_CHARS] if m else None
    if counts["streams"]:
        m = _STREAM_RE.search(text)
        sample_stream = text[m.start():m.start() + SAMPLE_CHARS] if m else None

    compression = CompressionTypes(
        flate="/FlateDecode" in text,
        ascii_hex="/ASCIIHexDecode" in text,
        ascii85="/ASCII85Decode" in text,
    )

    analysis = StructureAnalysis(
        total_objects=counts["objects"],
        total_streams=counts["streams"],
        text_objects=counts["text_objects"],
        fonts=counts["fonts"],
        pages=counts["pages"],
        images=counts["images"],
        byte_length=len(buffer),
        has_compression=compression.any,
        compression_types=compression,
        sample_text_object=sample_text_object,
        sample_stream=sample_stream,
    )

    logger.info(
        "pdf.structure",
        extra={
            "bytes": analysis.byte_length,
            "objects": analysis.total_objects,
            "streams": analysis.total_streams,
            "text_objects": analysis.text_objects,
            "fonts": analysis.fonts,
            "pages": analysis.pages,
            "images": analysis.images,
            "compression": analysis.has_compression,
        },
    )
    return analysis
