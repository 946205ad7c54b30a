"""docintake/pdf/types.py

Lightweight dataclasses for PDF structure analysis + extraction outputs.
Design goals:
- deterministic extraction (no LLM, no PDF library)
- cheap, explainable quality + confidence
- created fresh per document, never mutated
"""

import math
from dataclasses import dataclass
from enum import Enum


# A rough bytes-per-page figure used when the document has no /Type /Page markers
BYTES_PER_PAGE_ESTIMATE = 50_000


class ExtractionMethod(str, Enum):
    TEXT_OBJECTS = "text-objects"
    STREAMS = "streams"
    RAW_TEXT_SCAN = "raw-text-scan"
    CHARACTER_CODES = "character-codes"
    FALLBACK_SUMMARY = "fallback-summary"


@dataclass(frozen=True)
class CompressionTypes:
    flate: bool = False
    ascii_hex: bool = False
    ascii85: bool = False

    @property
    def any(self) -> bool:
        return self.flate or self.ascii_hex or self.ascii85


@dataclass(frozen=True)
class StructureAnalysis:
    total_objects: int
    total_streams: int
    text_objects: int  # BT ... ET blocks
    fonts: int
    pages: int  # /Type /Page markers
    images: int
    byte_length: int
    has_compression: bool
    compression_types: CompressionTypes
    sample_text_object: str | None = None  # debugging aid only
    sample_stream: str | None = None

    @classmethod
    def empty(cls, byte_length: int = 0) -> "StructureAnalysis":
        return cls(
            total_objects=0,
            total_streams=0,
            text_objects=0,
            fonts=0,
            pages=0,
            images=0,
            byte_length=byte_length,
            has_compression=False,
            compression_types=CompressionTypes(),
        )

    @property
    def is_scanned_likely(self) -> bool:
        return self.images > 0 and self.text_objects < 3

    @property
    def estimated_page_count(self) -> int:
        if self.pages > 0:
            return self.pages
        return max(1, math.ceil(self.byte_length / BYTES_PER_PAGE_ESTIMATE))


@dataclass(frozen=True)
class ExtractionResult:
    text: str
    method: ExtractionMethod
    quality: float  # 0.0 - 1.0, is this genuine prose?
    confidence: float  # 0.0 - 1.0, how far to trust `quality`
    page_count: int
    notes: tuple[str, ...] = ()
    is_scanned: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.method, ExtractionMethod):
            raise ValueError(f"Unknown extraction method: {self.method!r}")
        if not (0.0 <= self.quality <= 1.0):
            raise ValueError("quality must be between 0.0 and 1.0")
        if not (0.0 <= self.confidence <= 1.0):
            raise ValueError("confidence must be between 0.0 and 1.0")
        if self.page_count < 1:
            raise ValueError("page_count must be >= 1")
        # Lists are accepted; stored as a tuple so the result stays hashable
        object.__setattr__(self, "notes", tuple(self.notes))

    @classmethod
    def empty(cls, method: ExtractionMethod, page_count: int = 1, note: str | None = None) -> "ExtractionResult":
        """Zero-quality result reported by a strategy that found nothing (or failed)."""
        return cls(
            text="",
            method=method,
            quality=0.0,
            confidence=0.0,
            page_count=max(1, page_count),
            notes=(note,) if note else (),
        )

    @property
    def char_count(self) -> int:
        return len(self.text)


def clamp_unit(value: float) -> float:
    return float(min(1.0, max(0.0, value)))


@dataclass(frozen=True)
class QualityReport:
    score: float  # 0.0 - 1.0
    char_count: int
    token_count: int
    meaningful_ratio: float
    diversity_ratio: float
    terminator_density: float
    legal_terms: tuple[str, ...]
    notes: tuple[str, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "legal_terms", tuple(self.legal_terms))
        object.__setattr__(self, "notes", tuple(self.notes))

    @property
    def has_legal_signals(self) -> bool:
        return bool(self.legal_terms)
