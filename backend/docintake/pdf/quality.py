"""docintake/pdf/quality.py

Cheap, explainable heuristics to score how much extracted text looks like
genuine prose rather than PDF noise.

Generic score (weights sum past 1.0 on purpose, result is clamped):
- meaningful (word-shaped) tokens / tokens * 0.4
- length bonus, saturating at 500 chars    * 0.3
- distinct tokens / tokens                 * 0.2
- sentence terminator density (capped)     * 0.2

The last three are scaled by the meaningful ratio: printable noise out of
binary data is long, never repeats and is full of stray periods, so on its
own it would earn most of those points.

Legal vocabulary overrides the generic score with a floor of 0.7.
"""

import re

from docintake.core.config import settings
from docintake.pdf.types import QualityReport
from docintake.pdf.vocabulary import find_legal_terms


LEGAL_FLOOR = 0.7
LEGAL_CEILING = 0.9

_TERMINATOR_RE = re.compile(r"[.!?](?=\s|$)")


# Short tokens only count when they are everyday English words
_COMMON_SHORT_WORDS = frozenset(
    "a i an as at be by do go he if in is it me my no of on or so to up us we".split()
)
_WORD_RE = re.compile(r"[A-Za-z]+(?:['-][A-Za-z]+)*")
_EDGE_PUNCT = "\"'()[]{}.,;:!?"


def _is_meaningful(token: str) -> bool:
    """Letters only (inner ' or - allowed), cased like a word: lower, UPPER or Capitalized."""
    word = token.strip(_EDGE_PUNCT)
    if not _WORD_RE.fullmatch(word):
        return False
    if not (word.islower() or word.isupper() or word[1:].islower()):
        return False
    if len(word) < 3:
        return word.lower() in _COMMON_SHORT_WORDS
    return True


def assess_text(text: str) -> QualityReport:
    raw = text or ""
    char_count = len(raw)
    tokens = [w for w in raw.split() if len(w) > 2]
    token_count = len(tokens)

    if char_count < 5 or token_count == 0:
        return QualityReport(
            score=0.0,
            char_count=char_count,
            token_count=token_count,
            meaningful_ratio=0.0,
            diversity_ratio=0.0,
            terminator_density=0.0,
            legal_terms=[],
            notes=["Too little text to score"],
        )

    words = raw.split()
    meaningful_ratio = sum(1 for w in words if _is_meaningful(w)) / len(words)
    diversity_ratio = len({w.lower() for w in tokens}) / token_count
    terminator_density = len(_TERMINATOR_RE.findall(raw)) / token_count
    legal_terms = find_legal_terms(raw)

    notes: list[str] = []

    if legal_terms:
        score = min(LEGAL_CEILING, LEGAL_FLOOR + (char_count / 1000) * 0.2)
        notes.append(f"Legal vocabulary detected: {', '.join(legal_terms[:5])}")
    else:
        length_bonus = min(char_count / 500, 1.0) * 0.3
        terminator_bonus = min(terminator_density * 10, 1.0) * 0.2
        score = meaningful_ratio * 0.4 + (length_bonus + diversity_ratio * 0.2 + terminator_bonus) * meaningful_ratio
        if meaningful_ratio < 0.5:
            notes.append("Mostly non-word tokens")
        if diversity_ratio < 0.3:
            notes.append("Highly repetitive text")
        if char_count < 100:
            notes.append("Very little text")

    score = max(0.0, min(1.0, score))

    return QualityReport(
        score=float(round(score, 3)),
        char_count=char_count,
        token_count=token_count,
        meaningful_ratio=float(round(meaningful_ratio, 3)),
        diversity_ratio=float(round(diversity_ratio, 3)),
        terminator_density=float(round(terminator_density, 3)),
        legal_terms=legal_terms,
        notes=notes,
    )


def score_text(text: str) -> float:
    return assess_text(text).score


def passes_floor(text: str, quality: float) -> bool:
    """Minimum bar below which the summary fallback is preferred."""
    return len(text or "") > settings.PDF_FLOOR_MIN_CHARS and quality > settings.PDF_FLOOR_MIN_QUALITY
