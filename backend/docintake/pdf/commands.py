"""docintake/pdf/commands.py

Data-driven matching of PDF text-showing commands.

One table of TextPattern entries, most specific first, and one scanner that
walks a pattern over the latin-1 text, cleans + validates each capture and
de-duplicates by source position: a region already captured by a
higher-priority pattern is never captured again by a broader one.

All regexes use bounded repetition so a single match attempt stays linear
even on multi-megabyte binary garbage.
"""

import bisect
import logging
import re
from dataclasses import dataclass
from typing import Callable, Iterator

from docintake.pdf.budget import Deadline
from docintake.pdf.text_utils import clean_pdf_text, is_valid_text_content, word_shape_ratio

logger = logging.getLogger("docintake.pdf.commands")

# Literal string body: (...) with escapes and one level of balanced, unescaped parens, bounded
_STRING_CHAR = r"(?:[^()\\]|\\.)"
_STRING_BODY = r"(?:%s|\(%s{0,256}\)){1,1024}" % (_STRING_CHAR, _STRING_CHAR)
_HEX_BODY = r"<[0-9A-Fa-f\s]{2,2048}>"

MAX_TEXT_BLOCK = 8192
BT_BLOCK_RE = re.compile(r"\bBT\b(.{1,%d}?)\bET\b" % MAX_TEXT_BLOCK, re.DOTALL)

_SHOW_RE = re.compile(r"\((" + _STRING_BODY + r")\)\s*(?:Tj|'|\")", re.DOTALL)
# <48656C6C6F> Tj, kept with its brackets so clean_pdf_text decodes it
_HEX_SHOW_RE = re.compile(r"(" + _HEX_BODY + r")\s*(?:Tj|'|\")")
_ARRAY_RE = re.compile(r"\[([^\[\]]{1,4096})\]\s*TJ", re.DOTALL)

# How often (in matches) the scanner polls the deadline
DEADLINE_POLL_EVERY = 64


_ARRAY_ELEMENT_RE = re.compile(r"\((" + _STRING_BODY + r")\)|(" + _HEX_BODY + r")", re.DOTALL)


def _join_array(array_body: str) -> str:
    # Elements of a TJ array are one run of text split by kerning numbers.
    # Raw bodies are concatenated first so escapes are decoded exactly once.
    return "".join(m.group(1) if m.group(1) is not None else m.group(2) for m in _ARRAY_ELEMENT_RE.finditer(array_body))


def clean_tj_array(array_body: str) -> str:
    return clean_pdf_text(_join_array(array_body))


def clean_text_block(block: str) -> str:
    """All shown strings inside one BT ... ET block, in source order."""
    parts: list[tuple[int, str]] = []
    covered: list[tuple[int, int]] = []
    for m in _ARRAY_RE.finditer(block):
        covered.append(m.span())
        parts.append((m.start(), clean_tj_array(m.group(1))))
    for regex in (_SHOW_RE, _HEX_SHOW_RE):
        for m in regex.finditer(block):
            if any(s <= m.start() < e for s, e in covered):
                continue
            parts.append((m.start(), clean_pdf_text(m.group(1))))
    parts.sort(key=lambda p: p[0])
    return " ".join(p for _, p in parts if p)


@dataclass(frozen=True)
class TextPattern:
    name: str
    regex: re.Pattern
    min_length: int = 3
    cleaner: Callable[[str], str] = clean_pdf_text
    validator: Callable[[str], bool] = is_valid_text_content


_WHOLE_WORD_RE = re.compile(r"\b[A-Za-z]{3,}\b")


def is_prose_fragment(text: str) -> bool:
    """Stricter gate for parenthesised text outside any show operator: two whole words, little else."""
    return (
        is_valid_text_content(text)
        and word_shape_ratio(text) >= 0.7
        and len(_WHOLE_WORD_RE.findall(text)) >= 2
    )


TEXT_COMMAND_PATTERNS: tuple[TextPattern, ...] = (
    # Full text blocks with show operators inside
    TextPattern("bt_block", BT_BLOCK_RE, cleaner=clean_text_block),
    # (string) Tj / ' / "
    TextPattern("show_string", _SHOW_RE),
    # <hex> Tj / ' / "
    TextPattern("hex_show", _HEX_SHOW_RE),
    # x y Td (string)
    TextPattern(
        "positioned",
        re.compile(r"(?:-?[\d.]+\s+){2}T[dD]\s*\((" + _STRING_BODY + r")\)", re.DOTALL),
    ),
    # /F1 12 Tf ... (string)
    TextPattern(
        "font_scoped",
        re.compile(r"/[A-Za-z][\w.+-]{0,63}\s+[\d.]+\s+Tf[^()\[\]]{0,64}\((" + _STRING_BODY + r")\)", re.DOTALL),
    ),
    # [(Hel) -20 (lo)] TJ
    TextPattern("tj_array", _ARRAY_RE, cleaner=clean_tj_array),
    # Catch-all: any parenthesised run of 5+ chars
    TextPattern("parenthetical", re.compile(r"\(([^()]{5,512})\)"), min_length=5, validator=is_prose_fragment),
)


class SpanSet:
    """Disjoint, sorted source spans already consumed by a pattern."""

    def __init__(self):
        self._starts: list[int] = []
        self._ends: list[int] = []

    def overlaps(self, start: int, end: int) -> bool:
        i = bisect.bisect_right(self._starts, start)
        if i > 0 and self._ends[i - 1] > start:
            return True
        return i < len(self._starts) and self._starts[i] < end

    def add(self, start: int, end: int) -> bool:
        if self.overlaps(start, end):
            return False
        i = bisect.bisect_right(self._starts, start)
        self._starts.insert(i, start)
        self._ends.insert(i, end)
        return True

    def __len__(self) -> int:
        return len(self._starts)


def scan_pattern(
    text: str,
    pattern: TextPattern,
    *,
    spans: SpanSet,
    max_matches: int,
    deadline: Deadline,
) -> Iterator[str]:
    """Yield cleaned, valid fragments for one pattern.

    Stops after `max_matches` regex matches (accepted or not) or when the
    deadline is exhausted. Callers may stop iterating at any time.
    """
    examined = 0
    for m in pattern.regex.finditer(text):
        examined += 1
        if examined > max_matches:
            logger.debug("pdf.pattern_cap", extra={"pattern": pattern.name, "max_matches": max_matches})
            return
        if examined % DEADLINE_POLL_EVERY == 0 and deadline.exhausted():
            return

        start, end = m.span()
        if spans.overlaps(start, end):
            continue

        fragment = pattern.cleaner(m.group(1))
        if len(fragment) < pattern.min_length or not pattern.validator(fragment):
            continue

        spans.add(start, end)
        yield fragment


def extract_fragments(
    text: str,
    patterns: tuple[TextPattern, ...] = TEXT_COMMAND_PATTERNS,
    *,
    max_matches: int,
    deadline: Deadline,
    limit: int | None = None,
) -> list[str]:
    """Run every pattern in priority order over `text` and collect fragments."""
    spans = SpanSet()
    fragments: list[str] = []
    for pattern in patterns:
        if deadline.exhausted():
            break
        for fragment in scan_pattern(text, pattern, spans=spans, max_matches=max_matches, deadline=deadline):
            fragments.append(fragment)
            if limit is not None and len(fragments) >= limit:
                return fragments
    return fragments
