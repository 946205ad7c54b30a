"""docintake/pdf/text_utils.py

Byte/string helpers shared by every extractor:
- latin-1 view of the buffer (one char per byte, no charset guessing)
- PDF string un-escaping + cleanup
- per-fragment validity gate
- ASCIIHex / ASCII85 decoders for stream payloads
"""

import base64
import binascii
import re

from docintake.pdf.vocabulary import has_legal_terms


def as_latin1(buffer: bytes) -> str:
    """PDFs mix binary and ASCII; latin-1 maps every byte to exactly one char."""
    return bytes(buffer or b"").decode("latin-1")


# \n \r \t \b \f \( \) \\ , octal \ddd, line continuation, and "ignore the backslash" for anything else
_ESCAPE_RE = re.compile(r"\\(?:([0-7]{1,3})|(\r\n|\r|\n)|(.))", re.DOTALL)
_SIMPLE_ESCAPES = {"n": "\n", "r": "\r", "t": "\t", "b": "\b", "f": "\f"}

_HEX_STRING_RE = re.compile(r"<([0-9A-Fa-f\s]{2,})>")
_NON_PRINTABLE_RE = re.compile(r"[^\x20-\x7E]")
_WHITESPACE_RE = re.compile(r"\s+")


def _unescape(match: re.Match) -> str:
    octal, newline, char = match.groups()
    if octal is not None:
        return chr(int(octal, 8) & 0xFF)
    if newline is not None:
        return ""
    return _SIMPLE_ESCAPES.get(char, char)


def _decode_hex_run(match: re.Match) -> str:
    digits = re.sub(r"\s+", "", match.group(1))
    if len(digits) % 2:
        # PDF rule: a missing final digit is taken as 0
        digits += "0"
    return binascii.unhexlify(digits).decode("latin-1")


def clean_pdf_text(raw: str) -> str:
    if not raw:
        return ""
    text = _ESCAPE_RE.sub(_unescape, raw)
    text = _HEX_STRING_RE.sub(_decode_hex_run, text)
    text = _NON_PRINTABLE_RE.sub(" ", text)
    return _WHITESPACE_RE.sub(" ", text).strip()


_ALL_CAPS_RE = re.compile(r"^[A-Z\s]{20,}$")
_DIGITS_ONLY_RE = re.compile(r"^\d+$")
_SYMBOLS_ONLY_RE = re.compile(r"^[^\w\s]+$")
_BASE64_RE = re.compile(r"^[A-Za-z0-9+/]{16,}={0,2}$")
_HEXISH_RE = re.compile(r"^[0-9A-Fa-f\s]{8,}$")


def _looks_encoded(text: str) -> bool:
    compact = text.strip()
    if _HEXISH_RE.match(compact) and any(c.isdigit() for c in compact):
        return True
    if _BASE64_RE.match(compact):
        has_digit = any(c.isdigit() for c in compact)
        mixed_case = any(c.isupper() for c in compact) and any(c.islower() for c in compact)
        return has_digit and (mixed_case or "+" in compact or "/" in compact)
    return False


_LETTER_RUN_RE = re.compile(r"[A-Za-z]{2,}")


def word_shape_ratio(text: str) -> float:
    """Share of non-space chars that sit in runs of 2+ letters.

    Prose scores ~0.9; printable noise out of binary data scores ~0.2.
    """
    non_space = sum(1 for c in text if not c.isspace())
    if not non_space:
        return 0.0
    in_words = sum(len(m.group(0)) for m in _LETTER_RUN_RE.finditer(text))
    return in_words / non_space


def is_valid_text_content(text: str) -> bool:
    """Gate applied to every fragment before it is accepted by a strategy."""
    if not text or len(text) < 3:
        return False

    alpha = sum(1 for c in text if c.isascii() and c.isalpha())
    if alpha / len(text) < 0.3:
        return False

    if _DIGITS_ONLY_RE.match(text) or _SYMBOLS_ONLY_RE.match(text):
        return False

    if _looks_encoded(text):
        return False

    # Boilerplate like "CASE NO. 2023-CV-0042" or an all-caps caption is kept as-is
    if has_legal_terms(text):
        return True

    # Long all-caps runs are usually font/glyph names
    if _ALL_CAPS_RE.match(text):
        return False

    return word_shape_ratio(text) >= 0.5


# Operators and file-structure keywords that survive in raw printable runs
PDF_SYNTAX_TOKENS = frozenset(
    "obj endobj stream endstream BT ET Tj TJ Tf Td TD Tm T* Tc Tw Tz TL xref trailer startxref R".split()
)


def strip_pdf_syntax(text: str) -> str:
    """Drop whitespace-separated PDF operator / keyword tokens, keep everything else."""
    return " ".join(t for t in (text or "").split() if t not in PDF_SYNTAX_TOKENS)


def decode_ascii_hex(data: str) -> str:
    """ASCIIHexDecode: hex digit pairs, whitespace ignored, '>' marks EOD."""
    body = data.split(">", 1)[0]
    digits = re.sub(r"[^0-9A-Fa-f]", "", body)
    if len(digits) % 2:
        digits += "0"
    try:
        return binascii.unhexlify(digits).decode("latin-1")
    except (binascii.Error, ValueError):
        return ""


def decode_ascii85(data: str) -> str:
    """ASCII85Decode with Adobe framing; '~>' marks EOD, whitespace ignored."""
    body = data.strip()
    if body.startswith("<~"):
        body = body[2:]
    body = body.split("~>", 1)[0]
    body = re.sub(r"\s+", "", body)
    try:
        return base64.a85decode(body.encode("latin-1")).decode("latin-1")
    except (ValueError, UnicodeEncodeError):
        return ""


def preview(text: str, limit: int = 80) -> str:
    """Short single-line preview for logs."""
    flat = _WHITESPACE_RE.sub(" ", text or "").strip()
    return flat if len(flat) <= limit else flat[:limit] + "..."
