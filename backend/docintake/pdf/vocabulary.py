"""docintake/pdf/vocabulary.py

Legal-document vocabulary shared by the quality scorer and the fragment gate.

Exact matches of these terms are a stronger "this is real text" signal for
our uploads (discovery requests, filings, correspondence) than any generic
lexical statistic.
"""

import re

LEGAL_TERMS = [
    "REQUEST FOR PRODUCTION",
    "REQUESTS FOR PRODUCTION",
    "REQUEST FOR ADMISSION",
    "DISCOVERY",
    "INTERROGATORY",
    "INTERROGATORIES",
    "DEFENDANT",
    "PLAINTIFF",
    "PETITIONER",
    "RESPONDENT",
    "COURT",
    "CASE",
    "CASE NO",
    "CAUSE NO",
    "MOTION",
    "DEPOSITION",
    "SUBPOENA",
    "AFFIDAVIT",
    "ATTORNEY",
    "COUNSEL",
    "LAW FIRM",
    "LEGAL",
    "PETITION",
    "HEREBY",
    "RESPECTFULLY SUBMITTED",
]

# Longest first so "CASE NO" wins over "CASE" in findall()
_LEGAL_TERMS_RE = re.compile(
    r"\b(?:" + "|".join(re.escape(t).replace(r"\ ", r"\s+") for t in sorted(LEGAL_TERMS, key=len, reverse=True)) + r")\b",
    re.IGNORECASE,
)


def has_legal_terms(text: str) -> bool:
    return bool(text) and _LEGAL_TERMS_RE.search(text) is not None


def find_legal_terms(text: str) -> list[str]:
    """Distinct legal terms found, upper-cased, in order of first appearance."""
    seen: list[str] = []
    for m in _LEGAL_TERMS_RE.finditer(text or ""):
        term = " ".join(m.group(0).upper().split())
        if term not in seen:
            seen.append(term)
    return seen
