"""
Request context helpers.

We keep a small context (request_id, document_id) in ContextVars.
The HTTP middleware and the extraction service set these values so every
log line emitted by the PDF pipeline can be correlated to one upload.

No external dependencies.
"""

from __future__ import annotations

from contextvars import ContextVar
from typing import Any, Dict, Optional


_request_id: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
_document_id: ContextVar[Optional[str]] = ContextVar("document_id", default=None)
_filename: ContextVar[Optional[str]] = ContextVar("filename", default=None)


def set_context(
    *,
    request_id: Optional[str] = None,
    document_id: Optional[str] = None,
    filename: Optional[str] = None,
) -> None:
    if request_id is not None:
        _request_id.set(request_id)
    if document_id is not None:
        _document_id.set(document_id)
    if filename is not None:
        _filename.set(filename)


def clear_context() -> None:
    _request_id.set(None)
    _document_id.set(None)
    _filename.set(None)


def get_context() -> Dict[str, Any]:
    ctx: Dict[str, Any] = {}
    rid = _request_id.get()
    did = _document_id.get()
    name = _filename.get()

    if rid:
        ctx["request_id"] = rid
    if did:
        ctx["document_id"] = did
    if name:
        ctx["filename"] = name
    return ctx
