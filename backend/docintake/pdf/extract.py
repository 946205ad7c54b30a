"""docintake/pdf/extract.py

Deterministic PDF -> text extraction, no PDF library.

Strategies, in priority order (first one that clears its bar wins):
1) text objects     (quality > 0.30)
2) streams          (quality > 0.25)
3) raw text scan    (quality > 0.20)
4) character codes  (quality > 0.15)
5) summary fallback

The whole run shares one Deadline. A strategy is only started if enough
budget is left; otherwise the best candidate seen so far is returned. This
function never raises.
"""

import dataclasses
import logging
from dataclasses import dataclass
from typing import Callable, Sequence

from docintake.core.config import settings
from docintake.pdf.budget import Deadline
from docintake.pdf.extractors import char_codes, raw_text, streams, text_objects
from docintake.pdf.fallback import build_summary
from docintake.pdf.quality import passes_floor
from docintake.pdf.structure import analyze_structure
from docintake.pdf.types import ExtractionMethod, ExtractionResult, StructureAnalysis

logger = logging.getLogger("docintake.pdf.extract")

StrategyFn = Callable[[bytes, StructureAnalysis, Deadline], ExtractionResult]


@dataclass(frozen=True)
class Strategy:
    method: ExtractionMethod
    run: StrategyFn
    accept_above: float  # quality bar for short-circuit acceptance


def default_strategies() -> list[Strategy]:
    # Resolved at call time so tests can monkeypatch the extractor modules
    return [
        Strategy(ExtractionMethod.TEXT_OBJECTS, text_objects.extract, 0.3),
        Strategy(ExtractionMethod.STREAMS, streams.extract, 0.25),
        Strategy(ExtractionMethod.RAW_TEXT_SCAN, raw_text.extract, 0.2),
        Strategy(ExtractionMethod.CHARACTER_CODES, char_codes.extract, 0.15),
    ]


def _is_acceptable(result: ExtractionResult, bar: float) -> bool:
    return result.quality > bar and len(result.text) >= settings.PDF_MIN_ACCEPT_CHARS


def _rank(result: ExtractionResult) -> tuple[float, int]:
    return (result.quality, len(result.text))


def _with_note(result: ExtractionResult, note: str) -> ExtractionResult:
    return dataclasses.replace(result, notes=(*result.notes, note))


def _run_strategy(strategy: Strategy, data: bytes, structure: StructureAnalysis, deadline: Deadline) -> ExtractionResult:
    try:
        return strategy.run(data, structure, deadline)
    except Exception as e:
        # strategies catch their own faults; this is the last line for anything injected
        logger.warning("pdf.strategy_failed", extra={"strategy": strategy.method.value, "error": repr(e)}, exc_info=True)
        return ExtractionResult.empty(strategy.method, structure.estimated_page_count, note=f"{strategy.method.value} failed: {type(e).__name__}")


def _finalize(
    data: bytes,
    structure: StructureAnalysis,
    best: ExtractionResult | None,
    attempted: list[ExtractionMethod],
    reason: str | None,
) -> ExtractionResult:
    if best is not None and passes_floor(best.text, best.quality):
        logger.info(
            "pdf.best_candidate",
            extra={"strategy": best.method.value, "quality": best.quality, "chars": len(best.text), "reason": reason},
        )
        note = f"Best available candidate ({best.method.value}); no strategy cleared its bar"
        if reason:
            note = f"{note}; {reason}"
        return _with_note(best, note)
    return build_summary(data, structure, attempted, reason=reason)


def _run_pipeline(data: bytes, deadline: Deadline, strategies: Sequence[Strategy]) -> ExtractionResult:
    if not data:
        return build_summary(data, StructureAnalysis.empty(), [], reason="Empty PDF buffer")

    structure = analyze_structure(data, deadline)

    attempted: list[ExtractionMethod] = []
    best: ExtractionResult | None = None
    reason: str | None = None

    for strategy in strategies:
        if deadline.cancelled():
            reason = f"Cancelled before {strategy.method.value}"
            break
        if deadline.remaining() < settings.PDF_MIN_STAGE_SECONDS:
            reason = f"Time budget exhausted before {strategy.method.value}"
            break

        result = _run_strategy(strategy, data, structure, deadline)
        attempted.append(strategy.method)

        if _is_acceptable(result, strategy.accept_above):
            logger.info(
                "pdf.accepted",
                extra={
                    "strategy": strategy.method.value,
                    "quality": result.quality,
                    "confidence": result.confidence,
                    "chars": len(result.text),
                },
            )
            return _with_note(result, f"Accepted {strategy.method.value} (quality {result.quality:.2f} > {strategy.accept_above:.2f})")

        if best is None or _rank(result) > _rank(best):
            best = result

    if reason:
        logger.warning("pdf.stopped_early", extra={"reason": reason, "attempted": [m.value for m in attempted]})

    return _finalize(data, structure, best, attempted, reason)


def extract_text_from_bytes(
    pdf_bytes: bytes,
    *,
    deadline: Deadline | None = None,
    filename: str | None = None,
    strategies: Sequence[Strategy] | None = None,
) -> ExtractionResult:
    """Best-effort plain text for an uploaded PDF buffer.

    `filename` is only used for log correlation. Pass a Deadline to control
    the budget, inject a clock, or cancel from another thread.
    """
    data = bytes(pdf_bytes or b"")
    deadline = deadline or Deadline(settings.PDF_TOTAL_BUDGET_SECONDS)
    strategies = default_strategies() if strategies is None else list(strategies)

    logger.info("pdf.extract_start", extra={"bytes": len(data), "upload_name": filename, "budget_s": deadline.budget_seconds})

    try:
        result = _run_pipeline(data, deadline, strategies)
    except Exception as e:
        logger.exception("pdf.extract_failed", extra={"bytes": len(data)})
        result = build_summary(data, StructureAnalysis.empty(len(data)), [], reason=f"Extraction error: {type(e).__name__}")

    logger.info(
        "pdf.extract_done",
        extra={
            "method": result.method.value,
            "quality": result.quality,
            "confidence": result.confidence,
            "pages": result.page_count,
            "chars": len(result.text),
            "elapsed_s": round(deadline.elapsed(), 3),
        },
    )
    return result
