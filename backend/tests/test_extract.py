import random
import threading
import time

import pytest

from docintake.core.config import settings
from docintake.pdf import extract as extract_module
from docintake.pdf.budget import Deadline
from docintake.pdf.extract import Strategy, default_strategies, extract_text_from_bytes
from docintake.pdf.types import ExtractionMethod, ExtractionResult


def _result(method, text, quality, confidence=0.5):
    return ExtractionResult(text=text, method=method, quality=quality, confidence=confidence, page_count=1)


class Recorder:
    """Fake strategy that counts calls and returns a canned result."""

    def __init__(self, method, text="", quality=0.0, on_call=None):
        self.method = method
        self.text = text
        self.quality = quality
        self.on_call = on_call
        self.calls = 0

    def __call__(self, data, structure, deadline):
        self.calls += 1
        if self.on_call:
            self.on_call(deadline)
        return _result(self.method, self.text, self.quality)

    def strategy(self, bar):
        return Strategy(self.method, self, bar)


def _assert_in_range(result):
    assert result.method in ExtractionMethod
    assert 0.0 <= result.quality <= 1.0
    assert 0.0 <= result.confidence <= 1.0
    assert result.page_count >= 1


def test_default_strategy_order_and_bars():
    strategies = default_strategies()
    assert [s.method for s in strategies] == [
        ExtractionMethod.TEXT_OBJECTS,
        ExtractionMethod.STREAMS,
        ExtractionMethod.RAW_TEXT_SCAN,
        ExtractionMethod.CHARACTER_CODES,
    ]
    assert [s.accept_above for s in strategies] == [0.3, 0.25, 0.2, 0.15]


def test_hello_world_pdf(sample_pdf):
    result = extract_text_from_bytes(sample_pdf)
    assert result.method is ExtractionMethod.TEXT_OBJECTS
    assert result.text == "Hello World"
    assert result.quality == pytest.approx(0.607, abs=1e-3)
    assert result.confidence == 0.8
    assert result.page_count == 1
    assert not result.is_scanned
    assert result.notes[-1].startswith("Accepted text-objects")


def test_legal_boilerplate_is_recovered_from_raw_bytes():
    data = b"\x8f\x00" + b"REQUEST FOR PRODUCTION " * 40 + b"\xff\xfe"
    result = extract_text_from_bytes(data)
    assert result.method is ExtractionMethod.RAW_TEXT_SCAN
    assert "REQUEST FOR PRODUCTION" in result.text
    assert result.quality >= 0.7


def test_empty_buffer_returns_summary():
    result = extract_text_from_bytes(b"")
    assert result.method is ExtractionMethod.FALLBACK_SUMMARY
    assert result.quality == 0.5
    assert result.confidence == 0.6
    assert result.page_count == 1
    assert "Empty PDF buffer" in result.notes


def test_none_is_treated_as_empty():
    assert extract_text_from_bytes(None).method is ExtractionMethod.FALLBACK_SUMMARY


def test_same_input_same_output(sample_pdf):
    assert extract_text_from_bytes(sample_pdf) == extract_text_from_bytes(sample_pdf)


def test_first_acceptable_strategy_short_circuits(sample_pdf):
    first = Recorder(ExtractionMethod.TEXT_OBJECTS, "plenty of readable text here", 0.9)
    second = Recorder(ExtractionMethod.STREAMS, "other text", 0.9)

    result = extract_text_from_bytes(sample_pdf, strategies=[first.strategy(0.3), second.strategy(0.25)])

    assert result.method is ExtractionMethod.TEXT_OBJECTS
    assert first.calls == 1
    assert second.calls == 0


def test_short_text_is_not_accepted_even_with_high_quality(sample_pdf):
    first = Recorder(ExtractionMethod.TEXT_OBJECTS, "tiny", 0.9)
    second = Recorder(ExtractionMethod.STREAMS, "stream text long enough to accept", 0.5)

    result = extract_text_from_bytes(sample_pdf, strategies=[first.strategy(0.3), second.strategy(0.25)])

    assert result.method is ExtractionMethod.STREAMS
    assert first.calls == 1
    assert second.calls == 1


def test_best_candidate_above_floor_is_kept(sample_pdf):
    low = Recorder(ExtractionMethod.TEXT_OBJECTS, "alpha beta gamma delta epsilon zeta", 0.12)
    lower = Recorder(ExtractionMethod.STREAMS, "short", 0.05)

    result = extract_text_from_bytes(sample_pdf, strategies=[low.strategy(0.3), lower.strategy(0.25)])

    assert result.method is ExtractionMethod.TEXT_OBJECTS
    assert result.text == "alpha beta gamma delta epsilon zeta"
    assert result.notes[-1].startswith("Best available candidate (text-objects)")


def test_candidates_below_floor_fall_back_to_summary(sample_pdf):
    weak = Recorder(ExtractionMethod.TEXT_OBJECTS, "alpha beta gamma delta epsilon zeta", 0.05)

    result = extract_text_from_bytes(sample_pdf, strategies=[weak.strategy(0.3)])

    assert result.method is ExtractionMethod.FALLBACK_SUMMARY
    assert "- Text object extraction (BT/ET, Tj/TJ operators)" in result.text


def test_budget_exhaustion_skips_remaining_strategies(sample_pdf, clock):
    slow = Recorder(ExtractionMethod.TEXT_OBJECTS, "short", 0.05, on_call=lambda d: clock.advance(14.5))
    never = Recorder(ExtractionMethod.STREAMS, "would be accepted by now", 0.9)

    result = extract_text_from_bytes(
        sample_pdf,
        deadline=Deadline(15.0, clock=clock),
        strategies=[slow.strategy(0.3), never.strategy(0.25)],
    )

    assert never.calls == 0
    assert result.method is ExtractionMethod.FALLBACK_SUMMARY
    assert "Time budget exhausted before streams" in result.notes


def test_cancel_before_start(sample_pdf):
    event = threading.Event()
    event.set()
    first = Recorder(ExtractionMethod.TEXT_OBJECTS, "plenty of readable text here", 0.9)

    result = extract_text_from_bytes(
        sample_pdf,
        deadline=Deadline(15.0, cancel_event=event),
        strategies=[first.strategy(0.3)],
    )

    assert first.calls == 0
    assert result.method is ExtractionMethod.FALLBACK_SUMMARY
    assert "Cancelled before text-objects" in result.notes


def test_cancel_between_strategies(sample_pdf):
    first = Recorder(ExtractionMethod.TEXT_OBJECTS, "short", 0.05, on_call=lambda d: d.cancel())
    second = Recorder(ExtractionMethod.STREAMS, "would be accepted", 0.9)

    result = extract_text_from_bytes(sample_pdf, strategies=[first.strategy(0.3), second.strategy(0.25)])

    assert second.calls == 0
    assert "Cancelled before streams" in result.notes


def test_failing_strategy_does_not_abort_pipeline(sample_pdf):
    def broken(data, structure, deadline):
        raise RuntimeError("corrupt object table")

    good = Recorder(ExtractionMethod.STREAMS, "stream text long enough to accept", 0.5)

    result = extract_text_from_bytes(
        sample_pdf,
        strategies=[Strategy(ExtractionMethod.TEXT_OBJECTS, broken, 0.3), good.strategy(0.25)],
    )

    assert result.method is ExtractionMethod.STREAMS
    assert good.calls == 1


def test_unexpected_pipeline_error_returns_summary(monkeypatch, sample_pdf):
    def boom(*args, **kwargs):
        raise MemoryError("structure scan")

    monkeypatch.setattr(extract_module, "analyze_structure", boom)
    result = extract_text_from_bytes(sample_pdf)

    assert result.method is ExtractionMethod.FALLBACK_SUMMARY
    assert "Extraction error: MemoryError" in result.notes


def test_default_strategies_can_be_monkeypatched(monkeypatch, sample_pdf):
    calls = []

    def fake_text_objects(data, structure, deadline):
        calls.append("text-objects")
        return _result(ExtractionMethod.TEXT_OBJECTS, "", 0.0)

    monkeypatch.setattr(extract_module.text_objects, "extract", fake_text_objects)
    result = extract_text_from_bytes(sample_pdf)

    assert calls == ["text-objects"]
    # Next in line reads the same uncompressed content stream
    assert result.method is ExtractionMethod.STREAMS
    assert result.text == "Hello World"


@pytest.mark.parametrize(
    "data",
    [
        b"%PDF-1.4\n%%EOF",
        b"\x00" * 1024,
        b"BT ET" * 100,
        b"(((((((((((",
        b"1 0 obj << /Length 10 >> stream\n",
    ],
)
def test_results_are_always_in_range(data):
    _assert_in_range(extract_text_from_bytes(data))


def _assert_low_quality(result):
    _assert_in_range(result)
    assert result.method is ExtractionMethod.FALLBACK_SUMMARY or result.quality <= 0.3
    assert result.confidence <= 0.6


def test_random_bytes_are_not_mistaken_for_text():
    _assert_low_quality(extract_text_from_bytes(random.Random(1).randbytes(1024 * 1024)))


@pytest.mark.slow
def test_large_random_buffer_finishes_within_budget():
    data = random.Random(20240101).randbytes(20 * 1024 * 1024)

    started = time.monotonic()
    result = extract_text_from_bytes(data)
    elapsed = time.monotonic() - started

    _assert_low_quality(result)
    # Stages poll cooperatively; one in-flight scan may run a little past the budget
    assert elapsed < settings.PDF_TOTAL_BUDGET_SECONDS + 3.0


def test_same_input_same_output_with_frozen_clock(sample_pdf):
    for data in (
        sample_pdf,
        b"\x8f\x00" + b"REQUEST FOR PRODUCTION " * 40 + b"\xff\xfe",
        b"%PDF-1.7\n1 0 obj << /Filter /FlateDecode >> endobj\n" + b"\x9c\x01" * 500,
    ):
        first = extract_text_from_bytes(data, deadline=Deadline(15.0, clock=lambda: 0.0))
        second = extract_text_from_bytes(data, deadline=Deadline(15.0, clock=lambda: 0.0))
        assert first == second


def test_hex_show_strings_are_read_by_text_objects(sample_pdf):
    data = sample_pdf.replace(b"(Hello World)", b"<48656C6C6F20576F726C64>")
    result = extract_text_from_bytes(data)
    assert result.method is ExtractionMethod.TEXT_OBJECTS
    assert result.text == "Hello World"
