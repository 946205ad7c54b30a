"""docintake/pdf/budget.py

Cooperative time budget for the extraction pipeline.

A Deadline is created once per document and handed to every stage. Stages
poll it at fixed points (between patterns, between streams, every few KB)
and stop early when it is exhausted. Nothing is pre-empted: a single regex
scan can still overrun, which is why strategies also carry hard match caps.

The clock is injectable so timeout paths can be tested without sleeping.
A threading.Event can be attached so a caller (e.g. an upload that was
aborted) can cancel work in flight.
"""

from __future__ import annotations

import threading
import time
from typing import Callable, Optional

Clock = Callable[[], float]


class Deadline:
    def __init__(
        self,
        budget_seconds: float,
        *,
        clock: Clock = time.monotonic,
        cancel_event: Optional[threading.Event] = None,
    ):
        self.budget_seconds = max(0.0, float(budget_seconds))
        self.clock = clock
        self.cancel_event = cancel_event
        self.started_at = clock()

    def elapsed(self) -> float:
        return max(0.0, self.clock() - self.started_at)

    def remaining(self) -> float:
        return max(0.0, self.budget_seconds - self.elapsed())

    def expired(self) -> bool:
        return self.elapsed() >= self.budget_seconds

    def cancelled(self) -> bool:
        return self.cancel_event is not None and self.cancel_event.is_set()

    def exhausted(self) -> bool:
        return self.cancelled() or self.expired()

    def cancel(self) -> None:
        if self.cancel_event is None:
            self.cancel_event = threading.Event()
        self.cancel_event.set()

    def child(self, seconds: float) -> "Deadline":
        """Sub-budget for one stage: never outlives the parent, shares its cancel signal."""
        if self.cancel_event is None:
            # children must observe a later cancel() on the parent
            self.cancel_event = threading.Event()
        return Deadline(
            min(float(seconds), self.remaining()),
            clock=self.clock,
            cancel_event=self.cancel_event,
        )

    def __repr__(self) -> str:
        return f"Deadline(budget={self.budget_seconds:.3f}s, elapsed={self.elapsed():.3f}s, cancelled={self.cancelled()})"


def unbounded() -> Deadline:
    """Deadline for direct strategy calls outside the orchestrator (tests, scripts)."""
    return Deadline(float("inf"))
