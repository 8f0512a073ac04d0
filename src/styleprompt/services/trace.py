"""Side-channel collection of structured decision events."""

from __future__ import annotations

from typing import Optional, Sequence
from uuid import uuid4

from ..app.models import TraceDecisionEvent, TraceSelection

MAX_TRACE_CANDIDATES = 32


class TraceCollector:
    """Records one event per decision for a single generation run."""

    def __init__(self, run_id: Optional[str] = None) -> None:
        self.run_id = run_id or uuid4().hex[:12]
        self.events: list[TraceDecisionEvent] = []

    def add_decision_event(
        self,
        *,
        domain: str,
        key: str,
        branch_taken: str,
        why: str,
        selection: Optional[TraceSelection] = None,
    ) -> TraceDecisionEvent:
        event = TraceDecisionEvent(
            id=f"{self.run_id}.{len(self.events) + 1}",
            domain=domain,
            key=key,
            branch_taken=branch_taken,
            why=why,
            selection=selection,
        )
        self.events.append(event)
        return event

    def by_domain(self, domain: str) -> list[TraceDecisionEvent]:
        return [event for event in self.events if event.domain == domain]


def trace_decision(
    trace: Optional[TraceCollector],
    *,
    domain: str,
    key: str,
    branch_taken: str,
    why: str,
    method: Optional[str] = None,
    chosen_index: Optional[int] = None,
    candidates: Sequence[str] = (),
) -> None:
    if trace is None:
        return
    selection = None
    if method is not None:
        selection = TraceSelection(
            method=method,
            chosen_index=chosen_index,
            candidates=list(candidates)[:MAX_TRACE_CANDIDATES],
        )
    trace.add_decision_event(
        domain=domain,
        key=key,
        branch_taken=branch_taken,
        why=why,
        selection=selection,
    )
