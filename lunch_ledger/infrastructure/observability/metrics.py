"""Prometheus metrics for monitoring command volume, derived events and replies"""

from typing import Iterable

from prometheus_client import Counter, Histogram

from lunch_ledger.domain.models import Event, EventType

# Command metrics
command_counter = Counter(
    "lunch_ledger_commands_total",
    "Total commands processed",
    ["command_type", "outcome"],  # outcome: ok | failed
)

command_duration_histogram = Histogram(
    "lunch_ledger_command_duration_seconds",
    "End-to-end command processing time",
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0],
)

# Event metrics
events_derived_counter = Counter(
    "lunch_ledger_events_derived_total",
    "Events derived from commands",
    ["type"],  # paid | bought | unbought | cost | uncost | in | out | choose | order
)

reversal_counter = Counter(
    "lunch_ledger_reversals_total",
    "Reversal events emitted to correct a prior contribution",
    ["type"],  # unbought | uncost
)

# Reply metrics
replies_composed_counter = Counter(
    "lunch_ledger_replies_composed_total",
    "Replies composed for commands",
    ["command_type"],
)


def record_events(events: Iterable[Event]) -> None:
    """Count derived events by type, tracking reversals separately"""
    for event in events:
        events_derived_counter.labels(type=event.type.value).inc()
        if event.type in (EventType.UNBOUGHT, EventType.UNCOST):
            reversal_counter.labels(type=event.type.value).inc()


def record_command(command_type: str, succeeded: bool) -> None:
    outcome = "ok" if succeeded else "failed"
    command_counter.labels(command_type=command_type, outcome=outcome).inc()
