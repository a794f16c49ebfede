"""Shared test constants, fakes and a minimal contribution fold"""

from collections import defaultdict
from datetime import date, datetime
from decimal import Decimal
from typing import Dict, List, Tuple

from lunch_ledger.domain.models import AggregateSnapshot, Event, EventType, Reply


TODAY = date(2024, 1, 10)
TS = datetime(2024, 1, 10, 11, 30)

SIGNS = {
    EventType.BOUGHT: ("bought", 1),
    EventType.UNBOUGHT: ("bought", -1),
    EventType.COST: ("cost", 1),
    EventType.UNCOST: ("cost", -1),
}


def fold_contributions(events: List[Event]) -> Dict[Tuple[str, date, str], Decimal]:
    """Sum signed bought/cost contributions per (person, date, field), dropping zeroes"""
    totals: Dict[Tuple[str, date, str], Decimal] = defaultdict(Decimal)
    for event in events:
        if event.type in SIGNS:
            field, sign = SIGNS[event.type]
            totals[(event.person, event.date, field)] += sign * event.amount
    return {key: amount for key, amount in totals.items() if amount != 0}


class FakeStore:
    def __init__(self):
        self.appended: List[List[Event]] = []

    def append(self, events: List[Event]) -> None:
        self.appended.append(list(events))


class FakeAggregator:
    """Returns queued snapshots in order, repeating the last one"""

    def __init__(self, *snapshots: AggregateSnapshot):
        self.snapshots = list(snapshots) or [AggregateSnapshot()]
        self.calls = 0

    def snapshot(self) -> AggregateSnapshot:
        index = min(self.calls, len(self.snapshots) - 1)
        self.calls += 1
        return self.snapshots[index]


class FakeDelivery:
    def __init__(self, fail: bool = False):
        self.delivered: List[Reply] = []
        self.fail = fail

    def deliver(self, replies: List[Reply]) -> None:
        if self.fail:
            raise ConnectionError("chat platform unavailable")
        self.delivered.extend(replies)
