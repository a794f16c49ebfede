"""Pytest fixtures for testing"""

import pytest
from datetime import date
from decimal import Decimal
from typing import List

from lunch_ledger.domain.models import AggregateSnapshot, Balance, Meal, PersonMeal, Restaurant
from lunch_ledger.domain.replies import ReplyComposer
from tests.helpers import TODAY


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def thai_palace() -> Restaurant:
    return Restaurant(name="Thai Palace", sales_tax_rate=Decimal("0.08"))


@pytest.fixture
def empty_snapshot() -> AggregateSnapshot:
    return AggregateSnapshot()


@pytest.fixture
def costed_snapshot(thai_palace: Restaurant) -> AggregateSnapshot:
    """Today's meal at Thai Palace with two recorded costs and one purchase"""
    meal = Meal(
        chosen_restaurant=thai_palace,
        people={
            "alice": PersonMeal(bought=Decimal("30.00"), cost=Decimal("12.00"), status="in"),
            "bob": PersonMeal(cost=Decimal("15.50"), food="pad thai", status="in"),
            "carol": PersonMeal(status="in"),
        },
    )
    return AggregateSnapshot(meals={TODAY: meal})


@pytest.fixture
def balances() -> List[Balance]:
    return [
        Balance(person="alice", amount=Decimal("25.00")),
        Balance(person="bob", amount=Decimal("-15.00")),
        Balance(person="carol", amount=Decimal("-10.00")),
    ]


@pytest.fixture
def composer() -> ReplyComposer:
    """Composer with a fixed clock and an in-memory help document"""
    return ReplyComposer(help_loader=lambda: "help text", clock=lambda: TODAY)
