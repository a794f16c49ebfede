"""Domain models - pure Python dataclasses representing commands, events and aggregate state"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import ClassVar, Dict, List, Optional


class CommandType(str, Enum):
    SUBMIT_PAYMENT = "submit-payment"
    SUBMIT_BOUGHT = "submit-bought"
    SUBMIT_COST = "submit-cost"
    DECLARE_IN = "declare-in"
    DECLARE_OUT = "declare-out"
    CHOOSE_RESTAURANT = "choose-restaurant"
    SUBMIT_ORDER = "submit-order"
    SHOW = "show"
    HELP = "help"
    UNRECOGNIZED = "unrecognized"


class InfoType(str, Enum):
    """Second-level tag for show commands"""

    BALANCES = "balances"
    PAY = "pay?"
    PAYOFFS = "payoffs"
    HISTORY = "history"
    MEAL_SUMMARY = "meal-summary"
    ORDERED = "ordered?"
    DISCREPANCIES = "discrepancies"


class EventType(str, Enum):
    PAID = "paid"
    BOUGHT = "bought"
    UNBOUGHT = "unbought"
    COST = "cost"
    UNCOST = "uncost"
    IN = "in"
    OUT = "out"
    CHOOSE = "choose"
    ORDER = "order"


@dataclass(frozen=True)
class Restaurant:
    """Restaurant a meal is ordered from; may override the default sales tax rate"""

    name: str
    sales_tax_rate: Optional[Decimal] = None


# Commands


@dataclass(frozen=True, kw_only=True)
class Command:
    """User request to be interpreted. Variants carry only their own payload."""

    command_type: ClassVar[CommandType]

    requestor: Optional[str] = None
    ts: Optional[datetime] = None
    channel_id: Optional[str] = None


@dataclass(frozen=True, kw_only=True)
class SubmitPayment(Command):
    command_type = CommandType.SUBMIT_PAYMENT

    amount: Decimal
    to: str
    date: date


@dataclass(frozen=True, kw_only=True)
class SubmitBought(Command):
    command_type = CommandType.SUBMIT_BOUGHT

    amount: Decimal
    date: date


@dataclass(frozen=True, kw_only=True)
class SubmitCost(Command):
    command_type = CommandType.SUBMIT_COST

    amount: Decimal
    date: date
    plus_tax: bool = False


@dataclass(frozen=True, kw_only=True)
class DeclareIn(Command):
    command_type = CommandType.DECLARE_IN

    date: date


@dataclass(frozen=True, kw_only=True)
class DeclareOut(Command):
    command_type = CommandType.DECLARE_OUT

    date: date


@dataclass(frozen=True, kw_only=True)
class ChooseRestaurant(Command):
    command_type = CommandType.CHOOSE_RESTAURANT

    restaurant: Restaurant
    date: date


@dataclass(frozen=True, kw_only=True)
class SubmitOrder(Command):
    command_type = CommandType.SUBMIT_ORDER

    food: str
    date: date


@dataclass(frozen=True, kw_only=True)
class Show(Command):
    command_type = CommandType.SHOW

    info_type: InfoType
    date: Optional[date] = None


@dataclass(frozen=True, kw_only=True)
class Help(Command):
    command_type = CommandType.HELP


@dataclass(frozen=True, kw_only=True)
class Unrecognized(Command):
    command_type = CommandType.UNRECOGNIZED


# Events


@dataclass(frozen=True, kw_only=True)
class Event:
    """Immutable, append-only fact. Corrections are new reversal events."""

    type: ClassVar[EventType]

    person: Optional[str] = None
    ts: Optional[datetime] = None


@dataclass(frozen=True, kw_only=True)
class PaidEvent(Event):
    type = EventType.PAID

    amount: Decimal
    to: str
    date: Optional[date] = None


@dataclass(frozen=True, kw_only=True)
class BoughtEvent(Event):
    type = EventType.BOUGHT

    amount: Decimal
    date: date


@dataclass(frozen=True, kw_only=True)
class UnboughtEvent(Event):
    type = EventType.UNBOUGHT

    amount: Decimal
    date: date


@dataclass(frozen=True, kw_only=True)
class CostEvent(Event):
    type = EventType.COST

    amount: Decimal
    date: date
    pretax_amount: Optional[Decimal] = None  # Set only when sales tax was applied


@dataclass(frozen=True, kw_only=True)
class UncostEvent(Event):
    type = EventType.UNCOST

    amount: Decimal
    date: date


@dataclass(frozen=True, kw_only=True)
class InEvent(Event):
    type = EventType.IN

    date: date


@dataclass(frozen=True, kw_only=True)
class OutEvent(Event):
    type = EventType.OUT

    date: date


@dataclass(frozen=True, kw_only=True)
class ChooseEvent(Event):
    type = EventType.CHOOSE

    restaurant: Restaurant
    date: date


@dataclass(frozen=True, kw_only=True)
class OrderEvent(Event):
    type = EventType.ORDER

    food: str
    date: date


# Aggregate state (produced by the external aggregator, read-only here)


@dataclass(frozen=True)
class PersonMeal:
    """One person's current contribution to a meal"""

    bought: Optional[Decimal] = None
    cost: Optional[Decimal] = None
    food: Optional[str] = None
    status: Optional[str] = None  # "in" | "out"


@dataclass(frozen=True)
class Meal:
    chosen_restaurant: Optional[Restaurant] = None
    people: Dict[str, PersonMeal] = field(default_factory=dict)


@dataclass(frozen=True)
class Balance:
    """Net amount for a person: positive means they are owed, negative means they owe"""

    person: str
    amount: Decimal


@dataclass(frozen=True)
class AggregateSnapshot:
    """Point-in-time view folded from all events before the current command"""

    meals: Dict[date, Meal] = field(default_factory=dict)
    balances: List[Balance] = field(default_factory=list)
    money_events: List[Event] = field(default_factory=list)

    def meal(self, meal_date: Optional[date]) -> Optional[Meal]:
        return self.meals.get(meal_date) if meal_date is not None else None

    def person_meal(self, meal_date: Optional[date], person: Optional[str]) -> Optional[PersonMeal]:
        meal = self.meal(meal_date)
        if meal is None or person is None:
            return None
        return meal.people.get(person)


@dataclass(frozen=True)
class Reply:
    """Outbound message addressed to a channel"""

    channel_id: Optional[str]
    text: str
