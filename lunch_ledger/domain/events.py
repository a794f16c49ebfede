"""Event derivation - converts commands into the events to append to the event stream"""

import logging
from typing import Callable, Dict, List, Type, TypeVar

from lunch_ledger.domain.models import (
    AggregateSnapshot,
    BoughtEvent,
    ChooseEvent,
    ChooseRestaurant,
    Command,
    CommandType,
    CostEvent,
    DeclareIn,
    DeclareOut,
    Event,
    InEvent,
    OrderEvent,
    OutEvent,
    PaidEvent,
    SubmitBought,
    SubmitCost,
    SubmitOrder,
    SubmitPayment,
    UnboughtEvent,
    UncostEvent,
)
from lunch_ledger.domain.sales_tax import apply_sales_tax, resolve_sales_tax_rate

E = TypeVar("E", bound=Event)

EventHandler = Callable[[Command, AggregateSnapshot], List[Event]]


def make_event(command: Command, event_cls: Type[E], **fields) -> E:
    """
    Build an event stamped with the command's requestor and timestamp.

    An explicit person in fields overrides the requestor.
    """
    stamp = {}
    if command.requestor is not None:
        stamp["person"] = command.requestor
    if command.ts is not None:
        stamp["ts"] = command.ts
    stamp.update(fields)
    return event_cls(**stamp)


def _submit_payment(command: SubmitPayment, snapshot: AggregateSnapshot) -> List[Event]:
    return [make_event(command, PaidEvent, amount=command.amount, to=command.to, date=command.date)]


def _submit_bought(command: SubmitBought, snapshot: AggregateSnapshot) -> List[Event]:
    events: List[Event] = []
    previous = snapshot.person_meal(command.date, command.requestor)
    if previous is not None and previous.bought is not None:
        events.append(make_event(command, UnboughtEvent, amount=previous.bought, date=command.date))
    events.append(make_event(command, BoughtEvent, amount=command.amount, date=command.date))
    return events


def _submit_cost(command: SubmitCost, snapshot: AggregateSnapshot) -> List[Event]:
    events: List[Event] = []
    previous = snapshot.person_meal(command.date, command.requestor)
    if previous is not None and previous.cost is not None:
        events.append(make_event(command, UncostEvent, amount=previous.cost, date=command.date))

    rate = resolve_sales_tax_rate(snapshot.meal(command.date))
    cost_event = make_event(command, CostEvent, amount=command.amount, date=command.date)
    events.append(apply_sales_tax(cost_event, command.plus_tax, rate))
    return events


def _declare_in(command: DeclareIn, snapshot: AggregateSnapshot) -> List[Event]:
    return [make_event(command, InEvent, date=command.date)]


def _declare_out(command: DeclareOut, snapshot: AggregateSnapshot) -> List[Event]:
    events: List[Event] = []
    previous = snapshot.person_meal(command.date, command.requestor)
    if previous is not None and previous.cost is not None:
        events.append(make_event(command, UncostEvent, amount=previous.cost, date=command.date))
    events.append(make_event(command, OutEvent, date=command.date))
    return events


def _choose_restaurant(command: ChooseRestaurant, snapshot: AggregateSnapshot) -> List[Event]:
    """
    Choose the restaurant for a date.

    Re-choosing the current restaurant is a no-op. Switching restaurants
    invalidates every recorded cost, so each one is reversed (against the
    person who recorded it) before the choose event.
    """
    meal = snapshot.meal(command.date)
    if meal is not None and meal.chosen_restaurant == command.restaurant:
        return []

    events: List[Event] = []
    if meal is not None:
        for person, person_meal in meal.people.items():
            if person_meal.cost is not None:
                events.append(
                    make_event(command, UncostEvent, amount=person_meal.cost, date=command.date, person=person)
                )
    events.append(make_event(command, ChooseEvent, restaurant=command.restaurant, date=command.date))
    return events


def _submit_order(command: SubmitOrder, snapshot: AggregateSnapshot) -> List[Event]:
    return [make_event(command, OrderEvent, food=command.food, date=command.date)]


EVENT_HANDLERS: Dict[CommandType, EventHandler] = {
    CommandType.SUBMIT_PAYMENT: _submit_payment,
    CommandType.SUBMIT_BOUGHT: _submit_bought,
    CommandType.SUBMIT_COST: _submit_cost,
    CommandType.DECLARE_IN: _declare_in,
    CommandType.DECLARE_OUT: _declare_out,
    CommandType.CHOOSE_RESTAURANT: _choose_restaurant,
    CommandType.SUBMIT_ORDER: _submit_order,
}


def derive_events(command: Command, snapshot: AggregateSnapshot) -> List[Event]:
    """
    Main entry point: convert a command into the events it produces, if any.

    Any replaced value is first reversed with an unbought/uncost event
    carrying the previously recorded amount, so folding the stream by
    summing signed contributions stays correct under resubmission.
    Queries and unknown command types produce no events.
    """
    handler = EVENT_HANDLERS.get(command.command_type)
    if handler is None:
        return []

    events = handler(command, snapshot)
    logging.debug(
        "Derived events",
        extra={
            "command_type": command.command_type.value,
            "requestor": command.requestor,
            "event_types": [event.type.value for event in events],
        },
    )
    return events
