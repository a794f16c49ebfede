"""Text rendering of events, balances and meal state for chat replies"""

from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

from lunch_ledger.config import settings
from lunch_ledger.domain import meals as meal_queries
from lunch_ledger.domain.models import (
    Balance,
    BoughtEvent,
    ChooseEvent,
    CostEvent,
    Event,
    InEvent,
    Meal,
    OrderEvent,
    OutEvent,
    PaidEvent,
    PersonMeal,
    Restaurant,
    UnboughtEvent,
    UncostEvent,
)
from lunch_ledger.utils.date_utils import format_date


def format_amount(amount: Optional[Decimal]) -> str:
    """$1,234.50 style; negative amounts keep their sign in front"""
    if amount is None:
        return "-"
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"


class TextRenderer:
    """Plain-text renderer used by the reply composer"""

    def __init__(self, history_limit: int | None = None):
        self.history_limit = history_limit if history_limit is not None else settings.history_limit

    def event_to_str(self, event: Event) -> str:
        """Terse one-line form, e.g. 'alice paid bob $12.00'"""
        person = event.person or "someone"
        if isinstance(event, PaidEvent):
            return f"{person} paid {event.to} {format_amount(event.amount)}"
        if isinstance(event, BoughtEvent):
            return f"{person} bought lunch for {format_amount(event.amount)}"
        if isinstance(event, UnboughtEvent):
            return f"{person} un-bought {format_amount(event.amount)}"
        if isinstance(event, CostEvent):
            return f"{person}'s lunch cost {format_amount(event.amount)}"
        if isinstance(event, UncostEvent):
            return f"{person}'s cost of {format_amount(event.amount)} was removed"
        if isinstance(event, InEvent):
            return f"{person} is in"
        if isinstance(event, OutEvent):
            return f"{person} is out"
        if isinstance(event, ChooseEvent):
            return f"{person} chose {event.restaurant.name}"
        if isinstance(event, OrderEvent):
            return f"{person} ordered {event.food}"
        return f"{person} {event.type.value}"

    def event_to_reply_str(self, event: Event) -> str:
        """Acknowledgement line for an event just recorded"""
        text = self.event_to_str(event)
        event_date = getattr(event, "date", None)
        if event_date is not None:
            text = f"{text} on {format_date(event_date)}"
        if isinstance(event, CostEvent) and event.pretax_amount is not None:
            text = f"{text} ({format_amount(event.pretax_amount)} plus tax)"
        return text

    def balances_to_str(self, balances: List[Balance]) -> str:
        if not balances:
            return "Nobody owes anything."
        width = max(len(b.person) for b in balances)
        return "\n".join(f"{b.person.ljust(width)}  {format_amount(b.amount)}" for b in balances)

    def payoffs_to_str(self, payoffs: List[PaidEvent]) -> str:
        if not payoffs:
            return "Everyone is settled up."
        return "\n".join(self.event_to_str(p) for p in payoffs)

    def recent_money_history(self, money_events: List[Event]) -> str:
        if not money_events:
            return "No money has changed hands yet."
        recent = money_events[-self.history_limit:]
        return "\n".join(self.event_to_reply_str(e) for e in recent)

    def pre_order_summary(self, meal: Optional[Meal]) -> str:
        """Who's in, who's out and what they ordered, before anyone has paid"""
        if meal is None:
            return "Nothing planned yet."
        lines = [f"Restaurant: {meal.chosen_restaurant.name if meal.chosen_restaurant else 'not chosen'}"]
        ins = sorted(p for p, pm in meal.people.items() if pm.status == "in")
        outs = sorted(p for p, pm in meal.people.items() if pm.status == "out")
        lines.append(f"In: {', '.join(ins) if ins else 'nobody'}")
        if outs:
            lines.append(f"Out: {', '.join(outs)}")
        for person in ins:
            food = meal.people[person].food
            if food:
                lines.append(f"  {person}: {food}")
        return "\n".join(lines)

    def post_order_summary(self, meal: Optional[Meal]) -> str:
        """Purchases against individual costs, once the meal is paid for"""
        if meal is None:
            return "No meal was recorded."
        lines = []
        for person, pm in sorted(meal.people.items()):
            if pm.bought is not None:
                lines.append(f"{person} bought {format_amount(pm.bought)}")
        for person, pm in sorted(meal.people.items()):
            if pm.cost is not None:
                lines.append(f"{person} cost {format_amount(pm.cost)}")
        lines.append(
            f"Total bought {format_amount(meal_queries.total_bought(meal))}, "
            f"total cost {format_amount(meal_queries.total_cost(meal))}"
        )
        return "\n".join(lines)

    def person_meal_history(self, history: List[Tuple[date, PersonMeal]], restaurant: Restaurant) -> str:
        if not history:
            return f"You haven't eaten at {restaurant.name} yet."
        lines = [f"Your last meals at {restaurant.name}:"]
        for meal_date, pm in history:
            lines.append(f"{format_date(meal_date)}: {pm.food or '?'} ({format_amount(pm.cost)})")
        return "\n".join(lines)

    def discrepant_meals_summary(self, meals: Dict[date, Meal]) -> str:
        if not meals:
            return "No discrepancies."
        lines = []
        for meal_date, meal in sorted(meals.items()):
            lines.append(
                f"{format_date(meal_date)}: bought {format_amount(meal_queries.total_bought(meal))}, "
                f"cost {format_amount(meal_queries.total_cost(meal))}"
            )
        return "\n".join(lines)
