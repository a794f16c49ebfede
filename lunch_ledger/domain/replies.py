"""Reply composition - formulates the replies to send back for a command"""

from datetime import date
from typing import Callable, Dict, List, Optional, Protocol, Tuple

from lunch_ledger.config import settings
from lunch_ledger.domain import meals as meal_queries
from lunch_ledger.domain import money
from lunch_ledger.domain.models import (
    AggregateSnapshot,
    Balance,
    Command,
    CommandType,
    Event,
    InfoType,
    Meal,
    PaidEvent,
    PersonMeal,
    Reply,
    Restaurant,
)
from lunch_ledger.rendering.help import load_help_text
from lunch_ledger.rendering.talk import TextRenderer
from lunch_ledger.utils.date_utils import Clock, is_past, today

UNRECOGNIZED_TEXT = "huh?"
NOTHING_OWED_TEXT = "Keep your money."
NO_RESTAURANT_TEXT = "Somebody needs to choose a restaurant first."

ECHO_COMMAND_TYPES = (
    CommandType.SUBMIT_PAYMENT,
    CommandType.SUBMIT_BOUGHT,
    CommandType.SUBMIT_COST,
    CommandType.DECLARE_IN,
    CommandType.DECLARE_OUT,
    CommandType.CHOOSE_RESTAURANT,
    CommandType.SUBMIT_ORDER,
)

ReplyKey = Tuple[CommandType, Optional[InfoType]]


class Renderer(Protocol):
    """Turns domain objects into display strings"""

    def event_to_str(self, event: Event) -> str: ...

    def event_to_reply_str(self, event: Event) -> str: ...

    def balances_to_str(self, balances: List[Balance]) -> str: ...

    def payoffs_to_str(self, payoffs: List[PaidEvent]) -> str: ...

    def recent_money_history(self, money_events: List[Event]) -> str: ...

    def pre_order_summary(self, meal: Optional[Meal]) -> str: ...

    def post_order_summary(self, meal: Optional[Meal]) -> str: ...

    def person_meal_history(self, history: List[Tuple[date, PersonMeal]], restaurant: Restaurant) -> str: ...

    def discrepant_meals_summary(self, meals: Dict[date, Meal]) -> str: ...


def reply_key(command: Command) -> ReplyKey:
    """Dispatch key: command type plus info type (None for everything but show)"""
    return command.command_type, getattr(command, "info_type", None)


def standard_replies(command: Command, text: Optional[str]) -> List[Reply]:
    """A single reply directed at the channel the command came in on; none for empty text"""
    if not text:
        return []
    return [Reply(channel_id=command.channel_id, text=text)]


class ReplyComposer:
    """
    Routes a command to the handler that answers it.

    Echo handlers render only the events just derived for the command.
    Query handlers read only the aggregate snapshot.
    """

    def __init__(
        self,
        renderer: Renderer | None = None,
        help_loader: Callable[[], str] | None = None,
        clock: Clock = today,
        person_meal_history_limit: int | None = None,
    ):
        self.renderer = renderer or TextRenderer()
        self.help_loader = help_loader or load_help_text
        self.clock = clock
        self.person_meal_history_limit = (
            person_meal_history_limit
            if person_meal_history_limit is not None
            else settings.person_meal_history_limit
        )

        self._handlers: Dict[ReplyKey, Callable[[Command, AggregateSnapshot, List[Event]], List[Reply]]] = {
            (CommandType.UNRECOGNIZED, None): self._unrecognized,
            (CommandType.HELP, None): self._help,
            (CommandType.SHOW, InfoType.BALANCES): self._show_balances,
            (CommandType.SHOW, InfoType.PAY): self._show_pay,
            (CommandType.SHOW, InfoType.PAYOFFS): self._show_payoffs,
            (CommandType.SHOW, InfoType.HISTORY): self._show_history,
            (CommandType.SHOW, InfoType.MEAL_SUMMARY): self._show_meal_summary,
            (CommandType.SHOW, InfoType.ORDERED): self._show_ordered,
            (CommandType.SHOW, InfoType.DISCREPANCIES): self._show_discrepancies,
        }
        for command_type in ECHO_COMMAND_TYPES:
            self._handlers[(command_type, None)] = self._echo_events

    def compose(self, command: Command, snapshot: AggregateSnapshot, events: List[Event]) -> List[Reply]:
        """Replies for the command; unknown (command type, info type) pairs get none"""
        handler = self._handlers.get(reply_key(command))
        if handler is None:
            return []
        return handler(command, snapshot, events)

    # Echo family

    def _echo_events(self, command: Command, snapshot: AggregateSnapshot, events: List[Event]) -> List[Reply]:
        text = "\n".join(self.renderer.event_to_reply_str(event) for event in events)
        return standard_replies(command, text)

    # Fixed replies

    def _unrecognized(self, command: Command, snapshot: AggregateSnapshot, events: List[Event]) -> List[Reply]:
        return standard_replies(command, UNRECOGNIZED_TEXT)

    def _help(self, command: Command, snapshot: AggregateSnapshot, events: List[Event]) -> List[Reply]:
        return standard_replies(command, self.help_loader())

    # Query family

    def _show_balances(self, command: Command, snapshot: AggregateSnapshot, events: List[Event]) -> List[Reply]:
        ordered = list(reversed(money.sort_balances(snapshot.balances)))
        return standard_replies(command, self.renderer.balances_to_str(ordered))

    def _show_pay(self, command: Command, snapshot: AggregateSnapshot, events: List[Event]) -> List[Reply]:
        payment = money.best_payment(command.requestor, snapshot.balances)
        if payment is None:
            return standard_replies(command, NOTHING_OWED_TEXT)
        return standard_replies(command, self.renderer.event_to_str(payment))

    def _show_payoffs(self, command: Command, snapshot: AggregateSnapshot, events: List[Event]) -> List[Reply]:
        payoffs = money.minimal_payoffs(snapshot.balances)
        return standard_replies(command, self.renderer.payoffs_to_str(payoffs))

    def _show_history(self, command: Command, snapshot: AggregateSnapshot, events: List[Event]) -> List[Reply]:
        return standard_replies(command, self.renderer.recent_money_history(snapshot.money_events))

    def _show_meal_summary(self, command: Command, snapshot: AggregateSnapshot, events: List[Event]) -> List[Reply]:
        meal_date = getattr(command, "date", None)
        meal = snapshot.meal(meal_date)
        if is_past(meal_date, self.clock) or meal_queries.any_bought(meal):
            text = self.renderer.post_order_summary(meal)
        else:
            text = self.renderer.pre_order_summary(meal)
        return standard_replies(command, text)

    def _show_ordered(self, command: Command, snapshot: AggregateSnapshot, events: List[Event]) -> List[Reply]:
        todays_meal = snapshot.meal(self.clock())
        restaurant = todays_meal.chosen_restaurant if todays_meal is not None else None
        if restaurant is None:
            return standard_replies(command, NO_RESTAURANT_TEXT)

        history = meal_queries.person_meal_history(
            snapshot.meals, restaurant, command.requestor, self.person_meal_history_limit
        )
        return standard_replies(command, self.renderer.person_meal_history(history, restaurant))

    def _show_discrepancies(self, command: Command, snapshot: AggregateSnapshot, events: List[Event]) -> List[Reply]:
        discrepant = {d: meal for d, meal in snapshot.meals.items() if meal_queries.is_discrepant(meal)}
        return standard_replies(command, self.renderer.discrepant_meals_summary(discrepant))


def compose_replies(
    command: Command,
    snapshot: AggregateSnapshot,
    events: List[Event],
    composer: ReplyComposer | None = None,
) -> List[Reply]:
    """Main entry point: replies for a command using the default text renderer"""
    return (composer or ReplyComposer()).compose(command, snapshot, events)
