"""Unit tests for reply composition"""

import pytest
from datetime import timedelta
from decimal import Decimal

from lunch_ledger.domain.events import derive_events
from lunch_ledger.domain.models import (
    AggregateSnapshot,
    BoughtEvent,
    ChooseRestaurant,
    CostEvent,
    DeclareIn,
    DeclareOut,
    Help,
    InEvent,
    InfoType,
    Meal,
    PersonMeal,
    Reply,
    Restaurant,
    Show,
    SubmitBought,
    SubmitCost,
    SubmitOrder,
    SubmitPayment,
    Unrecognized,
)
from lunch_ledger.domain.replies import (
    NO_RESTAURANT_TEXT,
    NOTHING_OWED_TEXT,
    UNRECOGNIZED_TEXT,
    ReplyComposer,
    compose_replies,
    reply_key,
)
from lunch_ledger.rendering.talk import TextRenderer
from tests.helpers import TODAY, TS


class RecordingRenderer(TextRenderer):
    """Text renderer that remembers which meal summary was requested"""

    def __init__(self):
        super().__init__()
        self.calls = []

    def pre_order_summary(self, meal):
        self.calls.append("pre_order_summary")
        return super().pre_order_summary(meal)

    def post_order_summary(self, meal):
        self.calls.append("post_order_summary")
        return super().post_order_summary(meal)


ECHO_COMMANDS = [
    SubmitPayment(requestor="bob", channel_id="C1", amount=Decimal("5"), to="alice", date=TODAY),
    SubmitBought(requestor="bob", channel_id="C1", amount=Decimal("5"), date=TODAY),
    SubmitCost(requestor="bob", channel_id="C1", amount=Decimal("5"), date=TODAY),
    DeclareIn(requestor="bob", channel_id="C1", date=TODAY),
    DeclareOut(requestor="bob", channel_id="C1", date=TODAY),
    ChooseRestaurant(requestor="bob", channel_id="C1", restaurant=Restaurant(name="Deli"), date=TODAY),
    SubmitOrder(requestor="bob", channel_id="C1", food="soup", date=TODAY),
]

QUERY_INFO_TYPES = list(InfoType)


def test_reply_key():
    assert reply_key(Show(info_type=InfoType.PAY)) == (Show.command_type, InfoType.PAY)
    assert reply_key(DeclareIn(date=TODAY)) == (DeclareIn.command_type, None)


def test_echo_end_to_end_example(composer, empty_snapshot):
    """Test a first purchase echoes exactly the rendering of its one event"""
    command = SubmitBought(requestor="alice", channel_id="C1", amount=Decimal("12.00"), date=TODAY)
    events = derive_events(command, empty_snapshot)

    replies = composer.compose(command, empty_snapshot, events)

    assert replies == [Reply(channel_id="C1", text=TextRenderer().event_to_reply_str(events[0]))]


def test_echo_joins_events_with_newlines(composer, costed_snapshot):
    command = SubmitCost(requestor="bob", channel_id="C1", ts=TS, amount=Decimal("14.00"), date=TODAY)
    events = derive_events(command, costed_snapshot)
    renderer = TextRenderer()

    [reply] = composer.compose(command, costed_snapshot, events)

    assert reply.text == "\n".join(renderer.event_to_reply_str(e) for e in events)
    assert len(reply.text.splitlines()) == 2


@pytest.mark.parametrize("command", ECHO_COMMANDS, ids=lambda c: c.command_type.value)
def test_echo_without_events_sends_nothing(command, composer, costed_snapshot):
    assert composer.compose(command, costed_snapshot, []) == []


@pytest.mark.parametrize("command", ECHO_COMMANDS, ids=lambda c: c.command_type.value)
def test_echo_ignores_snapshot(command, composer, costed_snapshot, balances):
    events = [InEvent(person="bob", date=TODAY)]
    busy = AggregateSnapshot(meals=costed_snapshot.meals, balances=balances)

    assert composer.compose(command, busy, events) == composer.compose(command, AggregateSnapshot(), events)


@pytest.mark.parametrize("info_type", QUERY_INFO_TYPES, ids=lambda i: i.value)
def test_queries_ignore_events(info_type, composer, costed_snapshot, balances):
    snapshot = AggregateSnapshot(meals=costed_snapshot.meals, balances=balances)
    command = Show(requestor="bob", channel_id="C1", info_type=info_type, date=TODAY)
    irrelevant = [BoughtEvent(person="zed", amount=Decimal("99"), date=TODAY)]

    with_events = composer.compose(command, snapshot, irrelevant)

    assert with_events == composer.compose(command, snapshot, [])
    assert len(with_events) == 1
    assert with_events[0].channel_id == "C1"


def test_unrecognized(composer, empty_snapshot):
    replies = composer.compose(Unrecognized(channel_id="C1"), empty_snapshot, [])

    assert replies == [Reply(channel_id="C1", text=UNRECOGNIZED_TEXT)]


def test_help_uses_loader(composer, empty_snapshot):
    assert composer.compose(Help(channel_id="C1"), empty_snapshot, []) == [Reply(channel_id="C1", text="help text")]


def test_help_default_document(empty_snapshot):
    [reply] = ReplyComposer().compose(Help(channel_id="C1"), empty_snapshot, [])

    assert "show balances" in reply.text


def test_show_balances_largest_first(composer, balances):
    [reply] = composer.compose(
        Show(channel_id="C1", info_type=InfoType.BALANCES), AggregateSnapshot(balances=balances), []
    )

    people = [line.split()[0] for line in reply.text.splitlines()]
    assert people == ["alice", "carol", "bob"]


def test_show_pay_suggests_payment(composer, balances):
    [reply] = composer.compose(
        Show(requestor="bob", channel_id="C1", info_type=InfoType.PAY), AggregateSnapshot(balances=balances), []
    )

    assert reply.text == "bob paid alice $15.00"


def test_show_pay_nothing_owed(composer, balances):
    [reply] = composer.compose(
        Show(requestor="alice", channel_id="C1", info_type=InfoType.PAY), AggregateSnapshot(balances=balances), []
    )

    assert reply.text == NOTHING_OWED_TEXT


def test_show_payoffs(composer, balances):
    [reply] = composer.compose(
        Show(channel_id="C1", info_type=InfoType.PAYOFFS), AggregateSnapshot(balances=balances), []
    )

    assert reply.text.splitlines() == ["bob paid alice $15.00", "carol paid alice $10.00"]


def test_show_history_renders_money_events(composer):
    money_events = [BoughtEvent(person="alice", amount=Decimal("30"), date=TODAY)]

    [reply] = composer.compose(
        Show(channel_id="C1", info_type=InfoType.HISTORY), AggregateSnapshot(money_events=money_events), []
    )

    assert reply.text == TextRenderer().recent_money_history(money_events)


def test_meal_summary_post_order_when_bought(costed_snapshot):
    renderer = RecordingRenderer()
    composer = ReplyComposer(renderer=renderer, clock=lambda: TODAY)

    composer.compose(Show(channel_id="C1", info_type=InfoType.MEAL_SUMMARY, date=TODAY), costed_snapshot, [])

    assert "post_order_summary" in renderer.calls


def test_meal_summary_post_order_for_past_date():
    renderer = RecordingRenderer()
    composer = ReplyComposer(renderer=renderer, clock=lambda: TODAY)
    yesterday = TODAY - timedelta(days=1)

    composer.compose(Show(channel_id="C1", info_type=InfoType.MEAL_SUMMARY, date=yesterday), AggregateSnapshot(), [])

    assert "post_order_summary" in renderer.calls


def test_meal_summary_pre_order_before_purchase():
    renderer = RecordingRenderer()
    composer = ReplyComposer(renderer=renderer, clock=lambda: TODAY)
    snapshot = AggregateSnapshot(meals={TODAY: Meal(people={"bob": PersonMeal(status="in", food="soup")})})

    [reply] = composer.compose(Show(channel_id="C1", info_type=InfoType.MEAL_SUMMARY, date=TODAY), snapshot, [])

    assert "pre_order_summary" in renderer.calls
    assert "bob: soup" in reply.text


def test_ordered_requires_chosen_restaurant(composer):
    snapshot = AggregateSnapshot(meals={TODAY: Meal(people={"bob": PersonMeal(status="in")})})

    [reply] = composer.compose(Show(requestor="bob", channel_id="C1", info_type=InfoType.ORDERED), snapshot, [])

    assert reply.text == NO_RESTAURANT_TEXT


def test_ordered_shows_three_most_recent_meals(composer, thai_palace):
    meals = {
        TODAY - timedelta(days=7 * n): Meal(
            chosen_restaurant=thai_palace, people={"bob": PersonMeal(food=f"dish {n}", cost=Decimal("10"))}
        )
        for n in range(0, 5)
    }

    [reply] = composer.compose(
        Show(requestor="bob", channel_id="C1", info_type=InfoType.ORDERED), AggregateSnapshot(meals=meals), []
    )

    lines = reply.text.splitlines()
    assert lines[0] == "Your last meals at Thai Palace:"
    assert len(lines) == 4
    assert "dish 0" in lines[1]


def test_discrepancies_only_lists_discrepant_meals(composer, costed_snapshot):
    balanced_day = TODAY - timedelta(days=1)
    meals = dict(costed_snapshot.meals)
    meals[balanced_day] = Meal(people={"alice": PersonMeal(bought=Decimal("10"), cost=Decimal("10"))})

    [reply] = composer.compose(
        Show(channel_id="C1", info_type=InfoType.DISCREPANCIES), AggregateSnapshot(meals=meals), []
    )

    assert reply.text.splitlines() == ["Wed Jan 10: bought $30.00, cost $27.50"]


def test_unknown_pair_has_no_reply(composer, empty_snapshot):
    class Mystery(Unrecognized):
        command_type = "mystery"

    assert composer.compose(Mystery(channel_id="C1"), empty_snapshot, []) == []


def test_compose_replies_default_composer(empty_snapshot):
    events = [CostEvent(person="bob", amount=Decimal("5.00"), date=TODAY)]

    replies = compose_replies(SubmitCost(channel_id="C9", amount=Decimal("5.00"), date=TODAY), empty_snapshot, events)

    assert [r.channel_id for r in replies] == ["C9"]
