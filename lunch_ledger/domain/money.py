"""Balance arithmetic - ordering balances and suggesting payments that settle them"""

from decimal import Decimal
from typing import List, Optional

from lunch_ledger.domain.models import Balance, PaidEvent

ZERO = Decimal("0")


def sort_balances(balances: List[Balance]) -> List[Balance]:
    """Sort balances ascending by amount (biggest debtor first), ties by person"""
    return sorted(balances, key=lambda b: (b.amount, b.person))


def best_payment(person: str, balances: List[Balance]) -> Optional[PaidEvent]:
    """
    Single most useful payment for a person to make.

    A person who owes money pays the largest creditor, never more than
    either side of the debt. Returns None when the person owes nothing
    or nobody is owed.
    """
    own = next((b for b in balances if b.person == person), None)
    if own is None or own.amount >= ZERO:
        return None

    creditors = [b for b in balances if b.amount > ZERO and b.person != person]
    if not creditors:
        return None

    creditor = max(creditors, key=lambda b: (b.amount, b.person))
    amount = min(-own.amount, creditor.amount)
    return PaidEvent(person=person, to=creditor.person, amount=amount)


def minimal_payoffs(balances: List[Balance]) -> List[PaidEvent]:
    """
    Payments that settle every balance.

    Greedy: repeatedly match the largest debtor with the largest creditor
    and pay the smaller of the two amounts. Each payment zeroes at least
    one side, so there are at most len(balances) - 1 payments.
    """
    debts = {b.person: -b.amount for b in balances if b.amount < ZERO}
    credits = {b.person: b.amount for b in balances if b.amount > ZERO}

    payoffs: List[PaidEvent] = []
    while debts and credits:
        debtor = max(debts, key=lambda p: (debts[p], p))
        creditor = max(credits, key=lambda p: (credits[p], p))
        amount = min(debts[debtor], credits[creditor])

        payoffs.append(PaidEvent(person=debtor, to=creditor, amount=amount))

        debts[debtor] -= amount
        credits[creditor] -= amount
        if debts[debtor] == ZERO:
            del debts[debtor]
        if credits[creditor] == ZERO:
            del credits[creditor]

    return payoffs
