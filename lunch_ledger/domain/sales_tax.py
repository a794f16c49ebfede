"""Sales tax applied to submitted meal costs"""

from dataclasses import replace
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from lunch_ledger.config import settings
from lunch_ledger.domain.models import CostEvent, Meal

CENTS = Decimal("0.01")


def resolve_sales_tax_rate(meal: Optional[Meal], default_rate: Optional[Decimal] = None) -> Decimal:
    """Chosen restaurant's rate for the meal if it has one, else the configured default"""
    restaurant = meal.chosen_restaurant if meal is not None else None
    if restaurant is not None and restaurant.sales_tax_rate is not None:
        return restaurant.sales_tax_rate
    return default_rate if default_rate is not None else settings.default_sales_tax_rate


def calculate_sales_tax(amount: Decimal, rate: Decimal) -> Decimal:
    """
    Tax owed on amount, rounded half-up to cents.

    Example:
        10.00 at 9.25% -> 0.925 -> 0.93
    """
    return (Decimal(amount) * Decimal(rate)).quantize(CENTS, rounding=ROUND_HALF_UP)


def apply_sales_tax(event: CostEvent, plus_tax: bool, rate: Decimal) -> CostEvent:
    """
    Add sales tax to a cost event when the submitting command asked for it.

    The pre-tax amount is kept on pretax_amount. Untaxed events come back unchanged.
    """
    if not plus_tax:
        return event

    tax = calculate_sales_tax(event.amount, rate)
    return replace(event, amount=event.amount + tax, pretax_amount=event.amount)
