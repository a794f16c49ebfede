"""Meal queries over aggregate meal records"""

from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

from lunch_ledger.domain.models import Meal, PersonMeal, Restaurant


def any_bought(meal: Optional[Meal]) -> bool:
    """True if anyone has recorded a purchase for the meal"""
    if meal is None:
        return False
    return any(p.bought is not None for p in meal.people.values())


def total_bought(meal: Meal) -> Decimal:
    return sum((p.bought for p in meal.people.values() if p.bought is not None), Decimal("0"))


def total_cost(meal: Meal) -> Decimal:
    return sum((p.cost for p in meal.people.values() if p.cost is not None), Decimal("0"))


def is_discrepant(meal: Meal) -> bool:
    """
    A meal is discrepant when purchases and costs have been recorded but
    the amount bought doesn't match the sum of individual costs.
    """
    if not any_bought(meal):
        return False
    if not any(p.cost is not None for p in meal.people.values()):
        return False
    return total_bought(meal) != total_cost(meal)


def person_meal_history(
    meals: Dict[date, Meal],
    restaurant: Restaurant,
    person: str,
    limit: int,
) -> List[Tuple[date, PersonMeal]]:
    """Person's most recent meals at a restaurant, newest first, at most limit entries"""
    history = [
        (meal_date, meal.people[person])
        for meal_date, meal in meals.items()
        if meal.chosen_restaurant is not None
        and meal.chosen_restaurant.name == restaurant.name
        and person in meal.people
    ]
    history.sort(key=lambda item: item[0], reverse=True)
    return history[:limit]
