"""Day-by-day grouping of a meal plan's meals for calendar display"""

from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, List, Mapping, Sequence, Union


@dataclass
class MealCalendar:
    days: Dict[str, List[Mapping[str, Any]]]
    start_date: str
    end_date: str


def _iso(value: Union[date, str]) -> str:
    return value.isoformat() if isinstance(value, date) else str(value)


def group_meals_by_date(
    meals: Sequence[Mapping[str, Any]], plan_date: Union[date, str]
) -> MealCalendar:
    """
    Bucket meals by their ISO ``date``; meals without one use ``plan_date``.

    Keys are sorted ascending and the range spans the first and last key.
    With no meals the result holds a single empty bucket for ``plan_date``.
    """
    fallback = _iso(plan_date)
    buckets: Dict[str, List[Mapping[str, Any]]] = {}

    for meal in meals:
        day = meal.get("date") or fallback
        buckets.setdefault(_iso(day), []).append(meal)

    if not buckets:
        buckets[fallback] = []

    keys = sorted(buckets)
    return MealCalendar(
        days={key: buckets[key] for key in keys},
        start_date=keys[0],
        end_date=keys[-1],
    )
