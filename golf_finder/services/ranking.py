"""
Result ordering.

Each policy is a sort key over a course; Python's sort is stable so
courses that tie keep the order the store returned them in. Courses
missing the sorted attribute (unknown year, no open slot on the date)
always go last.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from golf_finder.models import Course
from golf_finder.services.availability import SlotWindow, count_available, match_date

logger = logging.getLogger(__name__)

# Human labels for the policies mentioned in search summaries.
SORT_LABELS: dict[str, str] = {
    "cheapest": "cheapest first",
    "most_expensive": "most expensive first",
    "highest_rated": "highest rated first",
    "most_available": "most tee times available",
}


@dataclass(frozen=True)
class RankContext:
    day: date | None = None
    window: SlotWindow = field(default_factory=SlotWindow)
    desired_time: str | None = None
    # Start of the forward window; earlier tee sheets are not counted.
    today: date | None = None


def value_score(course: Course) -> float:
    """Review stars per 100 units of average green fee."""
    return course.rating_stars * 100 / max(course.average_price, 1.0)


def _asc(value: Any) -> tuple[bool, Any]:
    return (value is None, value if value is not None else 0)


def _desc(value: float | None) -> tuple[bool, float]:
    return (value is None, -value if value is not None else 0)


def _cheapest_on_date(course: Course, ctx: RankContext) -> tuple:
    return _asc(match_date(course, ctx.day, ctx.window).cheapest_available_price)


def _earliest_available(course: Course, ctx: RankContext) -> tuple:
    earliest = match_date(course, ctx.day, ctx.window).earliest_available_time
    return (earliest is None, earliest or "")


def _closest_to_time(course: Course, ctx: RankContext) -> tuple:
    closest = match_date(course, ctx.day, ctx.window).closest_to(ctx.desired_time)
    return (closest is None, closest or (0, 0))


_KEYS: dict[str, Callable[[Course, RankContext], Any]] = {
    "cheapest": lambda c, _: c.average_price,
    "most_expensive": lambda c, _: -c.average_price,
    "highest_rated": lambda c, _: -c.rating_stars,
    "most_available": lambda c, ctx: -count_available(c, since=ctx.today),
    "longest": lambda c, _: -c.yardage,
    "shortest": lambda c, _: c.yardage,
    "newest": lambda c, _: _desc(c.year_built),
    "oldest": lambda c, _: _asc(c.year_built),
    "highest_slope": lambda c, _: _desc(c.slope),
    "best_value": lambda c, _: (-value_score(c), c.average_price, c.name),
    "cheapest_on_date": _cheapest_on_date,
    "earliest_available": _earliest_available,
    "closest_to_time": _closest_to_time,
}

_NEEDS_DATE = frozenset({"cheapest_on_date", "earliest_available", "closest_to_time"})

SORT_POLICIES: frozenset[str] = frozenset(_KEYS)


def rank(courses: list[Course], policy: str | None, context: RankContext | None = None) -> list[Course]:
    """Return *courses* ordered by *policy*. Unknown or unusable policies keep the input order."""
    ctx = context or RankContext()
    if not policy or policy not in _KEYS:
        if policy:
            logger.info("Ignoring unknown sort policy %r", policy)
        return list(courses)
    if policy in _NEEDS_DATE and ctx.day is None:
        logger.info("Sort policy %r needs a date; keeping store order", policy)
        return list(courses)
    if policy == "closest_to_time" and not ctx.desired_time:
        logger.info("Sort policy 'closest_to_time' needs desired_time; keeping store order")
        return list(courses)

    key = _KEYS[policy]
    return sorted(courses, key=lambda c: key(c, ctx))
