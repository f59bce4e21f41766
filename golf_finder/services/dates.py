"""Relative date tokens ("today", "this_weekend", ...) resolved to calendar dates."""

from __future__ import annotations

from datetime import date, timedelta

from golf_finder.errors import InvalidDate

SATURDAY = 5
SUNDAY = 6

# token -> (weekday, roll past today)
_WEEKDAY_TOKENS: dict[str, tuple[int, bool]] = {
    "this_saturday": (SATURDAY, False),
    "this_sunday": (SUNDAY, False),
    "next_saturday": (SATURDAY, True),
    "next_sunday": (SUNDAY, True),
}

_ALIASES = {
    "this_weekend": "this_saturday",
    "next_weekend": "next_saturday",
}

RELATIVE_DATE_TOKENS: frozenset[str] = frozenset(
    {"today", "tomorrow", *_WEEKDAY_TOKENS, *_ALIASES}
)


def days_until(weekday: int, today: date) -> int:
    """Days from *today* to the next *weekday* (0 when today is that day)."""
    return (weekday - today.weekday()) % 7


def resolve_relative_date(token: str, today: date | None = None) -> date:
    """
    Map a relative date token onto a concrete date.

    ``this_<day>`` is the coming instance of that weekday, today included.
    ``next_<day>`` uses the same offset but never lands on today: when
    today is that weekday it moves a week ahead.
    """
    today = today or date.today()
    key = _ALIASES.get(token.strip().lower(), token.strip().lower())

    if key == "today":
        return today
    if key == "tomorrow":
        return today + timedelta(days=1)
    if key not in _WEEKDAY_TOKENS:
        raise InvalidDate(
            f"Unknown relative date '{token}'",
            details={"allowed": sorted(RELATIVE_DATE_TOKENS)},
        )

    weekday, roll = _WEEKDAY_TOKENS[key]
    offset = days_until(weekday, today)
    if roll and offset == 0:
        offset = 7
    return today + timedelta(days=offset)


def resolve_search_date(
    literal: date | None,
    relative: str | None,
    today: date | None = None,
) -> date | None:
    """Pick the date a search refers to. A literal date wins over a token."""
    if literal is not None:
        return literal
    if relative:
        return resolve_relative_date(relative, today)
    return None
