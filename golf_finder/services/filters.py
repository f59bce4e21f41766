"""
Course filter predicates.

Every filter in SearchFilters maps to one predicate below; a course is
accepted only when all predicates pass. Filters left unset are ignored,
and boolean amenity/badge filters only constrain when set to True.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date

from golf_finder.models import Course, SearchFilters
from golf_finder.services.availability import SlotWindow, has_any_availability, match_date, range_open_on

logger = logging.getLogger(__name__)

# filter key -> amenity names that satisfy it
AMENITY_FILTERS: dict[str, tuple[str, ...]] = {
    "spa": ("spa",),
    "putting_green": ("putting_green", "practice_putting_green"),
    "driving_range": ("driving_range",),
    "has_range": ("driving_range", "range"),
    "club_rentals": ("club_rentals",),
    "cart_rentals": ("cart_rentals",),
    "restaurant": ("restaurant",),
    "bar": ("bar",),
    "pro_shop": ("pro_shop",),
    "locker_rooms": ("locker_rooms",),
    "practice_bunker": ("practice_bunker",),
    "chipping_green": ("chipping_green", "chipping_area"),
    "golf_lessons": ("golf_lessons", "lessons"),
    "club_fitting": ("club_fitting",),
    "event_space": ("event_space",),
    "lodging": ("lodging",),
}

BADGE_FILTERS: tuple[str, ...] = ("top_public", "best_in_state")

Predicate = Callable[[Course, SearchFilters], bool]


def _in_range(value: float | None, lo: float | None, hi: float | None) -> bool:
    if lo is None and hi is None:
        return True
    if value is None:
        return False
    if lo is not None and value < lo:
        return False
    if hi is not None and value > hi:
        return False
    return True


def _contains(haystack: str | None, needle: str) -> bool:
    return needle.casefold() in (haystack or "").casefold()


# ── Attribute predicates ──────────────────────────────────────────────────


def _classification(course: Course, f: SearchFilters) -> bool:
    if f.type and course.type != f.type:
        return False
    if f.types and course.type not in f.types:
        return False
    if f.holes_in and course.holes not in f.holes_in:
        return False
    return True


def _physical(course: Course, f: SearchFilters) -> bool:
    return (
        _in_range(course.par, f.par_min, f.par_max)
        and _in_range(course.yardage, f.yardage_min, f.yardage_max)
        and _in_range(course.slope, f.slope_min, f.slope_max)
        and _in_range(course.rating, f.course_rating_min, f.course_rating_max)
        and _in_range(course.year_built, f.year_built_min, f.year_built_max)
    )


def _price(course: Course, f: SearchFilters) -> bool:
    return _in_range(course.average_price, f.min_price, f.max_price)


def _text(course: Course, f: SearchFilters) -> bool:
    if f.designer and not _contains(course.designer, f.designer):
        return False
    if f.local_rules_contains and not _contains(course.local_rules, f.local_rules_contains):
        return False
    if f.search_text:
        corpus = " ".join(
            part or "" for part in (course.name, course.description, course.city, course.designer)
        )
        if not _contains(corpus, f.search_text):
            return False
    return True


def _amenities(course: Course, f: SearchFilters) -> bool:
    for key, names in AMENITY_FILTERS.items():
        if getattr(f, key) and not any(course.has_amenity(n) for n in names):
            return False
    return True


def _trust(course: Course, f: SearchFilters) -> bool:
    if f.verified and not course.verified:
        return False
    for badge in BADGE_FILTERS:
        if getattr(f, badge) and badge not in course.badges:
            return False
    if f.min_rating is not None and course.rating_stars < f.min_rating:
        return False
    if f.min_reviews is not None and course.reviews_count < f.min_reviews:
        return False
    return True


ATTRIBUTE_PREDICATES: tuple[Predicate, ...] = (
    _classification,
    _physical,
    _price,
    _text,
    _amenities,
    _trust,
)


# ── Availability predicates ───────────────────────────────────────────────


def _availability(course: Course, f: SearchFilters, day: date | None, today: date | None) -> bool:
    if f.has_availability_any and not has_any_availability(course, since=today):
        return False
    if day is None:
        return True
    if f.range_open_on_date and not range_open_on(course, day):
        return False

    window = SlotWindow.from_filters(f)
    if window.is_constrained:
        return match_date(course, day, window).available_count > 0
    if f.include_unavailable is False:
        return match_date(course, day).available_count > 0
    return True


# ── Public API ────────────────────────────────────────────────────────────


def accepts(
    course: Course,
    filters: SearchFilters,
    day: date | None = None,
    today: date | None = None,
) -> bool:
    """
    True when *course* passes every filter for the resolved *day*.

    *today* bounds the forward window: tee sheets dated before it are past.
    """
    if not all(pred(course, filters) for pred in ATTRIBUTE_PREDICATES):
        return False
    return _availability(course, filters, day, today)


def apply_filters(
    courses: list[Course],
    filters: SearchFilters,
    day: date | None = None,
    today: date | None = None,
) -> list[Course]:
    kept = [c for c in courses if accepts(c, filters, day, today)]
    logger.debug("Filters kept %d of %d courses", len(kept), len(courses))
    return kept
