"""
Per-date tee-sheet matching.

Given a course and a date, pick the slots that satisfy the time, player
and price constraints of a search and derive the aggregates used by the
filters and the date-aware sort policies.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

from golf_finder.models import Course, SearchFilters, TeeSlot

# Named time-of-day buckets, half-open [start, end).
TIME_WINDOWS: dict[str, tuple[str, str]] = {
    "morning": ("06:00", "11:00"),
    "midday": ("11:00", "14:00"),
    "afternoon": ("14:00", "17:00"),
    "twilight": ("17:00", "24:00"),
}


def to_minutes(hhmm: str) -> int:
    hours, minutes = hhmm.split(":")
    return int(hours) * 60 + int(minutes)


@dataclass(frozen=True)
class SlotWindow:
    """Slot-level constraints of a search. Times are inclusive HH:MM bounds."""

    start_time: str | None = None
    end_time: str | None = None
    time_window: str | None = None
    players_min: int | None = None
    price_min: float | None = None
    price_max: float | None = None

    @classmethod
    def from_filters(cls, filters: SearchFilters) -> SlotWindow:
        return cls(
            start_time=filters.start_time,
            end_time=filters.end_time,
            time_window=filters.time_window,
            players_min=filters.players_min,
            price_min=filters.price_on_date_min,
            price_max=filters.price_on_date_max,
        )

    @property
    def is_constrained(self) -> bool:
        return any(
            v is not None
            for v in (
                self.start_time,
                self.end_time,
                self.time_window,
                self.players_min,
                self.price_min,
                self.price_max,
            )
        )

    def accepts(self, slot: TeeSlot) -> bool:
        if self.start_time is not None and slot.time < self.start_time:
            return False
        if self.end_time is not None and slot.time > self.end_time:
            return False
        if self.time_window is not None:
            lo, hi = TIME_WINDOWS[self.time_window]
            if not lo <= slot.time < hi:
                return False
        if self.players_min is not None and slot.players_available < self.players_min:
            return False
        if self.price_min is not None and slot.price < self.price_min:
            return False
        if self.price_max is not None and slot.price > self.price_max:
            return False
        return True


@dataclass(frozen=True)
class DateMatch:
    """Slots of one date that pass a SlotWindow, plus aggregates over the open ones."""

    date: date
    slots: list[TeeSlot] = field(default_factory=list)

    @property
    def available_slots(self) -> list[TeeSlot]:
        return [s for s in self.slots if s.available]

    @property
    def available_count(self) -> int:
        return len(self.available_slots)

    @property
    def cheapest_available_price(self) -> float | None:
        prices = [s.price for s in self.available_slots]
        return min(prices) if prices else None

    @property
    def earliest_available_time(self) -> str | None:
        open_slots = self.available_slots
        return open_slots[0].time if open_slots else None

    def closest_to(self, desired_time: str) -> tuple[int, int] | None:
        """(distance in minutes, slot minutes) of the open slot nearest *desired_time*."""
        target = to_minutes(desired_time)
        candidates = [
            (abs(to_minutes(s.time) - target), to_minutes(s.time))
            for s in self.available_slots
        ]
        return min(candidates) if candidates else None


def match_date(course: Course, day: date, window: SlotWindow | None = None) -> DateMatch:
    """
    Slots of *course* on *day* that satisfy *window*, in time order.

    A course without a tee sheet for the date simply has no slots.
    """
    sheet = course.availability_for(day)
    if sheet is None:
        return DateMatch(date=day)
    window = window or SlotWindow()
    return DateMatch(date=day, slots=[s for s in sheet.tee_times if window.accepts(s)])


def _forward_sheets(course: Course, since: date | None):
    return [sheet for sheet in course.availability if since is None or sheet.date >= since]


def count_available(course: Course, since: date | None = None) -> int:
    """Open slots across the forward window. Sheets dated before *since* are past and ignored."""
    return sum(1 for sheet in _forward_sheets(course, since) for s in sheet.tee_times if s.available)


def has_any_availability(course: Course, since: date | None = None) -> bool:
    return any(s.available for sheet in _forward_sheets(course, since) for s in sheet.tee_times)


_WEEKDAYS = ("mon", "tue", "wed", "thu", "fri", "sat", "sun")


def range_open_on(course: Course, day: date) -> bool:
    """
    Whether the driving range is open on *day*.

    A course without a range is never open. Without hours for that
    weekday the range is taken to be open; "closed" or blank hours mean
    it is shut.
    """
    if not (course.has_amenity("driving_range") or course.has_amenity("range")):
        return False
    hours = (course.range_hours or {}).get(_WEEKDAYS[day.weekday()])
    if hours is None:
        return True
    return bool(hours) and hours.lower() != "closed"
