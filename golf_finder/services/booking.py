"""
Tee-time booking validation.

Checks a requested slot against the course's tee sheet (live from the
provider when it has a real-time API, the stored snapshot otherwise) and
returns priced, capacity-checked booking data plus a link to finish the
booking with the course or its tee-sheet provider. Nothing is reserved
here.
"""

from __future__ import annotations

import logging
from datetime import date

import httpx

from golf_finder.config import BOOKING_FALLBACK_URL
from golf_finder.errors import InvalidInput, StorageError
from golf_finder.models import BookingResult, Course
from golf_finder.services.course_store import CourseStore
from golf_finder.services.teefox import LiveTeeSheets

logger = logging.getLogger(__name__)

MAX_PLAYERS = 4

# provider -> booking page template
PROVIDER_URLS: dict[str, str] = {
    "teefox": "https://www.teefox.com/book/{provider_id}",
    "teebox": "https://www.teebox.com/book/{provider_id}",
    "foretees": "https://foreupsoftware.com/index.php/booking/{provider_id}",
    "chronogolf": "https://www.chronogolf.com/club/{provider_id}",
    "teesnap": "https://www.teesnap.com/public/book/{provider_id}",
}


def booking_base_url(course: Course) -> str:
    """Provider page, then the course website, then our own fallback page."""
    if course.booking_provider and course.provider_id:
        template = PROVIDER_URLS.get(course.booking_provider.lower())
        if template:
            return template.format(provider_id=course.provider_id)
    if course.website:
        website = course.website.strip()
        return website if "://" in website else f"https://{website}"
    return f"{BOOKING_FALLBACK_URL.rstrip('/')}/{course.id}"


def build_booking_link(
    course: Course,
    players: int,
    day: date | None = None,
    time: str | None = None,
) -> str:
    params: dict[str, str | int] = {"courseId": course.id, "players": players}
    if day is not None:
        params["date"] = day.isoformat()
    if time:
        params["time"] = time
    return str(httpx.URL(booking_base_url(course)).copy_merge_params(params))


def check_booking(
    course: Course,
    day: date | None = None,
    time: str | None = None,
    players: int = 2,
) -> BookingResult:
    """Validate a booking request against *course*'s tee sheet."""
    if not 1 <= players <= MAX_PLAYERS:
        raise InvalidInput(f"players must be between 1 and {MAX_PLAYERS}", details={"players": players})

    common = dict(
        course_id=course.id,
        course_name=course.name,
        date=day,
        time=time,
        players=players,
        booking_link=build_booking_link(course, players, day, time),
        contact=course.contact,
    )

    slot = None
    if day is not None and time:
        sheet = course.availability_for(day)
        if sheet is not None:
            slot = next((s for s in sheet.tee_times if s.time == time), None)

    if slot is None:
        return BookingResult(
            status="unconfirmed",
            message=(
                f"Availability at {course.name} could not be confirmed; "
                "finish the booking with the course to check the tee time."
            ),
            **common,
        )

    if not slot.available:
        logger.info("Booking rejected: %s %s %s is not available", course.id, day, time)
        return BookingResult(
            status="rejected",
            reason="time_slot_unavailable",
            message=f"The {time} tee time on {day.isoformat()} at {course.name} is not available.",
            availability=slot,
            **common,
        )

    if slot.players_available < players:
        logger.info(
            "Booking rejected: %s %s %s has %d spots, %d requested",
            course.id, day, time, slot.players_available, players,
        )
        return BookingResult(
            status="rejected",
            reason="insufficient_capacity",
            message=(
                f"Only {slot.players_available} spot(s) left at {time} on {day.isoformat()}; "
                f"{players} requested."
            ),
            availability=slot,
            **common,
        )

    total = round(slot.price * players, 2)
    return BookingResult(
        status="confirmed",
        message=(
            f"{time} on {day.isoformat()} at {course.name} is open for {players} "
            f"player(s) at ${slot.price:.2f} each (${total:.2f} total)."
        ),
        price_per_player=slot.price,
        total_price=total,
        availability=slot,
        **common,
    )


class BookingValidator:
    def __init__(self, store: CourseStore, live: LiveTeeSheets | None = None) -> None:
        self._store = store
        self._live = live

    async def validate(
        self,
        course_id: str,
        day: date | None = None,
        time: str | None = None,
        players: int = 2,
    ) -> BookingResult:
        try:
            course = await self._store.get_course(course_id)
        except StorageError as exc:
            logger.warning("Course lookup failed for booking %s: %s", course_id, exc)
            course = None

        if course is None:
            return BookingResult(
                status="rejected",
                reason="course_not_found",
                message=f"Course {course_id} not found.",
                course_id=course_id,
                date=day,
                time=time,
                players=players,
            )
        if self._live is not None and day is not None:
            course = await self._live.refresh(course, day)
        return check_booking(course, day, time, players)
