"""Demo course catalogue for the Golf Course Finder API."""

import logging
import random
from datetime import date, timedelta
from typing import Any, Dict, List, Optional

from golf_finder import db
from golf_finder.models import Course, DailyAvailability, TeeSlot

logger = logging.getLogger(__name__)

AVAILABILITY_LEVELS = {"high": 0.9, "medium": 0.6, "low": 0.3}

# Days of tee sheet kept ahead, today included.
FORWARD_WINDOW_DAYS = 7

FULL_SERVICE = [
    "putting_green", "driving_range", "club_rentals", "cart_rentals",
    "restaurant", "bar", "pro_shop", "locker_rooms", "practice_bunker",
    "chipping_green", "golf_lessons",
]
MUNICIPAL = ["putting_green", "driving_range", "club_rentals", "cart_rentals", "restaurant", "pro_shop"]


def generate_tee_times(day: date, base_price: float, level: str, rng: random.Random) -> List[TeeSlot]:
    """Tee times every 10 minutes from 06:00 to 18:50 with weekend and twilight pricing."""
    weekend = day.weekday() >= 5
    chance = AVAILABILITY_LEVELS[level]
    slots = []
    for hour in range(6, 19):
        for minute in range(0, 60, 10):
            price = base_price * 1.3 if weekend else base_price
            if hour >= 15:
                price *= 0.7
            available = rng.random() < chance
            slots.append(
                TeeSlot(
                    time=f"{hour:02d}:{minute:02d}",
                    available=available,
                    price=round(price),
                    players_available=rng.randint(2, 4) if available else 0,
                )
            )
    return slots


def generate_availability(
    base_price: float,
    level: str,
    start: date,
    days: int = FORWARD_WINDOW_DAYS,
    seed: Optional[str] = None,
) -> List[DailyAvailability]:
    """Deterministic tee sheets for *days* consecutive dates starting at *start*."""
    rng = random.Random(f"{seed}:{start.isoformat()}")
    return [
        DailyAvailability(
            date=start + timedelta(days=i),
            tee_times=generate_tee_times(start + timedelta(days=i), base_price, level, rng),
        )
        for i in range(days)
    ]


_DEMO_COURSES: List[Dict[str, Any]] = [
    # San Diego, CA
    {
        "id": "torrey-pines-south",
        "name": "Torrey Pines Golf Course - South",
        "city": "La Jolla", "state": "CA",
        "lat": 32.8987, "lon": -117.2517,
        "type": "public", "par": 72, "yardage": 7698, "rating": 77.7, "slope": 142,
        "designer": "William P. Bell, Rees Jones", "year_built": 1957,
        "pricing_tiers": [
            {"name": "weekday", "base_price": 252, "description": "Monday-Thursday"},
            {"name": "weekend", "base_price": 315, "description": "Friday-Sunday"},
            {"name": "twilight", "base_price": 176, "description": "After 3 PM"},
        ],
        "average_price": 252, "level": "low",
        "amenities": FULL_SERVICE + ["club_fitting", "event_space", "lodging"],
        "badges": ["top_public", "best_in_state"], "verified": True,
        "rating_stars": 4.8, "reviews_count": 3421,
        "phone": "+1 (858) 452-3226",
        "email": "info@torreypinesgolfcourse.com",
        "website": "https://www.sandiego.gov/park-and-recreation/golf/torreypines",
        "description": "Host of the 2021 U.S. Open with Pacific Ocean views and championship-level play.",
        "local_rules": "Soft spikes only. Pace of play 4 hours 30 minutes.",
    },
    {
        "id": "balboa-park",
        "name": "Balboa Park Golf Course",
        "city": "San Diego", "state": "CA",
        "lat": 32.7338, "lon": -117.1461,
        "type": "public", "par": 72, "yardage": 6339, "rating": 69.8, "slope": 117,
        "designer": "William P. Bell", "year_built": 1915,
        "pricing_tiers": [
            {"name": "weekday", "base_price": 58, "description": "Monday-Thursday"},
            {"name": "weekend", "base_price": 72, "description": "Friday-Sunday"},
        ],
        "average_price": 58, "level": "high",
        "amenities": MUNICIPAL + ["bar"],
        "range_hours": {"mon": "closed", "tue": "06:00-20:00", "wed": "06:00-20:00", "thu": "06:00-20:00",
                        "fri": "06:00-21:00", "sat": "05:30-21:00", "sun": "05:30-19:00"},
        "verified": True,
        "rating_stars": 4.2, "reviews_count": 1876,
        "phone": "+1 (619) 235-1184",
        "email": "info@balboaparkgolf.com",
        "website": "https://www.sandiego.gov/park-and-recreation/golf/balboapark",
        "booking_provider": "chronogolf", "provider_id": "balboa-park-golf-course",
        "description": "Historic course in the heart of San Diego with mature trees and affordable rates.",
    },
    {
        "id": "coronado-golf",
        "name": "Coronado Golf Course",
        "city": "Coronado", "state": "CA",
        "lat": 32.6859, "lon": -117.1783,
        "type": "public", "par": 72, "yardage": 6632, "rating": 71.3, "slope": 123,
        "designer": "Jack Daray Sr.", "year_built": 1957,
        "pricing_tiers": [{"name": "weekday", "base_price": 65, "description": "Monday-Thursday"}],
        "average_price": 65, "level": "medium",
        "amenities": MUNICIPAL + ["bar", "chipping_green"],
        "rating_stars": 4.3, "reviews_count": 982,
        "phone": "+1 (619) 435-3121",
        "email": "info@coronadogolf.com",
        "website": "https://www.golfcoronado.com",
        "description": "Bayside course with views of downtown San Diego and the Coronado Bridge.",
    },
    {
        "id": "aviara-golf",
        "name": "Aviara Golf Club",
        "city": "Carlsbad", "state": "CA",
        "lat": 33.1092, "lon": -117.2839,
        "type": "resort", "par": 72, "yardage": 7007, "rating": 74.3, "slope": 138,
        "designer": "Arnold Palmer", "year_built": 1991,
        "pricing_tiers": [
            {"name": "weekday", "base_price": 295, "description": "Monday-Thursday"},
            {"name": "twilight", "base_price": 195, "description": "After 3 PM"},
        ],
        "average_price": 295, "level": "medium",
        "amenities": FULL_SERVICE + ["spa", "club_fitting", "event_space", "lodging"],
        "verified": True,
        "rating_stars": 4.9, "reviews_count": 2341,
        "phone": "+1 (760) 603-6900",
        "email": "golf@aviaragolf.com",
        "website": "https://www.aviaragolf.com",
        "description": "Arnold Palmer signature design at the Park Hyatt Aviara Resort.",
    },
    {
        "id": "maderas-golf",
        "name": "Maderas Golf Club",
        "city": "Poway", "state": "CA",
        "lat": 32.9628, "lon": -117.0364,
        "type": "semi-private", "par": 72, "yardage": 7014, "rating": 74.1, "slope": 141,
        "designer": "Johnny Miller, Robert Muir Graves", "year_built": 1999,
        "pricing_tiers": [{"name": "weekday", "base_price": 175, "description": "Monday-Thursday"}],
        "average_price": 175, "level": "medium",
        "amenities": FULL_SERVICE + ["event_space"],
        "rating_stars": 4.7, "reviews_count": 1654,
        "phone": "+1 (858) 451-8100",
        "email": "info@maderasgolf.com",
        "website": "www.maderasgolf.com",
        "booking_provider": "teesnap", "provider_id": "maderas",
        "description": "Dramatic elevation changes and canyon views on a Johnny Miller design.",
    },
    # Scottsdale, AZ
    {
        "id": "troon-north-monument",
        "name": "Troon North Golf Club - Monument Course",
        "city": "Scottsdale", "state": "AZ",
        "lat": 33.7003, "lon": -111.8910,
        "type": "public", "par": 72, "yardage": 7028, "rating": 73.3, "slope": 147,
        "designer": "Tom Weiskopf, Jay Morrish", "year_built": 1990,
        "pricing_tiers": [{"name": "weekday", "base_price": 203, "description": "Monday-Thursday"}],
        "average_price": 203, "level": "low",
        "amenities": FULL_SERVICE,
        "badges": ["top_public"], "verified": True,
        "rating_stars": 4.9, "reviews_count": 4231,
        "phone": "+1 (480) 585-7700",
        "email": "info@troonnorthgolf.com",
        "website": "https://www.troonnorthgolf.com",
        "description": "Desert landscape and boulder-strewn fairways, ranked among America's top public courses.",
    },
    {
        "id": "grayhawk-talon",
        "name": "Grayhawk Golf Club - Talon Course",
        "city": "Scottsdale", "state": "AZ",
        "lat": 33.6589, "lon": -111.8645,
        "type": "public", "par": 72, "yardage": 6973, "rating": 73.5, "slope": 139,
        "designer": "David Graham, Gary Panks", "year_built": 1994,
        "pricing_tiers": [{"name": "weekday", "base_price": 179, "description": "Monday-Thursday"}],
        "average_price": 179, "level": "medium",
        "amenities": FULL_SERVICE + ["club_fitting"],
        "rating_stars": 4.6, "reviews_count": 2987,
        "phone": "+1 (480) 502-1800",
        "email": "info@grayhawkgolf.com",
        "website": "https://www.grayhawkgolf.com",
        "booking_provider": "teefox", "provider_id": "grayhawk-talon",
        "description": "Championship desert golf with mountain views.",
    },
    # Miami, FL
    {
        "id": "crandon-golf",
        "name": "Crandon Golf at Key Biscayne",
        "city": "Key Biscayne", "state": "FL",
        "lat": 25.7043, "lon": -80.1581,
        "type": "public", "par": 72, "yardage": 7301, "rating": 75.5, "slope": 139,
        "designer": "Robert von Hagge, Bruce Devlin", "year_built": 1972,
        "pricing_tiers": [{"name": "weekday", "base_price": 195, "description": "Monday-Thursday"}],
        "average_price": 195, "level": "high",
        "amenities": MUNICIPAL + ["bar", "golf_lessons"],
        "range_hours": {"sun": "closed"},
        "badges": ["best_in_state"],
        "rating_stars": 4.7, "reviews_count": 1923,
        "phone": "+1 (305) 361-9129",
        "email": "info@crandongolf.com",
        "website": "https://www.crandongolf.com",
        "description": "Oceanside holes and tropical scenery on a former PGA Tour venue.",
    },
    # International
    {
        "id": "wentworth-west",
        "name": "Wentworth Club - West Course",
        "city": "Virginia Water", "country": "United Kingdom",
        "lat": 51.4089, "lon": -0.5897,
        "type": "private", "par": 72, "yardage": 7308, "rating": 76.2, "slope": 145,
        "designer": "Harry Colt, Ernie Els", "year_built": 1926,
        "pricing_tiers": [{"name": "guest", "base_price": 350, "description": "Member-introduced guests"}],
        "average_price": 350, "level": "low",
        "amenities": FULL_SERVICE + ["spa", "event_space"],
        "verified": True,
        "rating_stars": 5.0, "reviews_count": 876,
        "phone": "+44 1344 842201",
        "email": "info@wentworthclub.com",
        "website": "https://www.wentworthclub.com",
        "description": "Championship venue with tree-lined fairways through Surrey heathland.",
    },
    {
        "id": "new-south-wales-golf",
        "name": "New South Wales Golf Club",
        "city": "La Perouse", "country": "Australia",
        "lat": -33.9897, "lon": 151.2308,
        "type": "private", "par": 72, "yardage": 6820, "rating": 74.8, "slope": 141,
        "designer": "Alister MacKenzie", "year_built": 1928,
        "pricing_tiers": [{"name": "guest", "base_price": 450, "description": "Visitor green fee"}],
        "average_price": 450, "level": "low",
        "amenities": FULL_SERVICE,
        "rating_stars": 4.9, "reviews_count": 543,
        "phone": "+61 2 9661 4455",
        "email": "info@nswgolfclub.com.au",
        "website": "https://www.nswgolfclub.com.au",
        "description": "Clifftop course overlooking Botany Bay.",
    },
]


def get_demo_courses(today: Optional[date] = None) -> List[Course]:
    """The demo catalogue with a 7-day tee sheet starting at *today*."""
    start = today or date.today()
    courses = []
    for raw in _DEMO_COURSES:
        data = dict(raw)
        level = data.pop("level")
        data["availability"] = generate_availability(data["average_price"], level, start, seed=data["id"])
        courses.append(Course.model_validate(data))
    return courses


async def seed_demo_data(today: Optional[date] = None) -> int:
    """Load the demo catalogue into an empty database. Returns the number of courses written."""
    if await db.count_courses() > 0:
        return 0
    courses = get_demo_courses(today)
    for course in courses:
        await db.upsert_course(course)
    logger.info("Seeded %d demo courses", len(courses))
    return len(courses)


async def extend_demo_availability(today: Optional[date] = None) -> int:
    """
    Roll the stored demo tee sheets forward so they cover today through
    today + FORWARD_WINDOW_DAYS - 1. Dates already on file are kept.

    Returns the number of courses that got new dates.
    """
    start_of_window = today or date.today()
    horizon = start_of_window + timedelta(days=FORWARD_WINDOW_DAYS - 1)
    last_dates = await db.last_availability_dates()

    extended = 0
    for raw in _DEMO_COURSES:
        if raw["id"] not in last_dates:
            continue
        last = last_dates[raw["id"]]
        start = start_of_window if last is None or last < start_of_window else last + timedelta(days=1)
        if start > horizon:
            continue
        days = generate_availability(
            raw["average_price"],
            raw["level"],
            start,
            days=(horizon - start).days + 1,
            seed=raw["id"],
        )
        await db.add_availability(raw["id"], days)
        extended += 1

    if extended:
        logger.info("Extended demo tee sheets for %d courses through %s", extended, horizon)
    return extended
