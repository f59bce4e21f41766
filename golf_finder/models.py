"""Pydantic models for the Golf Course Finder API."""

import datetime as dt
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

TIME_PATTERN = r"^([0-1][0-9]|2[0-3]):[0-5][0-9]$"

CourseType = Literal["public", "private", "semi-private", "resort"]
TimeWindow = Literal["morning", "midday", "afternoon", "twilight"]
BookingStatus = Literal["confirmed", "unconfirmed", "rejected"]
RejectionReason = Literal["time_slot_unavailable", "insufficient_capacity", "course_not_found"]


# ── Availability ──────────────────────────────────────────────────────────


class TeeSlot(BaseModel):
    """A single bookable tee time on one date."""
    time: str = Field(..., pattern=TIME_PATTERN, description="Tee time (HH:MM)")
    available: bool = Field(..., description="Whether the slot can be booked")
    price: float = Field(..., ge=0, description="Price per player")
    players_available: int = Field(..., ge=0, le=4, description="Open spots in the group")

    @model_validator(mode="after")
    def _closed_slot_has_no_capacity(self) -> "TeeSlot":
        if not self.available:
            self.players_available = 0
        return self


class DailyAvailability(BaseModel):
    """Tee sheet of one course for one date."""
    date: dt.date = Field(..., description="Calendar date")
    tee_times: List[TeeSlot] = Field(default_factory=list, description="Slots in time order")

    @field_validator("tee_times")
    @classmethod
    def _sorted_unique_times(cls, slots: List[TeeSlot]) -> List[TeeSlot]:
        times = [s.time for s in slots]
        if len(set(times)) != len(times):
            raise ValueError("tee times must be unique within a day")
        return sorted(slots, key=lambda s: s.time)


# ── Courses ───────────────────────────────────────────────────────────────


class PricingTier(BaseModel):
    """Named green-fee tier."""
    name: str = Field(..., description="Tier name (weekday, weekend, twilight, ...)")
    base_price: float = Field(..., ge=0, description="Base price per player")
    description: str = Field("", description="When the tier applies")


class CourseContact(BaseModel):
    phone: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None


class CourseBase(BaseModel):
    """Course attributes shared by the stored and the search-result shapes."""
    id: str = Field(..., description="Unique course identifier")
    name: str = Field(..., description="Course name")

    city: str = Field(..., description="City")
    state: Optional[str] = Field(None, description="State code (USA)")
    country: str = Field("USA", description="Country")
    lat: Optional[float] = Field(None, ge=-90, le=90, description="Latitude")
    lon: Optional[float] = Field(None, ge=-180, le=180, description="Longitude")

    type: CourseType = Field(..., description="Access classification")
    holes: Literal[9, 18, 27, 36] = Field(18, description="Number of holes")
    par: int = Field(72, description="Total par")
    yardage: int = Field(0, ge=0, description="Total yardage")
    slope: Optional[int] = Field(None, description="Slope rating")
    rating: Optional[float] = Field(None, description="Course rating")
    designer: Optional[str] = Field(None, description="Course architect(s)")
    year_built: Optional[int] = Field(None, description="Year opened")

    pricing_tiers: List[PricingTier] = Field(default_factory=list, description="Green-fee tiers")
    average_price: float = Field(0, ge=0, description="Average green fee")

    amenities: List[str] = Field(default_factory=list, description="Named amenities")
    range_hours: Optional[Dict[str, str]] = Field(
        None, description="Driving range hours by weekday (mon..sun), e.g. \"06:00-20:00\" or \"closed\""
    )
    badges: List[str] = Field(default_factory=list, description="Editorial badges")

    verified: bool = Field(False, description="Data verified by the course")
    rating_stars: float = Field(0, ge=0, le=5, description="Average review stars")
    reviews_count: int = Field(0, ge=0, description="Number of reviews")

    phone: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None
    booking_provider: Optional[str] = Field(None, description="Online tee sheet provider")
    provider_id: Optional[str] = Field(None, description="Course id at the provider")

    description: Optional[str] = None
    local_rules: Optional[str] = None

    @field_validator("amenities", "badges")
    @classmethod
    def _as_sorted_set(cls, values: List[str]) -> List[str]:
        return sorted({v.strip().lower() for v in values if v and v.strip()})

    @field_validator("range_hours")
    @classmethod
    def _weekday_keys(cls, hours: Optional[Dict[str, str]]) -> Optional[Dict[str, str]]:
        if hours is None:
            return None
        return {k.strip().lower()[:3]: v.strip() for k, v in hours.items()}

    @model_validator(mode="after")
    def _coordinates_come_in_pairs(self) -> "CourseBase":
        if (self.lat is None) != (self.lon is None):
            raise ValueError("lat and lon must both be set or both be absent")
        return self

    def has_amenity(self, name: str) -> bool:
        return name in self.amenities

    @property
    def contact(self) -> CourseContact:
        return CourseContact(phone=self.phone, email=self.email, website=self.website)


class Course(CourseBase):
    """A course together with its forward tee-time window."""
    availability: List[DailyAvailability] = Field(
        default_factory=list, description="Per-day tee sheets, ascending by date"
    )

    @field_validator("availability")
    @classmethod
    def _one_sheet_per_date(cls, days: List[DailyAvailability]) -> List[DailyAvailability]:
        dates = [d.date for d in days]
        if len(set(dates)) != len(dates):
            raise ValueError("availability dates must be unique per course")
        return sorted(days, key=lambda d: d.date)

    def availability_for(self, day: dt.date) -> Optional[DailyAvailability]:
        for sheet in self.availability:
            if sheet.date == day:
                return sheet
        return None


class CourseResult(CourseBase):
    """A course as returned by a search, with per-request derived fields."""
    distance_miles: Optional[float] = Field(None, description="Distance from the search center")
    matched_date: Optional[dt.date] = Field(None, description="Date the availability fields refer to")
    available_on_date: Optional[bool] = Field(None, description="Any open slot on matched_date")
    available_slots_on_date: Optional[int] = Field(None, description="Open slots matching the filters")
    cheapest_price_on_date: Optional[float] = Field(None, description="Cheapest matching open slot")
    earliest_time_on_date: Optional[str] = Field(None, description="Earliest matching open slot")
    range_open_on_date: Optional[bool] = Field(None, description="Driving range open on matched_date")


# ── Search ────────────────────────────────────────────────────────────────


class SearchFilters(BaseModel):
    """Every recognised search filter. Unknown keys are rejected."""
    model_config = ConfigDict(extra="forbid")

    # Classification
    type: Optional[CourseType] = None
    types: Optional[List[CourseType]] = None
    holes_in: Optional[List[Literal[9, 18, 27, 36]]] = None

    # Physical ranges
    par_min: Optional[int] = None
    par_max: Optional[int] = None
    yardage_min: Optional[int] = None
    yardage_max: Optional[int] = None
    slope_min: Optional[int] = None
    slope_max: Optional[int] = None
    course_rating_min: Optional[float] = None
    course_rating_max: Optional[float] = None
    year_built_min: Optional[int] = None
    year_built_max: Optional[int] = None

    # Average green fee
    min_price: Optional[float] = Field(None, ge=0)
    max_price: Optional[float] = Field(None, ge=0)

    # Text
    designer: Optional[str] = None
    search_text: Optional[str] = None
    local_rules_contains: Optional[str] = None

    # Amenities
    spa: Optional[bool] = None
    putting_green: Optional[bool] = None
    driving_range: Optional[bool] = None
    has_range: Optional[bool] = None
    club_rentals: Optional[bool] = None
    cart_rentals: Optional[bool] = None
    restaurant: Optional[bool] = None
    bar: Optional[bool] = None
    pro_shop: Optional[bool] = None
    locker_rooms: Optional[bool] = None
    practice_bunker: Optional[bool] = None
    chipping_green: Optional[bool] = None
    golf_lessons: Optional[bool] = None
    club_fitting: Optional[bool] = None
    event_space: Optional[bool] = None
    lodging: Optional[bool] = None

    # Trust signals and badges
    verified: Optional[bool] = None
    top_public: Optional[bool] = None
    best_in_state: Optional[bool] = None
    min_rating: Optional[float] = Field(None, ge=0, le=5)
    min_reviews: Optional[int] = Field(None, ge=0)

    # Availability on the resolved date
    start_time: Optional[str] = Field(None, pattern=TIME_PATTERN)
    end_time: Optional[str] = Field(None, pattern=TIME_PATTERN)
    time_window: Optional[TimeWindow] = None
    players_min: Optional[int] = Field(None, ge=1, le=4)
    price_on_date_min: Optional[float] = Field(None, ge=0)
    price_on_date_max: Optional[float] = Field(None, ge=0)
    include_unavailable: Optional[bool] = None
    range_open_on_date: Optional[bool] = None

    # Availability anywhere in the forward window
    has_availability_any: Optional[bool] = None

    # Ranking
    sort_by: Optional[str] = None
    desired_time: Optional[str] = Field(None, pattern=TIME_PATTERN)


class SearchRequest(BaseModel):
    """Course search by location."""
    city: Optional[str] = Field(None, description="City name")
    state: Optional[str] = Field(None, description="US state code (mutually exclusive with country)")
    country: Optional[str] = Field(None, description="Country (mutually exclusive with state)")
    radius: Optional[float] = Field(None, ge=0, le=200, description="Radius in miles (city searches)")
    date: Optional[dt.date] = Field(None, description="Date to check availability on")
    relative_date: Optional[str] = Field(None, description="today, tomorrow, this_weekend, ...")
    filters: SearchFilters = Field(default_factory=SearchFilters)


class SearchResponse(BaseModel):
    courses: List[CourseResult] = Field(..., description="Matching courses, ranked")
    count: int = Field(..., description="Number of courses returned")
    location: str = Field(..., description="Human-readable location")
    matched_date: Optional[dt.date] = Field(None, description="Resolved availability date")
    degraded_reason: Optional[str] = Field(None, description="Why radius search was not used")
    summary: str = Field(..., description="One-line natural-language summary")


class CourseDetailsResponse(BaseModel):
    course: Course
    summary: str


# ── Booking ───────────────────────────────────────────────────────────────


class BookingRequest(BaseModel):
    """Request to start a tee-time booking."""
    model_config = ConfigDict(populate_by_name=True)

    course_id: str = Field(..., alias="courseId", description="Course identifier")
    date: Optional[dt.date] = Field(None, description="Preferred date (YYYY-MM-DD)")
    time: Optional[str] = Field(None, pattern=TIME_PATTERN, description="Preferred time (HH:MM)")
    players: int = Field(2, ge=1, le=4, description="Number of players")


class BookingResult(BaseModel):
    """Outcome of validating a booking request against the tee sheet."""
    status: BookingStatus = Field(..., description="confirmed, unconfirmed or rejected")
    reason: Optional[RejectionReason] = Field(None, description="Why the request was rejected")
    message: str = Field(..., description="Explanation for the caller")
    course_id: str
    course_name: Optional[str] = None
    date: Optional[dt.date] = None
    time: Optional[str] = None
    players: int
    price_per_player: Optional[float] = Field(None, description="Guaranteed slot price")
    total_price: Optional[float] = Field(None, description="price_per_player x players")
    availability: Optional[TeeSlot] = Field(None, description="Matched slot, if any")
    booking_link: Optional[str] = Field(None, description="Link to complete the booking")
    contact: Optional[CourseContact] = None


class BookingResponse(BaseModel):
    booking: BookingResult
    summary: str


# ── Misc ──────────────────────────────────────────────────────────────────


class Error(BaseModel):
    """Error response model."""
    error: str = Field(..., description="Error type")
    message: str = Field(..., description="Error message")
    details: Optional[dict] = Field(None, description="Additional error details")


class HealthResponse(BaseModel):
    """Health check response."""
    status: str = Field(..., description="Health status")
    version: str = Field(..., description="API version")
    timestamp: dt.datetime = Field(..., description="Current timestamp")
    geocoding: bool = Field(..., description="Whether radius search is available")
