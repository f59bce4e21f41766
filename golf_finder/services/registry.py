"""
Service registry – holds the course store, geocoder, live tee-sheet client
and the services built on them.

Initialized once at application startup; routers look services up here
so tests can swap in mock collaborators.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date

from golf_finder import config, db
from golf_finder.mock_data import extend_demo_availability, seed_demo_data
from golf_finder.services.booking import BookingValidator
from golf_finder.services.cache import InMemoryGeocodeCache
from golf_finder.services.course_store import CourseStore, SqliteCourseStore
from golf_finder.services.geocoding import Geocoder, MapboxGeocoder
from golf_finder.services.location import LocationResolver
from golf_finder.services.search import CourseSearchService
from golf_finder.services.teefox import LiveTeeSheets, TeeFoxClient

logger = logging.getLogger(__name__)


class ServiceRegistry:
    """
    Wires the search and booking services to their collaborators.
    """

    def __init__(
        self,
        store: CourseStore | None = None,
        geocoder: Geocoder | None = None,
        today: Callable[[], date] = date.today,
        tee_times: TeeFoxClient | None = None,
    ) -> None:
        self._today = today
        self.store: CourseStore = store or SqliteCourseStore()
        self.geocoder: Geocoder | None = geocoder
        self.tee_times: TeeFoxClient | None = tee_times
        self.geocode_cache = InMemoryGeocodeCache()
        self.uses_database = store is None
        self._owns_geocoder = False
        self._owns_tee_times = False
        self._build()

    def _build(self) -> None:
        live = LiveTeeSheets(self.tee_times) if self.tee_times is not None else None
        self.resolver = LocationResolver(self.geocoder, self.geocode_cache)
        self.search = CourseSearchService(self.store, self.resolver, today=self._today, live=live)
        self.booking = BookingValidator(self.store, live=live)

    @property
    def geocoding_enabled(self) -> bool:
        if isinstance(self.geocoder, MapboxGeocoder):
            return config.geocoding_enabled()
        return self.geocoder is not None

    async def start(self) -> None:
        """Open the database, load demo data when it is empty and roll its tee sheets forward."""
        if self.geocoder is None and config.geocoding_enabled():
            self.geocoder = MapboxGeocoder()
            self._owns_geocoder = True
        if self.tee_times is None and config.live_tee_times_enabled():
            self.tee_times = TeeFoxClient(config.TEEFOX_API_KEY)
            self._owns_tee_times = True
        if self._owns_geocoder or self._owns_tee_times:
            self._build()
        if not self.uses_database:
            return
        await db.init_db()
        purged = await db.purge_past_availability(self._today())
        if purged:
            logger.info("Purged %d past tee times", purged)
        if config.SEED_DEMO_DATA:
            await seed_demo_data(self._today())
            await extend_demo_availability(self._today())

    async def stop(self) -> None:
        if self._owns_geocoder:
            await self.geocoder.close()
            self.geocoder = None
            self._owns_geocoder = False
        if self._owns_tee_times:
            await self.tee_times.close()
            self.tee_times = None
            self._owns_tee_times = False
        self._build()
        if self.uses_database:
            await db.close_db()


# ── Singleton instance ────────────────────────────────────────────────────
registry = ServiceRegistry()
