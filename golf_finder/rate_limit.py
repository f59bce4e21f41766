"""
Rate limiting configuration using slowapi.

Two tiers:
  • search  – 30/min (course search, may call the geocoder)
  • default – 60/min (everything else)

The limiter keys on client IP by default.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

limiter = Limiter(key_func=get_remote_address, default_limits=["60/minute"])

# Named rate strings for use in @limiter.limit() decorators
SEARCH = "30/minute"    # course search
DEFAULT = "60/minute"   # lookups, bookings, health
