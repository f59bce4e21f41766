"""Main FastAPI application for the Golf Course Finder API."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from golf_finder.errors import GolfFinderError, InvalidInput, NotFound
from golf_finder.models import Error
from golf_finder.rate_limit import limiter
from golf_finder.routers import bookings, courses, health
from golf_finder.services.registry import registry

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await registry.start()
    logger.info("Golf Course Finder started")
    yield
    await registry.stop()


app = FastAPI(
    title="Golf Course Finder API",
    description="Search golf courses by location and tee-time availability, and start bookings",
    version=health.API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


def _error_response(status_code: int, exc: GolfFinderError) -> JSONResponse:
    body = Error(error=exc.error_code, message=exc.message, details=exc.details)
    return JSONResponse(status_code=status_code, content={"detail": body.model_dump()})


@app.exception_handler(InvalidInput)
async def invalid_input_handler(request: Request, exc: InvalidInput) -> JSONResponse:
    return _error_response(status.HTTP_400_BAD_REQUEST, exc)


@app.exception_handler(NotFound)
async def not_found_handler(request: Request, exc: NotFound) -> JSONResponse:
    return _error_response(status.HTTP_404_NOT_FOUND, exc)


@app.exception_handler(GolfFinderError)
async def golf_finder_error_handler(request: Request, exc: GolfFinderError) -> JSONResponse:
    logger.error("Unhandled %s on %s: %s", type(exc).__name__, request.url.path, exc.message)
    return _error_response(status.HTTP_503_SERVICE_UNAVAILABLE, exc)


app.include_router(health.router)
app.include_router(courses.router)
app.include_router(bookings.router)
