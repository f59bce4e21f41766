"""
Tee-time booking endpoint.

Validates the requested slot and hands back a booking link; no
reservation is made here.
"""

from fastapi import APIRouter, HTTPException, status

from golf_finder.models import BookingRequest, BookingResponse, Error
from golf_finder.services.registry import registry

router = APIRouter(prefix="/api/bookings", tags=["bookings"])


@router.post(
    "",
    response_model=BookingResponse,
    operation_id="startBooking",
    summary="Validate a tee time and get a booking link",
)
async def start_booking(body: BookingRequest) -> BookingResponse:
    result = await registry.booking.validate(
        body.course_id,
        day=body.date,
        time=body.time,
        players=body.players,
    )
    if result.reason == "course_not_found":
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=Error(
                error="not_found",
                message=result.message,
                details={"course_id": body.course_id},
            ).model_dump(),
        )
    return BookingResponse(booking=result, summary=result.message)
