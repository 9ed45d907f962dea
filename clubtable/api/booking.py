"""Booking endpoints"""

from datetime import date
from typing import List, Optional

import structlog
from fastapi import APIRouter, Depends, Query, Response

from clubtable.api.deps import get_state
from clubtable.booking.availability import AvailabilityQuery
from clubtable.booking.roster import SELF_KEY
from clubtable.booking.submitter import BookingSubmitter
from clubtable.booking.wizard import BookingWizard
from clubtable.schemas.attendee import RosterEntry
from clubtable.schemas.booking import AvailabilityResponse, BookingRequest, BookingResult
from clubtable.schemas.dining import DiningRoom
from clubtable.schemas.member import Member
from clubtable.schemas.reservation import MealType
from clubtable.state import AppState

router = APIRouter()
logger = structlog.get_logger()


@router.get("/rooms", response_model=List[DiningRoom])
async def list_rooms(state: AppState = Depends(get_state)):
    """Dining rooms to book in"""
    return await state.api.list_dining_rooms()


@router.get("/availability", response_model=AvailabilityResponse)
async def availability(
    on: date = Query(..., alias="date"),
    meal_type: MealType = Query(...),
    room_id: int = Query(...),
    state: AppState = Depends(get_state),
):
    """Tables of a room, tagged taken or free for the meal period"""
    tables = await AvailabilityQuery(state.api).fetch(on, meal_type, room_id)
    return AvailabilityResponse(date=on, meal_type=meal_type, room_id=room_id, tables=tables)


@router.get("/members", response_model=List[Member])
async def search_members(
    search: Optional[str] = None,
    state: AppState = Depends(get_state),
):
    """Members that can be added to a party"""
    return await state.api.list_members(search=search)


@router.post("", response_model=BookingResult, status_code=201)
async def create_booking(
    request: BookingRequest,
    response: Response,
    state: AppState = Depends(get_state),
):
    """
    Walk the booking wizard in one call:
    date/room, table, attendees, review, submit.
    An empty attendee list books for the caller alone.
    """
    wizard = BookingWizard(
        AvailabilityQuery(state.api),
        BookingSubmitter(state),
        user=state.session.user,
    )

    wizard.choose(on=request.date, meal_type=request.meal_type, room_id=request.room_id)
    await wizard.advance()

    wizard.select_table(request.table_id)
    await wizard.advance()

    if request.attendees:
        wizard.roster.load(
            [
                RosterEntry(temp_id=SELF_KEY if index == 0 else f"row-{index}", **a.model_dump())
                for index, a in enumerate(request.attendees)
            ]
        )
    await wizard.advance()

    wizard.notes = request.notes or ""
    result = await wizard.submit()

    if not result.success:
        response.status_code = 502

    logger.info(
        "Booking request handled",
        user_id=state.session.user.id,
        success=result.success,
        reservation_id=result.reservation_id,
    )
    return result
