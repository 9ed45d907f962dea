"""Floor plan and seat assignment endpoints"""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from clubtable.api.deps import get_state
from clubtable.ops.floor_plan import FloorPlan, SeatAssignment
from clubtable.schemas.attendee import Attendee
from clubtable.schemas.booking import SeatAssignmentRequest
from clubtable.schemas.floor import FloorPlanResponse
from clubtable.state import AppState

router = APIRouter()


@router.get("", response_model=FloorPlanResponse)
async def floor_plan(
    on: Optional[date] = Query(None, alias="date"),
    state: AppState = Depends(get_state),
):
    """Rooms, tables, seats and reservations for one day"""
    plan = FloorPlan(state, on=on)
    await plan.refresh()

    return FloorPlanResponse(
        date=plan.date,
        rooms=state.rooms.items,
        tables=state.tables.items,
        seats=state.seats.items,
        reservations=state.reservations.items,
        room_stats=list(plan.all_room_stats().values()),
    )


@router.get("/reservations/{reservation_id}/unseated", response_model=List[Attendee])
async def unseated_attendees(
    reservation_id: int,
    on: Optional[date] = Query(None, alias="date"),
    state: AppState = Depends(get_state),
):
    """Attendees of a reservation that have no seat yet"""
    plan = FloorPlan(state, on=on)
    await plan.refresh()

    if state.reservations.get(reservation_id) is None:
        raise HTTPException(status_code=404, detail="Reservation not found")

    return plan.unseated(reservation_id)


@router.post("/attendees/{attendee_id}/seat", response_model=Optional[Attendee])
async def assign_seat(
    attendee_id: int,
    body: SeatAssignmentRequest,
    state: AppState = Depends(get_state),
):
    """Bind an attendee to a seat (no conflict check)"""
    return await SeatAssignment(state).assign(attendee_id, body.seat_id)
