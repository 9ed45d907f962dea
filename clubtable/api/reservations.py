"""Staff reservation endpoints"""

from typing import Optional

from fastapi import APIRouter, Depends

from clubtable.api.deps import get_state
from clubtable.ops.reservations import ReservationActions
from clubtable.schemas.attendee import Attendee
from clubtable.schemas.booking import DietaryUpdate, MoveTableRequest, NotesUpdate
from clubtable.schemas.reservation import Reservation
from clubtable.state import AppState

router = APIRouter()


@router.post("/{reservation_id}/confirm", response_model=Optional[Reservation])
async def confirm_reservation(reservation_id: int, state: AppState = Depends(get_state)):
    """Confirm a reservation"""
    return await ReservationActions(state).confirm(reservation_id)


@router.post("/{reservation_id}/fire", response_model=Optional[Reservation])
async def fire_reservation(reservation_id: int, state: AppState = Depends(get_state)):
    """Send a table's orders to the kitchen"""
    return await ReservationActions(state).fire(reservation_id)


@router.post("/{reservation_id}/cancel", response_model=Optional[Reservation])
async def cancel_reservation(reservation_id: int, state: AppState = Depends(get_state)):
    """Cancel a reservation"""
    return await ReservationActions(state).cancel(reservation_id)


@router.patch("/{reservation_id}/table", response_model=Optional[Reservation])
async def move_reservation(
    reservation_id: int,
    body: MoveTableRequest,
    state: AppState = Depends(get_state),
):
    """Move a reservation to another table"""
    return await ReservationActions(state).move_table(reservation_id, body.table_id)


@router.delete("/attendees/{attendee_id}", status_code=204)
async def remove_attendee(attendee_id: int, state: AppState = Depends(get_state)):
    """Remove a guest from a reservation"""
    await ReservationActions(state).remove_attendee(attendee_id)


@router.patch("/attendees/{attendee_id}/dietary", response_model=Optional[Attendee])
async def update_dietary(
    attendee_id: int,
    body: DietaryUpdate,
    state: AppState = Depends(get_state),
):
    """Change an attendee's dietary note"""
    return await ReservationActions(state).update_dietary(attendee_id, body.choice)


@router.patch("/{reservation_id}/notes", response_model=Optional[Reservation])
async def update_notes(
    reservation_id: int,
    body: NotesUpdate,
    state: AppState = Depends(get_state),
):
    """Edit the staff notes of a reservation"""
    return await ReservationActions(state).update_notes(reservation_id, body.notes)
