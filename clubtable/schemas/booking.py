"""Booking workflow request/response schemas"""

from datetime import date
from typing import List, Optional
from pydantic import BaseModel, Field

from clubtable.schemas.attendee import DietaryRestriction, GUEST
from clubtable.schemas.dining import TableAvailability
from clubtable.schemas.reservation import MealType


class BookingResult(BaseModel):
    """Outcome of a booking submission.

    There is no partial-success shape: a failure after the reservation was
    written is still reported as ``success=False``.
    """
    success: bool
    reservation_id: Optional[int] = None
    error: Optional[str] = None


class AvailabilityResponse(BaseModel):
    """Tables of a room tagged for one date and meal period"""
    date: date
    meal_type: MealType
    room_id: int
    tables: List[TableAvailability] = []


class BookingAttendee(BaseModel):
    """Attendee row submitted to the gateway"""
    name: str
    attendee_type: str = GUEST
    dietary_restrictions: Optional[DietaryRestriction] = None
    member_id: Optional[int] = None


class BookingRequest(BaseModel):
    """Complete booking submitted to the gateway in one call"""
    date: date
    meal_type: MealType
    room_id: int
    table_id: int
    attendees: List[BookingAttendee] = Field(default_factory=list)
    notes: Optional[str] = None


class SeatAssignmentRequest(BaseModel):
    """Bind an attendee to a seat"""
    seat_id: int


class MoveTableRequest(BaseModel):
    """Move a reservation to another table"""
    table_id: int


class DietaryUpdate(BaseModel):
    """Dietary picker value ("None" or null clears the restriction)"""
    choice: Optional[str] = None


class NotesUpdate(BaseModel):
    """Staff notes on a reservation (blank or null clears them)"""
    notes: Optional[str] = None
