"""Reservation schemas"""

import enum
from datetime import date, datetime
from typing import Dict, List, Optional, Tuple
from pydantic import BaseModel

from clubtable.schemas.attendee import Attendee


class MealType(str, enum.Enum):
    """Meal period"""
    LUNCH = "lunch"
    DINNER = "dinner"


class ReservationStatus(str, enum.Enum):
    """Known reservation statuses"""
    PENDING = "pending"
    CONFIRMED = "confirmed"
    FIRED = "fired"
    CANCELLED = "cancelled"


# Hours of service per meal period
MEAL_PERIODS: Dict[MealType, Tuple[str, str]] = {
    MealType.LUNCH: ("11:00", "15:00"),
    MealType.DINNER: ("15:00", "19:00"),
}


class Reservation(BaseModel):
    """Reservation as returned by the backend"""
    id: int
    date: date
    meal_type: MealType
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    dining_room_id: Optional[int] = None
    table_id: Optional[int] = None
    status: str = ReservationStatus.CONFIRMED.value
    notes: Optional[str] = None
    fired_at: Optional[datetime] = None
    attendees: List[Attendee] = []

    @property
    def is_active(self) -> bool:
        return self.status != ReservationStatus.CANCELLED.value


class ReservationCreate(BaseModel):
    """Create reservation request"""
    date: date
    meal_type: MealType
    start_time: str
    end_time: str
    dining_room_id: int
    table_id: int
    notes: Optional[str] = None


class ReservationUpdate(BaseModel):
    """Update reservation request"""
    status: Optional[str] = None
    table_id: Optional[int] = None
    notes: Optional[str] = None
    fired_at: Optional[datetime] = None


class AvailabilityEntry(BaseModel):
    """Booked slot returned by the availability endpoint"""
    table_id: Optional[int] = None
    meal_type: Optional[str] = None
    status: Optional[str] = None
