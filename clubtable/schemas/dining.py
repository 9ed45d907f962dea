"""Dining room, table and seat schemas"""

from typing import Optional
from pydantic import BaseModel


class DiningRoom(BaseModel):
    """Dining room"""
    id: int
    name: str
    description: Optional[str] = None


class Table(BaseModel):
    """Physical table in a dining room"""
    id: int
    dining_room_id: int
    table_number: int
    seat_count: int
    position_x: float = 0
    position_y: float = 0


class Seat(BaseModel):
    """Seat at a table"""
    id: int
    table_id: int
    seat_number: int


class TableAvailability(BaseModel):
    """Table tagged with whether it is booked for the requested meal period"""
    table: Table
    taken: bool = False

    @property
    def selectable(self) -> bool:
        return not self.taken
