"""Floor plan schemas"""

from datetime import date
from typing import List
from pydantic import BaseModel

from clubtable.schemas.dining import DiningRoom, Seat, Table
from clubtable.schemas.reservation import Reservation


class RoomStats(BaseModel):
    """Seats in a room and how many are taken by seated attendees"""
    room_id: int
    capacity: int
    occupied: int


class FloorPlanResponse(BaseModel):
    """Everything the floor view shows for one day"""
    date: date
    rooms: List[DiningRoom] = []
    tables: List[Table] = []
    seats: List[Seat] = []
    reservations: List[Reservation] = []
    room_stats: List[RoomStats] = []
