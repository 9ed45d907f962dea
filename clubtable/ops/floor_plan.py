"""Floor plan for staff: who sits where, and seat assignment

Seat assignment writes straight to the attendee record with no check
against other attendees' seats. Two staff members assigning the same seat
both succeed; the next refresh shows whichever write landed last.
"""

import asyncio
from datetime import date
from typing import Dict, List, Optional

import structlog

from clubtable.config import Settings, get_settings
from clubtable.errors import ApiError
from clubtable.schemas.attendee import Attendee, AttendeeUpdate
from clubtable.schemas.floor import RoomStats
from clubtable.schemas.reservation import Reservation
from clubtable.state import AppState
from clubtable.tasks.periodic import PeriodicTask

logger = structlog.get_logger()


class FloorPlan:
    """One day's floor, kept fresh by polling while the view is open"""

    def __init__(
        self,
        state: AppState,
        on: Optional[date] = None,
        settings: Optional[Settings] = None,
    ):
        self.state = state
        self.date = on or date.today()
        self.settings = settings or get_settings()
        self.loaded = False
        self._poller = PeriodicTask(
            self.refresh,
            self.settings.floor_plan_poll_seconds,
            name="floor-plan",
        )

    async def refresh(self) -> None:
        """Reload rooms, tables, seats and the day's reservations"""
        api = self.state.api
        rooms, tables, seats, reservations = await asyncio.gather(
            api.list_dining_rooms(),
            api.list_tables(),
            api.list_seats(),
            api.list_reservations(self.date),
        )

        self.state.rooms.set_items(rooms)
        self.state.tables.set_items(tables)
        self.state.seats.set_items(seats)
        self.state.reservations.set_items(reservations)
        self.state.attendees.set_items(
            [
                a if a.reservation_id is not None else a.model_copy(update={"reservation_id": r.id})
                for r in reservations
                for a in r.attendees
            ]
        )
        self.loaded = True

    def live(self) -> PeriodicTask:
        """``async with floor_plan.live():`` polls for as long as the block runs"""
        return self._poller

    # Derived views

    def reservation_for_table(self, table_id: int) -> Optional[Reservation]:
        return next(
            (r for r in self.state.reservations if r.table_id == table_id and r.is_active),
            None,
        )

    def attendees_of(self, reservation_id: int) -> List[Attendee]:
        return self.state.attendees_for(reservation_id)

    def seat_ids_for_table(self, table_id: int) -> List[int]:
        return [s.id for s in self.state.seats if s.table_id == table_id]

    def seated_at_table(self, table_id: int) -> List[Attendee]:
        reservation = self.reservation_for_table(table_id)
        if reservation is None:
            return []
        seat_ids = self.seat_ids_for_table(table_id)
        return [a for a in self.attendees_of(reservation.id) if a.seat_id in seat_ids]

    def unseated(self, reservation_id: int) -> List[Attendee]:
        return [a for a in self.attendees_of(reservation_id) if a.seat_id is None]

    def room_stats(self, room_id: int) -> RoomStats:
        tables = [t for t in self.state.tables if t.dining_room_id == room_id]
        return RoomStats(
            room_id=room_id,
            capacity=sum(t.seat_count for t in tables),
            occupied=sum(len(self.seated_at_table(t.id)) for t in tables),
        )

    def all_room_stats(self) -> Dict[int, RoomStats]:
        return {room.id: self.room_stats(room.id) for room in self.state.rooms}

    def tables_matching(self, query: str) -> List[int]:
        """Tables whose party includes a guest whose name contains ``query``"""
        term = query.strip().lower()
        table_ids = [t.id for t in self.state.tables]
        if not term:
            return table_ids

        matches = []
        for table_id in table_ids:
            reservation = self.reservation_for_table(table_id)
            if reservation is None:
                continue
            if any(term in a.name.lower() for a in self.attendees_of(reservation.id)):
                matches.append(table_id)
        return matches


class SeatAssignment:
    """Bind attendees to physical seats on an existing reservation"""

    def __init__(self, state: AppState, floor_plan: Optional[FloorPlan] = None):
        self.state = state
        self.floor_plan = floor_plan

    async def assign(self, attendee_id: int, seat_id: int) -> Optional[Attendee]:
        """PATCH the attendee's seat; last write wins"""
        logger.info("Assigning seat", attendee_id=attendee_id, seat_id=seat_id)
        updated = await self.state.api.update_attendee(
            attendee_id, AttendeeUpdate(seat_id=seat_id)
        )
        if updated is not None:
            self.state.attendees.upsert(updated)

        if self.floor_plan is not None:
            try:
                await self.floor_plan.refresh()
            except ApiError as e:
                logger.warning("Floor plan refresh failed after seat assignment", error=e.message)

        return updated
