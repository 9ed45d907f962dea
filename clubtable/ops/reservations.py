"""Staff actions on existing reservations"""

from datetime import datetime, timezone
from typing import Optional

import structlog

from clubtable.errors import ValidationError
from clubtable.schemas.attendee import Attendee, AttendeeUpdate, dietary_from_choice
from clubtable.schemas.reservation import Reservation, ReservationStatus, ReservationUpdate
from clubtable.state import AppState

logger = structlog.get_logger()


class ReservationActions:
    """Status transitions, table moves and attendee edits.

    Each action is one write; the store takes whatever the server returns.
    """

    def __init__(self, state: AppState):
        self.state = state
        self.api = state.api

    def _ensure_active(self, reservation_id: int) -> None:
        known = self.state.reservations.get(reservation_id)
        if known is not None and not known.is_active:
            raise ValidationError(f"Reservation {reservation_id} is cancelled")

    async def _update(
        self,
        reservation_id: int,
        changes: ReservationUpdate,
        action: str,
    ) -> Optional[Reservation]:
        logger.info("Reservation action", action=action, reservation_id=reservation_id)
        updated = await self.api.update_reservation(reservation_id, changes)
        if updated is not None:
            self.state.reservations.upsert(updated)
        return updated

    async def confirm(self, reservation_id: int) -> Optional[Reservation]:
        self._ensure_active(reservation_id)
        return await self._update(
            reservation_id,
            ReservationUpdate(status=ReservationStatus.CONFIRMED.value),
            "confirm",
        )

    async def fire(
        self, reservation_id: int, at: Optional[datetime] = None
    ) -> Optional[Reservation]:
        """Send the table's orders to the kitchen"""
        self._ensure_active(reservation_id)
        return await self._update(
            reservation_id,
            ReservationUpdate(
                status=ReservationStatus.FIRED.value,
                fired_at=at or datetime.now(timezone.utc),
            ),
            "fire",
        )

    async def cancel(self, reservation_id: int) -> Optional[Reservation]:
        return await self._update(
            reservation_id,
            ReservationUpdate(status=ReservationStatus.CANCELLED.value),
            "cancel",
        )

    async def move_table(self, reservation_id: int, table_id: int) -> Optional[Reservation]:
        self._ensure_active(reservation_id)
        return await self._update(
            reservation_id, ReservationUpdate(table_id=table_id), "move_table"
        )

    async def remove_attendee(self, attendee_id: int) -> None:
        logger.info("Removing attendee", attendee_id=attendee_id)
        await self.api.delete_attendee(attendee_id)
        self.state.attendees.remove(attendee_id)

    async def update_dietary(
        self, attendee_id: int, choice: Optional[str]
    ) -> Optional[Attendee]:
        """Set an attendee's dietary note from a picker value ("None" clears)"""
        updated = await self.api.update_attendee(
            attendee_id,
            AttendeeUpdate(dietary_restrictions=dietary_from_choice(choice)),
        )
        if updated is not None:
            self.state.attendees.upsert(updated)
        return updated

    async def update_notes(
        self, reservation_id: int, notes: Optional[str]
    ) -> Optional[Reservation]:
        """Replace the staff notes; blank text clears them"""
        return await self._update(
            reservation_id,
            ReservationUpdate(notes=(notes or "").strip() or None),
            "update_notes",
        )
