"""Booking submitter: reservation first, then its attendees

The two writes are not atomic. If an attendee write fails, the reservation
(and any attendee writes that did succeed) stay on the server; nothing is
rolled back and the failure is reported for the whole booking. Errors outside
the API and httpx families (programming errors) propagate.
"""

import asyncio
from datetime import date
from typing import Any, List, Optional, Sequence

import httpx
import structlog

from clubtable.booking.roster import attendee_payloads
from clubtable.client.api import parse_one
from clubtable.errors import ApiError, ValidationError
from clubtable.schemas.attendee import Attendee, AttendeeCreate, RosterEntry
from clubtable.schemas.booking import BookingResult
from clubtable.schemas.reservation import Reservation, ReservationCreate
from clubtable.state import AppState

logger = structlog.get_logger()

MISSING_ID_MESSAGE = "Booking failed: no reservation ID returned"


def _extract_id(data: Any, meta_keys: Sequence[str]) -> Optional[int]:
    if not isinstance(data, dict):
        return None

    meta = data.get("meta")
    candidates = [meta.get(key) for key in meta_keys] if isinstance(meta, dict) else []
    candidates.append(data.get("id"))
    for candidate in candidates:
        if candidate is None:
            continue
        try:
            return int(candidate)
        except (TypeError, ValueError):
            continue
    return None


def extract_reservation_id(data: Any) -> Optional[int]:
    """Read the new id from ``meta.reservation_id`` or a top-level ``id``"""
    return _extract_id(data, ("reservation_id",))


def extract_attendee_id(data: Any) -> Optional[int]:
    return _extract_id(data, ("attendee_id", "reservation_attendee_id", "id"))


def attendee_from_reply(payload: AttendeeCreate, data: Any) -> Optional[Attendee]:
    """The attendee a create call produced.

    The backend answers either with the record itself or with a 5W1H
    envelope carrying the new id in ``meta``. None if neither gives an id.
    """
    record = parse_one(Attendee, data)
    if record is not None:
        return record

    attendee_id = extract_attendee_id(data)
    if attendee_id is None:
        return None
    return Attendee(id=attendee_id, **payload.model_dump())


class BookingSubmitter:
    """Runs the two-phase booking write and reports one outcome"""

    def __init__(self, state: AppState):
        self.state = state
        self.api = state.api
        self.submitting = False
        self.error: Optional[str] = None

    async def book(
        self,
        reservation: ReservationCreate,
        attendees: Sequence[RosterEntry] = (),
    ) -> BookingResult:
        if self.submitting:
            return BookingResult(success=False, error="A booking is already being submitted")

        self.submitting = True
        self.error = None
        try:
            reservation_id = await self._create_reservation(reservation)
            created = await self._create_attendees(reservation_id, reservation.date, attendees)
        except (ApiError, ValidationError, httpx.HTTPError) as e:
            self.error = str(e) or "Something went wrong"
            logger.error(
                "Booking failed",
                date=reservation.date.isoformat(),
                table_id=reservation.table_id,
                error=self.error,
            )
            return BookingResult(success=False, error=self.error)
        finally:
            self.submitting = False

        self._record(reservation_id, reservation, created)
        logger.info(
            "Booking created",
            reservation_id=reservation_id,
            table_id=reservation.table_id,
            attendees=len(created),
        )
        return BookingResult(success=True, reservation_id=reservation_id)

    async def _create_reservation(self, reservation: ReservationCreate) -> int:
        data = await self.api.create_reservation(reservation)
        reservation_id = extract_reservation_id(data)
        if reservation_id is None:
            message = MISSING_ID_MESSAGE
            if isinstance(data, dict):
                message = data.get("what") or data.get("detail") or MISSING_ID_MESSAGE
            raise ApiError(str(message), method="POST", path="/reservations")
        return reservation_id

    async def _create_attendees(
        self,
        reservation_id: int,
        on: date,
        attendees: Sequence[RosterEntry],
    ) -> List[Attendee]:
        payloads = attendee_payloads(reservation_id, attendees)
        if not payloads:
            return []

        outcomes = await asyncio.gather(
            *(self.api.create_attendee(payload) for payload in payloads),
            return_exceptions=True,
        )

        failures = [o for o in outcomes if isinstance(o, BaseException)]
        if failures:
            logger.warning(
                "Reservation left with missing attendees",
                reservation_id=reservation_id,
                failed=len(failures),
                written=len(outcomes) - len(failures),
            )
            raise failures[0]

        created = [attendee_from_reply(p, data) for p, data in zip(payloads, outcomes)]
        if any(a is None for a in created):
            return await self._reload_attendees(reservation_id, on, len(payloads))
        return created

    async def _reload_attendees(
        self, reservation_id: int, on: date, expected: int
    ) -> List[Attendee]:
        """Read back the attendees when some replies carried no record or id"""
        logger.info("Reloading attendees of new reservation", reservation_id=reservation_id)
        reservations = await self.api.list_reservations(on)
        match = next((r for r in reservations if r.id == reservation_id), None)
        if match is None:
            raise ApiError(
                f"Reservation {reservation_id} was saved but could not be read back",
                method="GET",
                path="/ops/reservations",
            )

        attendees = [
            a if a.reservation_id is not None else a.model_copy(update={"reservation_id": reservation_id})
            for a in match.attendees
        ]
        if len(attendees) != expected:
            logger.warning(
                "Attendee count differs after reload",
                reservation_id=reservation_id,
                expected=expected,
                found=len(attendees),
            )
        return attendees

    def _record(
        self,
        reservation_id: int,
        reservation: ReservationCreate,
        attendees: List[Attendee],
    ) -> None:
        self.state.reservations.upsert(
            Reservation(
                id=reservation_id,
                attendees=attendees,
                **reservation.model_dump(),
            )
        )
        for attendee in attendees:
            self.state.attendees.upsert(attendee)
