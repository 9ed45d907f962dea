"""Availability query: which tables of a room are free for a date and meal period"""

import asyncio
from datetime import date
from typing import Iterable, List, Set, Union

import structlog

from clubtable.client.api import ClubApi
from clubtable.errors import ApiError
from clubtable.schemas.dining import Table, TableAvailability
from clubtable.schemas.reservation import AvailabilityEntry, MealType, ReservationStatus

logger = structlog.get_logger()


def taken_table_ids(
    entries: Iterable[AvailabilityEntry],
    meal_type: Union[MealType, str],
) -> Set[int]:
    """Tables booked by a non-cancelled reservation for this meal period"""
    period = MealType(meal_type).value
    return {
        entry.table_id
        for entry in entries
        if entry.table_id is not None
        and entry.meal_type == period
        and entry.status != ReservationStatus.CANCELLED.value
    }


def tag_tables(tables: Iterable[Table], taken: Set[int]) -> List[TableAvailability]:
    """Tag tables in their original order"""
    return [TableAvailability(table=table, taken=table.id in taken) for table in tables]


class AvailabilityQuery:
    """Loads a room's tables and marks the ones already booked.

    Failures resolve to an empty list so the caller shows a "no tables"
    state instead of an error.
    """

    def __init__(self, api: ClubApi):
        self.api = api

    async def fetch(
        self,
        on: date,
        meal_type: Union[MealType, str],
        room_id: int,
    ) -> List[TableAvailability]:
        tables, entries = await asyncio.gather(
            self.api.list_room_tables(room_id),
            self.api.get_availability(on),
            return_exceptions=True,
        )

        for outcome in (tables, entries):
            if isinstance(outcome, ApiError):
                logger.warning(
                    "Availability lookup failed",
                    date=on.isoformat(),
                    meal_type=MealType(meal_type).value,
                    room_id=room_id,
                    error=outcome.message,
                )
                return []
            if isinstance(outcome, BaseException):
                raise outcome

        taken = taken_table_ids(entries, meal_type)
        logger.debug(
            "Availability loaded",
            room_id=room_id,
            tables=len(tables),
            taken=len(taken),
        )
        return tag_tables(tables, taken)
