"""Booking wizard: date and room, then table, then attendees, then review"""

import enum
from datetime import date
from typing import Callable, List, Optional, Union

import structlog

from clubtable.booking.availability import AvailabilityQuery
from clubtable.booking.roster import RosterBuilder
from clubtable.booking.submitter import BookingSubmitter
from clubtable.config import Settings, get_settings
from clubtable.errors import ValidationError
from clubtable.schemas.auth import CurrentUser
from clubtable.schemas.booking import BookingResult
from clubtable.schemas.dining import Table, TableAvailability
from clubtable.schemas.reservation import MEAL_PERIODS, MealType, ReservationCreate

logger = structlog.get_logger()


class WizardStep(enum.IntEnum):
    """Wizard steps in order"""
    CHOOSE_DATE_AND_ROOM = 1
    CHOOSE_TABLE = 2
    BUILD_ROSTER = 3
    REVIEW = 4


class BookingWizard:
    """State of one booking in progress.

    Moving forward is gated by the current step's validity; moving back is
    always allowed. ``cancel()`` throws everything away.
    """

    def __init__(
        self,
        availability: AvailabilityQuery,
        submitter: BookingSubmitter,
        user: Optional[CurrentUser] = None,
        settings: Optional[Settings] = None,
        today: Callable[[], date] = date.today,
    ):
        self.availability = availability
        self.submitter = submitter
        self.user = user
        self.settings = settings or get_settings()
        self._today = today
        self.last_result: Optional[BookingResult] = None
        self._reset()

    def _reset(self) -> None:
        self.step = WizardStep.CHOOSE_DATE_AND_ROOM
        self.date: Optional[date] = self._today()
        self.meal_type: Optional[MealType] = None
        self.room_id: Optional[int] = None
        self.tables: List[TableAvailability] = []
        self.selected_table: Optional[Table] = None
        self.notes = ""
        self.roster = RosterBuilder(default_capacity=self.settings.default_table_capacity)
        if self.user is not None:
            self.roster.initialize(self.user.name, self.user.member_id)

    # Step 1

    def choose(
        self,
        on: Optional[date] = None,
        meal_type: Optional[Union[MealType, str]] = None,
        room_id: Optional[int] = None,
    ) -> None:
        """Set any of date, meal period and room"""
        if on is not None:
            self.date = on
        if meal_type is not None:
            self.meal_type = MealType(meal_type)
        if room_id is not None:
            self.room_id = room_id

        if self.step > WizardStep.CHOOSE_DATE_AND_ROOM:
            # Loaded tables belong to the old selection
            self.tables = []
            self.selected_table = None
            self.roster.seat_count = None

    # Predicates

    @property
    def date_and_room_valid(self) -> bool:
        return bool(self.date and self.meal_type and self.room_id)

    @property
    def table_valid(self) -> bool:
        return self.selected_table is not None

    @property
    def roster_valid(self) -> bool:
        return self.roster.is_valid

    def _blocker(self, step: WizardStep) -> Optional[str]:
        """Why the wizard cannot leave ``step`` (None if it can)"""
        if not self.date_and_room_valid:
            return "Pick a date, meal and dining room"
        if step >= WizardStep.CHOOSE_TABLE and not self.table_valid:
            return "Pick an available table"
        if step >= WizardStep.BUILD_ROSTER and not self.roster_valid:
            return "Every attendee needs a name"
        return None

    @property
    def can_advance(self) -> bool:
        return self.step < WizardStep.REVIEW and self._blocker(self.step) is None

    @property
    def can_submit(self) -> bool:
        return (
            self.step == WizardStep.REVIEW
            and self._blocker(WizardStep.REVIEW) is None
            and not self.submitter.submitting
        )

    # Transitions

    async def advance(self) -> WizardStep:
        if self.step == WizardStep.REVIEW:
            raise ValidationError("Already at the last step")

        blocker = self._blocker(self.step)
        if blocker:
            raise ValidationError(blocker)

        self.step = WizardStep(self.step + 1)
        if self.step == WizardStep.CHOOSE_TABLE:
            await self.load_tables()
        return self.step

    def back(self) -> WizardStep:
        if self.step > WizardStep.CHOOSE_DATE_AND_ROOM:
            self.step = WizardStep(self.step - 1)
        return self.step

    def cancel(self) -> None:
        logger.debug("Booking wizard cancelled", step=self.step.name)
        self._reset()

    # Step 2

    async def load_tables(self) -> List[TableAvailability]:
        """Reload the room's tables; any previous selection is dropped"""
        self.selected_table = None
        self.roster.seat_count = None
        self.tables = await self.availability.fetch(self.date, self.meal_type, self.room_id)
        return self.tables

    def select_table(self, table_id: int) -> Table:
        match = next((t for t in self.tables if t.table.id == table_id), None)
        if match is None:
            raise ValidationError(f"Table {table_id} is not in this dining room")
        if match.taken:
            raise ValidationError(f"Table {match.table.table_number} is unavailable")
        if match.table.seat_count < len(self.roster):
            raise ValidationError(
                f"Table {match.table.table_number} seats {match.table.seat_count}, "
                f"party has {len(self.roster)}"
            )

        self.selected_table = match.table
        self.roster.seat_count = match.table.seat_count
        return match.table

    # Step 4

    def reservation_payload(self) -> ReservationCreate:
        start_time, end_time = MEAL_PERIODS[self.meal_type]
        return ReservationCreate(
            date=self.date,
            meal_type=self.meal_type,
            start_time=start_time,
            end_time=end_time,
            dining_room_id=self.room_id,
            table_id=self.selected_table.id,
            notes=self.notes.strip() or None,
        )

    async def submit(self) -> BookingResult:
        """Submit the booking; a successful one resets the wizard"""
        if self.step != WizardStep.REVIEW:
            raise ValidationError("Review the booking before submitting")
        if self.submitter.submitting:
            raise ValidationError("A booking is already being submitted")
        blocker = self._blocker(WizardStep.REVIEW)
        if blocker:
            raise ValidationError(blocker)

        result = await self.submitter.book(self.reservation_payload(), self.roster.entries)
        self.last_result = result
        if result.success:
            self._reset()
        return result
