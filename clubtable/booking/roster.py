"""Attendee roster built client-side before the reservation exists"""

from typing import Any, List, Optional, Sequence
from uuid import uuid4

from clubtable.config import settings
from clubtable.errors import ValidationError
from clubtable.schemas.attendee import (
    MEMBER,
    SELF,
    AttendeeCreate,
    DietaryRestriction,
    RosterEntry,
    dietary_from_choice,
)
from clubtable.schemas.member import Member

SELF_KEY = "self"

EDITABLE_FIELDS = ("name", "attendee_type", "dietary_restrictions")


def _placeholder() -> RosterEntry:
    return RosterEntry(temp_id=SELF_KEY, name="", attendee_type=SELF)


def attendee_payloads(
    reservation_id: int, entries: Sequence[RosterEntry]
) -> List[AttendeeCreate]:
    """Attendee writes for a created reservation (temp ids dropped)"""
    return [
        AttendeeCreate(
            reservation_id=reservation_id,
            name=entry.name.strip(),
            attendee_type=entry.attendee_type,
            dietary_restrictions=entry.dietary_restrictions,
            member_id=entry.member_id,
        )
        for entry in entries
    ]


def _coerce_dietary(value: Any) -> Optional[DietaryRestriction]:
    if value is None or isinstance(value, DietaryRestriction):
        return value
    if isinstance(value, str):
        return dietary_from_choice(value)
    return DietaryRestriction.model_validate(value)


class RosterBuilder:
    """Ordered list of people attending, capped by the table's seats.

    Row 0 is the primary guest. It can be blanked but never removed, so the
    roster always has at least one row. Every operation replaces the row
    list rather than mutating it.
    """

    def __init__(self, default_capacity: Optional[int] = None):
        self.default_capacity = default_capacity or settings.default_table_capacity
        self.seat_count: Optional[int] = None
        self._entries: List[RosterEntry] = [_placeholder()]

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def entries(self) -> List[RosterEntry]:
        return list(self._entries)

    @property
    def capacity(self) -> int:
        """Seats of the selected table, or the soft default before one is chosen"""
        return self.seat_count or self.default_capacity

    @property
    def remaining_seats(self) -> int:
        return max(0, self.capacity - len(self._entries))

    @property
    def can_add(self) -> bool:
        return len(self._entries) < self.capacity

    @property
    def is_valid(self) -> bool:
        return bool(self._entries) and all(not e.is_blank for e in self._entries)

    def initialize(self, self_name: Optional[str] = None, member_id: Optional[int] = None) -> None:
        """Start over with a single primary-guest row"""
        self._entries = [
            RosterEntry(
                temp_id=SELF_KEY,
                name=self_name or "",
                attendee_type=MEMBER if member_id else SELF,
                member_id=member_id,
            )
        ]

    def load(self, entries: Sequence[RosterEntry]) -> None:
        """Replace the roster with prepared rows"""
        if not entries:
            raise ValidationError("At least one attendee is required")
        if len(entries) > self.capacity:
            raise ValidationError(
                f"{len(entries)} attendees do not fit {self.capacity} seats"
            )
        self._entries = list(entries)

    def add_guest(self) -> bool:
        """Append a blank guest row; refused at capacity"""
        if not self.can_add:
            return False
        self._entries = self._entries + [
            RosterEntry(temp_id=f"guest-{uuid4().hex[:8]}")
        ]
        return True

    def add_member(self, member: Member) -> bool:
        """Add a known member, filling the blank first row if there is one"""
        if any(e.member_id == member.id for e in self._entries):
            return False

        entry = RosterEntry(
            temp_id=f"member-{member.id}",
            name=member.name,
            attendee_type=member.relation.lower() if member.relation else MEMBER,
            dietary_restrictions=member.dietary_restrictions,
            member_id=member.id,
        )

        if self._entries and self._entries[0].is_blank:
            self._entries = [entry] + self._entries[1:]
            return True

        if not self.can_add:
            return False
        self._entries = self._entries + [entry]
        return True

    def remove_guest(self, index: int) -> bool:
        """Remove a row other than the first"""
        if index <= 0 or index >= len(self._entries):
            return False
        self._entries = self._entries[:index] + self._entries[index + 1:]
        return True

    def clear_first_row(self) -> None:
        """Blank the primary-guest row without removing it"""
        self._entries = [_placeholder()] + self._entries[1:]

    def update_attendee(self, index: int, field: str, value: Any) -> bool:
        if field not in EDITABLE_FIELDS:
            raise ValidationError(f"Attendee field '{field}' cannot be edited")
        if index < 0 or index >= len(self._entries):
            return False

        if field == "dietary_restrictions":
            value = _coerce_dietary(value)

        updated = self._entries[index].model_copy(update={field: value})
        self._entries = self._entries[:index] + [updated] + self._entries[index + 1:]
        return True

    def to_payloads(self, reservation_id: int) -> List[AttendeeCreate]:
        return attendee_payloads(reservation_id, self._entries)
