"""Attendee schemas"""

from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, model_validator


SELF = "self"
MEMBER = "member"
GUEST = "guest"

DIETARY_OPTIONS = [
    "None",
    "Vegetarian",
    "Vegan",
    "Gluten-free",
    "Halal",
    "Kosher",
    "Nut allergy",
    "Dairy-free",
]


class DietaryRestriction(BaseModel):
    """Dietary note attached to an attendee or member"""
    note: str

    @model_validator(mode="before")
    @classmethod
    def _coerce(cls, data: Any) -> Any:
        if isinstance(data, str):
            return {"note": data}
        if isinstance(data, dict) and "note" not in data:
            return {"note": ", ".join(str(v) for v in data.values() if v)}
        return data


def dietary_from_choice(choice: Optional[str]) -> Optional[DietaryRestriction]:
    """Map a dietary picker value to a restriction ("None" clears it)"""
    if not choice or choice == "None":
        return None
    return DietaryRestriction(note=choice)


class Attendee(BaseModel):
    """Persisted attendee of a reservation"""
    id: int
    reservation_id: Optional[int] = None
    name: str
    attendee_type: str = GUEST
    dietary_restrictions: Optional[DietaryRestriction] = None
    member_id: Optional[int] = None
    seat_id: Optional[int] = None


class AttendeeCreate(BaseModel):
    """Create attendee request"""
    reservation_id: int
    name: str
    attendee_type: str
    dietary_restrictions: Optional[DietaryRestriction] = None
    member_id: Optional[int] = None


class AttendeeUpdate(BaseModel):
    """Update attendee request"""
    name: Optional[str] = None
    dietary_restrictions: Optional[DietaryRestriction] = None
    seat_id: Optional[int] = None


class RosterEntry(BaseModel):
    """Attendee row being built before the reservation exists"""
    model_config = ConfigDict(frozen=True)

    temp_id: str
    name: str = ""
    attendee_type: str = GUEST
    dietary_restrictions: Optional[DietaryRestriction] = None
    member_id: Optional[int] = None

    @property
    def is_blank(self) -> bool:
        return not self.name.strip()
