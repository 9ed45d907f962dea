"""Member schemas"""

from typing import Optional
from pydantic import BaseModel

from clubtable.schemas.attendee import DietaryRestriction


class Member(BaseModel):
    """Club member (or a member's family relation) available to pre-fill attendees"""
    id: int
    name: str
    relation: Optional[str] = None
    dietary_restrictions: Optional[DietaryRestriction] = None
