"""Reservation booking workflow"""

from clubtable.booking.availability import AvailabilityQuery, tag_tables, taken_table_ids
from clubtable.booking.member_search import MemberSearch
from clubtable.booking.roster import RosterBuilder
from clubtable.booking.submitter import BookingSubmitter
from clubtable.booking.wizard import BookingWizard, WizardStep

__all__ = [
    "AvailabilityQuery",
    "BookingSubmitter",
    "BookingWizard",
    "MemberSearch",
    "RosterBuilder",
    "WizardStep",
    "tag_tables",
    "taken_table_ids",
]
