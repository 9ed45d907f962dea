"""Tests for the attendee roster"""

import pytest

from clubtable.booking.roster import SELF_KEY, RosterBuilder
from clubtable.errors import ValidationError
from clubtable.schemas.attendee import DietaryRestriction, RosterEntry
from clubtable.schemas.member import Member

SPOUSE = Member(id=11, name="Byron Lovelace", relation="Spouse", dietary_restrictions="Vegan")
FRIEND = Member(id=12, name="Alice Brown")
COLLEAGUE = Member(id=13, name="Charles Babbage")


def test_starts_with_placeholder_row():
    roster = RosterBuilder(default_capacity=4)

    assert len(roster) == 1
    assert roster.entries[0].temp_id == SELF_KEY
    assert roster.entries[0].is_blank
    assert not roster.is_valid


def test_initialize_with_member():
    roster = RosterBuilder(default_capacity=4)

    roster.initialize("Ada Lovelace", member_id=10)

    assert roster.entries[0].name == "Ada Lovelace"
    assert roster.entries[0].attendee_type == "member"
    assert roster.entries[0].member_id == 10
    assert roster.is_valid


@pytest.mark.parametrize("seat_count", [None, 1, 2, 4, 6])
def test_never_exceeds_capacity(seat_count):
    roster = RosterBuilder(default_capacity=4)
    roster.seat_count = seat_count
    roster.initialize("Ada Lovelace")

    for _ in range(10):
        roster.add_guest()
        assert len(roster) <= roster.capacity
    for member in (SPOUSE, FRIEND, COLLEAGUE):
        roster.add_member(member)
        assert len(roster) <= roster.capacity

    assert len(roster) == roster.capacity
    assert not roster.can_add
    assert roster.remaining_seats == 0
    assert not roster.add_guest()


def test_default_capacity_before_table_is_chosen():
    roster = RosterBuilder(default_capacity=4)

    assert roster.capacity == 4
    roster.seat_count = 6
    assert roster.capacity == 6


def test_first_row_cannot_be_removed():
    roster = RosterBuilder(default_capacity=4)
    roster.initialize("Ada Lovelace")
    roster.add_guest()

    for _ in range(5):
        assert not roster.remove_guest(0)
    assert not roster.remove_guest(-1)
    assert not roster.remove_guest(5)

    assert roster.remove_guest(1)
    assert not roster.remove_guest(1)
    assert len(roster) == 1
    assert roster.entries[0].name == "Ada Lovelace"


def test_clear_first_row_keeps_it():
    roster = RosterBuilder(default_capacity=4)
    roster.initialize("Ada Lovelace", member_id=10)

    roster.clear_first_row()

    assert len(roster) == 1
    assert roster.entries[0].is_blank
    assert roster.entries[0].member_id is None
    assert roster.entries[0].attendee_type == "self"


def test_member_fills_blank_first_row():
    roster = RosterBuilder(default_capacity=4)

    assert roster.add_member(SPOUSE)

    assert len(roster) == 1
    entry = roster.entries[0]
    assert entry.name == "Byron Lovelace"
    assert entry.attendee_type == "spouse"
    assert entry.dietary_restrictions == DietaryRestriction(note="Vegan")


def test_member_appended_when_first_row_is_named():
    roster = RosterBuilder(default_capacity=4)
    roster.initialize("Ada Lovelace")

    assert roster.add_member(FRIEND)

    assert [e.name for e in roster.entries] == ["Ada Lovelace", "Alice Brown"]
    assert roster.entries[1].attendee_type == "member"


def test_member_appended_when_first_row_is_named_at_capacity_is_refused():
    roster = RosterBuilder(default_capacity=1)
    roster.initialize("Ada Lovelace")

    assert not roster.add_member(FRIEND)
    assert len(roster) == 1


def test_blank_first_row_replaced_even_at_capacity():
    roster = RosterBuilder(default_capacity=1)

    assert roster.add_member(FRIEND)
    assert roster.entries[0].name == "Alice Brown"


def test_same_member_is_not_added_twice():
    roster = RosterBuilder(default_capacity=4)
    roster.initialize("Ada Lovelace")

    assert roster.add_member(FRIEND)
    assert not roster.add_member(FRIEND)
    assert len(roster) == 2


def test_update_replaces_rows():
    roster = RosterBuilder(default_capacity=4)
    before = roster.entries
    original = before[0]

    assert roster.update_attendee(0, "name", "Ada Lovelace")

    assert before[0] is original
    assert original.name == ""
    assert roster.entries[0].name == "Ada Lovelace"


def test_update_dietary_from_picker():
    roster = RosterBuilder(default_capacity=4)

    roster.update_attendee(0, "dietary_restrictions", "Gluten-free")
    assert roster.entries[0].dietary_restrictions.note == "Gluten-free"

    roster.update_attendee(0, "dietary_restrictions", "None")
    assert roster.entries[0].dietary_restrictions is None


def test_update_rejects_unknown_field():
    roster = RosterBuilder(default_capacity=4)

    with pytest.raises(ValidationError):
        roster.update_attendee(0, "member_id", 99)

    assert not roster.update_attendee(3, "name", "Nobody")


def test_blank_name_invalidates_roster():
    roster = RosterBuilder(default_capacity=4)
    roster.initialize("Ada Lovelace")
    roster.add_guest()

    assert not roster.is_valid
    roster.update_attendee(1, "name", "   ")
    assert not roster.is_valid
    roster.update_attendee(1, "name", "Mary Somerville")
    assert roster.is_valid


def test_load_checks_size():
    roster = RosterBuilder(default_capacity=2)

    with pytest.raises(ValidationError):
        roster.load([])
    with pytest.raises(ValidationError):
        roster.load([RosterEntry(temp_id=str(i), name=f"Guest {i}") for i in range(3)])

    roster.load([RosterEntry(temp_id="a", name="Guest A")])
    assert len(roster) == 1


def test_payloads_drop_temp_ids():
    roster = RosterBuilder(default_capacity=4)
    roster.initialize("  Ada Lovelace ", member_id=10)
    roster.add_member(SPOUSE)

    payloads = roster.to_payloads(42)

    assert [p.reservation_id for p in payloads] == [42, 42]
    assert payloads[0].name == "Ada Lovelace"
    assert payloads[1].member_id == 11
    assert "temp_id" not in payloads[0].model_dump()
