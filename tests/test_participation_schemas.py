# ABOUTME: Tests participation record validation, identity, and display formatting.
# ABOUTME: Also checks inclusive date window semantics and whole-day widening.

from datetime import date, datetime

import pytest

from src.common.errors import InvalidArgumentError
from src.common.schemas import DateWindow, ParticipationRecord


def test_record_holds_fields():
    record = ParticipationRecord("alice", 5, True)
    assert record.student_username == "alice"
    assert record.distinct_peers_answered == 5
    assert record.meets_requirement is True


def test_record_allows_zero_count():
    record = ParticipationRecord("bob", 0, False)
    assert record.distinct_peers_answered == 0
    assert record.status == "NEEDS MORE"


@pytest.mark.parametrize("username", [None, "", "   "])
def test_record_rejects_blank_username(username):
    with pytest.raises(InvalidArgumentError):
        ParticipationRecord(username, 1, False)


def test_record_rejects_negative_count():
    with pytest.raises(InvalidArgumentError):
        ParticipationRecord("carol", -1, False)


def test_record_equality_uses_username_only():
    assert ParticipationRecord("dana", 1, False) == ParticipationRecord("dana", 4, True)
    assert ParticipationRecord("dana", 1, False) != ParticipationRecord("Dana", 1, False)
    assert len({ParticipationRecord("dana", 1, False), ParticipationRecord("dana", 4, True)}) == 1


def test_record_str_shows_status():
    meets = str(ParticipationRecord("eve", 3, True))
    needs = str(ParticipationRecord("frank", 1, False))

    assert "eve" in meets and " 3 distinct" in meets and meets.endswith("MEETS")
    assert "frank" in needs and needs.endswith("NEEDS MORE")


def test_invalid_argument_is_value_error():
    with pytest.raises(ValueError):
        ParticipationRecord("", 0, False)


def test_window_bounds_are_inclusive():
    window = DateWindow(datetime(2025, 1, 2), datetime(2025, 1, 8))
    assert window.contains(datetime(2025, 1, 2))
    assert window.contains(datetime(2025, 1, 8))
    assert not window.contains(datetime(2025, 1, 1, 23, 59))
    assert not window.contains(datetime(2025, 1, 8, 0, 0, 1))


def test_window_without_bounds_contains_everything():
    window = DateWindow()
    assert window.is_unbounded
    assert window.contains(datetime(1999, 12, 31))


def test_from_dates_widens_to_whole_days():
    window = DateWindow.from_dates(date(2025, 1, 2), date(2025, 1, 8))
    assert window.start == datetime(2025, 1, 2, 0, 0)
    assert window.end == datetime(2025, 1, 8, 23, 59, 59, 999999)
    assert window.contains(datetime(2025, 1, 8, 22, 30))


def test_from_dates_passes_datetimes_through():
    start = datetime(2025, 1, 2, 9, 30)
    window = DateWindow.from_dates(start, None)
    assert window.start == start
    assert window.end is None
