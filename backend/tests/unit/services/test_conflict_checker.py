# backend/tests/unit/services/test_conflict_checker.py
"""
Tests for ConflictChecker against a real session.

Sessions occupy the half-open interval [start, start + duration).
"""

from datetime import date, time

import pytest

from dialoom.core.enums import BookingStatus, HostVerificationStatus
from dialoom.services.conflict_checker import ConflictChecker, session_interval

DAY = date(2024, 1, 1)


@pytest.fixture
def host(make_user):
    return make_user(host_status=HostVerificationStatus.VERIFIED)


@pytest.fixture
def checker(db):
    return ConflictChecker(db)


def test_session_interval_crosses_midnight():
    start, end = session_interval(DAY, time(23, 30), 60)

    assert start.date() == DAY
    assert end.date() == date(2024, 1, 2)
    assert end.time() == time(0, 30)


def test_overlapping_booking_is_reported(checker, host, guest, make_booking):
    existing = make_booking(host, guest, DAY, time(10, 0), 60)

    conflicts = checker.check_booking_conflicts(host.id, DAY, time(10, 30), 60)

    assert len(conflicts) == 1
    assert conflicts[0]["booking_id"] == existing.id
    assert conflicts[0]["start_time"] == "10:00"
    assert conflicts[0]["end_time"] == "11:00"


@pytest.mark.parametrize("start", [time(9, 0), time(11, 0)])
def test_touching_edges_do_not_conflict(checker, host, guest, make_booking, start):
    make_booking(host, guest, DAY, time(10, 0), 60)

    assert checker.has_conflict(host.id, DAY, start, 60) is False


def test_enclosing_request_conflicts(checker, host, guest, make_booking):
    make_booking(host, guest, DAY, time(10, 15), 15)

    assert checker.has_conflict(host.id, DAY, time(10, 0), 60) is True


def test_cancelled_bookings_free_the_slot(checker, host, guest, make_booking):
    make_booking(host, guest, DAY, time(10, 0), 60, status=BookingStatus.CANCELLED)

    assert checker.has_conflict(host.id, DAY, time(10, 0), 60) is False


@pytest.mark.parametrize("status", [BookingStatus.CONFIRMED, BookingStatus.COMPLETED])
def test_confirmed_and_completed_block(checker, host, guest, make_booking, status):
    make_booking(host, guest, DAY, time(10, 0), 60, status=status)

    assert checker.has_conflict(host.id, DAY, time(10, 0), 30) is True


def test_previous_day_session_running_past_midnight(checker, host, guest, make_booking):
    make_booking(host, guest, date(2023, 12, 31), time(23, 30), 60)

    assert checker.has_conflict(host.id, DAY, time(0, 0), 30) is True
    assert checker.has_conflict(host.id, DAY, time(0, 30), 30) is False


def test_request_running_into_next_day(checker, host, guest, make_booking):
    make_booking(host, guest, date(2024, 1, 2), time(0, 15), 30)

    assert checker.has_conflict(host.id, DAY, time(23, 45), 60) is True


def test_other_hosts_do_not_conflict(checker, host, guest, make_user, make_booking):
    other_host = make_user(host_status=HostVerificationStatus.VERIFIED)
    make_booking(other_host, guest, DAY, time(10, 0), 60)

    assert checker.has_conflict(host.id, DAY, time(10, 0), 60) is False


def test_excluded_booking_is_ignored(checker, host, guest, make_booking):
    existing = make_booking(host, guest, DAY, time(10, 0), 60)

    assert (
        checker.has_conflict(host.id, DAY, time(10, 0), 60, exclude_booking_id=existing.id)
        is False
    )
