from datetime import time, timedelta

import pytest
from django.utils import timezone

from src.rooms.factories import BookingFactory, RoomFactory
from src.rooms.models import Booking
from src.rooms.services import find_conflicting, intervals_overlap

pytestmark = pytest.mark.django_db

T = time


@pytest.fixture
def day():
    return timezone.localdate() + timedelta(days=3)


@pytest.fixture
def existing(room, member, day):
    """Stored 10:00-12:00 pending booking."""
    return BookingFactory(room=room, user=member, date=day, start_time=T(10), end_time=T(12))


@pytest.mark.parametrize("a, b, expected", [
    ((T(9), T(11)), (T(10), T(12)), True),
    ((T(11), T(13)), (T(10), T(12)), True),
    ((T(10, 30), T(11, 30)), (T(10), T(12)), True),
    ((T(9), T(13)), (T(10), T(12)), True),
    ((T(12), T(13)), (T(10), T(12)), False),
    ((T(8), T(10)), (T(10), T(12)), False),
    ((T(13), T(14)), (T(10), T(12)), False),
])
def test_intervals_overlap_is_symmetric(a, b, expected):
    assert intervals_overlap(*a, *b) is expected
    assert intervals_overlap(*b, *a) is expected


def test_identical_windows_overlap():
    assert intervals_overlap(T(9), T(10), T(9), T(10))


@pytest.mark.parametrize("start, end", [
    (T(9), T(11)),          # starts before, ends inside
    (T(11), T(13)),         # starts inside, ends after
    (T(10, 30), T(11, 30)), # fully inside
    (T(9), T(13)),          # covers it entirely
    (T(10), T(12)),         # same window
])
def test_every_overlap_shape_is_detected(existing, room, day, start, end):
    found = find_conflicting(room.pk, day, start, end)
    assert [b.pk for b in found] == [existing.pk]


@pytest.mark.parametrize("start, end", [(T(12), T(13)), (T(8), T(10))])
def test_touching_windows_do_not_conflict(existing, room, day, start, end):
    assert find_conflicting(room.pk, day, start, end) == []


def test_other_room_or_date_does_not_conflict(existing, room, day):
    other_room = RoomFactory(name="Annex")
    assert find_conflicting(other_room.pk, day, T(10), T(12)) == []
    assert find_conflicting(room.pk, day + timedelta(days=1), T(10), T(12)) == []


@pytest.mark.parametrize("terminal", [Booking.Status.REJECTED, Booking.Status.CANCELLED])
def test_terminal_bookings_never_conflict(existing, room, day, terminal):
    existing.status = terminal
    existing.save()
    assert find_conflicting(room.pk, day, T(10), T(12)) == []


def test_confirmed_and_pending_both_conflict(existing, room, member, day):
    confirmed = BookingFactory(
        room=room, user=member, date=day, start_time=T(11), end_time=T(14), confirmed=True,
    )
    found = {b.pk for b in find_conflicting(room.pk, day, T(11), T(12))}
    assert found == {existing.pk, confirmed.pk}


def test_exclude_id_skips_the_booking_itself(existing, room, day):
    assert find_conflicting(room.pk, day, T(10), T(12), exclude_id=existing.pk) == []
