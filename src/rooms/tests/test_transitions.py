from datetime import time, timedelta

import pytest
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from src.rooms.factories import BookingFactory
from src.rooms.models import Booking
from src.rooms.services import cancel_booking, create_booking_request, queue_position_of, set_status
from src.rooms.services.exceptions import (
    ConflictError, InvalidStatusError, NotFoundError, OwnershipError, StateError,
)

pytestmark = pytest.mark.django_db


@pytest.fixture
def day():
    return timezone.localdate() + timedelta(days=6)


@pytest.fixture
def pending(room, member, day):
    return BookingFactory(room=room, user=member, date=day, start_time=time(9), end_time=time(11))


def test_confirm_pending_booking(pending, moderator):
    result = set_status(pending.pk, "confirmed", moderator)

    pending.refresh_from_db()
    assert pending.status == Booking.Status.CONFIRMED
    assert result.previous_status == Booking.Status.PENDING
    assert [n.to for n in result.notifications] == [pending.user.email]


def test_reject_pending_booking(pending, moderator):
    set_status(pending.pk, "rejected", moderator)
    pending.refresh_from_db()
    assert pending.status == Booking.Status.REJECTED


@pytest.mark.parametrize("value", ["cancelled", "pending", "approved", ""])
def test_only_confirm_or_reject_are_accepted(pending, moderator, value):
    with pytest.raises(InvalidStatusError) as exc:
        set_status(pending.pk, value, moderator)
    assert exc.value.detail["code"] == "INVALID_STATUS"


def test_decisions_require_pending_status(pending, moderator):
    set_status(pending.pk, "rejected", moderator)

    with pytest.raises(StateError) as exc:
        set_status(pending.pk, "confirmed", moderator)

    assert exc.value.detail["status"] == "rejected"
    pending.refresh_from_db()
    assert pending.status == Booking.Status.REJECTED


def test_missing_booking_is_not_found(moderator):
    with pytest.raises(NotFoundError):
        set_status(424242, "confirmed", moderator)


def test_confirm_refuses_second_confirmed_overlap(pending, room, other_member, day, moderator):
    BookingFactory(room=room, user=other_member, date=day, start_time=time(10), end_time=time(12), confirmed=True)

    with pytest.raises(ConflictError):
        set_status(pending.pk, "confirmed", moderator)

    pending.refresh_from_db()
    assert pending.status == Booking.Status.PENDING


def test_confirm_guard_can_be_switched_off(pending, room, other_member, day, moderator, settings):
    settings.BOOKING_BLOCK_CONFLICTING_CONFIRM = False
    BookingFactory(room=room, user=other_member, date=day, start_time=time(10), end_time=time(12), confirmed=True)

    set_status(pending.pk, "confirmed", moderator)

    pending.refresh_from_db()
    assert pending.status == Booking.Status.CONFIRMED


def test_owner_cancels_with_reason(pending, member, settings):
    settings.BOOKING_ADMIN_EMAIL = "desk@example.com"

    result = cancel_booking(pending.pk, member, "  Meeting moved online  ")

    pending.refresh_from_db()
    assert pending.status == Booking.Status.CANCELLED
    assert pending.cancellation_reason == "Meeting moved online"
    assert [n.to for n in result.notifications] == [member.email, "desk@example.com"]


def test_cancel_twice_reports_already_cancelled(pending, member):
    cancel_booking(pending.pk, member, "first")

    with pytest.raises(StateError) as exc:
        cancel_booking(pending.pk, member, "second")

    assert exc.value.detail["code"] == "ALREADY_CANCELLED"
    pending.refresh_from_db()
    assert pending.cancellation_reason == "first"


def test_only_owner_may_cancel(pending, other_member, moderator):
    for actor in (other_member, moderator):
        with pytest.raises(OwnershipError) as exc:
            cancel_booking(pending.pk, actor, "not mine")
        assert exc.value.status_code == 403
        assert isinstance(exc.value, StateError)
    pending.refresh_from_db()
    assert pending.status == Booking.Status.PENDING


def test_rejected_booking_cannot_be_cancelled(pending, member, moderator):
    set_status(pending.pk, "rejected", moderator)
    with pytest.raises(StateError):
        cancel_booking(pending.pk, member, "too late")


@pytest.mark.parametrize("reason", ["", "   ", "x" * 501])
def test_reason_is_required_and_bounded(pending, member, reason):
    with pytest.raises(ValidationError):
        cancel_booking(pending.pk, member, reason)
    pending.refresh_from_db()
    assert pending.status == Booking.Status.PENDING


def test_confirmed_booking_can_be_cancelled(pending, member, moderator):
    set_status(pending.pk, "confirmed", moderator)
    cancel_booking(pending.pk, member, "plans changed")
    pending.refresh_from_db()
    assert pending.status == Booking.Status.CANCELLED


def test_competing_requests_end_to_end(room, member, other_member, moderator, day, open_gate):
    """A books, B reserves the same slot; A is confirmed, B can then only be rejected."""
    slot = dict(room_id=room.pk, dates=[day], start_time=time(14), end_time=time(15), gate=open_gate)

    first = create_booking_request(user_id=member.pk, booking_type="booking", **slot)
    second = create_booking_request(user_id=other_member.pk, booking_type="reservation", **slot)
    assert second.queue_positions == {day.isoformat(): 2}

    set_status(first.ids[0], "confirmed", moderator)

    # B's queue position reflects that A left the pending queue.
    assert Booking.objects.get(pk=second.ids[0]).status == Booking.Status.PENDING
    assert queue_position_of(Booking.objects.get(pk=second.ids[0])) == 1

    with pytest.raises(ConflictError):
        set_status(second.ids[0], "confirmed", moderator)

    set_status(second.ids[0], "rejected", moderator)
    statuses = dict(Booking.objects.filter(room=room, date=day).values_list("user_id", "status"))
    assert statuses == {member.pk: "confirmed", other_member.pk: "rejected"}

    # A third plain booking for the slot is now refused outright.
    with pytest.raises(ConflictError):
        create_booking_request(user_id=other_member.pk, booking_type="booking", **slot)
