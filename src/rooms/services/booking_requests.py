"""Creation of (multi-date) booking and reservation requests."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date as date_type, time
from typing import Iterable, Optional

from django.contrib.auth import get_user_model
from django.db import DatabaseError, transaction
from rest_framework.exceptions import ValidationError

from src.rooms import notifications
from src.rooms.models import Booking, Room

from .conflicts import find_conflicting
from .exceptions import ConflictError, NotFoundError, TransactionFailed
from .policy import PolicyGate
from .queue import next_queue_position

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DateReport:
    date: date_type
    conflicts: list
    has_confirmed: bool
    queue_position: int


@dataclass
class BookingRequestResult:
    room: Room
    bookings: list[Booking]
    queue_positions: dict[str, int]
    notifications: list = field(default_factory=list)

    @property
    def ids(self):
        return [b.pk for b in self.bookings]

    @property
    def dates(self):
        return [b.date for b in self.bookings]


def normalize_type(value) -> str:
    """Anything other than a known type is treated as a plain booking."""
    return value if value in Booking.Type.values else Booking.Type.BOOKING


def unique_dates(dates: Iterable[date_type]) -> list[date_type]:
    seen = set()
    out = []
    for d in dates:
        if d not in seen:
            seen.add(d)
            out.append(d)
    return out


def analyze_date(room_id, day: date_type, start_time: time, end_time: time) -> DateReport:
    conflicts = find_conflicting(room_id, day, start_time, end_time)
    return DateReport(
        date=day,
        conflicts=conflicts,
        has_confirmed=any(b.status == Booking.Status.CONFIRMED for b in conflicts),
        queue_position=next_queue_position(room_id, day, start_time, end_time),
    )


def _insert_booking(**fields) -> Booking:
    return Booking.objects.create(**fields)


def create_booking_request(*, user_id, room_id, dates, start_time, end_time, booking_type,
                           actor=None, gate: Optional[PolicyGate] = None) -> BookingRequestResult:
    """
    Validate and store one pending row per requested date.

    A `booking` that overlaps a confirmed slot on any date is refused as a
    whole; a `reservation` is always accepted and joins the FIFO queue. All
    rows are inserted in one transaction: either every date is stored or
    none is. Notifications are returned, not sent.
    """
    User = get_user_model()
    if actor is None:
        actor = User.objects.filter(pk=user_id).first()
    (gate or PolicyGate()).check(actor)

    room = Room.objects.filter(pk=room_id).first()
    if room is None:
        raise NotFoundError("Room not found.")
    user = User.objects.filter(pk=user_id).first()
    if user is None:
        raise NotFoundError("User not found.")

    booking_type = normalize_type(booking_type)
    days = unique_dates(dates)
    if not days:
        raise ValidationError({"dates": ["At least one date is required."]})

    reports = [analyze_date(room.pk, d, start_time, end_time) for d in days]

    if booking_type == Booking.Type.BOOKING:
        blocked = [r.date for r in reports if r.has_confirmed]
        if blocked:
            logger.info("Booking refused for room %s on %s: confirmed overlap", room.pk, blocked)
            raise ConflictError(
                "The requested time slot is already booked on: "
                + ", ".join(d.isoformat() for d in blocked),
                conflicting_dates=blocked,
            )

    try:
        with transaction.atomic():
            created = [
                _insert_booking(
                    room=room,
                    user=user,
                    date=r.date,
                    start_time=start_time,
                    end_time=end_time,
                    type=booking_type,
                    status=Booking.Status.PENDING,
                )
                for r in reports
            ]
    except DatabaseError as exc:
        logger.exception("Booking insert failed for room %s, user %s; rolled back", room.pk, user.pk)
        raise TransactionFailed() from exc

    queue_positions = {r.date.isoformat(): r.queue_position for r in reports if r.conflicts}
    logger.info(
        "Created %s %s request(s) %s for room %s by user %s",
        len(created), booking_type, [b.pk for b in created], room.pk, user.pk,
    )

    intents = [
        notifications.request_received(user, room, created, queue_positions),
        notifications.admin_new_request(user, room, created, queue_positions),
    ]
    return BookingRequestResult(
        room=room,
        bookings=created,
        queue_positions=queue_positions,
        notifications=[i for i in intents if i is not None],
    )
