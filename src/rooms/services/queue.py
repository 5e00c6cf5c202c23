"""FIFO ordering of pending requests competing for the same slot."""

from __future__ import annotations

from datetime import date as date_type, time
from typing import Optional

from src.rooms.models import Booking

from .conflicts import conflicting_queryset

QUEUE_ORDER = ('created_at', 'id')


def get_queue(room_id, date: date_type, start_time: time, end_time: time,
              *, exclude_id: Optional[int] = None) -> list[Booking]:
    """Pending bookings overlapping the window, oldest first (ties by id)."""
    return list(
        conflicting_queryset(room_id, date, start_time, end_time, exclude_id=exclude_id)
        .filter(status=Booking.Status.PENDING)
        .order_by(*QUEUE_ORDER)
    )


def next_queue_position(room_id, date: date_type, start_time: time, end_time: time) -> int:
    """Position a new request for this window would take: always the end of the queue."""
    return len(get_queue(room_id, date, start_time, end_time)) + 1


def queue_position_of(booking: Booking) -> Optional[int]:
    """1-based rank of a pending booking among the pending requests overlapping it."""
    if booking.status != Booking.Status.PENDING:
        return None
    ahead = [
        b for b in get_queue(booking.room_id, booking.date, booking.start_time, booking.end_time,
                             exclude_id=booking.pk)
        if (b.created_at, b.pk) < (booking.created_at, booking.pk)
    ]
    return len(ahead) + 1
