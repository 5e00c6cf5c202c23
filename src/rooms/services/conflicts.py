"""Overlap detection between a requested window and stored bookings of one room/date."""

from __future__ import annotations

from datetime import date as date_type, time
from typing import Optional

from src.rooms.models import Booking


def intervals_overlap(a_start: time, a_end: time, b_start: time, b_end: time) -> bool:
    """Half-open intervals [a_start, a_end) and [b_start, b_end) share at least one instant."""
    return a_start < b_end and a_end > b_start


def conflicting_queryset(room_id, date: date_type, start_time: time, end_time: time,
                         *, exclude_id: Optional[int] = None):
    # Same predicate as intervals_overlap, evaluated in SQL.
    qs = Booking.objects.filter(
        room_id=room_id,
        date=date,
        status__in=Booking.ACTIVE_STATUSES,
        start_time__lt=end_time,
        end_time__gt=start_time,
    )
    if exclude_id is not None:
        qs = qs.exclude(pk=exclude_id)
    return qs


def find_conflicting(room_id, date: date_type, start_time: time, end_time: time,
                     *, exclude_id: Optional[int] = None) -> list[Booking]:
    """
    Every pending or confirmed booking of `room_id` on `date` overlapping
    [start_time, end_time). Touching windows (one ends exactly when the other
    starts) do not conflict. No ordering is guaranteed.
    """
    return list(conflicting_queryset(room_id, date, start_time, end_time, exclude_id=exclude_id))
