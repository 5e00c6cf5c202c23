"""Admin decisions (confirm/reject) and owner cancellation."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from django.conf import settings
from django.db import transaction
from rest_framework.exceptions import ValidationError

from src.rooms import notifications
from src.rooms.models import Booking

from .conflicts import conflicting_queryset
from .exceptions import (
    ConflictError, InvalidStatusError, NotFoundError, OwnershipError, StateError,
)

logger = logging.getLogger(__name__)

DECISION_STATUSES = (Booking.Status.CONFIRMED, Booking.Status.REJECTED)
MAX_REASON_LENGTH = 500


@dataclass
class TransitionResult:
    booking: Booking
    previous_status: str
    notifications: list = field(default_factory=list)


def _locked_booking(booking_id) -> Booking:
    booking = (
        Booking.objects
        .select_for_update()
        .select_related('room', 'user')
        .filter(pk=booking_id)
        .first()
    )
    if booking is None:
        raise NotFoundError("Booking not found.")
    return booking


def set_status(booking_id, new_status, actor) -> TransitionResult:
    """Confirm or reject a pending booking. The caller has already checked the actor is an admin."""
    if new_status not in DECISION_STATUSES:
        raise InvalidStatusError()

    with transaction.atomic():
        booking = _locked_booking(booking_id)
        previous = booking.status
        if previous != Booking.Status.PENDING:
            raise StateError(
                f"Only pending bookings can be {new_status}; this one is {previous}.",
                status=previous,
            )

        if new_status == Booking.Status.CONFIRMED and getattr(settings, 'BOOKING_BLOCK_CONFLICTING_CONFIRM', True):
            taken = conflicting_queryset(
                booking.room_id, booking.date, booking.start_time, booking.end_time, exclude_id=booking.pk,
            ).filter(status=Booking.Status.CONFIRMED)
            if taken.exists():
                raise ConflictError(
                    "Another confirmed booking already holds this time slot.",
                    conflicting_dates=[booking.date],
                )

        booking.status = new_status
        booking.save(update_fields=['status', 'updated_at'])

    logger.info(
        "Booking %s %s -> %s by %s", booking.pk, previous, new_status, getattr(actor, 'pk', None),
    )
    return TransitionResult(
        booking=booking,
        previous_status=previous,
        notifications=[notifications.status_update(booking)],
    )


def cancel_booking(booking_id, actor, reason) -> TransitionResult:
    """Owner cancels a pending or confirmed booking, giving a reason."""
    reason = (reason or '').strip()

    with transaction.atomic():
        booking = _locked_booking(booking_id)
        if booking.user_id != getattr(actor, 'pk', None):
            raise OwnershipError()
        previous = booking.status
        if previous == Booking.Status.CANCELLED:
            raise StateError("Booking is already cancelled.", code="ALREADY_CANCELLED", status=previous)
        if previous == Booking.Status.REJECTED:
            raise StateError("Rejected bookings cannot be cancelled.", status=previous)
        if not reason:
            raise ValidationError({"reason": ["Cancellation reason is required."]})
        if len(reason) > MAX_REASON_LENGTH:
            raise ValidationError({"reason": [f"Ensure this field has no more than {MAX_REASON_LENGTH} characters."]})

        booking.status = Booking.Status.CANCELLED
        booking.cancellation_reason = reason
        booking.save(update_fields=['status', 'cancellation_reason', 'updated_at'])

    logger.info("Booking %s cancelled by user %s", booking.pk, actor.pk)
    intents = [
        notifications.cancellation_notice(booking),
        notifications.admin_cancellation_notice(booking),
    ]
    return TransitionResult(
        booking=booking,
        previous_status=previous,
        notifications=[i for i in intents if i is not None],
    )
