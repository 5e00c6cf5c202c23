"""
Booking e-mails.

The booking engine only builds `NotificationIntent` values; views hand them to
`dispatch_notifications`, which sends after the surrounding transaction
commits. A failed send is logged and never affects stored data or the HTTP
response.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Iterable

from django.conf import settings
from django.core.mail import send_mail
from django.db import transaction
from django.template.loader import render_to_string
from django.utils.html import strip_tags

logger = logging.getLogger(__name__)

TEMPLATE_DIR = "rooms/email"


@dataclass(frozen=True)
class NotificationIntent:
    to: str
    subject: str
    template: str
    context: dict = field(default_factory=dict)


def _admin_mailbox():
    return getattr(settings, "BOOKING_ADMIN_EMAIL", "") or ""


def _booking_context(booking):
    user = booking.user
    return {
        "booking_id": booking.pk,
        "full_name": user.full_name,
        "user_email": user.email,
        "room_name": booking.room.name,
        "date": booking.date.isoformat(),
        "start_time": booking.start_time.strftime("%H:%M"),
        "end_time": booking.end_time.strftime("%H:%M"),
        "type": booking.type,
        "status": booking.status,
        "frontend_url": getattr(settings, "FRONTEND_URL", ""),
    }


def request_received(user, room, bookings, queue_positions):
    """Receipt to the requester for a (possibly multi-date) request."""
    first = bookings[0]
    context = {
        "full_name": user.full_name,
        "room_name": room.name,
        "dates": [b.date.isoformat() for b in bookings],
        "start_time": first.start_time.strftime("%H:%M"),
        "end_time": first.end_time.strftime("%H:%M"),
        "type": first.type,
        "queue_positions": dict(queue_positions),
        "frontend_url": getattr(settings, "FRONTEND_URL", ""),
    }
    return NotificationIntent(
        to=user.email,
        subject=f"{first.get_type_display()} request received - {room.name}",
        template="request_received.html",
        context=context,
    )


def admin_new_request(user, room, bookings, queue_positions):
    mailbox = _admin_mailbox()
    if not mailbox:
        return None
    first = bookings[0]
    return NotificationIntent(
        to=mailbox,
        subject=f"New {first.type} request: {room.name}",
        template="admin_new_request.html",
        context={
            "full_name": user.full_name,
            "user_email": user.email,
            "department": user.department,
            "room_name": room.name,
            "dates": [b.date.isoformat() for b in bookings],
            "start_time": first.start_time.strftime("%H:%M"),
            "end_time": first.end_time.strftime("%H:%M"),
            "type": first.type,
            "queue_positions": dict(queue_positions),
        },
    )


def status_update(booking):
    verb = "Confirmed" if booking.status == booking.Status.CONFIRMED else "Rejected"
    return NotificationIntent(
        to=booking.user.email,
        subject=f"Booking {verb} - {booking.room.name}",
        template="status_update.html",
        context=_booking_context(booking),
    )


def cancellation_notice(booking):
    return NotificationIntent(
        to=booking.user.email,
        subject=f"Booking Cancelled - {booking.room.name}",
        template="cancellation.html",
        context={**_booking_context(booking), "reason": booking.cancellation_reason},
    )


def admin_cancellation_notice(booking):
    mailbox = _admin_mailbox()
    if not mailbox:
        return None
    return NotificationIntent(
        to=mailbox,
        subject=f"Booking #{booking.pk} cancelled by {booking.user.email}",
        template="admin_cancellation.html",
        context={**_booking_context(booking), "reason": booking.cancellation_reason},
    )


def reminder(booking):
    return NotificationIntent(
        to=booking.user.email,
        subject="Upcoming Room Booking Reminder",
        template="reminder.html",
        context=_booking_context(booking),
    )


def send_notification(intent: NotificationIntent) -> bool:
    """Render and send one e-mail; True on success, False (logged) on any failure."""
    try:
        html_message = render_to_string(f"{TEMPLATE_DIR}/{intent.template}", intent.context)
        send_mail(
            subject=intent.subject,
            message=strip_tags(html_message),
            from_email=settings.DEFAULT_FROM_EMAIL,
            recipient_list=[intent.to],
            html_message=html_message,
            fail_silently=False,
        )
    except Exception:
        logger.exception("Failed to send '%s' to %s", intent.subject, intent.to)
        return False
    logger.info("Email sent to %s: %s", intent.to, intent.subject)
    return True


def send_notifications(intents: Iterable[NotificationIntent]) -> int:
    return sum(1 for intent in intents if intent is not None and send_notification(intent))


def _send_in_background(intents: list[NotificationIntent]) -> None:
    threading.Thread(
        target=send_notifications, args=(intents,), name="booking-mail", daemon=True,
    ).start()


def dispatch_notifications(intents: Iterable[NotificationIntent]) -> None:
    """
    Send `intents` once the current transaction commits (immediately in autocommit).

    With `BOOKING_EMAIL_ASYNC` on, the commit callback hands the batch to a
    daemon thread so the response never waits on the mail server.
    """
    pending = [i for i in intents if i is not None]
    if not pending:
        return
    if getattr(settings, "BOOKING_EMAIL_ASYNC", False):
        transaction.on_commit(lambda: _send_in_background(pending))
    else:
        transaction.on_commit(lambda: send_notifications(pending))
