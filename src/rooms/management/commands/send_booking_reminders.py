import logging
from datetime import timedelta

from django.conf import settings
from django.core.management.base import BaseCommand
from django.utils import timezone

from src.rooms import notifications
from src.rooms.models import Booking

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "E-mail owners of confirmed bookings that start within the lead time (run from cron)"

    def add_arguments(self, parser):
        parser.add_argument(
            "--minutes", type=int, default=None,
            help="Lead time in minutes (default: BOOKING_REMINDER_LEAD_MINUTES)",
        )

    def handle(self, *args, **opts):
        lead = opts["minutes"] or getattr(settings, "BOOKING_REMINDER_LEAD_MINUTES", 60)
        now = timezone.localtime()
        horizon = now + timedelta(minutes=lead)
        if horizon.date() != now.date():
            # Window ends at midnight; bookings are stored per date.
            horizon = now.replace(hour=23, minute=59, second=59, microsecond=0)

        upcoming = (
            Booking.objects
            .filter(
                status=Booking.Status.CONFIRMED,
                date=now.date(),
                start_time__gte=now.time().replace(microsecond=0),
                start_time__lte=horizon.time(),
            )
            .select_related('room', 'user')
            .order_by('start_time')
        )

        sent = notifications.send_notifications(notifications.reminder(b) for b in upcoming)
        logger.info("Booking reminders sent: %s", sent)
        self.stdout.write(self.style.SUCCESS(f"Sent {sent} reminder(s)."))
