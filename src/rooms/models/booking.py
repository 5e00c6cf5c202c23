from django.db import models
from django.conf import settings

from .room import Room


class Booking(models.Model):
    """One room, one date, one [start_time, end_time) window."""

    class Type(models.TextChoices):
        BOOKING = 'booking', 'Booking'
        RESERVATION = 'reservation', 'Reservation'

    class Status(models.TextChoices):
        PENDING = 'pending', 'Pending'
        CONFIRMED = 'confirmed', 'Confirmed'
        REJECTED = 'rejected', 'Rejected'
        CANCELLED = 'cancelled', 'Cancelled'

    # Statuses that occupy a slot; rejected/cancelled are terminal and never conflict.
    ACTIVE_STATUSES = (Status.PENDING, Status.CONFIRMED)

    room = models.ForeignKey(Room, on_delete=models.CASCADE, related_name='bookings')
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='bookings')
    date = models.DateField()
    start_time = models.TimeField()
    end_time = models.TimeField()
    type = models.CharField(max_length=20, choices=Type.choices, default=Type.BOOKING)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)
    cancellation_reason = models.TextField(blank=True, default='')

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(
                fields=['room', 'date', 'status'],
                name='booking_slot_idx',
            ),
        ]

    def __str__(self):
        return f"{self.user} → {self.room} {self.date} {self.start_time:%H:%M}-{self.end_time:%H:%M} [{self.status}]"
