from django.db import models


class Room(models.Model):
    AVAILABLE = 'Available'
    BOOKED = 'Booked'
    RESERVED = 'Reserved'

    name = models.CharField(max_length=100, unique=True)
    space = models.CharField(max_length=100, blank=True, default='')
    capacity = models.PositiveIntegerField(default=1)
    amenities = models.JSONField(default=list, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['name']

    def __str__(self):
        return self.name

    def status_on(self, day):
        """Available / Booked / Reserved for `day`, from the earliest active booking."""
        from .booking import Booking

        first = (
            self.bookings
            .filter(date=day, status__in=Booking.ACTIVE_STATUSES)
            .order_by('created_at', 'id')
            .values_list('type', flat=True)
            .first()
        )
        if first is None:
            return self.AVAILABLE
        return self.BOOKED if first == Booking.Type.BOOKING else self.RESERVED
