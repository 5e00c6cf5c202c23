import random
from datetime import time, timedelta

import factory
from django.contrib.auth import get_user_model
from django.utils import timezone
from factory import Faker, LazyFunction, post_generation
from factory.django import DjangoModelFactory

from .models import Room, Booking

SPACES = ("Ground Floor", "First Floor", "Innovation Wing", "Studio Wing", "Rooftop")
AMENITY_POOL = ("Projector", "Whiteboard", "Wi-Fi", "Air conditioning", "Video conferencing", "Sound system")

# ---------------------------------------------------------------------------

class UserFactory(DjangoModelFactory):
    """
    Demo user. CustomUser has no 'username' field, so we only set email & names.
    Password is hashed in @post_generation.
    """
    class Meta:
        model = get_user_model()
        django_get_or_create = ("email",)

    email = factory.Sequence(lambda n: f"user{n}@example.com")
    first_name = Faker("first_name")
    last_name = Faker("last_name")
    department = Faker("job")

    @post_generation
    def password(self, create, extracted, **kwargs):
        pwd = extracted or "Passw0rd!"
        self.set_password(pwd)
        if create:
            self.save()

class AdminFactory(UserFactory):
    """Moderates bookings."""
    role = "admin"

class SuperAdminFactory(UserFactory):
    role = "super_admin"

# ---------------------------------------------------------------------------

class RoomFactory(DjangoModelFactory):
    class Meta:
        model = Room
        django_get_or_create = ("name",)

    name = factory.Sequence(lambda n: f"Room {n + 1}")
    space = factory.LazyFunction(lambda: random.choice(SPACES))
    capacity = factory.LazyFunction(lambda: random.choice((4, 6, 8, 12, 20, 40)))
    amenities = factory.LazyFunction(lambda: random.sample(AMENITY_POOL, k=random.randint(1, 3)))

class BookingFactory(DjangoModelFactory):
    """Pending one-hour booking a few days ahead; use trait `confirmed` for an approved one."""
    class Meta:
        model = Booking

    room = factory.SubFactory(RoomFactory)
    user = factory.SubFactory(UserFactory)

    date = LazyFunction(lambda: timezone.localdate() + timedelta(days=random.randint(2, 20)))
    start_time = time(9, 0)
    end_time = time(10, 0)
    type = Booking.Type.BOOKING
    status = Booking.Status.PENDING

    class Params:
        confirmed = factory.Trait(status=Booking.Status.CONFIRMED)
        reservation = factory.Trait(type=Booking.Type.RESERVATION)
