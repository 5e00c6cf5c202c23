from django.core.management.base import BaseCommand
from django.contrib.auth import get_user_model
from faker import Faker

from src.rooms.factories import RoomFactory, UserFactory


class Command(BaseCommand):
    help = "Seed database with demo rooms and users"

    def add_arguments(self, parser):
        parser.add_argument("--rooms", type=int, default=8, help="How many rooms to create")
        parser.add_argument("--users", type=int, default=5, help="How many users to create")
        parser.add_argument("--password", type=str, default="Passw0rd!", help="Default password for created users")

    def handle(self, *args, **opts):
        fake = Faker()
        User = get_user_model()

        users = []
        for i in range(opts["users"]):
            email = f"user{i+1}@example.com"
            if User.objects.filter(email=email).exists():
                continue
            users.append(UserFactory(
                email=email,
                phone_number=fake.numerify(text="+2547########"),
                password=opts["password"],
            ))

        rooms = [RoomFactory() for _ in range(opts["rooms"])]

        self.stdout.write(
            self.style.SUCCESS(
                f"Seeded {len(users)} users and {len(rooms)} rooms. "
                f"Default user password: {opts['password']}"
            )
        )
