from datetime import time, timedelta

from django.urls import reverse
from django.utils import timezone
from rest_framework.test import APITestCase

from src.rooms.factories import AdminFactory, BookingFactory, RoomFactory, UserFactory
from src.rooms.models import Booking, Room
from src.system.models import AuditLog


class RoomApiTests(APITestCase):
    @classmethod
    def setUpTestData(cls):
        cls.user = UserFactory(email="member@example.com")
        cls.admin = AdminFactory(email="admin@example.com")
        cls.room = RoomFactory(name="Main Hall", capacity=40)
        cls.list_url = reverse("rooms:room-list")

    def test_anonymous_can_list_rooms(self):
        res = self.client.get(self.list_url)
        self.assertEqual(res.status_code, 200)
        self.assertEqual([r["name"] for r in res.data], ["Main Hall"])
        self.assertIsNone(res.data[0]["status"])

    def test_status_for_date(self):
        day = timezone.localdate() + timedelta(days=3)
        booked = RoomFactory(name="Booked Room")
        reserved = RoomFactory(name="Reserved Room")
        BookingFactory(room=booked, date=day)
        BookingFactory(room=reserved, date=day, reservation=True)
        BookingFactory(room=self.room, date=day, status=Booking.Status.CANCELLED)

        res = self.client.get(self.list_url, {"date": day.isoformat()})

        statuses = {r["name"]: r["status"] for r in res.data}
        self.assertEqual(statuses, {
            "Booked Room": "Booked",
            "Main Hall": "Available",
            "Reserved Room": "Reserved",
        })

    def test_invalid_date_param(self):
        res = self.client.get(self.list_url, {"date": "tomorrow"})
        self.assertEqual(res.status_code, 400)
        self.assertIn("date", res.data)

    def test_admin_creates_room_and_it_is_audited(self):
        self.client.force_authenticate(self.admin)
        res = self.client.post(
            self.list_url,
            {"name": "Lab 2", "space": "Innovation Wing", "capacity": 10, "amenities": ["Projector"]},
            format="json",
        )
        self.assertEqual(res.status_code, 201, res.data)
        self.assertEqual(res.data["amenities"], ["Projector"])

        log = AuditLog.objects.get(action="ROOM_CREATED")
        self.assertEqual(log.user, self.admin)
        self.assertEqual(log.entity_type, "room")
        self.assertEqual(log.entity_id, res.data["id"])
        self.assertEqual(log.new_value["name"], "Lab 2")

    def test_room_validation(self):
        self.client.force_authenticate(self.admin)
        res = self.client.post(self.list_url, {"name": "Main Hall", "capacity": 5}, format="json")
        self.assertEqual(res.status_code, 400)
        self.assertIn("name", res.data)
        res = self.client.post(self.list_url, {"name": "Tiny", "capacity": 0}, format="json")
        self.assertEqual(res.status_code, 400)
        self.assertIn("capacity", res.data)

    def test_member_cannot_write(self):
        self.client.force_authenticate(self.user)
        res = self.client.post(self.list_url, {"name": "Nope", "capacity": 2}, format="json")
        self.assertEqual(res.status_code, 403)
        res = self.client.delete(reverse("rooms:room-detail", args=[self.room.id]))
        self.assertEqual(res.status_code, 403)

    def test_delete_cascades_bookings_and_is_audited(self):
        BookingFactory(room=self.room)
        BookingFactory(room=self.room, confirmed=True, start_time=time(13), end_time=time(14))
        self.client.force_authenticate(self.admin)

        res = self.client.delete(reverse("rooms:room-detail", args=[self.room.id]))

        self.assertEqual(res.status_code, 204)
        self.assertFalse(Room.objects.filter(pk=self.room.id).exists())
        self.assertFalse(Booking.objects.filter(room_id=self.room.id).exists())
        log = AuditLog.objects.get(action="ROOM_DELETED")
        self.assertEqual(log.old_value["name"], "Main Hall")
