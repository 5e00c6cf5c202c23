from django.conf import settings
from django.test import override_settings
from django.urls import reverse
from rest_framework.test import APITestCase

from src.rooms.factories import UserFactory

# For tests we only *lower the rates* for the specific scopes we hit.
# We must MERGE into existing REST_FRAMEWORK so that throttle classes remain enabled.
TEST_RATES = {
    "rooms_list": "2/min",
    "bookings_mutation": "2/min",
    "auth_login": "2/min",
}

RF_MERGED = {
    **settings.REST_FRAMEWORK,
    "DEFAULT_THROTTLE_RATES": {
        **settings.REST_FRAMEWORK.get("DEFAULT_THROTTLE_RATES", {}),
        **TEST_RATES,
    },
}


@override_settings(REST_FRAMEWORK=RF_MERGED)
class RoomsThrottleTests(APITestCase):

    def test_rooms_list_throttling(self):
        """Third anonymous GET to room-list should be throttled (429)."""
        url = reverse("rooms:room-list")
        r1 = self.client.get(url)
        self.assertEqual(r1.status_code, 200)
        r2 = self.client.get(url)
        self.assertEqual(r2.status_code, 200)
        r3 = self.client.get(url)
        self.assertEqual(r3.status_code, 429)


@override_settings(REST_FRAMEWORK=RF_MERGED)
class BookingsThrottleTests(APITestCase):

    def test_cancel_attempts_are_throttled(self):
        """Mutations share one scope; the third POST within a minute is refused."""
        user = UserFactory(email="spam@example.com")
        self.client.force_authenticate(user)
        url = reverse("rooms:booking-cancel", args=[1])

        self.assertEqual(self.client.post(url, {"reason": "x"}, format="json").status_code, 404)
        self.assertEqual(self.client.post(url, {"reason": "x"}, format="json").status_code, 404)
        self.assertEqual(self.client.post(url, {"reason": "x"}, format="json").status_code, 429)


@override_settings(REST_FRAMEWORK=RF_MERGED)
class AuthThrottleTests(APITestCase):

    def test_login_throttling(self):
        """Third POST with wrong creds should be throttled (429) on auth_login scope."""
        url = reverse("token_obtain_pair")
        payload = {"email": "nonexistent@example.com", "password": "wrongpassword"}

        r1 = self.client.post(url, payload)
        self.assertEqual(r1.status_code, 401)  # wrong creds
        r2 = self.client.post(url, payload)
        self.assertEqual(r2.status_code, 401)
        r3 = self.client.post(url, payload)
        self.assertEqual(r3.status_code, 429)
