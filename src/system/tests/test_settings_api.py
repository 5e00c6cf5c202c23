from django.urls import reverse
from rest_framework.test import APITestCase

from src.rooms.factories import AdminFactory, SuperAdminFactory
from src.system.models import AuditLog, SystemSetting


class SystemSettingsApiTests(APITestCase):
    @classmethod
    def setUpTestData(cls):
        cls.root = SuperAdminFactory(email="root@example.com")
        cls.admin = AdminFactory(email="admin@example.com")
        cls.url = reverse("system:settings")

    def test_only_super_admin(self):
        self.assertEqual(self.client.get(self.url).status_code, 401)
        self.client.force_authenticate(self.admin)
        self.assertEqual(self.client.get(self.url).status_code, 403)

    def test_bulk_update_is_stored_and_audited(self):
        SystemSetting.objects.create(key="working_hours_start", value="08:00")
        self.client.force_authenticate(self.root)

        res = self.client.put(self.url, {"settings": [
            {"key": "working_hours_start", "value": "7:30"},
            {"key": "maintenance_mode", "value": "On"},
        ]}, format="json")

        self.assertEqual(res.status_code, 200, res.data)
        values = dict(SystemSetting.objects.values_list("key", "value"))
        self.assertEqual(values, {"working_hours_start": "07:30", "maintenance_mode": "true"})

        log = AuditLog.objects.get(action="SETTINGS_UPDATED")
        self.assertEqual(log.user, self.root)
        self.assertEqual(log.old_value, {"working_hours_start": "08:00"})
        self.assertEqual(log.new_value, {"working_hours_start": "07:30", "maintenance_mode": "true"})

        res = self.client.get(self.url)
        self.assertEqual([s["key"] for s in res.data], ["maintenance_mode", "working_hours_start"])
        self.assertEqual(res.data[0]["updated_by"]["email"], "root@example.com")

    def test_invalid_values_store_nothing(self):
        self.client.force_authenticate(self.root)
        res = self.client.put(self.url, {"settings": [
            {"key": "maintenance_mode", "value": "true"},
            {"key": "working_hours_end", "value": "six pm"},
        ]}, format="json")

        self.assertEqual(res.status_code, 400)
        self.assertFalse(SystemSetting.objects.exists())
        self.assertFalse(AuditLog.objects.exists())

    def test_empty_payload_rejected(self):
        self.client.force_authenticate(self.root)
        res = self.client.put(self.url, {"settings": []}, format="json")
        self.assertEqual(res.status_code, 400)


class WorkingHoursApiTests(APITestCase):

    def test_public_working_hours(self):
        SystemSetting.objects.create(key="working_hours_start", value="06:00")
        SystemSetting.objects.create(key="working_hours_end", value="06:00")

        res = self.client.get(reverse("system:working-hours"))

        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["start"], "06:00")
        self.assertEqual(res.data["end"], "06:00")
        self.assertTrue(res.data["within_hours"])
        self.assertIsNone(res.data["message"])
        self.assertFalse(res.data["maintenance_mode"])
