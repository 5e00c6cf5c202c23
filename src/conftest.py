import pytest
from django.core.cache import caches
from django.conf import settings
from rest_framework.test import APIClient


@pytest.fixture(autouse=True)
def clear_all_caches():
    """Reset throttle history and any per-site cache before every test."""
    for alias in settings.CACHES.keys():
        caches[alias].clear()


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def member(db):
    from src.rooms.factories import UserFactory

    return UserFactory(email="member@example.com")


@pytest.fixture
def other_member(db):
    from src.rooms.factories import UserFactory

    return UserFactory(email="other@example.com")


@pytest.fixture
def moderator(db):
    from src.rooms.factories import AdminFactory

    return AdminFactory(email="moderator@example.com")


@pytest.fixture
def super_admin(db):
    from src.rooms.factories import SuperAdminFactory

    return SuperAdminFactory(email="root@example.com")


@pytest.fixture
def room(db):
    from src.rooms.factories import RoomFactory

    return RoomFactory(name="Boardroom", capacity=12)


@pytest.fixture
def open_gate():
    from src.rooms.services import PolicyGate
    from src.rooms.tests.helpers import StaticProvider

    return PolicyGate(StaticProvider())
