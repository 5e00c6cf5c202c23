from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views_modules import RoomViewSet, BookingViewSet

app_name = "rooms"

router = DefaultRouter()
router.register(r"rooms", RoomViewSet, basename="room")
router.register(r"bookings", BookingViewSet, basename="booking")

urlpatterns = [
    path("", include(router.urls)),
]
