from .room import RoomViewSet
from .booking import BookingViewSet
from .filters import BookingFilter, RoomFilter

__all__ = [
    "RoomViewSet",
    "BookingViewSet",
    "BookingFilter",
    "RoomFilter",
]
