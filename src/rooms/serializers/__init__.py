from .common import PublicUserTinySerializer
from .room import RoomSerializer
from .booking import (
    BookingSerializer,
    BookingRequestSerializer,
    BookingRequestResultSerializer,
    BookingStatusSerializer,
    BookingCancelSerializer,
    SlotQuerySerializer,
)

__all__ = [
    "PublicUserTinySerializer",
    "RoomSerializer",
    "BookingSerializer",
    "BookingRequestSerializer",
    "BookingRequestResultSerializer",
    "BookingStatusSerializer",
    "BookingCancelSerializer",
    "SlotQuerySerializer",
]
