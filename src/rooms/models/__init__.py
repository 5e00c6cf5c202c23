from .room import Room
from .booking import Booking

__all__ = [
    "Room",
    "Booking",
]
