"""
Booking engine: conflict detection, FIFO queueing, the request-time policy
gate, multi-date creation and status transitions.

Views call `create_booking_request`, `set_status` and `cancel_booking`; the
other modules are their building blocks. Every error raised here is a DRF
APIException, so views let it propagate to the default exception handler.
"""

from .booking_requests import create_booking_request, BookingRequestResult
from .conflicts import find_conflicting, intervals_overlap
from .policy import PolicyGate
from .queue import get_queue, next_queue_position, queue_position_of
from .transitions import set_status, cancel_booking, TransitionResult

__all__ = [
    "create_booking_request",
    "BookingRequestResult",
    "find_conflicting",
    "intervals_overlap",
    "PolicyGate",
    "get_queue",
    "next_queue_position",
    "queue_position_of",
    "set_status",
    "cancel_booking",
    "TransitionResult",
]
