from rest_framework import status
from rest_framework.exceptions import APIException


class BookingError(APIException):
    """Base for booking engine errors; `detail` is `{"detail", "code", ...extra}`."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Booking request failed."
    default_code = "BOOKING_ERROR"

    def __init__(self, message=None, *, code=None, **extra):
        self.message = message or str(self.default_detail)
        self.error_code = code or self.default_code
        self.extra = extra
        super().__init__(detail={"detail": self.message, "code": self.error_code, **extra}, code=self.error_code)


class NotFoundError(BookingError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found."
    default_code = "NOT_FOUND"


class ConflictError(BookingError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "The requested time slot is already booked."
    default_code = "BOOKING_CONFLICT"

    def __init__(self, message=None, *, conflicting_dates=(), **extra):
        self.conflicting_dates = [d.isoformat() if hasattr(d, "isoformat") else str(d) for d in conflicting_dates]
        super().__init__(message, conflicting_dates=self.conflicting_dates, **extra)


class PolicyRejection(BookingError):
    """The request-time gate refused the actor."""
    status_code = status.HTTP_403_FORBIDDEN
    default_code = "POLICY_REJECTED"


class MaintenanceModeError(PolicyRejection):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = "System is under maintenance. Please try again later."
    default_code = "MAINTENANCE_MODE"


class OutsideWorkingHoursError(PolicyRejection):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "System is only available during working hours."
    default_code = "OUTSIDE_WORKING_HOURS"

    def __init__(self, message=None, *, start, end, **extra):
        self.working_hours = {"start": start, "end": end}
        super().__init__(message, working_hours=self.working_hours, **extra)


class StateError(BookingError):
    default_detail = "Booking is not in a state that allows this action."
    default_code = "INVALID_STATE"


class OwnershipError(StateError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "You can only cancel your own bookings."
    default_code = "NOT_OWNER"


class InvalidStatusError(BookingError):
    default_detail = "Status must be 'confirmed' or 'rejected'."
    default_code = "INVALID_STATUS"


class TransactionFailed(BookingError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Failed to create booking. Please try again."
    default_code = "TRANSACTION_FAILED"
