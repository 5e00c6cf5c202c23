from rest_framework import serializers
from drf_spectacular.utils import extend_schema_field, OpenApiTypes
from django.utils import timezone

from src.rooms.models import Booking
from src.rooms.services import queue_position_of
from src.rooms.services.booking_requests import normalize_type
from src.rooms.services.transitions import MAX_REASON_LENGTH
from .common import PublicUserTinySerializer, hhmm_field

DATE_ERRORS = {"invalid": "Invalid date or format. Expected YYYY-MM-DD and a real calendar date."}


class BookingSerializer(serializers.ModelSerializer):
    """Read model for booking lists and action responses."""
    room_name = serializers.CharField(source="room.name", read_only=True)
    user = PublicUserTinySerializer(read_only=True)
    start_time = hhmm_field(read_only=True)
    end_time = hhmm_field(read_only=True)
    queue_position = serializers.SerializerMethodField(read_only=True)
    can_cancel = serializers.SerializerMethodField(read_only=True)
    can_decide = serializers.SerializerMethodField(read_only=True)

    class Meta:
        model = Booking
        fields = (
            "id",
            "room", "room_name",
            "user",
            "date", "start_time", "end_time",
            "type", "status", "cancellation_reason",
            "queue_position",
            "created_at", "updated_at",
            "can_cancel", "can_decide",
        )
        read_only_fields = fields

    @extend_schema_field(OpenApiTypes.INT)
    def get_queue_position(self, obj):
        return queue_position_of(obj)

    def _user(self):
        return getattr(self.context.get("request"), "user", None)

    @extend_schema_field(OpenApiTypes.BOOL)
    def get_can_cancel(self, obj):
        user = self._user()
        return bool(
            user
            and obj.user_id == getattr(user, "id", None)
            and obj.status in Booking.ACTIVE_STATUSES
        )

    @extend_schema_field(OpenApiTypes.BOOL)
    def get_can_decide(self, obj):
        user = self._user()
        return bool(user and getattr(user, "is_admin_role", False) and obj.status == Booking.Status.PENDING)


class BookingRequestSerializer(serializers.Serializer):
    """
    Input for POST /bookings/.

    A `booking` covers the single `date`; a `reservation` may list several
    `dates`. Any `type` other than `reservation` (blank, null, unknown) is
    stored as `booking`.
    """
    room = serializers.IntegerField(min_value=1)
    date = serializers.DateField(required=False, error_messages=DATE_ERRORS)
    dates = serializers.ListField(
        child=serializers.DateField(error_messages=DATE_ERRORS),
        required=False,
        allow_empty=False,
    )
    start_time = hhmm_field()
    end_time = hhmm_field()
    type = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, default=Booking.Type.BOOKING,
    )

    def validate(self, attrs):
        errors = {}
        if attrs["end_time"] <= attrs["start_time"]:
            errors["end_time"] = ["End time must be after start time."]

        attrs["type"] = normalize_type(attrs.get("type"))
        single = attrs.get("date")
        many = attrs.get("dates") or []
        if attrs["type"] == Booking.Type.RESERVATION:
            requested = many or ([single] if single else [])
        else:
            # Plain bookings only read `date`; `dates` is reservation-only.
            requested = [single] if single else []
        if not requested:
            if attrs["type"] == Booking.Type.BOOKING and many:
                errors["date"] = ["A booking takes a single date; use type=reservation for several dates."]
            else:
                errors["date"] = ["Either date or dates is required."]

        today = timezone.localdate()
        if any(d < today for d in requested):
            errors.setdefault("date", []).append("Cannot book for past dates.")

        if errors:
            raise serializers.ValidationError(errors)
        attrs["requested_dates"] = requested
        return attrs


class BookingRequestResultSerializer(serializers.Serializer):
    ids = serializers.ListField(child=serializers.IntegerField())
    room = serializers.IntegerField(source="room.pk")
    room_name = serializers.CharField(source="room.name")
    dates = serializers.ListField(child=serializers.DateField())
    start_time = serializers.SerializerMethodField()
    end_time = serializers.SerializerMethodField()
    type = serializers.SerializerMethodField()
    status = serializers.SerializerMethodField()
    queue_positions = serializers.DictField(child=serializers.IntegerField())
    bookings = BookingSerializer(many=True)

    @extend_schema_field(OpenApiTypes.STR)
    def get_start_time(self, obj):
        return obj.bookings[0].start_time.strftime("%H:%M")

    @extend_schema_field(OpenApiTypes.STR)
    def get_end_time(self, obj):
        return obj.bookings[0].end_time.strftime("%H:%M")

    @extend_schema_field(OpenApiTypes.STR)
    def get_type(self, obj):
        return obj.bookings[0].type

    @extend_schema_field(OpenApiTypes.STR)
    def get_status(self, obj):
        return obj.bookings[0].status


class BookingStatusSerializer(serializers.Serializer):
    # Plain CharField: the engine reports unsupported values as INVALID_STATUS.
    status = serializers.CharField(max_length=20)


class BookingCancelSerializer(serializers.Serializer):
    reason = serializers.CharField(max_length=MAX_REASON_LENGTH, trim_whitespace=True)


class SlotQuerySerializer(serializers.Serializer):
    """Query params for queue/conflicts lookups."""
    room = serializers.IntegerField(min_value=1)
    date = serializers.DateField(error_messages=DATE_ERRORS)
    start_time = hhmm_field()
    end_time = hhmm_field()

    def validate(self, attrs):
        if attrs["end_time"] <= attrs["start_time"]:
            raise serializers.ValidationError({"end_time": ["End time must be after start time."]})
        return attrs
