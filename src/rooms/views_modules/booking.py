import logging

from django_filters import rest_framework as df
from rest_framework import viewsets, mixins, permissions, status
from rest_framework.decorators import action
from rest_framework.response import Response
from drf_spectacular.utils import (
    extend_schema_view, extend_schema, OpenApiParameter, OpenApiTypes,
    OpenApiExample, OpenApiResponse
)

from src.users.permissions import IsAdminRole

from ..models import Booking, Room
from ..notifications import dispatch_notifications
from ..pagination import BookingPagination
from ..permissions import IsBookingOwnerOrAdminRole
from ..serializers import (
    BookingSerializer,
    BookingRequestSerializer,
    BookingRequestResultSerializer,
    BookingStatusSerializer,
    BookingCancelSerializer,
    SlotQuerySerializer,
)
from ..serializers.common import DetailSerializer
from ..services import (
    create_booking_request, set_status as apply_status, cancel_booking, find_conflicting, get_queue,
)
from ..services.exceptions import NotFoundError
from ..throttling import ScopedRateThrottleIsolated
from .filters import BookingFilter

logger = logging.getLogger(__name__)

SLOT_PARAMS = [
    OpenApiParameter("room", OpenApiTypes.INT, required=True),
    OpenApiParameter("date", OpenApiTypes.DATE, required=True),
    OpenApiParameter("start_time", OpenApiTypes.STR, required=True, description="HH:MM"),
    OpenApiParameter("end_time", OpenApiTypes.STR, required=True, description="HH:MM"),
]

ACTION_RESPONSES = {
    200: BookingSerializer,
    400: OpenApiResponse(response=DetailSerializer, description="Booking is not pending"),
    403: OpenApiResponse(description="Admin access required"),
    404: OpenApiResponse(response=DetailSerializer, description="Booking not found"),
    409: OpenApiResponse(response=DetailSerializer, description="Slot already confirmed for someone else"),
}


@extend_schema(tags=["bookings"])
@extend_schema_view(
    list=extend_schema(
        summary="List bookings",
        description="Own bookings; admin roles see every booking. Each row carries its queue position.",
        responses={200: BookingSerializer(many=True)},
    ),
    retrieve=extend_schema(
        summary="Get booking details",
        responses={
            200: BookingSerializer,
            404: OpenApiResponse(description="Booking not found"),
        },
    ),
    create=extend_schema(
        summary="Request a booking or reservation",
        description=(
            "A `booking` covers one `date` and is refused (409) when a confirmed booking "
            "overlaps it. A `reservation` may cover several `dates` and always joins the "
            "FIFO queue. All dates are stored in one transaction."
        ),
        request=BookingRequestSerializer,
        responses={
            201: BookingRequestResultSerializer,
            400: OpenApiResponse(description="Validation error"),
            403: OpenApiResponse(response=DetailSerializer, description="Outside working hours"),
            404: OpenApiResponse(response=DetailSerializer, description="Room not found"),
            409: OpenApiResponse(response=DetailSerializer, description="Conflicts with a confirmed booking"),
            503: OpenApiResponse(response=DetailSerializer, description="Maintenance mode"),
        },
        examples=[
            OpenApiExample(
                "Multi-date reservation",
                value={
                    "room": 1,
                    "dates": ["2030-03-04", "2030-03-05"],
                    "start_time": "09:00",
                    "end_time": "11:00",
                    "type": "reservation",
                },
                request_only=True,
            ),
        ],
    ),
)
class BookingViewSet(mixins.ListModelMixin,
                     mixins.RetrieveModelMixin,
                     mixins.CreateModelMixin,
                     viewsets.GenericViewSet):
    """
    Booking requests and their lifecycle.

    Creation and transitions delegate to `src.rooms.services`; engine errors
    propagate as API exceptions with `{"detail", "code"}` bodies.
    """
    serializer_class = BookingSerializer
    permission_classes = (permissions.IsAuthenticated, IsBookingOwnerOrAdminRole)
    pagination_class = BookingPagination
    filter_backends = (df.DjangoFilterBackend,)
    filterset_class = BookingFilter
    throttle_classes = [ScopedRateThrottleIsolated]

    def get_throttles(self):
        scope_map = {
            'create': 'bookings_mutation',
            'confirm': 'bookings_mutation',
            'reject': 'bookings_mutation',
            'set_status': 'bookings_mutation',
            'cancel': 'bookings_mutation',
        }
        self.throttle_scope = scope_map.get(getattr(self, 'action', None))
        return super().get_throttles()

    def get_queryset(self):
        """Filter bookings based on user role."""
        user = self.request.user
        qs = Booking.objects.select_related('room', 'user')
        if getattr(user, 'is_admin_role', False):
            return qs
        return qs.filter(user=user)

    def create(self, request, *args, **kwargs):
        serializer = BookingRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        result = create_booking_request(
            user_id=request.user.pk,
            room_id=data['room'],
            dates=data['requested_dates'],
            start_time=data['start_time'],
            end_time=data['end_time'],
            booking_type=data.get('type'),
            actor=request.user,
        )
        dispatch_notifications(result.notifications)

        body = BookingRequestResultSerializer(result, context=self.get_serializer_context()).data
        return Response(body, status=status.HTTP_201_CREATED)

    def _decide(self, request, pk, new_status):
        result = apply_status(pk, new_status, request.user)
        dispatch_notifications(result.notifications)
        return Response(BookingSerializer(result.booking, context=self.get_serializer_context()).data)

    @extend_schema(summary="Confirm booking (admin)", request=None, responses=ACTION_RESPONSES)
    @action(detail=True, methods=['post'], permission_classes=[permissions.IsAuthenticated, IsAdminRole])
    def confirm(self, request, pk=None):
        return self._decide(request, pk, Booking.Status.CONFIRMED)

    @extend_schema(summary="Reject booking (admin)", request=None, responses=ACTION_RESPONSES)
    @action(detail=True, methods=['post'], permission_classes=[permissions.IsAuthenticated, IsAdminRole])
    def reject(self, request, pk=None):
        return self._decide(request, pk, Booking.Status.REJECTED)

    @extend_schema(
        summary="Set booking status (admin)",
        description="`status` must be `confirmed` or `rejected`.",
        request=BookingStatusSerializer,
        responses=ACTION_RESPONSES,
    )
    @action(detail=True, methods=['put'], url_path='status',
            permission_classes=[permissions.IsAuthenticated, IsAdminRole])
    def set_status(self, request, pk=None):
        serializer = BookingStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        return self._decide(request, pk, serializer.validated_data['status'])

    @extend_schema(
        summary="Cancel own booking",
        request=BookingCancelSerializer,
        responses={
            200: BookingSerializer,
            400: OpenApiResponse(response=DetailSerializer, description="Already cancelled / missing reason"),
            403: OpenApiResponse(response=DetailSerializer, description="Not the booking owner"),
            404: OpenApiResponse(response=DetailSerializer, description="Booking not found"),
        },
    )
    @action(detail=True, methods=['post'], permission_classes=[permissions.IsAuthenticated])
    def cancel(self, request, pk=None):
        serializer = BookingCancelSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = cancel_booking(pk, request.user, serializer.validated_data['reason'])
        dispatch_notifications(result.notifications)
        return Response(BookingSerializer(result.booking, context=self.get_serializer_context()).data)

    def _slot(self, request):
        serializer = SlotQuerySerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        slot = serializer.validated_data
        if not Room.objects.filter(pk=slot['room']).exists():
            raise NotFoundError("Room not found.")
        return slot

    @extend_schema(
        summary="Pending queue for a slot",
        description="Pending bookings overlapping the window, in FIFO order.",
        parameters=SLOT_PARAMS,
        responses={200: OpenApiResponse(description="Queue and the position a new request would take")},
    )
    @action(detail=False, methods=['get'])
    def queue(self, request):
        slot = self._slot(request)
        queue = get_queue(slot['room'], slot['date'], slot['start_time'], slot['end_time'])
        return Response({
            "room": slot['room'],
            "date": slot['date'].isoformat(),
            "start_time": slot['start_time'].strftime('%H:%M'),
            "end_time": slot['end_time'].strftime('%H:%M'),
            "queue": BookingSerializer(queue, many=True, context=self.get_serializer_context()).data,
            "next_position": len(queue) + 1,
        })

    @extend_schema(
        summary="Conflicts for a slot",
        description="Pending and confirmed bookings overlapping the window.",
        parameters=SLOT_PARAMS,
        responses={200: OpenApiResponse(description="Conflict report")},
    )
    @action(detail=False, methods=['get'])
    def conflicts(self, request):
        slot = self._slot(request)
        found = find_conflicting(slot['room'], slot['date'], slot['start_time'], slot['end_time'])
        found.sort(key=lambda b: (b.created_at, b.pk))
        return Response({
            "has_conflict": bool(found),
            "has_confirmed": any(b.status == Booking.Status.CONFIRMED for b in found),
            "conflicts": BookingSerializer(found, many=True, context=self.get_serializer_context()).data,
        })
