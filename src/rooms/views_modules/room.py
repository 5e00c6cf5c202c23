import logging

from django_filters import rest_framework as df
from rest_framework import viewsets, filters, serializers
from drf_spectacular.utils import (
    extend_schema_view, extend_schema, OpenApiParameter, OpenApiTypes, OpenApiResponse
)

from src.system.audit import record_audit

from ..models import Room
from ..permissions import IsAdminRoleOrReadOnly
from ..serializers import RoomSerializer
from ..throttling import ScopedRateThrottleIsolated
from .filters import RoomFilter

logger = logging.getLogger(__name__)

DATE_PARAM = OpenApiParameter(
    "date", OpenApiTypes.DATE,
    description="Adds `status` (Available / Booked / Reserved) for this date",
)


@extend_schema(tags=["rooms"])
@extend_schema_view(
    list=extend_schema(summary="List rooms", parameters=[DATE_PARAM], auth=[]),
    retrieve=extend_schema(
        summary="Get room details",
        parameters=[DATE_PARAM],
        responses={200: RoomSerializer, 404: OpenApiResponse(description="Room not found")},
        auth=[],
    ),
    create=extend_schema(
        summary="Create room (admin)",
        responses={
            201: RoomSerializer,
            400: OpenApiResponse(description="Validation error"),
            403: OpenApiResponse(description="Admin access required"),
        },
    ),
    update=extend_schema(summary="Update room (admin)"),
    partial_update=extend_schema(summary="Partially update room (admin)"),
    destroy=extend_schema(
        summary="Delete room (admin)",
        description="Deleting a room deletes all of its bookings.",
        responses={204: OpenApiResponse(description="Room deleted")},
    ),
)
class RoomViewSet(viewsets.ModelViewSet):
    """
    Rooms catalogue.

    Anyone may read; admin roles create, edit and delete. Creation and
    deletion are written to the audit log.
    """
    queryset = Room.objects.all()
    serializer_class = RoomSerializer
    permission_classes = (IsAdminRoleOrReadOnly,)
    filter_backends = (df.DjangoFilterBackend, filters.OrderingFilter)
    filterset_class = RoomFilter
    ordering_fields = ['name', 'capacity', 'created_at']
    ordering = ['name']
    throttle_classes = [ScopedRateThrottleIsolated]

    def get_throttles(self):
        scope_map = {
            'list': 'rooms_list',
            'retrieve': 'rooms_list',
        }
        self.throttle_scope = scope_map.get(getattr(self, 'action', None))
        return super().get_throttles()

    def get_serializer_context(self):
        context = super().get_serializer_context()
        raw = self.request.query_params.get('date') if self.request else None
        if raw:
            try:
                context['date'] = serializers.DateField().to_internal_value(raw)
            except serializers.ValidationError as exc:
                raise serializers.ValidationError({'date': exc.detail})
        return context

    def perform_create(self, serializer):
        room = serializer.save()
        record_audit(
            'ROOM_CREATED',
            user=self.request.user,
            entity_type='room',
            entity_id=room.pk,
            new_value={'name': room.name, 'space': room.space, 'capacity': room.capacity},
            request=self.request,
        )
        logger.info("Room %s '%s' created by %s", room.pk, room.name, self.request.user.email)

    def perform_destroy(self, instance):
        snapshot = {'name': instance.name, 'space': instance.space, 'capacity': instance.capacity}
        room_id = instance.pk
        instance.delete()
        record_audit(
            'ROOM_DELETED',
            user=self.request.user,
            entity_type='room',
            entity_id=room_id,
            old_value=snapshot,
            request=self.request,
        )
        logger.info("Room %s '%s' deleted by %s", room_id, snapshot['name'], self.request.user.email)
