import logging

from django_filters import rest_framework as df
from rest_framework import viewsets, permissions, status
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.views import APIView
from drf_spectacular.utils import extend_schema, extend_schema_view, OpenApiResponse

from src.users.permissions import IsSuperAdmin

from .audit import record_audit
from .models import SystemSetting, AuditLog
from .pagination import AuditLogPagination
from .providers import DatabaseSettingsProvider
from .serializers import (
    SystemSettingSerializer, SettingsUpdateSerializer, WorkingHoursSerializer, AuditLogSerializer,
)

logger = logging.getLogger(__name__)


@extend_schema(tags=["system"])
class SystemSettingsView(APIView):
    """Super admin: read all settings / bulk upsert them in one transaction."""
    permission_classes = (permissions.IsAuthenticated, IsSuperAdmin)

    @extend_schema(summary="List system settings", responses={200: SystemSettingSerializer(many=True)})
    def get(self, request):
        qs = SystemSetting.objects.select_related('updated_by')
        return Response(SystemSettingSerializer(qs, many=True).data)

    @extend_schema(
        summary="Update system settings",
        request=SettingsUpdateSerializer,
        responses={
            200: SystemSettingSerializer(many=True),
            400: OpenApiResponse(description="Validation error"),
        },
    )
    def put(self, request):
        serializer = SettingsUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        items = serializer.validated_data['settings']

        old_values = dict(
            SystemSetting.objects.filter(key__in=[i['key'] for i in items]).values_list('key', 'value')
        )
        saved = DatabaseSettingsProvider().set_many(items, updated_by=request.user)
        record_audit(
            'SETTINGS_UPDATED',
            user=request.user,
            entity_type='setting',
            old_value=old_values or None,
            new_value={i['key']: i['value'] for i in items},
            request=request,
        )
        logger.info("Settings %s updated by %s", [i['key'] for i in items], request.user.email)
        return Response(SystemSettingSerializer(saved, many=True).data, status=status.HTTP_200_OK)


@extend_schema(
    tags=["system"],
    summary="Current working hours",
    responses={200: WorkingHoursSerializer},
    auth=[],
)
class WorkingHoursView(APIView):
    permission_classes = (permissions.AllowAny,)

    def get(self, request):
        provider = DatabaseSettingsProvider()
        data = provider.get_working_hours_config().as_dict()
        data['maintenance_mode'] = provider.is_maintenance_mode()
        return Response(data)


class AuditLogFilter(df.FilterSet):
    user = df.NumberFilter(field_name='user_id', label='Actor id')
    action = df.CharFilter(field_name='action', lookup_expr='icontains', label='Action (contains)')
    entity_type = df.CharFilter(field_name='entity_type', lookup_expr='iexact')
    start_date = df.DateFilter(field_name='created_at', lookup_expr='date__gte', label='From (YYYY-MM-DD)')
    end_date = df.DateFilter(field_name='created_at', lookup_expr='date__lte', label='To (YYYY-MM-DD)')

    class Meta:
        model = AuditLog
        fields = ('user', 'action', 'entity_type', 'start_date', 'end_date')


@extend_schema(tags=["system"])
@extend_schema_view(
    list=extend_schema(summary="List audit logs (super admin)"),
    retrieve=extend_schema(summary="Retrieve audit log entry"),
)
class AuditLogViewSet(viewsets.ReadOnlyModelViewSet):
    queryset = AuditLog.objects.select_related('user')
    serializer_class = AuditLogSerializer
    permission_classes = (permissions.IsAuthenticated, IsSuperAdmin)
    pagination_class = AuditLogPagination
    filter_backends = (df.DjangoFilterBackend,)
    filterset_class = AuditLogFilter

    @extend_schema(summary="Export audit logs (unpaginated)", responses={200: AuditLogSerializer(many=True)})
    @action(detail=False, methods=['get'])
    def export(self, request):
        qs = self.filter_queryset(self.get_queryset())
        data = AuditLogSerializer(qs, many=True).data
        record_audit('AUDIT_LOGS_EXPORTED', user=request.user, entity_type='audit_log', request=request)
        return Response(data)
