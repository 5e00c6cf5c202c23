from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views import SystemSettingsView, WorkingHoursView, AuditLogViewSet

app_name = "system"

router = DefaultRouter()
router.register(r"audit-logs", AuditLogViewSet, basename="auditlog")

urlpatterns = [
    path("", include(router.urls)),
    path("settings/", SystemSettingsView.as_view(), name="settings"),
    path("working-hours/", WorkingHoursView.as_view(), name="working-hours"),
]
