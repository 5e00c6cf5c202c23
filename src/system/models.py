from django.conf import settings
from django.db import models


class SystemSetting(models.Model):
    """Key/value runtime configuration edited by super admins."""
    MAINTENANCE_MODE = 'maintenance_mode'
    WORKING_HOURS_START = 'working_hours_start'
    WORKING_HOURS_END = 'working_hours_end'

    key = models.CharField(max_length=100, unique=True)
    value = models.TextField(blank=True, default='')
    description = models.CharField(max_length=255, blank=True, default='')
    updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True, blank=True,
        related_name='updated_settings',
    )
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['key']

    def __str__(self):
        return f"{self.key}={self.value}"


class AuditLog(models.Model):
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True, blank=True,
        related_name='audit_logs',
    )
    action = models.CharField(max_length=64, db_index=True)
    entity_type = models.CharField(max_length=32, blank=True, default='')
    entity_id = models.BigIntegerField(null=True, blank=True)
    old_value = models.JSONField(null=True, blank=True)
    new_value = models.JSONField(null=True, blank=True)
    ip_address = models.GenericIPAddressField(null=True, blank=True)
    user_agent = models.TextField(blank=True, default='')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['entity_type', 'entity_id'], name='auditlog_entity_idx'),
            models.Index(fields=['created_at'], name='auditlog_created_idx'),
        ]

    def __str__(self):
        return f"{self.action} by {self.user_id or 'system'} at {self.created_at:%Y-%m-%d %H:%M:%S}"
