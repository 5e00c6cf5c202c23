from django.contrib import admin

from .models import SystemSetting, AuditLog


@admin.register(SystemSetting)
class SystemSettingAdmin(admin.ModelAdmin):
    list_display = ('key', 'value', 'updated_by', 'updated_at')
    search_fields = ('key', 'description')
    readonly_fields = ('updated_at',)
    list_select_related = ('updated_by',)


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ('id', 'action', 'entity_type', 'entity_id', 'user', 'ip_address', 'created_at')
    list_filter = ('action', 'entity_type', 'created_at')
    date_hierarchy = 'created_at'
    search_fields = ('action', 'user__email', 'ip_address')
    readonly_fields = (
        'user', 'action', 'entity_type', 'entity_id', 'old_value', 'new_value',
        'ip_address', 'user_agent', 'created_at',
    )
    ordering = ('-created_at',)
    list_select_related = ('user',)
