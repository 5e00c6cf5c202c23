from rest_framework import serializers

from src.rooms.serializers.common import PublicUserTinySerializer

from .models import SystemSetting, AuditLog
from .providers import parse_hhmm, TRUE_VALUES

KNOWN_KEYS = (
    SystemSetting.MAINTENANCE_MODE,
    SystemSetting.WORKING_HOURS_START,
    SystemSetting.WORKING_HOURS_END,
)


class SystemSettingSerializer(serializers.ModelSerializer):
    updated_by = PublicUserTinySerializer(read_only=True)

    class Meta:
        model = SystemSetting
        fields = ('key', 'value', 'description', 'updated_by', 'updated_at')
        read_only_fields = fields


class SettingItemSerializer(serializers.Serializer):
    key = serializers.CharField(max_length=100)
    value = serializers.CharField(allow_blank=True)

    def validate(self, attrs):
        key, value = attrs['key'], attrs['value'].strip()
        if key == SystemSetting.MAINTENANCE_MODE:
            lowered = value.lower()
            if lowered not in TRUE_VALUES + ('false', '0', 'no', 'off'):
                raise serializers.ValidationError({'value': 'maintenance_mode must be true or false.'})
            value = 'true' if lowered in TRUE_VALUES else 'false'
        elif key in (SystemSetting.WORKING_HOURS_START, SystemSetting.WORKING_HOURS_END):
            try:
                value = parse_hhmm(value).strftime('%H:%M')
            except ValueError:
                raise serializers.ValidationError({'value': f'{key} must be in HH:MM format.'})
        attrs['value'] = value
        return attrs


class SettingsUpdateSerializer(serializers.Serializer):
    settings = SettingItemSerializer(many=True, allow_empty=False)


class WorkingHoursSerializer(serializers.Serializer):
    start = serializers.CharField()
    end = serializers.CharField()
    within_hours = serializers.BooleanField()
    message = serializers.CharField(allow_null=True)
    maintenance_mode = serializers.BooleanField()


class AuditLogSerializer(serializers.ModelSerializer):
    user = PublicUserTinySerializer(read_only=True)

    class Meta:
        model = AuditLog
        fields = (
            'id', 'user', 'action', 'entity_type', 'entity_id',
            'old_value', 'new_value', 'ip_address', 'user_agent', 'created_at',
        )
        read_only_fields = fields
