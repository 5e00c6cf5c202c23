from rest_framework import serializers
from drf_spectacular.utils import extend_schema_field, OpenApiTypes

from src.rooms.models import Room


class RoomSerializer(serializers.ModelSerializer):
    amenities = serializers.ListField(
        child=serializers.CharField(max_length=100),
        required=False,
        allow_empty=True,
    )
    capacity = serializers.IntegerField(min_value=1)
    # Set only when the list is requested with ?date=YYYY-MM-DD
    status = serializers.SerializerMethodField(read_only=True)

    class Meta:
        model = Room
        fields = [
            "id", "name", "space", "capacity", "amenities",
            "status", "created_at", "updated_at",
        ]
        read_only_fields = ["id", "status", "created_at", "updated_at"]

    @extend_schema_field(OpenApiTypes.STR)
    def get_status(self, obj):
        day = self.context.get("date")
        if day is None:
            return None
        return obj.status_on(day)

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Name must not be blank.")
        return value
