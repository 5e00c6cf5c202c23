from rest_framework import serializers


class PublicUserTinySerializer(serializers.Serializer):
    """Public projection for nested user references."""
    id = serializers.IntegerField()
    email = serializers.EmailField(allow_null=True, required=False)
    full_name = serializers.CharField(read_only=True)


class DetailSerializer(serializers.Serializer):
    detail = serializers.CharField()
    code = serializers.CharField(required=False)


TIME_INPUT_FORMATS = ['%H:%M', '%H:%M:%S']


def hhmm_field(**kwargs):
    return serializers.TimeField(
        format='%H:%M',
        input_formats=TIME_INPUT_FORMATS,
        error_messages={"invalid": "Invalid time. Expected HH:MM."},
        **kwargs,
    )
