from rest_framework import serializers
from .models import User


class UserSerializer(serializers.ModelSerializer):
    """Basic user serializer for profile display."""

    current_group = serializers.UUIDField(source='current_group_id', read_only=True)

    class Meta:
        model = User
        fields = [
            'id',
            'device_id',
            'display_name',
            'current_group',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class UserMinimalSerializer(serializers.ModelSerializer):
    """Minimal user info for nested serialization."""

    display_name = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ['id', 'display_name']
        read_only_fields = fields

    def get_display_name(self, obj):
        return obj.get_display_name()


class DeviceLoginSerializer(serializers.Serializer):
    """Serializer for device login."""

    device_id = serializers.CharField(max_length=128, required=True)
    display_name = serializers.CharField(
        max_length=100,
        required=False,
        allow_blank=True,
        default=''
    )
