from rest_framework import serializers
from .models import User


class UserPublicSerializer(serializers.ModelSerializer):
    """Public user info (for displaying in celebrations, claims, etc.)."""

    display_name = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ['id', 'display_name']
        read_only_fields = fields

    def get_display_name(self, obj):
        return obj.get_display_name()
