"""Serializers for user-related API endpoints."""

from __future__ import annotations

from django.contrib.auth import get_user_model  # type: ignore
from rest_framework import serializers  # type: ignore

from .access import access_checker
from .capabilities import Capability

User = get_user_model()


class UserSerializer(serializers.ModelSerializer):
    """Profile of a user together with the capabilities they hold."""

    capabilities = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = [
            "id",
            "email",
            "full_name",
            "phone",
            "avatar_url",
            "capabilities",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "email", "capabilities", "created_at", "updated_at"]

    def get_capabilities(self, obj) -> list[str]:  # type: ignore
        return access_checker.capabilities_for(obj.pk).as_list()


class AdminUserSerializer(UserSerializer):
    """User row in the administrator's user list."""

    booking_count = serializers.IntegerField(read_only=True, default=0)

    class Meta(UserSerializer.Meta):
        fields = UserSerializer.Meta.fields + ["booking_count", "is_active"]
        read_only_fields = fields


class CapabilitySetSerializer(serializers.Serializer):
    capabilities = serializers.ListField(
        child=serializers.ChoiceField(choices=Capability.choices),
        allow_empty=True,
    )
