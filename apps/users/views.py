"""User API views."""

from __future__ import annotations

from django.contrib.auth import get_user_model  # type: ignore
from django.db.models import Count  # type: ignore
from rest_framework import mixins, permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from .access import access_checker
from .api.permissions import IsAdminCapability
from .serializers import AdminUserSerializer, CapabilitySetSerializer, UserSerializer

User = get_user_model()


class UserViewSet(mixins.ListModelMixin, mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    """User management.

    - `me` returns or updates the current user's profile
    - the list, detail and capability endpoints are for administrators
    """

    serializer_class = AdminUserSerializer
    queryset = User.objects.annotate(booking_count=Count("bookings")).order_by("-created_at")
    permission_classes = [IsAdminCapability]

    @action(
        detail=False,
        methods=["get", "patch"],
        permission_classes=[permissions.IsAuthenticated],
    )
    def me(self, request):
        if request.method == "PATCH":
            serializer = UserSerializer(request.user, data=request.data, partial=True)
            serializer.is_valid(raise_exception=True)
            serializer.save()
            return Response(serializer.data)
        return Response(UserSerializer(request.user).data)

    @action(detail=True, methods=["get", "put"], permission_classes=[IsAdminCapability])
    def capabilities(self, request, pk=None):
        """Read or replace the capability set of a user."""
        user = self.get_object()
        if request.method == "PUT":
            serializer = CapabilitySetSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            updated = access_checker.set_capabilities(
                user.pk,
                serializer.validated_data["capabilities"],
                granted_by=request.user,
            )
            return Response({"capabilities": updated.as_list()}, status=status.HTTP_200_OK)
        return Response({"capabilities": access_checker.capabilities_for(user.pk).as_list()})
