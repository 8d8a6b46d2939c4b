"""API views for vendor applications."""

from __future__ import annotations

from rest_framework import mixins, permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.users.access import access_checker
from apps.users.api.permissions import IsAdminCapability
from apps.users.capabilities import Capability

from . import workflow
from .models import VendorApplication
from .serializers import (
    ReviewDecisionSerializer,
    VendorApplicationSerializer,
    VendorApplicationSubmitSerializer,
)


class VendorApplicationViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """Applicants see and submit their own applications; administrators see and review all."""

    queryset = VendorApplication.objects.select_related("applicant", "reviewer")
    serializer_class = VendorApplicationSerializer
    permission_classes = [permissions.IsAuthenticated]
    parser_classes = [MultiPartParser, FormParser, JSONParser]
    filterset_fields = ["status"]

    def get_queryset(self):  # type: ignore
        qs = super().get_queryset()
        if access_checker.has_capability(self.request.user.pk, Capability.ADMIN):
            return qs
        return qs.filter(applicant=self.request.user)

    def create(self, request, *args, **kwargs):  # type: ignore
        serializer = VendorApplicationSubmitSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        profile = dict(serializer.validated_data)
        document = profile.pop("document", None)
        application = workflow.submit(request.user.pk, profile, document)
        data = VendorApplicationSerializer(application, context=self.get_serializer_context()).data
        return Response(data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["post"], permission_classes=[IsAdminCapability])
    def review(self, request, pk=None):  # type: ignore
        serializer = ReviewDecisionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        application = workflow.review(self.get_object().pk, request.user.pk, serializer.validated_data["decision"])
        data = VendorApplicationSerializer(application, context=self.get_serializer_context()).data
        return Response(data, status=status.HTTP_200_OK)
