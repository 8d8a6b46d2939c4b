"""Trip catalogue API views."""

from __future__ import annotations

import logging

from django.db.models import ProtectedError, Q  # type: ignore
from django.shortcuts import get_object_or_404  # type: ignore
from django.utils import timezone  # type: ignore
from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from rest_framework import mixins, permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.filters import OrderingFilter, SearchFilter  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.users.access import access_checker
from apps.users.api.permissions import IsAdminCapability, IsVendorOrAdminForWrites
from apps.users.capabilities import Capability

from . import inventory
from .filters import TripFilterSet
from .models import Category, Schedule, Trip
from .serializers import (
    CategorySerializer,
    ScheduleSerializer,
    TripDetailSerializer,
    TripSerializer,
    TripWriteSerializer,
)

logger = logging.getLogger(__name__)


def _is_admin(user) -> bool:
    return user.is_authenticated and access_checker.has_capability(user.pk, Capability.ADMIN)


class IsTripOwnerOrAdmin(permissions.BasePermission):
    """Only the trip's vendor or an administrator may change it."""

    def has_object_permission(self, request, view, obj):  # type: ignore
        if request.method in permissions.SAFE_METHODS:
            return True
        trip = obj.trip if isinstance(obj, Schedule) else obj
        return trip.vendor_id == request.user.pk or _is_admin(request.user)


class CategoryViewSet(viewsets.ModelViewSet):
    queryset = Category.objects.all()
    serializer_class = CategorySerializer

    def get_permissions(self):  # type: ignore
        if self.action in {"list", "retrieve"}:
            return [permissions.AllowAny()]
        return [IsAdminCapability()]


class TripViewSet(viewsets.ModelViewSet):
    """Public catalogue plus vendor and administrator trip management."""

    queryset = Trip.objects.select_related("vendor", "category")
    permission_classes = [IsVendorOrAdminForWrites, IsTripOwnerOrAdmin]
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]
    filterset_class = TripFilterSet
    search_fields = ["title", "location", "description"]
    ordering_fields = ["price_per_person", "created_at", "duration_days"]

    def get_queryset(self):  # type: ignore
        qs = super().get_queryset()
        user = self.request.user
        if _is_admin(user):
            return qs
        if user.is_authenticated:
            # Vendors also see their own retired trips.
            return qs.filter(Q(is_active=True) | Q(vendor=user))
        return qs.filter(is_active=True)

    def get_serializer_class(self):  # type: ignore
        if self.action in {"create", "update", "partial_update"}:
            return TripWriteSerializer
        if self.action == "retrieve":
            return TripDetailSerializer
        return TripSerializer

    def perform_create(self, serializer):  # type: ignore
        trip = serializer.save(vendor=self.request.user)
        logger.info("Vendor %s created trip %s", self.request.user.pk, trip.pk)

    def destroy(self, request, *args, **kwargs):  # type: ignore
        if not _is_admin(request.user):
            return Response(
                {"detail": "Only administrators can delete trips. Deactivate it instead."},
                status=status.HTTP_403_FORBIDDEN,
            )
        trip = self.get_object()
        try:
            trip.delete()
        except ProtectedError:
            return Response(
                {"detail": "This trip has bookings and can only be deactivated."},
                status=status.HTTP_409_CONFLICT,
            )
        logger.info("Administrator %s deleted trip %s", request.user.pk, kwargs.get("pk"))
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=False, methods=["get"], permission_classes=[permissions.IsAuthenticated])
    def mine(self, request):
        """Trips listed by the current vendor, active or not."""
        trips = Trip.objects.select_related("vendor", "category").filter(vendor=request.user)
        return Response(TripSerializer(trips, many=True).data)


class TripScheduleViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    viewsets.GenericViewSet,
):
    """Schedules of one trip; seat counts are never edited directly."""

    serializer_class = ScheduleSerializer
    permission_classes = [IsVendorOrAdminForWrites, IsTripOwnerOrAdmin]
    trip_lookup_url_kwarg = "trip_id"

    def initial(self, request, *args, **kwargs):  # type: ignore
        super().initial(request, *args, **kwargs)
        self.trip = get_object_or_404(Trip.objects.select_related("vendor"), pk=kwargs.get(self.trip_lookup_url_kwarg))
        if request.method not in permissions.SAFE_METHODS:
            self.check_object_permissions(request, self.trip)

    def get_queryset(self):  # type: ignore
        qs = Schedule.objects.filter(trip=self.trip).select_related("trip")
        user = self.request.user
        if self.trip.vendor_id == user.pk or _is_admin(user):
            return qs
        return qs.filter(is_active=True, start_date__gte=timezone.localdate())

    def perform_create(self, serializer):  # type: ignore
        schedule = serializer.save(trip=self.trip)
        logger.info("Schedule %s created for trip %s with %d seats", schedule.pk, self.trip.pk, schedule.capacity)

    @action(detail=True, methods=["post"])
    def retire(self, request, trip_id=None, pk=None):  # type: ignore
        """Stop selling seats on a schedule; existing bookings are kept."""
        schedule = self.get_object()
        Schedule.objects.filter(pk=schedule.pk).update(is_active=False)
        schedule.refresh_from_db()
        logger.info("Schedule %s retired by %s", schedule.pk, request.user.pk)
        return Response(ScheduleSerializer(schedule).data, status=status.HTTP_200_OK)

    @action(detail=True, methods=["get"], permission_classes=[permissions.AllowAny])
    def availability(self, request, trip_id=None, pk=None):  # type: ignore
        schedule = self.get_object()
        snapshot = inventory.get_availability(schedule.pk)
        return Response(
            {
                "schedule": snapshot.schedule_id,
                "capacity": snapshot.capacity,
                "available": snapshot.available,
                "booked": snapshot.booked,
            }
        )
