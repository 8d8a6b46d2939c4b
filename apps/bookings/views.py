"""API views for the booking domain."""

from __future__ import annotations

from django.db.models import Q  # type: ignore
from rest_framework import mixins, permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.users.access import access_checker
from apps.users.api.permissions import IsAdminCapability
from apps.users.capabilities import Capability

from .application.coordinator import reservation_coordinator
from .models import Booking
from .serializers import (
    BookingCreateSerializer,
    BookingSerializer,
    CancelBookingSerializer,
    RecordPaymentSerializer,
    SetBookingStatusSerializer,
)


class BookingViewSet(
    mixins.CreateModelMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """Bookings of the current traveller, of the current vendor's trips, or all for administrators.

    State changes are delegated to the reservation coordinator, which
    checks who may perform them.
    """

    queryset = Booking.objects.select_related("trip", "schedule", "user")
    serializer_class = BookingSerializer
    permission_classes = [permissions.IsAuthenticated]
    filterset_fields = ["status", "payment_status", "trip", "schedule"]

    def get_queryset(self):  # type: ignore
        qs = super().get_queryset()
        user = self.request.user
        if access_checker.has_capability(user.pk, Capability.ADMIN):
            return qs
        return qs.filter(Q(user=user) | Q(trip__vendor=user))

    def create(self, request, *args, **kwargs):  # type: ignore
        serializer = BookingCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        booking = reservation_coordinator.create_booking(
            user_id=request.user.pk,
            trip_id=data["trip"],
            schedule_id=data["schedule"],
            party_size=data["party_size"],
            payment_method=data["payment_method"],
        )
        read_serializer = BookingSerializer(booking, context=self.get_serializer_context())
        headers = self.get_success_headers(read_serializer.data)
        return Response(read_serializer.data, status=status.HTTP_201_CREATED, headers=headers)

    @action(detail=True, methods=["post"])
    def cancel(self, request, pk=None):  # type: ignore
        serializer = CancelBookingSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        booking = reservation_coordinator.cancel_booking(
            self.get_object().pk,
            request.user.pk,
            serializer.validated_data["reason"],
        )
        return Response(BookingSerializer(booking).data, status=status.HTTP_200_OK)

    @action(detail=True, methods=["post"])
    def payment(self, request, pk=None):  # type: ignore
        serializer = RecordPaymentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        booking = reservation_coordinator.record_payment(
            self.get_object().pk,
            request.user.pk,
            serializer.validated_data["succeeded"],
        )
        return Response(BookingSerializer(booking).data, status=status.HTTP_200_OK)

    @action(detail=True, methods=["post"], url_path="status", permission_classes=[IsAdminCapability])
    def set_status(self, request, pk=None):  # type: ignore
        serializer = SetBookingStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        booking = reservation_coordinator.set_booking_status(
            self.get_object().pk,
            request.user.pk,
            serializer.validated_data["status"],
            serializer.validated_data["reason"],
        )
        return Response(BookingSerializer(booking).data, status=status.HTTP_200_OK)
