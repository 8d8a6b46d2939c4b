"""API views for the dashboards."""

from __future__ import annotations

from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from apps.users.api.permissions import IsAdminCapability, IsVendorCapability

from .services import admin_overview, vendor_overview


class AdminOverviewView(APIView):
    """Platform-wide figures: users, vendors, trips, bookings and revenue."""

    permission_classes = [IsAdminCapability]

    def get(self, request, format=None):  # type: ignore
        return Response(admin_overview())


class VendorOverviewView(APIView):
    """Figures for the trips run by the requesting vendor."""

    permission_classes = [IsVendorCapability]

    def get(self, request, format=None):  # type: ignore
        return Response(vendor_overview(request.user.pk))
