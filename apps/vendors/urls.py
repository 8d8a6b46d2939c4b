"""URL routing for vendor onboarding."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import SimpleRouter  # type: ignore

from .views import VendorApplicationViewSet

router = SimpleRouter()
router.register(r"applications", VendorApplicationViewSet, basename="vendor-application")

urlpatterns = [
    path("", include(router.urls)),
]
