"""URL routing for the trip catalogue."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import SimpleRouter  # type: ignore

from .views import CategoryViewSet, TripScheduleViewSet, TripViewSet

router = SimpleRouter()
router.register(r"categories", CategoryViewSet, basename="category")
router.register(r"", TripViewSet, basename="trip")

schedule_list = TripScheduleViewSet.as_view({"get": "list", "post": "create"})
schedule_detail = TripScheduleViewSet.as_view({"get": "retrieve"})
schedule_retire = TripScheduleViewSet.as_view({"post": "retire"})
schedule_availability = TripScheduleViewSet.as_view({"get": "availability"})

urlpatterns = [
    path("<int:trip_id>/schedules/", schedule_list, name="trip-schedule-list"),
    path("<int:trip_id>/schedules/<int:pk>/", schedule_detail, name="trip-schedule-detail"),
    path("<int:trip_id>/schedules/<int:pk>/retire/", schedule_retire, name="trip-schedule-retire"),
    path(
        "<int:trip_id>/schedules/<int:pk>/availability/",
        schedule_availability,
        name="trip-schedule-availability",
    ),
    path("", include(router.urls)),
]
