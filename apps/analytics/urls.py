"""URL routing for analytics endpoints."""

from django.urls import path  # type: ignore

from .views import AdminOverviewView, VendorOverviewView


urlpatterns = [
    # Do not prefix with 'analytics/' here; the prefix is defined in config.urls
    path('overview/', AdminOverviewView.as_view(), name='analytics-overview'),
    path('vendor/', VendorOverviewView.as_view(), name='analytics-vendor-overview'),
]
