"""FilterSet definitions for trip search and listing."""

from __future__ import annotations

import django_filters  # type: ignore

from .models import Trip


class TripFilterSet(django_filters.FilterSet):
    """FilterSet for Trip with the filters used by the public catalogue."""

    category = django_filters.CharFilter(field_name="category__slug", lookup_expr="exact")
    location = django_filters.CharFilter(field_name="location", lookup_expr="icontains")
    price_min = django_filters.NumberFilter(field_name="price_per_person", lookup_expr="gte")
    price_max = django_filters.NumberFilter(field_name="price_per_person", lookup_expr="lte")
    vendor = django_filters.NumberFilter(field_name="vendor_id", lookup_expr="exact")
    departs_after = django_filters.DateFilter(method="filter_departs_after")
    party_size = django_filters.NumberFilter(method="filter_party_size")

    class Meta:
        model = Trip
        fields = ["category", "location", "vendor"]

    def filter_departs_after(self, queryset, name, value):  # type: ignore
        return queryset.filter(
            schedules__is_active=True,
            schedules__start_date__gte=value,
        ).distinct()

    def filter_party_size(self, queryset, name, value):  # type: ignore
        seats = int(value)
        return queryset.filter(
            max_seats__gte=seats,
            schedules__is_active=True,
            schedules__available_seats__gte=seats,
        ).distinct()
