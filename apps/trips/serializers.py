"""Serializers for the trip catalogue."""

from __future__ import annotations

from django.utils import timezone  # type: ignore
from rest_framework import serializers  # type: ignore

from .models import Category, Schedule, Trip


class CategorySerializer(serializers.ModelSerializer):
    class Meta:
        model = Category
        fields = ["id", "name", "slug", "icon"]


class ScheduleSerializer(serializers.ModelSerializer):
    booked_seats = serializers.IntegerField(read_only=True)

    class Meta:
        model = Schedule
        fields = [
            "id",
            "trip",
            "start_date",
            "end_date",
            "capacity",
            "available_seats",
            "booked_seats",
            "is_active",
            "created_at",
        ]
        read_only_fields = ["trip", "available_seats", "booked_seats", "is_active", "created_at"]

    def validate_start_date(self, value):  # type: ignore
        if value < timezone.localdate():
            raise serializers.ValidationError("A schedule cannot start in the past.")
        return value

    def validate(self, attrs):  # type: ignore
        if attrs["end_date"] < attrs["start_date"]:
            raise serializers.ValidationError({"end_date": "End date must not be before the start date."})
        return attrs

    def create(self, validated_data):  # type: ignore
        validated_data["available_seats"] = validated_data["capacity"]
        return super().create(validated_data)


class TripSerializer(serializers.ModelSerializer):
    """Read representation of a trip."""

    vendor_name = serializers.SerializerMethodField()
    category = CategorySerializer(read_only=True)

    class Meta:
        model = Trip
        fields = [
            "id",
            "vendor",
            "vendor_name",
            "category",
            "title",
            "description",
            "location",
            "meeting_point",
            "price_per_person",
            "max_seats",
            "duration_days",
            "duration_nights",
            "itinerary",
            "inclusions",
            "exclusions",
            "images",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_vendor_name(self, obj: Trip) -> str:  # type: ignore
        return str(obj.vendor)


class TripDetailSerializer(TripSerializer):
    """Trip with its upcoming bookable schedules."""

    upcoming_schedules = serializers.SerializerMethodField()

    class Meta(TripSerializer.Meta):
        fields = TripSerializer.Meta.fields + ["upcoming_schedules"]
        read_only_fields = fields

    def get_upcoming_schedules(self, obj: Trip):  # type: ignore
        schedules = obj.schedules.filter(is_active=True, start_date__gte=timezone.localdate()).order_by("start_date")
        return ScheduleSerializer(schedules, many=True).data


class TripWriteSerializer(serializers.ModelSerializer):
    category = serializers.PrimaryKeyRelatedField(
        queryset=Category.objects.all(),
        required=False,
        allow_null=True,
    )
    images = serializers.ListField(child=serializers.URLField(), required=False)

    class Meta:
        model = Trip
        fields = [
            "category",
            "title",
            "description",
            "location",
            "meeting_point",
            "price_per_person",
            "max_seats",
            "duration_days",
            "duration_nights",
            "itinerary",
            "inclusions",
            "exclusions",
            "images",
            "is_active",
        ]

    def validate(self, attrs):  # type: ignore
        days = attrs.get("duration_days", getattr(self.instance, "duration_days", 1))
        nights = attrs.get("duration_nights", getattr(self.instance, "duration_nights", 0))
        if nights > days:
            raise serializers.ValidationError({"duration_nights": "A trip cannot have more nights than days."})
        return attrs

    def to_representation(self, instance):  # type: ignore
        return TripDetailSerializer(instance, context=self.context).data
