import django.core.validators
import django.db.models.deletion
from decimal import Decimal
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Category",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=100, unique=True, verbose_name="Name")),
                ("slug", models.SlugField(max_length=100, unique=True, verbose_name="Slug")),
                ("icon", models.CharField(blank=True, max_length=50, verbose_name="Icon")),
            ],
            options={
                "verbose_name": "Category",
                "verbose_name_plural": "Categories",
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="Trip",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(max_length=255, verbose_name="Title")),
                ("description", models.TextField(blank=True, verbose_name="Description")),
                ("location", models.CharField(db_index=True, max_length=255, verbose_name="Location")),
                ("meeting_point", models.CharField(blank=True, max_length=255, verbose_name="Meeting point")),
                (
                    "price_per_person",
                    models.DecimalField(
                        decimal_places=2,
                        max_digits=10,
                        validators=[django.core.validators.MinValueValidator(Decimal("0.00"))],
                        verbose_name="Price per person",
                    ),
                ),
                (
                    "max_seats",
                    models.PositiveSmallIntegerField(
                        default=10,
                        validators=[django.core.validators.MinValueValidator(1)],
                        verbose_name="Max seats per booking",
                    ),
                ),
                ("duration_days", models.PositiveSmallIntegerField(default=1, verbose_name="Days")),
                ("duration_nights", models.PositiveSmallIntegerField(default=0, verbose_name="Nights")),
                ("itinerary", models.TextField(blank=True, verbose_name="Itinerary")),
                ("inclusions", models.TextField(blank=True, verbose_name="Inclusions")),
                ("exclusions", models.TextField(blank=True, verbose_name="Exclusions")),
                ("images", models.JSONField(blank=True, default=list, verbose_name="Image URLs")),
                ("is_active", models.BooleanField(default=True, verbose_name="Active")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "category",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="trips",
                        to="trips.category",
                    ),
                ),
                (
                    "vendor",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="trips",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Trip",
                "verbose_name_plural": "Trips",
                "ordering": ["-created_at"],
                "indexes": [models.Index(fields=["is_active", "location"], name="trip_active_location_idx")],
                "constraints": [
                    models.CheckConstraint(condition=models.Q(max_seats__gte=1), name="trip_max_seats_positive"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Schedule",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("start_date", models.DateField(verbose_name="Start date")),
                ("end_date", models.DateField(verbose_name="End date")),
                (
                    "capacity",
                    models.PositiveIntegerField(
                        validators=[django.core.validators.MinValueValidator(1)],
                        verbose_name="Capacity",
                    ),
                ),
                ("available_seats", models.PositiveIntegerField(verbose_name="Available seats")),
                ("is_active", models.BooleanField(default=True, verbose_name="Active")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "trip",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="schedules",
                        to="trips.trip",
                    ),
                ),
            ],
            options={
                "verbose_name": "Schedule",
                "verbose_name_plural": "Schedules",
                "ordering": ["start_date"],
                "indexes": [
                    models.Index(fields=["trip", "is_active", "start_date"], name="schedule_trip_active_start_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(end_date__gte=models.F("start_date")),
                        name="schedule_valid_date_range",
                    ),
                    models.CheckConstraint(condition=models.Q(capacity__gte=1), name="schedule_capacity_positive"),
                    models.CheckConstraint(
                        condition=models.Q(available_seats__gte=0)
                        & models.Q(available_seats__lte=models.F("capacity")),
                        name="schedule_available_within_capacity",
                    ),
                ],
            },
        ),
    ]
