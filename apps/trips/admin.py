"""Admin registrations for the trip catalogue."""

from __future__ import annotations

from django import forms
from django.contrib import admin

from .models import Category, Schedule, Trip

# Seat counts change only through the inventory store, so saving an
# existing schedule from the admin writes these columns and nothing else.
SCHEDULE_EDITABLE_FIELDS = ("start_date", "end_date", "is_active")


def save_schedule(schedule: Schedule) -> None:
    if schedule._state.adding:
        schedule.save()
    else:
        schedule.save(update_fields=SCHEDULE_EDITABLE_FIELDS)


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ("name", "slug", "icon")
    search_fields = ("name",)
    prepopulated_fields = {"slug": ("name",)}


class ScheduleInlineForm(forms.ModelForm):
    class Meta:
        model = Schedule
        fields = ("start_date", "end_date", "capacity", "is_active")

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        if self.instance.pk:
            self.fields["capacity"].disabled = True


class ScheduleInline(admin.TabularInline):
    model = Schedule
    form = ScheduleInlineForm
    extra = 0
    fields = ("start_date", "end_date", "capacity", "available_seats", "is_active")
    readonly_fields = ("available_seats",)


@admin.register(Trip)
class TripAdmin(admin.ModelAdmin):
    list_display = ("title", "location", "vendor", "category", "price_per_person", "is_active", "created_at")
    list_filter = ("is_active", "category")
    search_fields = ("title", "location", "vendor__email")
    readonly_fields = ("created_at", "updated_at")
    inlines = (ScheduleInline,)

    def save_formset(self, request, form, formset, change):
        if formset.model is not Schedule:
            return super().save_formset(request, form, formset, change)
        schedules = formset.save(commit=False)
        for schedule in formset.deleted_objects:
            schedule.delete()
        for schedule in schedules:
            save_schedule(schedule)
        formset.save_m2m()


@admin.register(Schedule)
class ScheduleAdmin(admin.ModelAdmin):
    list_display = ("trip", "start_date", "end_date", "capacity", "available_seats", "is_active")
    list_filter = ("is_active", "start_date")
    search_fields = ("trip__title",)
    readonly_fields = ("available_seats", "created_at")

    def get_readonly_fields(self, request, obj=None):
        if obj is not None:
            return self.readonly_fields + ("capacity",)
        return self.readonly_fields

    def save_model(self, request, obj, form, change):
        save_schedule(obj)
