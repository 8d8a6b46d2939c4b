"""Serializers for vendor applications."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import VendorApplication

MAX_DOCUMENT_SIZE = 5 * 1024 * 1024
ALLOWED_DOCUMENT_TYPES = ("application/pdf", "image/jpeg", "image/png")


class VendorApplicationSubmitSerializer(serializers.ModelSerializer):
    class Meta:
        model = VendorApplication
        fields = ["business_name", "phone", "description", "address", "city", "state", "pincode", "document"]
        extra_kwargs = {"document": {"required": False}}

    def validate_document(self, value):
        if value is None:
            return value
        if value.size > MAX_DOCUMENT_SIZE:
            raise serializers.ValidationError("The document must be smaller than 5 MB.")
        content_type = getattr(value, "content_type", None)
        if content_type and content_type not in ALLOWED_DOCUMENT_TYPES:
            raise serializers.ValidationError("Upload a PDF, JPEG or PNG document.")
        return value


class VendorApplicationSerializer(serializers.ModelSerializer):
    applicant_email = serializers.ReadOnlyField(source="applicant.email")
    reviewer_email = serializers.ReadOnlyField(source="reviewer.email", default=None)

    class Meta:
        model = VendorApplication
        fields = [
            "id",
            "applicant",
            "applicant_email",
            "business_name",
            "phone",
            "description",
            "address",
            "city",
            "state",
            "pincode",
            "document",
            "status",
            "reviewer",
            "reviewer_email",
            "reviewed_at",
            "capability_granted_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class ReviewDecisionSerializer(serializers.Serializer):
    decision = serializers.ChoiceField(
        choices=[VendorApplication.Status.APPROVED.value, VendorApplication.Status.REJECTED.value],
    )
