"""API tests for vendor onboarding."""

from __future__ import annotations

import shutil
import tempfile

from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import override_settings
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.users.access import access_checker
from apps.users.models import User
from apps.vendors.models import VendorApplication

MEDIA_ROOT = tempfile.mkdtemp(prefix="tripnest-media-")


@override_settings(MEDIA_ROOT=MEDIA_ROOT)
class VendorApplicationAPITests(APITestCase):
    @classmethod
    def tearDownClass(cls) -> None:
        shutil.rmtree(MEDIA_ROOT, ignore_errors=True)
        super().tearDownClass()

    def setUp(self) -> None:
        self.applicant = User.objects.create_user(email="guide@example.com", password="GuidePass123")
        self.other = User.objects.create_user(email="someone@example.com", password="SomePass123")
        self.admin = User.objects.create_superuser(email="admin@example.com", password="AdminPass123")
        self.list_url = reverse("vendor-application-list")
        self.client.force_authenticate(self.applicant)

    def _payload(self, **overrides) -> dict:
        payload = {
            "business_name": "Coorg Coffee Walks",
            "phone": "+919900112233",
            "description": "Plantation walks and homestays.",
            "address": "Main Road, Madikeri",
            "city": "Madikeri",
            "state": "Karnataka",
            "pincode": "571201",
        }
        payload.update(overrides)
        return payload

    def _submit(self) -> int:
        response = self.client.post(self.list_url, self._payload(), format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        return response.data["id"]

    def test_submit_with_document(self) -> None:
        document = SimpleUploadedFile("licence.pdf", b"%PDF-1.4 licence", content_type="application/pdf")

        response = self.client.post(self.list_url, self._payload(document=document), format="multipart")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["status"], "pending")
        self.assertEqual(response.data["applicant_email"], "guide@example.com")
        self.assertIn(f"vendor-documents/{self.applicant.pk}/", response.data["document"])

    def test_rejects_unsupported_document_type(self) -> None:
        document = SimpleUploadedFile("notes.txt", b"hello", content_type="text/plain")

        response = self.client.post(self.list_url, self._payload(document=document), format="multipart")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("document", response.data)

    def test_invalid_pincode(self) -> None:
        response = self.client.post(self.list_url, self._payload(pincode="12AB"), format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("pincode", response.data)

    def test_duplicate_pending_is_conflict(self) -> None:
        self._submit()

        response = self.client.post(self.list_url, self._payload(), format="json")

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data["code"], "duplicate_pending")

    def test_applicants_only_see_their_own_applications(self) -> None:
        self._submit()
        self.client.force_authenticate(self.other)

        response = self.client.get(self.list_url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, [])

    def test_admin_approves_and_applicant_becomes_vendor(self) -> None:
        application_id = self._submit()
        self.client.force_authenticate(self.admin)

        with self.captureOnCommitCallbacks(execute=True):
            response = self.client.post(
                reverse("vendor-application-review", args=[application_id]),
                {"decision": "approved"},
                format="json",
            )

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["status"], "approved")
        self.assertEqual(response.data["reviewer_email"], "admin@example.com")
        self.assertTrue(access_checker.has_capability(self.applicant.pk, "vendor"))
        self.assertIsNotNone(VendorApplication.objects.get(pk=application_id).capability_granted_at)

    def test_second_review_is_conflict(self) -> None:
        application_id = self._submit()
        self.client.force_authenticate(self.admin)
        review_url = reverse("vendor-application-review", args=[application_id])
        self.client.post(review_url, {"decision": "rejected"}, format="json")

        response = self.client.post(review_url, {"decision": "approved"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data["code"], "invalid_transition")

    def test_applicant_cannot_review(self) -> None:
        application_id = self._submit()

        response = self.client.post(
            reverse("vendor-application-review", args=[application_id]),
            {"decision": "approved"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertFalse(access_checker.has_capability(self.applicant.pk, "vendor"))

    def test_admin_filters_by_status(self) -> None:
        self._submit()
        self.client.force_authenticate(self.admin)

        pending = self.client.get(self.list_url, {"status": "pending"})
        approved = self.client.get(self.list_url, {"status": "approved"})

        self.assertEqual(len(pending.data), 1)
        self.assertEqual(approved.data, [])
