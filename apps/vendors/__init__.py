"""Vendor onboarding: applications submitted by travellers and reviewed by administrators."""
