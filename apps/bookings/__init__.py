"""Booking ledger and the reservation coordinator keeping it in step with seat inventory."""
