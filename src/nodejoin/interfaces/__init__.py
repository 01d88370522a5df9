"""Capability interfaces consumed by the enrollment service layer."""
