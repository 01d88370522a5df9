"""Enrollment attempt adapters."""

from .https import HttpsEnrollmentAttempt

__all__ = ["HttpsEnrollmentAttempt"]
