"""Record store adapter backed by Cloud Firestore."""

from .repository import RecordStore

__all__ = ["RecordStore"]
