"""Text analytics result models."""

from textanalytics.models import PiiEntity, PiiEntityCategory, PiiEntityCollection

__all__ = [
    "PiiEntity",
    "PiiEntityCategory",
    "PiiEntityCollection",
]
