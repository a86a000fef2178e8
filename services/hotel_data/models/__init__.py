"""
Hotel data models.
"""

from services.hotel_data.models.base import (
    AddOutcome,
    ErrorKind,
    FileResult,
    IngestError,
    IngestStats,
    LoadResult,
)
from services.hotel_data.models.hotel import Address, Hotel
from services.hotel_data.models.review import MAX_RATING, MIN_RATING, Review

__all__ = [
    "AddOutcome",
    "ErrorKind",
    "FileResult",
    "IngestError",
    "IngestStats",
    "LoadResult",
    "Address",
    "Hotel",
    "Review",
    "MIN_RATING",
    "MAX_RATING",
]
