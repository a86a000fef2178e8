"""
Hotel Data - Load hotels and reviews concurrently, write a sorted report.

Usage:
    from services.hotel_data import Service, HotelDataConfig

    # Via service
    stats = Service().build_report("input/hotels.json", "input/reviews", "output.txt")

    # Direct builder usage
    store = ThreadSafeHotelData()
    builder = HotelDataBuilder(store, num_threads=4)
    builder.load_hotel_info("input/hotels.json")
    builder.load_reviews("input/reviews")
    stats = builder.print_to_file("output.txt")
"""

# Service
from services.hotel_data.service import Service, IService

# Store and builder
from services.hotel_data.store import ThreadSafeHotelData, ReportWriteError
from services.hotel_data.builder import HotelDataBuilder
from services.hotel_data.loader import load_hotels

# Models
from services.hotel_data.models import (
    AddOutcome,
    Address,
    ErrorKind,
    FileResult,
    Hotel,
    IngestError,
    IngestStats,
    LoadResult,
    Review,
)

# Config
from services.hotel_data.config import HotelDataConfig

# Logging
from services.hotel_data.logging import RunLogger, capture_run_logs, configure_logging

__all__ = [
    # Service
    "Service",
    "IService",
    # Store and builder
    "ThreadSafeHotelData",
    "ReportWriteError",
    "HotelDataBuilder",
    "load_hotels",
    # Models
    "AddOutcome",
    "Address",
    "ErrorKind",
    "FileResult",
    "Hotel",
    "IngestError",
    "IngestStats",
    "LoadResult",
    "Review",
    # Config
    "HotelDataConfig",
    # Logging
    "RunLogger",
    "capture_run_logs",
    "configure_logging",
]
