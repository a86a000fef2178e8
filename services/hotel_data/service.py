"""
Hotel Data Service - Build a sorted hotel/review report from JSON inputs.

Runs the three phases in the required order:
1. Load hotel metadata (single-threaded, must finish first)
2. Walk the review directory, parsing files on a worker pool
3. Drain the pool and write the report
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Union

from loguru import logger

from services.hotel_data.builder import HotelDataBuilder
from services.hotel_data.config import HotelDataConfig
from services.hotel_data.models.base import IngestStats
from services.hotel_data.store import Destination, ThreadSafeHotelData


class IService(ABC):
    """Hotel Data Service Interface - Build reports from hotel and review files."""

    @abstractmethod
    def build_report(
        self,
        hotels_path: Union[str, Path],
        reviews_dir: Union[str, Path],
        output: Destination,
    ) -> IngestStats:
        """
        Load hotels and reviews, then write the sorted report.

        Args:
            hotels_path: Hotel metadata JSON file
            reviews_dir: Root directory of review batch files
            output: Report path or open text stream

        Returns:
            Review ingestion stats (including drain timeout info)

        Raises:
            ReportWriteError: If the report cannot be written
        """
        pass

    @abstractmethod
    def load(
        self,
        hotels_path: Union[str, Path],
        reviews_dir: Union[str, Path],
    ) -> ThreadSafeHotelData:
        """Load hotels and reviews and return the drained store."""
        pass


class Service(IService):
    """Service for building hotel review reports."""

    def __init__(self, config: Optional[HotelDataConfig] = None):
        self.config = config or HotelDataConfig.from_env()
        self.last_stats: Optional[IngestStats] = None

    def _new_builder(self, store: ThreadSafeHotelData) -> HotelDataBuilder:
        return HotelDataBuilder(
            store,
            num_threads=self.config.num_threads,
            drain_timeout=self.config.drain_timeout,
            review_marker=self.config.review_marker,
            hotels_key=self.config.hotels_key,
        )

    def _run(
        self,
        hotels_path: Union[str, Path],
        reviews_dir: Union[str, Path],
    ):
        store = ThreadSafeHotelData()
        builder = self._new_builder(store)

        hotels = builder.load_hotel_info(hotels_path)
        if not hotels.ok:
            logger.warning(
                f"Continuing with {store.hotel_count} hotels; "
                f"reviews for other hotels will be dropped"
            )

        submitted = builder.load_reviews(reviews_dir)
        logger.info(f"Submitted {submitted} review files using {self.config.num_threads} threads")
        return store, builder

    def load(
        self,
        hotels_path: Union[str, Path],
        reviews_dir: Union[str, Path],
    ) -> ThreadSafeHotelData:
        """
        Usage:
            store = Service().load("input/hotels.json", "input/reviews")
            store.get_hotels_sorted()
        """
        store, builder = self._run(hotels_path, reviews_dir)
        self.last_stats = builder.drain()
        return store

    def build_report(
        self,
        hotels_path: Union[str, Path],
        reviews_dir: Union[str, Path],
        output: Destination,
    ) -> IngestStats:
        """
        Usage:
            service = Service(HotelDataConfig(num_threads=8))
            stats = service.build_report("input/hotels.json", "input/reviews", "out.txt")
            if stats.timed_out:
                ...  # report is partial
        """
        _, builder = self._run(hotels_path, reviews_dir)
        stats = builder.print_to_file(output)
        self.last_stats = stats
        return stats
