"""
Thread-safe hotel data store.

Holds every hotel and every review of an ingestion run. Writers are the
metadata loader (single-threaded) and the review tasks running on the
builder's worker pool; the reader is the report writer after drain.
"""

import threading
from pathlib import Path
from typing import Dict, List, Optional, TextIO, Union

from loguru import logger
from pydantic import ValidationError

from services.hotel_data.models.base import AddOutcome
from services.hotel_data.models.hotel import Address, Hotel
from services.hotel_data.models.review import Review

HOTEL_SEPARATOR = "*" * 20
REVIEW_SEPARATOR = "-" * 20

Destination = Union[str, Path, TextIO]


class ReportWriteError(Exception):
    """The report could not be written to its destination."""

    def __init__(self, destination: str, cause: OSError):
        super().__init__(f"Could not write report to {destination}: {cause}")
        self.destination = destination
        self.cause = cause


class ThreadSafeHotelData:
    """
    In-memory store of hotels and their reviews.

    A single lock guards both maps. Every public method takes it, so a
    review is either fully visible or not visible at all.

    Policies:
    - add_hotel with an existing id is a no-op (first writer wins).
    - add_review with an existing (hotel_id, review_id) is rejected
      (first writer wins).
    - add_review for an unknown hotel is dropped and logged.
    - add_review with a rating outside 1..5 is dropped and logged.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._hotels: Dict[str, Hotel] = {}
        self._reviews: Dict[str, Dict[str, Review]] = {}  # hotel_id -> review_id -> Review

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def add_hotel(
        self,
        hotel_id: str,
        name: str,
        city: str,
        state: str,
        street: str,
        lat: float,
        lng: float,
    ) -> bool:
        """
        Create a Hotel with its Address and add it to the store.

        Returns:
            True if the hotel was added, False if the id was already present
        """
        hotel = Hotel(
            hotel_id=hotel_id,
            hotel_name=name,
            address=Address(
                street_address=street,
                city=city,
                state=state,
                latitude=lat,
                longitude=lng,
            ),
        )

        with self._lock:
            if hotel_id in self._hotels:
                existing = self._hotels[hotel_id]
                logger.warning(
                    f"Duplicate hotel id {hotel_id} ('{name}'), keeping '{existing.hotel_name}'"
                )
                return False
            self._hotels[hotel_id] = hotel
            self._reviews[hotel_id] = {}

        return True

    def add_review(
        self,
        hotel_id: str,
        review_id: str,
        rating: int,
        title: str,
        text: str,
        recommended: bool,
        date: str,
        username: str,
    ) -> AddOutcome:
        """
        Create a Review and add it under its hotel.

        Safe to call from any number of threads at once.
        """
        try:
            review = Review(
                hotel_id=hotel_id,
                review_id=review_id,
                rating=rating,
                title=title,
                text=text,
                recommended=recommended,
                date=date,
                username=username,
            )
        except ValidationError as e:
            logger.warning(
                f"Rejected review {review_id} for hotel {hotel_id}: "
                f"{e.error_count()} validation error(s), first: {e.errors()[0]['msg']}"
            )
            return AddOutcome.INVALID

        with self._lock:
            reviews = self._reviews.get(hotel_id)
            if reviews is None:
                outcome = AddOutcome.UNKNOWN_HOTEL
            elif review_id in reviews:
                outcome = AddOutcome.DUPLICATE
            else:
                reviews[review_id] = review
                outcome = AddOutcome.ADDED

        if outcome == AddOutcome.UNKNOWN_HOTEL:
            logger.warning(f"Dropped review {review_id}: unknown hotel {hotel_id}")
        elif outcome == AddOutcome.DUPLICATE:
            logger.debug(f"Skipped duplicate review {review_id} for hotel {hotel_id}")

        return outcome

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_hotel(self, hotel_id: str) -> Optional[Hotel]:
        with self._lock:
            return self._hotels.get(hotel_id)

    @property
    def hotel_count(self) -> int:
        with self._lock:
            return len(self._hotels)

    def review_count(self, hotel_id: Optional[str] = None) -> int:
        """Number of reviews for one hotel, or across all hotels."""
        with self._lock:
            if hotel_id is not None:
                return len(self._reviews.get(hotel_id, {}))
            return sum(len(r) for r in self._reviews.values())

    def get_hotels_sorted(self) -> List[Hotel]:
        """All hotels, ordered by name then hotel_id."""
        with self._lock:
            hotels = list(self._hotels.values())
        return sorted(hotels, key=lambda h: h.sort_key)

    def get_reviews_sorted(self, hotel_id: str) -> List[Review]:
        """Reviews of one hotel ordered by submission date, then review_id."""
        with self._lock:
            reviews = list(self._reviews.get(hotel_id, {}).values())
        return sorted(reviews, key=lambda r: r.sort_key)

    def average_rating(self, hotel_id: str) -> Optional[float]:
        """Mean rating of a hotel's reviews, None if it has none."""
        with self._lock:
            reviews = list(self._reviews.get(hotel_id, {}).values())
        if not reviews:
            return None
        return sum(r.rating for r in reviews) / len(reviews)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def render_hotel(self, hotel_id: str) -> str:
        """One hotel and its sorted reviews, or "" for an unknown id."""
        with self._lock:
            hotel = self._hotels.get(hotel_id)
            reviews = list(self._reviews.get(hotel_id, {}).values())
        if hotel is None:
            return ""
        return self._render_block(hotel, sorted(reviews, key=lambda r: r.sort_key))

    def render_report(self) -> str:
        """
        Full report text: every hotel in order, each followed by its reviews.

        Takes one snapshot under the lock so the text is consistent even if
        called while writers are still running.
        """
        with self._lock:
            snapshot = [
                (hotel, list(self._reviews.get(hotel.hotel_id, {}).values()))
                for hotel in self._hotels.values()
            ]

        snapshot.sort(key=lambda item: item[0].sort_key)
        blocks = [
            self._render_block(hotel, sorted(reviews, key=lambda r: r.sort_key))
            for hotel, reviews in snapshot
        ]
        if not blocks:
            return ""
        return "\n\n".join(blocks) + "\n"

    def render_to_destination(self, dest: Destination) -> None:
        """
        Write the full report to a path or an open text stream.

        Raises:
            ReportWriteError: If the destination cannot be written
        """
        report = self.render_report()

        if isinstance(dest, (str, Path)):
            path = Path(dest)
            try:
                path.write_text(report, encoding="utf-8")
            except OSError as e:
                logger.error(f"Failed to write report to {path}: {e}")
                raise ReportWriteError(str(path), e) from e
            logger.info(f"Report written to {path} ({self.hotel_count} hotels)")
            return

        name = getattr(dest, "name", repr(dest))
        try:
            dest.write(report)
            dest.flush()
        except (OSError, ValueError) as e:
            # ValueError: write to a closed stream
            error = e if isinstance(e, OSError) else OSError(str(e))
            logger.error(f"Failed to write report to {name}: {e}")
            raise ReportWriteError(str(name), error) from e

    @staticmethod
    def _render_block(hotel: Hotel, reviews: List[Review]) -> str:
        lines = [HOTEL_SEPARATOR, hotel.render()]
        for review in reviews:
            lines.append(REVIEW_SEPARATOR)
            lines.append(review.render())
        return "\n".join(lines)
