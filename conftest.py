"""Pytest configuration and shared fixtures."""

import json
from pathlib import Path
from typing import Callable, List

import pytest
from loguru import logger


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "concurrency: mark test as a multi-threaded stress test")


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def log_records() -> List[dict]:
    """Capture loguru records (level name, message, thread name) during a test."""
    records: List[dict] = []

    def sink(message):
        record = message.record
        records.append(
            {
                "level": record["level"].name,
                "message": record["message"],
                "thread": record["thread"].name,
            }
        )

    handler_id = logger.add(sink, level="DEBUG", format="{message}")
    yield records
    logger.remove(handler_id)


@pytest.fixture
def write_json() -> Callable[[Path, object], Path]:
    """Write an object as JSON, creating parent directories."""

    def _write(path: Path, data: object) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return _write


def hotel_record(hotel_id: str, name: str, city: str = "San Francisco", state: str = "CA",
                 street: str = "1 Market St", lat="37.79", lng="-122.39") -> dict:
    return {
        "id": hotel_id,
        "f": name,
        "ad": street,
        "ci": city,
        "pr": state,
        "ll": {"lat": lat, "lng": lng},
    }


def review_record(hotel_id: str, review_id: str, rating=4, date: str = "2016-06-29T17:50:29Z",
                  recommended: str = "YES", nickname: str = "traveler") -> dict:
    return {
        "hotelId": hotel_id,
        "reviewId": review_id,
        "ratingOverall": rating,
        "title": f"Title {review_id}",
        "reviewText": f"Text of review {review_id}",
        "isRecommended": recommended,
        "reviewSubmissionTime": date,
        "userNickname": nickname,
    }


def review_batch(*records: dict) -> dict:
    return {"reviewDetails": {"reviewCollection": {"review": list(records)}}}


@pytest.fixture
def make_hotel():
    return hotel_record


@pytest.fixture
def make_review():
    return review_record


@pytest.fixture
def make_batch():
    return review_batch


@pytest.fixture
def hotels_file(tmp_path, write_json) -> Path:
    """Metadata with two hotels: Zeta (1) and Alpha (2)."""
    return write_json(
        tmp_path / "hotels" / "hotels.json",
        {"sr": [hotel_record("1", "Zeta"), hotel_record("2", "Alpha")]},
    )
