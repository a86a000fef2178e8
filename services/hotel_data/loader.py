"""
Hotel metadata loader.

Reads the single hotel metadata document and fills the store. Must finish
before review ingestion starts, since reviews for unknown hotels are dropped.

Expected document:
    {"sr": [{"id": "25622", "f": "Hilton ...", "ad": "55 Cyril Magnin St",
             "ci": "San Francisco", "pr": "CA",
             "ll": {"lat": "37.78", "lng": "-122.41"}}, ...]}
"""

import json
import threading
from pathlib import Path
from typing import Any, Tuple, Union

from loguru import logger
from pydantic import ValidationError

from services.hotel_data.models.base import AddOutcome, ErrorKind, LoadResult
from services.hotel_data.store import ThreadSafeHotelData


def required_text(record: dict, key: str) -> str:
    """Return record[key] as text. A JSON null counts as a malformed field."""
    value = record[key]
    if value is None:
        raise ValueError(f"'{key}' is null")
    return str(value)


def parse_hotel_record(record: Any) -> Tuple[str, str, str, str, str, float, float]:
    """
    Pull the add_hotel arguments out of one metadata record.

    Returns:
        (hotel_id, name, city, state, street, lat, lng)

    Raises:
        KeyError, TypeError, ValueError, OverflowError: If a field is missing
            or malformed
    """
    if not isinstance(record, dict):
        raise TypeError(f"expected object, got {type(record).__name__}")

    ll = record["ll"]
    if not isinstance(ll, dict):
        raise TypeError("'ll' is not an object")

    return (
        required_text(record, "id"),
        required_text(record, "f"),
        required_text(record, "ci"),
        required_text(record, "pr"),
        required_text(record, "ad"),
        float(ll["lat"]),
        float(ll["lng"]),
    )


def load_hotels(
    store: ThreadSafeHotelData,
    source: Union[str, Path],
    key: str = "sr",
) -> LoadResult:
    """
    Load every hotel in the metadata document into the store.

    A missing or unparsable document is logged and returned as an error;
    the store keeps whatever was loaded. A bad record is skipped.
    """
    path = Path(source)
    result = LoadResult(source=str(path))
    logger.debug(f"[{threading.current_thread().name}] Started loading hotels from {path}")

    try:
        doc = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        result.add_error(ErrorKind.INPUT_NOT_FOUND, "file not found")
        logger.error(f"Could not find hotel file: {path}")
        return result
    except OSError as e:
        result.add_error(ErrorKind.INPUT_NOT_FOUND, f"unreadable: {e}")
        logger.error(f"Could not read hotel file {path}: {e}")
        return result
    except (ValueError, RecursionError) as e:
        # Bad UTF-8 or undecodable JSON, including nesting too deep to parse
        result.add_error(ErrorKind.MALFORMED_INPUT, f"invalid JSON: {e}")
        logger.error(f"Could not parse hotel file {path}: {e}")
        return result

    records = doc.get(key) if isinstance(doc, dict) else None
    if not isinstance(records, list):
        result.add_error(ErrorKind.MALFORMED_INPUT, f"missing '{key}' array")
        logger.error(f"Hotel file {path} has no '{key}' array")
        return result

    for index, record in enumerate(records):
        try:
            fields = parse_hotel_record(record)
            result.records_parsed += 1
            added = store.add_hotel(*fields)
        except (KeyError, TypeError, ValueError, OverflowError, ValidationError) as e:
            result.add_error(
                ErrorKind.MALFORMED_INPUT,
                f"bad hotel record: {e!r}",
                source=f"{path}#{index}",
            )
            logger.error(f"Skipping hotel record {index} in {path}: {e!r}")
            continue
        result.record(AddOutcome.ADDED if added else AddOutcome.DUPLICATE)

    logger.info(
        f"Loaded {result.records_added} hotels from {path} "
        f"({result.duplicates_skipped} duplicates, {len(result.errors)} errors)"
    )
    logger.debug(f"[{threading.current_thread().name}] Finished loading hotels from {path}")
    return result
