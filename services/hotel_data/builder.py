"""
Hotel data builder - concurrent review ingestion and report output.

Walks a directory tree, submits one parsing task per review file to a
fixed-size thread pool, and writes the report once every task is done.

Usage:
    store = ThreadSafeHotelData()
    builder = HotelDataBuilder(store, num_threads=4)
    builder.load_hotel_info("input/hotels.json")
    builder.load_reviews("input/reviews")
    stats = builder.print_to_file("output/report.txt")
"""

import json
import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from pathlib import Path
from typing import Any, List, Optional, Tuple, Union

from loguru import logger

from services.hotel_data.config import DEFAULT_CONFIG
from services.hotel_data.loader import load_hotels, required_text
from services.hotel_data.models.base import (
    ErrorKind,
    FileResult,
    IngestError,
    IngestStats,
    LoadResult,
)
from services.hotel_data.store import Destination, ThreadSafeHotelData


def parse_review_record(record: Any) -> Tuple[str, str, int, str, str, bool, str, str]:
    """
    Pull the add_review arguments out of one review record.

    Returns:
        (hotel_id, review_id, rating, title, text, recommended, date, username)

    Raises:
        KeyError, TypeError, ValueError: If a field is missing or malformed
    """
    if not isinstance(record, dict):
        raise TypeError(f"expected object, got {type(record).__name__}")

    return (
        required_text(record, "hotelId"),
        required_text(record, "reviewId"),
        int(required_text(record, "ratingOverall")),
        required_text(record, "title"),
        required_text(record, "reviewText"),
        required_text(record, "isRecommended").upper() != "NO",
        required_text(record, "reviewSubmissionTime"),
        required_text(record, "userNickname"),
    )


def extract_review_records(doc: Any) -> List[Any]:
    """
    Return the list under reviewDetails.reviewCollection.review.

    Raises:
        KeyError, TypeError: If the document does not have that structure
    """
    if not isinstance(doc, dict):
        raise TypeError("document is not an object")
    records = doc["reviewDetails"]["reviewCollection"]["review"]
    if not isinstance(records, list):
        raise TypeError("'review' is not an array")
    return records


class HotelDataBuilder:
    """
    Loads hotels and reviews into a ThreadSafeHotelData.

    The directory walk runs on the calling thread; only the per-file
    parse-and-insert work runs on the pool. The pool size is fixed at
    construction, so extra files simply queue.
    """

    def __init__(
        self,
        data: ThreadSafeHotelData,
        num_threads: int = DEFAULT_CONFIG.num_threads,
        drain_timeout: float = DEFAULT_CONFIG.drain_timeout,
        review_marker: str = DEFAULT_CONFIG.review_marker,
        hotels_key: str = DEFAULT_CONFIG.hotels_key,
    ):
        if num_threads < 1:
            raise ValueError(f"num_threads must be >= 1, got {num_threads}")

        self.data = data
        self.num_threads = num_threads
        self.drain_timeout = drain_timeout
        self.review_marker = review_marker
        self.hotels_key = hotels_key

        self._executor = ThreadPoolExecutor(
            max_workers=num_threads, thread_name_prefix="review-loader"
        )
        self._submitted: List[Tuple[Future, Path]] = []
        self._futures_lock = threading.Lock()
        self._walk_errors: List[IngestError] = []
        self._rejected = 0
        self._drained: Optional[IngestStats] = None

    # ------------------------------------------------------------------
    # Phase 1: hotel metadata (synchronous)
    # ------------------------------------------------------------------

    def load_hotel_info(self, json_filename: Union[str, Path]) -> LoadResult:
        """Load hotel metadata. Returns once every hotel is in the store."""
        return load_hotels(self.data, json_filename, key=self.hotels_key)

    # ------------------------------------------------------------------
    # Phase 2: reviews (concurrent)
    # ------------------------------------------------------------------

    def load_reviews(self, directory: Union[str, Path]) -> int:
        """
        Walk the directory tree and submit a task for every review file.

        Subdirectories are walked recursively on this thread. Returns the
        number of tasks submitted by this call.
        """
        root = Path(directory)
        if not root.is_dir():
            self._walk_error(root, "review directory not found")
            return 0
        return self._walk(root)

    def _walk(self, directory: Path) -> int:
        try:
            entries = sorted(directory.iterdir(), key=lambda p: p.name)
        except OSError as e:
            self._walk_error(directory, f"unreadable directory: {e}")
            return 0

        submitted = 0
        for entry in entries:
            if entry.is_dir():
                submitted += self._walk(entry)
            elif self.review_marker in entry.name and entry.is_file():
                if self._submit(entry):
                    submitted += 1
            else:
                logger.debug(f"Skipping non-review entry {entry}")
        return submitted

    def _submit(self, path: Path) -> bool:
        try:
            future = self._executor.submit(self.parse_review_file, path)
        except RuntimeError as e:
            # Executor already shut down by drain()
            self._rejected += 1
            logger.error(f"Could not submit {path}: {e}")
            return False

        with self._futures_lock:
            self._submitted.append((future, path))
        return True

    def _walk_error(self, path: Path, message: str) -> None:
        self._walk_errors.append(
            IngestError(kind=ErrorKind.INPUT_NOT_FOUND, source=str(path), message=message)
        )
        logger.error(f"Error while loading reviews from {path}: {message}")

    def parse_review_file(self, path: Union[str, Path]) -> FileResult:
        """
        Parse one review batch and add its reviews to the store.

        Runs on a pool thread. Never raises: every failure is logged and
        reported in the returned result, so one bad file cannot affect others.
        """
        path = Path(path)
        result = FileResult(source=str(path))
        thread_name = threading.current_thread().name
        logger.debug(f"[{thread_name}] Started loading reviews from {path}")

        try:
            doc = json.loads(path.read_text(encoding="utf-8"))
            records = extract_review_records(doc)
        except FileNotFoundError:
            result.add_error(ErrorKind.INPUT_NOT_FOUND, "file not found")
            logger.error(f"Could not find review file: {path}")
            return result
        except OSError as e:
            result.add_error(ErrorKind.INPUT_NOT_FOUND, f"unreadable: {e}")
            logger.error(f"Could not read review file {path}: {e}")
            return result
        except (ValueError, RecursionError) as e:
            # Bad UTF-8 or undecodable JSON, including nesting too deep to parse
            result.add_error(ErrorKind.MALFORMED_INPUT, f"invalid JSON: {e}")
            logger.error(f"Could not parse review file {path}: {e}")
            return result
        except (KeyError, TypeError) as e:
            result.add_error(ErrorKind.MALFORMED_INPUT, f"unexpected structure: {e!r}")
            logger.error(f"Review file {path} has unexpected structure: {e!r}")
            return result

        for index, record in enumerate(records):
            try:
                fields = parse_review_record(record)
            except (KeyError, TypeError, ValueError) as e:
                result.add_error(
                    ErrorKind.MALFORMED_INPUT,
                    f"bad review record: {e!r}",
                    source=f"{path}#{index}",
                )
                logger.error(f"Skipping review record {index} in {path}: {e!r}")
                continue

            result.records_parsed += 1
            outcome = self.data.add_review(*fields)
            result.record(outcome)

        if result.unknown_hotel:
            result.add_error(
                ErrorKind.REFERENTIAL,
                f"{result.unknown_hotel} review(s) for unknown hotels",
            )

        logger.debug(
            f"[{thread_name}] Finished loading reviews from {path}: "
            f"{result.records_added} added"
        )
        return result

    # ------------------------------------------------------------------
    # Phase 3: drain and report
    # ------------------------------------------------------------------

    def drain(self, timeout: Optional[float] = None) -> IngestStats:
        """
        Stop accepting tasks and wait for the submitted ones.

        A timeout is not an error: it is logged, recorded on the stats and
        the caller may still report with whatever has been loaded. Calling
        drain again returns the stats of the first call.
        """
        if self._drained is not None:
            return self._drained

        timeout = self.drain_timeout if timeout is None else timeout
        self._executor.shutdown(wait=False)

        with self._futures_lock:
            submitted = list(self._submitted)

        done, not_done = wait([future for future, _ in submitted], timeout=timeout)

        stats = IngestStats(
            files_submitted=len(submitted),
            submissions_rejected=self._rejected,
        )
        stats.errors.extend(self._walk_errors)

        # Merge in submission order so the error list is stable
        for future, path in submitted:
            if future not in done:
                continue
            error = future.exception()
            if error is not None:
                failed = FileResult(source=str(path))
                failed.add_error(ErrorKind.MALFORMED_INPUT, f"task failed: {error!r}")
                logger.error(f"Review task for {path} failed: {error!r}")
                stats.merge(failed)
                continue
            stats.merge(future.result())

        if not_done:
            stats.timed_out = True
            stats.pending_tasks = len(not_done)
            stats.errors.append(
                IngestError(
                    kind=ErrorKind.DRAIN_TIMEOUT,
                    source="drain",
                    message=f"{len(not_done)} task(s) unfinished after {timeout}s",
                )
            )
            logger.warning(
                f"Timed out after {timeout}s with {len(not_done)} review file(s) "
                f"still loading; report may be incomplete"
            )

        logger.info(
            f"Review loading finished: {stats.files_processed}/{stats.files_submitted} files, "
            f"{stats.reviews_added} reviews added, {stats.files_failed} files failed"
        )
        self._drained = stats
        return stats

    def print_to_file(self, filename: Destination) -> IngestStats:
        """
        Drain the pool, then write the report.

        Raises:
            ReportWriteError: If the report cannot be written
        """
        stats = self.drain()
        self.data.render_to_destination(filename)
        return stats
