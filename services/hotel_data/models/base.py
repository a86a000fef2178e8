"""
Result models shared by the loader, the review builder and the store.
"""

from enum import Enum
from typing import List

from pydantic import BaseModel, Field


class ErrorKind(str, Enum):
    """Kinds of failure an ingestion run can hit."""

    INPUT_NOT_FOUND = "input_not_found"
    MALFORMED_INPUT = "malformed_input"
    REFERENTIAL = "referential"
    DESTINATION_WRITE = "destination_write"
    DRAIN_TIMEOUT = "drain_timeout"


class AddOutcome(str, Enum):
    """What happened to a single add_review call."""

    ADDED = "added"
    DUPLICATE = "duplicate"
    UNKNOWN_HOTEL = "unknown_hotel"
    INVALID = "invalid"


class IngestError(BaseModel):
    """One contained failure: which file or record, and why."""

    kind: ErrorKind
    source: str
    message: str


class LoadResult(BaseModel):
    """Outcome of loading one input document (metadata or one review batch)."""

    source: str
    records_parsed: int = 0
    records_added: int = 0
    duplicates_skipped: int = 0
    unknown_hotel: int = 0
    invalid: int = 0
    errors: List[IngestError] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        """True when the document itself was read and parsed."""
        return not any(
            e.kind in (ErrorKind.INPUT_NOT_FOUND, ErrorKind.MALFORMED_INPUT)
            and e.source == self.source
            for e in self.errors
        )

    def add_error(self, kind: ErrorKind, message: str, source: str = "") -> IngestError:
        error = IngestError(kind=kind, source=source or self.source, message=message)
        self.errors.append(error)
        return error

    def record(self, outcome: AddOutcome) -> None:
        """Count the outcome of one add_review/add_hotel call."""
        if outcome == AddOutcome.ADDED:
            self.records_added += 1
        elif outcome == AddOutcome.DUPLICATE:
            self.duplicates_skipped += 1
        elif outcome == AddOutcome.UNKNOWN_HOTEL:
            self.unknown_hotel += 1
        else:
            self.invalid += 1


# A review batch produces the same shape of result as the metadata document
FileResult = LoadResult


class IngestStats(BaseModel):
    """Statistics from a review ingestion run, assembled at drain time."""

    files_submitted: int = 0
    files_processed: int = 0
    files_failed: int = 0
    submissions_rejected: int = 0
    records_parsed: int = 0
    reviews_added: int = 0
    duplicates_skipped: int = 0
    unknown_hotel: int = 0
    invalid: int = 0
    pending_tasks: int = 0
    timed_out: bool = False
    errors: List[IngestError] = Field(default_factory=list)

    def merge(self, result: FileResult) -> None:
        """Fold one finished task's result into the totals."""
        self.files_processed += 1
        if not result.ok:
            self.files_failed += 1
        self.records_parsed += result.records_parsed
        self.reviews_added += result.records_added
        self.duplicates_skipped += result.duplicates_skipped
        self.unknown_hotel += result.unknown_hotel
        self.invalid += result.invalid
        self.errors.extend(result.errors)

    def to_dict(self) -> dict:
        """Convert to a flat dict for CLI output."""
        return {
            "files_submitted": self.files_submitted,
            "files_processed": self.files_processed,
            "files_failed": self.files_failed,
            "submissions_rejected": self.submissions_rejected,
            "records_parsed": self.records_parsed,
            "reviews_added": self.reviews_added,
            "duplicates_skipped": self.duplicates_skipped,
            "unknown_hotel": self.unknown_hotel,
            "invalid": self.invalid,
            "pending_tasks": self.pending_tasks,
            "timed_out": self.timed_out,
            "errors": len(self.errors),
        }
