"""
Hotel data builder configuration.
"""

import os
from typing import Literal, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

ENV_PREFIX = "HOTEL_DATA_"

LogLevel = Literal["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"]


class HotelDataConfig(BaseModel):
    """
    Runtime configuration for one report build.

    Values come from HOTEL_DATA_* environment variables (see from_env),
    CLI flags override them.
    """
    model_config = ConfigDict(frozen=True)

    num_threads: int = Field(default=4, ge=1, le=32, description="Worker pool size")
    drain_timeout: float = Field(
        default=60.0, gt=0, description="Seconds to wait for review tasks before reporting"
    )
    review_marker: str = Field(
        default=".json", min_length=1, description="File name marker for review batches"
    )
    hotels_key: str = Field(default="sr", description="Array key in the hotel metadata document")
    log_level: LogLevel = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "HotelDataConfig":
        """
        Build a config from environment variables.

        Recognised: HOTEL_DATA_THREADS, HOTEL_DATA_DRAIN_TIMEOUT,
        HOTEL_DATA_REVIEW_MARKER, HOTEL_DATA_LOG_LEVEL. Unset variables keep
        their defaults; invalid values raise pydantic.ValidationError.
        """
        env = os.environ if environ is None else environ
        values = {}

        mapping = {
            "THREADS": "num_threads",
            "DRAIN_TIMEOUT": "drain_timeout",
            "REVIEW_MARKER": "review_marker",
            "LOG_LEVEL": "log_level",
        }
        for suffix, field in mapping.items():
            raw = env.get(f"{ENV_PREFIX}{suffix}")
            if raw is None or raw.strip() == "":
                continue
            values[field] = raw.strip().upper() if field == "log_level" else raw.strip()

        return cls(**values)

    def with_overrides(self, **overrides) -> "HotelDataConfig":
        """Return a copy with the non-None overrides applied (and validated)."""
        updates = {k: v for k, v in overrides.items() if v is not None}
        if not updates:
            return self
        return HotelDataConfig(**{**self.model_dump(), **updates})


DEFAULT_CONFIG = HotelDataConfig()
