#!/usr/bin/env python3
"""
Build Report Workflow - Load hotels and reviews, write the sorted report.

Usage:
    # Default thread count (HOTEL_DATA_THREADS or 4)
    uv run python -m workflows.build_report \\
        --hotels input/hotels/hotels.json \\
        --reviews input/reviews \\
        --output output/results.txt

    # More threads, shorter drain timeout
    uv run python -m workflows.build_report --hotels ... --reviews ... --output ... \\
        --threads 8 --timeout 30

    # Keep a gzip copy of the run log
    uv run python -m workflows.build_report --hotels ... --reviews ... --output ... \\
        --log-dir logs/
"""

import argparse
import sys
from typing import List, Optional

from dotenv import load_dotenv
from loguru import logger
from pydantic import ValidationError

from services.hotel_data import (
    HotelDataConfig,
    ReportWriteError,
    Service,
    capture_run_logs,
    configure_logging,
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Load hotel metadata and reviews, write a sorted text report",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--hotels",
        required=True,
        help="Hotel metadata JSON file",
    )
    parser.add_argument(
        "--reviews",
        required=True,
        help="Root directory of review JSON files (searched recursively)",
    )
    parser.add_argument(
        "--output", "-o",
        required=True,
        help="Report output file",
    )
    parser.add_argument(
        "--threads", "-t",
        type=int,
        help="Worker threads for review files (default: HOTEL_DATA_THREADS or 4)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        help="Seconds to wait for review files before reporting (default: 60)",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Console log level (default: HOTEL_DATA_LOG_LEVEL or INFO)",
    )
    parser.add_argument(
        "--log-dir",
        help="Directory to save a gzip copy of the run log",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv()
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = HotelDataConfig.from_env().with_overrides(
            num_threads=args.threads,
            drain_timeout=args.timeout,
            log_level=args.log_level,
        )
    except ValidationError as e:
        parser.error(f"invalid configuration: {e}")

    # Configure logging
    configure_logging(config.log_level)

    service = Service(config)
    with capture_run_logs("hotel_report", local_backup_dir=args.log_dir):
        try:
            stats = service.build_report(args.hotels, args.reviews, args.output)
        except ReportWriteError as e:
            logger.error(str(e))
            return 1

    logger.info("Run summary:")
    for key, value in stats.to_dict().items():
        logger.info(f"  {key}: {value}")
    if stats.timed_out:
        logger.warning("Report was written with partial data (drain timed out)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
