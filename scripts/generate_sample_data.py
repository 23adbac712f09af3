#!/usr/bin/env python3
"""Generate a sample loan book snapshot.

The snapshot is written as JSON in the format read by ``JsonFileSource``
and can be fed to ``export_reports.py`` for manual validation.
"""

import argparse
import sys
from datetime import date
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from coop_reports.generators import PortfolioGenerator
from coop_reports.logging import get_logger, setup_logging
from coop_reports.sources import write_snapshot

logger = get_logger(__name__)


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Generate a sample loan book snapshot")
    parser.add_argument(
        "--loans",
        type=int,
        default=50,
        help="Number of loans to generate (default: 50)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=42,
        help="Random seed for reproducibility (default: 42)",
    )
    parser.add_argument(
        "--reference-date",
        type=date.fromisoformat,
        default=None,
        help="Snapshot date as YYYY-MM-DD (default: today)",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=project_root / "local" / "snapshot.json",
        help="Output JSON file (default: local/snapshot.json)",
    )
    parser.add_argument(
        "--pretty",
        action="store_true",
        help="Pretty-print JSON output",
    )
    parser.add_argument("--log-level", default="INFO", help="Log level (default: INFO)")
    args = parser.parse_args()

    setup_logging(args.log_level)

    generator = PortfolioGenerator(seed=args.seed)
    snapshot = generator.generate(num_loans=args.loans, reference_date=args.reference_date)
    path = write_snapshot(snapshot, args.output, pretty=args.pretty)

    logger.info("=" * 60)
    for name, count in snapshot.summary().items():
        logger.info("%-14s%d", name + ":", count)
    logger.info("Snapshot saved to: %s", path)
    logger.info("=" * 60)


if __name__ == "__main__":
    main()
