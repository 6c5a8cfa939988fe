#!/usr/bin/env python3
"""Generate annual rental declaration files.

Reads owners, contracts and payments either from the application's
PostgreSQL database or from a generated demo portfolio, and writes one
fixed-width declaration file plus a JSON report per owner.

Usage:
    python scripts/generate_declaration.py --year 2024 --demo
    python scripts/generate_declaration.py --year 2024 --company 1 --owner 10 --owner 12
"""

import argparse
import sys
import threading
from datetime import date
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from dimob_gen.config import DimobGenConfig
from dimob_gen.exceptions import DimobGenError
from dimob_gen.generators import RentalPortfolioScenario
from dimob_gen.layout import available_versions
from dimob_gen.logging import get_logger, setup_logging
from dimob_gen.models import ResultStatus
from dimob_gen.pipeline import DeclarationPipeline
from dimob_gen.providers import PostgresDataProvider
from dimob_gen.sinks import ConsoleSink, JsonReportSink, TextFileSink

logger = get_logger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Generate annual rental declaration files")
    parser.add_argument(
        "--year",
        type=int,
        default=date.today().year - 1,
        help="Fiscal year to declare (default: last year)",
    )
    parser.add_argument(
        "--owner",
        action="append",
        default=[],
        help="Owner id to declare (repeatable; default: every owner of a demo portfolio)",
    )
    parser.add_argument(
        "--company",
        type=str,
        default=None,
        help="Declarant company id (default: DIMOB_COMPANY_ID)",
    )
    parser.add_argument(
        "--demo",
        action="store_true",
        help="Use a Faker-generated portfolio instead of PostgreSQL",
    )
    parser.add_argument(
        "--demo-owners",
        type=int,
        default=5,
        help="Number of owners in the demo portfolio (default: 5)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for the demo portfolio (default: SEED or 42)",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Output directory (default: OUTPUT_DIR or ./output)",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Owners generated in parallel (default: DIMOB_MAX_WORKERS or 4)",
    )
    parser.add_argument(
        "--layout",
        choices=available_versions(),
        default=None,
        help="Layout version (default: DIMOB_LAYOUT_VERSION or v1)",
    )
    parser.add_argument(
        "--reference-date",
        type=date.fromisoformat,
        default=None,
        help="Date open payments are adjusted to, YYYY-MM-DD (default: today)",
    )
    parser.add_argument(
        "--encode-projected",
        action="store_true",
        help="Write projected amounts of open payments into the detail records",
    )
    parser.add_argument(
        "--no-report",
        action="store_true",
        help="Skip the JSON reports",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Print the full JSON report of each owner",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="Log level (default: LOG_LEVEL or INFO)",
    )
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> DimobGenConfig:
    """Overlay command line flags on the environment configuration."""
    config = DimobGenConfig.from_env()
    if args.company:
        config.declaration.company_id = args.company
    if args.output_dir:
        config.output.output_dir = args.output_dir
    if args.workers:
        config.declaration.max_workers = args.workers
    if args.layout:
        config.declaration.layout_version = args.layout
    if args.encode_projected:
        config.declaration.encode_projected = True
    if args.no_report:
        config.output.write_report = False
    if args.log_level:
        config.log_level = args.log_level
    if args.seed is not None:
        config.seed = args.seed
    return config


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    config = build_config(args)
    setup_logging(config.log_level, config.log_format)

    provider = None
    try:
        if args.demo:
            scenario = RentalPortfolioScenario(
                year=args.year,
                num_owners=args.demo_owners,
                seed=config.seed if config.seed is not None else 42,
            )
            provider = scenario.generate()
            config.declaration.company_id = config.declaration.company_id or scenario.company_id
            owner_ids = args.owner or scenario.owner_ids
        else:
            if not args.owner:
                logger.error("--owner is required unless --demo is given")
                return 2
            provider = PostgresDataProvider(config.postgres)
            owner_ids = args.owner

        pipeline = DeclarationPipeline.from_config(provider, config, reference_date=args.reference_date)

        cancel = threading.Event()
        try:
            results = pipeline.generate_batch(owner_ids, args.year, cancel_event=cancel)
        except KeyboardInterrupt:
            cancel.set()
            logger.warning("Interrupted; pending owners were cancelled")
            return 130

        text_sink = TextFileSink(config.output.output_dir)
        report_sink = (
            JsonReportSink(config.output.output_dir, pretty=config.output.pretty_json)
            if config.output.write_report
            else None
        )
        console = ConsoleSink(verbose=args.verbose)
        for result in results:
            text_sink.write(result)
            if report_sink is not None:
                report_sink.write(result)
            console.write(result)

        text_sink.close()
        if report_sink is not None:
            report_sink.close()
        console.close()
    except DimobGenError as e:
        logger.error("Declaration generation failed: %s", e)
        return 1
    finally:
        if isinstance(provider, PostgresDataProvider):
            provider.close()

    return 0 if all(r.status in (ResultStatus.GENERATED, ResultStatus.EMPTY) for r in results) else 1


if __name__ == "__main__":
    sys.exit(main())
