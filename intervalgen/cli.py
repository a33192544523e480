from __future__ import annotations

import argparse
import sys
from datetime import date, timedelta
from pathlib import Path
from typing import Optional, Sequence

from loguru import logger

from . import canon, formats
from .config import MeterGenerationSettings, load_settings, to_configuration
from .exceptions import IntervalGenError, require
from .orchestrator import expected_reading_count, generate
from .profiles import default_registry
from .types import GenerationConfiguration


def _cli_settings() -> MeterGenerationSettings:
    """Defaults used when no --config file is given: one meter, the last week."""
    today = date.today()
    return MeterGenerationSettings(
        default_meter_count=1,
        default_start_date=today - timedelta(days=7),
        default_end_date=today,
        deterministic=False,
        seed=None,
    )


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="intervalgen", description="Generate synthetic smart meter interval data."
    )
    sub = ap.add_subparsers(dest="command", required=True)

    gen = sub.add_parser("generate", help="Generate interval readings.")
    gen.add_argument("--start-date", "-s", type=date.fromisoformat, default=None,
                     help="Start date, YYYY-MM-DD (inclusive)")
    gen.add_argument("--end-date", "-e", type=date.fromisoformat, default=None,
                     help="End date, YYYY-MM-DD (inclusive)")
    gen.add_argument("--period", "-p", type=int, default=None,
                     help=f"Period length in minutes {canon.SUPPORTED_PERIODS}")
    gen.add_argument("--profile", "-t", default=None,
                     help="Business type (Office, Manufacturing, Retail, DataCenter, Educational)")
    gen.add_argument("--meters", "-m", type=int, default=None,
                     help=f"Number of meters (1-{canon.MAX_METER_COUNT})")
    gen.add_argument("--deterministic", "-d", action="store_true", default=None,
                     help="Reproducible output for the same inputs")
    gen.add_argument("--seed", type=int, default=None,
                     help="Seed for deterministic mode")
    gen.add_argument("--output", "-o", type=Path, default=None,
                     help="Output file (stdout if omitted)")
    gen.add_argument("--format", "-f", default="csv",
                     help=f"Output format ({', '.join(formats.SUPPORTED_FORMATS)})")
    gen.add_argument("--site", default=None, help="Site name written to the output")
    gen.add_argument("--pretty", action="store_true", help="Pretty-print JSON output")
    gen.add_argument("--quiet", "-q", action="store_true", help="Suppress progress output")
    gen.add_argument("--config", type=Path, default=None,
                     help="TOML file with a [meter_generation] table")
    return ap


def _configuration(args: argparse.Namespace) -> GenerationConfiguration:
    settings = load_settings(args.config) if args.config else _cli_settings()

    if args.period is not None:
        require(args.period in canon.SUPPORTED_PERIODS,
                f"Period must be one of {', '.join(map(str, canon.SUPPORTED_PERIODS))} minutes.")
    if args.meters is not None:
        require(1 <= args.meters <= canon.MAX_METER_COUNT,
                f"Meter count must be between 1 and {canon.MAX_METER_COUNT}.")
    require(args.format.lower() in formats.SUPPORTED_FORMATS,
            f"Unsupported format '{args.format}'. "
            f"Supported: {', '.join(formats.SUPPORTED_FORMATS)}")

    start = args.start_date or settings.default_start_date
    end = args.end_date or settings.default_end_date
    require(end >= start, "End date must be greater than or equal to start date.")

    profile = args.profile or settings.default_business_type
    registry = default_registry()
    require(profile in registry,
            f"Unknown profile '{profile}'. "
            f"Available profiles: {', '.join(registry.business_types)}")

    return to_configuration(
        settings,
        start_date=start,
        end_date=end,
        period_min=args.period,
        business_type=profile,
        meter_count=args.meters,
        site_name=args.site,
        deterministic=args.deterministic,
        seed=args.seed,
    )


def _setup_logging(quiet: bool) -> None:
    logger.remove()
    if quiet:
        logger.disable("intervalgen")
        return
    logger.enable("intervalgen")
    logger.add(sys.stderr, level="INFO", format="{message}")


def _generate(args: argparse.Namespace) -> int:
    config = _configuration(args)
    logger.info("Profile:       {}", config.business_type)
    logger.info("Date range:    {} to {}", config.start_date, config.end_date)
    logger.info("Period:        {} minutes", config.period_min)
    logger.info("Meters:        {}", config.effective_meter_count)
    logger.info("Format:        {}", args.format.lower())
    logger.info("Expected:      {:,} readings (at most)", expected_reading_count(config))

    result = generate(config)
    formats.write(result, args.format, args.output, site_name=args.site, pretty=args.pretty)
    if args.output is not None:
        logger.info("Wrote {:,} readings to {}", result.total_readings, args.output)
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    _setup_logging(args.quiet)
    try:
        return _generate(args)
    except (IntervalGenError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
