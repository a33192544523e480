from __future__ import annotations
import time
from typing import Iterator, Optional
from uuid import UUID

from loguru import logger

from . import intervals, mpan, randomness, seed
from .aggregate import yearly_aggregate
from .engine import generate_meter_days
from .profiles import ProfileRegistry, default_registry
from .randomness import RandomSource
from .types import GenerationConfiguration, GenerationResult, MeterResult


def expected_reading_count(config: GenerationConfiguration) -> int:
    """Upper bound on period readings: every day of every meter, none missing."""
    return (
        config.days
        * intervals.periods_per_day(config.period_min)
        * config.effective_meter_count
    )


def meter_ids_for(config: GenerationConfiguration, rng: RandomSource) -> list[UUID]:
    """Explicit ids from the configuration, or fresh v4 UUIDs drawn from rng."""
    if config.meter_ids is not None:
        return list(config.meter_ids)
    return [
        UUID(bytes=rng.next_bytes(16), version=4)
        for _ in range(config.meter_count)
    ]


def _meter_source(run_rng: RandomSource, meter_id: UUID) -> RandomSource:
    # deterministic runs: one independent stream per meter
    if run_rng.is_deterministic and run_rng.seed is not None:
        return randomness.create_deterministic(
            seed.derive_meter_seed(run_rng.seed, meter_id)
        )
    return run_rng


def _run(
    config: GenerationConfiguration, registry: Optional[ProfileRegistry]
) -> tuple[RandomSource, Iterator[MeterResult]]:
    registry = registry or default_registry()
    profile = registry.get(config.business_type)
    rng = randomness.create_random_source(config)
    identities = mpan.assign_mpans(meter_ids_for(config, rng))

    def _meters() -> Iterator[MeterResult]:
        for identity in identities:
            meter_rng = _meter_source(rng, identity.meter_id)
            days = generate_meter_days(profile, config, meter_rng)
            yield MeterResult(
                identity=identity,
                business_type=profile.business_type,
                days=days,
                aggregate=yearly_aggregate(identity.mpan, days, config),
            )

    return rng, _meters()


def iter_meters(
    config: GenerationConfiguration, registry: Optional[ProfileRegistry] = None
) -> Iterator[MeterResult]:
    """
    Streaming variant of generate(): yields one MeterResult at a time.

    Profile lookup and MPAN assignment happen eagerly, so configuration
    errors surface on the call rather than on first iteration.
    """
    _, meters = _run(config, registry)
    return meters


def generate(
    config: GenerationConfiguration, registry: Optional[ProfileRegistry] = None
) -> GenerationResult:
    """Generate readings, classifications and yearly totals for every meter."""
    started = time.perf_counter()
    rng, meters = _run(config, registry)
    logger.info(
        "Generating {} meter(s) of {} data, {} to {} at {}-minute periods ({})",
        config.effective_meter_count,
        config.business_type,
        config.start_date,
        config.end_date,
        config.period_min,
        f"seed {rng.seed}" if rng.is_deterministic else "non-deterministic",
    )

    result = GenerationResult(configuration=config, seed=rng.seed, meters=list(meters))

    logger.info(
        "Generated {:,} readings for {} meter(s) in {:.0f} ms",
        result.total_readings,
        len(result.meters),
        (time.perf_counter() - started) * 1000.0,
    )
    return result
