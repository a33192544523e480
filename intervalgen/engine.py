from __future__ import annotations
from datetime import date

import numpy as np

from . import canon, intervals
from .profiles import ConsumptionProfile
from .randomness import RandomSource
from .types import DayMeasurement, GenerationConfiguration, PeriodMeasurement, Quality


def synthesize_day(
    profile: ConsumptionProfile,
    day: date,
    period_min: int,
    rng: RandomSource,
) -> np.ndarray:
    """
    Per-period kWh for one meter-day.

    The profile's base curve is multiplied by one jitter draw per period,
    taken from rng in period order. Values are clamped at zero and rounded
    to 2 dp.
    """
    curve = profile.base_curve(day, period_min)
    jitter = np.array([profile.jitter(rng) for _ in range(len(curve))], dtype=float)
    kwh = np.clip(curve * jitter, 0.0, None)
    return np.round(kwh, canon.KWH_DECIMALS)


def classify_day(
    rng: RandomSource,
    estimated_probability: float = canon.DEFAULT_ESTIMATED_PROBABILITY,
    missing_probability: float = canon.DEFAULT_MISSING_PROBABILITY,
) -> Quality:
    """One draw decides the day: [0, p_miss) missing, then estimated, else actual."""
    u = rng.next_double()
    if u < missing_probability:
        return "missing"
    if u < missing_probability + estimated_probability:
        return "estimated"
    return "actual"


def build_day(day: date, quality: Quality, kwh: np.ndarray) -> DayMeasurement:
    if quality == "missing":
        return DayMeasurement(date=day, quality=quality, periods=())
    aei = canon.AEI_CODES[quality]
    periods = tuple(
        PeriodMeasurement(period=i, hhc=float(v), aei=aei)
        for i, v in enumerate(kwh, start=1)
    )
    return DayMeasurement(date=day, quality=quality, periods=periods)


def generate_meter_days(
    profile: ConsumptionProfile,
    config: GenerationConfiguration,
    rng: RandomSource,
) -> list[DayMeasurement]:
    """
    Classify and synthesize every day of the configured range for one meter.

    Values are drawn for missing days too, so a day's readings depend only on
    the stream position and never on how earlier days were classified.
    """
    days: list[DayMeasurement] = []
    for day in intervals.day_range(config.start_date, config.end_date):
        quality = classify_day(
            rng, config.estimated_probability, config.missing_probability
        )
        kwh = synthesize_day(profile, day, config.period_min, rng)
        days.append(build_day(day, quality, kwh))
    return days
