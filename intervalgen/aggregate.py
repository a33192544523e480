from __future__ import annotations
from typing import Iterable

from . import canon
from .types import DayMeasurement, GenerationConfiguration, YearlyAggregate


def yearly_aggregate(
    mpan: str,
    days: Iterable[DayMeasurement],
    config: GenerationConfiguration,
) -> YearlyAggregate:
    """
    Roll a meter's days into the yearly settlement totals.

    - days_* count one classification per calendar day.
    - actual_kwh / estimated_kwh sum the period values of each kind.
    - ai_yearly_value carries actual + estimated for AI runs (None when zero);
      the export and reactive totals stay None.
    """
    agg = YearlyAggregate(
        mpan=mpan, start_date=config.start_date, end_date=config.end_date
    )
    actual = 0.0
    estimated = 0.0

    for day in days:
        if day.quality == "actual":
            agg.days_actual += 1
            actual += day.total_kwh
        elif day.quality == "estimated":
            agg.days_estimated += 1
            estimated += day.total_kwh
        elif day.quality == "missing":
            agg.days_missing += 1
        else:
            raise ValueError(f"Unknown day quality {day.quality!r} on {day.date}")

    if agg.total_days != config.days:
        raise ValueError(
            f"Classified {agg.total_days} days for {mpan}, expected {config.days}."
        )

    agg.actual_kwh = round(actual, canon.KWH_DECIMALS)
    agg.estimated_kwh = round(estimated, canon.KWH_DECIMALS)

    yearly = round(actual + estimated, canon.KWH_DECIMALS)
    if config.measurement_class == "AI" and yearly > 0:
        agg.ai_yearly_value = yearly
    return agg
