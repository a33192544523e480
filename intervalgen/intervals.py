from __future__ import annotations
from datetime import date, datetime, time, timedelta

import numpy as np

from . import canon, exceptions


def periods_per_day(period_min: int) -> int:
    """Number of periods in a day (48 for 30-min, 96 for 15-min, 288 for 5-min)."""
    exceptions.require(
        period_min > 0 and canon.MINUTES_PER_DAY % period_min == 0,
        f"Invalid interval period: {period_min}",
    )
    return canon.MINUTES_PER_DAY // period_min


def period_number(dt: datetime, period_min: int) -> int:
    """1-based period containing the wall-clock time of dt."""
    periods_per_day(period_min)
    return (dt.hour * 60 + dt.minute) // period_min + 1


def is_valid_period(period: int, period_min: int) -> bool:
    return 1 <= period <= periods_per_day(period_min)


def period_start(day: date, period: int, period_min: int) -> datetime:
    exceptions.require(
        is_valid_period(period, period_min),
        f"Period {period} out of range for {period_min}-minute intervals.",
    )
    return datetime.combine(day, time(0, 0)) + timedelta(
        minutes=(period - 1) * period_min
    )


def period_end(day: date, period: int, period_min: int) -> datetime:
    """Exclusive end; the last period of a day ends at next midnight."""
    return period_start(day, period, period_min) + timedelta(minutes=period_min)


def period_midpoints_h(period_min: int) -> np.ndarray:
    """Mid-point of every period in the day, in fractional hours."""
    n = periods_per_day(period_min)
    return (np.arange(n, dtype=float) * period_min + period_min / 2.0) / 60.0


def minute_midpoints_h() -> np.ndarray:
    """Mid-point of every minute in the day, in fractional hours."""
    return (np.arange(canon.MINUTES_PER_DAY, dtype=float) + 0.5) / 60.0


def day_range(start: date, end: date) -> list[date]:
    """Calendar days from start to end inclusive."""
    if end < start:
        return []
    return [start + timedelta(days=i) for i in range((end - start).days + 1)]
