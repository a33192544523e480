from __future__ import annotations
from datetime import date
from typing import Dict, Iterable, Mapping, Tuple

import numpy as np

from . import canon, intervals
from .exceptions import InvalidArgumentError, require
from .randomness import RandomSource

Knots = Tuple[Tuple[float, float], ...]  # (hour, multiplier), hours 0..24

FLAT: Knots = ((0.0, 1.0), (24.0, 1.0))


def _shape(hours: np.ndarray, knots: Knots) -> np.ndarray:
    xs = np.array([k[0] for k in knots], dtype=float)
    ys = np.array([k[1] for k in knots], dtype=float)
    return np.interp(hours, xs, ys)


class ConsumptionProfile:
    """
    Consumption shape for one business type.

    A period's expected kWh is

        base_kwh × intraday(hour) × weekday × seasonal × period_min / 30

    where intraday() is the mean of the interpolated knots over the period.
    Knots sit on whole minutes, so the per-minute mid-point rule integrates
    them exactly and a day's total does not depend on the period length.
    """

    business_type: str = ""
    base_kwh: float = 0.0  # per half hour at multiplier 1.0
    working_knots: Knots = FLAT
    closed_knots: Knots = FLAT
    weekday_factors: Tuple[float, ...] = (1.0,) * 7  # Mon..Sun
    seasonal_factors: Mapping[int, float] = {}  # month → factor
    variation: float = 0.10  # ± fraction of jitter per period

    def is_working_day(self, day: date) -> bool:
        return day.weekday() < 5

    def intraday(self, day: date, hours: np.ndarray) -> np.ndarray:
        knots = self.working_knots if self.is_working_day(day) else self.closed_knots
        return _shape(hours, knots)

    def day_factor(self, day: date) -> float:
        return self.weekday_factors[day.weekday()] * self.seasonal_factors.get(
            day.month, 1.0
        )

    def base_curve(self, day: date, period_min: int) -> np.ndarray:
        """Expected kWh per period for the day, before jitter."""
        n = intervals.periods_per_day(period_min)
        # mean of the shape over each period, sampled per minute
        minutes = intervals.minute_midpoints_h()
        shape = self.intraday(day, minutes).reshape(n, period_min).mean(axis=1)
        scale = period_min / canon.REFERENCE_PERIOD_MIN
        return self.base_kwh * shape * self.day_factor(day) * scale

    def jitter(self, rng: RandomSource) -> float:
        """Multiplier in [1 - variation, 1 + variation)."""
        return 1.0 + (rng.next_double() * 2.0 - 1.0) * self.variation

    def __repr__(self) -> str:
        return f"{type(self).__name__}(business_type={self.business_type!r})"


class OfficeProfile(ConsumptionProfile):
    """08:00–18:00 weekday occupancy, quiet weekends, HVAC peaks in summer/winter."""

    business_type = "Office"
    base_kwh = 80.0
    working_knots = (
        (0.0, 0.06),
        (7.0, 0.06),
        (8.0, 0.5),
        (10.0, 1.2),
        (16.0, 1.2),
        (18.0, 0.3),
        (19.0, 0.06),
        (24.0, 0.06),
    )
    closed_knots = (
        (0.0, 0.06),
        (9.0, 0.06),
        (10.0, 0.12),
        (16.0, 0.12),
        (17.0, 0.06),
        (24.0, 0.06),
    )
    weekday_factors = (1.0, 1.0, 1.0, 1.0, 0.95, 0.9, 0.85)
    seasonal_factors = {6: 1.25, 7: 1.25, 8: 1.25, 12: 1.15, 1: 1.15, 2: 1.15}
    variation = 0.08


class ManufacturingProfile(ConsumptionProfile):
    """Round-the-clock process load with a 02:00 maintenance dip."""

    business_type = "Manufacturing"
    base_kwh = 400.0
    working_knots = (
        (0.0, 1.0),
        (2.0, 0.7),
        (3.0, 0.85),
        (6.0, 1.05),
        (18.0, 1.05),
        (19.0, 1.0),
        (24.0, 1.0),
    )
    closed_knots = working_knots
    weekday_factors = (1.0, 1.0, 1.0, 1.0, 1.0, 0.95, 0.95)
    seasonal_factors = {6: 1.12, 7: 1.12, 8: 1.12, 12: 1.08, 1: 1.08, 2: 1.08}
    variation = 0.05

    def is_working_day(self, day: date) -> bool:
        return True


class RetailProfile(ConsumptionProfile):
    """09:00–21:00 trading every day, weekend and holiday-season peaks."""

    business_type = "Retail"
    base_kwh = 90.0
    working_knots = (
        (0.0, 0.15),
        (8.0, 0.15),
        (9.0, 0.6),
        (10.0, 1.3),
        (17.0, 1.3),
        (20.0, 1.25),
        (21.0, 0.4),
        (22.0, 0.15),
        (24.0, 0.15),
    )
    closed_knots = working_knots
    weekday_factors = (0.9, 0.92, 0.95, 1.0, 1.15, 1.25, 1.10)
    seasonal_factors = {
        11: 1.35,
        12: 1.35,
        6: 1.15,
        7: 1.15,
        8: 1.15,
        1: 1.10,
        2: 1.10,
    }
    variation = 0.12

    def is_working_day(self, day: date) -> bool:
        return True


class DataCenterProfile(ConsumptionProfile):
    """Near-constant 24/7 load; cooling drives the seasonal swing."""

    business_type = "DataCenter"
    base_kwh = 500.0
    working_knots = (
        (0.0, 1.0),
        (2.0, 1.0),
        (3.0, 0.95),
        (4.0, 1.0),
        (24.0, 1.0),
    )
    closed_knots = working_knots
    seasonal_factors = {6: 1.2, 7: 1.2, 8: 1.2, 12: 0.95, 1: 0.95, 2: 0.95}
    variation = 0.02

    def is_working_day(self, day: date) -> bool:
        return True


class EducationalProfile(ConsumptionProfile):
    """Schools and universities: term-time weekdays, summer break in Jul/Aug."""

    business_type = "Educational"
    base_kwh = 120.0
    working_knots = (
        (0.0, 0.25),
        (7.0, 0.25),
        (8.0, 0.6),
        (10.0, 1.3),
        (15.0, 1.3),
        (17.0, 1.15),
        (18.0, 0.4),
        (19.0, 0.25),
        (24.0, 0.25),
    )
    closed_knots = ((0.0, 0.25), (24.0, 0.25))
    weekday_factors = (1.0, 1.05, 1.05, 1.0, 0.95, 0.4, 0.3)
    seasonal_factors = {5: 1.15, 6: 1.15, 1: 1.2, 2: 1.2, 9: 1.05, 10: 1.05}
    variation = 0.10
    break_months = (7, 8)

    def is_term_time(self, day: date) -> bool:
        return day.month not in self.break_months

    def is_working_day(self, day: date) -> bool:
        return self.is_term_time(day) and day.weekday() < 5

    def day_factor(self, day: date) -> float:
        if not self.is_term_time(day):
            return 0.5
        return super().day_factor(day)


BUILTIN_PROFILES: Tuple[type[ConsumptionProfile], ...] = (
    OfficeProfile,
    ManufacturingProfile,
    RetailProfile,
    DataCenterProfile,
    EducationalProfile,
)


class ProfileRegistry:
    """Case-insensitive lookup of consumption profiles by business type."""

    def __init__(self, profiles: Iterable[ConsumptionProfile] | None = None):
        self._profiles: Dict[str, ConsumptionProfile] = {}
        if profiles is None:
            profiles = [cls() for cls in BUILTIN_PROFILES]
        for p in profiles:
            self.register(p)

    def register(self, profile: ConsumptionProfile) -> None:
        """Add a profile, replacing any existing one for the same business type."""
        require(
            bool(profile.business_type and profile.business_type.strip()),
            "Profile must declare a business_type.",
        )
        self._profiles[profile.business_type.lower()] = profile

    def get(self, business_type: str) -> ConsumptionProfile:
        require(
            bool(business_type and business_type.strip()),
            "Business type cannot be empty.",
        )
        try:
            return self._profiles[business_type.strip().lower()]
        except KeyError:
            raise InvalidArgumentError(
                f"Unknown business type '{business_type}'. "
                f"Available types: {', '.join(self.business_types)}"
            ) from None

    def is_registered(self, business_type: str | None) -> bool:
        if not business_type or not business_type.strip():
            return False
        return business_type.strip().lower() in self._profiles

    @property
    def business_types(self) -> list[str]:
        return [p.business_type for p in self._profiles.values()]

    def __contains__(self, business_type: object) -> bool:
        return isinstance(business_type, str) and self.is_registered(business_type)

    def __len__(self) -> int:
        return len(self._profiles)


def default_registry() -> ProfileRegistry:
    return ProfileRegistry()
