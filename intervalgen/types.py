from __future__ import annotations
from typing import Dict, Literal, List, Optional, Tuple, TypedDict
from dataclasses import dataclass, field, replace
from datetime import date, datetime, timezone
from uuid import UUID

from . import canon
from .exceptions import require

MeasurementClass = Literal["AI", "AE", "RI", "RE"]
Quality = Literal["actual", "estimated", "missing"]


def _as_date(value: date | datetime, name: str) -> date:
    if isinstance(value, datetime):
        return value.date()
    require(isinstance(value, date), f"{name} must be a date, got {value!r}")
    return value


## Generation request
@dataclass(frozen=True)
class GenerationConfiguration:
    start_date: date
    end_date: date  # inclusive
    period_min: int = canon.DEFAULT_PERIOD_MIN
    business_type: str = "Office"
    measurement_class: MeasurementClass = "AI"
    meter_count: int = 1
    meter_ids: Optional[Tuple[UUID, ...]] = None
    site_name: Optional[str] = None
    deterministic: bool = False
    seed: Optional[int] = None
    estimated_probability: float = canon.DEFAULT_ESTIMATED_PROBABILITY
    missing_probability: float = canon.DEFAULT_MISSING_PROBABILITY

    def __post_init__(self):
        object.__setattr__(self, "start_date", _as_date(self.start_date, "start_date"))
        object.__setattr__(self, "end_date", _as_date(self.end_date, "end_date"))
        require(
            self.start_date <= self.end_date,
            f"start_date {self.start_date} must not be after end_date {self.end_date}.",
        )

        require(
            isinstance(self.period_min, int) and self.period_min > 0,
            f"period_min must be a positive integer, got {self.period_min!r}.",
        )
        require(
            canon.MINUTES_PER_DAY % self.period_min == 0,
            f"period_min {self.period_min} does not divide a day evenly.",
        )

        require(
            bool(self.business_type and self.business_type.strip()),
            "business_type is required.",
        )
        require(
            self.measurement_class in canon.MEASUREMENT_CLASSES,
            f"Unknown measurement class {self.measurement_class!r}. "
            f"Expected one of: {', '.join(canon.MEASUREMENT_CLASSES)}.",
        )

        if self.meter_ids is not None:
            ids = tuple(self.meter_ids)
            require(len(ids) > 0, "meter_ids must not be empty when given.")
            require(
                all(isinstance(m, UUID) for m in ids), "meter_ids must be UUIDs."
            )
            require(len(set(ids)) == len(ids), "meter_ids must be unique.")
            object.__setattr__(self, "meter_ids", ids)
        else:
            require(
                self.meter_count >= 1,
                f"meter_count must be at least 1, got {self.meter_count}.",
            )
        require(
            self.effective_meter_count <= canon.MAX_METER_COUNT,
            f"meter count must not exceed {canon.MAX_METER_COUNT}.",
        )

        require(
            self.seed is None or isinstance(self.seed, int),
            f"seed must be an integer, got {self.seed!r}.",
        )

        p_est, p_miss = self.estimated_probability, self.missing_probability
        require(
            0.0 <= p_est <= 1.0 and 0.0 <= p_miss <= 1.0,
            "estimated/missing probabilities must lie in [0, 1].",
        )
        require(
            p_est + p_miss <= 1.0,
            "estimated_probability + missing_probability must not exceed 1.",
        )

    @property
    def days(self) -> int:
        """Number of calendar days in the inclusive range."""
        return (self.end_date - self.start_date).days + 1

    @property
    def effective_meter_count(self) -> int:
        if self.meter_ids is not None:
            return len(self.meter_ids)
        return self.meter_count

    def with_overrides(self, **changes) -> "GenerationConfiguration":
        return replace(self, **changes)


## Meter identity and measurements
@dataclass(frozen=True)
class MeterIdentity:
    meter_id: UUID
    mpan: str  # 13 ASCII digits


@dataclass(frozen=True)
class PeriodMeasurement:
    period: int  # 1-based
    hhc: float  # kWh
    aei: str  # "A" | "E" | "M"


@dataclass(frozen=True)
class DayMeasurement:
    date: date
    quality: Quality
    periods: Tuple[PeriodMeasurement, ...] = ()
    qty_id: str = canon.QTY_ID

    @property
    def total_kwh(self) -> float:
        return float(sum(p.hhc for p in self.periods))


@dataclass
class YearlyAggregate:
    mpan: str
    start_date: date
    end_date: date
    days_actual: int = 0
    days_estimated: int = 0
    days_missing: int = 0
    actual_kwh: float = 0.0
    estimated_kwh: float = 0.0
    ai_yearly_value: Optional[float] = None
    ae_yearly_value: Optional[float] = None
    ri_yearly_value: Optional[float] = None
    re_yearly_value: Optional[float] = None

    @property
    def total_days(self) -> int:
        return self.days_actual + self.days_estimated + self.days_missing


## Run results
@dataclass
class MeterResult:
    identity: MeterIdentity
    business_type: str
    days: List[DayMeasurement]
    aggregate: YearlyAggregate

    @property
    def mpan(self) -> str:
        return self.identity.mpan

    @property
    def reading_count(self) -> int:
        return sum(len(d.periods) for d in self.days)


@dataclass
class GenerationResult:
    configuration: GenerationConfiguration
    seed: Optional[int]  # None for non-deterministic runs
    meters: List[MeterResult]
    generated_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc)
    )

    @property
    def mpans(self) -> list[str]:
        return [m.mpan for m in self.meters]

    @property
    def total_readings(self) -> int:
        return sum(m.reading_count for m in self.meters)


# Summary of a readings frame
class SummaryMeta(TypedDict):
    meters: int
    start: str
    end: str
    period_min: int
    days: int
    business_types: List[str]


class SummaryStats(TypedDict):
    readings: int
    total_kwh: float
    min_kwh: float
    max_kwh: float
    mean_kwh: float
    max_interval_time: Optional[str]


class SummaryPayload(TypedDict):
    meta: SummaryMeta
    stats: SummaryStats
    by_quality: Dict[str, float]
    by_meter: List[Dict[str, float | str]]
