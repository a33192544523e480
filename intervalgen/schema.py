from __future__ import annotations
from typing import List, Optional
from pydantic import BaseModel, Field


class PeriodMeasurementModel(BaseModel):
    """A single period reading.

    Attributes:
        period: 1-based period index within the day
        hhc: Consumption for the period in kWh
        aei: Quality tag ("A" actual, "E" estimated, "M" missing)
    """
    period: int = Field(ge=1)
    hhc: float = Field(ge=0)
    aei: str


class DayMeasurementModel(BaseModel):
    """One day's period readings, ordered by period.

    Attributes:
        date: Settlement day as YYYY-MM-DD
        qty_id: Unit of the readings (e.g., 'kWh')
        periods: Readings for the day; empty for missing days
    """
    date: str
    qty_id: str
    periods: List[PeriodMeasurementModel]


class YearlyHhByPeriodResponse(BaseModel):
    """Yearly half-hourly-by-period payload for one MPAN.

    Attributes:
        mpan: 13-digit meter point administration number
        start_date, end_date: Requested range (inclusive), YYYY-MM-DD
        days_actual, days_estimated, days_missing: Day counts per classification
        ai_yearly_value: Active import total; the other three are reserved
        actual_measurements, estimated_measurements, missing_measurement:
            Day measurements grouped by classification
    """
    mpan: str = Field(pattern=r"^[0-9]{13}$")
    start_date: str
    end_date: str
    days_actual: int = 0
    days_estimated: int = 0
    days_missing: int = 0
    ai_yearly_value: Optional[float] = None
    ae_yearly_value: Optional[float] = None
    ri_yearly_value: Optional[float] = None
    re_yearly_value: Optional[float] = None
    actual_measurements: List[DayMeasurementModel]
    estimated_measurements: List[DayMeasurementModel]
    missing_measurement: List[DayMeasurementModel]


class HhPeriodData(BaseModel):
    period: int
    hhc: float
    aei: str
    qty_id: str


class HhPerPeriodOutput(BaseModel):
    """Nested per-meter structure: MC → date → period → reading."""
    MPAN: str
    site: str = ""
    MC: dict[str, dict[str, dict[str, HhPeriodData]]]
