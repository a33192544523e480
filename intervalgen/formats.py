from __future__ import annotations
import sys
from pathlib import Path
from typing import IO, Optional

import pandas as pd
from pydantic import TypeAdapter

from . import intervals, utils, validate
from .exceptions import InvalidArgumentError
from .schema import (
    DayMeasurementModel,
    HhPerPeriodOutput,
    HhPeriodData,
    PeriodMeasurementModel,
    YearlyHhByPeriodResponse,
)
from .types import DayMeasurement, GenerationResult, MeterResult

SUPPORTED_FORMATS: tuple[str, ...] = ("csv", "json", "hhperperiod")

CSV_COLUMNS = {
    "mpan": "MPAN",
    "site": "Site",
    "measurement_class": "MeasurementClass",
    "date": "Date",
    "period": "Period",
    "kwh": "HHC",
    "aei": "AEI",
    "qty_id": "QtyId",
}


def to_frame(result: GenerationResult) -> pd.DataFrame:
    """
    Flatten a generation result into a readings dataframe.

    - index: tz-aware 't_start' (start of each period)
    - columns: mpan, meter_id, business_type, measurement_class, period,
      kwh, aei, qty_id
    Missing days contribute no rows.
    """
    cfg = result.configuration
    t_start, kwh, period, aei = [], [], [], []
    mpans, meter_ids, business = [], [], []

    for meter in result.meters:
        for day in meter.days:
            for p in day.periods:
                t_start.append(intervals.period_start(day.date, p.period, cfg.period_min))
                kwh.append(p.hhc)
                period.append(p.period)
                aei.append(p.aei)
                mpans.append(meter.mpan)
                meter_ids.append(str(meter.identity.meter_id))
                business.append(meter.business_type)

    if not t_start:
        return utils.empty_readings_frame()

    df = utils.build_readings_frame(
        t_start,
        kwh,
        mpan=mpans,
        meter_id=meter_ids,
        business_type=business,
        measurement_class=cfg.measurement_class,
        period=period,
        aei=aei,
    )
    validate.assert_readings_frame(df)
    return df


def to_csv(result: GenerationResult, site_name: Optional[str] = None) -> str:
    """CSV with header MPAN,Site,MeasurementClass,Date,Period,HHC,AEI,QtyId."""
    df = to_frame(result)
    site = site_name if site_name is not None else (result.configuration.site_name or "")
    out = (
        df.assign(
            site=site,
            date=pd.DatetimeIndex(df.index).strftime("%Y-%m-%d"),
        )
        .reset_index(drop=True)[list(CSV_COLUMNS)]
        .rename(columns=CSV_COLUMNS)
    )
    return out.to_csv(index=False, float_format="%.2f", lineterminator="\n")


def _day_model(day: DayMeasurement) -> DayMeasurementModel:
    return DayMeasurementModel(
        date=day.date.isoformat(),
        qty_id=day.qty_id,
        periods=[
            PeriodMeasurementModel(period=p.period, hhc=p.hhc, aei=p.aei)
            for p in day.periods
        ],
    )


def to_yearly_response(meter: MeterResult) -> YearlyHhByPeriodResponse:
    agg = meter.aggregate
    by_quality: dict[str, list[DayMeasurementModel]] = {
        "actual": [],
        "estimated": [],
        "missing": [],
    }
    for day in sorted(meter.days, key=lambda d: d.date):
        by_quality[day.quality].append(_day_model(day))

    return YearlyHhByPeriodResponse(
        mpan=agg.mpan,
        start_date=agg.start_date.isoformat(),
        end_date=agg.end_date.isoformat(),
        days_actual=agg.days_actual,
        days_estimated=agg.days_estimated,
        days_missing=agg.days_missing,
        ai_yearly_value=agg.ai_yearly_value,
        ae_yearly_value=agg.ae_yearly_value,
        ri_yearly_value=agg.ri_yearly_value,
        re_yearly_value=agg.re_yearly_value,
        actual_measurements=by_quality["actual"],
        estimated_measurements=by_quality["estimated"],
        missing_measurement=by_quality["missing"],
    )


def to_yearly_responses(result: GenerationResult) -> list[YearlyHhByPeriodResponse]:
    return [to_yearly_response(m) for m in result.meters]


def to_hh_per_period(
    result: GenerationResult, site_name: Optional[str] = None
) -> list[HhPerPeriodOutput]:
    """Per-meter nested structure keyed by measurement class, date and period."""
    cfg = result.configuration
    site = site_name if site_name is not None else (cfg.site_name or "")
    out: list[HhPerPeriodOutput] = []
    for meter in result.meters:
        dates: dict[str, dict[str, HhPeriodData]] = {}
        for day in meter.days:
            if not day.periods:
                continue
            dates[day.date.isoformat()] = {
                str(p.period): HhPeriodData(
                    period=p.period, hhc=p.hhc, aei=p.aei, qty_id=day.qty_id
                )
                for p in day.periods
            }
        out.append(
            HhPerPeriodOutput(MPAN=meter.mpan, site=site, MC={cfg.measurement_class: dates})
        )
    return out


def _dump(models: list, pretty: bool) -> str:
    indent = 2 if pretty else None
    # one meter → bare object, several → array
    if len(models) == 1:
        return models[0].model_dump_json(indent=indent)
    adapter = TypeAdapter(list[type(models[0])])
    return adapter.dump_json(models, indent=indent).decode("utf-8")


def to_json(result: GenerationResult, pretty: bool = False) -> str:
    return _dump(to_yearly_responses(result), pretty)


def render(
    result: GenerationResult,
    fmt: str = "csv",
    *,
    site_name: Optional[str] = None,
    pretty: bool = False,
) -> str:
    fmt = fmt.lower()
    if fmt == "csv":
        return to_csv(result, site_name=site_name)
    if fmt == "json":
        return to_json(result, pretty=pretty)
    if fmt == "hhperperiod":
        return _dump(to_hh_per_period(result, site_name=site_name), pretty)
    raise InvalidArgumentError(
        f"Unknown format '{fmt}'. Supported formats: {', '.join(SUPPORTED_FORMATS)}"
    )


def write(
    result: GenerationResult,
    fmt: str = "csv",
    path: Optional[str | Path] = None,
    *,
    site_name: Optional[str] = None,
    pretty: bool = False,
    stream: Optional[IO[str]] = None,
) -> None:
    """Render result and write it to path, or to stream (stdout by default)."""
    text = render(result, fmt, site_name=site_name, pretty=pretty)
    if path is not None:
        Path(path).write_text(text, encoding="utf-8")
        return
    (stream or sys.stdout).write(text)
