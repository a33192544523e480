from __future__ import annotations
from typing import cast

import pandas as pd

from . import canon, utils
from .types import SummaryPayload

_QUALITY_BY_AEI = {code: quality for quality, code in canon.AEI_CODES.items()}


def summarise(df: pd.DataFrame) -> SummaryPayload:
    """
    Headline figures for a readings frame (see formats.to_frame).

    Days are counted from the first to the last reading date, so missing
    days inside the range still count.
    """
    idx = pd.DatetimeIndex(df.index)
    start = idx.min()
    end = idx.max()
    days = int((end.normalize() - start.normalize()).days) + 1 if len(idx) else 0
    period_min = utils.infer_period_minutes(idx)

    kwh = df["kwh"].astype(float)
    if len(df):
        pos = int(kwh.to_numpy().argmax())
        max_kwh = float(kwh.iloc[pos])
        max_time = idx[pos].isoformat()
        min_kwh = float(kwh.min())
        mean_kwh = float(kwh.mean())
    else:
        max_kwh = min_kwh = mean_kwh = 0.0
        max_time = None

    # actual / estimated totals; missing days carry no readings
    by_quality = {q: 0.0 for q in canon.AEI_CODES}
    if len(df):
        grouped = kwh.groupby(df["aei"].map(_QUALITY_BY_AEI)).sum()
        by_quality.update({str(q): float(v) for q, v in grouped.items()})

    by_meter: list[dict[str, float | str]] = []
    if len(df):
        per_meter = kwh.groupby(df["mpan"]).agg(total_kwh="sum", readings="count")
        by_meter = [
            {
                "mpan": str(mpan),
                "total_kwh": round(float(row.total_kwh), canon.KWH_DECIMALS),
                "readings": int(row.readings),
            }
            for mpan, row in per_meter.iterrows()
        ]

    return cast(
        SummaryPayload,
        {
            "meta": {
                "meters": int(df["mpan"].nunique()) if "mpan" in df.columns else 0,
                "start": str(start) if pd.notna(start) else "",
                "end": str(end) if pd.notna(end) else "",
                "period_min": period_min,
                "days": days,
                "business_types": (
                    sorted(df["business_type"].unique())
                    if "business_type" in df.columns else []
                ),
            },
            "stats": {
                "readings": int(len(df)),
                "total_kwh": round(float(kwh.sum()), canon.KWH_DECIMALS),
                "min_kwh": min_kwh,
                "max_kwh": max_kwh,
                "mean_kwh": mean_kwh,
                "max_interval_time": max_time,
            },
            "by_quality": {q: round(v, canon.KWH_DECIMALS) for q, v in by_quality.items()},
            "by_meter": by_meter,
        },
    )
