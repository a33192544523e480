from __future__ import annotations
import pandas as pd
from typing import cast

from . import canon, exceptions, mpan


def assert_readings_frame(df: pd.DataFrame) -> None:
    if df.index.name != canon.INDEX_NAME:
        raise exceptions.IntervalGenError(f"Index must be '{canon.INDEX_NAME}'.")
    tz_index = cast(pd.DatetimeIndex, df.index)
    if tz_index.tz is None:
        raise exceptions.IntervalGenError("Index must be tz-aware.")
    for col in canon.REQUIRED_COLS:
        if col not in df.columns:
            raise exceptions.IntervalGenError(f"Missing required column '{col}'.")
    if not df.index.is_monotonic_increasing:
        raise exceptions.IntervalGenError("Index must be sorted ascending.")
    if (df["kwh"].astype(float) < 0).any():
        raise exceptions.IntervalGenError(
            "Negative kWh values detected; consumption should be non-negative."
        )
    bad = [m for m in df["mpan"].unique() if not mpan.is_valid_mpan(m)]
    if bad:
        raise exceptions.IntervalGenError(
            f"Malformed MPANs: {', '.join(map(str, bad))}"
        )
