from __future__ import annotations
from typing import Sequence
from zoneinfo import ZoneInfo

import numpy as np
import pandas as pd

from . import canon


def ensure_tz_aware_index(df: pd.DataFrame, tz: str) -> pd.DataFrame:
    if df.index.name != canon.INDEX_NAME:
        raise ValueError(f"Index must be '{canon.INDEX_NAME}', got {df.index.name}")
    idx = pd.DatetimeIndex(df.index)
    if idx.tz is None:
        df = df.tz_localize(ZoneInfo(tz))
    else:
        df = df.tz_convert(ZoneInfo(tz))
    return df


def infer_period_minutes(
    idx: pd.DatetimeIndex, default: int = canon.DEFAULT_PERIOD_MIN
) -> int:
    """Most common spacing between distinct timestamps, in minutes."""
    ts = pd.DatetimeIndex(idx).sort_values().unique()
    if len(ts) < 2:
        return int(default)

    diffs_min = ((ts[1:] - ts[:-1]) / np.timedelta64(1, "s")).to_numpy(dtype=float) / 60.0
    diffs_min = diffs_min[diffs_min > 0]
    if len(diffs_min) == 0:
        return int(default)

    vals, counts = np.unique(np.rint(diffs_min).astype(int), return_counts=True)
    return int(vals[np.argmax(counts)])


def build_readings_frame(
    t_start: Sequence | pd.DatetimeIndex,
    kwh: np.ndarray | Sequence[float],
    *,
    mpan: Sequence[str] | str,
    meter_id: Sequence[str] | str,
    business_type: Sequence[str] | str,
    measurement_class: Sequence[str] | str,
    period: Sequence[int] | np.ndarray,
    aei: Sequence[str] | str,
    qty_id: str = canon.QTY_ID,
    tz: str = canon.DEFAULT_TZ,
) -> pd.DataFrame:
    """Assemble a readings frame indexed by tz-aware 't_start', sorted by time."""
    df = pd.DataFrame(
        {
            canon.INDEX_NAME: pd.to_datetime(t_start),
            "mpan": mpan,
            "meter_id": meter_id,
            "business_type": business_type,
            "measurement_class": measurement_class,
            "period": np.asarray(period, dtype=int),
            "kwh": np.asarray(kwh, dtype=float),
            "aei": aei,
            "qty_id": qty_id,
        }
    ).set_index(canon.INDEX_NAME)
    df = ensure_tz_aware_index(df, tz)
    # stable sort keeps meter order for equal timestamps
    return df.sort_index(kind="stable")


def empty_readings_frame(tz: str = canon.DEFAULT_TZ) -> pd.DataFrame:
    """Empty readings frame with the canonical index and columns."""
    idx = pd.DatetimeIndex([], tz=ZoneInfo(tz), name=canon.INDEX_NAME)
    return pd.DataFrame(columns=canon.REQUIRED_COLS, index=idx)
