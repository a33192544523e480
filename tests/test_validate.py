"""Validation tests to enforce readings frame invariants."""

import pandas as pd
import pytest

from intervalgen import formats, validate
from intervalgen.exceptions import IntervalGenError


@pytest.fixture
def frame(office_result):
    return formats.to_frame(office_result)


def test_generated_frame_passes(frame):
    validate.assert_readings_frame(frame)


def test_rejects_non_monotonic(frame):
    """Shuffled rows should fail."""
    with pytest.raises(IntervalGenError, match="sorted"):
        validate.assert_readings_frame(frame.iloc[[1, 0, 2]])


def test_rejects_naive_index(frame):
    df = frame.copy()
    df.index = pd.DatetimeIndex(df.index).tz_localize(None)
    df.index.name = "t_start"
    with pytest.raises(IntervalGenError, match="tz-aware"):
        validate.assert_readings_frame(df)


def test_rejects_wrong_index_name(frame):
    with pytest.raises(IntervalGenError, match="Index must be"):
        validate.assert_readings_frame(frame.rename_axis("ts"))


def test_rejects_missing_column(frame):
    with pytest.raises(IntervalGenError, match="aei"):
        validate.assert_readings_frame(frame.drop(columns=["aei"]))


def test_rejects_negative_kwh(frame):
    """Input: a generated frame with one reading set to -0.5.
    Expect: IntervalGenError mentioning negative kWh.
    """
    df = frame.copy()
    df.iloc[0, df.columns.get_loc("kwh")] = -0.5
    with pytest.raises(IntervalGenError, match="Negative"):
        validate.assert_readings_frame(df)


def test_rejects_malformed_mpan(frame):
    """MPANs must stay 13 ASCII digits."""
    with pytest.raises(IntervalGenError, match="Malformed MPANs: 12345"):
        validate.assert_readings_frame(frame.assign(mpan="12345"))
