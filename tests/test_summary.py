"""Tests for the readings summary."""

import pytest

from intervalgen import formats, orchestrator, summary, utils


def test_summary_payload_structure(week_result):
    df = formats.to_frame(week_result)
    payload = summary.summarise(df)
    assert set(payload) == {"meta", "stats", "by_quality", "by_meter"}
    meta = payload["meta"]
    assert meta["meters"] == 3
    assert meta["period_min"] == 30
    assert meta["business_types"] == ["Retail"]
    assert meta["days"] <= 7


def test_summary_stats_match_frame(week_result):
    """Input: frame of the week run.
    Expect: the reading count and kWh statistics agree with the frame.
    """
    df = formats.to_frame(week_result)
    stats = summary.summarise(df)["stats"]
    assert stats["readings"] == len(df) == week_result.total_readings
    assert stats["total_kwh"] == pytest.approx(df["kwh"].sum(), abs=0.01)
    assert stats["min_kwh"] == pytest.approx(df["kwh"].min())
    assert stats["max_kwh"] == pytest.approx(df["kwh"].max())
    assert stats["mean_kwh"] == pytest.approx(df["kwh"].mean())
    assert stats["max_interval_time"] is not None


def test_summary_by_quality_and_meter(week_result):
    payload = summary.summarise(formats.to_frame(week_result))
    by_quality = payload["by_quality"]
    assert set(by_quality) == {"actual", "estimated", "missing"}
    assert by_quality["missing"] == 0.0

    actual = sum(m.aggregate.actual_kwh for m in week_result.meters)
    estimated = sum(m.aggregate.estimated_kwh for m in week_result.meters)
    assert by_quality["actual"] == pytest.approx(actual, abs=0.05)
    assert by_quality["estimated"] == pytest.approx(estimated, abs=0.05)

    by_meter = {row["mpan"]: row for row in payload["by_meter"]}
    assert set(by_meter) == set(week_result.mpans)
    for meter in week_result.meters:
        assert by_meter[meter.mpan]["readings"] == meter.reading_count


def test_summary_of_empty_frame():
    payload = summary.summarise(utils.empty_readings_frame())
    assert payload["stats"]["readings"] == 0
    assert payload["stats"]["total_kwh"] == 0.0
    assert payload["stats"]["max_interval_time"] is None
    assert payload["meta"]["days"] == 0
    assert payload["by_meter"] == []


def test_infer_period_minutes(office_config):
    cfg = office_config.with_overrides(period_min=15, missing_probability=0.0)
    df = formats.to_frame(orchestrator.generate(cfg))
    assert utils.infer_period_minutes(df.index) == 15
    assert summary.summarise(df)["meta"]["period_min"] == 15
