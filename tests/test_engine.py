"""Tests for day synthesis and classification."""

from datetime import date

import numpy as np
import pytest

from intervalgen import engine, profiles, randomness


@pytest.mark.parametrize(
    "u, expected",
    [
        (0.0, "missing"),
        (0.0099, "missing"),
        (0.01, "estimated"),
        (0.0299, "estimated"),
        (0.031, "actual"),
        (0.999, "actual"),
    ],
)
def test_classify_day_thresholds(fixed_random, u, expected):
    """Map a single draw onto the day classification bands.

    Input: draws either side of 0.01 and 0.03 with p_miss=0.01, p_est=0.02.
    Expect: missing below 0.01, estimated below 0.03, actual above; one draw used.
    """
    rng = fixed_random([u])
    assert engine.classify_day(rng, 0.02, 0.01) == expected
    assert rng.calls == 1


def test_classify_day_extremes(fixed_random):
    rng = fixed_random([0.0, 0.5, 0.999])
    assert {engine.classify_day(rng, 0.0, 1.0) for _ in range(3)} == {"missing"}
    assert {engine.classify_day(rng, 1.0, 0.0) for _ in range(3)} == {"estimated"}
    assert {engine.classify_day(rng, 0.0, 0.0) for _ in range(3)} == {"actual"}


def test_synthesize_day_shape_and_rounding():
    p = profiles.OfficeProfile()
    kwh = engine.synthesize_day(p, date(2024, 1, 2), 30, randomness.create_deterministic(3))
    assert kwh.shape == (48,)
    assert np.all(kwh >= 0)
    np.testing.assert_allclose(kwh, np.round(kwh, 2))


def test_synthesize_day_draws_one_value_per_period(fixed_random):
    """A 15-minute day consumes exactly 96 jitter draws."""
    rng = fixed_random([0.5])
    engine.synthesize_day(profiles.OfficeProfile(), date(2024, 1, 2), 15, rng)
    assert rng.calls == 96


def test_synthesize_day_without_jitter_matches_base_curve(fixed_random):
    p = profiles.ManufacturingProfile()
    d = date(2024, 5, 1)
    kwh = engine.synthesize_day(p, d, 30, fixed_random([0.5]))
    np.testing.assert_allclose(kwh, np.round(p.base_curve(d, 30), 2))


def test_build_day():
    d = date(2024, 1, 2)
    values = np.array([1.25, 0.0, 3.5])

    actual = engine.build_day(d, "actual", values)
    assert [p.period for p in actual.periods] == [1, 2, 3]
    assert {p.aei for p in actual.periods} == {"A"}
    assert actual.total_kwh == pytest.approx(4.75)
    assert actual.qty_id == "kWh"

    estimated = engine.build_day(d, "estimated", values)
    assert {p.aei for p in estimated.periods} == {"E"}

    missing = engine.build_day(d, "missing", values)
    assert missing.periods == ()
    assert missing.total_kwh == 0.0


def test_generate_meter_days_covers_range(office_config):
    days = engine.generate_meter_days(
        profiles.OfficeProfile(), office_config, randomness.create_deterministic(1)
    )
    assert [d.date for d in days] == [date(2024, 1, 1), date(2024, 1, 2), date(2024, 1, 3)]


def test_values_do_not_depend_on_classification(office_config):
    """Classification never changes the readings drawn for a day.

    Input: same seed, all days forced actual vs. all forced estimated.
    Expect: identical hhc values day by day.
    """
    p = profiles.OfficeProfile()
    all_actual = office_config.with_overrides(estimated_probability=0.0, missing_probability=0.0)
    all_estimated = office_config.with_overrides(estimated_probability=1.0, missing_probability=0.0)

    a = engine.generate_meter_days(p, all_actual, randomness.create_deterministic(11))
    e = engine.generate_meter_days(p, all_estimated, randomness.create_deterministic(11))

    assert {d.quality for d in a} == {"actual"}
    assert {d.quality for d in e} == {"estimated"}
    for da, de in zip(a, e):
        assert [p.hhc for p in da.periods] == [p.hhc for p in de.periods]


def test_missing_days_keep_stream_aligned(office_config):
    """Missing days still consume their draws.

    Input: two streams with seed 5; one run has no missing days, one is all missing.
    Expect: both streams sit at the same position afterwards.
    """
    p = profiles.OfficeProfile()
    none_missing = office_config.with_overrides(missing_probability=0.0, estimated_probability=0.0)
    all_missing = office_config.with_overrides(missing_probability=1.0, estimated_probability=0.0)

    rng_a = randomness.create_deterministic(5)
    rng_b = randomness.create_deterministic(5)
    engine.generate_meter_days(p, none_missing, rng_a)
    engine.generate_meter_days(p, all_missing, rng_b)
    assert rng_a.next_double() == rng_b.next_double()
