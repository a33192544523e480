"""Tests for settings loading."""

from datetime import date

import pytest

from intervalgen import config
from intervalgen.exceptions import ConfigError, InvalidArgumentError


def _write(tmp_path, body):
    p = tmp_path / "intervalgen.toml"
    p.write_text(body, encoding="utf-8")
    return p


def test_defaults():
    s = config.load_settings(env={})
    assert s == config.default_settings()
    assert s.default_meter_count == 100
    assert (s.default_start_date, s.default_end_date) == (date(2024, 1, 1), date(2024, 12, 31))
    assert s.default_period_min == 30
    assert s.default_business_type == "Office"
    assert s.deterministic is True
    assert s.seed == 42


def test_toml_table(tmp_path):
    p = _write(
        tmp_path,
        """
[meter_generation]
default_meter_count = 5
default_start_date = 2024-03-01
default_end_date = "2024-03-31"
default_period_min = 15
default_business_type = "Retail"
deterministic = false
estimated_probability = 0.1
""",
    )
    s = config.load_settings(p, env={})
    assert s.default_meter_count == 5
    assert s.default_start_date == date(2024, 3, 1)
    assert s.default_end_date == date(2024, 3, 31)
    assert s.default_period_min == 15
    assert s.default_business_type == "Retail"
    assert s.deterministic is False
    assert s.estimated_probability == 0.1
    assert s.seed == 42


def test_env_overrides_file(tmp_path):
    p = _write(tmp_path, "[meter_generation]\ndefault_meter_count = 5\n")
    env = {
        "INTERVALGEN_DEFAULT_METER_COUNT": "12",
        "INTERVALGEN_DETERMINISTIC": "no",
        "INTERVALGEN_SEED": "none",
        "INTERVALGEN_DEFAULT_SITE_NAME": "Depot",
        "UNRELATED": "x",
    }
    s = config.load_settings(p, env=env)
    assert s.default_meter_count == 12
    assert s.deterministic is False
    assert s.seed is None
    assert s.default_site_name == "Depot"


def test_file_without_table_keeps_defaults(tmp_path):
    p = _write(tmp_path, "[other]\nx = 1\n")
    assert config.load_settings(p, env={}) == config.default_settings()


@pytest.mark.parametrize(
    "env",
    [
        {"INTERVALGEN_DEFAULT_METER_COUNT": "many"},
        {"INTERVALGEN_DEFAULT_METER_COUNT": "0"},
        {"INTERVALGEN_DEFAULT_METER_COUNT": "1001"},
        {"INTERVALGEN_DEFAULT_PERIOD_MIN": "60"},
        {"INTERVALGEN_DETERMINISTIC": "maybe"},
        {"INTERVALGEN_DEFAULT_START_DATE": "2024-13-01"},
        {"INTERVALGEN_DEFAULT_START_DATE": "2025-01-01"},
        {"INTERVALGEN_MISSING_PROBABILITY": "lots"},
    ],
)
def test_bad_values(env):
    with pytest.raises(ConfigError):
        config.load_settings(env=env)


def test_float_for_integer_field_rejected(tmp_path):
    p = _write(tmp_path, "[meter_generation]\ndefault_meter_count = 2.5\n")
    with pytest.raises(ConfigError):
        config.load_settings(p, env={})


def test_unknown_key_rejected(tmp_path):
    p = _write(tmp_path, "[meter_generation]\nmeters = 3\n")
    with pytest.raises(ConfigError, match="meters"):
        config.load_settings(p, env={})


def test_missing_and_malformed_files(tmp_path):
    with pytest.raises(ConfigError, match="not found"):
        config.load_settings(tmp_path / "nope.toml", env={})
    with pytest.raises(ConfigError, match="not valid TOML"):
        config.load_settings(_write(tmp_path, "[meter_generation\n"), env={})


def test_config_error_is_invalid_argument():
    assert issubclass(ConfigError, InvalidArgumentError)
    assert issubclass(ConfigError, ValueError)


def test_to_configuration_uses_settings_as_defaults():
    s = config.default_settings()
    cfg = config.to_configuration(s)
    assert cfg.meter_count == 100
    assert cfg.deterministic is True
    assert cfg.seed == 42
    assert cfg.site_name is None
    assert cfg.days == 366


def test_to_configuration_overrides_win():
    cfg = config.to_configuration(
        config.default_settings(),
        start_date=date(2024, 6, 1),
        end_date=date(2024, 6, 2),
        meter_count=3,
        business_type="Manufacturing",
        seed=None,
    )
    assert cfg.meter_count == 3
    assert cfg.business_type == "Manufacturing"
    assert cfg.days == 2
    # None means "not given"
    assert cfg.seed == 42


def test_toml_datetimes_become_dates(tmp_path):
    """TOML datetimes for date settings keep only the calendar day.

    Input: offset and local datetimes for the start and end dates.
    Expect: plain dates, and the range check compares them without error.
    """
    p = _write(
        tmp_path,
        "[meter_generation]\n"
        "default_start_date = 2024-03-01T08:30:00Z\n"
        "default_end_date = 2024-03-31T23:00:00\n",
    )
    s = config.load_settings(p, env={})
    assert s.default_start_date == date(2024, 3, 1)
    assert s.default_end_date == date(2024, 3, 31)
    assert type(s.default_start_date) is date
    assert config.to_configuration(s).days == 31


def test_reversed_toml_datetimes_rejected(tmp_path):
    p = _write(
        tmp_path,
        "[meter_generation]\n"
        "default_start_date = 2024-04-01T00:00:00\n"
        "default_end_date = 2024-03-01\n",
    )
    with pytest.raises(ConfigError, match="must not be after"):
        config.load_settings(p, env={})


@pytest.mark.parametrize("body", ["meter_generation = 5\n", 'meter_generation = "x"\n'])
def test_non_table_section_rejected(tmp_path, body):
    """A scalar where the [meter_generation] table belongs is a config error."""
    with pytest.raises(ConfigError, match="must be a table"):
        config.load_settings(_write(tmp_path, body), env={})
