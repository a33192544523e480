from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, fields
from datetime import date, datetime
from pathlib import Path
from typing import Any, Mapping, Optional

from loguru import logger

from . import canon
from .exceptions import ConfigError, require
from .types import GenerationConfiguration

ENV_PREFIX = "INTERVALGEN_"
TOML_TABLE = "meter_generation"

_TRUE = ("1", "true", "yes", "on")
_FALSE = ("0", "false", "no", "off")


@dataclass
class MeterGenerationSettings:
    # Run shape
    default_meter_count: int = 100
    default_start_date: date = date(2024, 1, 1)
    default_end_date: date = date(2024, 12, 31)
    default_period_min: int = canon.DEFAULT_PERIOD_MIN
    default_business_type: str = "Office"
    default_measurement_class: str = "AI"
    default_site_name: str = ""

    # Reproducibility
    deterministic: bool = True
    seed: Optional[int] = 42

    # Day classification
    estimated_probability: float = canon.DEFAULT_ESTIMATED_PROBABILITY
    missing_probability: float = canon.DEFAULT_MISSING_PROBABILITY


def default_settings() -> MeterGenerationSettings:
    return MeterGenerationSettings()


def _coerce(name: str, raw: Any, default: Any) -> Any:
    """Convert a TOML or environment value to the type of the field default."""
    if isinstance(default, bool):
        if isinstance(raw, bool):
            return raw
        text = str(raw).strip().lower()
        require(
            text in _TRUE + _FALSE, f"{name} must be a boolean, got {raw!r}.", ConfigError
        )
        return text in _TRUE
    if name == "seed" and str(raw).strip().lower() in ("", "none"):
        return None

    try:
        if isinstance(default, date):
            if isinstance(raw, datetime):
                return raw.date()
            return raw if isinstance(raw, date) else date.fromisoformat(str(raw))
        if isinstance(default, int):
            if isinstance(raw, float):
                raise ValueError("not an integer")
            return int(raw)
        if isinstance(default, float):
            return float(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid value for {name}: {raw!r}") from exc
    return str(raw)


def _check(settings: MeterGenerationSettings) -> MeterGenerationSettings:
    require(
        1 <= settings.default_meter_count <= canon.MAX_METER_COUNT,
        f"default_meter_count must be between 1 and {canon.MAX_METER_COUNT}.",
        ConfigError,
    )
    require(
        settings.default_period_min in canon.SUPPORTED_PERIODS,
        f"default_period_min must be one of {canon.SUPPORTED_PERIODS}.",
        ConfigError,
    )
    require(
        settings.default_start_date <= settings.default_end_date,
        "default_start_date must not be after default_end_date.",
        ConfigError,
    )
    return settings


def load_settings(
    path: Optional[str | Path] = None, env: Optional[Mapping[str, str]] = None
) -> MeterGenerationSettings:
    """
    Build settings from defaults, then an optional TOML file, then environment.

    The TOML file holds a [meter_generation] table whose keys are the field
    names of MeterGenerationSettings. Environment variables use the
    INTERVALGEN_ prefix and the upper-cased field name, e.g.
    INTERVALGEN_DEFAULT_METER_COUNT=10.
    """
    settings = default_settings()
    defaults = {f.name: getattr(settings, f.name) for f in fields(settings)}
    values: dict[str, Any] = {}

    if path is not None:
        p = Path(path)
        try:
            with p.open("rb") as fh:
                table = tomllib.load(fh).get(TOML_TABLE, {})
        except FileNotFoundError as exc:
            raise ConfigError(f"Config file not found: {p}") from exc
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"Config file {p} is not valid TOML: {exc}") from exc
        require(
            isinstance(table, dict),
            f"[{TOML_TABLE}] in {p} must be a table, got {type(table).__name__}.",
            ConfigError,
        )
        unknown = sorted(set(table) - set(defaults))
        require(
            not unknown, f"Unknown [{TOML_TABLE}] keys: {', '.join(unknown)}", ConfigError
        )
        values.update(table)
        logger.debug("Loaded {} setting(s) from {}", len(table), p)

    env = os.environ if env is None else env
    for name in defaults:
        key = ENV_PREFIX + name.upper()
        if key in env:
            values[name] = env[key]

    for name, raw in values.items():
        setattr(settings, name, _coerce(name, raw, defaults[name]))
    return _check(settings)


def to_configuration(
    settings: Optional[MeterGenerationSettings] = None, **overrides: Any
) -> GenerationConfiguration:
    """Settings supply defaults only; keyword overrides always win."""
    s = settings or default_settings()
    params: dict[str, Any] = {
        "start_date": s.default_start_date,
        "end_date": s.default_end_date,
        "period_min": s.default_period_min,
        "business_type": s.default_business_type,
        "measurement_class": s.default_measurement_class,
        "meter_count": s.default_meter_count,
        "site_name": s.default_site_name or None,
        "deterministic": s.deterministic,
        "seed": s.seed,
        "estimated_probability": s.estimated_probability,
        "missing_probability": s.missing_probability,
    }
    params.update({k: v for k, v in overrides.items() if v is not None})
    return GenerationConfiguration(**params)
