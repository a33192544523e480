from datetime import date
from uuid import UUID

import pytest

from intervalgen import orchestrator
from intervalgen.types import GenerationConfiguration


class FixedRandom:
    """Replays a fixed list of doubles; enough for classification tests."""

    def __init__(self, values):
        self._values = list(values)
        self.calls = 0

    @property
    def is_deterministic(self):
        return True

    @property
    def seed(self):
        return None

    def next_double(self):
        value = self._values[self.calls % len(self._values)]
        self.calls += 1
        return value

    def next_int(self, low, high=None):
        raise NotImplementedError

    def next_bytes(self, n):
        return bytes(n)


@pytest.fixture
def fixed_random():
    return FixedRandom


@pytest.fixture
def office_config():
    # 2024-01-01 is a Monday
    return GenerationConfiguration(
        start_date=date(2024, 1, 1),
        end_date=date(2024, 1, 3),
        period_min=30,
        business_type="Office",
        meter_count=1,
        deterministic=True,
        seed=42,
    )


@pytest.fixture
def office_result(office_config):
    return orchestrator.generate(office_config)


@pytest.fixture
def meter_ids():
    return [
        UUID("6f1c2a4e-8d3b-4c7a-9e21-0b5d7f3a1c88"),
        UUID("0a9e5d21-37f4-4b6c-8a10-c2e4f6b8d0a2"),
        UUID("d4c3b2a1-1f2e-4d3c-9b8a-7e6f5d4c3b2a"),
    ]


@pytest.fixture
def week_config(meter_ids):
    # 2024-03-04 (Mon) .. 2024-03-10 (Sun), three explicit meters
    return GenerationConfiguration(
        start_date=date(2024, 3, 4),
        end_date=date(2024, 3, 10),
        period_min=30,
        business_type="Retail",
        meter_ids=tuple(meter_ids),
        site_name="Unit Test Site",
        deterministic=True,
        seed=7,
        estimated_probability=0.2,
        missing_probability=0.2,
    )


@pytest.fixture
def week_result(week_config):
    return orchestrator.generate(week_config)
