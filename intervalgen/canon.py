from __future__ import annotations
from typing import Final, Dict

INDEX_NAME: Final[str] = "t_start"
REQUIRED_COLS: Final[list[str]] = [
    "mpan",
    "meter_id",
    "business_type",
    "measurement_class",
    "period",
    "kwh",
    "aei",
    "qty_id",
]
DEFAULT_TZ: Final[str] = "UTC"
DEFAULT_PERIOD_MIN: Final[int] = 30
SUPPORTED_PERIODS: Final[tuple[int, ...]] = (5, 15, 30)
MINUTES_PER_DAY: Final[int] = 1440

# Profile base loads are expressed per half hour
REFERENCE_PERIOD_MIN: Final[int] = 30

MPAN_DIGITS: Final[int] = 13
MPAN_MODULUS: Final[int] = 10**MPAN_DIGITS
MAX_COLLISION_ATTEMPTS: Final[int] = 100_000

MAX_METER_COUNT: Final[int] = 1000
QTY_ID: Final[str] = "kWh"
KWH_DECIMALS: Final[int] = 2

MEASUREMENT_CLASSES: Final[tuple[str, ...]] = ("AI", "AE", "RI", "RE")

DEFAULT_ESTIMATED_PROBABILITY: Final[float] = 0.02
DEFAULT_MISSING_PROBABILITY: Final[float] = 0.01

# Day classification → 'aei' wire code
AEI_CODES: Dict[str, str] = {
    "actual": "A",
    "estimated": "E",
    "missing": "M",
}
