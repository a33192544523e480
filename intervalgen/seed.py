from __future__ import annotations
import hashlib
from datetime import date
from typing import Iterable, Optional
from uuid import UUID

from .types import GenerationConfiguration

SEED_BYTES = 4  # 32-bit seeds


def _field(tag: bytes, payload: Optional[bytes]) -> bytes:
    # tag + length prefix so neighbouring fields can't run together;
    # None gets its own marker so it never equals ""
    if payload is None:
        return tag + b"\x00"
    return tag + b"\x01" + len(payload).to_bytes(4, "big") + payload


def _text(value: Optional[str]) -> Optional[bytes]:
    return None if value is None else value.encode("utf-8")


def _day(value: date) -> bytes:
    return value.isoformat().encode("ascii")


def _int(value: int) -> bytes:
    return str(int(value)).encode("ascii")


def combine(parts: Iterable[bytes]) -> int:
    """Order-sensitive hash of the given field encodings as an unsigned 32-bit int."""
    h = hashlib.blake2b(digest_size=SEED_BYTES, person=b"intervalgen")
    for part in parts:
        h.update(part)
    return int.from_bytes(h.digest(), "big")


def derive_seed(config: GenerationConfiguration) -> int:
    """
    Stable seed for a deterministic run without an explicit seed.

    Fields are hashed in a fixed order: start date, end date, period length,
    business type, measurement class, meter count, site name and then each
    explicit meter id in the order given. The explicit seed and the
    deterministic flag are not part of the hash.
    """
    parts = [
        _field(b"start", _day(config.start_date)),
        _field(b"end", _day(config.end_date)),
        _field(b"period", _int(config.period_min)),
        _field(b"business", _text(config.business_type)),
        _field(b"class", _text(config.measurement_class)),
        _field(b"count", _int(config.meter_count)),
        _field(b"site", _text(config.site_name)),
    ]
    for meter_id in config.meter_ids or ():
        parts.append(_field(b"meter", meter_id.bytes))
    return combine(parts)


def derive_meter_seed(run_seed: int, meter_id: UUID) -> int:
    """Seed for one meter's stream within a deterministic run."""
    return combine(
        [
            _field(b"run", _int(run_seed)),
            _field(b"meter", meter_id.bytes),
        ]
    )
