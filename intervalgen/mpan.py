from __future__ import annotations
from typing import Iterable
from uuid import UUID

from loguru import logger

from . import canon, exceptions
from .types import MeterIdentity

HEX_PREFIX_LEN = 13


def _format(value: int) -> str:
    return f"{value % canon.MPAN_MODULUS:0{canon.MPAN_DIGITS}d}"


def generate_mpan(meter_id: UUID) -> str:
    """
    Naive 13-digit MPAN for a meter id.

    Takes the first 13 hex digits of the id, reads them as an unsigned
    integer and reduces modulo 10**13 (zero padded).
    """
    prefix = meter_id.hex[:HEX_PREFIX_LEN]
    return _format(int(prefix, 16))


def assign_mpans(
    meter_ids: Iterable[UUID],
    *,
    max_attempts: int = canon.MAX_COLLISION_ATTEMPTS,
) -> list[MeterIdentity]:
    """
    Assign a unique MPAN to each meter id, in input order.

    A candidate already taken earlier in the run is moved by +1, +2, ...
    (mod 10**13) until a free one is found. At most `max_attempts` offsets
    are tried per meter before GenerationExhaustedError is raised.
    """
    exceptions.require(max_attempts >= 1, "max_attempts must be at least 1.")

    used: set[str] = set()
    out: list[MeterIdentity] = []

    for meter_id in meter_ids:
        candidate = generate_mpan(meter_id)
        if candidate in used:
            base = int(candidate)
            for offset in range(1, max_attempts + 1):
                shifted = _format(base + offset)
                if shifted not in used:
                    logger.debug(
                        "MPAN collision for {}: {} -> {}", meter_id, candidate, shifted
                    )
                    candidate = shifted
                    break
            else:
                raise exceptions.GenerationExhaustedError(
                    f"No free MPAN for meter {meter_id} within {max_attempts} "
                    f"attempts from {candidate}."
                )
        used.add(candidate)
        out.append(MeterIdentity(meter_id=meter_id, mpan=candidate))

    return out


def mpan_map(meter_ids: Iterable[UUID]) -> dict[UUID, str]:
    return {m.meter_id: m.mpan for m in assign_mpans(meter_ids)}


def is_valid_mpan(value: object) -> bool:
    """True for any 13-character string made only of ASCII digits."""
    if not isinstance(value, str) or len(value) != canon.MPAN_DIGITS:
        return False
    return value.isascii() and value.isdigit()
