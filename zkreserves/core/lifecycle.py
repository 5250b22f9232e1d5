"""
Proof Lifecycle
===============

Classifies a registry proof record into a display status. The status is
recomputed on every read from (is_valid, proof_timestamp, expiry_timestamp)
and the current time; no transition history is kept.

    not valid or never timestamped  -> NeverProven
    expiry < now                    -> Expired
    expiry - now < 72h              -> Expiring
    otherwise                       -> Active

Version: 0.1.0
"""

import time
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field

from zkreserves.core.encoding import parse_field_element, to_hex
from zkreserves.core.solvency import ReserveBand
from zkreserves.errors import StructuralInputError


# Single warning window used by every status read
EXPIRING_THRESHOLD_SECONDS = 72 * 3600

SECONDS_PER_DAY = 86400


class ProofStatus(str, Enum):
    """Lifecycle status of an entity's latest proof."""

    NEVER_PROVEN = "NeverProven"
    ACTIVE = "Active"
    EXPIRING = "Expiring"
    EXPIRED = "Expired"


class ProofRecord(BaseModel):
    """Latest proof record of one entity, as stored by the registry."""

    model_config = ConfigDict(frozen=True)

    # Registry field order; reordering corrupts every derived status
    POSITIONAL_FIELDS: ClassVar[tuple[str, ...]] = (
        "entity_id",
        "block_height",
        "liability_root",
        "band",
        "proof_timestamp",
        "is_valid",
        "expiry_timestamp",
        "submission_count",
    )

    entity_id: int = Field(default=0, ge=0)
    block_height: int = Field(default=0, ge=0)
    liability_root: int = Field(default=0, ge=0)
    band: ReserveBand = ReserveBand.INSOLVENT
    proof_timestamp: int = Field(default=0, ge=0)
    is_valid: bool = False
    expiry_timestamp: int = Field(default=0, ge=0)
    submission_count: int = Field(default=0, ge=0)

    @classmethod
    def from_positional(cls, fields: Sequence[int | str]) -> "ProofRecord":
        """
        Decode the registry's positional record.

        Raises:
            StructuralInputError: If fields are missing or malformed
        """
        if len(fields) < len(cls.POSITIONAL_FIELDS):
            raise StructuralInputError(
                f"expected {len(cls.POSITIONAL_FIELDS)} fields, got {len(fields)}",
                field="proof_record",
            )

        values: dict[str, int | bool] = {
            name: parse_field_element(fields[i], field=f"proof_record.{name}")
            for i, name in enumerate(cls.POSITIONAL_FIELDS)
        }
        values["is_valid"] = values["is_valid"] != 0

        if values["band"] not in {band.value for band in ReserveBand}:
            raise StructuralInputError(
                f"unknown band {values['band']}",
                field="proof_record.band",
            )
        return cls(**values)

    def to_positional(self) -> list[str]:
        """Encode in registry field order as hex strings."""
        return [
            to_hex(int(getattr(self, name)))
            for name in self.POSITIONAL_FIELDS
        ]


@dataclass(frozen=True)
class EcosystemHealth:
    """Status counts across many entities."""

    total: int
    active: int
    expiring: int
    expired: int
    never_proven: int
    next_expiry_seconds: int | None = None

    @property
    def valid(self) -> int:
        """Entities whose proof has not expired."""
        return self.active + self.expiring


def _now(now: int | None) -> int:
    return int(time.time()) if now is None else now


def classify_proof_status(
    record: ProofRecord,
    now: int | None = None,
    threshold: int = EXPIRING_THRESHOLD_SECONDS,
) -> ProofStatus:
    """
    Classify a proof record.

    Args:
        record: Registry proof record
        now: Current unix time (defaults to wall-clock)
        threshold: Expiry warning window in seconds

    Returns:
        ProofStatus
    """
    now = _now(now)

    if not record.is_valid or record.proof_timestamp == 0:
        return ProofStatus.NEVER_PROVEN
    if record.expiry_timestamp < now:
        return ProofStatus.EXPIRED
    if record.expiry_timestamp - now < threshold:
        return ProofStatus.EXPIRING
    return ProofStatus.ACTIVE


def seconds_until_expiry(record: ProofRecord, now: int | None = None) -> int:
    """Seconds until the proof expires, never negative."""
    return max(0, record.expiry_timestamp - _now(now))


def days_until_expiry(record: ProofRecord, now: int | None = None) -> int:
    """Whole days until the proof expires, never negative."""
    return seconds_until_expiry(record, now) // SECONDS_PER_DAY


def summarize_ecosystem(
    records: Iterable[ProofRecord],
    now: int | None = None,
    threshold: int = EXPIRING_THRESHOLD_SECONDS,
) -> EcosystemHealth:
    """Count statuses and find the nearest upcoming expiry."""
    now = _now(now)
    counts = {status: 0 for status in ProofStatus}
    next_expiry: int | None = None

    for record in records:
        status = classify_proof_status(record, now, threshold)
        counts[status] += 1
        if status in (ProofStatus.ACTIVE, ProofStatus.EXPIRING):
            remaining = record.expiry_timestamp - now
            if next_expiry is None or remaining < next_expiry:
                next_expiry = remaining

    return EcosystemHealth(
        total=sum(counts.values()),
        active=counts[ProofStatus.ACTIVE],
        expiring=counts[ProofStatus.EXPIRING],
        expired=counts[ProofStatus.EXPIRED],
        never_proven=counts[ProofStatus.NEVER_PROVEN],
        next_expiry_seconds=next_expiry,
    )
