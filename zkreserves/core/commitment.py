"""
Proof Commitment
================

Binds the five public inputs of a solvency claim into one field integer
and lets any verifier recompute it.

The element order is part of the wire contract:

    commitment = H(entity_id, block_height, liability_root, band, proof_timestamp)

Version: 0.1.0
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, ValidationInfo, field_validator

from zkreserves.core.encoding import parse_field_element, to_hex
from zkreserves.core.hashing import FieldHasher, get_field_hasher
from zkreserves.core.solvency import ReserveBand
from zkreserves.errors import StructuralInputError


class PublicInputs(BaseModel):
    """
    Public inputs of one solvency claim.

    Accepts field names or their wire aliases (`liability_merkle_root`,
    `reserve_ratio_band`); integer fields accept ints, decimal strings or
    0x-prefixed hex.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    entity_id: int
    block_height: int = Field(..., ge=0)
    liability_root: int = Field(..., alias="liability_merkle_root")
    band: ReserveBand = Field(..., alias="reserve_ratio_band")
    proof_timestamp: int = Field(..., ge=0, description="Unix seconds")

    @field_validator("entity_id", "block_height", "liability_root", "proof_timestamp", mode="before")
    @classmethod
    def parse_integer(cls, v: Any, info: ValidationInfo) -> int:
        return parse_field_element(v, field=info.field_name)

    @field_validator("band", mode="before")
    @classmethod
    def parse_band(cls, v: Any) -> Any:
        if isinstance(v, str):
            return parse_field_element(v, field="band")
        return v

    def as_field_elements(self) -> tuple[int, int, int, int, int]:
        """The five inputs in commitment order."""
        return (
            self.entity_id,
            self.block_height,
            self.liability_root,
            int(self.band),
            self.proof_timestamp,
        )

    def to_wire(self) -> dict[str, Any]:
        """Convert to the published JSON shape."""
        return {
            "entity_id": to_hex(self.entity_id),
            "block_height": self.block_height,
            "liability_merkle_root": to_hex(self.liability_root),
            "reserve_ratio_band": int(self.band),
            "proof_timestamp": self.proof_timestamp,
        }


@dataclass(frozen=True)
class CommitmentCheck:
    """Outcome of recomputing a commitment."""

    valid: bool
    expected_commitment: int
    claimed_commitment: int

    @property
    def expected_hex(self) -> str:
        return to_hex(self.expected_commitment)


def parse_public_inputs(raw: PublicInputs | Mapping[str, Any]) -> PublicInputs:
    """
    Validate public inputs from a model or a wire mapping.

    Raises:
        StructuralInputError: If a field is missing or malformed
    """
    if isinstance(raw, PublicInputs):
        return raw
    if not isinstance(raw, Mapping):
        raise StructuralInputError("expected an object", field="public_inputs")
    try:
        return PublicInputs.model_validate(dict(raw))
    except ValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first["loc"])
        raise StructuralInputError(first["msg"], field=f"public_inputs.{location}") from e


def compose_commitment(
    inputs: PublicInputs | Mapping[str, Any],
    hasher: FieldHasher | None = None,
) -> int:
    """
    Compute the proof commitment for a set of public inputs.

    Raises:
        StructuralInputError: If an input lies outside the hash field
    """
    hasher = hasher or get_field_hasher()
    return hasher.hash_many(parse_public_inputs(inputs).as_field_elements())


def verify_commitment(
    inputs: PublicInputs | Mapping[str, Any],
    claimed: int | str,
    hasher: FieldHasher | None = None,
) -> CommitmentCheck:
    """
    Recompute the commitment and compare it with a claimed value.

    Args:
        inputs: The five public inputs
        claimed: Published commitment (int or hex string)
        hasher: Field hasher; defaults to the configured one

    Returns:
        CommitmentCheck with the recomputed value
    """
    claimed_value = parse_field_element(claimed, field="proof_commitment")
    expected = compose_commitment(inputs, hasher)
    return CommitmentCheck(
        valid=expected == claimed_value,
        expected_commitment=expected,
        claimed_commitment=claimed_value,
    )


def compute_entity_id(
    name_hash: int,
    registrant: int,
    hasher: FieldHasher | None = None,
) -> int:
    """Derive a registry entity id from a name hash and the registrant address."""
    hasher = hasher or get_field_hasher()
    return hasher.hash_pair(name_hash, registrant)
