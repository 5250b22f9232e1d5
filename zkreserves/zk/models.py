"""
Proof Data Models
=================

Pydantic models for solvency proof requests, outputs and verification
results.

Version: 0.1.0
"""

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from zkreserves.core.commitment import PublicInputs
from zkreserves.core.encoding import parse_field_element, to_hex


class ProofRequest(BaseModel):
    """Inputs for one solvency proof."""

    entity_id: int = Field(..., description="Registry entity id (int or 0x hex)")
    reserve_balances: list[int] = Field(..., min_length=1, description="Wallet balances (satoshi)")
    liabilities_csv: str = Field(..., description="account_id,amount rows")
    block_height: int = Field(..., ge=0, description="Reference block height of the balances")
    proof_timestamp: int | None = Field(default=None, ge=0, description="Unix seconds; now if omitted")

    @field_validator("entity_id", mode="before")
    @classmethod
    def parse_entity_id(cls, v: Any) -> int:
        return parse_field_element(v, field="entity_id")

    @field_validator("reserve_balances")
    @classmethod
    def balances_must_be_non_negative(cls, v: list[int]) -> list[int]:
        if any(balance < 0 for balance in v):
            raise ValueError("Reserve balances must be non-negative")
        return v

    @property
    def total_reserves(self) -> int:
        return sum(self.reserve_balances)


class ProofOutput(BaseModel):
    """
    Result of a successful solvency proof.

    Only `proof_commitment` and `public_inputs` are public. The totals stay
    with the proving entity and are omitted from `to_wire()`.
    """

    proof_commitment: int
    public_inputs: PublicInputs
    liability_count: int = Field(..., ge=1)
    total_reserves: int = Field(..., ge=0)
    total_liabilities: int = Field(..., ge=0)
    generation_time_ms: int = Field(..., ge=0)
    generated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def commitment_hex(self) -> str:
        return to_hex(self.proof_commitment)

    def to_wire(self) -> dict[str, Any]:
        """Convert to the published JSON shape."""
        return {
            "proof_commitment": self.commitment_hex,
            "public_inputs": self.public_inputs.to_wire(),
            "liability_count": self.liability_count,
            "generation_time_ms": self.generation_time_ms,
        }


class ProofArtifact(BaseModel):
    """Opaque proof produced by the external proving toolchain."""

    model_config = ConfigDict(populate_by_name=True)

    commitment: str | None = None
    stark_proof: str = Field(..., alias="starkProofBytecode", min_length=1)
    message: str | None = None

    def to_hex(self) -> str:
        """Convert to hex string for storage."""
        return self.model_dump_json(by_alias=True).encode().hex()

    @classmethod
    def from_hex(cls, hex_str: str) -> "ProofArtifact":
        """Create from hex string."""
        return cls.model_validate_json(bytes.fromhex(hex_str).decode())


class ProofWithArtifact(BaseModel):
    """Commitment output plus the external prover's artifact, when requested."""

    output: ProofOutput
    artifact: ProofArtifact | None = None


class VerificationResult(BaseModel):
    """Result of a verification."""

    valid: bool
    method: str
    commitment: str | None = None
    expected_commitment: str | None = None
    verified_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    verification_time_ms: int = Field(..., ge=0)

    # Error info
    error: str | None = None
