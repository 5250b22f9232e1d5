"""
Proof Verification Routes
=========================

API endpoints for checking published solvency claims.
"""

from typing import Any

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, Field

from zkreserves.core.merkle import parse_sibling_path
from zkreserves.errors import InfrastructureError, StructuralInputError
from zkreserves.logging import get_logger
from zkreserves.zk.client import ProverClient
from zkreserves.zk.models import ProofArtifact
from zkreserves.zk.verifier import SolvencyVerifier


logger = get_logger(__name__)
router = APIRouter()


# ============================================================================
# Request/Response Models
# ============================================================================


class VerifyCommitmentRequest(BaseModel):
    """Request to check a proof commitment against its public inputs."""

    proof: str = Field(..., description="Published proof commitment (0x hex)")
    public_inputs: dict[str, Any] = Field(..., description="The five public inputs")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "proof": "0x2a",
                    "public_inputs": {
                        "entity_id": "0x1",
                        "block_height": 880412,
                        "liability_merkle_root": "0x5",
                        "reserve_ratio_band": 2,
                        "proof_timestamp": 1700000000,
                    },
                }
            ]
        }
    }


class VerifyCommitmentResponse(BaseModel):
    is_valid: bool
    proof_provided: str
    expected_commitment: str
    public_inputs: dict[str, Any]
    verification_method: str
    verification_time_ms: int
    note: str


class VerifyInclusionRequest(BaseModel):
    """Request to check that an account's liability is in a published root."""

    account_id: str = Field(..., min_length=1)
    amount: int | str = Field(..., description="Liability in the smallest unit")
    path: Any = Field(..., description="Sibling path, leaf to root (array or JSON string)")
    liability_root: str = Field(..., description="Published liability Merkle root")


class VerifyInclusionResponse(BaseModel):
    is_valid: bool
    account_id: str
    liability_merkle_root: str
    path_length: int
    verification_method: str
    note: str


class VerifyExternalRequest(BaseModel):
    entity_id: str
    stark_proof: str = Field(..., min_length=1, description="Opaque proof from the external prover")


class VerifyExternalResponse(BaseModel):
    entity_id: str
    verified: bool
    verification_time_ms: int


# ============================================================================
# Verification Endpoints
# ============================================================================


@router.post("/commitment", response_model=VerifyCommitmentResponse)
async def verify_commitment(request: VerifyCommitmentRequest) -> VerifyCommitmentResponse:
    """
    Recompute the commitment from the public inputs and compare.

    A mismatch is reported with `is_valid: false`; malformed inputs are
    rejected with 400.
    """
    try:
        result = SolvencyVerifier().verify_commitment(request.public_inputs, request.proof)
    except StructuralInputError as e:
        logger.warning("commitment_check_rejected", error=str(e), field=e.field)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        ) from e

    return VerifyCommitmentResponse(
        is_valid=result.valid,
        proof_provided=request.proof,
        expected_commitment=result.expected_commitment or "",
        public_inputs=request.public_inputs,
        verification_method="commitment_check",
        verification_time_ms=result.verification_time_ms,
        note=(
            "Proof commitment matches expected value. Entity is verified solvent."
            if result.valid
            else "Proof commitment does not match. Either the proof or public inputs are incorrect."
        ),
    )


@router.post("/inclusion", response_model=VerifyInclusionResponse)
async def verify_inclusion(request: VerifyInclusionRequest) -> VerifyInclusionResponse:
    """
    Replay an account's sibling path against a published liability root.

    Malformed path entries, hashes or amounts are rejected with 400.
    """
    try:
        path = parse_sibling_path(request.path)
        result = SolvencyVerifier().verify_inclusion(
            request.account_id,
            request.amount,
            path,
            request.liability_root,
        )
    except StructuralInputError as e:
        logger.warning("inclusion_check_rejected", error=str(e), field=e.field)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        ) from e

    return VerifyInclusionResponse(
        is_valid=result.valid,
        account_id=request.account_id,
        liability_merkle_root=result.commitment or request.liability_root,
        path_length=len(path),
        verification_method="merkle_inclusion",
        note=(
            "Account liability is included in the published liability root."
            if result.valid
            else "Account liability is not included under this root."
        ),
    )


@router.post("/external", response_model=VerifyExternalResponse)
async def verify_external(request: VerifyExternalRequest) -> VerifyExternalResponse:
    """Check a succinct proof with the external verifier."""
    async with ProverClient() as client:
        try:
            result = await SolvencyVerifier(client=client).verify_external(
                request.entity_id,
                ProofArtifact(stark_proof=request.stark_proof),
            )
        except InfrastructureError as e:
            logger.error("external_verifier_failed", error=str(e))
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail=str(e),
            ) from e

    return VerifyExternalResponse(
        entity_id=request.entity_id,
        verified=result.valid,
        verification_time_ms=result.verification_time_ms,
    )
