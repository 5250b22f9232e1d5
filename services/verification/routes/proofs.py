"""
Solvency Proof Routes
=====================

API endpoints for generating solvency commitments and liability trees.
"""

import base64
import binascii
from typing import Any

from fastapi import APIRouter, HTTPException, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, model_validator

from zkreserves.core.encoding import to_hex
from zkreserves.core.liabilities import ParsedLiabilities, parse_liabilities
from zkreserves.core.merkle import build_liability_commitment
from zkreserves.errors import InfrastructureError, InsolvencyError
from zkreserves.logging import get_logger
from zkreserves.models.common import ErrorResponse
from zkreserves.zk.client import ProverClient
from zkreserves.zk.models import ProofRequest
from zkreserves.zk.prover import SolvencyProver, StepProgress


logger = get_logger(__name__)
router = APIRouter()


# ============================================================================
# Request/Response Models
# ============================================================================


class LiabilityInput(BaseModel):
    """Liability CSV, either as text or base64-encoded."""

    liabilities_csv: str | None = Field(default=None, description="account_id,amount rows")
    liabilities_csv_base64: str | None = Field(default=None, description="Base64 of the CSV")

    @model_validator(mode="after")
    def require_one_source(self) -> "LiabilityInput":
        if (self.liabilities_csv is None) == (self.liabilities_csv_base64 is None):
            raise ValueError("Provide exactly one of liabilities_csv or liabilities_csv_base64")
        return self

    def csv_text(self) -> str:
        """
        The liability CSV as text.

        Raises:
            ValueError: If the base64 payload is not valid UTF-8 base64
        """
        if self.liabilities_csv is not None:
            return self.liabilities_csv
        try:
            return base64.b64decode(self.liabilities_csv_base64, validate=True).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as e:
            raise ValueError("Invalid base64 CSV") from e


class GenerateProofRequest(LiabilityInput):
    """Request to generate a solvency proof."""

    entity_id: str = Field(..., description="Registry entity id (0x hex or decimal)")
    reserve_balances: list[int] = Field(..., min_length=1, description="Wallet balances (satoshi)")
    block_height: int = Field(..., ge=0, description="Reference block height")
    proof_timestamp: int | None = Field(default=None, ge=0, description="Unix seconds; now if omitted")
    external_proof: bool = Field(default=False, description="Also request a succinct proof")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "entity_id": "0x1",
                    "reserve_balances": [60000, 40000],
                    "liabilities_csv": "account_id,amount\nalice,20000\nbob,30000",
                    "block_height": 880412,
                }
            ]
        }
    }


class StepResponse(BaseModel):
    step: str
    status: str
    detail: str | None = None


class GenerateProofResponse(BaseModel):
    """Published part of a solvency proof."""

    success: bool
    proof_commitment: str
    public_inputs: dict[str, Any]
    reserve_ratio_label: str
    liability_count: int
    generation_time_ms: int
    steps: list[StepResponse]
    external_proof: dict[str, Any] | None = None


class LiabilityRootResponse(BaseModel):
    liability_merkle_root: str
    leaf_count: int
    tree_depth: int
    total_liability: int


class InclusionPathRequest(LiabilityInput):
    account_id: str = Field(..., min_length=1)


class InclusionPathResponse(BaseModel):
    account_id: str
    amount: int
    leaf_index: int
    liability_merkle_root: str
    path: list[dict[str, str]]


# ============================================================================
# Helpers
# ============================================================================


def _read_liabilities(request: LiabilityInput) -> ParsedLiabilities:
    try:
        return parse_liabilities(request.csv_text())
    except ValueError as e:
        logger.warning(
            "liability_input_rejected",
            error_type=type(e).__name__,
            line=getattr(e, "line", None),
        )
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        ) from e


# ============================================================================
# Proof Generation Endpoints
# ============================================================================


@router.post("/generate", response_model=GenerateProofResponse)
async def generate_proof(request: GenerateProofRequest) -> Any:
    """
    Generate a solvency proof commitment.

    Only the commitment, the public inputs and the band label are returned;
    the reserve and liability totals stay private.

    Returns:
        GenerateProofResponse, or 422 with `solvency_failure: true` if
        reserves do not cover liabilities
    """
    logger.info(
        "generating_solvency_proof",
        entity_id=request.entity_id,
        block_height=request.block_height,
    )

    steps: list[StepProgress] = []

    def record_progress(progress: list[StepProgress]) -> None:
        steps[:] = progress

    try:
        proof_request = ProofRequest(
            entity_id=request.entity_id,
            reserve_balances=request.reserve_balances,
            liabilities_csv=request.csv_text(),
            block_height=request.block_height,
            proof_timestamp=request.proof_timestamp,
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        ) from e

    client = ProverClient() if request.external_proof else None
    try:
        result = await SolvencyProver(client=client).prove(proof_request, on_progress=record_progress)
    except InsolvencyError as e:
        content = ErrorResponse(
            error=str(e),
            status_code=422,
        ).model_dump(mode="json")
        content["solvency_failure"] = True
        return JSONResponse(
            status_code=422,
            content=content,
        )
    except ValueError as e:
        logger.warning(
            "solvency_proof_input_error",
            error_type=type(e).__name__,
            line=getattr(e, "line", None),
        )
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        ) from e
    except InfrastructureError as e:
        logger.error("external_prover_failed", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=str(e),
        ) from e
    finally:
        if client is not None:
            await client.close()

    output = result.output
    wire = output.to_wire()

    return GenerateProofResponse(
        success=True,
        proof_commitment=wire["proof_commitment"],
        public_inputs=wire["public_inputs"],
        reserve_ratio_label=output.public_inputs.band.label,
        liability_count=output.liability_count,
        generation_time_ms=output.generation_time_ms,
        steps=[
            StepResponse(step=s.step.value, status=s.status.value, detail=s.detail)
            for s in steps
        ],
        external_proof=(
            result.artifact.model_dump(by_alias=True) if result.artifact is not None else None
        ),
    )


@router.post("/liability-root", response_model=LiabilityRootResponse)
async def compute_liability_root(request: LiabilityInput) -> LiabilityRootResponse:
    """
    Compute the liability Merkle root of a CSV.

    Intended for the proving entity itself: the total is returned.
    """
    liabilities = _read_liabilities(request)
    commitment, tree = build_liability_commitment(liabilities)

    return LiabilityRootResponse(
        liability_merkle_root=commitment.root_hex,
        leaf_count=commitment.leaf_count,
        tree_depth=tree.depth,
        total_liability=commitment.total_liability,
    )


@router.post("/inclusion-path", response_model=InclusionPathResponse)
async def get_inclusion_path(request: InclusionPathRequest) -> InclusionPathResponse:
    """
    Build the sibling path for one account.

    If the account appears more than once, the first row is used.
    """
    liabilities = _read_liabilities(request)
    index = liabilities.find(request.account_id)
    if index is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Account not found: {request.account_id}",
        )

    _, tree = build_liability_commitment(liabilities)
    path = tree.inclusion_path(index)

    return InclusionPathResponse(
        account_id=request.account_id,
        amount=liabilities.records[index].amount,
        leaf_index=index,
        liability_merkle_root=to_hex(tree.root),
        path=[entry.to_wire() for entry in path],
    )
