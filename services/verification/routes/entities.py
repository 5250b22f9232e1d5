"""
Entity Status Routes
====================

API endpoints for entity registration, proof submission and proof status.
"""

import time
from typing import Any

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, Field

from zkreserves.core.encoding import (
    decode_short_string,
    encode_short_string,
    parse_field_element,
    to_hex,
    to_padded_hex,
)
from zkreserves.core.lifecycle import (
    ProofRecord,
    ProofStatus,
    classify_proof_status,
    days_until_expiry,
    summarize_ecosystem,
)
from zkreserves.errors import EntityAlreadyRegisteredError, StructuralInputError
from zkreserves.logging import entity_log_context, get_logger
from zkreserves.registry import EntityRecord, get_registry_client


logger = get_logger(__name__)
router = APIRouter()


# ============================================================================
# Request/Response Models
# ============================================================================


class RegisterEntityRequest(BaseModel):
    """Request to register an entity."""

    name: str = Field(..., min_length=1, description="Entity name, at most 31 bytes")
    registrant: str = Field(..., description="Registrant address (0x hex)")


class RegisterEntityResponse(BaseModel):
    entity_id: str
    name: str


class SubmitProofRequest(BaseModel):
    """Request to submit a solvency proof to the registry."""

    proof: str = Field(..., description="Proof commitment (0x hex)")
    public_inputs: dict[str, Any]


class SubmitProofResponse(BaseModel):
    success: bool
    entity_id: str
    reserve_ratio_band: int
    expiry_timestamp: int
    submission_count: int
    message: str


class EntityStatusResponse(BaseModel):
    """Registry record of one entity with its derived lifecycle status."""

    entity_id: str
    name: str | None = None
    status: ProofStatus
    reserve_ratio_band: int
    reserve_ratio_label: str
    block_height: int
    liability_merkle_root: str
    proof_timestamp: int
    expiry_timestamp: int
    days_until_expiry: int
    submission_count: int


class EcosystemSummary(BaseModel):
    total: int
    valid: int
    active: int
    expiring: int
    expired: int
    never_proven: int
    next_expiry_seconds: int | None = None


class EntityListResponse(BaseModel):
    summary: EcosystemSummary
    entities: list[EntityStatusResponse]


class ProofHistoryResponse(BaseModel):
    entity_id: str
    submissions: list[dict[str, Any]]


# ============================================================================
# Helpers
# ============================================================================


def _parse_entity_id(entity_id: str) -> int:
    try:
        return parse_field_element(entity_id, field="entity_id")
    except StructuralInputError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        ) from e


async def _require_registered(entity_id: int) -> EntityRecord:
    entity = await get_registry_client().get_entity(entity_id)
    if entity is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Entity not found: {to_hex(entity_id)}",
        )
    return entity


def _status_response(
    entity: EntityRecord,
    record: ProofRecord,
    now: int,
) -> EntityStatusResponse:
    return EntityStatusResponse(
        entity_id=to_hex(entity.entity_id),
        name=decode_short_string(entity.name_hash),
        status=classify_proof_status(record, now),
        reserve_ratio_band=int(record.band),
        reserve_ratio_label=record.band.label,
        block_height=record.block_height,
        liability_merkle_root=to_padded_hex(record.liability_root),
        proof_timestamp=record.proof_timestamp,
        expiry_timestamp=record.expiry_timestamp,
        days_until_expiry=days_until_expiry(record, now),
        submission_count=record.submission_count,
    )


# ============================================================================
# Registry Endpoints
# ============================================================================


@router.post("", response_model=RegisterEntityResponse, status_code=status.HTTP_201_CREATED)
async def register_entity(request: RegisterEntityRequest) -> RegisterEntityResponse:
    """Register an entity; its id is derived from the name and registrant."""
    try:
        name_hash = encode_short_string(request.name)
        registrant = parse_field_element(request.registrant, field="registrant")
    except StructuralInputError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        ) from e

    try:
        entity_id = await get_registry_client().register_entity(name_hash, registrant)
    except EntityAlreadyRegisteredError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e),
        ) from e

    return RegisterEntityResponse(entity_id=to_hex(entity_id), name=request.name)


@router.post("/{entity_id}/proofs", response_model=SubmitProofResponse)
async def submit_proof(entity_id: str, request: SubmitProofRequest) -> SubmitProofResponse:
    """
    Submit a solvency proof.

    The registry rejects insolvent bands, inputs naming another entity and
    commitments that do not match the inputs.
    """
    entity_value = _parse_entity_id(entity_id)
    await _require_registered(entity_value)

    with entity_log_context(entity_value):
        try:
            record = await get_registry_client().submit_proof(
                entity_value,
                request.public_inputs,
                request.proof,
            )
        except StructuralInputError as e:
            logger.warning("proof_submission_rejected", field=e.field)
            raise HTTPException(
                status_code=422,
                detail=str(e),
            ) from e

    return SubmitProofResponse(
        success=True,
        entity_id=to_hex(entity_value),
        reserve_ratio_band=int(record.band),
        expiry_timestamp=record.expiry_timestamp,
        submission_count=record.submission_count,
        message="Proof accepted. Entity is now publicly verified.",
    )


# ============================================================================
# Status Endpoints
# ============================================================================


@router.get("", response_model=EntityListResponse)
async def list_entities() -> EntityListResponse:
    """Proof status of every registered entity, with an ecosystem summary."""
    client = get_registry_client()
    now = int(time.time())

    statuses: list[EntityStatusResponse] = []
    records: list[ProofRecord] = []
    for entity_id in await client.list_entity_ids():
        entity = await client.get_entity(entity_id)
        if entity is None:
            continue
        record = await client.get_proof_record(entity_id)
        records.append(record)
        statuses.append(_status_response(entity, record, now))

    health = summarize_ecosystem(records, now)

    return EntityListResponse(
        summary=EcosystemSummary(
            total=health.total,
            valid=health.valid,
            active=health.active,
            expiring=health.expiring,
            expired=health.expired,
            never_proven=health.never_proven,
            next_expiry_seconds=health.next_expiry_seconds,
        ),
        entities=statuses,
    )


@router.get("/{entity_id}/status", response_model=EntityStatusResponse)
async def get_entity_status(entity_id: str) -> EntityStatusResponse:
    """Latest proof record of an entity and its lifecycle status."""
    entity_value = _parse_entity_id(entity_id)
    entity = await _require_registered(entity_value)

    try:
        record = await get_registry_client().get_proof_record(entity_value)
    except StructuralInputError as e:
        logger.error("registry_record_malformed", entity_id=to_hex(entity_value), error=str(e))
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Registry returned a malformed proof record",
        ) from e

    return _status_response(entity, record, int(time.time()))


@router.get("/{entity_id}/history", response_model=ProofHistoryResponse)
async def get_proof_history(entity_id: str) -> ProofHistoryResponse:
    """All accepted proofs of an entity, oldest first."""
    entity_value = _parse_entity_id(entity_id)
    await _require_registered(entity_value)

    history = await get_registry_client().get_proof_history(entity_value)

    return ProofHistoryResponse(
        entity_id=to_hex(entity_value),
        submissions=[
            {
                "block_height": record.block_height,
                "liability_merkle_root": to_hex(record.liability_root),
                "reserve_ratio_band": int(record.band),
                "proof_timestamp": record.proof_timestamp,
                "expiry_timestamp": record.expiry_timestamp,
                "submission_count": record.submission_count,
            }
            for record in history
        ],
    )
