"""
Mock Registry Client
====================

In-memory mock implementation for development and testing.

Accepts registrations and proof submissions with the same checks the
deployed registry applies, and serves the positional record format the
real client reads.

Version: 0.1.0
"""

import time
from collections.abc import Mapping
from typing import Any

from zkreserves.config import RegistryMode, settings
from zkreserves.config.settings import RegistrySettings
from zkreserves.core.commitment import PublicInputs, compute_entity_id, parse_public_inputs, verify_commitment
from zkreserves.core.encoding import to_hex
from zkreserves.core.hashing import FieldHasher, get_field_hasher
from zkreserves.core.lifecycle import ProofRecord
from zkreserves.core.solvency import ReserveBand
from zkreserves.errors import EntityAlreadyRegisteredError, StructuralInputError
from zkreserves.logging import get_logger
from zkreserves.registry.client import EntityRecord, RegistryClient


logger = get_logger(__name__)


class MockRegistryClient(RegistryClient):
    """
    In-memory mock registry client.

    Data is stored in memory and lost on restart.
    """

    def __init__(
        self,
        config: RegistrySettings | None = None,
        hasher: FieldHasher | None = None,
    ) -> None:
        """Initialize mock client with in-memory storage."""
        super().__init__(config or settings.registry)
        self.hasher = hasher or get_field_hasher()
        self._connected = False

        # In-memory storage
        self._entities: dict[int, EntityRecord] = {}
        self._records: dict[int, list[str]] = {}
        self._history: dict[int, list[list[str]]] = {}
        self._total_submissions = 0

        logger.debug("mock_registry_initialized")

    @property
    def mode(self) -> RegistryMode:
        return RegistryMode.MOCK

    async def connect(self) -> None:
        """Simulate connection."""
        self._connected = True
        logger.info("mock_registry_connected")

    async def disconnect(self) -> None:
        """Simulate disconnection."""
        self._connected = False
        logger.info("mock_registry_disconnected")

    async def health_check(self) -> dict[str, Any]:
        """Check mock registry health."""
        return {
            "status": "healthy",
            "mode": self.mode.value,
            "connected": self._connected,
            "entities": len(self._entities),
            "total_submissions": self._total_submissions,
        }

    # =========================================================================
    # Reads
    # =========================================================================

    async def is_registered(self, entity_id: int) -> bool:
        return entity_id in self._entities

    async def get_entity(self, entity_id: int) -> EntityRecord | None:
        return self._entities.get(entity_id)

    async def list_entity_ids(self) -> list[int]:
        return list(self._entities)

    async def get_proof_record_fields(self, entity_id: int) -> list[int | str]:
        if entity_id in self._records:
            return list(self._records[entity_id])
        return [0] * len(ProofRecord.POSITIONAL_FIELDS)

    async def get_total_submissions(self) -> int:
        return self._total_submissions

    async def get_proof_history(self, entity_id: int) -> list[ProofRecord]:
        """All accepted proofs of an entity, oldest first."""
        return [
            ProofRecord.from_positional(fields)
            for fields in self._history.get(entity_id, [])
        ]

    # =========================================================================
    # Writes
    # =========================================================================

    async def register_entity(
        self,
        name_hash: int,
        registrant: int,
        now: int | None = None,
    ) -> int:
        """
        Register an entity and return its id, `H(name_hash, registrant)`.

        Raises:
            EntityAlreadyRegisteredError: If the entity is already registered
        """
        entity_id = compute_entity_id(name_hash, registrant, self.hasher)
        if entity_id in self._entities:
            raise EntityAlreadyRegisteredError(entity_id)

        self._entities[entity_id] = EntityRecord(
            entity_id=entity_id,
            name_hash=name_hash,
            registrant=registrant,
            registered_at=int(time.time()) if now is None else now,
        )

        logger.info(
            "mock_entity_registered",
            entity_id=to_hex(entity_id),
        )

        return entity_id

    async def submit_proof(
        self,
        entity_id: int,
        public_inputs: PublicInputs | Mapping[str, Any],
        proof_commitment: int | str,
        now: int | None = None,
    ) -> ProofRecord:
        """
        Accept a proof submission.

        The stored record expires `proof_ttl_seconds` after submission.

        Raises:
            StructuralInputError: If the entity is unknown, the inputs name
                another entity, the band is not solvent or the commitment
                does not match the inputs
        """
        if entity_id not in self._entities:
            raise StructuralInputError("entity not registered", field="entity_id")

        inputs = parse_public_inputs(public_inputs)
        if inputs.entity_id != entity_id:
            raise StructuralInputError("does not match the submitting entity", field="public_inputs.entity_id")
        if inputs.band == ReserveBand.INSOLVENT:
            raise StructuralInputError("band must be 1, 2 or 3", field="public_inputs.reserve_ratio_band")

        check = verify_commitment(inputs, proof_commitment, self.hasher)
        if not check.valid:
            raise StructuralInputError("does not match public inputs", field="proof_commitment")

        submitted_at = int(time.time()) if now is None else now
        previous = await self.get_proof_record(entity_id)

        record = ProofRecord(
            entity_id=entity_id,
            block_height=inputs.block_height,
            liability_root=inputs.liability_root,
            band=inputs.band,
            proof_timestamp=inputs.proof_timestamp,
            is_valid=True,
            expiry_timestamp=submitted_at + self.config.proof_ttl_seconds,
            submission_count=previous.submission_count + 1,
        )

        fields = record.to_positional()
        self._records[entity_id] = fields
        self._history.setdefault(entity_id, []).append(fields)
        self._total_submissions += 1

        logger.info(
            "mock_proof_submitted",
            entity_id=to_hex(entity_id),
            band=int(inputs.band),
            submission_count=record.submission_count,
        )

        return record

    def clear_all(self) -> None:
        """Clear all stored data (for testing)."""
        self._entities.clear()
        self._records.clear()
        self._history.clear()
        self._total_submissions = 0
        logger.info("mock_registry_cleared")
