"""
Registry Client Interface
=========================

Abstract base class and models for the external proof registry.

The registry stores one latest proof record per entity as a positional
8-field record; clients return those raw fields and `get_proof_record`
decodes them with `ProofRecord.from_positional`.

Version: 0.1.0
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, Field

from zkreserves.config import RegistryMode, settings
from zkreserves.config.settings import RegistrySettings
from zkreserves.core.commitment import PublicInputs
from zkreserves.core.lifecycle import ProofRecord
from zkreserves.logging import get_logger


logger = get_logger(__name__)


class EntityRecord(BaseModel):
    """Registration data of one entity."""

    entity_id: int = Field(..., ge=0)
    name_hash: int = Field(..., ge=0, description="Short-string encoding of the entity name")
    registrant: int = Field(..., ge=0, description="Address that registered the entity")
    registered_at: int = Field(..., ge=0, description="Unix seconds")


class RegistryClient(ABC):
    """
    Abstract base class for registry clients.

    Implements the Strategy pattern for different registry modes.
    """

    def __init__(self, config: RegistrySettings) -> None:
        self.config = config

    @property
    @abstractmethod
    def mode(self) -> RegistryMode:
        """Get the registry mode."""
        ...

    @abstractmethod
    async def connect(self) -> None:
        """Connect to the registry."""
        ...

    @abstractmethod
    async def disconnect(self) -> None:
        """Disconnect from the registry."""
        ...

    @abstractmethod
    async def health_check(self) -> dict[str, Any]:
        """Check registry health."""
        ...

    @abstractmethod
    async def is_registered(self, entity_id: int) -> bool:
        """Whether an entity id has been registered."""
        ...

    @abstractmethod
    async def get_entity(self, entity_id: int) -> EntityRecord | None:
        """Registration data, or None if the entity is unknown."""
        ...

    @abstractmethod
    async def list_entity_ids(self) -> list[int]:
        """All registered entity ids, in registration order."""
        ...

    @abstractmethod
    async def get_proof_record_fields(self, entity_id: int) -> list[int | str]:
        """
        Raw positional proof record of an entity.

        Entities without a proof return all-zero fields.
        """
        ...

    @abstractmethod
    async def get_total_submissions(self) -> int:
        """Number of accepted proof submissions across all entities."""
        ...

    @abstractmethod
    async def get_proof_history(self, entity_id: int) -> list[ProofRecord]:
        """All accepted proofs of an entity, oldest first."""
        ...

    @abstractmethod
    async def register_entity(
        self,
        name_hash: int,
        registrant: int,
        now: int | None = None,
    ) -> int:
        """
        Register an entity.

        Args:
            name_hash: Short-string encoding of the entity name
            registrant: Address of the registering account
            now: Registration time (defaults to wall-clock)

        Returns:
            The new entity id

        Raises:
            EntityAlreadyRegisteredError: If the entity is already registered
        """
        ...

    @abstractmethod
    async def submit_proof(
        self,
        entity_id: int,
        public_inputs: PublicInputs | Mapping[str, Any],
        proof_commitment: int | str,
        now: int | None = None,
    ) -> ProofRecord:
        """
        Submit a solvency proof for a registered entity.

        Returns:
            The stored proof record
        """
        ...

    async def get_proof_record(self, entity_id: int) -> ProofRecord:
        """
        Latest proof record of an entity.

        Raises:
            StructuralInputError: If the registry returned a malformed record
        """
        return ProofRecord.from_positional(await self.get_proof_record_fields(entity_id))

    async def get_proof_ttl(self) -> int:
        """Seconds a proof stays valid after submission."""
        return self.config.proof_ttl_seconds


# Global client instance
_client: RegistryClient | None = None


def get_registry_client(config: RegistrySettings | None = None) -> RegistryClient:
    """
    Get the configured registry client instance.

    Args:
        config: Registry settings (default from settings)

    Returns:
        RegistryClient instance based on the configured mode
    """
    global _client

    if _client is None:
        config = config or settings.registry
        mode = config.mode

        if mode == RegistryMode.MOCK:
            from zkreserves.registry.mock import MockRegistryClient

            _client = MockRegistryClient(config)
        elif mode in (RegistryMode.TESTNET, RegistryMode.MAINNET):
            raise NotImplementedError(
                f"Registry mode '{mode.value}' ({config.rpc_url}, contract {config.contract_address}) "
                "not yet implemented. Use REGISTRY_MODE=mock for development."
            )
        else:
            raise ValueError(f"Unknown registry mode: {mode}")

        logger.info(
            "registry_client_initialized",
            mode=mode.value,
        )

    return _client


def set_registry_client(client: RegistryClient) -> None:
    """
    Set a custom registry client.

    Args:
        client: RegistryClient instance
    """
    global _client
    _client = client
    logger.info(
        "registry_client_set",
        mode=client.mode.value,
    )


def reset_registry_client() -> None:
    """Reset the client to be re-initialized."""
    global _client
    _client = None
