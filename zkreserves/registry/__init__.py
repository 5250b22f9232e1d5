"""
Registry Module
===============

Access to the external proof registry: entity registration, proof
submission and positional proof records.

Supports:
- Mock (development/testing)
- Testnet
- Mainnet

Usage:
    from zkreserves.registry import get_registry_client

    client = get_registry_client()
    record = await client.get_proof_record(entity_id)
"""

from zkreserves.registry.client import (
    EntityRecord,
    RegistryClient,
    get_registry_client,
    reset_registry_client,
    set_registry_client,
)
from zkreserves.registry.mock import MockRegistryClient

__all__ = [
    # Client
    "RegistryClient",
    "get_registry_client",
    "set_registry_client",
    "reset_registry_client",
    # Models
    "EntityRecord",
    # Implementations
    "MockRegistryClient",
]
