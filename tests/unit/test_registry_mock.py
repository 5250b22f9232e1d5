"""
Unit tests for mock registry client.
"""

import pytest
import pytest_asyncio

from zkreserves.config import RegistryMode, RegistrySettings
from zkreserves.core.commitment import PublicInputs, compose_commitment, compute_entity_id
from zkreserves.core.encoding import encode_short_string
from zkreserves.core.hashing import Sha256FieldHasher
from zkreserves.core.lifecycle import ProofStatus, classify_proof_status
from zkreserves.core.solvency import ReserveBand
from zkreserves.errors import EntityAlreadyRegisteredError, StructuralInputError
from zkreserves.registry import (
    MockRegistryClient,
    get_registry_client,
    reset_registry_client,
    set_registry_client,
)


NOW = 1_700_000_000
TTL = 28 * 24 * 3600
REGISTRANT = 0x0123ABCD


def make_inputs(entity_id: int, band: ReserveBand = ReserveBand.BUFFERED, timestamp: int = NOW) -> PublicInputs:
    return PublicInputs(
        entity_id=entity_id,
        block_height=880412,
        liability_root=0xBEEF,
        band=band,
        proof_timestamp=timestamp,
    )


class TestMockRegistryClient:
    """Tests for MockRegistryClient."""

    @pytest.fixture
    def client(self, hasher: Sha256FieldHasher) -> MockRegistryClient:
        """Create a fresh mock client for each test."""
        client = MockRegistryClient(RegistrySettings(proof_ttl_seconds=TTL), hasher=hasher)
        client.clear_all()
        return client

    @pytest_asyncio.fixture
    async def entity_id(self, client: MockRegistryClient) -> int:
        return await client.register_entity(encode_short_string("Kraken"), REGISTRANT, now=NOW)

    def test_client_mode(self, client: MockRegistryClient) -> None:
        """Test that client reports mock mode."""
        assert client.mode == RegistryMode.MOCK

    @pytest.mark.asyncio
    async def test_health_check(self, client: MockRegistryClient) -> None:
        await client.connect()
        health = await client.health_check()

        assert health["status"] == "healthy"
        assert health["connected"] is True
        assert health["entities"] == 0

    @pytest.mark.asyncio
    async def test_register_entity(self, client: MockRegistryClient, hasher: Sha256FieldHasher) -> None:
        name_hash = encode_short_string("Kraken")
        entity_id = await client.register_entity(name_hash, REGISTRANT, now=NOW)

        assert entity_id == compute_entity_id(name_hash, REGISTRANT, hasher)
        assert await client.is_registered(entity_id)
        assert await client.list_entity_ids() == [entity_id]

        entity = await client.get_entity(entity_id)
        assert entity is not None
        assert entity.registered_at == NOW
        assert entity.registrant == REGISTRANT

    @pytest.mark.asyncio
    async def test_register_duplicate(self, client: MockRegistryClient, entity_id: int) -> None:
        with pytest.raises(EntityAlreadyRegisteredError) as exc_info:
            await client.register_entity(encode_short_string("Kraken"), REGISTRANT)

        assert exc_info.value.entity_id == entity_id
        assert not isinstance(exc_info.value, StructuralInputError)

    @pytest.mark.asyncio
    async def test_unknown_entity_is_never_proven(self, client: MockRegistryClient) -> None:
        record = await client.get_proof_record(42)

        assert classify_proof_status(record, NOW) == ProofStatus.NEVER_PROVEN
        assert await client.get_entity(42) is None

    @pytest.mark.asyncio
    async def test_registered_without_proof(self, client: MockRegistryClient, entity_id: int) -> None:
        record = await client.get_proof_record(entity_id)

        assert classify_proof_status(record, NOW) == ProofStatus.NEVER_PROVEN

    @pytest.mark.asyncio
    async def test_submit_proof(
        self,
        client: MockRegistryClient,
        entity_id: int,
        hasher: Sha256FieldHasher,
    ) -> None:
        inputs = make_inputs(entity_id)
        commitment = compose_commitment(inputs, hasher)

        record = await client.submit_proof(entity_id, inputs, hex(commitment), now=NOW)

        assert record.is_valid
        assert record.expiry_timestamp == NOW + TTL
        assert record.submission_count == 1
        assert await client.get_proof_record(entity_id) == record
        assert classify_proof_status(record, NOW) == ProofStatus.ACTIVE
        assert classify_proof_status(record, NOW + TTL - 3600) == ProofStatus.EXPIRING
        assert classify_proof_status(record, NOW + TTL + 1) == ProofStatus.EXPIRED

    @pytest.mark.asyncio
    async def test_resubmission_increments_count(
        self,
        client: MockRegistryClient,
        entity_id: int,
        hasher: Sha256FieldHasher,
    ) -> None:
        for i in range(3):
            inputs = make_inputs(entity_id, timestamp=NOW + i)
            await client.submit_proof(entity_id, inputs, compose_commitment(inputs, hasher), now=NOW + i)

        record = await client.get_proof_record(entity_id)
        history = await client.get_proof_history(entity_id)

        assert record.submission_count == 3
        assert [r.submission_count for r in history] == [1, 2, 3]
        assert await client.get_total_submissions() == 3

    @pytest.mark.asyncio
    async def test_wire_inputs_accepted(
        self,
        client: MockRegistryClient,
        entity_id: int,
        hasher: Sha256FieldHasher,
    ) -> None:
        inputs = make_inputs(entity_id)

        record = await client.submit_proof(
            entity_id,
            inputs.to_wire(),
            compose_commitment(inputs, hasher),
            now=NOW,
        )

        assert record.band == ReserveBand.BUFFERED

    @pytest.mark.asyncio
    async def test_unregistered_entity_rejected(self, client: MockRegistryClient, hasher: Sha256FieldHasher) -> None:
        inputs = make_inputs(7)

        with pytest.raises(StructuralInputError, match="not registered"):
            await client.submit_proof(7, inputs, compose_commitment(inputs, hasher))

    @pytest.mark.asyncio
    async def test_mismatched_entity_rejected(
        self,
        client: MockRegistryClient,
        entity_id: int,
        hasher: Sha256FieldHasher,
    ) -> None:
        inputs = make_inputs(entity_id + 1)

        with pytest.raises(StructuralInputError):
            await client.submit_proof(entity_id, inputs, compose_commitment(inputs, hasher))

    @pytest.mark.asyncio
    async def test_insolvent_band_rejected(
        self,
        client: MockRegistryClient,
        entity_id: int,
        hasher: Sha256FieldHasher,
    ) -> None:
        inputs = make_inputs(entity_id, band=ReserveBand.INSOLVENT)

        with pytest.raises(StructuralInputError):
            await client.submit_proof(entity_id, inputs, compose_commitment(inputs, hasher))

    @pytest.mark.asyncio
    async def test_wrong_commitment_rejected(self, client: MockRegistryClient, entity_id: int) -> None:
        with pytest.raises(StructuralInputError, match="proof_commitment"):
            await client.submit_proof(entity_id, make_inputs(entity_id), 12345)

        assert await client.get_total_submissions() == 0

    @pytest.mark.asyncio
    async def test_proof_ttl(self, client: MockRegistryClient) -> None:
        assert await client.get_proof_ttl() == TTL


class TestRegistryFactory:
    """Tests for the global registry client."""

    def test_mock_mode(self) -> None:
        reset_registry_client()
        try:
            client = get_registry_client(RegistrySettings(mode=RegistryMode.MOCK))
            assert isinstance(client, MockRegistryClient)
            assert get_registry_client() is client
        finally:
            reset_registry_client()

    @pytest.mark.parametrize("mode", [RegistryMode.TESTNET, RegistryMode.MAINNET])
    def test_network_modes_not_implemented(self, mode: RegistryMode) -> None:
        reset_registry_client()
        config = RegistrySettings(mode=mode, rpc_url="https://rpc.example", contract_address="0xabc")

        with pytest.raises(NotImplementedError, match="https://rpc.example") as exc_info:
            get_registry_client(config)

        assert "0xabc" in str(exc_info.value)

    def test_set_client(self) -> None:
        custom = MockRegistryClient()
        set_registry_client(custom)
        try:
            assert get_registry_client() is custom
        finally:
            reset_registry_client()
