"""
Proof and Verification Routes Tests
===================================

Tests for proof generation and verification API endpoints.

Version: 0.1.0
"""

import base64

import pytest
from fastapi import status
from httpx import AsyncClient
from structlog.testing import CapturingLogger

import services.verification.main as verification_main
from services.verification.routes import proofs as proofs_routes


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def proof_payload(sample_csv: str) -> dict:
    """Solvent request: 100000 reserves against 85000 liabilities."""
    return {
        "entity_id": "0x1",
        "reserve_balances": [60000, 40000],
        "liabilities_csv": sample_csv,
        "block_height": 880412,
        "proof_timestamp": 1700000000,
    }


# =============================================================================
# Health
# =============================================================================


class TestHealth:
    """Tests for health endpoints."""

    @pytest.mark.asyncio
    async def test_health(self, verification_client: AsyncClient) -> None:
        response = await verification_client.get("/health")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["status"] == "healthy"
        assert data["service"] == "verification"
        assert data["components"]["registry"]["mode"] == "mock"
        assert data["components"]["hasher"]["modulus_bits"] == 254

    @pytest.mark.asyncio
    async def test_root(self, verification_client: AsyncClient) -> None:
        response = await verification_client.get("/")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["service"] == "zkReserves Verification Service"


# =============================================================================
# Proof Generation
# =============================================================================


class TestGenerateProof:
    """Tests for POST /api/v1/proofs/generate."""

    @pytest.mark.asyncio
    async def test_generate(self, verification_client: AsyncClient, proof_payload: dict) -> None:
        response = await verification_client.post("/api/v1/proofs/generate", json=proof_payload)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["success"] is True
        assert data["proof_commitment"].startswith("0x")
        assert data["public_inputs"]["reserve_ratio_band"] == 2
        assert data["public_inputs"]["block_height"] == 880412
        assert data["reserve_ratio_label"] == "110–120%"
        assert data["liability_count"] == 5
        assert [s["status"] for s in data["steps"]] == ["done"] * 5
        assert data["external_proof"] is None

    @pytest.mark.asyncio
    async def test_totals_not_published(self, verification_client: AsyncClient, proof_payload: dict) -> None:
        response = await verification_client.post("/api/v1/proofs/generate", json=proof_payload)

        data = response.json()
        assert "total_reserves" not in data
        assert "total_liabilities" not in data

    @pytest.mark.asyncio
    async def test_base64_csv(
        self,
        verification_client: AsyncClient,
        proof_payload: dict,
        sample_csv: str,
    ) -> None:
        plain = await verification_client.post("/api/v1/proofs/generate", json=proof_payload)

        encoded = dict(proof_payload)
        del encoded["liabilities_csv"]
        encoded["liabilities_csv_base64"] = base64.b64encode(sample_csv.encode()).decode()
        response = await verification_client.post("/api/v1/proofs/generate", json=encoded)

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["proof_commitment"] == plain.json()["proof_commitment"]

    @pytest.mark.asyncio
    async def test_insolvent(self, verification_client: AsyncClient, proof_payload: dict) -> None:
        proof_payload["reserve_balances"] = [80000]

        response = await verification_client.post("/api/v1/proofs/generate", json=proof_payload)

        assert response.status_code == 422
        data = response.json()
        assert data["success"] is False
        assert data["solvency_failure"] is True
        assert "80000" not in response.text

    @pytest.mark.asyncio
    async def test_malformed_csv(self, verification_client: AsyncClient, proof_payload: dict) -> None:
        proof_payload["liabilities_csv"] = "alice,-5"

        response = await verification_client.post("/api/v1/proofs/generate", json=proof_payload)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "negative" in response.json()["error"]

    @pytest.mark.asyncio
    async def test_empty_csv(self, verification_client: AsyncClient, proof_payload: dict) -> None:
        proof_payload["liabilities_csv"] = "# nothing\n"

        response = await verification_client.post("/api/v1/proofs/generate", json=proof_payload)

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    @pytest.mark.asyncio
    async def test_invalid_base64(self, verification_client: AsyncClient, proof_payload: dict) -> None:
        del proof_payload["liabilities_csv"]
        proof_payload["liabilities_csv_base64"] = "!!!not base64!!!"

        response = await verification_client.post("/api/v1/proofs/generate", json=proof_payload)

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    @pytest.mark.asyncio
    async def test_both_csv_sources_rejected(
        self,
        verification_client: AsyncClient,
        proof_payload: dict,
    ) -> None:
        proof_payload["liabilities_csv_base64"] = "YWxpY2UsMQ=="

        response = await verification_client.post("/api/v1/proofs/generate", json=proof_payload)

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_bad_entity_id(self, verification_client: AsyncClient, proof_payload: dict) -> None:
        proof_payload["entity_id"] = "kraken"

        response = await verification_client.post("/api/v1/proofs/generate", json=proof_payload)

        assert response.status_code == status.HTTP_400_BAD_REQUEST


# =============================================================================
# Liability Tree
# =============================================================================


class TestLiabilityTree:
    """Tests for liability root and inclusion path endpoints."""

    @pytest.mark.asyncio
    async def test_liability_root(self, verification_client: AsyncClient, sample_csv: str) -> None:
        response = await verification_client.post(
            "/api/v1/proofs/liability-root",
            json={"liabilities_csv": sample_csv},
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["leaf_count"] == 5
        assert data["tree_depth"] == 3
        assert data["total_liability"] == 85000

    @pytest.mark.asyncio
    async def test_inclusion_path_then_verify(self, verification_client: AsyncClient, sample_csv: str) -> None:
        response = await verification_client.post(
            "/api/v1/proofs/inclusion-path",
            json={"liabilities_csv": sample_csv, "account_id": "carol"},
        )

        assert response.status_code == status.HTTP_200_OK
        path_data = response.json()
        assert path_data["amount"] == 15000
        assert path_data["leaf_index"] == 2
        assert len(path_data["path"]) == 3

        verify = await verification_client.post(
            "/api/v1/verify/inclusion",
            json={
                "account_id": "carol",
                "amount": path_data["amount"],
                "path": path_data["path"],
                "liability_root": path_data["liability_merkle_root"],
            },
        )

        assert verify.status_code == status.HTTP_200_OK
        assert verify.json()["is_valid"] is True
        assert verify.json()["path_length"] == 3
        assert verify.json()["verification_method"] == "merkle_inclusion"

    @pytest.mark.asyncio
    async def test_inclusion_path_unknown_account(
        self,
        verification_client: AsyncClient,
        sample_csv: str,
    ) -> None:
        response = await verification_client.post(
            "/api/v1/proofs/inclusion-path",
            json={"liabilities_csv": sample_csv, "account_id": "mallory"},
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND


# =============================================================================
# Verification
# =============================================================================


class TestVerifyCommitment:
    """Tests for POST /api/v1/verify/commitment."""

    @pytest.mark.asyncio
    async def test_valid(self, verification_client: AsyncClient, proof_payload: dict) -> None:
        generated = (await verification_client.post("/api/v1/proofs/generate", json=proof_payload)).json()

        response = await verification_client.post(
            "/api/v1/verify/commitment",
            json={
                "proof": generated["proof_commitment"],
                "public_inputs": generated["public_inputs"],
            },
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["is_valid"] is True
        assert data["expected_commitment"] == generated["proof_commitment"]
        assert data["verification_method"] == "commitment_check"

    @pytest.mark.asyncio
    async def test_tampered_inputs(self, verification_client: AsyncClient, proof_payload: dict) -> None:
        generated = (await verification_client.post("/api/v1/proofs/generate", json=proof_payload)).json()
        tampered = dict(generated["public_inputs"], reserve_ratio_band=3)

        response = await verification_client.post(
            "/api/v1/verify/commitment",
            json={"proof": generated["proof_commitment"], "public_inputs": tampered},
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["is_valid"] is False

    @pytest.mark.asyncio
    async def test_malformed_inputs(self, verification_client: AsyncClient) -> None:
        response = await verification_client.post(
            "/api/v1/verify/commitment",
            json={"proof": "0x1", "public_inputs": {"entity_id": "0x1"}},
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST


class TestVerifyInclusion:
    """Tests for POST /api/v1/verify/inclusion."""

    @pytest.mark.asyncio
    async def test_path_as_json_string(self, verification_client: AsyncClient) -> None:
        root = (
            await verification_client.post(
                "/api/v1/proofs/liability-root",
                json={"liabilities_csv": "alice,5"},
            )
        ).json()["liability_merkle_root"]

        response = await verification_client.post(
            "/api/v1/verify/inclusion",
            json={"account_id": "alice", "amount": "5", "path": "[]", "liability_root": root},
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["is_valid"] is True

    @pytest.mark.asyncio
    async def test_wrong_amount(self, verification_client: AsyncClient) -> None:
        root = (
            await verification_client.post(
                "/api/v1/proofs/liability-root",
                json={"liabilities_csv": "alice,5"},
            )
        ).json()["liability_merkle_root"]

        response = await verification_client.post(
            "/api/v1/verify/inclusion",
            json={"account_id": "alice", "amount": 6, "path": [], "liability_root": root},
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["is_valid"] is False

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "path",
        [
            "[{",
            {"side": "left", "hash": "0x1"},
            [{"side": "up", "hash": "0x1"}],
            [{"side": "left", "hash": "zz"}],
        ],
    )
    async def test_malformed_path(self, verification_client: AsyncClient, path) -> None:
        response = await verification_client.post(
            "/api/v1/verify/inclusion",
            json={"account_id": "alice", "amount": 5, "path": path, "liability_root": "0x1"},
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST


# =============================================================================
# Log Privacy
# =============================================================================


class TestLogPrivacy:
    """Customer amounts never reach the service logs."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", ["/api/v1/proofs/generate", "/api/v1/proofs/liability-root"])
    async def test_rejected_amount_not_logged(
        self,
        verification_client: AsyncClient,
        proof_payload: dict,
        monkeypatch: pytest.MonkeyPatch,
        path: str,
    ) -> None:
        route_logger = CapturingLogger()
        app_logger = CapturingLogger()
        monkeypatch.setattr(proofs_routes, "logger", route_logger)
        monkeypatch.setattr(verification_main, "logger", app_logger)
        proof_payload["liabilities_csv"] = "alice,5\nbob,-123456"

        response = await verification_client.post(path, json=proof_payload)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert route_logger.calls
        assert "123456" not in response.text
        assert "123456" not in repr(route_logger.calls + app_logger.calls)
