"""
External Prover Client
======================

HTTP client for the external proving toolchain, which turns a proving
request into an opaque succinct proof and checks such proofs.

    POST /api/prove   {entityId, walletBalances, liabilitiesCSV, btcBlockHeight}
    POST /api/verify  {entityId, starkProofBytecode}

Version: 0.1.0
"""

from typing import Any

import httpx
from pydantic import ValidationError
from tenacity import (
    AsyncRetrying,
    RetryError,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from zkreserves.config import settings
from zkreserves.config.settings import ProverSettings
from zkreserves.errors import InfrastructureError
from zkreserves.logging import get_logger
from zkreserves.zk.models import ProofArtifact


logger = get_logger(__name__)

RETRYABLE_ERRORS = (httpx.ConnectError, httpx.TimeoutException)


class ProverClient:
    """
    Async client for the external prover API.

    Usage:
        async with ProverClient() as client:
            artifact = await client.prove(
                entity_id="0x1",
                wallet_balances=[100000],
                liabilities_csv="alice,50000",
                block_height=880412,
            )
            verified = await client.verify("0x1", artifact)
    """

    def __init__(
        self,
        config: ProverSettings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            config: Prover settings (default from settings)
            transport: Optional httpx transport, used by tests
        """
        self.config = config or settings.prover
        self._client = httpx.AsyncClient(
            base_url=self.config.api_url,
            timeout=httpx.Timeout(self.config.timeout_seconds),
            transport=transport,
        )

        logger.debug(
            "prover_client_initialized",
            api_url=self.config.api_url,
        )

    async def __aenter__(self) -> "ProverClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def _post(self, path: str, payload: dict[str, Any]) -> dict[str, Any]:
        """POST JSON with retries on connection errors and timeouts."""
        retrying = AsyncRetrying(
            retry=retry_if_exception_type(RETRYABLE_ERRORS),
            stop=stop_after_attempt(self.config.max_retries),
            wait=wait_exponential(multiplier=self.config.retry_backoff_seconds, max=30),
            before_sleep=lambda retry_state: logger.warning(
                "prover_retry",
                path=path,
                attempt=retry_state.attempt_number,
            ),
        )

        try:
            async for attempt in retrying:
                with attempt:
                    response = await self._client.post(path, json=payload)
        except RetryError as e:
            raise InfrastructureError(f"Prover API unreachable at {self.config.api_url}") from e
        except httpx.HTTPError as e:
            raise InfrastructureError(f"Prover API unreachable at {self.config.api_url}") from e

        if response.status_code >= 400:
            logger.error(
                "prover_request_failed",
                path=path,
                status_code=response.status_code,
            )
            raise InfrastructureError(
                f"Prover API failed ({response.status_code}): {response.text}"
            )

        try:
            return response.json()
        except ValueError as e:
            raise InfrastructureError("Prover API returned invalid JSON") from e

    async def prove(
        self,
        entity_id: str,
        wallet_balances: list[int],
        liabilities_csv: str,
        block_height: int,
    ) -> ProofArtifact:
        """
        Request a succinct proof.

        Returns:
            ProofArtifact from the response's `proofData`

        Raises:
            InfrastructureError: If the prover is unreachable or fails
        """
        data = await self._post(
            "/api/prove",
            {
                "entityId": entity_id,
                "walletBalances": wallet_balances,
                "liabilitiesCSV": liabilities_csv,
                "btcBlockHeight": block_height,
            },
        )

        proof_data = data.get("proofData")
        if not isinstance(proof_data, dict):
            raise InfrastructureError("Prover API response has no proofData")

        try:
            artifact = ProofArtifact.model_validate({**proof_data, "message": data.get("message")})
        except ValidationError as e:
            raise InfrastructureError("Prover API returned a malformed proofData") from e
        logger.info("external_proof_received", entity_id=entity_id)
        return artifact

    async def verify(self, entity_id: str, artifact: ProofArtifact) -> bool:
        """
        Check a succinct proof with the external verifier.

        Raises:
            InfrastructureError: If the verifier is unreachable or fails
        """
        data = await self._post(
            "/api/verify",
            {
                "entityId": entity_id,
                "starkProofBytecode": artifact.stark_proof,
            },
        )
        verified = bool(data.get("verified", False))
        logger.info("external_proof_checked", entity_id=entity_id, verified=verified)
        return verified
