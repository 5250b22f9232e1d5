"""
Solvency Proof Verification
===========================

Verify published solvency claims:

- commitment: recompute H(public inputs) and compare with the claim
- inclusion: replay an account's Merkle path against a liability root
- external: ask the external verifier to check a succinct proof artifact

A mismatch is a result, not an error. Structural problems in the inputs
still raise StructuralInputError.

Version: 0.1.0
"""

import time
from collections.abc import Mapping
from typing import Any

from zkreserves.core.commitment import PublicInputs, verify_commitment
from zkreserves.core.encoding import parse_field_element, to_hex
from zkreserves.core.hashing import FieldHasher, get_field_hasher
from zkreserves.core.merkle import verify_inclusion
from zkreserves.logging import get_logger
from zkreserves.zk.client import ProverClient
from zkreserves.zk.models import ProofArtifact, VerificationResult


logger = get_logger(__name__)


def _elapsed_ms(start_time: float) -> int:
    return int((time.perf_counter() - start_time) * 1000)


class SolvencyVerifier:
    """
    Verifier for published solvency claims.

    Usage:
        verifier = SolvencyVerifier()
        result = verifier.verify_commitment(public_inputs, "0x2a...")
        if result.valid:
            ...
    """

    def __init__(
        self,
        hasher: FieldHasher | None = None,
        client: ProverClient | None = None,
    ) -> None:
        """
        Initialize the verifier.

        Args:
            hasher: Field hasher; defaults to the configured one
            client: External prover client, needed only for `verify_external`
        """
        self.hasher = hasher or get_field_hasher()
        self.client = client

    def verify_commitment(
        self,
        public_inputs: PublicInputs | Mapping[str, Any],
        claimed_commitment: int | str,
    ) -> VerificationResult:
        """
        Recompute the commitment from public inputs.

        Raises:
            StructuralInputError: If inputs or the claimed value are malformed
        """
        start_time = time.perf_counter()
        check = verify_commitment(public_inputs, claimed_commitment, self.hasher)

        logger.info(
            "commitment_verified",
            valid=check.valid,
        )

        return VerificationResult(
            valid=check.valid,
            method="commitment",
            commitment=to_hex(check.claimed_commitment),
            expected_commitment=check.expected_hex,
            verification_time_ms=_elapsed_ms(start_time),
            error=None if check.valid else "Commitment does not match public inputs",
        )

    def verify_inclusion(
        self,
        account_id: str,
        amount: int | str,
        path: Any,
        liability_root: int | str,
    ) -> VerificationResult:
        """
        Check an account's liability against a published root.

        Raises:
            StructuralInputError: If the path or values are malformed
        """
        start_time = time.perf_counter()
        valid = verify_inclusion(account_id, amount, path, liability_root, self.hasher)
        root = parse_field_element(liability_root, field="expected_root")

        logger.info(
            "inclusion_verified",
            valid=valid,
        )

        return VerificationResult(
            valid=valid,
            method="inclusion",
            commitment=to_hex(root),
            verification_time_ms=_elapsed_ms(start_time),
            error=None if valid else "Account is not included under this root",
        )

    async def verify_external(
        self,
        entity_id: str,
        artifact: ProofArtifact,
    ) -> VerificationResult:
        """
        Check a succinct proof with the external verifier.

        Raises:
            InfrastructureError: If the external verifier fails
            RuntimeError: If no prover client is configured
        """
        if self.client is None:
            raise RuntimeError("External verification requires a ProverClient")

        start_time = time.perf_counter()
        valid = await self.client.verify(entity_id, artifact)

        return VerificationResult(
            valid=valid,
            method="external",
            commitment=artifact.commitment,
            verification_time_ms=_elapsed_ms(start_time),
            error=None if valid else "External verifier rejected the proof",
        )


def check_commitment(
    public_inputs: PublicInputs | Mapping[str, Any],
    claimed_commitment: int | str,
) -> bool:
    """Convenience wrapper returning only the verdict."""
    return SolvencyVerifier().verify_commitment(public_inputs, claimed_commitment).valid


def check_inclusion(
    account_id: str,
    amount: int | str,
    path: Any,
    liability_root: int | str,
) -> bool:
    """Convenience wrapper returning only the verdict."""
    return SolvencyVerifier().verify_inclusion(account_id, amount, path, liability_root).valid
