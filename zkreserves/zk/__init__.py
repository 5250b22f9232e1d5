"""
Solvency Proof Module
=====================

Proof generation and verification on top of the commitment engine.

Usage:
    from zkreserves.zk import ProofRequest, SolvencyProver, SolvencyVerifier

    # Generate a commitment
    prover = SolvencyProver()
    output = prover.generate(
        ProofRequest(
            entity_id="0x1",
            reserve_balances=[100000],
            liabilities_csv="alice,50000",
            block_height=880412,
        )
    )

    # Verify it
    result = SolvencyVerifier().verify_commitment(
        output.public_inputs,
        output.proof_commitment,
    )

Version: 0.1.0
"""

from zkreserves.zk.client import ProverClient
from zkreserves.zk.models import (
    ProofArtifact,
    ProofOutput,
    ProofRequest,
    ProofWithArtifact,
    VerificationResult,
)
from zkreserves.zk.prover import (
    ProofStep,
    SolvencyProver,
    StepProgress,
    StepStatus,
)
from zkreserves.zk.verifier import (
    SolvencyVerifier,
    check_commitment,
    check_inclusion,
)


__all__ = [
    # Prover
    "SolvencyProver",
    "ProofStep",
    "StepStatus",
    "StepProgress",
    "ProverClient",
    # Verifier
    "SolvencyVerifier",
    "check_commitment",
    "check_inclusion",
    # Models
    "ProofRequest",
    "ProofOutput",
    "ProofArtifact",
    "ProofWithArtifact",
    "VerificationResult",
]
