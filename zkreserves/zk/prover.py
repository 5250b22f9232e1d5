"""
Solvency Proof Generation
=========================

Runs the commitment pipeline for one proving request:

1. Parse liability CSV
2. Build liability Merkle tree
3. Assert solvency (no proof for an insolvent entity)
4. Compute reserve ratio band
5. Compose the proof commitment

Optionally forwards the request to the external proving toolchain for a
succinct proof artifact.

Version: 0.1.0
"""

import time
from collections.abc import Callable
from dataclasses import dataclass, replace
from enum import Enum

from zkreserves.core.commitment import PublicInputs, compose_commitment
from zkreserves.core.encoding import to_hex
from zkreserves.core.hashing import FieldHasher, get_field_hasher
from zkreserves.core.liabilities import parse_liabilities
from zkreserves.core.merkle import build_liability_commitment
from zkreserves.core.solvency import classify_solvency
from zkreserves.errors import InsolvencyError, ParseError
from zkreserves.logging import get_logger
from zkreserves.zk.client import ProverClient
from zkreserves.zk.models import ProofOutput, ProofRequest, ProofWithArtifact


logger = get_logger(__name__)


class ProofStep(str, Enum):
    """Steps of proof generation, in order."""

    PARSE_LIABILITIES = "Parsing liability CSV"
    BUILD_TREE = "Building liability Merkle tree"
    ASSERT_SOLVENCY = "Running solvency assertion"
    CLASSIFY_BAND = "Computing reserve ratio band"
    COMPOSE_COMMITMENT = "Generating proof commitment"


class StepStatus(str, Enum):
    """Progress of one step."""

    PENDING = "pending"
    RUNNING = "running"
    DONE = "done"
    ERROR = "error"


@dataclass(frozen=True)
class StepProgress:
    """Status of one generation step."""

    step: ProofStep
    status: StepStatus
    detail: str | None = None


ProgressCallback = Callable[[list[StepProgress]], None]


class _ProgressTracker:
    """Keeps the step list and reports every change to a callback."""

    def __init__(self, callback: ProgressCallback | None) -> None:
        self._callback = callback
        self._steps = [StepProgress(step, StepStatus.PENDING) for step in ProofStep]

    def _index(self, step: ProofStep) -> int:
        return list(ProofStep).index(step)

    def update(self, step: ProofStep, status: StepStatus, detail: str | None = None) -> None:
        idx = self._index(step)
        self._steps[idx] = replace(self._steps[idx], status=status, detail=detail)
        if status == StepStatus.DONE and idx + 1 < len(self._steps):
            self._steps[idx + 1] = replace(self._steps[idx + 1], status=StepStatus.RUNNING)
        if self._callback is not None:
            self._callback(list(self._steps))

    @property
    def steps(self) -> list[StepProgress]:
        return list(self._steps)


class SolvencyProver:
    """
    Solvency proof generator.

    Usage:
        prover = SolvencyProver()

        output = prover.generate(
            ProofRequest(
                entity_id="0x1",
                reserve_balances=[60_000, 40_000],
                liabilities_csv="alice,20000\\nbob,30000",
                block_height=880412,
            )
        )
    """

    def __init__(
        self,
        hasher: FieldHasher | None = None,
        client: ProverClient | None = None,
    ) -> None:
        """
        Initialize the prover.

        Args:
            hasher: Field hasher; defaults to the configured one
            client: External prover client for succinct proof artifacts
        """
        self.hasher = hasher or get_field_hasher()
        self.client = client

    def generate(
        self,
        request: ProofRequest,
        on_progress: ProgressCallback | None = None,
    ) -> ProofOutput:
        """
        Generate the public commitment for a proving request.

        Args:
            request: Reserves, liabilities and reference block height
            on_progress: Called with the full step list after every change

        Returns:
            ProofOutput with the commitment and public inputs

        Raises:
            ParseError: If the liability CSV is malformed or empty
            InsolvencyError: If reserves are below liabilities
        """
        start_time = time.perf_counter()
        progress = _ProgressTracker(on_progress)
        progress.update(ProofStep.PARSE_LIABILITIES, StepStatus.RUNNING)

        try:
            liabilities = parse_liabilities(request.liabilities_csv)
        except ParseError as e:
            progress.update(ProofStep.PARSE_LIABILITIES, StepStatus.ERROR, str(e))
            raise
        progress.update(ProofStep.PARSE_LIABILITIES, StepStatus.DONE)

        liability_commitment, _ = build_liability_commitment(liabilities, self.hasher)
        progress.update(ProofStep.BUILD_TREE, StepStatus.DONE)

        try:
            band = classify_solvency(request.total_reserves, liability_commitment.total_liability)
        except InsolvencyError:
            progress.update(ProofStep.ASSERT_SOLVENCY, StepStatus.ERROR, "Reserves < Liabilities: INSOLVENT")
            logger.warning(
                "solvency_assertion_failed",
                entity_id=to_hex(request.entity_id),
                leaf_count=liability_commitment.leaf_count,
            )
            raise
        progress.update(ProofStep.ASSERT_SOLVENCY, StepStatus.DONE)
        progress.update(ProofStep.CLASSIFY_BAND, StepStatus.DONE)

        proof_timestamp = request.proof_timestamp
        if proof_timestamp is None:
            proof_timestamp = int(time.time())

        public_inputs = PublicInputs(
            entity_id=request.entity_id,
            block_height=request.block_height,
            liability_root=liability_commitment.root,
            band=band,
            proof_timestamp=proof_timestamp,
        )
        commitment = compose_commitment(public_inputs, self.hasher)
        progress.update(ProofStep.COMPOSE_COMMITMENT, StepStatus.DONE)

        generation_time_ms = int((time.perf_counter() - start_time) * 1000)

        logger.info(
            "solvency_commitment_generated",
            entity_id=to_hex(request.entity_id),
            block_height=request.block_height,
            band=int(band),
            leaf_count=liability_commitment.leaf_count,
            generation_time_ms=generation_time_ms,
        )

        return ProofOutput(
            proof_commitment=commitment,
            public_inputs=public_inputs,
            liability_count=liability_commitment.leaf_count,
            total_reserves=request.total_reserves,
            total_liabilities=liability_commitment.total_liability,
            generation_time_ms=generation_time_ms,
        )

    async def prove(
        self,
        request: ProofRequest,
        on_progress: ProgressCallback | None = None,
    ) -> ProofWithArtifact:
        """
        Generate the commitment and, if a client is configured, request a
        succinct proof artifact from the external prover.

        The commitment is computed first, so an insolvent entity never
        reaches the external prover.

        Raises:
            ParseError: If the liability CSV is malformed or empty
            InsolvencyError: If reserves are below liabilities
            InfrastructureError: If the external prover fails
        """
        output = self.generate(request, on_progress)
        if self.client is None:
            return ProofWithArtifact(output=output)

        artifact = await self.client.prove(
            entity_id=to_hex(request.entity_id),
            wallet_balances=request.reserve_balances,
            liabilities_csv=request.liabilities_csv,
            block_height=request.block_height,
        )
        return ProofWithArtifact(output=output, artifact=artifact)
