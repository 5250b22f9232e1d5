"""
Commitment and Verification Engine
==================================

Pure, synchronous functions over immutable inputs:

    parse_liabilities -> MerkleTree -> classify_solvency -> compose_commitment

and the verifiers that replay them:

    verify_inclusion, verify_commitment, classify_proof_status

Usage:
    from zkreserves.core import (
        PublicInputs,
        classify_solvency,
        compose_commitment,
        compute_liability_root,
    )

    liabilities = compute_liability_root("alice,20000\\nbob,30000")
    band = classify_solvency(60000, liabilities.total_liability)
    commitment = compose_commitment(
        PublicInputs(
            entity_id=0x1,
            block_height=880412,
            liability_root=liabilities.root,
            band=band,
            proof_timestamp=1700000000,
        )
    )
"""

from zkreserves.core.commitment import (
    CommitmentCheck,
    PublicInputs,
    compose_commitment,
    compute_entity_id,
    parse_public_inputs,
    verify_commitment,
)
from zkreserves.core.encoding import (
    decode_short_string,
    encode_account_id,
    encode_short_string,
    parse_field_element,
    to_hex,
    to_padded_hex,
)
from zkreserves.core.hashing import FieldHasher, Sha256FieldHasher, get_field_hasher
from zkreserves.core.liabilities import (
    MAX_AMOUNT,
    LiabilityRecord,
    ParsedLiabilities,
    parse_liabilities,
)
from zkreserves.core.lifecycle import (
    EXPIRING_THRESHOLD_SECONDS,
    EcosystemHealth,
    ProofRecord,
    ProofStatus,
    classify_proof_status,
    days_until_expiry,
    summarize_ecosystem,
)
from zkreserves.core.merkle import (
    LiabilityCommitment,
    MerkleTree,
    Side,
    SiblingPathEntry,
    build_liability_commitment,
    compute_liability_root,
    compute_merkle_root,
    parse_sibling_path,
    verify_inclusion,
)
from zkreserves.core.solvency import ReserveBand, classify_solvency


__all__ = [
    # Parsing
    "LiabilityRecord",
    "ParsedLiabilities",
    "MAX_AMOUNT",
    "parse_liabilities",
    # Hashing
    "FieldHasher",
    "Sha256FieldHasher",
    "get_field_hasher",
    "encode_account_id",
    "encode_short_string",
    "decode_short_string",
    "parse_field_element",
    "to_hex",
    "to_padded_hex",
    # Merkle
    "LiabilityCommitment",
    "MerkleTree",
    "Side",
    "SiblingPathEntry",
    "build_liability_commitment",
    "compute_liability_root",
    "compute_merkle_root",
    "parse_sibling_path",
    "verify_inclusion",
    # Solvency
    "ReserveBand",
    "classify_solvency",
    # Commitment
    "CommitmentCheck",
    "PublicInputs",
    "compose_commitment",
    "compute_entity_id",
    "parse_public_inputs",
    "verify_commitment",
    # Lifecycle
    "EXPIRING_THRESHOLD_SECONDS",
    "EcosystemHealth",
    "ProofRecord",
    "ProofStatus",
    "classify_proof_status",
    "days_until_expiry",
    "summarize_ecosystem",
]
