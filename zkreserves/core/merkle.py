"""
Liability Merkle Tree
=====================

Builds the liability Merkle root and verifies single-account inclusion.

Levels are folded bottom-up with the field hasher's two-input hash. When a
level has odd length its last entry is paired with itself; it is never
dropped or padded with zero. A single leaf is its own root.

Version: 0.1.0
"""

import json
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from zkreserves.core.encoding import parse_field_element, to_hex
from zkreserves.core.hashing import FieldHasher, get_field_hasher
from zkreserves.core.liabilities import ParsedLiabilities, parse_liabilities
from zkreserves.errors import StructuralInputError
from zkreserves.logging import get_logger


logger = get_logger(__name__)


class Side(str, Enum):
    """Position of a sibling relative to the running hash."""

    LEFT = "left"
    RIGHT = "right"


class SiblingPathEntry(BaseModel):
    """One step of an inclusion path, from leaf towards root."""

    model_config = ConfigDict(frozen=True)

    side: Side
    hash: int

    @field_validator("side", mode="before")
    @classmethod
    def normalize_side(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("hash", mode="before")
    @classmethod
    def parse_hash(cls, v: Any) -> int:
        return parse_field_element(v, field="hash")

    def to_wire(self) -> dict[str, str]:
        """Convert to `{"side": ..., "hash": "0x..."}`."""
        return {"side": self.side.value, "hash": to_hex(self.hash)}


@dataclass(frozen=True)
class LiabilityCommitment:
    """Merkle root over the liability leaves plus their count and exact total."""

    root: int
    leaf_count: int
    total_liability: int

    @property
    def root_hex(self) -> str:
        return to_hex(self.root)


def parse_sibling_path(raw: Any) -> list[SiblingPathEntry]:
    """
    Parse an inclusion path from entries, wire dicts or a JSON string.

    Raises:
        StructuralInputError: If the path or any entry is malformed
    """
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError as e:
            raise StructuralInputError(f"invalid JSON: {e.msg}", field="path") from e

    if not isinstance(raw, (list, tuple)):
        raise StructuralInputError("expected an array of path entries", field="path")

    entries: list[SiblingPathEntry] = []
    for index, item in enumerate(raw):
        if isinstance(item, SiblingPathEntry):
            entries.append(item)
            continue
        if not isinstance(item, dict):
            raise StructuralInputError("expected an object", field=f"path[{index}]")
        try:
            entries.append(SiblingPathEntry.model_validate(item))
        except ValidationError as e:
            first = e.errors()[0]
            location = ".".join(str(part) for part in first["loc"]) or "entry"
            raise StructuralInputError(first["msg"], field=f"path[{index}].{location}") from e
    return entries


class MerkleTree:
    """
    Merkle tree over an ordered, non-empty sequence of leaf hashes.

    Usage:
        tree = MerkleTree(leaf_hashes)
        root = tree.root
        path = tree.inclusion_path(2)
    """

    def __init__(self, leaves: Sequence[int], hasher: FieldHasher | None = None) -> None:
        if not leaves:
            raise StructuralInputError("cannot build a Merkle tree without leaves", field="leaves")

        self.hasher = hasher or get_field_hasher()
        for index, leaf in enumerate(leaves):
            self.hasher.check_element(leaf, field=f"leaves[{index}]")

        levels = [tuple(leaves)]
        while len(levels[-1]) > 1:
            levels.append(self._next_level(levels[-1]))
        self._levels: tuple[tuple[int, ...], ...] = tuple(levels)

    def _next_level(self, level: tuple[int, ...]) -> tuple[int, ...]:
        parents = []
        for i in range(0, len(level), 2):
            left = level[i]
            right = level[i + 1] if i + 1 < len(level) else left
            parents.append(self.hasher.hash_pair(left, right))
        return tuple(parents)

    @classmethod
    def from_liabilities(
        cls,
        liabilities: ParsedLiabilities,
        hasher: FieldHasher | None = None,
    ) -> "MerkleTree":
        """Build the tree over the leaf hashes of parsed liability records."""
        hasher = hasher or get_field_hasher()
        leaves = [hasher.leaf_hash(r.account_id, r.amount) for r in liabilities.records]
        return cls(leaves, hasher)

    @property
    def levels(self) -> tuple[tuple[int, ...], ...]:
        """All levels, leaves first and the singleton root last."""
        return self._levels

    @property
    def leaves(self) -> tuple[int, ...]:
        return self._levels[0]

    @property
    def leaf_count(self) -> int:
        return len(self._levels[0])

    @property
    def depth(self) -> int:
        return len(self._levels) - 1

    @property
    def root(self) -> int:
        return self._levels[-1][0]

    def inclusion_path(self, index: int) -> list[SiblingPathEntry]:
        """
        Sibling path for the leaf at `index`, ordered from leaf to root.

        A leaf without a right neighbour lists itself as its sibling.
        """
        if not 0 <= index < self.leaf_count:
            raise IndexError(f"leaf index {index} out of range for {self.leaf_count} leaves")

        path: list[SiblingPathEntry] = []
        current = index
        for level in self._levels[:-1]:
            if current % 2 == 0:
                sibling = level[current + 1] if current + 1 < len(level) else level[current]
                path.append(SiblingPathEntry(side=Side.RIGHT, hash=sibling))
            else:
                path.append(SiblingPathEntry(side=Side.LEFT, hash=level[current - 1]))
            current //= 2
        return path


def compute_merkle_root(leaves: Sequence[int], hasher: FieldHasher | None = None) -> int:
    """Compute the Merkle root of an ordered, non-empty leaf sequence."""
    return MerkleTree(leaves, hasher).root


def build_liability_commitment(
    liabilities: ParsedLiabilities,
    hasher: FieldHasher | None = None,
) -> tuple[LiabilityCommitment, MerkleTree]:
    """Hash parsed liabilities into a tree and summarize it."""
    tree = MerkleTree.from_liabilities(liabilities, hasher)
    commitment = LiabilityCommitment(
        root=tree.root,
        leaf_count=tree.leaf_count,
        total_liability=liabilities.total_liability,
    )
    logger.debug(
        "liability_tree_built",
        leaf_count=tree.leaf_count,
        depth=tree.depth,
    )
    return commitment, tree


def compute_liability_root(text: str, hasher: FieldHasher | None = None) -> LiabilityCommitment:
    """Parse liability text and compute its root, count and total."""
    commitment, _ = build_liability_commitment(parse_liabilities(text), hasher)
    return commitment


def verify_inclusion(
    account_id: str,
    amount: int | str,
    path: Any,
    expected_root: int | str,
    hasher: FieldHasher | None = None,
) -> bool:
    """
    Check that (account_id, amount) is a leaf under `expected_root`.

    Args:
        account_id: Account identifier as it appeared in the liability input
        amount: Liability amount in the smallest unit
        path: Sibling path (entries, wire dicts or JSON string)
        expected_root: Published liability root (int or hex string)
        hasher: Field hasher; defaults to the configured one

    Returns:
        True if the recomputed root equals `expected_root`

    Raises:
        StructuralInputError: On malformed path entries or non-numeric values
    """
    if not isinstance(account_id, str):
        raise StructuralInputError("expected a string", field="account_id")

    hasher = hasher or get_field_hasher()
    amount_value = parse_field_element(amount, field="amount")
    root = parse_field_element(expected_root, field="expected_root")
    entries = parse_sibling_path(path)

    running = hasher.leaf_hash(account_id, amount_value)
    for index, entry in enumerate(entries):
        hasher.check_element(entry.hash, field=f"path[{index}].hash")
        if entry.side is Side.LEFT:
            running = hasher.hash_pair(entry.hash, running)
        else:
            running = hasher.hash_pair(running, entry.hash)

    return running == root
