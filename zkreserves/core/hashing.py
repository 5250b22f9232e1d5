"""
Field Hashing
=============

The single hash family used for leaves, internal Merkle nodes, entity ids
and proof commitments.

Producers and verifiers must use the same hasher and modulus. The concrete
function is SHA-256 over fixed-width big-endian field elements followed by
the element count, reduced modulo the configured field:

    H(e_0, ..., e_{n-1}) = SHA256(e_0 || ... || e_{n-1} || n) mod p

Version: 0.1.0
"""

import hashlib
from abc import ABC, abstractmethod
from collections.abc import Sequence
from functools import lru_cache

from zkreserves.config import settings
from zkreserves.config.settings import BN254_SCALAR_FIELD
from zkreserves.core.encoding import encode_account_id
from zkreserves.errors import StructuralInputError


class FieldHasher(ABC):
    """
    Collision-resistant hash over ordered tuples of field integers.

    Subclasses fix the hash function; `hash_pair` is the two-input hash
    used for leaves and internal nodes.
    """

    def __init__(self, modulus: int) -> None:
        if modulus <= 2**64:
            raise ValueError("Hash modulus must exceed 2**64")
        self.modulus = modulus

    @property
    @abstractmethod
    def name(self) -> str:
        """Identifier of the hash function."""
        ...

    @abstractmethod
    def _digest(self, values: Sequence[int]) -> int:
        """Hash already range-checked values to an integer."""
        ...

    def check_element(self, value: int, field: str = "value") -> int:
        """Ensure a value lies in [0, modulus)."""
        if isinstance(value, bool) or not isinstance(value, int):
            raise StructuralInputError(
                f"expected an integer field element, got {type(value).__name__}",
                field=field,
            )
        if not 0 <= value < self.modulus:
            raise StructuralInputError("outside the hash field range", field=field)
        return value

    def hash_many(self, values: Sequence[int]) -> int:
        """Hash an ordered tuple of field integers to one field integer."""
        for i, value in enumerate(values):
            self.check_element(value, field=f"element[{i}]")
        return self._digest(values) % self.modulus

    def hash_pair(self, left: int, right: int) -> int:
        """Two-input hash used for leaves and Merkle nodes."""
        return self.hash_many((left, right))

    def encode_account_id(self, account_id: str) -> int:
        """Encode an account identifier into this hasher's field."""
        return encode_account_id(account_id, self.modulus)

    def leaf_hash(self, account_id: str, amount: int) -> int:
        """Hash one (account_id, amount) liability record."""
        return self.hash_pair(self.encode_account_id(account_id), amount)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(modulus=0x{self.modulus:x})"


class Sha256FieldHasher(FieldHasher):
    """SHA-256 over fixed-width big-endian elements and the element count."""

    def __init__(self, modulus: int = BN254_SCALAR_FIELD) -> None:
        super().__init__(modulus)
        self.element_size = (modulus.bit_length() + 7) // 8

    @property
    def name(self) -> str:
        return "sha256"

    def _digest(self, values: Sequence[int]) -> int:
        digest = hashlib.sha256()
        for value in values:
            digest.update(value.to_bytes(self.element_size, "big"))
        digest.update(len(values).to_bytes(self.element_size, "big"))
        return int.from_bytes(digest.digest(), "big")


HASHERS: dict[str, type[FieldHasher]] = {
    "sha256": Sha256FieldHasher,
}


@lru_cache
def get_field_hasher() -> FieldHasher:
    """
    Get the configured field hasher.

    Returns:
        FieldHasher built from `settings.hash`
    """
    algorithm = settings.hash.algorithm.lower()
    if algorithm not in HASHERS:
        raise ValueError(f"Unknown hash algorithm: {settings.hash.algorithm}")
    return HASHERS[algorithm](settings.hash.modulus)
