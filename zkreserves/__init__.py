"""
zkReserves
==========

Proof-of-reserves commitment and verification engine.

Modules:
    - core: Liability parsing, Merkle trees, solvency bands, commitments,
      inclusion proofs and proof lifecycle classification (pure functions)
    - zk: Proof orchestration and the external prover client
    - registry: Proof registry interface (mock/testnet/mainnet)
    - config: Configuration management with Pydantic Settings
    - logging: Structured logging with structlog
    - models: Shared Pydantic API models

Version: 0.1.0
"""

__version__ = "0.1.0"
__author__ = "zkReserves Team"

from zkreserves.config import settings
from zkreserves.logging import get_logger, setup_logging

__all__ = [
    "settings",
    "get_logger",
    "setup_logging",
    "__version__",
]
