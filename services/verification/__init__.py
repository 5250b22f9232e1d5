"""
Verification Service
====================

Solvency proof generation, verification and registry status.

This service provides:
- Liability Merkle roots and per-account inclusion paths
- Solvency proof commitments with a public reserve ratio band
- Commitment and inclusion verification for auditors and customers
- Entity registration and proof lifecycle status

Version: 0.1.0
"""

__version__ = "0.1.0"
