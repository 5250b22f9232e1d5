"""
zkReserves Services
===================

HTTP services on top of the zkreserves engine.

Services:
- verification: proof generation, verification and entity status
"""

__all__ = [
    "verification",
]
