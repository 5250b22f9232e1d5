"""
Shared Models
=============

Pydantic response models shared across zkReserves services.
"""

from zkreserves.models.common import ErrorResponse, HealthResponse


__all__ = [
    "ErrorResponse",
    "HealthResponse",
]
