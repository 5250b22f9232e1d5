"""
Verification Service Routes
===========================

API route handlers for the verification service.
"""

from services.verification.routes import entities, proofs, verification


__all__ = ["entities", "proofs", "verification"]
