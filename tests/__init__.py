"""
zkReserves Test Suite
=====================

Test organization:
- tests/unit/          - Unit tests for the engine and its collaborators
- tests/services/      - HTTP service tests (in-process, mock registry)

Run tests:
    pytest                          # All tests
    pytest tests/unit               # Unit tests only
"""
