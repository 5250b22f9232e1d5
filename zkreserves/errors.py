"""
Error Types
===========

Exception hierarchy shared by the core engine and its collaborators.

- ParseError: malformed or empty liability input (user must fix input)
- InsolvencyError: valid input, but reserves do not cover liabilities
- StructuralInputError: malformed path entries, hashes or public inputs
- EntityAlreadyRegisteredError: duplicate entity registration
- InfrastructureError: external prover or registry failures

A verification mismatch is never raised; verifiers return a boolean.

Version: 0.1.0
"""


class ZkReservesError(Exception):
    """Base class for all zkReserves errors."""


class ParseError(ZkReservesError, ValueError):
    """Liability input could not be parsed."""

    def __init__(self, message: str, line: int | None = None) -> None:
        self.line = line
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)


class EmptyInputError(ParseError):
    """No data rows remain after dropping blanks, comments and the header."""


class NoValidRowsError(ParseError):
    """Every data row had fewer than two comma-separated fields."""


class InvalidAmountError(ParseError):
    """An amount field is negative, fractional or has no digits."""


class AmountOverflowError(ParseError):
    """An amount or the running total exceeds its fixed-width range."""


class InsolvencyError(ZkReservesError):
    """
    Total reserves are below total liabilities.

    This is an expected business outcome: no public inputs or commitment
    can be produced. The totals are kept for the caller and must not be
    published or logged.
    """

    def __init__(self, total_reserves: int, total_liabilities: int) -> None:
        self.total_reserves = total_reserves
        self.total_liabilities = total_liabilities
        super().__init__("Reserves do not cover liabilities; no solvency proof can be produced")


class StructuralInputError(ZkReservesError, ValueError):
    """An input violates the structural contract (path entry, hash, field range)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        self.field = field
        if field is not None:
            message = f"{field}: {message}"
        super().__init__(message)


class EntityAlreadyRegisteredError(ZkReservesError):
    """The registry already holds an entity with this id."""

    def __init__(self, entity_id: int) -> None:
        self.entity_id = entity_id
        super().__init__(f"entity already registered: 0x{entity_id:x}")


class InfrastructureError(ZkReservesError):
    """An external collaborator (prover, registry) failed."""
