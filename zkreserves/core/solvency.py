"""
Solvency Classifier
===================

Maps total reserves and total liabilities to a coarse public band.
The exact ratio is never returned; only the band is public.

Version: 0.1.0
"""

from enum import IntEnum

from zkreserves.errors import InsolvencyError, StructuralInputError


class ReserveBand(IntEnum):
    """Public reserve ratio band."""

    INSOLVENT = 0
    COVERED = 1  # 100-110%
    BUFFERED = 2  # 110-120%
    OVERCOLLATERALIZED = 3  # >= 120%

    @property
    def label(self) -> str:
        return BAND_LABELS[self]


BAND_LABELS = {
    ReserveBand.INSOLVENT: "—",
    ReserveBand.COVERED: "100–110%",
    ReserveBand.BUFFERED: "110–120%",
    ReserveBand.OVERCOLLATERALIZED: "≥ 120%",
}

# Upper bounds (exclusive) of the ratio percentage for each band
BAND_CEILINGS = (
    (110, ReserveBand.COVERED),
    (120, ReserveBand.BUFFERED),
)


def classify_solvency(total_reserves: int, total_liabilities: int) -> ReserveBand:
    """
    Classify solvency into a public band.

    Uses integer arithmetic only: ratio_pct = reserves * 100 // liabilities.

    Args:
        total_reserves: Sum of reserve balances (smallest unit)
        total_liabilities: Sum of liabilities (same unit)

    Returns:
        COVERED, BUFFERED or OVERCOLLATERALIZED

    Raises:
        InsolvencyError: If reserves are below liabilities
        StructuralInputError: If either total is negative or not an integer
    """
    for name, value in (("total_reserves", total_reserves), ("total_liabilities", total_liabilities)):
        if isinstance(value, bool) or not isinstance(value, int):
            raise StructuralInputError("expected an integer", field=name)
        if value < 0:
            raise StructuralInputError("must be non-negative", field=name)

    if total_reserves < total_liabilities:
        raise InsolvencyError(total_reserves, total_liabilities)

    if total_liabilities == 0:
        return ReserveBand.OVERCOLLATERALIZED

    ratio_pct = total_reserves * 100 // total_liabilities
    for ceiling, band in BAND_CEILINGS:
        if ratio_pct < ceiling:
            return band
    return ReserveBand.OVERCOLLATERALIZED
