"""
Liability Parser
================

Turns raw `account_id,amount` text into an ordered list of liability
records and their exact total.

Input rules:
- blank lines and lines starting with `#` are ignored
- a first line containing "account" (any case) is a header
- only the first two comma-separated fields are used
- rows with fewer than two fields are skipped
- amounts are integers in the smallest unit (satoshi)

Version: 0.1.0
"""

import re
from dataclasses import dataclass

from zkreserves.errors import (
    AmountOverflowError,
    EmptyInputError,
    InvalidAmountError,
    NoValidRowsError,
)


MAX_AMOUNT = 2**64 - 1
MAX_TOTAL_LIABILITY = 2**128 - 1

_NON_DIGITS = re.compile(r"[^0-9]")


@dataclass(frozen=True)
class LiabilityRecord:
    """One customer liability."""

    account_id: str
    amount: int


@dataclass(frozen=True)
class ParsedLiabilities:
    """Ordered liability records with their exact sum."""

    records: tuple[LiabilityRecord, ...]
    total_liability: int

    def __len__(self) -> int:
        return len(self.records)

    def find(self, account_id: str) -> int | None:
        """Index of the first record for an account, or None."""
        for index, record in enumerate(self.records):
            if record.account_id == account_id:
                return index
        return None


def parse_amount(raw: str, line: int | None = None) -> int:
    """
    Parse a liability amount.

    Negative and fractional values are rejected. Any other non-digit
    characters (thousands separators, currency symbols) are stripped.

    Raises:
        InvalidAmountError: If the amount is negative, fractional or empty
        AmountOverflowError: If the amount exceeds MAX_AMOUNT
    """
    text = raw.strip()
    if "-" in text:
        raise InvalidAmountError("negative amount", line=line)
    if "." in text:
        raise InvalidAmountError("fractional amount; use the smallest unit", line=line)

    digits = _NON_DIGITS.sub("", text)
    if not digits:
        raise InvalidAmountError("amount contains no digits", line=line)

    amount = int(digits)
    if amount > MAX_AMOUNT:
        raise AmountOverflowError("amount exceeds 64-bit range", line=line)
    return amount


def _data_lines(text: str) -> list[tuple[int, str]]:
    """Return (line_number, line) pairs with blanks, comments and header removed."""
    retained = []
    for number, raw_line in enumerate(text.splitlines(), start=1):
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        retained.append((number, line))

    if retained and "account" in retained[0][1].lower():
        retained = retained[1:]
    return retained


def parse_liabilities(text: str) -> ParsedLiabilities:
    """
    Parse liability CSV text.

    Args:
        text: UTF-8 text with one `account_id,amount` row per line

    Returns:
        ParsedLiabilities in input order

    Raises:
        EmptyInputError: If no data rows remain after filtering
        NoValidRowsError: If every row has fewer than two fields
        InvalidAmountError: If an amount cannot be parsed
        AmountOverflowError: If an amount or the total overflows
    """
    rows = _data_lines(text)
    if not rows:
        raise EmptyInputError("no data rows found in liability input")

    records: list[LiabilityRecord] = []
    total = 0

    for number, line in rows:
        parts = [p.strip() for p in line.split(",")]
        if len(parts) < 2:
            continue

        account_id, raw_amount = parts[0], parts[1]
        amount = parse_amount(raw_amount, line=number)

        total += amount
        if total > MAX_TOTAL_LIABILITY:
            raise AmountOverflowError("total liability exceeds 128-bit range", line=number)

        records.append(LiabilityRecord(account_id=account_id, amount=amount))

    if not records:
        raise NoValidRowsError("no valid rows parsed from liability input")

    return ParsedLiabilities(records=tuple(records), total_liability=total)
