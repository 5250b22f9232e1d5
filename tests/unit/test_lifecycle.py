"""
Unit tests for proof lifecycle classification.
"""

import pytest

from zkreserves.core.lifecycle import (
    EXPIRING_THRESHOLD_SECONDS,
    ProofRecord,
    ProofStatus,
    classify_proof_status,
    days_until_expiry,
    seconds_until_expiry,
    summarize_ecosystem,
)
from zkreserves.core.solvency import ReserveBand
from zkreserves.errors import StructuralInputError


NOW = 1_700_000_000
DAY = 86400


def make_record(expiry_offset: int, is_valid: bool = True, proof_timestamp: int = NOW - DAY) -> ProofRecord:
    return ProofRecord(
        entity_id=1,
        block_height=880412,
        liability_root=0xABC,
        band=ReserveBand.OVERCOLLATERALIZED,
        proof_timestamp=proof_timestamp,
        is_valid=is_valid,
        expiry_timestamp=NOW + expiry_offset,
        submission_count=1,
    )


class TestClassifyProofStatus:
    """Tests for status classification."""

    def test_active(self) -> None:
        assert classify_proof_status(make_record(10 * DAY), NOW) == ProofStatus.ACTIVE

    def test_expiring_inside_window(self) -> None:
        assert classify_proof_status(make_record(2 * DAY), NOW) == ProofStatus.EXPIRING

    def test_window_boundary(self) -> None:
        """Exactly 72h remaining is still active."""
        assert classify_proof_status(make_record(EXPIRING_THRESHOLD_SECONDS), NOW) == ProofStatus.ACTIVE
        assert classify_proof_status(make_record(EXPIRING_THRESHOLD_SECONDS - 1), NOW) == ProofStatus.EXPIRING

    def test_expires_at_now_is_expiring(self) -> None:
        assert classify_proof_status(make_record(0), NOW) == ProofStatus.EXPIRING

    def test_expired(self) -> None:
        assert classify_proof_status(make_record(-1), NOW) == ProofStatus.EXPIRED

    def test_never_proven_default_record(self) -> None:
        assert classify_proof_status(ProofRecord(), NOW) == ProofStatus.NEVER_PROVEN

    def test_invalid_record_is_never_proven(self) -> None:
        assert classify_proof_status(make_record(10 * DAY, is_valid=False), NOW) == ProofStatus.NEVER_PROVEN

    def test_zero_timestamp_is_never_proven(self) -> None:
        assert classify_proof_status(make_record(10 * DAY, proof_timestamp=0), NOW) == ProofStatus.NEVER_PROVEN

    def test_custom_threshold(self) -> None:
        record = make_record(2 * DAY)

        assert classify_proof_status(record, NOW, threshold=DAY) == ProofStatus.ACTIVE

    def test_status_values(self) -> None:
        assert [s.value for s in ProofStatus] == ["NeverProven", "Active", "Expiring", "Expired"]


class TestExpiry:
    """Tests for expiry countdowns."""

    def test_days_until_expiry(self) -> None:
        assert days_until_expiry(make_record(3 * DAY + 5), NOW) == 3

    def test_expired_is_zero(self) -> None:
        assert days_until_expiry(make_record(-DAY), NOW) == 0
        assert seconds_until_expiry(make_record(-DAY), NOW) == 0


class TestPositionalRecord:
    """Tests for decoding the registry's positional record."""

    def test_from_positional(self) -> None:
        record = ProofRecord.from_positional(
            ["0x1", "0xd6f1c", "0xabc", "0x3", hex(NOW), "0x1", hex(NOW + DAY), "0x2"]
        )

        assert record.entity_id == 1
        assert record.block_height == 880412
        assert record.liability_root == 0xABC
        assert record.band == ReserveBand.OVERCOLLATERALIZED
        assert record.proof_timestamp == NOW
        assert record.is_valid is True
        assert record.expiry_timestamp == NOW + DAY
        assert record.submission_count == 2

    def test_round_trip(self) -> None:
        record = make_record(DAY)

        assert ProofRecord.from_positional(record.to_positional()) == record

    def test_all_zero_is_never_proven(self) -> None:
        record = ProofRecord.from_positional([0] * 8)

        assert classify_proof_status(record, NOW) == ProofStatus.NEVER_PROVEN

    def test_extra_fields_ignored(self) -> None:
        record = ProofRecord.from_positional([1, 2, 3, 1, 4, 1, 5, 6, 99])

        assert record.submission_count == 6

    def test_too_few_fields(self) -> None:
        with pytest.raises(StructuralInputError):
            ProofRecord.from_positional([1, 2, 3])

    def test_unknown_band(self) -> None:
        with pytest.raises(StructuralInputError):
            ProofRecord.from_positional([1, 2, 3, 9, 4, 1, 5, 6])

    def test_malformed_field(self) -> None:
        with pytest.raises(StructuralInputError):
            ProofRecord.from_positional([1, 2, "root", 1, 4, 1, 5, 6])


class TestSummarizeEcosystem:
    """Tests for ecosystem summaries."""

    def test_counts(self) -> None:
        records = [
            make_record(10 * DAY),
            make_record(5 * DAY),
            make_record(DAY),
            make_record(-DAY),
            ProofRecord(),
        ]

        health = summarize_ecosystem(records, NOW)

        assert health.total == 5
        assert health.active == 2
        assert health.expiring == 1
        assert health.expired == 1
        assert health.never_proven == 1
        assert health.valid == 3
        assert health.next_expiry_seconds == DAY

    def test_empty(self) -> None:
        health = summarize_ecosystem([], NOW)

        assert health.total == 0
        assert health.next_expiry_seconds is None
