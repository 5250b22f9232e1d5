#!/usr/bin/env python3
"""
Inclusion Path Script
=====================

Prints the Merkle sibling path for one account of a liability CSV, in the
JSON form accepted by the inclusion verifier.

Usage:
    python scripts/inclusion_path.py <account_id> <path_to_csv> [--json]
"""

import argparse
import json
import sys
from pathlib import Path

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from zkreserves.core.merkle import build_liability_commitment
from zkreserves.core.liabilities import parse_liabilities
from zkreserves.errors import ParseError


def main() -> None:
    parser = argparse.ArgumentParser(description="Print the inclusion path for one account")
    parser.add_argument("account_id", help="Account identifier as it appears in the CSV")
    parser.add_argument("csv_path", type=Path, help="Liability CSV file")
    parser.add_argument("--json", action="store_true", help="Print only the JSON result")

    args = parser.parse_args()

    if not args.csv_path.exists():
        print(f"File not found: {args.csv_path}", file=sys.stderr)
        sys.exit(1)

    try:
        liabilities = parse_liabilities(args.csv_path.read_text(encoding="utf-8"))
    except ParseError as e:
        print(f"Invalid liability CSV: {e}", file=sys.stderr)
        sys.exit(1)

    index = liabilities.find(args.account_id)
    if index is None:
        print(f"Account ID '{args.account_id}' not found in the CSV.", file=sys.stderr)
        sys.exit(1)

    commitment, tree = build_liability_commitment(liabilities)
    path = [entry.to_wire() for entry in tree.inclusion_path(index)]
    amount = liabilities.records[index].amount

    if args.json:
        print(json.dumps({
            "account_id": args.account_id,
            "amount": amount,
            "liability_merkle_root": commitment.root_hex,
            "path": path,
        }))
        return

    print(f"\n{'='*47}")
    print(f" Account Check: {args.account_id}")
    print(f" Balance:       {amount} satoshi")
    print(f" Root:          {commitment.root_hex}")
    print(f"{'='*47}\n")
    print("Merkle branch JSON for the inclusion verifier:\n")
    print(json.dumps(path))
    print()


if __name__ == "__main__":
    main()
