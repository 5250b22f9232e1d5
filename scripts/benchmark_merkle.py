#!/usr/bin/env python3
"""
Liability Tree Benchmark Script
===============================

Benchmarks liability root building and inclusion verification for
synthetic liability sets.

Usage:
    python scripts/benchmark_merkle.py [--iterations N] [--sizes 100,1000,10000]
"""

import argparse
import json
import random
import statistics
import sys
import time
from dataclasses import asdict, dataclass
from pathlib import Path

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from zkreserves.core.hashing import get_field_hasher
from zkreserves.core.merkle import build_liability_commitment, verify_inclusion
from zkreserves.core.liabilities import parse_liabilities


DEFAULT_ITERATIONS = 5
DEFAULT_SIZES = "100,1000,10000"


@dataclass
class BenchmarkResult:
    """Result of a benchmark run."""
    leaf_count: int
    iterations: int
    min_ms: int
    max_ms: int
    mean_ms: float
    median_ms: float
    p95_ms: int
    verify_mean_ms: float


def percentile(data: list[int], p: int) -> int:
    """Calculate percentile."""
    sorted_data = sorted(data)
    index = int(len(sorted_data) * p / 100)
    return sorted_data[min(index, len(sorted_data) - 1)]


def synthetic_csv(leaf_count: int) -> str:
    """Build a liability CSV with random amounts."""
    rows = ["account_id,amount"]
    rows.extend(
        f"account-{i:07d},{random.randint(1, 10**8)}"
        for i in range(leaf_count)
    )
    return "\n".join(rows)


def benchmark_size(leaf_count: int, iterations: int) -> BenchmarkResult:
    """Benchmark root building and one inclusion check for a tree size."""
    hasher = get_field_hasher()
    build_times: list[int] = []
    verify_times: list[float] = []

    print(f"\n{'='*60}")
    print(f"Benchmarking: {leaf_count} leaves")
    print(f"Iterations: {iterations}")
    print(f"{'='*60}")

    for i in range(iterations):
        liabilities = parse_liabilities(synthetic_csv(leaf_count))

        start = time.perf_counter()
        commitment, tree = build_liability_commitment(liabilities, hasher)
        duration_ms = int((time.perf_counter() - start) * 1000)
        build_times.append(duration_ms)

        index = random.randrange(leaf_count)
        record = liabilities.records[index]
        start = time.perf_counter()
        included = verify_inclusion(
            record.account_id,
            record.amount,
            tree.inclusion_path(index),
            commitment.root,
            hasher,
        )
        verify_times.append((time.perf_counter() - start) * 1000)

        status = "✓" if included else "✗"
        print(f"  [{i+1}/{iterations}] {status} {duration_ms}ms (depth={tree.depth})")

    return BenchmarkResult(
        leaf_count=leaf_count,
        iterations=iterations,
        min_ms=min(build_times),
        max_ms=max(build_times),
        mean_ms=statistics.mean(build_times),
        median_ms=statistics.median(build_times),
        p95_ms=percentile(build_times, 95),
        verify_mean_ms=statistics.mean(verify_times),
    )


def print_results(results: list[BenchmarkResult]) -> None:
    """Print benchmark results summary."""
    print(f"\n{'='*70}")
    print("BENCHMARK SUMMARY")
    print(f"{'='*70}")

    print(f"\n{'Leaves':>10} | {'P95':>8} | {'Mean':>8} | {'Median':>8} | {'Verify':>8}")
    print("-" * 70)

    for r in results:
        print(
            f"{r.leaf_count:>10} | {r.p95_ms:>6}ms | {r.mean_ms:>6.0f}ms | "
            f"{r.median_ms:>6.0f}ms | {r.verify_mean_ms:>6.2f}ms"
        )
    print()


def main() -> None:
    parser = argparse.ArgumentParser(description="Benchmark liability Merkle tree building")
    parser.add_argument("--iterations", "-n", type=int, default=DEFAULT_ITERATIONS,
                        help=f"Number of iterations (default: {DEFAULT_ITERATIONS})")
    parser.add_argument("--sizes", "-s", type=str, default=DEFAULT_SIZES,
                        help=f"Comma-separated leaf counts (default: {DEFAULT_SIZES})")
    parser.add_argument("--output", "-o", type=str, help="Output JSON file for results")

    args = parser.parse_args()
    sizes = [int(size) for size in args.sizes.split(",") if size.strip()]

    print("╔" + "═"*58 + "╗")
    print("║  ZKRESERVES LIABILITY TREE BENCHMARK                     ║")
    print(f"║  Hasher: {get_field_hasher().name:<48}║")
    print("╚" + "═"*58 + "╝")

    results = [benchmark_size(size, args.iterations) for size in sizes]
    print_results(results)

    if args.output:
        output_data = {
            "timestamp": time.strftime("%Y-%m-%dT%H:%M:%SZ"),
            "hasher": get_field_hasher().name,
            "results": [asdict(r) for r in results],
        }

        with open(args.output, "w") as f:
            json.dump(output_data, f, indent=2)

        print(f"Results saved to: {args.output}")


if __name__ == "__main__":
    main()
