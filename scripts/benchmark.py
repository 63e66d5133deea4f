#!/usr/bin/env python3
"""Benchmark script for jarcheck performance testing.

Outputs results in JSON format compatible with github-action-benchmark.
"""

from __future__ import annotations

import argparse
import json
import os
import time
from collections.abc import Sequence
from pathlib import Path


def benchmark_import_time() -> float:
    """Measure import time of jarcheck package."""
    start = time.perf_counter()
    import jarcheck  # noqa: F401

    return time.perf_counter() - start


def benchmark_runtime_filter() -> float:
    """Measure classification of 100k type names."""
    from jarcheck.domain.model.type_name import normalize_type_name
    from jarcheck.domain.predicates.runtime import is_excluded

    names = [f"[Lcom/acme/pkg{i % 50}/C{i};" for i in range(50000)]
    names += [f"java/util/C{i}" for i in range(50000)]

    start = time.perf_counter()
    for name in names:
        is_excluded(normalize_type_name(name))
    return time.perf_counter() - start


def benchmark_traversal(classes: int, workers: int | None) -> float:
    """Measure a full check over an in-memory graph (no archive I/O)."""
    from jarcheck import CheckerConfig, DependencyChecker
    from jarcheck.domain.ports import ClassSourcePort, ReferenceExtractorPort

    # Each class references the next three: wide fan-out with many revisits
    graph = {
        f"bench.C{i}": [f"bench.C{j}" for j in range(i + 1, min(i + 4, classes))]
        for i in range(classes)
    }

    class MemorySource(ClassSourcePort):
        def locate(self, type_name: str, archives: Sequence[str | os.PathLike[str]]) -> bytes:
            return type_name.encode()

    class MemoryExtractor(ReferenceExtractorPort):
        def extract(self, class_bytes: bytes) -> frozenset[str]:
            return frozenset(graph[class_bytes.decode()])

    checker = DependencyChecker(
        config=CheckerConfig(max_workers=workers),
        source=MemorySource(),
        extractor=MemoryExtractor(),
    )

    start = time.perf_counter()
    result = checker.check("bench.C0", ["memory.jar"])
    elapsed = time.perf_counter() - start

    if not result.resolved or result.visited_count != classes:
        raise RuntimeError(f"benchmark graph did not resolve: {result.visited_count} visited")
    return elapsed


def main() -> None:
    """Run benchmarks and output results."""
    parser = argparse.ArgumentParser(description="Run jarcheck benchmarks")
    parser.add_argument(
        "--output",
        type=Path,
        default=Path("benchmark-results.json"),
        help="Output file for benchmark results",
    )
    parser.add_argument(
        "--classes",
        type=int,
        default=5000,
        help="Number of classes in the traversal graph",
    )
    args = parser.parse_args()

    results = []

    # Import time
    import_time = benchmark_import_time()
    results.append(
        {
            "name": "Import Time",
            "unit": "seconds",
            "value": import_time,
        }
    )

    # Name classification
    filter_time = benchmark_runtime_filter()
    results.append(
        {
            "name": "Runtime Filter (100k names)",
            "unit": "seconds",
            "value": filter_time,
        }
    )

    # Traversal at different pool sizes
    for workers in (1, 4, None):
        label = "default" if workers is None else str(workers)
        results.append(
            {
                "name": f"Traversal ({args.classes} classes, {label} workers)",
                "unit": "seconds",
                "value": benchmark_traversal(args.classes, workers),
            }
        )

    # Write results
    args.output.write_text(json.dumps(results, indent=2))
    print(f"Benchmark results written to {args.output}")
    for r in results:
        print(f"  {r['name']}: {r['value']:.4f} {r['unit']}")


if __name__ == "__main__":
    main()
