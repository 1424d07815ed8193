#!/usr/bin/env python3
"""
Pathfinder Micro-benchmark Harness.

Benchmarks `GraphEngine.find_cheapest_path()`, `find_closest_n_ready()` and
a JSON round trip on deterministic grid graphs. The pathfinder scans for the
next node linearly (O(V^2) per query), so this harness is the place to check
where that ceiling starts to hurt.
"""

from __future__ import annotations

import argparse
from dataclasses import dataclass
from datetime import datetime, timezone
import json
from pathlib import Path
import random
import statistics
import sys
import time
from typing import Any, Callable, Optional

# Ensure repository root is importable when executing this file directly.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from waygraph.core import GraphEngine
from waygraph.platform.grid import cell_key, grid_weight


@dataclass(frozen=True)
class ScenarioConfig:
    """Benchmark scenario configuration."""

    grid_size: int
    ready_ratio: float
    warmup_runs: int
    measured_runs: int
    seed: int


def build_synthetic_graph(grid_size: int, ready_ratio: float, seed: int) -> GraphEngine:
    """
    Build a deterministic grid with right/down neighbors and a diagonal
    shortcut on every third cell.
    """
    rng = random.Random(seed)
    engine = GraphEngine()

    for row in range(grid_size):
        for col in range(grid_size):
            engine.add_node(
                cell_key(col, row),
                {"x": col, "y": row, "ready_for_pickup": rng.random() < ready_ratio},
            )

    for row in range(grid_size):
        for col in range(grid_size):
            here = cell_key(col, row)
            neighbors = []
            if col < grid_size - 1:
                neighbors.append(cell_key(col + 1, row))
            if row < grid_size - 1:
                neighbors.append(cell_key(col, row + 1))
            if col < grid_size - 1 and row < grid_size - 1 and (row + col) % 3 == 0:
                neighbors.append(cell_key(col + 1, row + 1))

            for there in neighbors:
                weight = grid_weight(engine.get_node(here), engine.get_node(there))
                engine.add_edge(here, there, weight + rng.randint(0, 3))

    return engine


def p95(values: list[float]) -> float:
    """95th percentile, interpolated between the closest samples."""
    if len(values) < 2:
        return values[0] if values else 0.0
    return statistics.quantiles(values, n=20, method="inclusive")[-1]


def measure(operation: Callable[[], Any], warmup_runs: int, measured_runs: int) -> dict[str, float]:
    """Time ``operation`` and summarize latencies in milliseconds."""
    for _ in range(warmup_runs):
        operation()

    latencies_ms: list[float] = []
    for _ in range(measured_runs):
        started = time.perf_counter()
        operation()
        latencies_ms.append((time.perf_counter() - started) * 1000.0)

    return {
        "min": min(latencies_ms),
        "max": max(latencies_ms),
        "mean": statistics.mean(latencies_ms),
        "median": statistics.median(latencies_ms),
        "p95": p95(latencies_ms),
    }


def run_scenario(config: ScenarioConfig) -> dict[str, Any]:
    """Run one benchmark scenario and return structured metrics."""
    engine = build_synthetic_graph(config.grid_size, config.ready_ratio, config.seed)
    start = cell_key(0, 0)
    end = cell_key(config.grid_size - 1, config.grid_size - 1)
    text = engine.to_json()

    path = engine.find_cheapest_path(start, end)

    def round_trip() -> None:
        GraphEngine().load_json(text)

    return {
        "scenario": {
            "grid_size": config.grid_size,
            "ready_ratio": config.ready_ratio,
            "seed": config.seed,
            "warmup_runs": config.warmup_runs,
            "measured_runs": config.measured_runs,
        },
        "graph": {
            "nodes": engine.number_of_nodes(),
            "edges": engine.number_of_edges(),
            "payload_bytes": len(text.encode("utf-8")),
        },
        "path": {
            "status": path.status.value,
            "hops": max(len(path) - 1, 0),
            "cost": path.cost if path.found else None,
        },
        "latency_ms": {
            "cheapest_path": measure(
                lambda: engine.find_cheapest_path(start, end),
                config.warmup_runs,
                config.measured_runs,
            ),
            "closest_ready": measure(
                lambda: engine.find_closest_n_ready(start, 5),
                config.warmup_runs,
                config.measured_runs,
            ),
            "round_trip": measure(round_trip, config.warmup_runs, config.measured_runs),
        },
    }


def print_human_summary(result: dict[str, Any]) -> None:
    """Print compact human-readable summary for CLI runs."""
    scenario = result["scenario"]
    graph = result["graph"]

    print(
        f"[Scenario] grid={scenario['grid_size']}x{scenario['grid_size']}, "
        f"runs={scenario['measured_runs']}"
    )
    print(f"  Graph: nodes={graph['nodes']}, edges={graph['edges']}, payload={graph['payload_bytes']}B")
    print(f"  Path: {result['path']['status']}, hops={result['path']['hops']}, cost={result['path']['cost']}")
    for name, latency in result["latency_ms"].items():
        print(
            f"  {name}(ms): mean={latency['mean']:.2f}, median={latency['median']:.2f}, "
            f"p95={latency['p95']:.2f}, max={latency['max']:.2f}"
        )


def evaluate_threshold_warnings(
    result: dict[str, Any],
    warn_mean_latency_ms: Optional[float],
) -> list[str]:
    """Evaluate the optional mean-latency threshold for one scenario."""
    if warn_mean_latency_ms is None:
        return []

    warnings: list[str] = []
    nodes = result["graph"]["nodes"]
    for name, latency in result["latency_ms"].items():
        if latency["mean"] > warn_mean_latency_ms:
            warnings.append(
                f"nodes={nodes}: {name} mean latency {latency['mean']:.2f} ms "
                f"exceeds {warn_mean_latency_ms:.2f} ms"
            )
    return warnings


def main() -> None:
    parser = argparse.ArgumentParser(description="Benchmark GraphEngine path queries.")
    parser.add_argument(
        "--grid-sizes",
        nargs="+",
        type=int,
        default=[5, 10, 20],
        help="Grid sizes to benchmark (N produces N*N nodes).",
    )
    parser.add_argument(
        "--ready-ratio",
        type=float,
        default=0.2,
        help="Fraction of nodes marked ready for pickup.",
    )
    parser.add_argument("--warmup-runs", type=int, default=1, help="Warmup iterations per scenario.")
    parser.add_argument("--runs", type=int, default=5, help="Measured iterations per scenario.")
    parser.add_argument(
        "--seed",
        type=int,
        default=7,
        help="Random seed for deterministic fixture generation.",
    )
    parser.add_argument("--output", type=str, default="", help="Optional path to write JSON results.")
    parser.add_argument(
        "--warn-mean-latency-ms",
        type=float,
        default=None,
        help="Optional warning threshold for mean latency per operation.",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit non-zero when any warning threshold is exceeded.",
    )
    args = parser.parse_args()

    started_at = datetime.now(timezone.utc).isoformat()
    results: list[dict[str, Any]] = []
    warnings: list[str] = []

    for grid_size in args.grid_sizes:
        scenario = ScenarioConfig(
            grid_size=grid_size,
            ready_ratio=args.ready_ratio,
            warmup_runs=args.warmup_runs,
            measured_runs=args.runs,
            seed=args.seed,
        )
        result = run_scenario(scenario)
        results.append(result)
        print_human_summary(result)
        warnings.extend(evaluate_threshold_warnings(result, args.warn_mean_latency_ms))

    if warnings:
        print("[Warnings]")
        for warning in warnings:
            print(f"  - {warning}")

    payload = {
        "benchmark": "pathfinder_microbench",
        "started_at": started_at,
        "python": {
            "version": f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}",
        },
        "results": results,
        "warnings": warnings,
    }

    if args.output:
        with open(args.output, "w", encoding="utf-8") as handle:
            json.dump(payload, handle, indent=2)
        print(f"[Output] wrote JSON results to {args.output}")
    else:
        print(json.dumps(payload, indent=2))

    if args.strict and warnings:
        raise SystemExit(2)


if __name__ == "__main__":
    main()
