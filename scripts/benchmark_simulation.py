#!/usr/bin/env python3
"""
Benchmark the Barnes-Hut simulation on a rotating square of points.

Every point starts with unit speed, perpendicular to the direction of the
world center, so the cloud swirls as it collapses.

Usage:
    uv run python scripts/benchmark_simulation.py [--points N] [--ticks T] [--workers W]

Examples:
    uv run python scripts/benchmark_simulation.py
    uv run python scripts/benchmark_simulation.py --points 16000 --ticks 20
    uv run python scripts/benchmark_simulation.py --theta 0.8 --workers 1 --error
"""

from __future__ import annotations

import argparse
import time
import warnings
from typing import Optional

import numpy as np

from barnes_hut import (
    Point,
    PointEscapedWarning,
    Simulation,
    SimulationConfig,
    TickStats,
    acceleration_error,
    total_energy,
)


def rotating_square(n: int, size: float = 800.0, seed: Optional[int] = None) -> list[Point]:
    """Unit-mass points on integer coordinates, circling the center."""
    rng = np.random.default_rng(seed)
    coords = rng.integers(0, int(size), size=(n, 2)).astype(np.float64)
    center = size / 2
    angles = np.arctan2(center - coords[:, 1], center - coords[:, 0]) - np.pi / 2

    return [
        Point(1.0, coords[i], (np.cos(angles[i]), np.sin(angles[i])))
        for i in range(n)
    ]


def main() -> None:
    parser = argparse.ArgumentParser(description="Benchmark the Barnes-Hut simulation")
    parser.add_argument("--points", type=int, default=4000, help="Number of points")
    parser.add_argument("--ticks", type=int, default=10, help="Number of ticks to run")
    parser.add_argument("--size", type=float, default=800.0, help="World width and height")
    parser.add_argument("--theta", type=float, default=0.5, help="Opening-angle threshold")
    parser.add_argument("--workers", type=int, default=None, help="Force evaluation threads")
    parser.add_argument("--seed", type=int, default=42, help="Random seed")
    parser.add_argument(
        "--error", action="store_true", help="Report acceleration error against direct sum"
    )
    args = parser.parse_args()

    config = SimulationConfig(theta=args.theta, workers=args.workers)
    boundary = (0.0, 0.0, args.size, args.size)
    points = rotating_square(args.points, args.size, args.seed)

    print(f"Points: {args.points}, ticks: {args.ticks}, theta: {config.theta}")
    if args.error:
        error = acceleration_error(points, boundary, config)
        print(f"Mean relative acceleration error: {error:.4%}")
    if args.points <= 2000:
        print(f"Initial energy: {total_energy(points, config):.6g}")

    fps_total = 0.0
    last = time.perf_counter()

    def report(event) -> None:
        nonlocal fps_total, last
        now = time.perf_counter()
        dt = now - last
        last = now
        stats: TickStats = event["stats"]
        tick = event["tick"]
        fps = 1.0 / dt if dt > 0 else float("inf")
        # First tick includes pool start-up; leave it out of the average
        if tick > 1:
            fps_total += fps
        average = fps_total / (tick - 1) if tick > 1 else 0.0
        print(
            f"tick {tick:4d}: {fps:7.2f} ({average:7.2f}) ticks/s  "
            f"nodes={stats.node_count} depth={stats.max_depth_reached} "
            f"dropped={stats.dropped}"
        )

    with warnings.catch_warnings():
        warnings.simplefilter("ignore", PointEscapedWarning)
        with Simulation(points, boundary, config, on_tick=report) as sim:
            sim.run(ticks=args.ticks)

    if args.points <= 2000:
        print(f"Final energy: {total_energy(sim.points, config):.6g}")


if __name__ == "__main__":
    main()
