"""
Diagnostics for point sets.

Conserved quantities and approximation error, useful for checking a
simulation run:
- Total mass and center of mass
- Linear momentum
- Kinetic and (softened) potential energy
- Relative error of Barnes-Hut accelerations against direct summation
"""

from __future__ import annotations

import math
from typing import Optional, Sequence

import numpy as np

from .config import SimulationConfig
from .physics.gravity import accumulate_acceleration, direct_accelerations
from .spatial.quadtree import QuadTree
from .types import Point, RectLike


def total_mass(points: Sequence[Point]) -> float:
    return float(sum(p.mass for p in points))


def center_of_mass(points: Sequence[Point]) -> tuple[float, float]:
    """Mass-weighted mean position; (0, 0) for an empty set."""
    mass = total_mass(points)
    if mass == 0:
        return 0.0, 0.0
    weighted = sum((p.mass * p.position for p in points), np.zeros(2))
    return float(weighted[0] / mass), float(weighted[1] / mass)


def momentum(points: Sequence[Point]) -> tuple[float, float]:
    """Total linear momentum."""
    total = sum((p.mass * p.velocity for p in points), np.zeros(2))
    return float(total[0]), float(total[1])


def kinetic_energy(points: Sequence[Point]) -> float:
    return float(sum(0.5 * p.mass * float(np.dot(p.velocity, p.velocity)) for p in points))


def potential_energy(points: Sequence[Point], config: Optional[SimulationConfig] = None) -> float:
    """
    Softened gravitational potential energy, summed over distinct pairs.

    Uses -G * m_i * m_j / sqrt(r^2 + softening^2) per pair.
    """
    cfg = config if config is not None else SimulationConfig()
    soft_sq = cfg.softening_sq
    energy = 0.0

    for i, a in enumerate(points):
        for b in points[i + 1 :]:
            delta = b.position - a.position
            dist = math.sqrt(float(np.dot(delta, delta)) + soft_sq)
            energy -= cfg.gravity_constant * a.mass * b.mass / dist

    return energy


def total_energy(points: Sequence[Point], config: Optional[SimulationConfig] = None) -> float:
    return kinetic_energy(points) + potential_energy(points, config)


def acceleration_error(
    points: Sequence[Point],
    boundary: RectLike,
    config: Optional[SimulationConfig] = None,
) -> float:
    """
    Mean relative error of tree accelerations against direct summation.

    Only points inside the boundary are compared. Points whose exact
    acceleration is zero are skipped.

    Returns:
        Mean of |a_tree - a_exact| / |a_exact| (0.0 if nothing to compare)
    """
    cfg = config if config is not None else SimulationConfig()
    tree = QuadTree(boundary, max_depth=cfg.max_depth)
    inside = [p for i, p in enumerate(points) if tree.insert(p.snapshot(i))]
    tree.compute_mass_distribution()

    exact = direct_accelerations(inside, cfg)
    errors: list[float] = []

    for point, (ex, ey) in zip(inside, exact):
        norm = math.hypot(ex, ey)
        if norm == 0:
            continue
        ax, ay = accumulate_acceleration(tree.root, point, cfg)
        errors.append(math.hypot(ax - ex, ay - ey) / norm)

    return float(np.mean(errors)) if errors else 0.0


__all__ = [
    "acceleration_error",
    "center_of_mass",
    "kinetic_energy",
    "momentum",
    "potential_energy",
    "total_energy",
    "total_mass",
]
