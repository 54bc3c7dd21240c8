"""
Softened inverse-square gravity, evaluated against a quadtree.

For a target point, the tree is walked from the root. A node far enough
away (boundary width / distance < theta) is treated as a single mass at
its center of mass; closer internal nodes are opened and their children
visited instead. Leaves always interact directly.

The walk only reads the tree, so any number of threads can evaluate
different points against the same aggregated tree.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Sequence, Union

import numpy as np

from ..config import SimulationConfig
from ..spatial.quadtree import QuadTreeNode
from ..types import Body, Point


@dataclass
class TraversalStats:
    """
    Counters collected during one or more tree walks.

    Attributes:
        exact: Contributions from leaves (direct pairwise interactions)
        approximate: Contributions from internal nodes standing in for
            their whole subtree
        visited: Nodes examined
    """

    exact: int = 0
    approximate: int = 0
    visited: int = 0

    def merge(self, other: TraversalStats) -> None:
        self.exact += other.exact
        self.approximate += other.approximate
        self.visited += other.visited


def accumulate_acceleration(
    node: QuadTreeNode,
    point: Union[Point, Body],
    config: SimulationConfig,
    stats: Optional[TraversalStats] = None,
) -> tuple[float, float]:
    """
    Calculate the gravitational acceleration exerted by a subtree on a point.

    Args:
        node: Root of an aggregated subtree
        point: Target point (or snapshot)
        config: Simulation parameters (theta, gravity_constant, softening)
        stats: Optional counters updated in place

    Returns:
        (ax, ay) acceleration vector
    """
    return _accumulate(
        node,
        point.x,
        point.y,
        point.mass,
        config.gravity_constant,
        config.softening_sq,
        config.theta,
        stats,
    )


def _accumulate(
    node: QuadTreeNode,
    px: float,
    py: float,
    mass: float,
    g: float,
    soft_sq: float,
    theta: float,
    stats: Optional[TraversalStats],
) -> tuple[float, float]:
    if stats is not None:
        stats.visited += 1

    # Empty region, or the target itself
    if node.total_mass == 0:
        return 0.0, 0.0
    if node.center_of_mass_x == px and node.center_of_mass_y == py:
        return 0.0, 0.0

    dx = node.center_of_mass_x - px
    dy = node.center_of_mass_y - py
    dist = math.sqrt(dx * dx + dy * dy + soft_sq)

    if node.children is None or node.boundary.width / dist < theta:
        if stats is not None:
            if node.children is None:
                stats.exact += 1
            else:
                stats.approximate += 1

        force = g * node.total_mass * mass / (dist * dist + soft_sq)
        scale = force / mass / dist
        return dx * scale, dy * scale

    ax, ay = 0.0, 0.0
    for child in node.children:
        cax, cay = _accumulate(child, px, py, mass, g, soft_sq, theta, stats)
        ax += cax
        ay += cay
    return ax, ay


def direct_accelerations(points: Sequence[Point], config: SimulationConfig) -> np.ndarray:
    """
    Exact O(n^2) accelerations for every point under the same softened law.

    Pairs at identical positions (including each point with itself)
    contribute nothing, matching the tree walk's self-interaction rule.

    Returns:
        Array of shape (n, 2)
    """
    n = len(points)
    if n == 0:
        return np.zeros((0, 2), dtype=np.float64)

    pos = np.array([p.position for p in points], dtype=np.float64)
    masses = np.array([p.mass for p in points], dtype=np.float64)
    soft_sq = config.softening_sq

    # delta[i, j] points from i towards j
    delta = pos[np.newaxis, :, :] - pos[:, np.newaxis, :]
    dist_sq = np.sum(delta * delta, axis=-1) + soft_sq
    dist = np.sqrt(dist_sq)

    scale = config.gravity_constant * masses[np.newaxis, :] / ((dist_sq + soft_sq) * dist)
    coincident = np.all(delta == 0.0, axis=-1)
    scale[coincident] = 0.0

    return np.einsum("ij,ijk->ik", scale, delta)


def direct_acceleration(
    points: Sequence[Point], index: int, config: SimulationConfig
) -> tuple[float, float]:
    """Exact acceleration on points[index] from every other point."""
    target = points[index]
    soft_sq = config.softening_sq
    ax, ay = 0.0, 0.0

    for i, other in enumerate(points):
        if i == index:
            continue
        dx = float(other.position[0] - target.position[0])
        dy = float(other.position[1] - target.position[1])
        if dx == 0.0 and dy == 0.0:
            continue
        dist_sq = dx * dx + dy * dy + soft_sq
        dist = math.sqrt(dist_sq)
        scale = config.gravity_constant * other.mass / ((dist_sq + soft_sq) * dist)
        ax += dx * scale
        ay += dy * scale

    return ax, ay


__all__ = [
    "TraversalStats",
    "accumulate_acceleration",
    "direct_acceleration",
    "direct_accelerations",
]
