"""
Physics for the Barnes-Hut simulation.

- gravity: Tree-walk force evaluation and an exact reference
- integrator: Semi-implicit Euler kick/step
"""

from .gravity import (
    TraversalStats,
    accumulate_acceleration,
    direct_acceleration,
    direct_accelerations,
)
from .integrator import kick, step

__all__ = [
    "TraversalStats",
    "accumulate_acceleration",
    "direct_acceleration",
    "direct_accelerations",
    "kick",
    "step",
]
