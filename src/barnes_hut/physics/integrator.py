"""
Semi-implicit Euler integration.

Within a tick the velocity is updated from the evaluated acceleration
first (kick), then the position from the new velocity (step). There is
no collision handling and no boundary clamping.
"""

from __future__ import annotations

from ..types import Point


def kick(point: Point, ax: float, ay: float, time_step: float) -> None:
    """Apply an acceleration to the point's velocity for one time step."""
    point.velocity[0] += ax * time_step
    point.velocity[1] += ay * time_step


def step(point: Point, time_step: float) -> None:
    """Advance the point's position by its current velocity."""
    point.position += point.velocity * time_step


__all__ = ["kick", "step"]
