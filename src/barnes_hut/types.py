"""
Common types for the Barnes-Hut simulation.

This module provides the fundamental types used across the package:
- Rect: Axis-aligned rectangle covering a region of the plane
- Point: Mass-bearing particle with position and velocity
- Body: Immutable snapshot of a point, stored in the quadtree
- EventType: Simulation lifecycle events
- Event: Event payload for callbacks
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import TYPE_CHECKING, Any, Callable, Optional, Sequence, TypedDict, Union

import numpy as np

if TYPE_CHECKING:
    from .simulation import TickStats


class EventType(IntEnum):
    """
    Simulation lifecycle events.

    - start: Simulation run has begun
    - tick: Fired once per simulation step
    - end: Simulation run has finished
    """

    start = 0
    tick = 1
    end = 2


class Event(TypedDict, total=False):
    """Event payload passed to event listeners."""

    type: EventType
    tick: int
    stats: Optional["TickStats"]


@dataclass(frozen=True)
class Rect:
    """
    Axis-aligned rectangle.

    The origin corner is (left, top); y grows downwards, so the "top"
    quadrants are the ones with the smaller y values.

    Containment is half-open: a point on the right or bottom edge belongs
    to the neighbouring rectangle. Quadrants of a rectangle therefore tile
    it with no gaps or overlap.
    """

    left: float
    top: float
    width: float
    height: float

    @classmethod
    def from_bounds(cls, min_x: float, min_y: float, max_x: float, max_y: float) -> Rect:
        """Build a rectangle from (min_x, min_y, max_x, max_y) bounds."""
        return cls(float(min_x), float(min_y), float(max_x - min_x), float(max_y - min_y))

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height

    @property
    def center(self) -> tuple[float, float]:
        return self.left + self.width / 2, self.top + self.height / 2

    def contains(self, x: float, y: float) -> bool:
        """Check if point (x, y) lies within this rectangle."""
        return self.left <= x < self.left + self.width and self.top <= y < self.top + self.height

    def quadrants(self) -> tuple[Rect, Rect, Rect, Rect]:
        """
        Split into four equal quadrants.

        Returns:
            (top-left, top-right, bottom-left, bottom-right)
        """
        hw = self.width / 2
        hh = self.height / 2
        cx = self.left + hw
        cy = self.top + hh
        # Far quadrants end at the parent's edges, not at cx + hw
        fw = self.left + self.width - cx
        fh = self.top + self.height - cy
        return (
            Rect(self.left, self.top, cx - self.left, cy - self.top),
            Rect(cx, self.top, fw, cy - self.top),
            Rect(self.left, cy, cx - self.left, fh),
            Rect(cx, cy, fw, fh),
        )


def _as_vector(value: Any) -> np.ndarray:
    vec = np.array(value, dtype=np.float64)
    return vec.reshape(-1) if vec.ndim > 1 else vec


@dataclass(eq=False)
class Point:
    """
    A mass-bearing particle.

    Position and velocity are float64 vectors of shape (2,), mutated in
    place by the integrator. Points are owned by the caller; the quadtree
    only ever stores Body snapshots of them.
    """

    mass: float
    position: np.ndarray
    velocity: np.ndarray = field(default_factory=lambda: np.zeros(2, dtype=np.float64))

    def __post_init__(self) -> None:
        self.mass = float(self.mass)
        self.position = _as_vector(self.position)
        self.velocity = _as_vector(self.velocity)

    @property
    def x(self) -> float:
        return float(self.position[0])

    @property
    def y(self) -> float:
        return float(self.position[1])

    def snapshot(self, index: int = -1) -> Body:
        """Freeze the current position and mass into a Body."""
        return Body(float(self.position[0]), float(self.position[1]), self.mass, index)


@dataclass(frozen=True)
class Body:
    """A point snapshot with position and mass for force calculations."""

    x: float
    y: float
    mass: float = 1.0
    index: int = -1  # Index of the originating point


# Type aliases for API parameters
RectLike = Union[Rect, Sequence[float]]
PointLike = Union[Point, dict]
EventCallback = Callable[[Optional[Event]], None]


def as_rect(value: RectLike) -> Rect:
    """
    Coerce a rectangle-like value to a Rect.

    Sequences are read as (left, top, width, height), matching Rect's own
    field order.
    """
    if isinstance(value, Rect):
        return value
    left, top, width, height = (float(v) for v in value)
    return Rect(left, top, width, height)


def as_point(value: PointLike) -> Point:
    """Coerce a Point or a dict with mass/position/velocity keys to a Point."""
    if isinstance(value, Point):
        return value
    return Point(**value)


__all__ = [
    "Body",
    "Event",
    "EventCallback",
    "EventType",
    "Point",
    "PointLike",
    "Rect",
    "RectLike",
    "as_point",
    "as_rect",
]
