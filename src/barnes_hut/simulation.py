"""
Simulation tick and iterative driver.

One tick:
1. Build a fresh quadtree from the current point positions
2. Aggregate masses bottom-up
3. For every point (in parallel): walk the tree for its acceleration,
   kick its velocity, then step its position
4. Drop the tree

Points outside the world boundary are left out of the tree for that tick:
they neither exert nor receive force, but keep drifting with their
velocity.
"""

from __future__ import annotations

import math
import os
import warnings
from concurrent.futures import Executor, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Optional, Sequence

if TYPE_CHECKING:
    from typing_extensions import Self

from .config import SimulationConfig
from .physics.gravity import TraversalStats, accumulate_acceleration
from .physics.integrator import kick, step
from .spatial.quadtree import QuadTree, QuadTreeNode
from .types import Event, EventCallback, EventType, Point, PointLike, Rect, RectLike, as_point
from .validation import validate_boundary, validate_points


class PointEscapedWarning(RuntimeWarning):
    """Warning issued when a point leaves the world boundary."""

    pass


@dataclass
class TickStats:
    """
    Counters describing one simulation tick.

    Attributes:
        inserted: Points stored in the tree
        dropped: Points outside the world boundary
        node_count: Nodes in the tree
        max_depth_reached: Depth of the deepest node
        exact_interactions: Leaf contributions over all force evaluations
        approximate_interactions: Aggregate contributions over all evaluations
        dropped_indices: Indices of the dropped points
    """

    inserted: int = 0
    dropped: int = 0
    node_count: int = 0
    max_depth_reached: int = 0
    exact_interactions: int = 0
    approximate_interactions: int = 0
    dropped_indices: list[int] = field(default_factory=list)


def build_and_evaluate(
    points: Sequence[Point],
    world_boundary: RectLike,
    theta: Optional[float] = None,
    gravity_constant: Optional[float] = None,
    softening: Optional[float] = None,
    time_step: Optional[float] = None,
    *,
    config: Optional[SimulationConfig] = None,
    executor: Optional[Executor] = None,
) -> TickStats:
    """
    Advance every point by one tick, in place.

    Parameters given explicitly override the matching fields of config
    (or of the default SimulationConfig when config is None).

    Args:
        points: Ordered point sequence; velocities then positions are updated
        world_boundary: Rect or (left, top, width, height) world extent
        theta: Opening-angle threshold
        gravity_constant: Gravitational constant
        softening: Softening length
        time_step: Integration step
        config: Base parameters
        executor: Executor to run force evaluation on. When None, a
            temporary thread pool is used unless config.workers == 1.

    Returns:
        TickStats for the tick

    Raises:
        InvalidBoundaryError: If world_boundary is degenerate
        InvalidParameterError: If a parameter is out of range
    """
    rect = validate_boundary(world_boundary)
    cfg = _resolve_config(
        config,
        theta=theta,
        gravity_constant=gravity_constant,
        softening=softening,
        time_step=time_step,
    )

    tree = QuadTree(rect, max_depth=cfg.max_depth)
    inserted = [tree.insert(point.snapshot(i)) for i, point in enumerate(points)]
    tree.compute_mass_distribution()

    stats = TickStats(
        inserted=tree.body_count,
        dropped=tree.dropped_count,
        dropped_indices=[i for i, ok in enumerate(inserted) if not ok],
    )
    for node in tree.nodes():
        stats.node_count += 1
        stats.max_depth_reached = max(stats.max_depth_reached, node.depth)

    traversal = _evaluate(tree.root, points, inserted, cfg, executor)
    stats.exact_interactions = traversal.exact
    stats.approximate_interactions = traversal.approximate
    return stats


def _resolve_config(
    config: Optional[SimulationConfig], **overrides: Optional[float]
) -> SimulationConfig:
    cfg = config if config is not None else SimulationConfig()
    given = {name: value for name, value in overrides.items() if value is not None}
    return cfg.replace(**given) if given else cfg


def _evaluate(
    root: QuadTreeNode,
    points: Sequence[Point],
    inserted: Sequence[bool],
    config: SimulationConfig,
    executor: Optional[Executor],
) -> TraversalStats:
    """Run the per-point force/integration loop, split into index chunks."""
    n = len(points)
    if n == 0:
        return TraversalStats()

    if executor is None and config.workers == 1:
        return _evaluate_range(root, points, inserted, config, 0, n)

    chunks = min(n, config.workers or os.cpu_count() or 1)
    chunk_size = math.ceil(n / chunks)
    ranges = [(start, min(start + chunk_size, n)) for start in range(0, n, chunk_size)]

    if executor is not None:
        return _run_chunks(executor, root, points, inserted, config, ranges)
    with ThreadPoolExecutor(max_workers=config.workers) as pool:
        return _run_chunks(pool, root, points, inserted, config, ranges)


def _run_chunks(
    executor: Executor,
    root: QuadTreeNode,
    points: Sequence[Point],
    inserted: Sequence[bool],
    config: SimulationConfig,
    ranges: list[tuple[int, int]],
) -> TraversalStats:
    futures = [
        executor.submit(_evaluate_range, root, points, inserted, config, start, stop)
        for start, stop in ranges
    ]
    total = TraversalStats()
    for future in futures:
        total.merge(future.result())
    return total


def _evaluate_range(
    root: QuadTreeNode,
    points: Sequence[Point],
    inserted: Sequence[bool],
    config: SimulationConfig,
    start: int,
    stop: int,
) -> TraversalStats:
    # Writes only to points[start:stop]; the tree holds snapshots
    stats = TraversalStats()
    dt = config.time_step
    for i in range(start, stop):
        point = points[i]
        if inserted[i]:
            ax, ay = accumulate_acceleration(root, point, config, stats)
            kick(point, ax, ay, dt)
        step(point, dt)
    return stats


class Simulation:
    """
    Iterative Barnes-Hut simulation over a fixed world.

    Owns the point list and, when more than one worker is configured, a
    thread pool that lives until close().

    Example:
        with Simulation(points, (0, 0, 800, 800), on_tick=draw) as sim:
            sim.run(ticks=600)

        for point in sim.points:
            print(point.position)
    """

    def __init__(
        self,
        points: Sequence[PointLike],
        boundary: RectLike,
        config: Optional[SimulationConfig] = None,
        *,
        on_start: Optional[EventCallback] = None,
        on_tick: Optional[EventCallback] = None,
        on_end: Optional[EventCallback] = None,
    ) -> None:
        """
        Initialize the simulation.

        Args:
            points: Points, or dicts with mass/position/velocity keys
            boundary: World extent as Rect or (left, top, width, height)
            config: Simulation parameters (defaults if None)
            on_start: Callback for start event
            on_tick: Callback for tick event
            on_end: Callback for end event

        Raises:
            InvalidBoundaryError: If the boundary is degenerate
            InvalidPointError: If a point is malformed
        """
        self._points: list[Point] = [as_point(p) for p in points]
        validate_points(self._points)
        self._boundary: Rect = validate_boundary(boundary)
        self._config: SimulationConfig = config if config is not None else SimulationConfig()
        self._events: dict[EventType, EventCallback] = {}
        self._executor: Optional[ThreadPoolExecutor] = None
        self._tick_count: int = 0
        self._last_stats: Optional[TickStats] = None
        self._escaped: set[int] = set()

        if on_start:
            self._events[EventType.start] = on_start
        if on_tick:
            self._events[EventType.tick] = on_tick
        if on_end:
            self._events[EventType.end] = on_end

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def points(self) -> list[Point]:
        return self._points

    @property
    def boundary(self) -> Rect:
        return self._boundary

    @property
    def config(self) -> SimulationConfig:
        return self._config

    @config.setter
    def config(self, value: SimulationConfig) -> None:
        """Replace the parameters; takes effect on the next tick."""
        if self._executor is not None and value.workers != self._config.workers:
            self._executor.shutdown(wait=True)
            self._executor = None
        self._config = value

    @property
    def tick_count(self) -> int:
        return self._tick_count

    @property
    def last_stats(self) -> Optional[TickStats]:
        return self._last_stats

    # -------------------------------------------------------------------------
    # Event System
    # -------------------------------------------------------------------------

    def on(self, event: EventType | str, callback: EventCallback) -> Self:
        """
        Subscribe to a simulation event.

        Args:
            event: Event type (EventType enum or string name)
            callback: Function to call when event fires

        Returns:
            self (for chaining)
        """
        if isinstance(event, str):
            event = EventType[event]
        self._events[event] = callback
        return self

    def trigger(self, event: Event) -> None:
        event_type = event.get("type")
        if event_type is not None and event_type in self._events:
            self._events[event_type](event)

    # -------------------------------------------------------------------------
    # Lifecycle Methods
    # -------------------------------------------------------------------------

    def tick(self) -> TickStats:
        """Advance the simulation by one time step."""
        stats = build_and_evaluate(
            self._points,
            self._boundary,
            config=self._config,
            executor=self._get_executor(),
        )
        self._tick_count += 1
        self._last_stats = stats
        self._warn_escaped(stats.dropped_indices)
        self.trigger({"type": EventType.tick, "tick": self._tick_count, "stats": stats})
        return stats

    def run(self, ticks: int = 1) -> Self:
        """
        Run a number of ticks, firing start and end events around them.

        Returns:
            self (for chaining)
        """
        self.trigger({"type": EventType.start, "tick": self._tick_count, "stats": None})
        for _ in range(max(0, int(ticks))):
            self.tick()
        self.trigger({"type": EventType.end, "tick": self._tick_count, "stats": self._last_stats})
        return self

    def close(self) -> None:
        """Shut down the worker pool, if any."""
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # -------------------------------------------------------------------------
    # Utility Methods
    # -------------------------------------------------------------------------

    def _get_executor(self) -> Optional[ThreadPoolExecutor]:
        if self._config.workers == 1:
            return None
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=self._config.workers, thread_name_prefix="barnes-hut"
            )
        return self._executor

    def _warn_escaped(self, dropped_indices: Sequence[int]) -> None:
        """Warn once per point the first time it falls outside the world."""
        for index in dropped_indices:
            if index in self._escaped:
                continue
            self._escaped.add(index)
            point = self._points[index]
            warnings.warn(
                f"Point {index} at ({point.x:.6g}, {point.y:.6g}) is outside the world "
                f"boundary {self._boundary} and no longer takes part in the simulation "
                "while it stays there.",
                PointEscapedWarning,
                stacklevel=3,
            )


__all__ = [
    "PointEscapedWarning",
    "Simulation",
    "TickStats",
    "build_and_evaluate",
]
