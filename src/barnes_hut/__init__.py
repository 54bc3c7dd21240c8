"""
barnes-hut: 2-D Barnes-Hut gravity simulation in Python.

Approximates pairwise inverse-square forces among many point masses in
O(n log n) per step by grouping distant points into quadtree cells.

Available components:
- spatial: Quadtree construction and mass aggregation
- physics: Tree-walk force evaluation and semi-implicit Euler integration
- simulation: One-tick entry point and an iterative driver with events
- metrics: Conserved quantities and approximation error
"""

__version__ = "0.1.0"

# Configuration
from .config import SimulationConfig

# Diagnostics
from .metrics import (
    acceleration_error,
    center_of_mass,
    kinetic_energy,
    momentum,
    potential_energy,
    total_energy,
    total_mass,
)

# Physics
from .physics import (
    TraversalStats,
    accumulate_acceleration,
    direct_acceleration,
    direct_accelerations,
    kick,
    step,
)

# Simulation
from .simulation import (
    PointEscapedWarning,
    Simulation,
    TickStats,
    build_and_evaluate,
)

# Spatial data structures
from .spatial import QuadTree, QuadTreeNode, aggregate, insert, subdivide
from .types import (
    Body,
    Event,
    EventType,
    Point,
    PointLike,
    Rect,
    RectLike,
)

# Validation utilities
from .validation import (
    InvalidBoundaryError,
    InvalidParameterError,
    InvalidPointError,
    ValidationError,
    validate_boundary,
    validate_points,
)

__all__ = [
    # Version
    "__version__",
    # Shared types
    "Body",
    "Point",
    "Rect",
    "EventType",
    "Event",
    # Type aliases for API
    "PointLike",
    "RectLike",
    # Configuration
    "SimulationConfig",
    # Spatial data structures
    "QuadTree",
    "QuadTreeNode",
    "aggregate",
    "insert",
    "subdivide",
    # Physics
    "TraversalStats",
    "accumulate_acceleration",
    "direct_acceleration",
    "direct_accelerations",
    "kick",
    "step",
    # Simulation
    "PointEscapedWarning",
    "Simulation",
    "TickStats",
    "build_and_evaluate",
    # Metrics
    "acceleration_error",
    "center_of_mass",
    "kinetic_energy",
    "momentum",
    "potential_energy",
    "total_energy",
    "total_mass",
    # Validation
    "ValidationError",
    "InvalidBoundaryError",
    "InvalidParameterError",
    "InvalidPointError",
    "validate_boundary",
    "validate_points",
]
