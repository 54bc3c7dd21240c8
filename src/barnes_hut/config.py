"""
Simulation parameters.

The defaults reproduce the constants of the reference demo: an 800x800
world, theta 0.5, G 0.1, softening 15 and a unit time step.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields, replace
from typing import TYPE_CHECKING, Any, Mapping, Optional

if TYPE_CHECKING:
    from typing_extensions import Self

from .validation import (
    InvalidParameterError,
    validate_count,
    validate_finite,
    validate_non_negative,
    validate_positive,
)

DEFAULT_THETA = 0.5
DEFAULT_GRAVITY_CONSTANT = 0.1
DEFAULT_SOFTENING = 15.0
DEFAULT_TIME_STEP = 1.0
# Deep enough that the smallest cell of an 800-wide world is far below
# float precision of typical coordinates; only coincident points reach it.
DEFAULT_MAX_DEPTH = 32


@dataclass(frozen=True)
class SimulationConfig:
    """
    Numeric parameters of one Barnes-Hut simulation.

    Attributes:
        theta: Opening-angle threshold (0 = exact, higher = more approximation)
        gravity_constant: Strength of the inverse-square attraction
        softening: Additive length keeping forces finite at small separation
        time_step: Integration step per tick
        max_depth: Deepest level the quadtree subdivides to; coincident
            points share a leaf bucket at this depth
        workers: Thread count for force evaluation (None = executor default,
            1 = evaluate inline)
    """

    theta: float = DEFAULT_THETA
    gravity_constant: float = DEFAULT_GRAVITY_CONSTANT
    softening: float = DEFAULT_SOFTENING
    time_step: float = DEFAULT_TIME_STEP
    max_depth: int = DEFAULT_MAX_DEPTH
    workers: Optional[int] = None

    def __post_init__(self) -> None:
        # Frozen dataclass: normalise through object.__setattr__
        object.__setattr__(self, "theta", validate_non_negative("theta", self.theta))
        object.__setattr__(
            self, "gravity_constant", validate_finite("gravity_constant", self.gravity_constant)
        )
        object.__setattr__(self, "softening", validate_positive("softening", self.softening))
        object.__setattr__(self, "time_step", validate_positive("time_step", self.time_step))
        validate_count("max_depth", self.max_depth, minimum=1)
        validate_count("workers", self.workers, minimum=1, allow_none=True)

    @property
    def softening_sq(self) -> float:
        return self.softening * self.softening

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SimulationConfig:
        """
        Build a config from a mapping.

        Raises:
            InvalidParameterError: If the mapping has keys that are not
                config fields, or a value is out of range.
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise InvalidParameterError(f"Unknown simulation parameters: {', '.join(unknown)}")
        return cls(**dict(data))

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def replace(self, **overrides: Any) -> Self:
        """Return a copy with the given fields replaced."""
        return replace(self, **overrides)


__all__ = [
    "DEFAULT_GRAVITY_CONSTANT",
    "DEFAULT_MAX_DEPTH",
    "DEFAULT_SOFTENING",
    "DEFAULT_THETA",
    "DEFAULT_TIME_STEP",
    "SimulationConfig",
]
