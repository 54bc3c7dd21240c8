"""
Input validation utilities for the Barnes-Hut simulation.

Provides centralized validation functions for the world boundary, the
numeric parameters and the point collection. Raises descriptive exceptions
on invalid input; nothing past this boundary raises.
"""

from __future__ import annotations

import math
from typing import Any, Optional, Sequence

from .types import Point, Rect, RectLike, as_rect


class ValidationError(ValueError):
    """Base exception for simulation validation errors."""

    pass


class InvalidBoundaryError(ValidationError):
    """Raised when the world boundary is degenerate."""

    pass


class InvalidParameterError(ValidationError):
    """Raised when a numeric simulation parameter is out of range."""

    pass


class InvalidPointError(ValidationError):
    """Raised when a point is malformed."""

    pass


def validate_boundary(boundary: RectLike) -> Rect:
    """
    Validate the world boundary rectangle.

    Args:
        boundary: Rect or (left, top, width, height) sequence

    Returns:
        Validated Rect

    Raises:
        InvalidBoundaryError: If the rectangle is malformed or has no area
    """
    if not isinstance(boundary, Rect):
        try:
            count = len(boundary)
        except TypeError as exc:
            raise InvalidBoundaryError(
                f"Boundary must be a Rect or a sequence, got {boundary!r}"
            ) from exc
        if count != 4:
            raise InvalidBoundaryError(
                f"Boundary must have 4 elements [left, top, width, height], got {count}"
            )

    try:
        rect = as_rect(boundary)
    except (TypeError, ValueError) as exc:
        raise InvalidBoundaryError(f"Boundary must contain numbers, got {boundary!r}") from exc

    for name in ("left", "top", "width", "height"):
        value = getattr(rect, name)
        if not math.isfinite(value):
            raise InvalidBoundaryError(f"Boundary {name} must be finite, got {value}")
    if rect.width <= 0:
        raise InvalidBoundaryError(f"Boundary width must be positive, got {rect.width}")
    if rect.height <= 0:
        raise InvalidBoundaryError(f"Boundary height must be positive, got {rect.height}")

    return rect


def validate_positive(name: str, value: Any) -> float:
    """Validate that a parameter is a finite, strictly positive number."""
    number = _as_number(name, value)
    if not number > 0:
        raise InvalidParameterError(f"{name} must be positive, got {number}")
    return number


def validate_non_negative(name: str, value: Any) -> float:
    """Validate that a parameter is a finite number >= 0."""
    number = _as_number(name, value)
    if number < 0:
        raise InvalidParameterError(f"{name} must be non-negative, got {number}")
    return number


def validate_finite(name: str, value: Any) -> float:
    """Validate that a parameter is a finite number."""
    return _as_number(name, value)


def validate_count(
    name: str, value: Any, minimum: int = 1, allow_none: bool = False
) -> Optional[int]:
    """
    Validate an integer count parameter.

    Args:
        name: Parameter name (for error messages)
        value: Value to check
        minimum: Smallest accepted value
        allow_none: Whether None is accepted

    Returns:
        The validated integer (or None when allowed)

    Raises:
        InvalidParameterError: If value is not an integer >= minimum
    """
    if value is None:
        if allow_none:
            return None
        raise InvalidParameterError(f"{name} is required")
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidParameterError(f"{name} must be an integer, got {value!r}")
    if value < minimum:
        raise InvalidParameterError(f"{name} must be >= {minimum}, got {value}")
    return value


def validate_points(points: Sequence[Point], strict: bool = True) -> list[tuple[int, str]]:
    """
    Validate the point collection.

    Args:
        points: Sequence of Point objects
        strict: If True, raises on invalid. If False, returns list of issues.

    Returns:
        List of (point_index, issue_description) tuples

    Raises:
        InvalidPointError: If strict=True and invalid points found
    """
    issues: list[tuple[int, str]] = []

    for i, point in enumerate(points):
        if not isinstance(point, Point):
            issues.append((i, f"Point {i}: expected Point, got {type(point).__name__}"))
            continue
        if not (point.mass > 0 and math.isfinite(point.mass)):
            issues.append((i, f"Point {i}: mass must be positive, got {point.mass}"))
        for name in ("position", "velocity"):
            shape = getattr(point, name).shape
            if shape != (2,):
                issues.append((i, f"Point {i}: {name} must be a 2-vector, got shape {shape}"))

    if strict and issues:
        msg = "Invalid points:\n" + "\n".join(issue[1] for issue in issues)
        raise InvalidPointError(msg)

    return issues


def _as_number(name: str, value: Any) -> float:
    if isinstance(value, bool):
        raise InvalidParameterError(f"{name} must be a number, got {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidParameterError(f"{name} must be a number, got {value!r}") from exc
    if not math.isfinite(number):
        raise InvalidParameterError(f"{name} must be finite, got {number}")
    return number


__all__ = [
    "InvalidBoundaryError",
    "InvalidParameterError",
    "InvalidPointError",
    "ValidationError",
    "validate_boundary",
    "validate_count",
    "validate_finite",
    "validate_non_negative",
    "validate_points",
    "validate_positive",
]
