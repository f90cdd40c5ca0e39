"""
Input validation utilities for incremental layouts.

Provides centralized validation functions for subgraph weights, vertex ids,
edges, bounds and other layout parameters. Raises descriptive exceptions on
invalid input.
"""

from __future__ import annotations

import math
from numbers import Integral
from typing import Any, Hashable, Iterable, Mapping, Sequence, Union


class ValidationError(ValueError):
    """Base exception for layout validation errors."""

    pass


class InvalidSubgraphError(ValidationError):
    """Raised when a subgraph key or weight is invalid."""

    pass


class InvalidVertexError(ValidationError):
    """Raised when a vertex id is out of range."""

    pass


class InvalidEdgeError(ValidationError):
    """Raised when an edge is malformed (e.g. a self loop)."""

    pass


class InvalidBoundsError(ValidationError):
    """Raised when dimension bounds are invalid."""

    pass


class InvalidDimensionError(ValidationError):
    """Raised when a dimension count or coordinate length is invalid."""

    pass


class InvalidCanvasSizeError(ValidationError):
    """Raised when canvas dimensions are invalid."""

    pass


def validate_subgraph_weights(
    weights: Union[Mapping[Hashable, float], Iterable[tuple[Hashable, float]]],
) -> dict[Hashable, float]:
    """
    Validate subgraph weights.

    Args:
        weights: Mapping of subgraph key to weight, or iterable of
            (key, weight) pairs.

    Returns:
        Validated {key: weight} dict, in input order

    Raises:
        InvalidSubgraphError: If a key repeats or a weight is not a
            positive finite number
    """
    items = weights.items() if isinstance(weights, Mapping) else weights

    result: dict[Hashable, float] = {}
    for key, weight in items:
        if key in result:
            raise InvalidSubgraphError(f"Duplicate subgraph key {key!r}")
        value = float(weight)
        if not math.isfinite(value) or value <= 0:
            raise InvalidSubgraphError(
                f"Subgraph {key!r} weight must be positive and finite, got {value}"
            )
        result[key] = value

    return result


def validate_vertex_count(count: int) -> int:
    """
    Validate initial vertex count is non-negative.

    Raises:
        InvalidVertexError: If count is not an int or count < 0
    """
    if isinstance(count, bool) or not isinstance(count, Integral):
        raise InvalidVertexError(f"vertex_count must be an int, got {count!r}")
    if count < 0:
        raise InvalidVertexError(f"vertex_count must be >= 0, got {count}")
    return int(count)


def validate_dimension(dimension: int) -> int:
    """
    Validate dimension count is at least one.

    Raises:
        InvalidDimensionError: If dimension is not an int or dimension < 1
    """
    if isinstance(dimension, bool) or not isinstance(dimension, Integral):
        raise InvalidDimensionError(f"dimension must be an int, got {dimension!r}")
    if dimension < 1:
        raise InvalidDimensionError(f"dimension must be >= 1, got {dimension}")
    return int(dimension)


def validate_vertex(vertex: Any, vertex_count: int) -> int:
    """
    Validate that a vertex id lies in [0, vertex_count).

    Args:
        vertex: Vertex id
        vertex_count: Number of vertices in the layout

    Returns:
        Validated vertex id

    Raises:
        InvalidVertexError: If vertex is not an int in range
    """
    if isinstance(vertex, bool) or not isinstance(vertex, Integral):
        raise InvalidVertexError(f"Vertex id must be an int, got {vertex!r}")
    if vertex < 0 or vertex >= vertex_count:
        raise InvalidVertexError(f"Vertex {vertex} out of bounds [0, {vertex_count})")
    return int(vertex)


def validate_edge(first: int, second: int, vertex_count: int) -> tuple[int, int]:
    """
    Validate edge endpoints.

    Raises:
        InvalidVertexError: If an endpoint is out of range
        InvalidEdgeError: If the edge is a self loop
    """
    first = validate_vertex(first, vertex_count)
    second = validate_vertex(second, vertex_count)
    if first == second:
        raise InvalidEdgeError(f"Self loop on vertex {first} is not allowed")
    return first, second


def validate_bounds(bounds: Sequence[float], dimension: int) -> list[float]:
    """
    Validate per-dimension bounds.

    Args:
        bounds: One clamp magnitude per dimension
        dimension: Expected number of dimensions

    Returns:
        Validated bounds as a list of floats

    Raises:
        InvalidBoundsError: If the length is wrong or any bound is not
            positive and finite
    """
    if len(bounds) != dimension:
        raise InvalidBoundsError(f"Expected {dimension} bounds, got {len(bounds)}")

    result = [float(b) for b in bounds]
    for k, bound in enumerate(result):
        if not math.isfinite(bound) or bound <= 0:
            raise InvalidBoundsError(f"Bound {k} must be positive and finite, got {bound}")
    return result


def validate_threshold(threshold: float) -> float:
    """
    Validate convergence threshold is non-negative.

    Raises:
        ValidationError: If threshold < 0 or not finite
    """
    value = float(threshold)
    if not math.isfinite(value) or value < 0:
        raise ValidationError(f"threshold must be finite and >= 0, got {threshold}")
    return value


def validate_iterations(iterations: int) -> int:
    """
    Validate iteration count is positive.

    Raises:
        ValidationError: If iterations < 1
    """
    if iterations < 1:
        raise ValidationError(f"iterations must be >= 1, got {iterations}")
    return iterations


def validate_canvas_size(size: Sequence[float]) -> tuple[float, float]:
    """
    Validate canvas size dimensions.

    Args:
        size: [width, height] sequence

    Returns:
        Validated (width, height) tuple

    Raises:
        InvalidCanvasSizeError: If dimensions are invalid
    """
    if len(size) < 2:
        raise InvalidCanvasSizeError(
            f"Canvas size must have 2 elements [width, height], got {len(size)}"
        )

    width, height = float(size[0]), float(size[1])

    if width <= 0:
        raise InvalidCanvasSizeError(f"Canvas width must be positive, got {width}")
    if height <= 0:
        raise InvalidCanvasSizeError(f"Canvas height must be positive, got {height}")

    return width, height


__all__ = [
    "ValidationError",
    "InvalidSubgraphError",
    "InvalidVertexError",
    "InvalidEdgeError",
    "InvalidBoundsError",
    "InvalidDimensionError",
    "InvalidCanvasSizeError",
    "validate_subgraph_weights",
    "validate_vertex_count",
    "validate_dimension",
    "validate_vertex",
    "validate_edge",
    "validate_bounds",
    "validate_threshold",
    "validate_iterations",
    "validate_canvas_size",
]
