"""
Common types for incremental layouts.

This module provides the fundamental types shared across the package:
- EventType: Layout lifecycle events
- Event: Event payload for callbacks
- Node: Canvas-space vertex handed to a host visualiser
- Type aliases for edges and canvas sizes
"""

from __future__ import annotations

from enum import IntEnum
from typing import Any, Optional, Sequence, TypedDict, Union


class EventType(IntEnum):
    """
    Layout lifecycle events.

    - start: Layout iterations have begun
    - tick: Fired once per refinement step (for animation)
    - end: Layout has converged or stopped
    """

    start = 0
    tick = 1
    end = 2


class Event(TypedDict, total=False):
    """Event payload passed to event listeners."""

    type: EventType
    dimension: Optional[int]
    converged_count: int


class Node:
    """
    Vertex projected onto a canvas.

    Attributes:
        index: Vertex id
        x: X coordinate
        y: Y coordinate
    """

    def __init__(self, **kwargs: Any) -> None:
        """Initialize node with optional properties."""
        self.index: Optional[int] = kwargs.get("index")
        self.x: float = kwargs.get("x", 0.0)
        self.y: float = kwargs.get("y", 0.0)

        # Copy any additional custom properties
        for key, value in kwargs.items():
            if not hasattr(self, key):
                setattr(self, key, value)

    def __repr__(self) -> str:
        return f"Node(index={self.index}, x={self.x:.2f}, y={self.y:.2f})"


Edge = tuple[int, int]
"""Directed arc (source, target) between two vertex ids."""

SizeType = Union[tuple[float, float], list[float], Sequence[float]]
"""Canvas size: (width, height) tuple, list, or sequence."""


__all__ = [
    "EventType",
    "Event",
    "Node",
    "Edge",
    "SizeType",
]
