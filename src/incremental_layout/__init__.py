"""
incremental-layout: Incremental spectral graph layout in Python.

This package maintains low-dimensional vertex coordinates for one or more
weighted, mutable graphs sharing a vertex set, refining them step by step
instead of recomputing from scratch after every change.

Available algorithms:
- spectral: Incremental multi-dimensional spectral layout
"""

__version__ = "0.1.0"

# Base classes for building layouts
from .base import (
    BaseLayout,
    IncrementalLayout,
)

# Spectral layouts
from .spectral import SpectralLayout
from .types import (
    Edge,
    Event,
    EventType,
    Node,
    SizeType,
)

# Validation utilities
from .validation import (
    InvalidBoundsError,
    InvalidCanvasSizeError,
    InvalidDimensionError,
    InvalidEdgeError,
    InvalidSubgraphError,
    InvalidVertexError,
    ValidationError,
)

__all__ = [
    # Version
    "__version__",
    # Shared types
    "Node",
    "EventType",
    "Event",
    "Edge",
    "SizeType",
    # Base classes
    "BaseLayout",
    "IncrementalLayout",
    # Spectral layouts
    "SpectralLayout",
    # Validation
    "ValidationError",
    "InvalidSubgraphError",
    "InvalidVertexError",
    "InvalidEdgeError",
    "InvalidBoundsError",
    "InvalidDimensionError",
    "InvalidCanvasSizeError",
]
