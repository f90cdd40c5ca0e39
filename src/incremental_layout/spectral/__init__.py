"""
Incremental spectral graph layout.

This module provides a spectral layout that is refined step by step by
power iteration with deflation, and stays valid while vertices and edges
are added and removed.
"""

from .adjacency import Subgraph
from .cache import WeightCache
from .spectral import SpectralLayout

__all__ = [
    "SpectralLayout",
    "Subgraph",
    "WeightCache",
]
