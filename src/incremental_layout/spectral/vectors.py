"""
Vector kernels for the spectral iteration.

Small numpy helpers used by each refinement step: Gram-Schmidt deflation,
rescaling into a symmetric bound, repair of non-finite coordinates and the
cosine distance used to detect convergence.
"""

from __future__ import annotations

import numpy as np


def orthogonalize(value: np.ndarray, base: np.ndarray) -> np.ndarray:
    """
    Remove the projection of ``value`` onto ``base`` in place.

    A zero ``base`` has no direction to remove and leaves ``value`` unchanged.

    Returns:
        ``value``
    """
    norm = float(np.dot(base, base))
    if norm > 0:
        value -= (float(np.dot(value, base)) / norm) * base
    return value


def repair_non_finite(values: np.ndarray, bound: float, rng: np.random.Generator) -> np.ndarray:
    """Replace NaN/inf entries in place with uniform draws from [-bound, bound]."""
    bad = ~np.isfinite(values)
    if bad.any():
        values[bad] = rng.uniform(-bound, bound, size=int(bad.sum()))
    return values


def rebound(values: np.ndarray, bound: float, rng: np.random.Generator) -> np.ndarray:
    """
    Scale ``values`` in place so that ``max(|values|) == bound``.

    Relative proportions are preserved. A vector with no magnitude left is
    re-randomized first.
    """
    assert bound > 0
    if values.size == 0:
        return values

    peak = float(np.max(np.abs(values)))
    if peak == 0 or not np.isfinite(peak):
        values[:] = rng.uniform(-bound, bound, size=values.size)
        peak = float(np.max(np.abs(values)))

    values *= bound / peak
    # Scaling can leave the peak a rounding error above the bound.
    np.clip(values, -bound, bound, out=values)
    return values


def cosine_distance(old: np.ndarray, new: np.ndarray) -> float:
    """
    Compute ``1 - cos(angle)`` between two vectors.

    Returns:
        A value in [0, 2], or ``inf`` when either vector has no magnitude.
    """
    denominator = float(np.sqrt(np.dot(old, old) * np.dot(new, new)))
    if denominator == 0 or not np.isfinite(denominator):
        return float("inf")
    return max(0.0, 1.0 - float(np.dot(old, new)) / denominator)


__all__ = [
    "orthogonalize",
    "repair_non_finite",
    "rebound",
    "cosine_distance",
]
