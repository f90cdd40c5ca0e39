"""
Lazy, dirty-tracked cache of normalized edge weights.

For every vertex the cache stores the combined weight of each neighbour
across all subgraphs, divided by the vertex's total weighted degree, so each
row sums to one. Mutations only mark vertices dirty; cleanup() recomputes
exactly those rows before the next refinement step reads them.
"""

from __future__ import annotations

from typing import Iterable

import numpy as np

from .adjacency import Subgraph


class WeightCache:
    """
    Normalized neighbour weights and weighted degree per vertex.

    Example:
        cache = WeightCache(vertex_count=2)
        cache.mark_dirty(0, 1)
        cache.cleanup(subgraphs)
        cache.weights[0]  # {1: 1.0}
    """

    def __init__(self, vertex_count: int = 0) -> None:
        self.weights: list[dict[int, float]] = [{} for _ in range(vertex_count)]
        self.degrees: list[float] = [0.0] * vertex_count
        self.dirty: set[int] = set()

    def __len__(self) -> int:
        return len(self.degrees)

    # -------------------------------------------------------------------------
    # Computation
    # -------------------------------------------------------------------------

    @staticmethod
    def compute(vertex: int, subgraphs: Iterable[Subgraph]) -> tuple[dict[int, float], float]:
        """
        Compute the cache row of ``vertex`` from current adjacency.

        Returns:
            (neighbour -> normalized weight, total weighted degree). The
            mapping is empty when the degree is zero.
        """
        total = 0.0
        combined: dict[int, float] = {}
        for graph in subgraphs:
            total += graph.weight * graph.degree(vertex)
            for other in graph.in_edges[vertex]:
                combined[other] = combined.get(other, 0.0) + graph.weight
            for other in graph.out_edges[vertex]:
                combined[other] = combined.get(other, 0.0) + graph.weight

        if total == 0:
            return {}, 0.0
        return {other: weight / total for other, weight in combined.items()}, total

    def mark_dirty(self, *vertices: int) -> None:
        self.dirty.update(vertices)

    def cleanup(self, subgraphs: Iterable[Subgraph]) -> bool:
        """
        Recompute every dirty row and clear the dirty set.

        Returns:
            True if any row was recomputed.
        """
        if not self.dirty:
            return False

        graphs = list(subgraphs)
        for vertex in self.dirty:
            self.weights[vertex], self.degrees[vertex] = self.compute(vertex, graphs)
        self.dirty.clear()
        return True

    def is_consistent(self, subgraphs: Iterable[Subgraph]) -> bool:
        """Check every clean row against a fresh computation."""
        graphs = list(subgraphs)
        for vertex in range(len(self)):
            if vertex in self.dirty:
                continue
            weights, degree = self.compute(vertex, graphs)
            if degree != self.degrees[vertex] or weights.keys() != self.weights[vertex].keys():
                return False
            for other, weight in weights.items():
                if not np.isclose(weight, self.weights[vertex][other]):
                    return False
        return True

    def edge_arrays(self) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        """
        Flatten the cache into parallel arrays.

        Returns:
            (rows, cols, weights) such that ``weights[i]`` is the normalized
            weight of ``cols[i]`` as seen from ``rows[i]``.
        """
        count = sum(len(row) for row in self.weights)
        rows = np.empty(count, dtype=np.intp)
        cols = np.empty(count, dtype=np.intp)
        weights = np.empty(count, dtype=np.float64)

        i = 0
        for vertex, row in enumerate(self.weights):
            n = len(row)
            if n == 0:
                continue
            rows[i : i + n] = vertex
            cols[i : i + n] = list(row.keys())
            weights[i : i + n] = list(row.values())
            i += n

        return rows, cols, weights

    # -------------------------------------------------------------------------
    # Vertices
    # -------------------------------------------------------------------------

    def append_vertex(self) -> None:
        # A new vertex has no arcs, so its empty row is already clean.
        self.weights.append({})
        self.degrees.append(0.0)

    def remove_vertex(self, vertex: int, moved_neighbours: Iterable[int] = ()) -> None:
        """
        Remove ``vertex`` by moving the last row into its slot.

        Former neighbours of ``vertex`` must already be marked dirty.

        Args:
            vertex: Slot being freed
            moved_neighbours: Current neighbours of the vertex that moved
                into ``vertex``, taken from the adjacency. Clean rows among
                them have their ``last`` key rewritten to ``vertex``.
        """
        last = len(self.degrees) - 1
        self.dirty.discard(vertex)

        if vertex != last:
            # A clean row mirrors the adjacency, so it holds ``last`` exactly
            # when the arc exists.
            for neighbour in moved_neighbours:
                if neighbour not in self.dirty:
                    row = self.weights[neighbour]
                    row[vertex] = row.pop(last)
            self.weights[vertex] = self.weights[last]
            self.degrees[vertex] = self.degrees[last]
            if last in self.dirty:
                self.dirty.discard(last)
                self.dirty.add(vertex)

        self.weights.pop()
        self.degrees.pop()


__all__ = ["WeightCache"]
