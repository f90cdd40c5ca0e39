"""
Per-subgraph adjacency store.

Each subgraph holds directed arcs over the shared dense vertex-id space as a
pair of out/in neighbour sets per vertex, plus a scalar weight applied to
every arc when the weight cache is built.
"""

from __future__ import annotations

from typing import Iterator

from ..types import Edge


class Subgraph:
    """
    Weighted directed adjacency over dense vertex ids.

    Invariant: ``v in out_edges[u]`` iff ``u in in_edges[v]``. Self loops are
    rejected by the owning layout before they reach this class.

    Example:
        graph = Subgraph(weight=1.0, vertex_count=3)
        graph.attach(0, 1)
        graph.neighbours(1)  # {0}
    """

    __slots__ = ("weight", "out_edges", "in_edges")

    def __init__(self, weight: float, vertex_count: int = 0) -> None:
        self.weight: float = weight
        self.out_edges: list[set[int]] = [set() for _ in range(vertex_count)]
        self.in_edges: list[set[int]] = [set() for _ in range(vertex_count)]

    def __len__(self) -> int:
        return len(self.out_edges)

    def __repr__(self) -> str:
        return f"Subgraph(weight={self.weight}, vertices={len(self)}, arcs={self.arc_count()})"

    # -------------------------------------------------------------------------
    # Edges
    # -------------------------------------------------------------------------

    def attach(self, first: int, second: int) -> bool:
        """
        Add arc ``first -> second``.

        Returns:
            True if the arc was inserted, False if it already existed.
        """
        assert first != second
        if second in self.out_edges[first]:
            return False
        self.out_edges[first].add(second)
        self.in_edges[second].add(first)
        return True

    def detach(self, first: int, second: int) -> bool:
        """
        Remove arc ``first -> second``.

        Returns:
            True if the arc was removed, False if it did not exist.
        """
        assert first != second
        if second not in self.out_edges[first]:
            return False
        self.out_edges[first].discard(second)
        self.in_edges[second].discard(first)
        return True

    def has_arc(self, first: int, second: int) -> bool:
        return second in self.out_edges[first]

    def neighbours(self, vertex: int) -> set[int]:
        """Vertices joined to ``vertex`` by an arc in either direction."""
        return self.out_edges[vertex] | self.in_edges[vertex]

    def degree(self, vertex: int) -> int:
        """Number of arcs touching ``vertex`` (out plus in)."""
        return len(self.out_edges[vertex]) + len(self.in_edges[vertex])

    def arc_count(self) -> int:
        return sum(len(targets) for targets in self.out_edges)

    def edges(self) -> Iterator[Edge]:
        """Iterate over every arc as ``(source, target)``."""
        for first, seconds in enumerate(self.out_edges):
            for second in seconds:
                yield first, second

    # -------------------------------------------------------------------------
    # Vertices
    # -------------------------------------------------------------------------

    def append_vertex(self) -> None:
        self.out_edges.append(set())
        self.in_edges.append(set())

    def remove_last_vertex(self) -> None:
        """Drop the trailing slot, which must already be edge-free."""
        assert not self.out_edges[-1] and not self.in_edges[-1]
        self.out_edges.pop()
        self.in_edges.pop()

    def remove_edges_incident_to(self, vertex: int) -> set[int]:
        """
        Remove every arc touching ``vertex``.

        Returns:
            The former neighbours, whose cached weights are now stale.
        """
        affected: set[int] = set()
        for neighbour in self.out_edges[vertex]:
            self.in_edges[neighbour].discard(vertex)
            affected.add(neighbour)
        for neighbour in self.in_edges[vertex]:
            self.out_edges[neighbour].discard(vertex)
            affected.add(neighbour)
        self.out_edges[vertex] = set()
        self.in_edges[vertex] = set()
        return affected

    def replace_with_last_vertex(self, vertex: int) -> None:
        """
        Move the highest id into the empty slot ``vertex``.

        Every arc referencing the last id is rewritten to reference
        ``vertex``. The last slot is left empty for remove_last_vertex().
        """
        last = len(self.out_edges) - 1
        assert vertex != last
        assert not self.out_edges[vertex] and not self.in_edges[vertex]

        for neighbour in self.out_edges[last]:
            self.in_edges[neighbour].discard(last)
            self.in_edges[neighbour].add(vertex)
        for neighbour in self.in_edges[last]:
            self.out_edges[neighbour].discard(last)
            self.out_edges[neighbour].add(vertex)

        self.out_edges[vertex], self.out_edges[last] = self.out_edges[last], self.out_edges[vertex]
        self.in_edges[vertex], self.in_edges[last] = self.in_edges[last], self.in_edges[vertex]


__all__ = ["Subgraph"]
