"""
Incremental spectral layout algorithm.

Maintains, for a set of weighted subgraphs sharing one dense vertex-id space,
a coordinate per vertex in each of ``dimension`` axes. Each axis approximates
a leading eigenvector of the degree-normalized adjacency operator and is
refined by power iteration with Gram-Schmidt deflation against the axes that
have already stabilized. Vertices and edges can be added and removed at any
time without restarting the computation.
"""

from __future__ import annotations

from typing import (
    Any,
    Callable,
    Hashable,
    Iterable,
    Mapping,
    Optional,
    Sequence,
    Union,
)

import numpy as np

from ..base import IncrementalLayout
from ..types import Edge, Event, Node, SizeType
from ..validation import (
    InvalidDimensionError,
    InvalidSubgraphError,
    validate_bounds,
    validate_canvas_size,
    validate_dimension,
    validate_edge,
    validate_subgraph_weights,
    validate_threshold,
    validate_vertex,
    validate_vertex_count,
)
from .adjacency import Subgraph
from .cache import WeightCache
from .vectors import cosine_distance, orthogonalize, rebound, repair_non_finite

# Diffusion results smaller than this fraction of the input count as zero.
_COLLAPSE_TOLERANCE = 1e-12


class SpectralLayout(IncrementalLayout):
    """
    Incremental multi-dimensional spectral layout.

    The graph is split into named subgraphs, each with its own weight. Edge
    and vertex mutations only mark cached weights dirty; the work happens in
    advance(), which the host calls repeatedly (once per frame, say) until it
    returns None.

    Vertex ids are kept dense. remove_vertex() moves the highest id into the
    freed slot and returns it, so callers holding references to that id must
    rewrite them.

    The instance is not safe for concurrent use; a multi-threaded host must
    serialize all calls.

    Example:
        layout = SpectralLayout(
            subgraph_weights={"friends": 1.0, "colleagues": 0.5},
            vertex_count=3,
            dimension=2,
        )
        layout.attach(0, 1, "friends")
        layout.attach(1, 2, "colleagues")
        while layout.advance() is not None:
            pass
        layout.position_of(0)
    """

    def __init__(
        self,
        *,
        subgraph_weights: Union[Mapping[Hashable, float], Iterable[tuple[Hashable, float]]],
        vertex_count: int = 0,
        dimension: int = 2,
        threshold: float = 1e-9,
        bounds: Optional[Sequence[float]] = None,
        random_seed: Optional[int] = None,
        on_start: Optional[Callable[[Optional[Event]], None]] = None,
        on_tick: Optional[Callable[[Optional[Event]], None]] = None,
        on_end: Optional[Callable[[Optional[Event]], None]] = None,
        iterations: int = 10_000,
    ) -> None:
        """
        Initialize spectral layout.

        Args:
            subgraph_weights: Weight of each subgraph, keyed by any hashable
                label. The set of keys is fixed for the lifetime of the layout.
            vertex_count: Number of vertices to start with.
            dimension: Number of axes to compute.
            threshold: Cosine distance below which a step counts as stable.
            bounds: Clamp magnitude per axis. Defaults to 1.0 for every axis.
            random_seed: Random seed for reproducible layouts
            on_start: Callback for start event
            on_tick: Callback for tick event
            on_end: Callback for end event
            iterations: Maximum number of steps taken by run()
        """
        super().__init__(
            random_seed=random_seed,
            on_start=on_start,
            on_tick=on_tick,
            on_end=on_end,
            iterations=iterations,
        )

        weights = validate_subgraph_weights(subgraph_weights)
        count = validate_vertex_count(vertex_count)
        self._dimension: int = validate_dimension(dimension)
        self._threshold: float = validate_threshold(threshold)

        self._graphs: dict[Hashable, Subgraph] = {
            key: Subgraph(weight, count) for key, weight in weights.items()
        }
        self._cache = WeightCache(count)

        self._bounds: np.ndarray = np.asarray(
            validate_bounds(bounds if bounds is not None else [1.0] * self._dimension, self._dimension),
            dtype=np.float64,
        )

        # Rows are axes; columns past _count are spare capacity.
        self._count: int = count
        self._positions: np.ndarray = np.empty((self._dimension, max(count, 8)))
        for k in range(self._dimension):
            bound = self._bounds[k]
            self._positions[k, :count] = self._rng.uniform(-bound, bound, size=count)

        self._converged_count: int = 0
        self._converging: bool = False

    @classmethod
    def from_edges(
        cls,
        edges: Mapping[Hashable, Iterable[Edge]],
        subgraph_weights: Mapping[Hashable, float],
        **kwargs: Any,
    ) -> SpectralLayout:
        """
        Build a layout and attach every edge of every subgraph.

        ``vertex_count`` defaults to one more than the largest id referenced.

        Args:
            edges: Subgraph key -> iterable of (source, target) pairs
            subgraph_weights: Weight of each subgraph
            **kwargs: Passed through to the constructor
        """
        edge_lists = {key: list(pairs) for key, pairs in edges.items()}
        if "vertex_count" not in kwargs:
            referenced = [v for pairs in edge_lists.values() for pair in pairs for v in pair]
            kwargs["vertex_count"] = max(referenced) + 1 if referenced else 0

        layout = cls(subgraph_weights=subgraph_weights, **kwargs)
        for key, pairs in edge_lists.items():
            for first, second in pairs:
                layout.attach(first, second, key)
        return layout

    def __len__(self) -> int:
        return self._count

    def __repr__(self) -> str:
        return (
            f"SpectralLayout(vertices={self._count}, dimension={self._dimension}, "
            f"subgraphs={list(self._graphs)}, converged={self._converged_count})"
        )

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def dimension(self) -> int:
        """Get number of axes."""
        return self._dimension

    @property
    def vertex_count(self) -> int:
        """Get number of vertices; ids are exactly range(vertex_count)."""
        return self._count

    @property
    def threshold(self) -> float:
        """Get convergence threshold (cosine distance)."""
        return self._threshold

    @threshold.setter
    def threshold(self, value: float) -> None:
        """Set convergence threshold."""
        self._threshold = validate_threshold(value)

    @property
    def bounds(self) -> np.ndarray:
        """Get a copy of the per-axis clamp magnitudes."""
        return self._bounds.copy()

    @bounds.setter
    def bounds(self, value: Sequence[float]) -> None:
        """Set per-axis clamp magnitudes. Resets convergence."""
        self._bounds = np.asarray(validate_bounds(value, self._dimension), dtype=np.float64)
        self._reset_convergence()

    @property
    def positions(self) -> np.ndarray:
        """Get a copy of all coordinates, shaped (dimension, vertex_count)."""
        return self._positions[:, : self._count].copy()

    @property
    def converged_count(self) -> int:
        """Get number of leading axes that have stabilized."""
        return self._converged_count

    @property
    def converging(self) -> bool:
        """Whether the lowest active axis has passed its first stability check."""
        return self._converging

    @property
    def is_converged(self) -> bool:
        """Whether every axis has stabilized and no mutation is pending."""
        return self._converged_count == self._dimension and not self._cache.dirty

    @property
    def subgraph_keys(self) -> tuple[Hashable, ...]:
        """Get the subgraph keys, in construction order."""
        return tuple(self._graphs)

    def subgraph_weight(self, key: Hashable) -> float:
        return self._graph(key).weight

    # -------------------------------------------------------------------------
    # Positions
    # -------------------------------------------------------------------------

    def position_of(self, vertex: int) -> np.ndarray:
        """Get a copy of the coordinates of ``vertex``, one per axis."""
        vertex = validate_vertex(vertex, self._count)
        return self._positions[:, vertex].copy()

    def set_position(self, vertex: int, coordinates: Sequence[float]) -> None:
        """
        Overwrite every coordinate of ``vertex``.

        Resets convergence, since the stabilized axes no longer hold.

        Raises:
            InvalidVertexError: If vertex is out of range
            InvalidDimensionError: If coordinates has the wrong length
        """
        vertex = validate_vertex(vertex, self._count)
        values = np.asarray(coordinates, dtype=np.float64)
        if values.shape != (self._dimension,):
            raise InvalidDimensionError(
                f"Expected {self._dimension} coordinates, got {values.size}"
            )
        self._positions[:, vertex] = values
        self._reset_convergence()

    def to_nodes(
        self,
        size: SizeType = (1.0, 1.0),
        padding: float = 0.0,
        axes: Optional[Sequence[int]] = None,
    ) -> list[Node]:
        """
        Project one or two axes onto a canvas.

        Axis 0 converges to the trivial (constant) eigenvector on a connected
        graph, so by default it is skipped whenever another axis exists:
        axes (1, 2) are used, or (1,) when the layout has two axes. Axis k maps
        [-bounds[k], bounds[k]] onto the padded canvas. With a single axis
        every node sits on the horizontal midline.

        Args:
            size: Canvas size as (width, height)
            padding: Margin kept free on every side
            axes: One or two axis indices for x and y

        Returns:
            One Node per vertex, in id order

        Raises:
            InvalidDimensionError: If axes is empty, too long or out of range
        """
        width, height = validate_canvas_size(size)
        if axes is None:
            axes = (0,) if self._dimension == 1 else tuple(range(1, min(self._dimension, 3)))
        axes = tuple(axes)
        if not 1 <= len(axes) <= 2:
            raise InvalidDimensionError(f"Expected 1 or 2 axes, got {len(axes)}")
        for axis in axes:
            if not 0 <= axis < self._dimension:
                raise InvalidDimensionError(
                    f"Axis {axis} out of bounds [0, {self._dimension})"
                )

        usable = (width - 2 * padding, height - 2 * padding)
        coords = []
        for offset, axis in enumerate(axes):
            bound = self._bounds[axis]
            unit = (self._positions[axis, : self._count] + bound) / (2 * bound)
            coords.append(padding + unit * usable[offset])
        if len(coords) == 1:
            coords.append(np.full(self._count, height / 2))

        return [
            Node(index=vertex, x=float(coords[0][vertex]), y=float(coords[1][vertex]))
            for vertex in range(self._count)
        ]

    # -------------------------------------------------------------------------
    # Edges
    # -------------------------------------------------------------------------

    def attach(self, first: int, second: int, subgraph: Hashable) -> None:
        """
        Add arc ``first -> second`` to ``subgraph`` if it doesn't exist.

        Raises:
            InvalidSubgraphError: If subgraph is unknown
            InvalidVertexError: If an endpoint is out of range
            InvalidEdgeError: If first == second
        """
        graph = self._graph(subgraph)
        first, second = validate_edge(first, second, self._count)
        if graph.attach(first, second):
            self._cache.mark_dirty(first, second)

    def detach(self, first: int, second: int, subgraph: Hashable) -> None:
        """
        Remove arc ``first -> second`` from ``subgraph`` if it exists.

        Raises:
            InvalidSubgraphError: If subgraph is unknown
            InvalidVertexError: If an endpoint is out of range
            InvalidEdgeError: If first == second
        """
        graph = self._graph(subgraph)
        first, second = validate_edge(first, second, self._count)
        if graph.detach(first, second):
            self._cache.mark_dirty(first, second)

    def list_edges(self) -> dict[Hashable, list[Edge]]:
        """Get every arc of every subgraph as (source, target) pairs."""
        return {key: list(graph.edges()) for key, graph in self._graphs.items()}

    def degree_of(self, vertex: int) -> float:
        """Get the weighted degree of ``vertex`` across all subgraphs."""
        vertex = validate_vertex(vertex, self._count)
        self._flush()
        return self._cache.degrees[vertex]

    def edge_weights_of(self, vertex: int) -> dict[int, float]:
        """Get a copy of the normalized neighbour weights of ``vertex``."""
        vertex = validate_vertex(vertex, self._count)
        self._flush()
        return dict(self._cache.weights[vertex])

    # -------------------------------------------------------------------------
    # Vertices
    # -------------------------------------------------------------------------

    def add_vertex(self) -> int:
        """
        Add an isolated vertex at a random position.

        Returns:
            The new vertex id, equal to the previous vertex_count.
        """
        vertex = self._count
        for graph in self._graphs.values():
            graph.append_vertex()
        self._cache.append_vertex()

        if vertex == self._positions.shape[1]:
            grown = np.empty((self._dimension, 2 * vertex))
            grown[:, :vertex] = self._positions[:, :vertex]
            self._positions = grown
        for k in range(self._dimension):
            bound = self._bounds[k]
            self._positions[k, vertex] = self._rng.uniform(-bound, bound)

        self._count += 1
        self._reset_convergence()
        return vertex

    def remove_vertex(self, vertex: int) -> Optional[int]:
        """
        Remove ``vertex`` and every arc touching it.

        Returns:
            None if ``vertex`` was the highest id. Otherwise the former
            highest id, which now lives at ``vertex``: callers must rewrite
            every external reference to the returned id as ``vertex``.

        Raises:
            InvalidVertexError: If vertex is out of range
        """
        vertex = validate_vertex(vertex, self._count)
        last = self._count - 1

        for graph in self._graphs.values():
            self._cache.mark_dirty(*graph.remove_edges_incident_to(vertex))

        moved_neighbours: set[int] = set()
        if vertex != last:
            for graph in self._graphs.values():
                graph.replace_with_last_vertex(vertex)
                moved_neighbours |= graph.neighbours(vertex)
            self._positions[:, vertex] = self._positions[:, last]

        self._cache.remove_vertex(vertex, moved_neighbours)
        for graph in self._graphs.values():
            graph.remove_last_vertex()
        self._count -= 1
        self._reset_convergence()

        return None if vertex == last else last

    # -------------------------------------------------------------------------
    # Iteration
    # -------------------------------------------------------------------------

    def advance(self, dimension: Optional[int] = None) -> Optional[int]:
        """
        Perform one refinement step.

        Args:
            dimension: Axis to refine. By default the lowest unconverged axis
                is strongly favoured, and forced while its convergence is
                being confirmed.

        Returns:
            The axis that was updated, or None if every axis has converged.

        Raises:
            InvalidDimensionError: If dimension is out of range
        """
        self._flush()

        if self._converged_count == self._dimension:
            return None
        if self._count <= self._converged_count:
            # Every remaining axis would deflate to nothing.
            self._converged_count = self._dimension
            self._converging = False
            return None

        if dimension is not None:
            if not 0 <= dimension < self._dimension:
                raise InvalidDimensionError(
                    f"Dimension {dimension} out of bounds [0, {self._dimension})"
                )
            updating = dimension
        elif self._converging:
            updating = self._converged_count
        else:
            active = self._dimension - self._converged_count
            updating = self._converged_count + (int(self._rng.geometric(0.5)) - 1) % active

        values = self._positions[updating, : self._count]
        old = values.copy() if updating == self._converged_count else None

        if updating == self._converged_count:
            for other in range(self._converged_count):
                orthogonalize(values, self._positions[other, : self._count])
        elif updating > 0:
            other = int(self._rng.integers(updating))
            orthogonalize(values, self._positions[other, : self._count])

        self._diffuse(values, self._bounds[updating])

        if old is not None and cosine_distance(old, values) < self._threshold:
            if self._converging:
                self._converged_count += 1
            self._converging = not self._converging

        return updating

    def _diffuse(self, values: np.ndarray, bound: float) -> None:
        """One power-iteration step ``x <- x + P x``, then rebound in place."""
        rows, cols, weights = self._cache.edge_arrays()
        if rows.size:
            before = values.copy()
            values += np.bincount(rows, weights=weights * values[cols], minlength=values.size)
            # x lies in the null space of I + P (e.g. the alternating vector
            # of a bipartite graph): it is already an eigenvector, keep it.
            scale = float(np.max(np.abs(before)))
            if float(np.max(np.abs(values))) <= _COLLAPSE_TOLERANCE * scale:
                values[:] = before
        repair_non_finite(values, bound, self._rng)
        rebound(values, bound, self._rng)

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _graph(self, key: Hashable) -> Subgraph:
        try:
            return self._graphs[key]
        except (KeyError, TypeError):
            raise InvalidSubgraphError(f"Unknown subgraph {key!r}") from None

    def _flush(self) -> None:
        """Recompute dirty cache rows; topology changes void convergence."""
        if self._cache.cleanup(self._graphs.values()):
            self._reset_convergence()

    def _reset_convergence(self) -> None:
        self._converged_count = 0
        self._converging = False


__all__ = ["SpectralLayout"]
