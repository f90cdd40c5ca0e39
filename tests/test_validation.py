"""Tests for input validation module."""

import math

import numpy as np
import pytest

from incremental_layout.validation import (
    InvalidBoundsError,
    InvalidCanvasSizeError,
    InvalidDimensionError,
    InvalidEdgeError,
    InvalidSubgraphError,
    InvalidVertexError,
    ValidationError,
    validate_bounds,
    validate_canvas_size,
    validate_dimension,
    validate_edge,
    validate_iterations,
    validate_subgraph_weights,
    validate_threshold,
    validate_vertex,
    validate_vertex_count,
)


class TestSubgraphWeightValidation:
    """Tests for subgraph weight validation."""

    def test_valid_mapping(self):
        """Mapping input is returned as a float dict."""
        assert validate_subgraph_weights({"a": 1, "b": 2.5}) == {"a": 1.0, "b": 2.5}

    def test_valid_pairs_keep_order(self):
        """Pair input keeps its order."""
        result = validate_subgraph_weights([("b", 1.0), ("a", 2.0)])
        assert list(result) == ["b", "a"]

    def test_duplicate_key_raises(self):
        """Repeated keys raise InvalidSubgraphError."""
        with pytest.raises(InvalidSubgraphError, match="Duplicate subgraph key"):
            validate_subgraph_weights([("a", 1.0), ("a", 2.0)])

    def test_zero_weight_raises(self):
        """Zero weight raises."""
        with pytest.raises(InvalidSubgraphError, match="positive and finite"):
            validate_subgraph_weights({"a": 0.0})

    def test_nan_weight_raises(self):
        """NaN weight raises."""
        with pytest.raises(InvalidSubgraphError, match="positive and finite"):
            validate_subgraph_weights({"a": math.nan})

    def test_infinite_weight_raises(self):
        """Infinite weight raises."""
        with pytest.raises(InvalidSubgraphError):
            validate_subgraph_weights({"a": math.inf})


class TestVertexValidation:
    """Tests for vertex and edge validation."""

    def test_valid_vertex(self):
        """In-range ids are returned as ints."""
        assert validate_vertex(2, 3) == 2

    def test_numpy_integer_accepted(self):
        """numpy integers are accepted."""
        result = validate_vertex(np.int64(1), 3)
        assert result == 1
        assert type(result) is int

    def test_negative_vertex_raises(self):
        """Negative ids raise."""
        with pytest.raises(InvalidVertexError, match="out of bounds"):
            validate_vertex(-1, 3)

    def test_vertex_past_end_raises(self):
        """Ids >= count raise."""
        with pytest.raises(InvalidVertexError, match=r"\[0, 3\)"):
            validate_vertex(3, 3)

    def test_non_int_vertex_raises(self):
        """Floats and bools are not vertex ids."""
        with pytest.raises(InvalidVertexError, match="must be an int"):
            validate_vertex(1.0, 3)
        with pytest.raises(InvalidVertexError):
            validate_vertex(True, 3)

    def test_self_loop_raises(self):
        """Self loops raise InvalidEdgeError."""
        with pytest.raises(InvalidEdgeError, match="Self loop"):
            validate_edge(1, 1, 3)

    def test_valid_edge(self):
        """Distinct in-range endpoints pass."""
        assert validate_edge(0, 2, 3) == (0, 2)

    def test_negative_count_raises(self):
        """Negative vertex counts raise."""
        with pytest.raises(InvalidVertexError):
            validate_vertex_count(-1)

    def test_non_integer_count_raises(self):
        """Fractional and boolean counts are rejected, not truncated."""
        assert validate_vertex_count(np.int64(4)) == 4
        with pytest.raises(InvalidVertexError, match="must be an int"):
            validate_vertex_count(2.5)
        with pytest.raises(InvalidVertexError):
            validate_vertex_count(True)


class TestBoundsValidation:
    """Tests for bounds validation."""

    def test_valid_bounds(self):
        """Positive bounds are returned as floats."""
        assert validate_bounds([1, 2.5], 2) == [1.0, 2.5]

    def test_wrong_length_raises(self):
        """Length must match the dimension."""
        with pytest.raises(InvalidBoundsError, match="Expected 2 bounds"):
            validate_bounds([1.0], 2)

    def test_non_positive_raises(self):
        """Zero and negative bounds raise."""
        with pytest.raises(InvalidBoundsError, match="Bound 1"):
            validate_bounds([1.0, 0.0], 2)
        with pytest.raises(InvalidBoundsError):
            validate_bounds([-1.0], 1)


class TestParameterValidation:
    """Tests for scalar parameter validation."""

    def test_dimension(self):
        """Dimension must be at least one."""
        assert validate_dimension(3) == 3
        with pytest.raises(InvalidDimensionError):
            validate_dimension(0)

    def test_non_integer_dimension_raises(self):
        """A float dimension is rejected rather than truncated."""
        assert validate_dimension(np.int32(2)) == 2
        with pytest.raises(InvalidDimensionError, match="must be an int"):
            validate_dimension(2.5)
        with pytest.raises(InvalidDimensionError):
            validate_dimension(2.0)

    def test_threshold(self):
        """Threshold must be finite and non-negative."""
        assert validate_threshold(0) == 0.0
        with pytest.raises(ValidationError):
            validate_threshold(-1e-3)
        with pytest.raises(ValidationError):
            validate_threshold(math.nan)

    def test_iterations(self):
        """Iterations must be positive."""
        assert validate_iterations(1) == 1
        with pytest.raises(ValidationError, match="iterations must be >= 1"):
            validate_iterations(0)

    def test_canvas_size(self):
        """Canvas size checks carry over."""
        assert validate_canvas_size([800, 600]) == (800.0, 600.0)
        with pytest.raises(InvalidCanvasSizeError, match="width must be positive"):
            validate_canvas_size([0, 600])
        with pytest.raises(InvalidCanvasSizeError, match="must have 2 elements"):
            validate_canvas_size([800])

    def test_hierarchy(self):
        """All errors are ValidationErrors and ValueErrors."""
        for cls in (
            InvalidSubgraphError,
            InvalidVertexError,
            InvalidEdgeError,
            InvalidBoundsError,
            InvalidDimensionError,
            InvalidCanvasSizeError,
        ):
            assert issubclass(cls, ValidationError)
            assert issubclass(cls, ValueError)
