"""
Tests for the incremental layout base classes (events and run loop).
"""

import pytest

from incremental_layout import EventType, IncrementalLayout, ValidationError
from incremental_layout.spectral import SpectralLayout

# =============================================================================
# Test Fixtures
# =============================================================================


def create_layout(**kwargs):
    """Create a small connected layout: a triangle plus a tail."""
    return SpectralLayout.from_edges(
        {"g": [(0, 1), (1, 2), (2, 0), (2, 3)]},
        subgraph_weights={"g": 1.0},
        random_seed=0,
        **kwargs,
    )


# =============================================================================
# Event Tests
# =============================================================================


class TestEvents:
    """Tests for start/tick/end events."""

    def test_run_fires_events(self):
        """run() fires start, ticks and end in order."""
        seen = []
        layout = create_layout(
            on_start=lambda e: seen.append(e["type"]),
            on_tick=lambda e: seen.append(e["type"]),
            on_end=lambda e: seen.append(e["type"]),
        )
        layout.run()

        assert seen[0] == EventType.start
        assert seen[-1] == EventType.end
        assert all(t == EventType.tick for t in seen[1:-1])
        assert len(seen) > 2

    def test_tick_payload(self):
        """Tick events report the touched dimension; the last one reports None."""
        ticks = []
        layout = create_layout()
        layout.on("tick", ticks.append)
        layout.run()

        assert ticks[-1]["dimension"] is None
        assert ticks[-1]["converged_count"] == layout.dimension
        assert all(t["dimension"] in (0, 1) for t in ticks[:-1])

    def test_on_returns_self(self):
        """on() supports chaining with enum or string names."""
        layout = create_layout()
        assert layout.on(EventType.end, lambda e: None).on("start", lambda e: None) is layout

    def test_unknown_event_name(self):
        """Unknown event names raise KeyError."""
        layout = create_layout()
        with pytest.raises(KeyError):
            layout.on("bogus", lambda e: None)


# =============================================================================
# Run Loop Tests
# =============================================================================


class TestRun:
    """Tests for tick/run/stop."""

    def test_run_converges(self):
        """run() leaves the layout converged."""
        layout = create_layout().run()
        assert layout.is_converged

    def test_tick_reports_done(self):
        """tick() returns True once nothing is left to do."""
        layout = create_layout().run()
        assert layout.tick() is True

    def test_iteration_cap_warns(self):
        """Hitting the cap before convergence warns."""
        layout = create_layout(threshold=0.0)
        with pytest.warns(RuntimeWarning, match="did not converge within 10 steps"):
            layout.run(iterations=10)
        assert not layout.is_converged

    def test_stop_from_callback(self):
        """stop() inside a tick callback ends run() early."""
        ticks = []
        layout = create_layout(threshold=0.0)

        def on_tick(event):
            ticks.append(event)
            if len(ticks) == 3:
                layout.stop()

        layout.on("tick", on_tick)
        layout.run(iterations=100)
        assert len(ticks) == 3

    def test_iterations_property(self):
        """Iterations are validated."""
        layout = create_layout(iterations=5)
        assert layout.iterations == 5
        layout.iterations = 7
        assert layout.iterations == 7
        with pytest.raises(ValidationError):
            layout.iterations = 0

    def test_random_seed_reseeds(self):
        """Setting the seed restarts the generator."""
        first = create_layout()
        second = create_layout()
        first.random_seed = 5
        second.random_seed = 5
        for _ in range(20):
            assert first.advance() == second.advance()

    def test_abstract_base(self):
        """IncrementalLayout cannot be instantiated."""
        with pytest.raises(TypeError):
            IncrementalLayout()
