"""
Base classes for incremental layout algorithms.

This module provides abstract base classes that define the common interface
and shared functionality for layout engines:

- BaseLayout: Abstract base with event system and seeded random generator
- IncrementalLayout: For layouts refined one step at a time by the host
"""

from __future__ import annotations

import warnings
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Callable, Optional

import numpy as np

if TYPE_CHECKING:
    from typing_extensions import Self

from .types import Event, EventType
from .validation import validate_iterations


class BaseLayout(ABC):
    """
    Abstract base class for all layout engines.

    Provides shared infrastructure:
    - Event system (start/tick/end events)
    - Seeded numpy random generator for reproducible layouts
    """

    def __init__(
        self,
        *,
        random_seed: Optional[int] = None,
        on_start: Optional[Callable[[Optional[Event]], None]] = None,
        on_tick: Optional[Callable[[Optional[Event]], None]] = None,
        on_end: Optional[Callable[[Optional[Event]], None]] = None,
    ) -> None:
        """
        Initialize layout with configuration.

        Args:
            random_seed: Random seed for reproducible layouts
            on_start: Callback for start event
            on_tick: Callback for tick event
            on_end: Callback for end event
        """
        self._events: dict[EventType, Callable[[Optional[Event]], None]] = {}
        self._random_seed: Optional[int] = random_seed
        self._rng: np.random.Generator = np.random.default_rng(random_seed)

        # Register event callbacks
        if on_start:
            self._events[EventType.start] = on_start
        if on_tick:
            self._events[EventType.tick] = on_tick
        if on_end:
            self._events[EventType.end] = on_end

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def random_seed(self) -> Optional[int]:
        """Get random seed used to create the generator."""
        return self._random_seed

    @random_seed.setter
    def random_seed(self, value: Optional[int]) -> None:
        """Set random seed and reseed the generator."""
        self._random_seed = value
        self._rng = np.random.default_rng(value)

    # -------------------------------------------------------------------------
    # Event System
    # -------------------------------------------------------------------------

    def on(self, event: EventType | str, callback: Callable[[Optional[Event]], None]) -> Self:
        """
        Subscribe to a layout event.

        Args:
            event: Event type (EventType enum or string name)
            callback: Function to call when event fires

        Returns:
            self (for chaining)
        """
        if isinstance(event, str):
            event = EventType[event]
        self._events[event] = callback
        return self

    def trigger(self, event: Event) -> None:
        """
        Trigger an event, calling the registered callback.

        Args:
            event: Event payload with type and optional data
        """
        event_type = event.get("type")
        if event_type is not None and event_type in self._events:
            self._events[event_type](event)


class IncrementalLayout(BaseLayout):
    """
    Base class for layouts that are refined incrementally.

    The host either drives ``advance()`` itself (once per frame, say) or
    calls ``run()`` to step until convergence.

    Example:
        layout = SomeIncrementalLayout(...)
        while layout.advance() is not None:
            redraw(layout.positions)
    """

    def __init__(
        self,
        *,
        random_seed: Optional[int] = None,
        on_start: Optional[Callable[[Optional[Event]], None]] = None,
        on_tick: Optional[Callable[[Optional[Event]], None]] = None,
        on_end: Optional[Callable[[Optional[Event]], None]] = None,
        iterations: int = 10_000,
    ) -> None:
        """
        Initialize incremental layout.

        Args:
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
        )
        self._iterations: int = validate_iterations(int(iterations))
        self._running: bool = False

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def iterations(self) -> int:
        """Get maximum steps taken by run()."""
        return self._iterations

    @iterations.setter
    def iterations(self, value: int) -> None:
        """Set maximum steps taken by run()."""
        self._iterations = validate_iterations(int(value))

    @property
    @abstractmethod
    def converged_count(self) -> int:
        """Number of leading dimensions that have stabilized."""

    # -------------------------------------------------------------------------
    # Lifecycle Methods
    # -------------------------------------------------------------------------

    @abstractmethod
    def advance(self, dimension: Optional[int] = None) -> Optional[int]:
        """
        Perform one refinement step.

        Returns:
            The dimension that was updated, or None if fully converged.
        """
        pass

    def tick(self) -> bool:
        """
        Perform one step and fire a tick event.

        Returns:
            True if converged/done, False if more steps are needed.
        """
        dimension = self.advance()
        self.trigger(
            {
                "type": EventType.tick,
                "dimension": dimension,
                "converged_count": self.converged_count,
            }
        )
        return dimension is None

    def run(self, iterations: Optional[int] = None) -> Self:
        """
        Step until convergence, stop() or the iteration cap.

        Args:
            iterations: Step cap for this call. Defaults to ``self.iterations``.

        Returns:
            self (for chaining)
        """
        limit = self._iterations if iterations is None else validate_iterations(int(iterations))

        self._running = True
        self.trigger({"type": EventType.start, "converged_count": self.converged_count})

        for _ in range(limit):
            if self.tick() or not self._running:
                break
        else:
            warnings.warn(
                f"Layout did not converge within {limit} steps "
                f"({self.converged_count} dimensions converged)",
                RuntimeWarning,
                stacklevel=2,
            )

        self._running = False
        self.trigger({"type": EventType.end, "converged_count": self.converged_count})
        return self

    def stop(self) -> Self:
        """Stop a run() in progress after the current step."""
        self._running = False
        return self


__all__ = [
    "BaseLayout",
    "IncrementalLayout",
]
