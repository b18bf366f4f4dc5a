"""Turn-by-turn playback of a fetched route."""

from __future__ import annotations

import logging
from dataclasses import replace
from enum import Enum
from typing import Callable, List, Optional

from ...models.domain import Coordinate, NavigationState, RoutePath
from ..geospatial import coordinate_distance, path_length
from ..rounding import round_half_up
from .clock import Clock

logger = logging.getLogger(__name__)

StateListener = Callable[[NavigationState], None]


class SimulatorStatus(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETE = "complete"
    CLOSED = "closed"


class ProgressSimulator:
    """State machine stepping a simulated position along a route, one coordinate per tick.

    Lifecycle: ``IDLE -> RUNNING -> COMPLETE``, with ``stop()`` returning a
    running simulation to ``IDLE``. ``start()`` always restarts from the first
    coordinate; ``resume()`` continues a stopped run where it left off. ``close()``
    ends the simulator for good and notifies listeners.

    Remaining time and distance are interpolated by coordinate index, not by
    true segment length.

    Args:
        route: Validated route with at least two coordinates and one instruction.
        clock: Optional clock invoking ``tick()`` while running. Without one,
            the caller drives ``tick()`` directly.
    """

    def __init__(self, route: RoutePath, clock: Optional[Clock] = None) -> None:
        if len(route.coordinates) < 2:
            raise ValueError("Route must contain at least two coordinates to simulate.")
        if not route.instructions:
            raise ValueError("Route must contain at least one instruction to simulate.")
        self.route = route
        self.clock = clock
        self.status = SimulatorStatus.IDLE
        self._started = False
        self._listeners: List[StateListener] = []
        self.state = self._initial_state()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> NavigationState:
        if self.status is SimulatorStatus.RUNNING:
            raise RuntimeError("Simulation is already running.")
        if self.status is SimulatorStatus.CLOSED:
            raise RuntimeError("Simulation has been closed.")
        self.state = self._initial_state()
        self._started = True
        self._set_running()
        logger.info(f"Navigation started: {len(self.route.coordinates)} coordinates")
        return self.snapshot()

    def resume(self) -> NavigationState:
        if self.status is not SimulatorStatus.IDLE or not self._started:
            raise RuntimeError(f"Cannot resume a simulation in state '{self.status.value}'.")
        self._set_running()
        logger.info(f"Navigation resumed at coordinate {self.state.coordinate_index}")
        return self.snapshot()

    def stop(self) -> NavigationState:
        if self.status is SimulatorStatus.RUNNING:
            self.status = SimulatorStatus.IDLE
            self._stop_clock()
            logger.info(f"Navigation stopped at coordinate {self.state.coordinate_index}")
            return self._emit()
        return self.snapshot()

    def close(self) -> NavigationState:
        """Stop playback for good and tell listeners no further states will follow."""
        self.stop()
        self.status = SimulatorStatus.CLOSED
        return self._emit()

    def _set_running(self) -> None:
        self.status = SimulatorStatus.RUNNING
        if self.clock is not None:
            self.clock.start(self._clock_tick)

    def _stop_clock(self) -> None:
        if self.clock is not None:
            self.clock.stop()

    def _clock_tick(self) -> None:
        try:
            self.tick()
        except Exception:
            logger.exception(f"Navigation tick failed at coordinate {self.state.coordinate_index}; stopping playback")
            self.status = SimulatorStatus.IDLE
            self._stop_clock()
            self._emit()

    # ------------------------------------------------------------------
    # Stepping
    # ------------------------------------------------------------------

    def tick(self) -> NavigationState:
        """Advance playback by one coordinate; a no-op unless running."""
        if self.status is not SimulatorStatus.RUNNING:
            return self.snapshot()

        coordinates = self.route.coordinates
        instructions = self.route.instructions
        count = len(coordinates)
        state = self.state

        if state.coordinate_index >= count:
            self._complete()
            return self._emit()

        index = state.coordinate_index
        position = coordinates[index]
        remaining_share = (count - index) / count

        state.position = position
        state.progress_percent = index / count * 100
        state.remaining_time = round_half_up(self.route.time * remaining_share)
        state.remaining_distance = round_half_up(self.route.distance * remaining_share)
        state.distance_to_next_instruction = self.distance_to_next_instruction(
            position, index, state.instruction_index
        )

        last_instruction = len(instructions) - 1
        if (
            state.instruction_index < last_instruction
            and index >= instructions[state.instruction_index].interval_end
        ):
            state.instruction_index += 1

        state.coordinate_index += 1
        if state.coordinate_index >= count:
            self._complete()
        return self._emit()

    def distance_to_next_instruction(
        self, position: Coordinate, coordinate_index: int, instruction_index: int
    ) -> float:
        """Meters from ``position`` to the end of the current instruction's interval.

        Zero once the current instruction is the final (arrival) one.
        """
        coordinates = self.route.coordinates
        instructions = self.route.instructions
        if instruction_index >= len(instructions) - 1:
            return 0.0

        total = 0.0
        if coordinate_index < len(coordinates):
            total += coordinate_distance(position, coordinates[coordinate_index])
        interval_end = instructions[instruction_index].interval_end
        total += path_length(coordinates, coordinate_index, interval_end)
        return total

    def _complete(self) -> None:
        state = self.state
        state.is_complete = True
        state.progress_percent = 100.0
        state.remaining_time = 0
        state.remaining_distance = 0
        state.distance_to_next_instruction = 0.0
        self.status = SimulatorStatus.COMPLETE
        self._stop_clock()
        logger.info("Navigation complete")

    # ------------------------------------------------------------------
    # Observation
    # ------------------------------------------------------------------

    def snapshot(self) -> NavigationState:
        return replace(self.state)

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a per-tick listener; returns a callable that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self) -> NavigationState:
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            listener(snapshot)
        return snapshot

    def _initial_state(self) -> NavigationState:
        start = self.route.coordinates[0]
        return NavigationState(
            remaining_time=self.route.time,
            remaining_distance=self.route.distance,
            distance_to_next_instruction=self.distance_to_next_instruction(start, 0, 0),
            position=start,
        )
