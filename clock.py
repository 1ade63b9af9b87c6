"""
Fixed-timestep scheduler for driving GameState.tick() from wall-clock time.

The caller reports elapsed time once per frame; the clock runs as many
whole ticks as fit, back to back, carrying the remainder to the next frame.
Time is kept in integer nanoseconds so the interval comparison is exact.
"""

from typing import Any, Dict, List, Optional

from state import GameState, load_config

DEFAULT_TICK_INTERVAL = 0.5  # seconds
NANOS_PER_SECOND = 1_000_000_000


def to_nanos(seconds: float) -> int:
    return round(seconds * NANOS_PER_SECOND)


class TickClock:
    def __init__(self, game_state: GameState, interval: float = DEFAULT_TICK_INTERVAL):
        if interval <= 0:
            raise ValueError("Tick interval must be positive.")
        self.game_state = game_state
        self.interval = interval
        self._interval_ns = to_nanos(interval)
        self._time_ns = 0
        self._last_tick_ns = 0

    @classmethod
    def from_config(cls, game_state: GameState, config: Optional[Dict[str, Any]] = None) -> "TickClock":
        """Build a clock ticking every `tick_interval` seconds from config (default: load_config())."""
        config = config or load_config()
        return cls(game_state, interval=config.get('tick_interval', DEFAULT_TICK_INTERVAL))

    def advance(self, dt: float) -> List[List[Dict[str, Any]]]:
        """
        Account for `dt` elapsed seconds and run every tick that became due.

        Returns:
            One list of move results per tick run
        """
        self._time_ns += to_nanos(dt)
        ticks = []
        while self._time_ns - self._last_tick_ns > self._interval_ns:
            self._last_tick_ns += self._interval_ns
            ticks.append(self.game_state.tick())
        return ticks

    @property
    def time(self) -> float:
        """Total elapsed seconds reported so far."""
        return self._time_ns / NANOS_PER_SECOND

    @property
    def pending(self) -> float:
        """Elapsed seconds not yet consumed by a tick."""
        return (self._time_ns - self._last_tick_ns) / NANOS_PER_SECOND
