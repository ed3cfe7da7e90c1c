"""Step-by-step replay of a finished simulation.

The engine produces the whole trace at once.  Showing it one step at a
time is a separate concern: a ``Playback`` is just a cursor over a
completed ``SimulationResult``.  Stepping forward reveals one more
snapshot, stepping back hides one, and the running hit/miss figures
are computed over the revealed prefix only.

Auto-play works like an interval timer: while playing, each ``tick()``
reveals the next snapshot, and the playback pauses itself once the
end of the trace is reached.  How often ``tick`` is called (every
``interval`` milliseconds) is up to the front-end; the browser page
drives it from a JavaScript timer, the shell ticks until the end.

A playback never mutates the result it reads.
"""

from pagesim.settings import DEFAULT_INTERVAL_MS
from pagesim.trace import SimulationResult, Snapshot, percentage


class Playback:
    """A read-only cursor over a simulation trace.

    ``current_step`` counts how many snapshots are visible, from 0
    (nothing shown) to ``len(result)`` (everything shown).
    """

    def __init__(self, result: SimulationResult, *, interval: int = DEFAULT_INTERVAL_MS) -> None:
        """Create a playback positioned before the first step.

        Args:
            result: The completed simulation to replay.
            interval: Auto-play delay between steps, in milliseconds.

        Raises:
            ValueError: If *interval* is not positive.

        """
        self._result = result
        self._current = 0
        self._playing = False
        self._interval = DEFAULT_INTERVAL_MS
        self.interval = interval

    @property
    def result(self) -> SimulationResult:
        """Return the simulation being replayed."""
        return self._result

    @property
    def current_step(self) -> int:
        """Return the number of visible snapshots."""
        return self._current

    @property
    def total_steps(self) -> int:
        """Return the length of the trace."""
        return len(self._result)

    @property
    def finished(self) -> bool:
        """Return True once every snapshot is visible."""
        return self._current >= self.total_steps

    @property
    def visible(self) -> tuple[Snapshot, ...]:
        """Return the snapshots revealed so far."""
        return self._result.snapshots[: self._current]

    @property
    def hits(self) -> int:
        """Return hits among the visible snapshots."""
        return sum(1 for s in self.visible if s.hit)

    @property
    def misses(self) -> int:
        """Return faults among the visible snapshots."""
        return sum(1 for s in self.visible if s.fault)

    @property
    def hit_ratio(self) -> float:
        """Return visible hits as a percentage (0 when nothing is visible)."""
        return percentage(self.hits, self._current)

    @property
    def miss_ratio(self) -> float:
        """Return visible faults as a percentage (0 when nothing is visible)."""
        return percentage(self.misses, self._current)

    # -- Manual stepping ---------------------------------------------------

    def step_forward(self) -> Snapshot | None:
        """Reveal the next snapshot and return it (None at the end)."""
        if self.finished:
            return None
        self._current += 1
        return self._result.snapshots[self._current - 1]

    def step_backward(self) -> None:
        """Hide the most recently revealed snapshot (no-op at the start)."""
        self._current = max(self._current - 1, 0)

    def seek(self, step: int) -> None:
        """Show exactly *step* snapshots, clamped to the trace bounds."""
        self._current = min(max(step, 0), self.total_steps)

    def reset(self) -> None:
        """Stop auto-play and hide every snapshot."""
        self._playing = False
        self._current = 0

    # -- Auto-play ---------------------------------------------------------

    @property
    def playing(self) -> bool:
        """Return True while auto-play is active."""
        return self._playing

    @property
    def interval(self) -> int:
        """Return the auto-play delay in milliseconds."""
        return self._interval

    @interval.setter
    def interval(self, value: int) -> None:
        """Set the auto-play delay.

        Raises:
            ValueError: If the interval is not positive.

        """
        if value <= 0:
            msg = f"Interval must be positive, got {value}"
            raise ValueError(msg)
        self._interval = value

    def play(self) -> None:
        """Start auto-play (no-op if already playing or at the end)."""
        if not self.finished:
            self._playing = True

    def pause(self) -> None:
        """Stop auto-play, keeping the current position."""
        self._playing = False

    def tick(self) -> bool:
        """Advance one step if playing.

        Auto-play stops by itself when the last snapshot is revealed.

        Returns:
            True if a snapshot was revealed this tick.

        """
        if not self._playing:
            return False
        advanced = self.step_forward() is not None
        if self.finished:
            self._playing = False
        return advanced
