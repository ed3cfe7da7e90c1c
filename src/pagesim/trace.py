"""Simulation traces — immutable snapshots of every step.

A simulation doesn't just count faults; it records what memory looked
like after each reference so the run can be replayed step by step.

- **Snapshot** — one processed reference: which page was requested,
  the frame contents *after* handling it, whether it faulted, and
  which page (if any) was evicted.
- **SimulationResult** — the ordered snapshots of a run plus the
  inputs that produced them.  Fault and hit counts are derived from
  the snapshots, so they can never disagree with the trace.

Both are frozen dataclasses holding tuples: once a run finishes,
nothing downstream (playback, export, rendering) can alter it.
"""

from dataclasses import dataclass

from pagesim.frames import Slot
from pagesim.policies import Policy


def percentage(part: int, whole: int) -> float:
    """Return *part* as a percentage of *whole* (0.0 when *whole* is 0)."""
    if whole == 0:
        return 0.0
    return part / whole * 100


@dataclass(frozen=True)
class Snapshot:
    """The state of memory after one reference was processed.

    Attributes:
        step: Zero-based position of the reference in the sequence.
        page: The page that was requested.
        frames: Frame contents after the step (None = empty slot).
        fault: True if the page was not resident beforehand.
        evicted: The page thrown out to make room, if any.

    """

    step: int
    page: int
    frames: tuple[Slot, ...]
    fault: bool
    evicted: int | None = None

    @property
    def hit(self) -> bool:
        """Return True if the page was already resident."""
        return not self.fault


@dataclass(frozen=True)
class SimulationResult:
    """A completed run: inputs plus the step-by-step trace."""

    policy: Policy
    frame_count: int
    references: tuple[int, ...]
    snapshots: tuple[Snapshot, ...]

    @property
    def faults(self) -> int:
        """Return the number of page faults."""
        return sum(1 for s in self.snapshots if s.fault)

    @property
    def hits(self) -> int:
        """Return the number of hits."""
        return len(self.snapshots) - self.faults

    @property
    def hit_ratio(self) -> float:
        """Return hits as a percentage of all references."""
        return percentage(self.hits, len(self.snapshots))

    @property
    def miss_ratio(self) -> float:
        """Return faults as a percentage of all references."""
        return percentage(self.faults, len(self.snapshots))

    def __len__(self) -> int:
        """Return the number of steps in the trace."""
        return len(self.snapshots)
