"""Page replacement policies — who gets evicted when every frame is full.

When a referenced page isn't resident and no frame is empty, the
simulator must pick a **victim** to make room.  The policy makes that
choice; the simulator (``pagesim.engine``) does everything else.

Policies (Strategy pattern, like the disk and CPU schedulers):
    - **FIFO** — evict the page that was loaded longest ago.  Tracks a
      queue of *slot indices* in fill order.  After an eviction the same
      slot is re-appended, so the queue is a rotating record of when
      each slot was last filled.  Hits never touch the queue.
    - **LRU** — evict the page referenced longest ago.  Tracks the step
      of each resident page's last reference.  Ties go to the lowest
      slot (strict ``<`` during the scan).
    - **Optimal** (Belady's MIN) — evict the page whose next use is
      furthest in the future.  Keeps no history at all; it looks ahead
      into the rest of the reference sequence at each eviction.  The
      first slot whose page is never used again wins outright;
      otherwise the first slot with the strictly greatest distance wins.

Optimal needs the future, so it can't be built in a real kernel.  It is
the yardstick the others are measured against: no policy can fault
less on the same input.

Each policy object holds the bookkeeping for **one** run.  The engine
builds a fresh one per simulation, so nothing leaks between runs.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Sequence
from enum import StrEnum
from typing import Protocol

from pagesim.frames import FrameSet
from pagesim.validation import UnknownPolicyError


class Policy(StrEnum):
    """The replacement algorithms the simulator knows about."""

    FIFO = "FIFO"
    LRU = "LRU"
    OPTIMAL = "Optimal"

    @classmethod
    def parse(cls, name: str | Policy) -> Policy:
        """Look up a policy by name, case-insensitively.

        ``"opt"`` and ``"belady"`` are accepted as aliases for Optimal.

        Raises:
            UnknownPolicyError: If the name matches no policy.

        """
        if isinstance(name, Policy):
            return name
        key = name.strip().lower()
        policy = _ALIASES.get(key)
        if policy is None:
            msg = f"Unknown policy '{name}'. Use FIFO, LRU, or Optimal."
            raise UnknownPolicyError(msg)
        return policy


_ALIASES: dict[str, Policy] = {
    "fifo": Policy.FIFO,
    "lru": Policy.LRU,
    "optimal": Policy.OPTIMAL,
    "opt": Policy.OPTIMAL,
    "belady": Policy.OPTIMAL,
}


# ---------------------------------------------------------------------------
# Replacement Policy Protocol (Strategy pattern)
# ---------------------------------------------------------------------------


class ReplacementPolicy(Protocol):
    """Interface every replacement algorithm satisfies.

    The engine calls exactly one of these per reference:
    ``record_access`` on a hit, ``record_load`` after a fault places a
    page, and, when the frames were full, ``select_victim`` followed by
    ``remove_page`` before the load.
    """

    def record_access(self, page: int, *, step: int) -> None:
        """Record a hit on a resident page."""
        ...  # pragma: no cover

    def record_load(self, slot: int, page: int, *, step: int) -> None:
        """Record that *page* was placed in *slot*."""
        ...  # pragma: no cover

    def select_victim(self, frames: FrameSet, *, step: int) -> int:
        """Return the slot whose occupant should be evicted."""
        ...  # pragma: no cover

    def remove_page(self, page: int, *, slot: int) -> None:
        """Forget a page that has just been evicted from *slot*."""
        ...  # pragma: no cover


# ---------------------------------------------------------------------------
# FIFO Policy
# ---------------------------------------------------------------------------


class FIFOPolicy:
    """First In, First Out — evict from the slot filled longest ago.

    The queue holds slot indices, not pages.  An evicted slot is
    refilled immediately, so it goes straight back to the tail.
    """

    def __init__(self) -> None:
        """Create an empty fill-order queue."""
        self._queue: deque[int] = deque()

    @property
    def queue(self) -> tuple[int, ...]:
        """Return the slot indices from oldest to newest fill."""
        return tuple(self._queue)

    def record_access(self, page: int, *, step: int) -> None:  # noqa: ARG002
        """FIFO ignores hits; order is purely by load time."""

    def record_load(self, slot: int, page: int, *, step: int) -> None:  # noqa: ARG002
        """Append the freshly filled slot to the tail of the queue."""
        self._queue.append(slot)

    def select_victim(self, frames: FrameSet, *, step: int) -> int:  # noqa: ARG002
        """Return the slot at the head of the queue.

        Raises:
            IndexError: If no slot has been filled yet.

        """
        if not self._queue:
            msg = "No pages to evict"
            raise IndexError(msg)
        return self._queue[0]

    def remove_page(self, page: int, *, slot: int) -> None:  # noqa: ARG002
        """Drop the evicted slot from the queue."""
        self._queue.remove(slot)


# ---------------------------------------------------------------------------
# LRU Policy
# ---------------------------------------------------------------------------


class LRUPolicy:
    """Least Recently Used — evict the page referenced longest ago.

    Keeps the step index of every resident page's last reference.  The
    victim scan walks slots in order and only moves on a strictly
    smaller timestamp, so the lowest slot wins a tie.
    """

    def __init__(self) -> None:
        """Create an empty timestamp table."""
        self._last_used: dict[int, int] = {}

    def last_used(self, page: int) -> int | None:
        """Return the step at which *page* was last referenced."""
        return self._last_used.get(page)

    def record_access(self, page: int, *, step: int) -> None:
        """Refresh the page's timestamp to the current step."""
        self._last_used[page] = step

    def record_load(self, slot: int, page: int, *, step: int) -> None:  # noqa: ARG002
        """Stamp a newly loaded page with the current step."""
        self._last_used[page] = step

    def select_victim(self, frames: FrameSet, *, step: int) -> int:  # noqa: ARG002
        """Return the slot holding the least recently used page.

        Raises:
            IndexError: If the frame set holds no pages.

        """
        victim: int | None = None
        oldest = 0
        for slot, page in enumerate(frames):
            if page is None:
                continue
            stamp = self._last_used.get(page, -1)
            if victim is None or stamp < oldest:
                victim, oldest = slot, stamp
        if victim is None:
            msg = "No pages to evict"
            raise IndexError(msg)
        return victim

    def remove_page(self, page: int, *, slot: int) -> None:  # noqa: ARG002
        """Forget the evicted page's timestamp."""
        self._last_used.pop(page, None)


# ---------------------------------------------------------------------------
# Optimal Policy
# ---------------------------------------------------------------------------


def next_use(references: Sequence[int], page: int, *, after: int) -> int | None:
    """Return how far past step *after* the next reference to *page* is.

    The distance is the index within the suffix ``references[after + 1:]``,
    so the very next step is distance 0.

    Returns:
        The distance, or None if *page* is never referenced again.

    """
    for distance, upcoming in enumerate(references[after + 1 :]):
        if upcoming == page:
            return distance
    return None


class OptimalPolicy:
    """Belady's MIN — evict the page used furthest in the future.

    Holds a reference to the full (immutable) sequence so it can look
    ahead; it keeps no other state.

    Args:
        references: The complete reference sequence being simulated.

    """

    def __init__(self, references: Sequence[int]) -> None:
        """Create an Optimal policy over *references*."""
        self._references = tuple(references)

    def record_access(self, page: int, *, step: int) -> None:  # noqa: ARG002
        """Optimal needs no history."""

    def record_load(self, slot: int, page: int, *, step: int) -> None:  # noqa: ARG002
        """Optimal needs no history."""

    def select_victim(self, frames: FrameSet, *, step: int) -> int:
        """Return the slot whose page is needed furthest in the future.

        Scans slots in order.  A page that is never used again is chosen
        on the spot, even over an earlier candidate.  Otherwise only a
        strictly greater distance replaces the current best.

        Raises:
            IndexError: If the frame set holds no pages.

        """
        victim: int | None = None
        furthest = -1
        for slot, page in enumerate(frames):
            if page is None:
                continue
            distance = next_use(self._references, page, after=step)
            if distance is None:
                return slot
            if distance > furthest:
                victim, furthest = slot, distance
        if victim is None:
            msg = "No pages to evict"
            raise IndexError(msg)
        return victim

    def remove_page(self, page: int, *, slot: int) -> None:  # noqa: ARG002
        """Optimal needs no history."""


def make_policy(policy: Policy, references: Sequence[int]) -> ReplacementPolicy:
    """Build fresh bookkeeping for one run of *policy* over *references*."""
    match policy:
        case Policy.FIFO:
            return FIFOPolicy()
        case Policy.LRU:
            return LRUPolicy()
        case Policy.OPTIMAL:
            return OptimalPolicy(references)
