"""Physical memory frames — the fixed slot array every policy works on.

A frame set models the N physical frames a process has been given.
Each slot holds a page number or ``None`` (empty).  The capacity is
fixed when the set is created: real RAM doesn't grow mid-run, and a
replacement policy is only meaningful against a fixed budget.

All three replacement policies build on the same four primitives:

    - ``size()``        → N
    - ``index_of(p)``   → slot holding page *p*, or None
    - ``first_empty()`` → lowest empty slot, or None
    - ``set(i, p)``     → overwrite slot *i*

Invariant: a page occupies at most one slot.  ``set`` enforces it, so
a buggy policy fails loudly instead of producing a corrupt trace.
"""

from collections.abc import Iterator
from typing import TypeAlias

from pagesim.validation import validate_frame_count

# A slot is either a page number or empty.
Slot: TypeAlias = int | None


class FrameSet:
    """A fixed-capacity array of page frames.

    Lookups are linear scans, matching the slot-order semantics the
    policies rely on (lowest index first).
    """

    def __init__(self, size: int) -> None:
        """Create *size* empty frames.

        Raises:
            InvalidFrameCountError: If *size* is not a positive integer.

        """
        self._slots: list[Slot] = [None] * validate_frame_count(size)

    def size(self) -> int:
        """Return the number of frames (fixed for the set's lifetime)."""
        return len(self._slots)

    def index_of(self, page: int) -> int | None:
        """Return the slot holding *page*, or None if it isn't resident."""
        for index, occupant in enumerate(self._slots):
            if occupant == page:
                return index
        return None

    def first_empty(self) -> int | None:
        """Return the lowest-numbered empty slot, or None if all are full."""
        for index, occupant in enumerate(self._slots):
            if occupant is None:
                return index
        return None

    def set(self, index: int, page: int) -> int | None:
        """Place *page* in slot *index* and return the previous occupant.

        Raises:
            IndexError: If *index* is outside the frame set.
            ValueError: If *page* is already resident in another slot.

        """
        if not 0 <= index < len(self._slots):
            msg = f"Frame {index} out of range (0..{len(self._slots) - 1})"
            raise IndexError(msg)
        current = self.index_of(page)
        if current is not None and current != index:
            msg = f"Page {page} already resident in frame {current}"
            raise ValueError(msg)
        previous = self._slots[index]
        self._slots[index] = page
        return previous

    def snapshot(self) -> tuple[Slot, ...]:
        """Return an immutable copy of the current slot contents."""
        return tuple(self._slots)

    def __getitem__(self, index: int) -> Slot:
        """Return the occupant of slot *index* (None when empty)."""
        return self._slots[index]

    def __contains__(self, page: object) -> bool:
        """Return True if *page* is resident."""
        return page is not None and page in self._slots

    def __iter__(self) -> Iterator[Slot]:
        """Iterate over slot contents in index order."""
        return iter(self._slots)

    def __len__(self) -> int:
        """Return the number of frames."""
        return len(self._slots)
