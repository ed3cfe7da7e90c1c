"""The simulation engine — replay a reference string under one policy.

``simulate`` is the single entry point.  For each reference it:

    1. Checks whether the page is already in a frame (a **hit**).
    2. Otherwise counts a **page fault** and looks for an empty frame.
    3. If every frame is full, asks the policy for a victim slot,
       evicts its occupant, and reuses the slot.
    4. Records a Snapshot of the frames after the step.

The engine owns the frame set and the policy's bookkeeping for the
duration of one call and throws both away afterwards.  Identical
inputs therefore always give an identical trace, and a result can be
shared freely: it is made of frozen dataclasses and tuples.

Inputs are validated up front, before any frame exists, so an error
never leaves a half-built trace behind.
"""

from collections.abc import Iterable

from pagesim.frames import FrameSet
from pagesim.logging import Logger, LogLevel
from pagesim.policies import Policy, make_policy
from pagesim.trace import SimulationResult, Snapshot
from pagesim.validation import validate_frame_count, validate_references


def simulate(
    policy: Policy | str,
    references: Iterable[int],
    frame_count: int,
    *,
    logger: Logger | None = None,
) -> SimulationResult:
    """Run one replacement policy over a reference sequence.

    An empty sequence is valid and yields an empty trace with no faults.

    Args:
        policy: A ``Policy`` member or its name ("fifo", "lru", "optimal").
        references: Page numbers in reference order.
        frame_count: Number of physical frames (at least 1).
        logger: Optional sink for per-fault and summary entries.

    Returns:
        The full trace and derived fault count.

    Raises:
        UnknownPolicyError: If *policy* names no known algorithm.
        InvalidFrameCountError: If *frame_count* is not a positive int.
        NonNumericReferenceError: If a reference is not an int.

    """
    chosen = Policy.parse(policy)
    frame_count = validate_frame_count(frame_count)
    refs = validate_references(references)

    frames = FrameSet(frame_count)
    tracker = make_policy(chosen, refs)
    snapshots: list[Snapshot] = []

    for step, page in enumerate(refs):
        if page in frames:
            tracker.record_access(page, step=step)
            snapshots.append(Snapshot(step=step, page=page, frames=frames.snapshot(), fault=False))
            continue

        evicted: int | None = None
        slot = frames.first_empty()
        if slot is None:
            slot = tracker.select_victim(frames, step=step)
            evicted = frames[slot]
            if evicted is not None:
                tracker.remove_page(evicted, slot=slot)
        frames.set(slot, page)
        tracker.record_load(slot, page, step=step)
        snapshots.append(
            Snapshot(step=step, page=page, frames=frames.snapshot(), fault=True, evicted=evicted)
        )

        if logger is not None:
            if evicted is None:
                message = f"Fault on page {page}, loaded into frame {slot}"
            else:
                message = f"Fault on page {page}, evicted page {evicted} from frame {slot}"
            logger.log(LogLevel.DEBUG, message, source=chosen.value, step=step)

    result = SimulationResult(
        policy=chosen,
        frame_count=frame_count,
        references=refs,
        snapshots=tuple(snapshots),
    )
    if logger is not None:
        summary = (
            f"{len(refs)} references, {frame_count} frames: "
            f"{result.faults} faults, {result.hits} hits"
        )
        logger.log(LogLevel.INFO, summary, source=chosen.value)
    return result
