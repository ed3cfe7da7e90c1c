"""Side-by-side comparison of every replacement policy.

``compare_all`` runs FIFO, LRU and Optimal over the same reference
sequence and frame count and reduces each run to two numbers: its
fault count and its hit ratio.  The runs are independent calls to
``simulate``: no frames, queues or timestamps are shared.

Picking a winner is left to ``best_policies``, which reports *every*
policy tied for the highest hit ratio rather than breaking ties
arbitrarily.  On the classic textbook string all three differ, but on
short or cache-friendly inputs ties are common.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import TypeAlias
from dataclasses import dataclass

from pagesim.engine import simulate
from pagesim.logging import Logger, LogLevel
from pagesim.policies import Policy
from pagesim.trace import SimulationResult, percentage
from pagesim.validation import validate_frame_count, validate_references


@dataclass(frozen=True)
class PolicyStats:
    """One policy's score in a comparison.

    Attributes:
        hit_ratio: Hits as a percentage of references (0 when empty).
        faults: Total page faults.

    """

    hit_ratio: float
    faults: int

    @classmethod
    def from_result(cls, result: SimulationResult) -> PolicyStats:
        """Summarise a finished simulation."""
        return cls(hit_ratio=percentage(result.hits, len(result)), faults=result.faults)


ComparisonResult: TypeAlias = dict[Policy, PolicyStats]


def compare_all(
    references: Iterable[int],
    frame_count: int,
    *,
    logger: Logger | None = None,
) -> ComparisonResult:
    """Run every policy over the same input and collect their scores.

    Args:
        references: Page numbers in reference order.
        frame_count: Number of physical frames (at least 1).
        logger: Optional sink, forwarded to each run.

    Returns:
        A dict with one ``PolicyStats`` per policy, in FIFO, LRU,
        Optimal order.

    Raises:
        InvalidFrameCountError: If *frame_count* is not a positive int.
        NonNumericReferenceError: If a reference is not an int.

    """
    # Validate once so a bad input fails before any policy runs.
    frame_count = validate_frame_count(frame_count)
    refs = validate_references(references)

    comparison: ComparisonResult = {
        policy: PolicyStats.from_result(simulate(policy, refs, frame_count, logger=logger))
        for policy in Policy
    }
    if logger is not None:
        best = ", ".join(p.value for p in best_policies(comparison))
        logger.log(LogLevel.INFO, f"Best hit ratio: {best}", source="compare")
    return comparison


def best_policies(comparison: Mapping[Policy, PolicyStats]) -> list[Policy]:
    """Return every policy whose hit ratio equals the maximum.

    Returns an empty list for an empty comparison.
    """
    if not comparison:
        return []
    top = max(stats.hit_ratio for stats in comparison.values())
    return [policy for policy, stats in comparison.items() if stats.hit_ratio == top]
