"""pagesim — a page replacement simulator.

Replays a page reference string against a fixed number of frames under
FIFO, LRU or Optimal (Belady) replacement and records every step.

Re-exports the engine's public symbols so callers can write::

    from pagesim import Policy, compare_all, simulate
"""

from pagesim.compare import ComparisonResult, PolicyStats, best_policies, compare_all
from pagesim.engine import simulate
from pagesim.frames import FrameSet
from pagesim.logging import LogEntry, Logger, LogLevel
from pagesim.policies import FIFOPolicy, LRUPolicy, OptimalPolicy, Policy, ReplacementPolicy
from pagesim.trace import SimulationResult, Snapshot
from pagesim.validation import (
    EmptyReferenceSequenceError,
    InvalidFrameCountError,
    NonNumericReferenceError,
    SimulationError,
    UnknownPolicyError,
)

__all__ = [
    "ComparisonResult",
    "EmptyReferenceSequenceError",
    "FIFOPolicy",
    "FrameSet",
    "InvalidFrameCountError",
    "LRUPolicy",
    "LogEntry",
    "LogLevel",
    "Logger",
    "NonNumericReferenceError",
    "OptimalPolicy",
    "Policy",
    "PolicyStats",
    "ReplacementPolicy",
    "SimulationError",
    "SimulationResult",
    "Snapshot",
    "UnknownPolicyError",
    "best_policies",
    "compare_all",
    "simulate",
]
