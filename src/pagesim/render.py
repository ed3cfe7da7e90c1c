"""Plain-text rendering of traces and comparisons.

These helpers are pure: they take results and return strings.  The
shell and the REPL decide where the text goes.

A trace renders as one row per step, frames as columns::

    Step  Page  F0  F1  F2  Result  Evicted
    1     7     7   -   -   FAULT   -
    2     0     7   0   -   FAULT   -
"""

from collections.abc import Iterable, Mapping

from pagesim.compare import PolicyStats, best_policies
from pagesim.policies import Policy
from pagesim.trace import SimulationResult, Snapshot

EMPTY_SLOT = "-"

_COL = 6


def _cell(value: object) -> str:
    return f"{value!s:<{_COL}}"


def format_header(frame_count: int) -> str:
    """Return the trace table header for *frame_count* frames."""
    cells = ["Step", "Page", *(f"F{i}" for i in range(frame_count)), "Result", "Evicted"]
    return "".join(_cell(c) for c in cells).rstrip()


def format_row(snapshot: Snapshot) -> str:
    """Return one trace table row (steps are shown 1-based)."""
    frames = (EMPTY_SLOT if p is None else p for p in snapshot.frames)
    result = "FAULT" if snapshot.fault else "HIT"
    evicted = EMPTY_SLOT if snapshot.evicted is None else snapshot.evicted
    cells = [snapshot.step + 1, snapshot.page, *frames, result, evicted]
    return "".join(_cell(c) for c in cells).rstrip()


def format_rows(snapshots: Iterable[Snapshot]) -> list[str]:
    """Return table rows for several snapshots."""
    return [format_row(s) for s in snapshots]


def format_trace(result: SimulationResult, *, upto: int | None = None) -> str:
    """Render a trace as a table, optionally only its first *upto* steps."""
    shown = result.snapshots if upto is None else result.snapshots[:upto]
    return "\n".join([format_header(result.frame_count), *format_rows(shown)])


def format_summary(result: SimulationResult) -> str:
    """Return a short fault/hit summary for a whole run."""
    return (
        f"{result.policy.value}: {result.faults} faults, {result.hits} hits "
        f"(hit ratio {result.hit_ratio:.2f}%, miss ratio {result.miss_ratio:.2f}%)"
    )


def format_comparison(comparison: Mapping[Policy, PolicyStats]) -> str:
    """Render a comparison table, marking the best policies with ``*``."""
    best = set(best_policies(comparison))
    lines = ["Policy    Hit ratio  Faults"]
    for policy, stats in comparison.items():
        mark = " *" if policy in best else ""
        lines.append(f"{policy.value:<9} {stats.hit_ratio:>8.2f}%  {stats.faults:>6}{mark}")
    return "\n".join(lines)
