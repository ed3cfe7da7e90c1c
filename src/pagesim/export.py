"""Export simulation results — save and load traces as JSON.

The export format is the one the browser download produces::

    {
      "framesCount": 3,
      "refString": "7,0,1",
      "algorithm": "FIFO",
      "faults": 3,
      "snapshots": [
        {"step": 0, "page": 7, "frames": [7, null, null],
         "fault": true, "evicted": null},
        ...
      ]
    }

Empty frames are ``null``.  ``faults`` is written for readers' benefit;
on load it is recomputed from the snapshots and checked against the
stored value.

    - ``result_to_dict`` / ``result_from_dict`` — in-memory conversion.
    - ``dump_result(result, path)`` — write a JSON file.
    - ``load_result(path)`` — read one back.
"""

import json
from pathlib import Path
from typing import Any

from pagesim.parsing import format_references
from pagesim.policies import Policy
from pagesim.trace import SimulationResult, Snapshot
from pagesim.validation import SimulationError, validate_frame_count, validate_references

EXPORT_FILENAME = "paging_simulation_result.json"


class ExportFormatError(SimulationError):
    """Raised when an exported payload is missing fields or inconsistent."""


def result_to_dict(result: SimulationResult, *, ref_string: str | None = None) -> dict[str, Any]:
    """Convert a result into the JSON-ready export payload.

    Args:
        result: The simulation to export.
        ref_string: The reference string as the user typed it; defaults
            to the canonical comma-separated form.

    """
    if ref_string is None:
        ref_string = format_references(result.references)
    return {
        "framesCount": result.frame_count,
        "refString": ref_string,
        "algorithm": result.policy.value,
        "faults": result.faults,
        "snapshots": [
            {
                "step": s.step,
                "page": s.page,
                "frames": list(s.frames),
                "fault": s.fault,
                "evicted": s.evicted,
            }
            for s in result.snapshots
        ],
    }


def _require_int(value: object, what: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        msg = f"{what} must be an integer, got {value!r}"
        raise ExportFormatError(msg)
    return value


def _snapshot_from_dict(index: int, raw: object, frame_count: int) -> Snapshot:
    """Rebuild snapshot *index*, checking it describes a legal frame state."""
    where = f"snapshot {index}"
    if not isinstance(raw, dict):
        msg = f"{where} must be a JSON object"
        raise ExportFormatError(msg)
    step = _require_int(raw["step"], f"{where} step")
    if step != index:
        msg = f"{where} has step {step}; steps must run 0, 1, 2, ..."
        raise ExportFormatError(msg)
    page = _require_int(raw["page"], f"{where} page")

    slots = raw["frames"]
    if not isinstance(slots, list) or len(slots) != frame_count:
        msg = f"{where} frames must be a list of {frame_count} slots"
        raise ExportFormatError(msg)
    frames = tuple(None if p is None else _require_int(p, f"{where} frame") for p in slots)
    resident = [p for p in frames if p is not None]
    if len(set(resident)) != len(resident):
        msg = f"{where} holds the same page in two frames: {list(frames)}"
        raise ExportFormatError(msg)
    if page not in resident:
        msg = f"{where} page {page} is not resident after its own step"
        raise ExportFormatError(msg)

    fault = raw["fault"]
    if not isinstance(fault, bool):
        msg = f"{where} fault must be true or false, got {fault!r}"
        raise ExportFormatError(msg)
    evicted = raw["evicted"]
    if evicted is not None:
        evicted = _require_int(evicted, f"{where} evicted")
        if not fault:
            msg = f"{where} evicts page {evicted} on a hit"
            raise ExportFormatError(msg)
    return Snapshot(step=step, page=page, frames=frames, fault=fault, evicted=evicted)


def result_from_dict(data: dict[str, Any]) -> SimulationResult:
    """Rebuild a result from an export payload.

    Every snapshot is checked: steps numbered from 0, integer pages, one
    slot per frame, no page resident twice, a boolean ``fault`` and an
    eviction only on a fault.

    Raises:
        ExportFormatError: If a field is missing, mistyped, or the
            stored fault count disagrees with the snapshots.

    """
    try:
        frame_count = validate_frame_count(data["framesCount"])
        algorithm = data["algorithm"]
        if not isinstance(algorithm, str):
            msg = f"algorithm must be a string, got {algorithm!r}"
            raise ExportFormatError(msg)
        policy = Policy.parse(algorithm)
        raw_snapshots = data["snapshots"]
        if not isinstance(raw_snapshots, list):
            msg = "snapshots must be a list"
            raise ExportFormatError(msg)
        snapshots = tuple(
            _snapshot_from_dict(index, raw, frame_count) for index, raw in enumerate(raw_snapshots)
        )
    except (KeyError, TypeError, ValueError) as e:
        msg = f"Malformed export payload: {e}"
        raise ExportFormatError(msg) from e

    result = SimulationResult(
        policy=policy,
        frame_count=frame_count,
        references=validate_references(s.page for s in snapshots),
        snapshots=snapshots,
    )
    stored = data.get("faults")
    if stored is not None and stored != result.faults:
        msg = f"Stored fault count {stored} does not match trace ({result.faults})"
        raise ExportFormatError(msg)
    return result


def dump_result(result: SimulationResult, path: Path, *, ref_string: str | None = None) -> None:
    """Save a simulation result to a JSON file.

    Args:
        result: The simulation to save.
        path: The file path to write to.
        ref_string: Optional original reference text to record.

    """
    data = result_to_dict(result, ref_string=ref_string)
    path.write_text(json.dumps(data, indent=2))


def load_result(path: Path) -> SimulationResult:
    """Load a simulation result from a JSON file.

    Raises:
        FileNotFoundError: If the path does not exist.
        ExportFormatError: If the file isn't a valid export.

    """
    text = path.read_text()
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        msg = f"Not a JSON export: {e}"
        raise ExportFormatError(msg) from e
    if not isinstance(data, dict):
        msg = "Export payload must be a JSON object"
        raise ExportFormatError(msg)
    return result_from_dict(data)
