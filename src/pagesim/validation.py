"""Input validation and the error hierarchy for the simulator.

Every failure the engine can report is a caller input problem: a bad
frame count, a reference that isn't an integer, or (at the front-end)
an empty reference string.  None of them are retryable and none of
them leave a half-built trace behind, because inputs are checked
*before* any frame set is created.

Hierarchy::

    ValueError
    └── SimulationError
        ├── InvalidFrameCountError
        ├── NonNumericReferenceError
        ├── EmptyReferenceSequenceError
        └── UnknownPolicyError

Design choices:
    - **Subclass ValueError** so callers that only know the builtin
      still catch everything.
    - **Bools are rejected** even though ``bool`` subclasses ``int``:
      ``True`` is not a page number or a frame count.
    - **Empty sequences are valid** at the engine level (an empty trace
      with zero faults).  Only the parsing layer rejects an empty
      reference string, via ``EmptyReferenceSequenceError``.
"""

from collections.abc import Iterable


class SimulationError(ValueError):
    """Base class for all simulator input errors."""


class InvalidFrameCountError(SimulationError):
    """Raised when the frame count is not a positive integer."""


class NonNumericReferenceError(SimulationError):
    """Raised when a page reference is not an integer."""


class EmptyReferenceSequenceError(SimulationError):
    """Raised by the front-end when a reference string has no pages."""


class UnknownPolicyError(SimulationError):
    """Raised when a policy name doesn't match FIFO, LRU or Optimal."""


def validate_frame_count(frame_count: object) -> int:
    """Return *frame_count* if it is a positive integer.

    Raises:
        InvalidFrameCountError: If it is not an int, is a bool, or is < 1.

    """
    if isinstance(frame_count, bool) or not isinstance(frame_count, int):
        msg = f"Frame count must be an integer, got {frame_count!r}"
        raise InvalidFrameCountError(msg)
    if frame_count < 1:
        msg = f"Frame count must be at least 1, got {frame_count}"
        raise InvalidFrameCountError(msg)
    return frame_count


def validate_references(references: Iterable[object]) -> tuple[int, ...]:
    """Return the references as an immutable tuple of ints.

    Args:
        references: Any finite iterable of page numbers.

    Returns:
        A tuple snapshot of the references, safe from caller mutation.

    Raises:
        NonNumericReferenceError: If any element is not an integer.

    """
    checked: list[int] = []
    for position, value in enumerate(references):
        if isinstance(value, bool) or not isinstance(value, int):
            msg = f"Reference at position {position} is not an integer: {value!r}"
            raise NonNumericReferenceError(msg)
        checked.append(value)
    return tuple(checked)
