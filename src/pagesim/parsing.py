"""Turn user-typed text into simulator inputs.

Reference strings are typed by people, so the separators are loose:
commas, spaces, tabs and newlines can be mixed freely (``"7, 0 1,2"``).
Empty tokens from doubled separators are ignored.

Unlike the engine, this layer *rejects* an empty reference string:
there is nothing to show a user who pressed "run" on a blank field.
"""

import re
from collections.abc import Iterable

from pagesim.validation import (
    EmptyReferenceSequenceError,
    InvalidFrameCountError,
    NonNumericReferenceError,
    validate_frame_count,
)

_SEPARATORS = re.compile(r"[,\s]+")


def parse_references(text: str) -> tuple[int, ...]:
    """Parse a comma/whitespace separated list of page numbers.

    Args:
        text: Raw input such as ``"7,0,1,2"`` or ``"7 0 1 2"``.

    Returns:
        The page numbers in order.

    Raises:
        NonNumericReferenceError: If a token is not an integer literal.
        EmptyReferenceSequenceError: If the text contains no tokens.

    """
    tokens = [t for t in _SEPARATORS.split(text.strip()) if t]
    if not tokens:
        msg = "Reference string is empty"
        raise EmptyReferenceSequenceError(msg)
    pages: list[int] = []
    for token in tokens:
        try:
            pages.append(int(token))
        except ValueError:
            msg = f"Invalid page reference '{token}'"
            raise NonNumericReferenceError(msg) from None
    return tuple(pages)


def format_references(references: Iterable[int]) -> str:
    """Render page numbers back into the canonical ``"7,0,1"`` form."""
    return ",".join(str(page) for page in references)


def parse_frame_count(text: str) -> int:
    """Parse and validate a frame count typed by a user.

    Raises:
        InvalidFrameCountError: If the text isn't a positive integer.

    """
    try:
        value = int(text.strip())
    except ValueError:
        msg = f"Invalid frame count '{text}'"
        raise InvalidFrameCountError(msg) from None
    return validate_frame_count(value)
