"""Session settings — the knobs a user turns between runs.

Settings are a small key/value store, in the spirit of a process
environment: every front-end (shell, web UI) owns its own copy, and
changing one copy never affects another.

Known keys and their defaults:

    ============  ==============================  =====================
    key           default                         meaning
    ============  ==============================  =====================
    frames        3                               physical frame count
    refs          7,0,1,2,0,3,0,4,2,3,0,3         reference string
    algorithm     FIFO                            replacement policy
    interval      700                             auto-play delay (ms)
    ============  ==============================  =====================

Values arrive as text (typed in a shell, read from the environment)
and are parsed and validated on ``set``, so a stored value is always
usable.  ``from_environ`` overlays ``PAGESIM_<KEY>`` variables on the
defaults.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TypeAlias

from pagesim.parsing import format_references, parse_frame_count, parse_references
from pagesim.policies import Policy

DEFAULT_FRAMES = 3
DEFAULT_REFS = "7,0,1,2,0,3,0,4,2,3,0,3"
DEFAULT_ALGORITHM = Policy.FIFO
DEFAULT_INTERVAL_MS = 700

ENV_PREFIX = "PAGESIM_"

SettingValue: TypeAlias = int | str | Policy


def _parse_interval(text: str) -> int:
    try:
        value = int(text.strip())
    except ValueError:
        msg = f"Invalid interval '{text}'"
        raise ValueError(msg) from None
    if value <= 0:
        msg = f"Interval must be positive, got {value}"
        raise ValueError(msg)
    return value


class Settings:
    """Validated simulation settings.

    Each instance is independent; ``copy`` returns a detached clone.
    """

    KEYS = ("frames", "refs", "algorithm", "interval")

    def __init__(self) -> None:
        """Create settings holding the defaults."""
        self._values: dict[str, SettingValue] = {
            "frames": DEFAULT_FRAMES,
            "refs": DEFAULT_REFS,
            "algorithm": DEFAULT_ALGORITHM,
            "interval": DEFAULT_INTERVAL_MS,
        }

    @classmethod
    def from_environ(cls, environ: Mapping[str, str]) -> Settings:
        """Build settings from defaults overlaid with ``PAGESIM_*`` variables.

        Raises:
            ValueError: If a variable holds an invalid value.

        """
        settings = cls()
        for key in cls.KEYS:
            value = environ.get(ENV_PREFIX + key.upper())
            if value is not None:
                settings.set(key, value)
        return settings

    @property
    def frames(self) -> int:
        """Return the frame count."""
        return int(self._values["frames"])

    @property
    def refs(self) -> str:
        """Return the reference string in canonical form."""
        return str(self._values["refs"])

    @property
    def references(self) -> tuple[int, ...]:
        """Return the reference string parsed into page numbers."""
        return parse_references(self.refs)

    @property
    def algorithm(self) -> Policy:
        """Return the selected replacement policy."""
        return Policy.parse(str(self._values["algorithm"]))

    @property
    def interval(self) -> int:
        """Return the auto-play delay in milliseconds."""
        return int(self._values["interval"])

    def get(self, key: str) -> SettingValue:
        """Return the value stored under *key*.

        Raises:
            KeyError: If *key* is not a known setting.

        """
        self._check_key(key)
        return self._values[key]

    def set(self, key: str, text: str) -> None:
        """Parse *text* and store it under *key*.

        Raises:
            KeyError: If *key* is not a known setting.
            ValueError: If *text* is not valid for *key* (the stored
                value is left unchanged).

        """
        self._check_key(key)
        value: SettingValue
        match key:
            case "frames":
                value = parse_frame_count(text)
            case "refs":
                value = format_references(parse_references(text))
            case "algorithm":
                value = Policy.parse(text)
            case _:
                value = _parse_interval(text)
        self._values[key] = value

    def items(self) -> list[tuple[str, SettingValue]]:
        """Return all (key, value) pairs in declaration order."""
        return [(key, self._values[key]) for key in self.KEYS]

    def copy(self) -> Settings:
        """Return an independent copy of these settings."""
        clone = Settings()
        clone._values = dict(self._values)
        return clone

    def _check_key(self, key: str) -> None:
        if key not in self._values:
            msg = f"Unknown setting '{key}'. Use one of: {', '.join(self.KEYS)}"
            raise KeyError(msg)
