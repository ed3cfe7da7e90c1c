"""The shell — command interpreter for the page replacement simulator.

The shell reads a command string, splits it into a command name and
arguments, dispatches to a handler, and returns a string result.  It
holds the session: settings, an event log, and the playback cursor of
the most recent run.

Typical session::

    set refs 7 0 1 2 0 3
    set frames 3
    run lru
    step
    step
    stats
    compare

Design choices:
    - **Returns strings, not prints.**  This keeps the shell fully
      testable and separates concerns (the caller decides how to
      display output).
    - **Command dispatch via a dict.**  Adding a new command means
      writing a method and adding one dict entry.
    - **Errors become text.**  Bad input is reported as ``Error: ...``
      and logged at WARNING; the shell never raises on user input.
"""

from collections.abc import Callable
from typing import TypeAlias
from pathlib import Path

from pagesim.compare import compare_all
from pagesim.engine import simulate
from pagesim.export import EXPORT_FILENAME, dump_result, load_result
from pagesim.logging import Logger, LogLevel
from pagesim.playback import Playback
from pagesim.policies import Policy
from pagesim.render import (
    format_comparison,
    format_header,
    format_row,
    format_summary,
    format_trace,
)
from pagesim.settings import Settings
from pagesim.validation import SimulationError

# Type alias for a command handler: takes a list of args, returns output.
_Handler: TypeAlias = Callable[[list[str]], str]

_NO_RUN = "Error: no simulation loaded. Use 'run' first."
_NO_FILES = "Error: file commands are disabled in this session."


class Shell:
    """Command interpreter holding one simulation session."""

    EXIT_SENTINEL = "__EXIT__"

    def __init__(
        self,
        *,
        settings: Settings | None = None,
        logger: Logger | None = None,
        allow_files: bool = True,
    ) -> None:
        """Create a shell.

        Args:
            settings: Starting settings (defaults if omitted).
            logger: Event log to write to (a fresh one if omitted).
            allow_files: Whether ``export`` and ``load`` may touch the
                local disk.  Shells reachable over the network pass False.

        """
        self._settings = settings if settings is not None else Settings()
        self._logger = logger if logger is not None else Logger()
        self._allow_files = allow_files
        self._playback: Playback | None = None

        # Command dispatch table: command name to handler method.
        self._commands: dict[str, _Handler] = {
            "help": self._cmd_help,
            "set": self._cmd_set,
            "show": self._cmd_show,
            "run": self._cmd_run,
            "trace": self._cmd_trace,
            "step": self._cmd_step,
            "back": self._cmd_back,
            "seek": self._cmd_seek,
            "reset": self._cmd_reset,
            "play": self._cmd_play,
            "pause": self._cmd_pause,
            "stats": self._cmd_stats,
            "compare": self._cmd_compare,
            "export": self._cmd_export,
            "load": self._cmd_load,
            "log": self._cmd_log,
            "exit": self._cmd_exit,
        }

    @property
    def settings(self) -> Settings:
        """Return the session settings."""
        return self._settings

    @property
    def logger(self) -> Logger:
        """Return the session event log."""
        return self._logger

    @property
    def playback(self) -> Playback | None:
        """Return the playback of the latest run, if any."""
        return self._playback

    @property
    def commands(self) -> list[str]:
        """Return the sorted command names."""
        return sorted(self._commands)

    def execute(self, command: str) -> str:
        """Parse and execute a single command.

        Args:
            command: The raw command string (e.g. "run lru").

        Returns:
            The command output, or an error message.

        """
        parts = command.strip().split()
        if not parts:
            return ""

        name = parts[0].lower()
        args = parts[1:]

        handler = self._commands.get(name)
        if handler is None:
            return f"Unknown command: {name}"

        try:
            return handler(args)
        except (SimulationError, KeyError, ValueError) as e:
            # KeyError wraps its message in quotes; unwrap it.
            reason = e.args[0] if isinstance(e, KeyError) and e.args else e
            self._logger.log(LogLevel.WARNING, f"{name}: {reason}", source="shell")
            return f"Error: {reason}"

    # -- Command handlers ------------------------------------------------

    def _cmd_help(self, _args: list[str]) -> str:
        """List available commands."""
        return "Available commands: " + ", ".join(self.commands)

    def _cmd_set(self, args: list[str]) -> str:
        """Change a setting: ``set KEY VALUE``."""
        if len(args) < 2:  # noqa: PLR2004
            return "Usage: set KEY VALUE"
        key = args[0].lower()
        self._settings.set(key, " ".join(args[1:]))
        return ""

    def _cmd_show(self, _args: list[str]) -> str:
        """List all settings."""
        return "\n".join(f"{key}={value}" for key, value in self._settings.items())

    def _cmd_run(self, args: list[str]) -> str:
        """Simulate the configured references under a policy."""
        policy = Policy.parse(args[0]) if args else self._settings.algorithm
        result = simulate(
            policy,
            self._settings.references,
            self._settings.frames,
            logger=self._logger,
        )
        self._playback = Playback(result, interval=self._settings.interval)
        return format_summary(result)

    def _cmd_trace(self, args: list[str]) -> str:
        """Show the revealed part of the trace (``trace all`` for everything)."""
        if self._playback is None:
            return _NO_RUN
        upto = None if args and args[0] == "all" else self._playback.current_step
        return format_trace(self._playback.result, upto=upto)

    def _cmd_step(self, _args: list[str]) -> str:
        """Reveal the next step of the trace."""
        if self._playback is None:
            return _NO_RUN
        snapshot = self._playback.step_forward()
        if snapshot is None:
            return "End of trace."
        return format_header(self._playback.result.frame_count) + "\n" + format_row(snapshot)

    def _cmd_back(self, _args: list[str]) -> str:
        """Hide the last revealed step."""
        if self._playback is None:
            return _NO_RUN
        self._playback.step_backward()
        return self._position()

    def _cmd_seek(self, args: list[str]) -> str:
        """Jump to a step: ``seek N``."""
        if self._playback is None:
            return _NO_RUN
        if not args:
            return "Usage: seek N"
        try:
            step = int(args[0])
        except ValueError:
            return f"Error: invalid step '{args[0]}'"
        self._playback.seek(step)
        return self._position()

    def _cmd_reset(self, _args: list[str]) -> str:
        """Rewind the playback to the beginning."""
        if self._playback is None:
            return _NO_RUN
        self._playback.reset()
        return self._position()

    def _cmd_play(self, _args: list[str]) -> str:
        """Auto-play the remaining steps."""
        if self._playback is None:
            return _NO_RUN
        playback = self._playback
        playback.play()
        rows: list[str] = []
        while playback.tick():
            rows.append(format_row(playback.visible[-1]))
        if not rows:
            return "End of trace."
        return "\n".join([format_header(playback.result.frame_count), *rows])

    def _cmd_pause(self, _args: list[str]) -> str:
        """Stop auto-play."""
        if self._playback is None:
            return _NO_RUN
        self._playback.pause()
        return "Paused at " + self._position()

    def _cmd_stats(self, _args: list[str]) -> str:
        """Show hit/miss figures for the revealed steps."""
        if self._playback is None:
            return _NO_RUN
        pb = self._playback
        return (
            f"{self._position()}: {pb.hits} hits, {pb.misses} misses "
            f"(hit ratio {pb.hit_ratio:.2f}%, miss ratio {pb.miss_ratio:.2f}%)"
        )

    def _cmd_compare(self, _args: list[str]) -> str:
        """Compare every policy and load the selected one for playback."""
        references = self._settings.references
        frames = self._settings.frames
        comparison = compare_all(references, frames, logger=self._logger)
        chosen = simulate(self._settings.algorithm, references, frames)
        self._playback = Playback(chosen, interval=self._settings.interval)
        return format_comparison(comparison)

    def _cmd_export(self, args: list[str]) -> str:
        """Save the latest run as JSON: ``export [PATH]``."""
        if not self._allow_files:
            return _NO_FILES
        if self._playback is None:
            return _NO_RUN
        path = Path(args[0]) if args else Path(EXPORT_FILENAME)
        try:
            dump_result(self._playback.result, path)
        except OSError as e:
            return f"Error: {e}"
        self._logger.log(LogLevel.INFO, f"Exported trace to {path}", source="shell")
        return f"Exported to {path}."

    def _cmd_load(self, args: list[str]) -> str:
        """Load an exported run for playback: ``load PATH``."""
        if not self._allow_files:
            return _NO_FILES
        if not args:
            return "Usage: load PATH"
        try:
            result = load_result(Path(args[0]))
        except OSError as e:
            return f"Error: {e}"
        self._playback = Playback(result, interval=self._settings.interval)
        return f"Loaded {len(result)} steps ({result.policy.value}, {result.frame_count} frames)."

    def _cmd_log(self, _args: list[str]) -> str:
        """Show the event log."""
        entries = self._logger.entries
        return "\n".join(str(e) for e in entries) if entries else "No log entries."

    def _cmd_exit(self, _args: list[str]) -> str:
        """Signal the REPL to stop."""
        return self.EXIT_SENTINEL

    def _position(self) -> str:
        """Return ``Step k/n`` for the current playback."""
        if self._playback is None:
            return "Step 0/0"
        return f"Step {self._playback.current_step}/{self._playback.total_steps}"
