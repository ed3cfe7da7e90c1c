"""Interactive REPL (Read-Eval-Print Loop) for the simulator.

The REPL is the thin I/O wrapper around the shell:

    1. **Read** — display a prompt and read user input.
    2. **Eval** — pass the command to ``shell.execute()``.
    3. **Print** — display the result.
    4. **Loop** — repeat until the shell returns the exit sentinel.

The shell is fully testable (returns strings, no I/O); the helpers
here (``build_prompt``, ``format_banner``) are pure too.  ``run()`` is
the console entry point.
"""

import os
import readline  # noqa: F401  (enables line editing for input())

from pagesim.settings import Settings
from pagesim.shell import Shell

_BANNER_WIDTH = 38


def format_banner(settings: Settings) -> str:
    """Format the start-up banner showing the active settings.

    Args:
        settings: The settings the session starts with.

    Returns:
        A string suitable for printing to the console.

    """
    border = "=" * _BANNER_WIDTH
    header = (
        f"\n  {border}\n"
        "           pagesim v0.1.0\n"
        "   Page replacement simulator\n"
        f"  {border}\n\n"
    )
    body = "\n".join(f"  {key}={value}" for key, value in settings.items())
    footer = "\n\nType 'help' for commands, 'exit' to quit.\n"
    return header + body + footer


def build_prompt(shell: Shell) -> str:
    """Build the prompt, showing the playback position once a run exists.

    Returns:
        ``pagesim $ `` before the first run, ``pagesim [3/12] $ `` after.

    """
    playback = shell.playback
    if playback is None:
        return "pagesim $ "
    return f"pagesim [{playback.current_step}/{playback.total_steps}] $ "


def run() -> None:
    """Start a session and run the interactive REPL.

    Settings come from ``PAGESIM_*`` environment variables over the
    defaults.  Ctrl+C and Ctrl+D exit cleanly.
    """
    settings = Settings.from_environ(os.environ)
    shell = Shell(settings=settings)

    print(format_banner(settings))  # noqa: T201

    try:
        while True:
            try:
                command = input(build_prompt(shell))
            except EOFError:
                # Ctrl+D
                print()  # noqa: T201
                break

            result = shell.execute(command)
            if result == Shell.EXIT_SENTINEL:
                break
            if result:
                print(result)  # noqa: T201

    except KeyboardInterrupt:
        # Ctrl+C
        print("\nInterrupted.")  # noqa: T201

    finally:
        print("Bye.")  # noqa: T201
