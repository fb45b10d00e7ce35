"""Interactive read-eval loop for liteshell.

Wraps a Shell with the terminal-facing collaborators: prompt rendering,
line editing (GNU readline when the platform has it), history recording
and the terminal reset after each foreground command.
"""

import sys
from typing import Callable, Optional, TextIO

import structlog

from .shell import Shell
from .types import ExecResult

try:
    import readline  # noqa: F401  (enables line editing for input())
except ImportError:
    readline = None

logger = structlog.get_logger()

COLOR_RESET = "\033[0m"
COLOR_RED = "\033[31m"
COLOR_GREEN = "\033[32m"
COLOR_BLUE = "\033[34m"
COLOR_BOLD = "\033[1m"


def _invisible(code: str) -> str:
    # readline needs escape sequences bracketed to measure the prompt width
    if readline is not None:
        return f"\001{code}\002"
    return code


def render_prompt(name: str, cwd: Optional[str], color: bool) -> str:
    """Render the prompt, e.g. ``myshell:/home/me $ ``."""
    if not color:
        if cwd:
            return f"{name}:{cwd} $ "
        return f"{name} $ "

    bold, green, blue, red, reset = (
        _invisible(c) for c in (COLOR_BOLD, COLOR_GREEN, COLOR_BLUE, COLOR_RED, COLOR_RESET)
    )
    if cwd:
        return f"{bold}{green}{name}{reset}:{blue}{cwd}{reset} {red}$ {reset}"
    return f"{bold}{green}{name}{reset} {red}$ {reset}"


class Repl:
    """The interactive loop around a Shell."""

    def __init__(
        self,
        shell: Shell,
        *,
        input_fn: Callable[[str], str] = input,
        stdout: Optional[TextIO] = None,
        stderr: Optional[TextIO] = None,
    ):
        self.shell = shell
        self._input = input_fn
        self.stdout = stdout or sys.stdout
        self.stderr = stderr or sys.stderr

    def _is_tty(self) -> bool:
        isatty = getattr(self.stdout, "isatty", None)
        return bool(isatty and isatty())

    def prompt(self) -> str:
        config = self.shell.config
        return render_prompt(config.prompt_name, self.shell.cwd, config.color and self._is_tty())

    def reset_terminal(self) -> None:
        """Restore default terminal attributes after a foreground command."""
        if self._is_tty():
            self.stdout.write(COLOR_RESET)
            self.stdout.flush()

    def _emit(self, result: ExecResult) -> None:
        if result.stdout:
            self.stdout.write(result.stdout)
            self.stdout.flush()
        if result.stderr:
            self.stderr.write(result.stderr)
            self.stderr.flush()

    def run(self) -> int:
        """Read and execute lines until exit or end of input.

        Returns:
            The process exit code (0 on a normal quit).
        """
        while True:
            try:
                line = self._input(self.prompt())
            except KeyboardInterrupt:
                # Ctrl-C at the prompt just starts a fresh line
                self.stdout.write("\n")
                continue
            except EOFError:
                self.stdout.write("\n")
                return 0

            self.shell.record_history(line)
            self.stdout.flush()
            try:
                result = self.shell.run(line)
            except KeyboardInterrupt:
                # The foreground children got the interrupt too and were reaped
                self.stdout.write("\n")
                continue

            self._emit(result)
            if result.exit_requested:
                logger.debug("session_exit")
                return 0
            if not result.pids:
                self.reset_terminal()
