"""Session control builtins: exit, help."""

from typing import TYPE_CHECKING

from ..errors import ExitError

if TYPE_CHECKING:
    from ..types import InterpreterContext
    from ...types import ExecResult


HELP_TEXT = """\
liteshell
Built-in commands:
  cd [dir]      - Change directory (no dir: $HOME, -: previous directory)
  pwd           - Print the current directory
  history [n]   - Show the last n input lines
  alias [name[=value]] - Define or show aliases
  help          - Show this help message
  exit          - Exit the shell
Other commands are executed as external programs.
Syntax: "quotes", 'quotes', \\escapes, * wildcards, < > >> redirection,
        | pipelines and a trailing & for background execution.
"""


async def handle_exit(ctx: "InterpreterContext", args: list[str]) -> "ExecResult":
    """Execute the exit builtin.

    Usage: exit

    Leave the interactive loop. The request travels as an exception rather
    than an exit status so it can't be confused with a command's own status.
    """
    raise ExitError(stdout="Goodbye!\n")


async def handle_help(ctx: "InterpreterContext", args: list[str]) -> "ExecResult":
    """Execute the help builtin."""
    from ...types import ExecResult

    return ExecResult(stdout=HELP_TEXT, stderr="", exit_code=0)
