"""Miscellaneous builtins: pwd, history, alias.

These front the session's history and alias collaborators and don't need
files of their own.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..types import InterpreterContext
    from ...types import ExecResult


def _result(stdout: str, stderr: str, exit_code: int) -> "ExecResult":
    """Create an ExecResult."""
    from ...types import ExecResult
    return ExecResult(stdout=stdout, stderr=stderr, exit_code=exit_code)


async def handle_pwd(ctx: "InterpreterContext", args: list[str]) -> "ExecResult":
    """Execute the pwd builtin - print the logical working directory."""
    return _result(f"{ctx.state.cwd}\n", "", 0)


async def handle_history(
    ctx: "InterpreterContext", args: list[str]
) -> "ExecResult":
    """Execute the history builtin.

    Usage: history [n]

    List input lines with their numbers. With n, list only the last n.
    """
    entries = ctx.state.history
    if len(args) > 1:
        return _result("", "liteshell: history: too many arguments\n", 1)

    start = 0
    if args:
        try:
            count = int(args[0])
        except ValueError:
            count = -1
        if count < 0:
            return _result(
                "", f"liteshell: history: {args[0]}: numeric argument required\n", 1
            )
        start = max(0, len(entries) - count)

    lines = [f"{i + 1:5d}  {entries[i]}\n" for i in range(start, len(entries))]
    return _result("".join(lines), "", 0)


def _format_alias(name: str, value: str) -> str:
    return "alias {}='{}'\n".format(name, value.replace("'", "'\\''"))


async def handle_alias(
    ctx: "InterpreterContext", args: list[str]
) -> "ExecResult":
    """Execute the alias builtin.

    Usage: alias [name[=value] ...]

    Without arguments, list all aliases. name=value defines an alias; a
    bare name prints its definition.
    """
    aliases = ctx.state.aliases
    if not args:
        return _result(
            "".join(_format_alias(name, aliases[name]) for name in sorted(aliases)),
            "",
            0,
        )

    stdout = ""
    stderr = ""
    exit_code = 0
    for arg in args:
        name, eq, value = arg.partition("=")
        if eq:
            if not name:
                stderr += f"liteshell: alias: `{arg}': invalid alias name\n"
                exit_code = 1
                continue
            aliases[name] = value
        elif name in aliases:
            stdout += _format_alias(name, aliases[name])
        else:
            stderr += f"liteshell: alias: {name}: not found\n"
            exit_code = 1
    return _result(stdout, stderr, exit_code)
