"""Cd builtin implementation.

Usage: cd [dir]
       cd -

Change the current working directory to dir. If dir is not specified,
change to $HOME. If dir is -, change to the previous directory and print
it; the previous directory itself is left as it was.
"""

import os
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..types import InterpreterContext
    from ...types import ExecResult


async def handle_cd(ctx: "InterpreterContext", args: list[str]) -> "ExecResult":
    """Execute the cd builtin."""
    from ...types import ExecResult

    # cd accepts at most one argument
    if len(args) > 1:
        return ExecResult(
            stdout="",
            stderr="liteshell: cd: too many arguments\n",
            exit_code=1,
        )

    # Determine target directory
    if not args:
        target = ctx.state.env.get("HOME", "")
        if not target:
            return ExecResult(
                stdout="",
                stderr="liteshell: cd: HOME not set\n",
                exit_code=1,
            )
    elif args[0] == "-":
        target = ctx.state.previous_dir
        if not target:
            return ExecResult(
                stdout="",
                stderr="liteshell: cd: OLDPWD not set\n",
                exit_code=1,
            )
    else:
        target = args[0]

    # ~ and ~/path name the home directory
    path = target
    home = ctx.state.env.get("HOME", "")
    if home and (path == "~" or path.startswith("~/")):
        path = home + path[1:]

    # Resolve the path logically against the current directory
    new_dir = os.path.normpath(os.path.join(ctx.state.cwd, path))

    # Verify directory exists
    if not os.path.exists(new_dir):
        return ExecResult(
            stdout="",
            stderr=f"liteshell: cd: {target}: No such file or directory\n",
            exit_code=1,
        )
    if not os.path.isdir(new_dir):
        return ExecResult(
            stdout="",
            stderr=f"liteshell: cd: {target}: Not a directory\n",
            exit_code=1,
        )
    if not os.access(new_dir, os.X_OK):
        return ExecResult(
            stdout="",
            stderr=f"liteshell: cd: {target}: Permission denied\n",
            exit_code=1,
        )

    # Update state
    old_dir = ctx.state.cwd
    ctx.state.cwd = new_dir
    ctx.state.env["PWD"] = new_dir

    # cd - prints the new directory and keeps the saved previous directory
    if args and args[0] == "-":
        return ExecResult(stdout=new_dir + "\n", stderr="", exit_code=0)

    ctx.state.previous_dir = old_dir
    ctx.state.env["OLDPWD"] = old_dir
    return ExecResult(stdout="", stderr="", exit_code=0)
