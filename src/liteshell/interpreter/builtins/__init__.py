"""Builtin registry for liteshell.

Builtins run inside the shell process. Each handler takes the interpreter
context and the arguments after the command name and returns an
ExecResult.
"""

from typing import TYPE_CHECKING, Awaitable, Callable

from .cd import handle_cd
from .control import handle_exit, handle_help
from .misc import handle_alias, handle_history, handle_pwd

if TYPE_CHECKING:
    from ..types import InterpreterContext
    from ...types import ExecResult

BuiltinHandler = Callable[["InterpreterContext", list[str]], Awaitable["ExecResult"]]

BUILTINS: dict[str, BuiltinHandler] = {
    "cd": handle_cd,
    "help": handle_help,
    "exit": handle_exit,
    "pwd": handle_pwd,
    "history": handle_history,
    "alias": handle_alias,
}

__all__ = [
    "BUILTINS",
    "BuiltinHandler",
    "handle_alias",
    "handle_cd",
    "handle_exit",
    "handle_help",
    "handle_history",
    "handle_pwd",
]
