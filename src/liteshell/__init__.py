"""liteshell - a small interactive command shell.

Reads a line, applies quoting, escaping and ``*`` wildcards, and runs the
result as a pipeline of real processes with optional < > >> redirection and
background execution, or as an in-process builtin (cd, help, exit, pwd,
history, alias).

Example:
    from liteshell import Shell

    shell = Shell(cwd="/tmp")
    shell.run("echo hello | tr a-z A-Z > out.txt")
"""

from .ast import PipelineSpec, RedirectionSpec
from .interpreter import ExitError, SpawnError
from .parser import ParseException, Token, parse, tokenize
from .shell import Shell
from .types import ExecResult, ShellConfig

__version__ = "0.1.0"

__all__ = [
    "Shell",
    "ExecResult",
    "ShellConfig",
    "PipelineSpec",
    "RedirectionSpec",
    "Token",
    "tokenize",
    "parse",
    "ParseException",
    "SpawnError",
    "ExitError",
]
