"""Interpreter types for liteshell."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from ..types import ShellConfig


@dataclass
class InterpreterState:
    """Mutable state maintained by the interpreter across input lines."""

    cwd: str
    """Current working directory. Children are started here."""

    env: dict[str, str] = field(default_factory=dict)
    """Environment passed to every child process."""

    previous_dir: str = ""
    """Previous directory (for cd -). Empty until the first cd."""

    aliases: dict[str, str] = field(default_factory=dict)
    """Alias table: first-word replacements."""

    history: list[str] = field(default_factory=list)
    """Raw input lines, oldest first."""


@dataclass
class InterpreterContext:
    """Context handed to builtin handlers."""

    state: InterpreterState
    """Mutable interpreter state."""

    config: Optional["ShellConfig"] = None
    """Session settings, when running under a Shell."""
