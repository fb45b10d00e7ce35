"""Main Shell class - the primary API for liteshell.

Example usage:
    from liteshell import Shell

    # Synchronous usage (for the REPL, scripts)
    shell = Shell()
    result = shell.run("sort < names.txt > sorted.txt")
    print(result.exit_code)

    # Async usage (for async applications)
    shell = Shell()
    result = await shell.exec("ls | wc -l")

    # With an explicit working directory and environment
    shell = Shell(cwd="/tmp", env={"PATH": "/usr/bin:/bin", "HOME": "/tmp"})

External commands inherit the calling process's standard streams. Text
produced inside the shell (builtin output, error reports) is returned in
the ExecResult.
"""

import asyncio
import os
from typing import Optional

import nest_asyncio  # type: ignore[import-untyped]

from .interpreter import ExitError, Interpreter, InterpreterState
from .types import ExecResult, ShellConfig


class Shell:
    """Main shell session class.

    Holds the session state (working directory, environment, aliases and
    history) and executes one command line at a time.
    """

    def __init__(
        self,
        *,
        cwd: Optional[str] = None,
        env: Optional[dict[str, str]] = None,
        aliases: Optional[dict[str, str]] = None,
        config: Optional[ShellConfig] = None,
    ):
        """Initialize the shell.

        Args:
            cwd: Initial working directory. Defaults to the process's cwd.
            env: Environment for child processes. Defaults to a copy of
                os.environ; HOME, PWD and OLDPWD are read and written by cd.
            aliases: Initial alias table.
            config: Session settings.
        """
        self._config = config or ShellConfig()

        environ = dict(os.environ) if env is None else dict(env)
        start_dir = os.path.abspath(cwd or os.getcwd())
        environ["PWD"] = start_dir

        self._initial_state = InterpreterState(
            cwd=start_dir,
            env=environ,
            previous_dir=environ.get("OLDPWD", ""),
            aliases=dict(aliases or {}),
        )

        self._interpreter = Interpreter(
            state=self._copy_state(self._initial_state),
            config=self._config,
        )

    @staticmethod
    def _copy_state(state: InterpreterState) -> InterpreterState:
        return InterpreterState(
            cwd=state.cwd,
            env=dict(state.env),
            previous_dir=state.previous_dir,
            aliases=dict(state.aliases),
            history=list(state.history),
        )

    @property
    def config(self) -> ShellConfig:
        """Get the session settings."""
        return self._config

    @property
    def state(self) -> InterpreterState:
        """Get the mutable session state."""
        return self._interpreter.state

    @property
    def cwd(self) -> str:
        """Get the current working directory."""
        return self._interpreter.state.cwd

    @property
    def env(self) -> dict[str, str]:
        """Get the environment passed to child processes."""
        return self._interpreter.state.env

    @property
    def aliases(self) -> dict[str, str]:
        """Get the alias table."""
        return self._interpreter.state.aliases

    @property
    def history(self) -> list[str]:
        """Get the input lines recorded so far."""
        return self._interpreter.state.history

    def record_history(self, line: str) -> None:
        """Append a raw input line to the history."""
        if not line.strip():
            return
        history = self._interpreter.state.history
        history.append(line)
        overflow = len(history) - self._config.history_size
        if overflow > 0:
            del history[:overflow]

    async def exec(self, line: str) -> ExecResult:
        """Execute one command line.

        Args:
            line: The raw input line.

        Returns:
            ExecResult with the exit status. ``exit_requested`` is set when
            the exit builtin ran.
        """
        try:
            return await self._interpreter.execute_line(line)
        except ExitError as error:
            return ExecResult(
                stdout=error.stdout,
                stderr=error.stderr,
                exit_code=0,
                exit_requested=True,
            )

    def run(self, line: str) -> ExecResult:
        """Execute one command line synchronously.

        This is a convenience wrapper around exec() that works in any context,
        including Jupyter notebooks and async frameworks.

        Example:
            >>> shell = Shell()
            >>> result = shell.run("true")
            >>> result.exit_code
            0
        """
        try:
            asyncio.get_running_loop()
            # We're in an existing event loop (Jupyter, async framework, etc.)
            # Apply nest_asyncio to allow nested event loops
            nest_asyncio.apply()
        except RuntimeError:
            # No running event loop, asyncio.run() will work fine
            pass
        return asyncio.run(self.exec(line))

    def reset(self) -> None:
        """Reset the session state to its initial values."""
        self._interpreter = Interpreter(
            state=self._copy_state(self._initial_state),
            config=self._config,
        )
