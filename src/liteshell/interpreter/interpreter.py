"""Interpreter - command line execution engine.

Takes one raw input line through the whole pipeline:

    alias substitution -> tokenize -> wildcard expansion -> parse
        -> builtin (single stage, registered name) or child processes

Delegates to specialized modules for:
- Tokenizing and parsing (parser/)
- Wildcard expansion (expansion.py)
- Built-in commands (builtins/)
- Process creation and pipe wiring (process.py)
"""

import os
from typing import Optional

import structlog

from ..ast.types import PipelineSpec
from ..parser import ParseException, parse, tokenize
from ..types import ExecResult, ShellConfig
from .builtins import BUILTINS, BuiltinHandler
from .errors import SpawnError
from .expansion import expand_words
from .process import run_pipeline
from .types import InterpreterContext, InterpreterState

logger = structlog.get_logger()


def _ok() -> ExecResult:
    """Return a successful result."""
    return ExecResult(stdout="", stderr="", exit_code=0)


def _failure(stderr: str, exit_code: int = 1) -> ExecResult:
    """Create a failed result with stderr."""
    return ExecResult(stdout="", stderr=stderr, exit_code=exit_code)


class Interpreter:
    """Executes command lines against a persistent InterpreterState."""

    def __init__(
        self,
        state: InterpreterState,
        config: Optional[ShellConfig] = None,
        builtins: Optional[dict[str, BuiltinHandler]] = None,
    ):
        """Initialize the interpreter.

        Args:
            state: Session state (cwd, environment, aliases, history).
            config: Optional session settings passed on to builtins.
            builtins: Builtin registry. Defaults to the standard set.
        """
        self._state = state
        self._config = config
        self._builtins = BUILTINS if builtins is None else builtins

    @property
    def state(self) -> InterpreterState:
        """Get the interpreter state."""
        return self._state

    def is_builtin(self, name: str) -> bool:
        return name in self._builtins

    def substitute_alias(self, line: str) -> str:
        """Replace the first word of a line with its alias, once.

        The replacement text is not itself checked for aliases.
        """
        stripped = line.lstrip()
        if not stripped:
            return line
        first = stripped.split(None, 1)[0]
        replacement = self._state.aliases.get(first)
        if replacement is None:
            return line
        logger.debug("alias_substituted", name=first, value=replacement)
        return replacement + stripped[len(first):]

    async def execute_line(self, line: str) -> ExecResult:
        """Execute one raw input line.

        Raises:
            ExitError: The exit builtin was invoked.
        """
        line = self.substitute_alias(line)
        words = tokenize(line)
        if not words:
            return _ok()

        words = expand_words(words, self._state.cwd)

        try:
            spec = parse(words)
        except ParseException as e:
            return _failure(f"liteshell: {e.message}\n", exit_code=2)

        if spec.is_single and self.is_builtin(spec.command_name):
            return await self._execute_builtin(spec)
        return await self.execute_pipeline(spec)

    async def execute_pipeline(self, spec: PipelineSpec) -> ExecResult:
        """Run a parsed command line as child processes."""
        try:
            return await run_pipeline(spec, self._state.cwd, self._state.env)
        except SpawnError as e:
            return ExecResult(
                stderr=f"liteshell: {e.message}\n",
                exit_code=e.exit_code,
                spawn_failed=True,
            )

    async def _execute_builtin(self, spec: PipelineSpec) -> ExecResult:
        """Run a builtin in-process.

        Builtins always run in the foreground. Redirections are applied
        before the handler runs, relative to the directory the line started
        in: the input file must be readable (builtins never read it) and the
        output file is created or truncated up front and then receives the
        builtin's stdout text.
        """
        argv = spec.stages[0]
        handler = self._builtins[argv[0]]
        redirection = spec.redirection
        cwd = self._state.cwd

        if redirection.input_path is not None:
            try:
                os.close(os.open(os.path.join(cwd, redirection.input_path), os.O_RDONLY))
            except OSError as e:
                return _failure(f"liteshell: {redirection.input_path}: {e.strerror}\n")

        if redirection.output_path is None:
            return await self._dispatch(handler, argv)

        try:
            out = open(
                os.path.join(cwd, redirection.output_path),
                "a" if redirection.append else "w",
            )
        except OSError as e:
            return _failure(f"liteshell: {redirection.output_path}: {e.strerror}\n")

        with out:
            result = await self._dispatch(handler, argv)
            out.write(result.stdout)
        result.stdout = ""
        return result

    async def _dispatch(self, handler: BuiltinHandler, argv: tuple[str, ...]) -> ExecResult:
        logger.debug("builtin_dispatched", name=argv[0], args=list(argv[1:]))
        ctx = InterpreterContext(state=self._state, config=self._config)
        return await handler(ctx, list(argv[1:]))
