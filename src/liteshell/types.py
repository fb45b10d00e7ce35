"""Public types for liteshell."""

from __future__ import annotations

import os
from dataclasses import dataclass

import structlog

logger = structlog.get_logger()


@dataclass
class ExecResult:
    """Outcome of executing one command line.

    External commands write straight to the inherited standard streams, so
    ``stdout`` and ``stderr`` only hold text produced inside the shell
    (builtin output and error reports).
    """

    stdout: str = ""
    stderr: str = ""
    exit_code: int = 0

    pids: tuple[int, ...] = ()
    """Process ids of stages started in the background."""

    spawn_failed: bool = False
    """True when the command could not be started at all."""

    exit_requested: bool = False
    """Set by the exit builtin; the interactive loop should stop."""


def _env_bool(value: str) -> bool:
    return value.strip().lower() not in ("", "0", "false", "no", "off")


@dataclass
class ShellConfig:
    """Settings for the interactive session."""

    prompt_name: str = "myshell"
    """Name shown at the start of the prompt."""

    color: bool = True
    """Use ANSI colors in the prompt when stdout is a terminal."""

    log_level: str = "WARNING"
    """Level for liteshell's own diagnostics (written to stderr)."""

    history_size: int = 1000
    """Maximum number of lines kept by the history collaborator."""

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> ShellConfig:
        """Build a config from LITESHELL_* environment variables."""
        environ = dict(os.environ) if environ is None else environ
        config = cls()
        if "LITESHELL_PROMPT" in environ:
            config.prompt_name = environ["LITESHELL_PROMPT"]
        if "LITESHELL_COLOR" in environ:
            config.color = _env_bool(environ["LITESHELL_COLOR"])
        if "LITESHELL_LOG_LEVEL" in environ:
            config.log_level = environ["LITESHELL_LOG_LEVEL"].upper()
        if "LITESHELL_HISTORY_SIZE" in environ:
            try:
                config.history_size = max(0, int(environ["LITESHELL_HISTORY_SIZE"]))
            except ValueError:
                logger.warning(
                    "invalid_config_value",
                    name="LITESHELL_HISTORY_SIZE",
                    value=environ["LITESHELL_HISTORY_SIZE"],
                )
        return config
