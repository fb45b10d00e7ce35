"""Types produced by the command-line parser."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class RedirectionSpec:
    """Standard stream redirections for a whole command line.

    The input path feeds the first stage and the output path receives the
    last stage's standard output.
    """

    input_path: str | None = None
    """File opened read-only as standard input."""

    output_path: str | None = None
    """File opened write-only (created if absent) as standard output."""

    append: bool = False
    """Append to output_path instead of truncating it (>>)."""

    @property
    def is_empty(self) -> bool:
        return self.input_path is None and self.output_path is None


@dataclass(frozen=True)
class PipelineSpec:
    """A parsed command line: one or more stages joined by pipes."""

    stages: tuple[tuple[str, ...], ...]
    """Argument vectors, one per stage. Never empty, no empty stage."""

    redirection: RedirectionSpec = field(default_factory=RedirectionSpec)

    background: bool = False
    """Run without waiting for completion (trailing &)."""

    def __post_init__(self) -> None:
        if not self.stages:
            raise ValueError("pipeline must have at least one stage")
        if any(not stage for stage in self.stages):
            raise ValueError("pipeline stages must not be empty")

    @property
    def is_single(self) -> bool:
        return len(self.stages) == 1

    @property
    def command_name(self) -> str:
        """Name of the first stage's command."""
        return self.stages[0][0]
