"""Entry point for the liteshell interactive shell."""

import sys

from .log import configure_logging
from .repl import Repl
from .shell import Shell
from .types import ShellConfig


def main() -> int:
    """Run an interactive session and return the exit code."""
    config = ShellConfig.from_env()
    configure_logging(config.log_level)
    return Repl(Shell(config=config)).run()


if __name__ == "__main__":
    sys.exit(main())
