"""Interpreter errors for liteshell."""


class InterpreterError(Exception):
    """Base class for errors raised while executing a command line."""


class SpawnError(InterpreterError):
    """A pipe, redirect file or child process could not be created.

    The command line is abandoned; the shell itself keeps running.
    """

    def __init__(self, message: str, exit_code: int = 1):
        self.message = message
        self.exit_code = exit_code
        super().__init__(message)


class ExitError(InterpreterError):
    """Raised by the exit builtin to end the interactive session."""

    def __init__(self, stdout: str = "", stderr: str = ""):
        self.stdout = stdout
        self.stderr = stderr
        super().__init__("exit")
