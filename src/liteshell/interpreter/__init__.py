"""Interpreter module for liteshell."""

from .errors import ExitError, InterpreterError, SpawnError
from .expansion import expand_word, expand_words, match_pattern
from .interpreter import Interpreter
from .process import run_pipeline
from .types import InterpreterContext, InterpreterState

__all__ = [
    "Interpreter",
    "InterpreterContext",
    "InterpreterState",
    "InterpreterError",
    "ExitError",
    "SpawnError",
    "expand_word",
    "expand_words",
    "match_pattern",
    "run_pipeline",
]
