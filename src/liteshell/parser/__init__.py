"""Parser module for liteshell."""

from .lexer import (
    BACKGROUND,
    OPERATORS,
    PIPE,
    REDIRECT_APPEND,
    REDIRECT_IN,
    REDIRECT_OUT,
    Lexer,
    Token,
    is_operator,
    tokenize,
)
from .parser import (
    Parser,
    ParseException,
    parse,
)

__all__ = [
    # Lexer
    "Lexer",
    "Token",
    "tokenize",
    "is_operator",
    "OPERATORS",
    "PIPE",
    "REDIRECT_IN",
    "REDIRECT_OUT",
    "REDIRECT_APPEND",
    "BACKGROUND",
    # Parser
    "Parser",
    "ParseException",
    "parse",
]
