"""Lexer for liteshell.

Splits a raw input line into words:

- Whitespace outside quotes separates words.
- "double quotes" and 'single quotes' group characters into one word and
  are removed. Each kind of quote is literal inside the other.
- A backslash outside single quotes makes the next character literal,
  including inside double quotes. Inside single quotes it is literal.
- An unterminated quote is closed silently at the end of the line.

Operators (|, <, >, >>, &) are only recognized as separate
whitespace-delimited words; the parser decides what they mean.
"""

from __future__ import annotations

PIPE = "|"
REDIRECT_IN = "<"
REDIRECT_OUT = ">"
REDIRECT_APPEND = ">>"
BACKGROUND = "&"

OPERATORS = frozenset({PIPE, REDIRECT_IN, REDIRECT_OUT, REDIRECT_APPEND, BACKGROUND})

_WHITESPACE = " \t\n\r\f\v"


class Token(str):
    """A word produced by the lexer.

    Compares equal to the plain string of its characters. ``quoted`` is
    True when any quote or backslash escape contributed to the word; quoted
    words are never operators and are never glob-expanded.
    """

    quoted: bool

    def __new__(cls, value: str, quoted: bool = False) -> Token:
        token = super().__new__(cls, value)
        token.quoted = quoted
        return token

    def __repr__(self) -> str:
        if self.quoted:
            return f"Token({str.__repr__(self)}, quoted=True)"
        return f"Token({str.__repr__(self)})"


def is_operator(word: str, op: str | None = None) -> bool:
    """Check whether a word is an unquoted operator (optionally a specific one)."""
    if getattr(word, "quoted", False):
        return False
    if op is not None:
        return word == op
    return word in OPERATORS


class Lexer:
    """Character-at-a-time scanner producing Tokens."""

    def __init__(self, line: str):
        self.line = line
        self._tokens: list[Token] = []
        self._buf: list[str] = []
        self._quoted = False

    def _flush(self) -> None:
        if self._buf:
            self._tokens.append(Token("".join(self._buf), quoted=self._quoted))
        self._buf = []
        self._quoted = False

    def tokenize(self) -> list[Token]:
        in_double = False
        in_single = False
        escape_next = False

        for c in self.line:
            if escape_next:
                self._buf.append(c)
                escape_next = False
            elif c == "\\" and not in_single:
                escape_next = True
                self._quoted = True
            elif c == '"' and not in_single:
                in_double = not in_double
                self._quoted = True
            elif c == "'" and not in_double:
                in_single = not in_single
                self._quoted = True
            elif c in _WHITESPACE and not in_double and not in_single:
                self._flush()
            else:
                self._buf.append(c)

        # Trailing backslash has nothing to escape
        if escape_next:
            self._buf.append("\\")
        self._flush()
        return self._tokens


def tokenize(line: str) -> list[Token]:
    """Tokenize a shell input line into words."""
    return Lexer(line).tokenize()
