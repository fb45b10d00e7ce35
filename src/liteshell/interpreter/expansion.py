"""Wildcard expansion for liteshell.

Only ``*`` is special, and only in the last path component of an unquoted
word. Matching is a simplified, non-backtracking glob: after a ``*`` the
matcher jumps to the first occurrence of the next literal character and
requires the rest of the pattern to match from there. Consequently
``*.txt`` matches ``notes.txt`` but not ``notes.old.txt``. A pattern with a
single trailing ``*`` (``prefix*``) always behaves as expected.

A word that matches nothing, or whose directory cannot be read, is passed
through unchanged.
"""

from __future__ import annotations

import os
from typing import Iterable

import structlog

from ..parser.lexer import Token

logger = structlog.get_logger()


def match_pattern(name: str, pattern: str) -> bool:
    """Match a name against a ``*`` pattern without backtracking."""
    ni = 0
    pi = 0
    while pi < len(pattern):
        if pattern[pi] == "*":
            while pi < len(pattern) and pattern[pi] == "*":
                pi += 1
            if pi == len(pattern):
                return True
            # Skip ahead to the first occurrence of the next literal
            found = name.find(pattern[pi], ni)
            if found < 0:
                return False
            ni = found
        else:
            if ni >= len(name) or name[ni] != pattern[pi]:
                return False
            ni += 1
            pi += 1
    return ni == len(name)


def has_glob(word: str) -> bool:
    """Check if a word should be glob-expanded."""
    return "*" in word and not getattr(word, "quoted", False)


def expand_word(word: str, cwd: str | None = None) -> list[str]:
    """Expand a word containing ``*`` against the filesystem.

    Always returns at least one element: the sorted matches, or the word
    itself when nothing matches. Matches are marked quoted so a file named
    like an operator is never mistaken for one.
    """
    if not has_glob(word):
        return [word]

    slash = word.rfind("/")
    if slash < 0:
        prefix = ""
        directory = "."
        pattern = str(word)
    else:
        prefix = word[: slash + 1]
        directory = word[:slash] or "/"
        pattern = word[slash + 1 :]

    search_dir = os.path.join(cwd, directory) if cwd else directory
    try:
        entries = sorted(os.listdir(search_dir))
    except OSError as e:
        logger.debug("glob_dir_unreadable", directory=search_dir, error=str(e))
        return [word]

    show_hidden = pattern.startswith(".")
    matches = [
        Token(prefix + entry, quoted=True)
        for entry in entries
        if (show_hidden or not entry.startswith(".")) and match_pattern(entry, pattern)
    ]
    if not matches:
        return [word]

    logger.debug("glob_expanded", pattern=str(word), matches=len(matches))
    return matches


def expand_words(words: Iterable[str], cwd: str | None = None) -> list[str]:
    """Glob-expand every word, keeping their order.

    Words that are not expanded are returned as-is so quoting information
    survives for the parser.
    """
    expanded: list[str] = []
    for word in words:
        if has_glob(word):
            expanded.extend(expand_word(word, cwd))
        else:
            expanded.append(word)
    return expanded
