"""Command-line parser for liteshell.

Turns the (glob-expanded) word list of one input line into a PipelineSpec.
The steps run in a fixed order:

1. A trailing lone ``&`` marks the line for background execution.
2. ``<``, ``>`` and ``>>`` are removed together with the word after them.
   The first occurrence of each kind wins; later ones are consumed and
   ignored. ``>`` and ``>>`` share the output kind.
3. The remaining words are split on ``|``. Empty stages are dropped.
4. A line with no stage left is a syntax error.
"""

from __future__ import annotations

from typing import Sequence

import structlog

from ..ast.types import PipelineSpec, RedirectionSpec
from .lexer import BACKGROUND, PIPE, REDIRECT_APPEND, REDIRECT_IN, REDIRECT_OUT, is_operator

logger = structlog.get_logger()


class ParseException(Exception):
    """Raised for malformed command lines."""

    def __init__(self, message: str, token: str | None = None):
        self.message = message
        self.token = token
        super().__init__(message)


def _strip_background(words: list[str]) -> tuple[list[str], bool]:
    if words and is_operator(words[-1], BACKGROUND):
        return words[:-1], True
    return words, False


def _extract_redirections(words: list[str]) -> tuple[list[str], RedirectionSpec]:
    remaining: list[str] = []
    input_path: str | None = None
    output_path: str | None = None
    append = False

    i = 0
    while i < len(words):
        word = words[i]
        if not (
            is_operator(word, REDIRECT_IN)
            or is_operator(word, REDIRECT_OUT)
            or is_operator(word, REDIRECT_APPEND)
        ):
            remaining.append(word)
            i += 1
            continue

        if i + 1 >= len(words) or is_operator(words[i + 1]):
            found = words[i + 1] if i + 1 < len(words) else "newline"
            raise ParseException(
                f"syntax error near unexpected token `{found}'", token=str(word)
            )
        target = str(words[i + 1])

        if word == REDIRECT_IN:
            if input_path is None:
                input_path = target
            else:
                logger.debug("redirect_ignored", operator=str(word), path=target)
        elif output_path is None:
            output_path = target
            append = word == REDIRECT_APPEND
        else:
            logger.debug("redirect_ignored", operator=str(word), path=target)
        i += 2

    return remaining, RedirectionSpec(
        input_path=input_path, output_path=output_path, append=append
    )


def _split_stages(words: list[str]) -> list[tuple[str, ...]]:
    stages: list[tuple[str, ...]] = []
    current: list[str] = []
    for word in words:
        if is_operator(word, PIPE):
            if current:
                stages.append(tuple(current))
            current = []
        else:
            current.append(str(word))
    if current:
        stages.append(tuple(current))
    return stages


class Parser:
    """Parser producing a PipelineSpec from a word list."""

    def parse(self, words: Sequence[str]) -> PipelineSpec:
        remaining, background = _strip_background(list(words))
        remaining, redirection = _extract_redirections(remaining)

        for word in remaining:
            if is_operator(word, BACKGROUND):
                raise ParseException("syntax error near unexpected token `&'", token="&")

        stages = _split_stages(remaining)
        if not stages:
            raise ParseException("syntax error: empty command")

        return PipelineSpec(
            stages=tuple(stages),
            redirection=redirection,
            background=background,
        )


def parse(words: Sequence[str]) -> PipelineSpec:
    """Parse a word list into a PipelineSpec."""
    return Parser().parse(words)
