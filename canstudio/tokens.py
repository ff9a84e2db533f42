"""Splitting of command lines into tokens and ``key: value`` parameters."""

from __future__ import annotations

from typing import Iterable, Iterator

__all__ = ["ParameterError", "split_tokens", "strip_comment", "parse_parameters"]


class ParameterError(ValueError):
    """Raised when command parameters are not well-formed ``key: value`` pairs."""


def split_tokens(text: str) -> list[str]:
    """Split ``text`` on spaces.

    Runs of spaces separate tokens, trailing spaces are ignored and leading
    spaces yield an empty first token. An empty text gives one empty token.
    """
    first, *rest = text.split(" ")
    return [first, *(part for part in rest if part)]


def strip_comment(line: str) -> str:
    """Return ``line`` without anything from the first ``#`` onwards."""
    return line.split("#", 1)[0]


def parse_parameters(tokens: Iterable[str]) -> Iterator[tuple[str, str]]:
    """Yield ``(key, value)`` pairs from tokens of the form ``key: value``.

    Every key must end with its only colon. Pairs before a malformed one are
    yielded before ``ParameterError`` is raised.
    """
    remaining = iter(tokens)
    for token in remaining:
        if not token or token.find(":") != len(token) - 1:
            raise ParameterError(
                f"necessary to add a colon at the end of {token!r}"
            )
        try:
            value = next(remaining)
        except StopIteration:
            raise ParameterError("incomplete arguments for this command") from None
        yield token[:-1], value