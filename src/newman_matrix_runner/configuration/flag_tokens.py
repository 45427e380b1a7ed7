"""Tokenizer for `--X:value` command line flags."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass

FLAG_PREFIX = "--"
_SEPARATOR_OFFSET = 3
_VALUE_OFFSET = _SEPARATOR_OFFSET + 1


@dataclass(frozen=True)
class FlagToken:
    """One recognised `--X:value` token."""

    flag: str
    value: str


def parse_flag_token(token: str) -> FlagToken | None:
    """Split a raw token into flag character and value.

    The flag key is exactly three characters (`--X`) followed by `:`; the value
    is everything after that, so later `:` characters belong to the value.
    Tokens of any other shape return None.
    """
    if len(token) < _VALUE_OFFSET:
        return None
    if not token.startswith(FLAG_PREFIX) or token[_SEPARATOR_OFFSET] != ":":
        return None
    return FlagToken(flag=token[len(FLAG_PREFIX)], value=token[_VALUE_OFFSET:])


def iter_flag_tokens(tokens: Iterable[str]) -> Iterator[tuple[str, FlagToken | None]]:
    """Yield each raw token with its parsed form, preserving encounter order."""
    for token in tokens:
        yield token, parse_flag_token(token)
