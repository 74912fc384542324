"""Token types shared by the lexer and parser."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class TokenType(Enum):
    """Token kinds.

    Template-level tokens (produced by ``tokenize``): DATA, OUTPUT, TAG.
    Argument-level tokens (produced by ``tokenize_arguments``): the rest.
    """

    DATA = "data"
    OUTPUT = "output"
    TAG = "tag"

    STRING = "string"
    NUMBER = "number"
    RANGE = "range"
    NAME = "name"
    VARIABLE = "variable"
    SYMBOL = "symbol"


@dataclass(frozen=True, slots=True)
class Token:
    """A lexed token with its source position.

    For OUTPUT and TAG tokens ``value`` is the markup between the delimiters,
    already stripped of whitespace-control dashes.
    """

    type: TokenType
    value: str
    lineno: int
    col_offset: int

    def __str__(self) -> str:
        return self.value
