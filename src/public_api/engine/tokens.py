"""Tagged text tokens that make up a rendered signature.

A rendered item is a flat sequence of tokens. Joining their text in order
gives the canonical one-line signature; the tags let callers colour or
otherwise post-process individual parts without re-parsing the text.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import IntEnum


class TokenKind(IntEnum):
    """Token tag. The numeric value is the rank used when ordering tokens."""

    SYMBOL = 0  # punctuation: "::", "(", "->", ...
    QUALIFIER = 1  # "pub", "unsafe", "const", "async", ABI names
    KIND = 2  # "struct", "fn", "trait", ...
    WHITESPACE = 3
    IDENTIFIER = 4
    SELF = 5  # the "self" in "&mut self"
    FUNCTION = 6
    LIFETIME = 7
    KEYWORD = 8  # "as", "for", "where", "mut", "impl"
    GENERIC = 9
    PRIMITIVE = 10
    TYPE = 11


@dataclass(frozen=True, order=True)
class Token:
    """A tagged fragment of signature text.

    Equality and ordering compare ``(kind, text)``, so sorting is total and
    stable across runs.
    """

    kind: TokenKind
    text: str

    def __str__(self) -> str:
        return self.text

    @classmethod
    def symbol(cls, text: str) -> Token:
        return cls(TokenKind.SYMBOL, text)

    @classmethod
    def qualifier(cls, text: str) -> Token:
        return cls(TokenKind.QUALIFIER, text)

    @classmethod
    def kind_(cls, text: str) -> Token:
        return cls(TokenKind.KIND, text)

    @classmethod
    def whitespace(cls) -> Token:
        return WS

    @classmethod
    def identifier(cls, text: str) -> Token:
        return cls(TokenKind.IDENTIFIER, text)

    @classmethod
    def self_(cls, text: str) -> Token:
        return cls(TokenKind.SELF, text)

    @classmethod
    def function(cls, text: str) -> Token:
        return cls(TokenKind.FUNCTION, text)

    @classmethod
    def lifetime(cls, text: str) -> Token:
        return cls(TokenKind.LIFETIME, text)

    @classmethod
    def keyword(cls, text: str) -> Token:
        return cls(TokenKind.KEYWORD, text)

    @classmethod
    def generic(cls, text: str) -> Token:
        return cls(TokenKind.GENERIC, text)

    @classmethod
    def primitive(cls, text: str) -> Token:
        return cls(TokenKind.PRIMITIVE, text)

    @classmethod
    def type_(cls, text: str) -> Token:
        return cls(TokenKind.TYPE, text)


WS = Token(TokenKind.WHITESPACE, " ")


def tokens_to_string(tokens: Iterable[Token]) -> str:
    """Concatenate token text in order, with no added separators."""
    return "".join(t.text for t in tokens)
