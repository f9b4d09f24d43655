"""Token types, source positions, and character classification helpers."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from enum import Enum, auto

from cljformat.errors import LexError, PositionError


@dataclass(frozen=True, slots=True)
class Position:
    """Source position: 1-based line and column, 0-based UTF-8 byte offset."""

    name: str
    offset: int = 0
    line: int = 1
    column: int = 1

    def advance(self, ch: str) -> Position:
        """Return the position just past ``ch``."""
        offset = self.offset + len(ch.encode("utf-8", "surrogatepass"))
        if ch == "\n":
            return Position(self.name, offset, self.line + 1, 1)
        return Position(self.name, offset, self.line, self.column + 1)

    def copy(self) -> Position:
        return dataclasses.replace(self)

    def format_error(self, tag: str, message: str) -> PositionError:
        if tag == "lex":
            return LexError(message, self)
        return PositionError(tag, message, self)

    def __str__(self) -> str:
        return f"{self.name}:{self.line}:{self.column}"


class TokenType(Enum):
    EOF = auto()

    # Reader macros and delimiters (single-character)
    APOSTROPHE = auto()  # '
    AT_SIGN = auto()  # @
    BACKTICK = auto()  # `
    CIRCUMFLEX = auto()  # ^
    LEFT_BRACE = auto()  # {
    LEFT_BRACKET = auto()  # [
    LEFT_PAREN = auto()  # (
    RIGHT_BRACE = auto()  # }
    RIGHT_BRACKET = auto()  # ]
    RIGHT_PAREN = auto()  # )
    TILDE = auto()  # ~
    OCTOTHORPE = auto()  # # (tags only; dispatch markers are DISPATCH)

    # Literals and atoms
    BOOL = auto()  # true, false -- never produced by the lexer
    CHAR_LITERAL = auto()  # \c, \newline, ...
    COMMENT = auto()  # ; foo
    DISPATCH = auto()  # #{ #( #' #" #_
    KEYWORD = auto()  # :foo
    LAMBDA_ARG = auto()  # %, %1, %&
    NIL = auto()  # nil -- never produced by the lexer
    NUMBER = auto()  # any numeric literal, possibly invalid
    STRING = auto()  # "..." (java escapes, not validated)
    SYMBOL = auto()  # foo

    ERROR = auto()  # value is the diagnostic

    @property
    def label(self) -> str:
        """Hyphenated display name, e.g. ``left-paren``."""
        return self.name.lower().replace("_", "-")


# Token types whose value carries the literal text.
PAYLOAD_TYPES = frozenset(
    {
        TokenType.ERROR,
        TokenType.BOOL,
        TokenType.CHAR_LITERAL,
        TokenType.COMMENT,
        TokenType.KEYWORD,
        TokenType.LAMBDA_ARG,
        TokenType.NUMBER,
        TokenType.DISPATCH,
        TokenType.STRING,
        TokenType.SYMBOL,
    }
)

TERMINAL_TYPES = frozenset({TokenType.EOF, TokenType.ERROR})


@dataclass(frozen=True, slots=True)
class Token:
    """A single lexeme: literal value, original source text, start position."""

    type: TokenType
    value: str
    raw: str
    pos: Position

    def as_error(self) -> LexError:
        """Convert an ERROR token into the exception a consumer can raise."""
        if self.type is not TokenType.ERROR:
            raise ValueError(f"as_error called on non-error token {self}")
        return LexError(self.value, self.pos)

    def __str__(self) -> str:
        if self.type in PAYLOAD_TYPES:
            return f"<{self.type.label}@{self.pos}>({self.value!r})"
        return f"<{self.type.label}@{self.pos}>"


# Symbol punctuation: * + ! - _ ? / . : $ = > < &
_SYMBOL_SPECIAL = frozenset("*+!-_?/.:$=><&")

# Single-character tokens recognized without lookahead.
SINGLE_CHAR_TOKENS = {
    "'": TokenType.APOSTROPHE,
    "@": TokenType.AT_SIGN,
    "`": TokenType.BACKTICK,
    "^": TokenType.CIRCUMFLEX,
    "{": TokenType.LEFT_BRACE,
    "[": TokenType.LEFT_BRACKET,
    "(": TokenType.LEFT_PAREN,
    "}": TokenType.RIGHT_BRACE,
    "]": TokenType.RIGHT_BRACKET,
    ")": TokenType.RIGHT_PAREN,
    "~": TokenType.TILDE,
}

# Characters after '#' that make a dispatch macro rather than a tag.
DISPATCH_CHARS = frozenset("{('\"_")


def is_symbol_char(ch: str) -> bool:
    """Return True if ch may appear inside a symbol, keyword, or number."""
    return ch.isalpha() or ch.isdecimal() or ch in _SYMBOL_SPECIAL


def is_whitespace(ch: str) -> bool:
    """Return True for whitespace; commas count as whitespace."""
    return ch.isspace() or ch == ","


def is_digit(ch: str) -> bool:
    return "0" <= ch <= "9"
