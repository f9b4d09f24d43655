"""Shared test fixtures and helpers."""

from __future__ import annotations

import pytest

from cljformat.lexer import tokenize
from cljformat.nodes import (
    CommentNode,
    KeywordNode,
    ListNode,
    NewlineNode,
    Node,
    SymbolNode,
    VectorNode,
)
from cljformat.tokens import Token, TokenType


@pytest.fixture
def lex():
    """Return a helper that tokenizes source and returns tokens (excluding EOF)."""

    def _lex(source: str) -> list[Token]:
        tokens = tokenize(source, "test.clj")
        # Strip trailing EOF for convenience
        return [t for t in tokens if t.type != TokenType.EOF]

    return _lex


def assert_types(tokens: list[Token], expected: list[TokenType]) -> None:
    """Assert that the token types match the expected list."""
    actual = [t.type for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"


def assert_values(tokens: list[Token], expected: list[str]) -> None:
    """Assert that the token values match the expected list."""
    actual = [t.value for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"


# ---------------------------------------------------------------------------
# Tree builders
# ---------------------------------------------------------------------------

NL = NewlineNode


def sym(val: str) -> SymbolNode:
    return SymbolNode(val)


def kw(val: str) -> KeywordNode:
    return KeywordNode(val)


def comment(text: str) -> CommentNode:
    return CommentNode(text)


def lst(*nodes: Node) -> ListNode:
    return ListNode(list(nodes))


def vec(*nodes: Node) -> VectorNode:
    return VectorNode(list(nodes))


def semantic(nodes: list[Node]) -> list[Node]:
    """Return nodes with newlines and comments filtered out."""
    return [n for n in nodes if not isinstance(n, (NewlineNode, CommentNode))]
