"""--debug token and tree dumps to stderr."""

from __future__ import annotations

import sys
from collections.abc import Iterable
from typing import TextIO

from cljformat.nodes import (
    CommentNode,
    KeywordNode,
    NewlineNode,
    Node,
    NumberNode,
    StringNode,
    SymbolNode,
    Tree,
)
from cljformat.tokens import Token


def dump_tokens(tokens: Iterable[Token], *, file: TextIO = sys.stderr) -> None:
    """Print one token per line to *file*."""
    for tok in tokens:
        file.write(f"{tok}\n")


def dump_tree(tree: Tree, *, file: TextIO = sys.stderr) -> None:
    """Print a human-readable node tree to *file*."""
    file.write("Tree\n")
    for root in tree.roots:
        _dump_node(root, 1, file)


def _indent(depth: int) -> str:
    return "  " * depth


def _dump_node(node: Node, depth: int, f: TextIO) -> None:
    if isinstance(node, (SymbolNode, KeywordNode, StringNode, NumberNode)):
        f.write(f"{_indent(depth)}{type(node).__name__}({node.val!r})\n")
    elif isinstance(node, CommentNode):
        f.write(f"{_indent(depth)}CommentNode({node.text!r})\n")
    elif isinstance(node, NewlineNode):
        f.write(f"{_indent(depth)}NewlineNode\n")
    else:
        f.write(f"{_indent(depth)}{type(node).__name__}\n")
        for child in node.children():
            _dump_node(child, depth + 1, f)
