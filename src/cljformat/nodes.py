"""Format-preserving syntax tree node types.

Trees are built by an external parser and rendered by an external printer;
the transforms in :mod:`cljformat.transform` only rely on what is defined
here. Newlines and comments are nodes in their own right, so a tree records
exactly where the source broke lines.
"""

from __future__ import annotations

from dataclasses import dataclass, field


class Node:
    """Base class for all tree nodes."""

    __slots__ = ()

    def children(self) -> list[Node]:
        return []

    def set_children(self, nodes: list[Node]) -> None:
        raise TypeError(f"{type(self).__name__} has no children")


@dataclass(slots=True)
class _Composite(Node):
    nodes: list[Node] = field(default_factory=list)

    def children(self) -> list[Node]:
        return list(self.nodes)

    def set_children(self, nodes: list[Node]) -> None:
        self.nodes = list(nodes)


@dataclass(slots=True)
class ListNode(_Composite):
    """A parenthesized list: (...)."""


@dataclass(slots=True)
class VectorNode(_Composite):
    """A vector: [...]."""


@dataclass(slots=True)
class MapNode(_Composite):
    """A map: {...}."""


@dataclass(slots=True)
class SetNode(_Composite):
    """A set literal: #{...}."""


@dataclass(slots=True)
class FnLiteralNode(_Composite):
    """An anonymous function literal: #(...)."""


@dataclass(slots=True)
class SymbolNode(Node):
    val: str


@dataclass(slots=True)
class KeywordNode(Node):
    val: str


@dataclass(slots=True)
class StringNode(Node):
    val: str


@dataclass(slots=True)
class NumberNode(Node):
    val: str


@dataclass(slots=True)
class CommentNode(Node):
    """A line comment, text including the leading semicolons."""

    text: str


@dataclass(slots=True)
class NewlineNode(Node):
    """One source line break."""


@dataclass(slots=True)
class Tree:
    """Root collection: top-level forms interspersed with newlines and comments."""

    roots: list[Node] = field(default_factory=list)


COMPOSITE_TYPES = (ListNode, MapNode, VectorNode, FnLiteralNode, SetNode)


def is_newline(node: Node) -> bool:
    return isinstance(node, NewlineNode)


def is_comment(node: Node) -> bool:
    return isinstance(node, CommentNode)


def is_vector(node: Node) -> bool:
    return isinstance(node, VectorNode)


def is_keyword(node: Node) -> bool:
    return isinstance(node, KeywordNode)


def is_list_or_vector(node: Node) -> bool:
    return isinstance(node, (ListNode, VectorNode))


def fn_form_symbol(node: Node, *names: str) -> bool:
    """Return True if node is a list whose first child is one of the named symbols."""
    if not isinstance(node, ListNode) or not node.nodes:
        return False
    first = node.nodes[0]
    return isinstance(first, SymbolNode) and first.val in names


def fn_form_keyword(node: Node, *names: str) -> bool:
    """Return True if node is a list whose first child is one of the named keywords."""
    if not isinstance(node, ListNode) or not node.nodes:
        return False
    first = node.nodes[0]
    return isinstance(first, KeywordNode) and first.val in names
