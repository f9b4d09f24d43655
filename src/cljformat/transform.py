"""Tree transforms applied between parsing and printing.

Each transform rewrites the tree in place, only ever moving or dropping
newline and comment nodes (the import/require sort also reorders the entries
of a :require/:import group). All of them are idempotent and skip forms whose
shape they do not recognize.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum, auto

from cljformat.nodes import (
    COMPOSITE_TYPES,
    CommentNode,
    ListNode,
    NewlineNode,
    Node,
    SymbolNode,
    Tree,
    fn_form_keyword,
    fn_form_symbol,
    is_comment,
    is_keyword,
    is_list_or_vector,
    is_newline,
    is_vector,
)


class Transform(Enum):
    # Sort :import and :require declarations in ns blocks.
    SORT_IMPORT_REQUIRE = auto()
    # Drop newlines before the closing delimiter of a sequence-like form:
    #   (foo bar
    #    )
    # becomes (foo bar).
    REMOVE_TRAILING_NEWLINES = auto()
    # Move a defn's arg vector up to the name line when nothing follows it:
    #   (defn foo
    #     [x] ...)
    # becomes
    #   (defn foo [x]
    #     ...)
    FIX_DEFN_ARGLIST_NEWLINE = auto()
    # Move a defmethod's dispatch-val up to the name line:
    #   (defmethod foo
    #     :bar
    #     [x] ...)
    # becomes
    #   (defmethod foo :bar
    #     [x] ...)
    FIX_DEFMETHOD_DISPATCH_VAL_NEWLINE = auto()
    # Collapse runs of blank lines down to a single blank line.
    REMOVE_EXTRA_BLANK_LINES = auto()

    @property
    def config_name(self) -> str:
        """Name used in config files and on the command line."""
        return self.name.lower().replace("_", "-")

    @classmethod
    def from_name(cls, name: str) -> Transform:
        key = name.strip().upper().replace("-", "_")
        try:
            return cls[key]
        except KeyError:
            raise ValueError(f"unknown transform: {name}") from None


DEFAULT_TRANSFORMS: dict[Transform, bool] = {t: True for t in Transform}


def apply_transforms(tree: Tree, transforms: Mapping[Transform, bool]) -> None:
    """Apply the enabled transforms to tree in place.

    Transforms missing from the mapping are treated as disabled.
    """
    for root in tree.roots:
        if transforms.get(Transform.SORT_IMPORT_REQUIRE) and fn_form_symbol(root, "ns"):
            sort_ns(root)
        if transforms.get(Transform.REMOVE_TRAILING_NEWLINES):
            remove_trailing_newlines(root)
        if transforms.get(Transform.FIX_DEFN_ARGLIST_NEWLINE) and fn_form_symbol(root, "defn"):
            fix_defn_arglist(root)
        if transforms.get(Transform.FIX_DEFMETHOD_DISPATCH_VAL_NEWLINE) and fn_form_symbol(
            root, "defmethod"
        ):
            fix_defmethod_dispatch_val(root)
        if transforms.get(Transform.REMOVE_EXTRA_BLANK_LINES):
            remove_extra_blank_lines_recursive(root)
    # Blank lines between top-level forms are collapsed last, after the line
    # joins above have had a chance to create new runs of newlines.
    if transforms.get(Transform.REMOVE_EXTRA_BLANK_LINES):
        tree.roots = remove_extra_blank_lines(tree.roots)


# ----------------------------------------------------------------------
# :require / :import sorting
# ----------------------------------------------------------------------


@dataclass(slots=True)
class ImportRequire:
    """One :import/:require entry with the comments attached to it."""

    node: Node
    comments_above: list[CommentNode] = field(default_factory=list)
    comment_beside: CommentNode | None = None


def sort_ns(ns: Node) -> None:
    for node in ns.children()[1:]:
        if fn_form_keyword(node, ":require", ":import"):
            sort_import_require(node)


def sort_import_require(n: ListNode) -> None:
    nodes = n.children()
    entries: list[ImportRequire] = []
    line_comments: list[CommentNode] = []
    after_semantic_node = False
    for node in nodes[1:]:
        if isinstance(node, CommentNode):
            if after_semantic_node:
                entries[-1].comment_beside = node
            else:
                line_comments.append(node)
        elif isinstance(node, NewlineNode):
            after_semantic_node = False
        else:
            entries.append(ImportRequire(node, comments_above=line_comments))
            line_comments = []
            after_semantic_node = True

    entries.sort(key=lambda ir: import_require_key(ir.node))

    new_nodes: list[Node] = [nodes[0]]
    for ir in entries:
        for cn in ir.comments_above:
            new_nodes.extend((cn, NewlineNode()))
        new_nodes.append(ir.node)
        if ir.comment_beside is not None:
            new_nodes.append(ir.comment_beside)
        new_nodes.append(NewlineNode())
    # Unattached comments at the bottom
    for cn in line_comments:
        new_nodes.extend((cn, NewlineNode()))
    # Drop the final newline unless it ends a comment.
    if len(new_nodes) >= 2 and not is_comment(new_nodes[-2]):
        new_nodes.pop()
    n.set_children(new_nodes)


def import_require_key(node: Node) -> tuple:
    """Sort key: libs, then [lib ...] / (lib ...) specs, then anything else.

    Specs order by their leading symbol, with empty specs first and specs
    led by a non-symbol last.
    """
    if isinstance(node, SymbolNode):
        return (0, node.val)
    if is_list_or_vector(node):
        children = node.children()
        if not children:
            return (1, 0, "")
        first = children[0]
        if isinstance(first, SymbolNode):
            return (1, 1, first.val)
        return (1, 2, "")
    return (2,)


# ----------------------------------------------------------------------
# Newline fixes
# ----------------------------------------------------------------------


def remove_trailing_newlines(n: Node) -> None:
    nodes = n.children()
    if not nodes:
        return
    if isinstance(n, COMPOSITE_TYPES):
        while nodes:
            # A comment must keep the newline that ends it.
            if len(nodes) >= 2 and is_comment(nodes[-2]):
                break
            if not is_newline(nodes[-1]):
                break
            nodes.pop()
        n.set_children(nodes)
    for node in nodes:
        remove_trailing_newlines(node)


def fix_defn_arglist(defn: Node) -> None:
    nodes = defn.children()
    if len(nodes) < 5:
        return
    if not is_newline(nodes[2]) or is_newline(nodes[4]):
        return
    if not is_vector(nodes[3]):
        return
    # Move the newline to be after the arglist.
    nodes[2], nodes[3] = nodes[3], nodes[2]
    defn.set_children(nodes)


def fix_defmethod_dispatch_val(defmethod: Node) -> None:
    nodes = defmethod.children()
    if len(nodes) < 5:
        return
    if not is_newline(nodes[2]):
        return
    if not is_keyword(nodes[3]):
        return
    # Move the dispatch-val up to the name line, keeping exactly one
    # newline after it.
    if is_newline(nodes[4]):
        del nodes[2]
    else:
        nodes[2], nodes[3] = nodes[3], nodes[2]
    defmethod.set_children(nodes)


def remove_extra_blank_lines_recursive(n: Node) -> None:
    nodes = n.children()
    if not nodes:
        return
    if len(nodes) > 2:
        nodes = remove_extra_blank_lines(nodes)
        n.set_children(nodes)
    for node in nodes:
        remove_extra_blank_lines_recursive(node)


def remove_extra_blank_lines(nodes: list[Node]) -> list[Node]:
    """Return nodes with every newline past the second in a row dropped."""
    new_nodes: list[Node] = []
    newlines = 0
    for node in nodes:
        if is_newline(node):
            newlines += 1
        else:
            newlines = 0
        if newlines <= 2:
            new_nodes.append(node)
    return new_nodes
