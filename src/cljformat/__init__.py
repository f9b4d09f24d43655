"""Lexer and tree transforms for a structural Clojure formatter."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from cljformat.nodes import Tree
    from cljformat.transform import Transform

__version__ = "0.1.0"


def format_tree(tree: Tree, transforms: dict[Transform, bool] | None = None) -> None:
    """Apply formatting transforms to a parsed tree in place (all by default)."""
    from cljformat.transform import DEFAULT_TRANSFORMS, apply_transforms

    apply_transforms(tree, DEFAULT_TRANSFORMS if transforms is None else transforms)
