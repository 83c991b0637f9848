from __future__ import annotations

"""
Deterministic Hierarchy Sorting.

Orders every directory's children once the tree is complete:

1. Explicitly ordered nodes come first, in ascending order.
2. Unordered directories come before unordered files.
3. Remaining ties fall back to an ordinal comparison of the raw name.

Equal orders are broken by rules 2 and 3, so the result never depends on
the order in which the filesystem listed entries.
"""

from typing import Tuple

from autonavbar.domain.nav_models import HierarchyNode

SortKey = Tuple[bool, float, bool, str]


def sort_key(node: HierarchyNode) -> SortKey:
    """Total ordering key of a node among its siblings."""
    unordered = node.order is None
    return (
        unordered,
        0 if unordered else node.order,
        not node.is_directory,
        node.raw_name,
    )


def sort_hierarchy(node: HierarchyNode) -> HierarchyNode:
    """
    Sort a tree in place, depth-first.

    Args:
        node: Root of the (sub)tree.

    Returns:
        HierarchyNode: The same node, for chaining.
    """
    for child in node.children:
        if child.is_directory:
            sort_hierarchy(child)
    node.children.sort(key=sort_key)
    return node
