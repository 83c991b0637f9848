from __future__ import annotations

"""
Navigation Tree Generator.

Merges the filtered flat list of content items into a hierarchical node tree.
Directories are created top-down from each item's path segments, exactly once
per relative path, and resolved as soon as they are created. A directory only
exists on the path to a surviving item, so branches emptied by exclusion never
materialize.
"""

import logging
from typing import Dict, Optional, Sequence

from autonavbar.core.analysis.resolver import AttributeResolver
from autonavbar.domain.nav_models import (
    PATH_SEPARATOR,
    ContentItem,
    HierarchyNode,
    NodeKind,
)
from autonavbar.infra.fs import normalize_href

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def build_hierarchy(
        items: Sequence[ContentItem],
        resolver: AttributeResolver,
        scope: str,
        levels: Optional[int] = None,
) -> HierarchyNode:
    """
    Assemble the unsorted navigation tree of a scope.

    Args:
        items: Filtered content items (with hierarchy paths).
        resolver: Attribute resolver bound to the scope's mappings.
        scope: Normalized scope path (trailing separator).
        levels: Maximum depth; deeper items are skipped.

    Returns:
        HierarchyNode: Root directory node representing the scope itself.
    """
    root = _create_root(scope)

    # Auxiliary, non-owning index: relative directory path -> node
    directories: Dict[str, HierarchyNode] = {"": root}
    skipped = 0

    for item in items:
        segments = item.hierarchy_path
        if not segments:
            continue
        if levels is not None and len(segments) > levels:
            skipped += 1
            continue

        parent = root
        relative_dir = ""
        for segment in segments[:-1]:
            relative_dir = f"{relative_dir}{PATH_SEPARATOR}{segment}" if relative_dir else segment
            node = directories.get(relative_dir)
            if node is None:
                node = _create_directory(resolver, scope, relative_dir, segment)
                directories[relative_dir] = node
                parent.children.append(node)
            parent = node

        attrs = resolver.resolve_file(item)
        parent.children.append(HierarchyNode(
            kind=NodeKind.FILE,
            raw_name=item.raw_name,
            display_title=attrs.title,
            source_path=item.web_path,
            order=attrs.order,
        ))

    if skipped:
        logger.debug(f"Skipped {skipped} items deeper than {levels} levels")
    logger.debug(f"Built hierarchy with {len(directories) - 1} directories")
    return root

# -----------------------------------------------------------------------------
# INTERNAL HELPERS
# -----------------------------------------------------------------------------

def _create_root(scope: str) -> HierarchyNode:
    name = scope.strip(PATH_SEPARATOR).rsplit(PATH_SEPARATOR, 1)[-1]
    return HierarchyNode(
        kind=NodeKind.DIRECTORY,
        raw_name=name,
        display_title=name,
        source_path=scope,
        collapsed=False,
    )


def _create_directory(
        resolver: AttributeResolver,
        scope: str,
        relative_dir: str,
        name: str,
) -> HierarchyNode:
    attrs = resolver.resolve_directory(relative_dir, name)
    logger.debug(f"New directory '{relative_dir}' -> '{attrs.title}'")
    return HierarchyNode(
        kind=NodeKind.DIRECTORY,
        raw_name=name,
        display_title=attrs.title,
        source_path=normalize_href(f"{scope}{relative_dir}{PATH_SEPARATOR}"),
        order=attrs.order,
        collapsed=attrs.collapsed,
    )
