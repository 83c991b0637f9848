from __future__ import annotations

"""
Navigation Tree Renderers.

Reference consumers of a resolved navigation tree:

- render_text_tree: ASCII outline for terminals and logs.
- render_sidebar_html: sidebar markup compatible with Quarto's docked sidebar
  (Bootstrap collapse sections, active page highlighting).
- tree_to_dict: JSON-ready nested dictionaries.

Renderers never reorder or filter; they emit the tree exactly as sorted.
"""

import html
import itertools
from typing import Any, Callable, Dict, List, Optional

from autonavbar.domain.nav_models import HierarchyNode
from autonavbar.infra.fs import normalize_href

# -----------------------------------------------------------------------------
# TEXT RENDERING
# -----------------------------------------------------------------------------

def render_text_tree(
        root: HierarchyNode,
        current_path: Optional[str] = None,
        show_paths: bool = False,
) -> List[str]:
    """
    Render the tree as ASCII lines using box-drawing connectors.

    Args:
        root: Root node (its title is the first line).
        current_path: Page to mark with '*'.
        show_paths: Append each node's site path.

    Returns:
        List[str]: Output lines.
    """
    active = normalize_href(current_path) if current_path else None
    lines: List[str] = [root.display_title or root.source_path]
    _render_text_children(root, lines, "", active, show_paths)
    return lines


def _render_text_children(
        node: HierarchyNode,
        lines: List[str],
        prefix: str,
        active: Optional[str],
        show_paths: bool,
) -> None:
    total = len(node.children)
    for i, child in enumerate(node.children):
        is_last = (i == total - 1)
        connector = "└── " if is_last else "├── "

        label = child.display_title
        if child.is_directory:
            label += "/"
        if child.order is not None:
            label += f" [{_format_order(child.order)}]"
        if show_paths:
            label += f"  ({child.source_path})"
        if active is not None and child.source_path == active:
            label += "  *"

        lines.append(f"{prefix}{connector}{label}")
        if child.is_directory:
            _render_text_children(
                child, lines, prefix + ("    " if is_last else "│   "), active, show_paths
            )

# -----------------------------------------------------------------------------
# SIDEBAR HTML RENDERING
# -----------------------------------------------------------------------------

SECTION_ID_PREFIX = "quarto-sidebar-section-"

_CONTAINER_TEMPLATE = """<nav id="quarto-sidebar" class="sidebar collapse collapse-horizontal sidebar-navigation docked overflow-auto">
<div class="sidebar-menu-container">
{content}
</div>
</nav>"""

_ITEM_TEMPLATE = """<li class="sidebar-item">
<div class="sidebar-item-container">
<a href="{href}" class="sidebar-item-text sidebar-link{active}">
<span class="menu-text">{text}</span></a>
</div>
</li>"""

_SECTION_TEMPLATE = """<li class="sidebar-item sidebar-item-section">
<div class="sidebar-item-container">
<a class="sidebar-item-text sidebar-link text-start{collapsed}" data-bs-toggle="collapse" data-bs-target="#{id}" aria-expanded="{expanded}">
<span class="menu-text">{text}</span></a>
<a class="sidebar-item-toggle text-start" data-bs-toggle="collapse" data-bs-target="#{id}" aria-expanded="{expanded}" aria-label="Toggle section">
<i class="bi bi-chevron-right ms-2"></i>
</a>
</div>
<ul id="{id}" class="collapse list-unstyled sidebar-section depth{depth}{show}">
{content}
</ul>
</li>"""


def render_sidebar_html(
        root: HierarchyNode,
        current_path: Optional[str] = None,
        with_container: bool = True,
) -> str:
    """
    Render the tree as Quarto sidebar markup.

    Section ids are numbered from 1 for every call, so repeated renders of the
    same tree produce identical output.

    Args:
        root: Root node of the resolved tree.
        current_path: Page being rendered; its link gets the 'active' class.
        with_container: Wrap the list in the '#quarto-sidebar' nav element.

    Returns:
        str: HTML markup ('' for an empty tree without container).
    """
    active = normalize_href(current_path) if current_path else None
    ids = itertools.count(1)

    def next_id() -> str:
        return f"{SECTION_ID_PREFIX}{next(ids)}"

    content = _render_html_list(root, active, next_id, depth=1)
    if not with_container:
        return content
    return _CONTAINER_TEMPLATE.format(content=content)


def _render_html_list(
        node: HierarchyNode,
        active: Optional[str],
        next_id: Callable[[], str],
        depth: int,
) -> str:
    if not node.children:
        return ""

    ul_class = "list-unstyled mt-1" if depth == 1 else "list-unstyled"
    parts: List[str] = [f'<ul class="{ul_class}">']
    for child in node.children:
        text = html.escape(child.display_title)
        if child.is_directory:
            section_id = next_id()
            expanded = not child.collapsed
            parts.append(_SECTION_TEMPLATE.format(
                id=section_id,
                text=text,
                expanded="true" if expanded else "false",
                collapsed="" if expanded else " collapsed",
                show=" show" if expanded else "",
                depth=depth,
                content=_render_html_list(child, active, next_id, depth + 1),
            ))
        else:
            parts.append(_ITEM_TEMPLATE.format(
                href=html.escape(child.source_path, quote=True),
                text=text,
                active=" active" if child.source_path == active else "",
            ))
    parts.append("</ul>")
    return "\n".join(parts)

# -----------------------------------------------------------------------------
# STRUCTURED OUTPUT
# -----------------------------------------------------------------------------

def tree_to_dict(node: HierarchyNode, current_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Convert a tree into nested dictionaries suitable for json.dumps.

    Args:
        node: Root of the (sub)tree.
        current_path: Page to flag with 'active': True.

    Returns:
        Dict[str, Any]: Node data; directories carry 'collapsed' and 'children'.
    """
    active = normalize_href(current_path) if current_path else None
    return _node_to_dict(node, active)


def _node_to_dict(node: HierarchyNode, active: Optional[str]) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "kind": node.kind.value,
        "name": node.raw_name,
        "title": node.display_title,
        "path": node.source_path,
        "order": node.order,
    }
    if node.is_directory:
        data["collapsed"] = bool(node.collapsed)
        data["children"] = [_node_to_dict(c, active) for c in node.children]
    else:
        data["active"] = node.source_path == active
    return data


def _format_order(order: float) -> str:
    if isinstance(order, float) and order.is_integer():
        return str(int(order))
    return str(order)
