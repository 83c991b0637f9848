from __future__ import annotations

"""
Navigation Domain Data Models.

Defines the typed representations flowing through a resolution run: the
normalized scope configuration, the flat content items discovered by the
scanner, and the hierarchical nodes handed to renderers.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterator, List, Optional, Tuple

# -----------------------------------------------------------------------------
# CONSTANTS
# -----------------------------------------------------------------------------

SOURCE_EXTENSION = ".qmd"
RENDERED_EXTENSION = ".html"
PATH_SEPARATOR = "/"

# -----------------------------------------------------------------------------
# CONFIGURATION MODELS
# -----------------------------------------------------------------------------

class MappingKind(str, Enum):
    FILE = "file"
    DIRECTORY = "directory"


@dataclass(frozen=True)
class SpecialMapping:
    """
    Explicit path-keyed override for title, order and collapsed state.

    Attributes:
        path: Target path relative to the scope (e.g. '/index.qmd', '/weeks/').
        title: Display title override.
        order: Explicit sort position.
        collapsed: Initial collapsed state (directories only).
    """
    path: str
    title: Optional[str] = None
    order: Optional[float] = None
    collapsed: Optional[bool] = None

    @property
    def kind(self) -> MappingKind:
        if self.path.endswith(PATH_SEPARATOR):
            return MappingKind.DIRECTORY
        return MappingKind.FILE


@dataclass(frozen=True)
class ScopeConfig:
    """
    Normalized configuration for one navigation scope.

    Attributes:
        key: Scope key as written in the configuration (e.g. '/2024/autumn-term/').
        levels: Maximum tree depth, or None for unbounded.
        exclusions: Raw exclusion patterns.
        special_mappings: Path-keyed overrides.
    """
    key: str
    levels: Optional[int] = None
    exclusions: Tuple[str, ...] = ()
    special_mappings: Tuple[SpecialMapping, ...] = ()


@dataclass(frozen=True)
class NavigationConfig:
    """
    Complete normalized configuration.

    Attributes:
        scopes: Valid scope configurations by key.
        disabled_scopes: Keys whose configuration failed validation.
        log_level: Optional run log level ('error', 'warning', 'info', 'debug', 'trace').
    """
    scopes: Dict[str, ScopeConfig] = field(default_factory=dict)
    disabled_scopes: FrozenSet[str] = frozenset()
    log_level: Optional[str] = None

    def all_keys(self) -> List[str]:
        return list(self.scopes) + [k for k in self.disabled_scopes if k not in self.scopes]

# -----------------------------------------------------------------------------
# CONTENT MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class EmbeddedMetadata:
    """
    Navigation-relevant front-matter fields of a content document.

    Attributes:
        title: Generic document title ('title').
        nav_title: Navigation title override ('title-nav').
        nav_order: Raw navigation order ('order-nav'), coerced later.
    """
    title: Optional[str] = None
    nav_title: Optional[str] = None
    nav_order: Optional[str] = None


@dataclass(frozen=True)
class DirectoryEntry:
    """Single entry reported by a directory lister."""
    name: str
    is_directory: bool
    is_file: bool = True


@dataclass(frozen=True)
class ContentItem:
    """
    A content document discovered under a scope.

    Attributes:
        absolute_source_path: Filesystem path of the source document.
        relative_path: Path from the scope root, rendered extension.
        web_path: Normalized site path of the rendered page.
        raw_name: Source file name (e.g. 'week01-lecture.qmd').
        metadata: Embedded metadata (empty when unreadable).
        hierarchy_path: Path segments from scope root to the item.
    """
    absolute_source_path: str
    relative_path: str
    web_path: str
    raw_name: str
    metadata: EmbeddedMetadata = field(default_factory=EmbeddedMetadata)
    hierarchy_path: Tuple[str, ...] = ()

    @property
    def level(self) -> int:
        return len(self.hierarchy_path)

# -----------------------------------------------------------------------------
# HIERARCHY MODELS
# -----------------------------------------------------------------------------

class NodeKind(str, Enum):
    FILE = "file"
    DIRECTORY = "directory"


@dataclass
class HierarchyNode:
    """
    Resolved navigation tree element.

    Directory nodes exclusively own their children list; file nodes keep it empty.

    Attributes:
        kind: File or directory.
        raw_name: Name of the path component this node represents.
        display_title: Resolved title.
        source_path: Site path of the page, or of the directory (trailing slash).
        order: Explicit sort position, if any.
        collapsed: Initial collapsed state (directories only).
        children: Ordered child nodes (directories only).
    """
    kind: NodeKind
    raw_name: str
    display_title: str
    source_path: str
    order: Optional[float] = None
    collapsed: Optional[bool] = None
    children: List["HierarchyNode"] = field(default_factory=list)

    @property
    def is_directory(self) -> bool:
        return self.kind is NodeKind.DIRECTORY

    def depth(self) -> int:
        """Number of levels below this node (0 for leaves and empty roots)."""
        if not self.children:
            return 0
        return 1 + max(child.depth() for child in self.children)

    def iter_nodes(self) -> Iterator["HierarchyNode"]:
        """Yield every descendant node in pre-order."""
        for child in self.children:
            yield child
            yield from child.iter_nodes()

# -----------------------------------------------------------------------------
# VALUE COERCION
# -----------------------------------------------------------------------------

def coerce_order(value: Any) -> Optional[float]:
    """
    Convert an order value (number or numeric string) into a finite number.

    Integral strings stay integers so that orders render as written.

    Returns:
        Optional[float]: The number, or None when the value is not numeric.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return int(text)
        except ValueError:
            pass
        try:
            number = float(text)
        except ValueError:
            return None
        return number if math.isfinite(number) else None
    return None
