from __future__ import annotations

"""
Content Discovery Service.

Recursively enumerates the content documents ('.qmd') below a scope root,
up to the configured depth, and attaches their embedded metadata. Listing
failures only cost the affected subtree; unreadable metadata only costs the
affected document. A directory reached twice through symlinks (a loop, or two
links to the same target) is scanned only the first time.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Set, Tuple

from autonavbar.core.services.cache import MetadataProvider
from autonavbar.domain.diagnostics import DiagnosticCollector, DiagnosticKind
from autonavbar.domain.nav_models import (
    PATH_SEPARATOR,
    SOURCE_EXTENSION,
    ContentItem,
    DirectoryEntry,
    EmbeddedMetadata,
)
from autonavbar.infra.fs import (
    list_directory,
    normalize_href,
    to_rendered_path,
    web_path_to_fs_path,
)
from autonavbar.infra.logging import TRACE

logger = logging.getLogger(__name__)

DirectoryLister = Callable[[str], List[DirectoryEntry]]


@dataclass(frozen=True)
class ScanResult:
    """
    Output of a scope scan.

    Attributes:
        root_dir: Filesystem directory that was scanned.
        scope: Site path corresponding to root_dir (trailing separator).
        items: Discovered documents, sorted by (level, raw_name).
    """
    root_dir: str
    scope: str
    items: List[ContentItem] = field(default_factory=list)

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def resolve_scan_root(
        scope: str,
        project_dir: str,
        is_directory: Callable[[str], bool] = os.path.isdir,
) -> Tuple[str, str]:
    """
    Map a scope to the directory that should be scanned.

    When the scope does not name a directory (e.g. a single page), its parent
    directory is scanned instead.

    Args:
        scope: Normalized scope path.
        project_dir: Project root directory.
        is_directory: Directory test, injectable for tests.

    Returns:
        Tuple[str, str]: (filesystem directory, matching site path).
    """
    root_dir = os.path.normpath(os.path.join(project_dir, web_path_to_fs_path(scope)))
    if is_directory(root_dir):
        return root_dir, scope

    parent_scope = scope.rstrip(PATH_SEPARATOR).rsplit(PATH_SEPARATOR, 1)[0] + PATH_SEPARATOR
    logger.debug(f"Scope '{scope}' is not a directory, scanning parent '{parent_scope}'")
    return os.path.dirname(root_dir), normalize_href(parent_scope)


def scan_scope(
        scope: str,
        project_dir: str,
        levels: Optional[int],
        lister: DirectoryLister = list_directory,
        metadata_source: Optional[MetadataProvider] = None,
        diagnostics: Optional[DiagnosticCollector] = None,
        is_directory: Callable[[str], bool] = os.path.isdir,
) -> ScanResult:
    """
    Discover all content documents of a scope.

    Args:
        scope: Normalized scope path (e.g. '/2024/autumn-term/').
        project_dir: Project root directory.
        levels: Maximum depth (1 = only direct children), None for unbounded.
        lister: Directory lister; any exception it raises skips that directory.
        metadata_source: Metadata provider (usually a MetadataCache).
        diagnostics: Run diagnostics collector.
        is_directory: Directory test used to resolve the scan root.

    Returns:
        ScanResult: Scanned root and discovered items.
    """
    diagnostics = diagnostics if diagnostics is not None else DiagnosticCollector()
    root_dir, web_scope = resolve_scan_root(scope, project_dir, is_directory)
    logger.debug(f"Scanning '{root_dir}' (levels: {levels if levels is not None else 'unbounded'})")

    items: List[ContentItem] = []
    _scan_recursive(
        current_dir=root_dir,
        level=1,
        levels=levels,
        segments=(),
        scope=web_scope,
        lister=lister,
        metadata_source=metadata_source,
        diagnostics=diagnostics,
        visited=set(),
        out=items,
    )

    items.sort(key=lambda i: (i.level, i.raw_name))
    logger.debug(f"Found {len(items)} content documents under '{web_scope}'")
    return ScanResult(root_dir=root_dir, scope=web_scope, items=items)

# -----------------------------------------------------------------------------
# INTERNAL HELPERS
# -----------------------------------------------------------------------------

def _scan_recursive(
        current_dir: str,
        level: int,
        levels: Optional[int],
        segments: Tuple[str, ...],
        scope: str,
        lister: DirectoryLister,
        metadata_source: Optional[MetadataProvider],
        diagnostics: DiagnosticCollector,
        visited: Set[str],
        out: List[ContentItem],
) -> None:
    if levels is not None and level > levels:
        logger.log(TRACE, f"Level {level} > {levels}, not descending into '{current_dir}'")
        return

    real_dir = os.path.realpath(current_dir)
    if real_dir in visited:
        logger.warning(f"Directory '{current_dir}' resolves to already scanned '{real_dir}', skipping")
        return
    visited.add(real_dir)

    try:
        entries = lister(current_dir)
    except Exception as e:
        diagnostics.add(
            DiagnosticKind.DIRECTORY_UNLISTABLE,
            f"Failed to list directory '{current_dir}': {e}",
            subject=current_dir,
        )
        return

    logger.log(TRACE, f"Level {level}: {len(entries)} entries in '{current_dir}'")

    for entry in entries:
        if entry.name in (os.curdir, os.pardir):
            continue
        entry_path = os.path.join(current_dir, entry.name)

        if entry.is_directory:
            _scan_recursive(
                current_dir=entry_path,
                level=level + 1,
                levels=levels,
                segments=segments + (entry.name,),
                scope=scope,
                lister=lister,
                metadata_source=metadata_source,
                diagnostics=diagnostics,
                visited=visited,
                out=out,
            )
        elif entry.is_file and entry.name.endswith(SOURCE_EXTENSION):
            out.append(_make_item(entry_path, entry.name, segments, scope, metadata_source, diagnostics))
        else:
            logger.log(TRACE, f"Skipping '{entry_path}'")


def _make_item(
        path: str,
        name: str,
        segments: Tuple[str, ...],
        scope: str,
        metadata_source: Optional[MetadataProvider],
        diagnostics: DiagnosticCollector,
) -> ContentItem:
    hierarchy_path = segments + (to_rendered_path(name),)
    relative_path = PATH_SEPARATOR.join(hierarchy_path)
    web_path = normalize_href(scope + relative_path)

    metadata = EmbeddedMetadata()
    if metadata_source is not None:
        found = metadata_source(path)
        if found is None:
            diagnostics.add(
                DiagnosticKind.METADATA_UNREADABLE,
                f"Metadata of '{path}' could not be read; using defaults.",
                subject=path,
            )
        else:
            metadata = found

    logger.log(TRACE, f"Found document '{web_path}'")
    return ContentItem(
        absolute_source_path=os.path.abspath(path),
        relative_path=relative_path,
        web_path=web_path,
        raw_name=name,
        metadata=metadata,
        hierarchy_path=hierarchy_path,
    )
