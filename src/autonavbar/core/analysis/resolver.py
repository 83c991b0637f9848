from __future__ import annotations

"""
Attribute Resolution Service.

Computes the display title, sort order and collapsed state of every tree
node. Each attribute follows its own short-circuiting priority chain:

Title (files):  title-nav > file mapping > title > smart conversion > cleaned name
Title (dirs):   directory mapping > smart conversion > cleaned name
Order:          mapping order > order-nav > none
Collapsed:      directory mapping > expanded (False)

Special mappings are looked up through a MappingIndex built once per run,
which also records which mappings actually matched content.
"""

import logging
import posixpath
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Set

from autonavbar.core.analysis.titles import (
    clean_name,
    convert_name_to_title,
    strip_source_extension,
)
from autonavbar.domain.diagnostics import DiagnosticCollector, DiagnosticKind
from autonavbar.domain.nav_models import (
    PATH_SEPARATOR,
    ContentItem,
    MappingKind,
    SpecialMapping,
    coerce_order,
)
from autonavbar.infra.fs import normalize_href, to_source_path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedAttributes:
    """Outcome of attribute resolution for a single node."""
    title: str
    order: Optional[float] = None
    collapsed: Optional[bool] = None

# -----------------------------------------------------------------------------
# MAPPING INDEX
# -----------------------------------------------------------------------------

class MappingIndex:
    """
    Normalized lookup tables for the special mappings of one scope.

    File mappings are keyed by their full site path in source form
    ('/2024/autumn-term/index.qmd'); directory mappings by their path relative
    to the scope ('weeks', 'weeks/week01').
    """

    def __init__(
            self,
            mappings: Iterable[SpecialMapping],
            scope: str,
            ignored: Iterable[SpecialMapping] = (),
    ) -> None:
        self.scope = scope
        self._all: List[SpecialMapping] = list(mappings)
        skip = {m.path for m in ignored}

        self._files: Dict[str, SpecialMapping] = {}
        self._dirs: Dict[str, SpecialMapping] = {}
        self._matched: Set[str] = set()

        for mapping in self._all:
            if mapping.path in skip:
                continue
            if mapping.kind is MappingKind.DIRECTORY:
                key = directory_key(mapping.path)
                self._dirs.setdefault(key, mapping)
                logger.debug(f"Directory mapping '{key}' -> {mapping}")
            else:
                key = self.file_key(mapping.path)
                self._files.setdefault(key, mapping)
                logger.debug(f"File mapping '{key}' -> {mapping}")

    def file_key(self, relative_path: str) -> str:
        """Full site path (source form) of a scope-relative file path."""
        relative = to_source_path(relative_path.lstrip(PATH_SEPARATOR))
        return normalize_href(self.scope.rstrip(PATH_SEPARATOR) + PATH_SEPARATOR + relative)

    def for_file(self, item: ContentItem) -> Optional[SpecialMapping]:
        mapping = self._files.get(self.file_key(item.relative_path))
        if mapping is not None:
            self._matched.add(mapping.path)
        return mapping

    def for_directory(self, relative_dir: str) -> Optional[SpecialMapping]:
        mapping = self._dirs.get(directory_key(relative_dir))
        if mapping is not None:
            self._matched.add(mapping.path)
        return mapping

    @property
    def total_specified(self) -> int:
        return len(self._all)

    @property
    def applied_count(self) -> int:
        return len(self._matched)

    def unmatched(self) -> List[SpecialMapping]:
        return [m for m in self._all if m.path not in self._matched]

    def report_unmatched(
            self,
            diagnostics: DiagnosticCollector,
            ignored: Iterable[SpecialMapping] = (),
    ) -> List[SpecialMapping]:
        """
        Record an UnmatchedSpecialMapping diagnostic for every mapping whose
        target matched no content. Mappings in 'ignored' were already reported.
        """
        skip = {m.path for m in ignored}
        missing = [m for m in self.unmatched() if m.path not in skip]
        for mapping in missing:
            diagnostics.add(
                DiagnosticKind.UNMATCHED_SPECIAL_MAPPING,
                f"Special mapping '{mapping.path}' does not match any "
                f"{mapping.kind.value} under scope '{self.scope}'.",
                subject=mapping.path,
            )
        return missing


def directory_key(path: str) -> str:
    """Normalize a directory path into its scope-relative lookup key."""
    key = normalize_href(path).strip(PATH_SEPARATOR)
    return posixpath.normpath(key) if key else ""

# -----------------------------------------------------------------------------
# ATTRIBUTE RESOLVER
# -----------------------------------------------------------------------------

class AttributeResolver:
    """Applies the title, order and collapsed priority chains."""

    def __init__(self, index: MappingIndex) -> None:
        self.index = index

    def resolve_file(self, item: ContentItem) -> ResolvedAttributes:
        """
        Resolve title and order of a content document.

        Args:
            item: Scanned content item.

        Returns:
            ResolvedAttributes: Title and order (collapsed is not applicable).
        """
        mapping = self.index.for_file(item)
        meta = item.metadata

        if meta.nav_title:
            title = meta.nav_title
        elif mapping is not None:
            title = mapping.title or _mapping_stem(mapping.path)
        elif meta.title:
            title = meta.title
        else:
            title = self._title_from_name(item.raw_name, is_file=True)

        order = mapping.order if mapping is not None and mapping.order is not None else None
        if order is None:
            order = coerce_order(meta.nav_order)

        return ResolvedAttributes(title=title, order=order)

    def resolve_directory(self, relative_dir: str, raw_name: str) -> ResolvedAttributes:
        """
        Resolve title, order and collapsed state of a directory.

        Args:
            relative_dir: Directory path relative to the scope ('weeks/week01').
            raw_name: Directory name ('week01').

        Returns:
            ResolvedAttributes: Title, order and collapsed state.
        """
        mapping = self.index.for_directory(relative_dir)
        if mapping is None:
            return ResolvedAttributes(
                title=self._title_from_name(raw_name, is_file=False),
                collapsed=False,
            )

        collapsed = mapping.collapsed if mapping.collapsed is not None else False
        return ResolvedAttributes(
            title=mapping.title or self._title_from_name(raw_name, is_file=False),
            order=mapping.order,
            collapsed=collapsed,
        )

    @staticmethod
    def _title_from_name(raw_name: str, is_file: bool) -> str:
        title = convert_name_to_title(raw_name, is_file=is_file)
        if title:
            return title
        return clean_name(raw_name)


def _mapping_stem(path: str) -> str:
    """Stem of the last segment of a mapping path ('/sub/intro.qmd' -> 'intro')."""
    segment = to_source_path(path.rstrip(PATH_SEPARATOR).rsplit(PATH_SEPARATOR, 1)[-1])
    return strip_source_extension(segment) or segment
