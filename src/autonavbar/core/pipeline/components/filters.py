from __future__ import annotations

"""
Exclusion Filtering Engine.

Compiles the exclusion patterns of a scope and applies them to the flat list
of discovered content items. Two pattern flavours are supported:

- Literal patterns (no '*') match by substring containment anywhere in the
  item's site path.
- Glob patterns (containing '*') match the whole site path; '*' stands for any
  sequence of characters and everything else is taken literally.

Patterns written against source documents ('.qmd') are rewritten to the
rendered extension before matching, since items are matched by site path.
"""

import logging
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from autonavbar.domain.diagnostics import DiagnosticCollector, DiagnosticKind
from autonavbar.domain.nav_models import (
    PATH_SEPARATOR,
    ContentItem,
    SpecialMapping,
)
from autonavbar.infra.fs import normalize_href, to_rendered_path

logger = logging.getLogger(__name__)

_GLOB_WILDCARD = "*"


@dataclass(frozen=True)
class ExclusionPattern:
    """
    A compiled exclusion rule.

    Attributes:
        raw: Pattern as written in the configuration.
        text: Pattern after the source -> rendered extension rewrite.
        regex: Anchored expression for glob patterns, None for literals.
    """
    raw: str
    text: str
    regex: Optional[re.Pattern] = None

    @property
    def is_glob(self) -> bool:
        return self.regex is not None

    def matches(self, path: str) -> bool:
        if self.regex is not None:
            return self.regex.fullmatch(path) is not None
        return self.text in path

# -----------------------------------------------------------------------------
# PATTERN COMPILATION AND MATCHING
# -----------------------------------------------------------------------------

def compile_exclusions(patterns: Iterable[str]) -> List[ExclusionPattern]:
    """
    Classify and compile raw exclusion strings.

    Args:
        patterns: Raw patterns from the scope configuration.

    Returns:
        List[ExclusionPattern]: Compiled patterns, in configuration order.
    """
    compiled: List[ExclusionPattern] = []
    for raw in patterns:
        if not raw:
            continue
        text = to_rendered_path(raw)
        regex = _glob_to_regex(text) if _GLOB_WILDCARD in text else None
        compiled.append(ExclusionPattern(raw=raw, text=text, regex=regex))
    return compiled


def is_excluded(path: str, patterns: Sequence[ExclusionPattern]) -> Optional[ExclusionPattern]:
    """
    Check a site path against all exclusion patterns.

    Args:
        path: Normalized site path of the item.
        patterns: Compiled exclusion patterns.

    Returns:
        Optional[ExclusionPattern]: The first matching pattern, or None.
    """
    for pattern in patterns:
        if pattern.matches(path):
            return pattern
    return None


def filter_items(
        items: Sequence[ContentItem],
        patterns: Sequence[ExclusionPattern],
) -> Tuple[List[ContentItem], List[ContentItem]]:
    """
    Drop every item matched by at least one exclusion pattern.

    Args:
        items: Discovered content items.
        patterns: Compiled exclusion patterns.

    Returns:
        Tuple[List[ContentItem], List[ContentItem]]: (kept, excluded), both in
        input order.
    """
    if not patterns:
        return list(items), []

    kept: List[ContentItem] = []
    excluded: List[ContentItem] = []
    for item in items:
        hit = is_excluded(item.web_path, patterns)
        if hit is None:
            kept.append(item)
        else:
            logger.debug(f"Excluded '{item.web_path}' (pattern '{hit.raw}')")
            excluded.append(item)
    return kept, excluded


def check_mapping_conflicts(
        mappings: Sequence[SpecialMapping],
        scope: str,
        patterns: Sequence[ExclusionPattern],
        diagnostics: DiagnosticCollector,
) -> List[SpecialMapping]:
    """
    Report special mappings whose target would be excluded.

    Exclusion always wins: the reported mappings simply have no effect.

    Args:
        mappings: Special mappings of the scope.
        scope: Normalized scope path (trailing separator).
        patterns: Compiled exclusion patterns.
        diagnostics: Run diagnostics collector.

    Returns:
        List[SpecialMapping]: The conflicting mappings.
    """
    conflicts: List[SpecialMapping] = []
    if not patterns:
        return conflicts

    for mapping in mappings:
        target = mapping_target_path(mapping, scope)
        hit = is_excluded(target, patterns)
        if hit is None:
            continue
        conflicts.append(mapping)
        diagnostics.add(
            DiagnosticKind.MAPPING_EXCLUDED_CONFLICT,
            f"Special mapping for '{mapping.path}' targets '{target}', which is excluded "
            f"by pattern '{hit.raw}'. The mapping will have no effect.",
            subject=mapping.path,
        )
    return conflicts


def mapping_target_path(mapping: SpecialMapping, scope: str) -> str:
    """Site path a mapping refers to, in the rendered form used for matching."""
    relative = mapping.path.lstrip(PATH_SEPARATOR)
    return to_rendered_path(normalize_href(scope.rstrip(PATH_SEPARATOR) + PATH_SEPARATOR + relative))

# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _glob_to_regex(glob_pattern: str) -> re.Pattern:
    """Escape every literal run and turn '*' into '.*'."""
    parts = [re.escape(part) for part in glob_pattern.split(_GLOB_WILDCARD)]
    return re.compile(".*".join(parts), re.DOTALL)
