from __future__ import annotations

"""
Scope Matching Service.

Decides which configured scope, if any, owns the page being rendered. An
exact key match always wins; otherwise the longest key that is a genuine
path-segment prefix of the page path is selected.
"""

import logging
from typing import Iterable, Optional

from autonavbar.domain.nav_models import PATH_SEPARATOR, RENDERED_EXTENSION
from autonavbar.infra.fs import normalize_href

logger = logging.getLogger(__name__)


def match_scope(current_path: str, scope_keys: Iterable[str]) -> Optional[str]:
    """
    Select the scope key governing a page.

    Args:
        current_path: Site path of the current page.
        scope_keys: Configured scope keys.

    Returns:
        Optional[str]: The matching key as configured, or None when no scope
        applies (navigation stays inactive for this page).
    """
    target = normalize_href(current_path)
    best_key: Optional[str] = None
    best_len = -1

    for key in scope_keys:
        normalized = normalize_href(key)

        # 1. Exact match
        if normalized == target or normalized.rstrip(PATH_SEPARATOR) == target.rstrip(PATH_SEPARATOR):
            logger.debug(f"Scope exact match: '{key}' for '{target}'")
            return key

        # 2. Segment-bounded prefix match, longest key wins
        if _is_segment_prefix(normalized, target) and len(normalized) > best_len:
            best_key = key
            best_len = len(normalized)

    if best_key is not None:
        logger.debug(f"Scope prefix match: '{best_key}' for '{target}'")
    else:
        logger.debug(f"No scope matches '{target}'")
    return best_key


def determine_scope(key: str) -> str:
    """
    Normalize a matched scope key into the site path of its root.

    Directory scopes always end with exactly one separator; scopes that name a
    single page are returned unchanged.
    """
    normalized = normalize_href(key)
    if normalized.endswith(RENDERED_EXTENSION):
        return normalized
    return normalized.rstrip(PATH_SEPARATOR) + PATH_SEPARATOR


def _is_segment_prefix(prefix: str, path: str) -> bool:
    """True if 'prefix' covers 'path' up to a segment boundary."""
    if prefix == PATH_SEPARATOR:
        return True
    if not path.startswith(prefix):
        return False
    if prefix.endswith(PATH_SEPARATOR):
        return True
    return path[len(prefix):].startswith(PATH_SEPARATOR)
