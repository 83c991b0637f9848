from __future__ import annotations

"""
Per-Run Metadata Cache.

Read-through cache mapping absolute document paths to parsed metadata. A
fresh instance is created for every resolution run and dropped with it, so no
parsed state leaks between pages resolved in the same process.
"""

import logging
import os
from typing import Callable, Dict, Optional

from autonavbar.domain.nav_models import EmbeddedMetadata

logger = logging.getLogger(__name__)

MetadataProvider = Callable[[str], Optional[EmbeddedMetadata]]


class MetadataCache:
    """
    Memoizes a metadata provider for the lifetime of one run.

    Failed lookups (None) are cached too, so an unreadable document is only
    attempted once per run.
    """

    def __init__(self, provider: MetadataProvider) -> None:
        self._provider = provider
        self._entries: Dict[str, Optional[EmbeddedMetadata]] = {}
        self.hits = 0
        self.misses = 0

    def get_entry(self, path: str) -> Optional[EmbeddedMetadata]:
        """
        Retrieve metadata for a document, reading it on first access.

        Args:
            path: Absolute path of the document.

        Returns:
            Optional[EmbeddedMetadata]: Parsed metadata, or None when unreadable.
        """
        key = os.path.abspath(path)
        if key in self._entries:
            self.hits += 1
            return self._entries[key]

        self.misses += 1
        try:
            value = self._provider(key)
        except Exception as e:
            # Providers must not raise; a misbehaving one degrades to "no metadata"
            logger.warning(f"Metadata provider failed for '{key}': {e}")
            value = None

        self._entries[key] = value
        return value

    def __call__(self, path: str) -> Optional[EmbeddedMetadata]:
        return self.get_entry(path)

    def __len__(self) -> int:
        return len(self._entries)
