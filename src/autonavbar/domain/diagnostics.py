from __future__ import annotations

"""
Run Diagnostics.

Every non-fatal problem met during a resolution run is recorded here instead
of being raised, so callers (and tests) can inspect the complete set emitted by
a run. Each recorded diagnostic is also forwarded to the module logger.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Optional

logger = logging.getLogger(__name__)


class DiagnosticKind(str, Enum):
    CONFIG_INVALID = "ConfigInvalid"
    METADATA_UNREADABLE = "MetadataUnreadable"
    DIRECTORY_UNLISTABLE = "DirectoryUnlistable"
    UNMATCHED_SPECIAL_MAPPING = "UnmatchedSpecialMapping"
    MAPPING_EXCLUDED_CONFLICT = "MappingExcludedConflict"
    NO_CONTENT_FOUND = "NoContentFound"


# Kinds that only affect a single item are logged at DEBUG to keep noise down
_LOG_LEVELS = {
    DiagnosticKind.CONFIG_INVALID: logging.WARNING,
    DiagnosticKind.METADATA_UNREADABLE: logging.DEBUG,
    DiagnosticKind.DIRECTORY_UNLISTABLE: logging.WARNING,
    DiagnosticKind.UNMATCHED_SPECIAL_MAPPING: logging.WARNING,
    DiagnosticKind.MAPPING_EXCLUDED_CONFLICT: logging.WARNING,
    DiagnosticKind.NO_CONTENT_FOUND: logging.ERROR,
}


@dataclass(frozen=True)
class Diagnostic:
    """
    A single recorded problem.

    Attributes:
        kind: Category of the problem.
        message: Human-readable description.
        subject: Path or key the problem refers to.
    """
    kind: DiagnosticKind
    message: str
    subject: str = ""


class DiagnosticCollector:
    """Accumulates diagnostics for one resolution run."""

    def __init__(self) -> None:
        self._items: List[Diagnostic] = []

    def add(self, kind: DiagnosticKind, message: str, subject: str = "") -> Diagnostic:
        diagnostic = Diagnostic(kind=kind, message=message, subject=subject)
        self._items.append(diagnostic)
        logger.log(_LOG_LEVELS.get(kind, logging.WARNING), f"[{kind.value}] {message}")
        return diagnostic

    def of_kind(self, kind: DiagnosticKind) -> List[Diagnostic]:
        return [d for d in self._items if d.kind is kind]

    def first(self, kind: DiagnosticKind) -> Optional[Diagnostic]:
        found = self.of_kind(kind)
        return found[0] if found else None

    def as_list(self) -> List[Diagnostic]:
        return list(self._items)

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(list(self._items))

    def __len__(self) -> int:
        return len(self._items)
