from __future__ import annotations

"""
Run Result Data Models.

Defines the immutable result of one navigation resolution run and the
factories used by the engine to build it. Interfaces (CLI, host filters) only
ever consume this object.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from autonavbar.domain.diagnostics import Diagnostic, DiagnosticKind
from autonavbar.domain.nav_models import HierarchyNode, ScopeConfig

# -----------------------------------------------------------------------------
# CORE DATA MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class NavigationResult:
    """
    Outcome of resolving the navigation of one page.

    Attributes:
        ok: False only if the run failed unexpectedly.
        active: True if a valid scope governs the page and a tree was built.
        error: Failure description when ok is False.
        current_path: Normalized site path of the page.
        scope_key: Matched configuration key ('' when none matched).
        scope: Normalized site path of the scanned scope.
        scope_config: Normalized settings of the matched scope.
        tree: Sorted navigation tree (None when inactive).
        diagnostics: Every diagnostic recorded during the run.
        summary: Run statistics (scanned/excluded/remaining items,
                 applied/specified mappings, cache hits/misses).
    """
    ok: bool
    active: bool
    error: str
    current_path: str

    scope_key: str = ""
    scope: str = ""
    scope_config: Optional[ScopeConfig] = None
    tree: Optional[HierarchyNode] = None

    diagnostics: List[Diagnostic] = field(default_factory=list)
    summary: Dict[str, Any] = field(default_factory=dict)

    def diagnostics_of(self, kind: DiagnosticKind) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.kind is kind]

# -----------------------------------------------------------------------------
# FACTORY FUNCTIONS
# -----------------------------------------------------------------------------

def create_inactive_result(
        current_path: str,
        diagnostics: List[Diagnostic],
        scope_key: str = "",
) -> NavigationResult:
    """Result for a page that no (valid) scope governs."""
    return NavigationResult(
        ok=True,
        active=False,
        error="",
        current_path=current_path,
        scope_key=scope_key,
        diagnostics=diagnostics,
    )


def create_error_result(
        error: str,
        current_path: str,
        diagnostics: List[Diagnostic],
        scope_key: str = "",
) -> NavigationResult:
    """Result for a run aborted by an unexpected failure."""
    return NavigationResult(
        ok=False,
        active=False,
        error=error,
        current_path=current_path,
        scope_key=scope_key,
        diagnostics=diagnostics,
    )


def create_success_result(
        current_path: str,
        scope_key: str,
        scope: str,
        scope_config: ScopeConfig,
        tree: HierarchyNode,
        diagnostics: List[Diagnostic],
        summary: Optional[Dict[str, Any]] = None,
) -> NavigationResult:
    """Result for a completed run with a resolved tree."""
    return NavigationResult(
        ok=True,
        active=True,
        error="",
        current_path=current_path,
        scope_key=scope_key,
        scope=scope,
        scope_config=scope_config,
        tree=tree,
        diagnostics=diagnostics,
        summary=summary or {},
    )
