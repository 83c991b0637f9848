from __future__ import annotations

"""
Navigation Resolution Pipeline.

Coordinates one resolution run for one page:
1. Normalizes the configuration (invalid scopes are disabled, not dropped).
2. Matches the page against the configured scopes.
3. Scans the scope for content documents (metadata through a per-run cache).
4. Reports mapping/exclusion conflicts and applies the exclusions.
5. Resolves attributes while building the hierarchy.
6. Reports special mappings that matched nothing.
7. Sorts the tree.

Every run owns its diagnostics collector, metadata cache and mapping index;
nothing survives the call.
"""

import contextvars
import logging
import os
from typing import Any, Callable, Dict, Sequence, Union

from autonavbar.core.analysis.resolver import AttributeResolver, MappingIndex
from autonavbar.core.analysis.sorter import sort_hierarchy
from autonavbar.core.analysis.tree_generator import build_hierarchy
from autonavbar.core.pipeline.components.filters import (
    check_mapping_conflicts,
    compile_exclusions,
    filter_items,
)
from autonavbar.core.pipeline.stages.validator import validate_config
from autonavbar.core.services.cache import MetadataCache, MetadataProvider
from autonavbar.core.services.matcher import determine_scope, match_scope
from autonavbar.core.services.scanner import DirectoryLister, scan_scope
from autonavbar.domain.diagnostics import DiagnosticCollector, DiagnosticKind
from autonavbar.domain.nav_models import NavigationConfig, ScopeConfig
from autonavbar.domain.pipeline_models import (
    NavigationResult,
    create_error_result,
    create_inactive_result,
    create_success_result,
)
from autonavbar.infra.frontmatter import read_front_matter
from autonavbar.infra.fs import list_directory, normalize_href
from autonavbar.infra.logging import run_log_level

logger = logging.getLogger(__name__)


def run_navigation(
        config: Union[NavigationConfig, Dict[str, Any], None],
        current_path: str,
        project_dir: str,
        *,
        lister: DirectoryLister = list_directory,
        provider: MetadataProvider = read_front_matter,
        is_directory: Callable[[str], bool] = os.path.isdir,
        config_warnings: Sequence[str] = (),
) -> NavigationResult:
    """
    Resolve the navigation tree governing a page.

    Args:
        config: Raw configuration mapping, or an already normalized one.
        current_path: Site path of the page being rendered.
        project_dir: Project root directory.
        lister: Directory lister collaborator.
        provider: Metadata provider collaborator.
        is_directory: Directory test used to locate the scan root.
        config_warnings: Warnings from an earlier validation of an already
            normalized config; recorded as diagnostics of the run.

    Returns:
        NavigationResult: Inactive when no valid scope applies; otherwise the
        sorted tree with all diagnostics of the run.
    """
    diagnostics = DiagnosticCollector()
    nav_config = _normalize_config(config, diagnostics, config_warnings)
    page = normalize_href(current_path)

    # The run level is confined to a copy of the caller's context
    return contextvars.copy_context().run(
        _run_in_context, page, nav_config, project_dir, lister, provider, is_directory, diagnostics,
    )


def _run_in_context(
        page: str,
        nav_config: NavigationConfig,
        project_dir: str,
        lister: DirectoryLister,
        provider: MetadataProvider,
        is_directory: Callable[[str], bool],
        diagnostics: DiagnosticCollector,
) -> NavigationResult:
    with run_log_level(nav_config.log_level):
        # ---------------------------------------------------------------------
        # 1) Scope Matching
        # ---------------------------------------------------------------------
        scope_key = match_scope(page, nav_config.all_keys())
        if scope_key is None:
            logger.debug(f"Page '{page}' is outside every configured scope")
            return create_inactive_result(page, diagnostics.as_list())

        if scope_key in nav_config.disabled_scopes:
            diagnostics.add(
                DiagnosticKind.CONFIG_INVALID,
                f"Scope '{scope_key}' is disabled by invalid configuration; "
                f"no navigation generated for '{page}'.",
                subject=scope_key,
            )
            return create_inactive_result(page, diagnostics.as_list(), scope_key=scope_key)

        scope_config = nav_config.scopes[scope_key]
        scope = determine_scope(scope_key)
        logger.info(f"Page '{page}' in scope '{scope}'")

        try:
            return _resolve_scope(
                page, scope_key, scope, scope_config, project_dir,
                lister, provider, is_directory, diagnostics,
            )
        except Exception as e:
            msg = f"Navigation resolution failed for '{page}': {e}"
            logger.error(msg, exc_info=True)
            return create_error_result(msg, page, diagnostics.as_list(), scope_key=scope_key)


def _resolve_scope(
        page: str,
        scope_key: str,
        scope: str,
        scope_config: ScopeConfig,
        project_dir: str,
        lister: DirectoryLister,
        provider: MetadataProvider,
        is_directory: Callable[[str], bool],
        diagnostics: DiagnosticCollector,
) -> NavigationResult:
    """Scan, filter, build and sort the tree of a matched scope."""
    # 2) Discovery
    cache = MetadataCache(provider)
    scan = scan_scope(
        scope,
        project_dir,
        scope_config.levels,
        lister=lister,
        metadata_source=cache,
        diagnostics=diagnostics,
        is_directory=is_directory,
    )
    scanned = len(scan.items)
    if not scanned:
        diagnostics.add(
            DiagnosticKind.NO_CONTENT_FOUND,
            f"No content documents found under '{scan.root_dir}'.",
            subject=scan.scope,
        )

    # 3) Exclusions
    patterns = compile_exclusions(scope_config.exclusions)
    conflicts = check_mapping_conflicts(
        scope_config.special_mappings, scan.scope, patterns, diagnostics
    )
    kept, excluded = filter_items(scan.items, patterns)

    # 4) Hierarchy
    index = MappingIndex(scope_config.special_mappings, scan.scope, ignored=conflicts)
    tree = build_hierarchy(kept, AttributeResolver(index), scan.scope, scope_config.levels)
    index.report_unmatched(diagnostics, ignored=conflicts)
    sort_hierarchy(tree)

    summary: Dict[str, Any] = {
        "scanned": scanned,
        "excluded": len(excluded),
        "remaining": len(kept),
        "mappings_applied": index.applied_count,
        "mappings_specified": index.total_specified,
        "cache_hits": cache.hits,
        "cache_misses": cache.misses,
        "top_level_items": len(tree.children),
    }
    logger.info(
        f"Resolved '{scan.scope}': {len(kept)} of {scanned} documents, "
        f"{index.applied_count}/{index.total_specified} mappings applied"
    )

    return create_success_result(
        current_path=page,
        scope_key=scope_key,
        scope=scan.scope,
        scope_config=scope_config,
        tree=tree,
        diagnostics=diagnostics.as_list(),
        summary=summary,
    )


def _normalize_config(
        config: Union[NavigationConfig, Dict[str, Any], None],
        diagnostics: DiagnosticCollector,
        config_warnings: Sequence[str] = (),
) -> NavigationConfig:
    """Validate raw configuration, recording every warning as a diagnostic."""
    if isinstance(config, NavigationConfig):
        for warning in config_warnings:
            diagnostics.add(DiagnosticKind.CONFIG_INVALID, warning)
        return config
    if config is None:
        return NavigationConfig()

    nav_config, warnings = validate_config(config, strict=False)
    for warning in warnings:
        diagnostics.add(DiagnosticKind.CONFIG_INVALID, warning)
    return nav_config

