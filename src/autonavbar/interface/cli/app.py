from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: logging bootstrap, configuration loading and
validation, navigation resolution for one page, and rendering of the result.

Exit codes: 0 on success (including pages outside every scope), 1 on an
unexpected failure, 2 on bad input (missing page, unreadable configuration).
"""

import json
import os
import sys
from dataclasses import asdict
from typing import Any, Dict, List, Optional

from autonavbar.core.analysis.tree_renderer import (
    render_sidebar_html,
    render_text_tree,
    tree_to_dict,
)
from autonavbar.core.pipeline.engine import run_navigation
from autonavbar.core.pipeline.stages.validator import validate_config
from autonavbar.domain.config import find_config_file, load_navigation_config
from autonavbar.domain.errors import ConfigInvalidError
from autonavbar.domain.nav_models import NavigationConfig
from autonavbar.domain.pipeline_models import NavigationResult
from autonavbar.infra.fs import extract_web_path, normalize_path
from autonavbar.infra.logging import LoggingConfig, configure_logging, get_logger
from autonavbar.interface.cli import args as cli_args

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_BAD_INPUT = 2

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the CLI workflow.

    Args:
        argv: Command line arguments. Defaults to sys.argv.

    Returns:
        int: Process exit code.
    """
    # 1. Argument parsing
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    # 2. Logging bootstrap (console on stderr, optional rotating file)
    log_level = "DEBUG" if args.debug else "WARNING"
    configure_logging(LoggingConfig(level=log_level, console=True, log_file=args.log_file))

    # 3. Path resolution
    project_dir = normalize_path(args.project_dir, os.getcwd())
    page_path = os.path.abspath(args.page)
    if not os.path.isfile(page_path):
        return _fail(f"Page not found: {page_path}", EXIT_BAD_INPUT)

    config_path = args.config_path or find_config_file(project_dir)
    if not config_path:
        return _fail(f"No configuration file found in {project_dir}", EXIT_BAD_INPUT)

    # 4. Configuration loading and validation
    try:
        raw_conf = load_navigation_config(config_path)
        nav_config, warnings = validate_config(raw_conf, strict=args.strict)
    except ConfigInvalidError as e:
        return _fail(str(e), EXIT_BAD_INPUT)

    if args.dump_config:
        for w in warnings:
            logger.warning(f"Configuration Constraint: {w}")
        print(json.dumps(config_to_dict(nav_config), ensure_ascii=False, indent=2))
        return EXIT_OK

    # 5. Resolution
    current_path = extract_web_path(page_path, project_dir)
    logger.debug(f"Resolving navigation for '{current_path}' using '{config_path}'")
    try:
        result = run_navigation(nav_config, current_path, project_dir, config_warnings=warnings)
    except KeyboardInterrupt:
        print("Interrupted.", file=sys.stderr)
        return 130
    except Exception as e:
        logger.critical(f"Navigation resolution crashed: {e}", exc_info=True)
        return _fail(str(e), EXIT_FAILURE)

    # 6. Rendering
    if not result.ok:
        return _fail(result.error, EXIT_FAILURE)
    if not result.active:
        print(f"No generated navigation for {current_path}", file=sys.stderr)
        return EXIT_OK

    print(render_result(result, args.output_format, with_container=args.with_container))
    return EXIT_OK

# -----------------------------------------------------------------------------
# VIEW RENDERING
# -----------------------------------------------------------------------------

def render_result(result: NavigationResult, output_format: str, with_container: bool = True) -> str:
    """
    Render an active result in the requested output format.

    Args:
        result: Active navigation result.
        output_format: 'text', 'html' or 'json'.
        with_container: Wrap html output in the sidebar <nav> element.

    Returns:
        str: Rendered output.
    """
    if result.tree is None:
        return ""
    if output_format == "html":
        return render_sidebar_html(result.tree, result.current_path, with_container=with_container)
    if output_format == "json":
        payload: Dict[str, Any] = {
            "page": result.current_path,
            "scope_key": result.scope_key,
            "scope": result.scope,
            "summary": result.summary,
            "diagnostics": [
                {"kind": d.kind.value, "message": d.message, "subject": d.subject}
                for d in result.diagnostics
            ],
            "tree": tree_to_dict(result.tree, result.current_path),
        }
        return json.dumps(payload, ensure_ascii=False, indent=2)
    return "\n".join(render_text_tree(result.tree, result.current_path))


def config_to_dict(nav_config: NavigationConfig) -> Dict[str, Any]:
    """JSON-ready view of a normalized configuration."""
    return {
        "log_level": nav_config.log_level,
        "scopes": {key: asdict(scope) for key, scope in nav_config.scopes.items()},
        "disabled_scopes": sorted(nav_config.disabled_scopes),
    }


def _fail(msg: str, code: int) -> int:
    logger.error(msg)
    print(f"ERROR: {msg}", file=sys.stderr)
    return code


if __name__ == "__main__":
    sys.exit(main())
