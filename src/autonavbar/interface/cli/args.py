from __future__ import annotations

"""
CLI Argument Definition.

Defines the command-line schema of the autonavbar tool: which page to
resolve, where the project and its configuration live, and how to render the
resulting tree.
"""

import argparse
from typing import List

OUTPUT_FORMATS: List[str] = ["text", "html", "json"]


def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the autonavbar CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog="autonavbar",
        description="Resolve the generated sidebar navigation of a Quarto page.",
    )

    # --- Target Selection ---
    p.add_argument(
        "-p", "--page",
        dest="page",
        required=True,
        help="Content document (.qmd) whose navigation should be resolved.",
    )
    p.add_argument(
        "-d", "--project-dir",
        dest="project_dir",
        default=None,
        help="Project root directory (default: current directory).",
    )
    p.add_argument(
        "-c", "--config",
        dest="config_path",
        default=None,
        help="YAML file holding the navigation settings (default: _quarto.yml in the project).",
    )

    # --- Output ---
    p.add_argument(
        "-f", "--format",
        dest="output_format",
        choices=OUTPUT_FORMATS,
        default="text",
        help="Output format of the resolved tree.",
    )
    p.add_argument(
        "--no-container",
        dest="with_container",
        action="store_false",
        help="Emit only the sidebar list in html format, without the <nav> wrapper.",
    )
    p.add_argument(
        "--dump-config",
        action="store_true",
        help="Print the normalized configuration as JSON and exit.",
    )
    p.add_argument(
        "--strict",
        action="store_true",
        help="Fail on the first configuration problem instead of disabling the scope.",
    )

    # --- Diagnostics ---
    p.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging on stderr.",
    )
    p.add_argument(
        "--log-file",
        dest="log_file",
        default=None,
        help="Also write logs to this rotating file.",
    )

    return p
