from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. Shared fixtures building a small course site on disk, plus the raw
   navigation configuration that goes with it.
"""

import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)


def write_qmd(path: Path, front_matter: Optional[str] = None, body: str = "Content\n") -> Path:
    """Create a content document, optionally with a YAML header."""
    path.parent.mkdir(parents=True, exist_ok=True)
    text = body if front_matter is None else f"---\n{front_matter}\n---\n\n{body}"
    path.write_text(text, encoding="utf-8")
    return path


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def make_qmd():
    """Expose the document writer to tests."""
    return write_qmd


@pytest.fixture
def course_project(tmp_path: Path) -> Path:
    """
    Create the reference course site.

    Structure:
        2024/autumn-term/
            index.qmd             (title-nav: Home, order-nav: 1)
            syllabus.qmd          (title: Syllabus)
            weeks/week01/lecture.qmd
            weeks/week02/lab.qmd
        other/page.qmd

    Returns:
        Path: Project root directory.
    """
    term = tmp_path / "2024" / "autumn-term"
    write_qmd(term / "index.qmd", 'title: "Welcome"\ntitle-nav: "Home"\norder-nav: 1')
    write_qmd(term / "syllabus.qmd", 'title: "Syllabus"')
    write_qmd(term / "weeks" / "week01" / "lecture.qmd")
    write_qmd(term / "weeks" / "week02" / "lab.qmd")
    write_qmd(tmp_path / "other" / "page.qmd", 'title: "Other"')
    return tmp_path


@pytest.fixture
def course_config() -> Dict[str, Any]:
    """
    Return the raw navigation configuration of the reference course site.

    Returns:
        Dict[str, Any]: Scope key -> scope settings, as parsed from YAML.
    """
    return {
        "/2024/autumn-term/": {
            "levels": 3,
            "exclude": [],
            "special-mappings": [],
        }
    }
