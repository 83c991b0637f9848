from __future__ import annotations

"""
End-to-End (E2E) CLI Tests.

Verifies the application's external behavior by invoking the entry point
script via subprocess: argument parsing, exit codes and stream output for
each rendering format.
"""

import json
import os
import subprocess
import sys
from pathlib import Path
from typing import List, Optional

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
SRC_DIR = PROJECT_ROOT / "src"
ENTRY_POINT = SRC_DIR / "autonavbar" / "main.py"

QUARTO_YML = """\
project:
  type: website
auto-navbar:
  _logLevel: info
  /2024/autumn-term/:
    levels: 3
    exclude:
      - "*draft*"
    special-mappings:
      - path: /weeks/
        title: Weekly Material
        collapsed: true
"""


def run_cli(args: List[str], cwd: Optional[Path] = None) -> subprocess.CompletedProcess[str]:
    """
    Helper to execute the CLI in a separate process.

    Injects the 'src' directory into PYTHONPATH to ensure the package
    is resolvable without being installed in site-packages.

    Args:
        args: Command line arguments (excluding 'python' and script path).
        cwd: Optional working directory for the subprocess.

    Returns:
        subprocess.CompletedProcess: Return code, stdout and stderr.
    """
    env = os.environ.copy()
    env["PYTHONPATH"] = str(SRC_DIR) + os.pathsep + env.get("PYTHONPATH", "")

    cmd = [sys.executable, str(ENTRY_POINT)] + args

    return subprocess.run(
        cmd,
        cwd=cwd,
        env=env,
        capture_output=True,
        text=True,
        encoding="utf-8",
    )


@pytest.fixture
def site(course_project: Path, make_qmd) -> Path:
    """Reference course site with a Quarto project file and a draft page."""
    (course_project / "_quarto.yml").write_text(QUARTO_YML, encoding="utf-8")
    make_qmd(course_project / "2024" / "autumn-term" / "draft-ideas.qmd", 'title: "Ideas"')
    return course_project


def _page(site: Path) -> str:
    return str(site / "2024" / "autumn-term" / "index.qmd")


def test_cli_text_output(site: Path) -> None:
    result = run_cli(["--page", _page(site), "--project-dir", str(site)])

    assert result.returncode == 0, result.stderr
    lines = result.stdout.splitlines()
    assert lines[0] == "autumn-term"
    assert lines[1] == "├── Home [1]  *"
    assert lines[2] == "├── Weekly Material/"
    assert "Ideas" not in result.stdout
    assert lines[-1] == "└── Syllabus"


def test_cli_json_output(site: Path) -> None:
    result = run_cli(["-p", _page(site), "-d", str(site), "-f", "json"])

    assert result.returncode == 0, result.stderr
    payload = json.loads(result.stdout)
    assert payload["page"] == "/2024/autumn-term/index.html"
    assert payload["scope"] == "/2024/autumn-term/"
    assert payload["summary"]["excluded"] == 1
    assert [c["title"] for c in payload["tree"]["children"]] == ["Home", "Weekly Material", "Syllabus"]
    assert payload["tree"]["children"][0]["active"] is True


def test_cli_html_output(site: Path) -> None:
    result = run_cli(["-p", _page(site), "-d", str(site), "-f", "html", "--no-container"])

    assert result.returncode == 0, result.stderr
    assert result.stdout.startswith('<ul class="list-unstyled mt-1">')
    assert "sidebar-link active" in result.stdout
    assert 'aria-expanded="false"' in result.stdout


def test_cli_project_dir_defaults_to_cwd(site: Path) -> None:
    result = run_cli(["-p", "2024/autumn-term/syllabus.qmd"], cwd=site)
    assert result.returncode == 0, result.stderr
    assert "└── Syllabus  *" in result.stdout


def test_cli_page_outside_scopes(site: Path) -> None:
    result = run_cli(["-p", str(site / "other" / "page.qmd"), "-d", str(site)])
    assert result.returncode == 0
    assert result.stdout == ""
    assert "No generated navigation for /other/page.html" in result.stderr


def test_cli_missing_page(site: Path) -> None:
    result = run_cli(["-p", str(site / "nope.qmd"), "-d", str(site)])
    assert result.returncode == 2
    assert "Page not found" in result.stderr


def test_cli_missing_config(tmp_path: Path, make_qmd) -> None:
    page = make_qmd(tmp_path / "index.qmd")
    result = run_cli(["-p", str(page), "-d", str(tmp_path)])
    assert result.returncode == 2
    assert "No configuration file found" in result.stderr


def test_cli_strict_rejects_invalid_config(site: Path) -> None:
    nav = site / "nav.yml"
    nav.write_text("/2024/autumn-term/:\n  levels: zero\n", encoding="utf-8")

    lenient = run_cli(["-p", _page(site), "-d", str(site), "-c", str(nav)])
    assert lenient.returncode == 0
    assert "No generated navigation" in lenient.stderr

    strict = run_cli(["-p", _page(site), "-d", str(site), "-c", str(nav), "--strict"])
    assert strict.returncode == 2
    assert "levels must be a positive integer" in strict.stderr


def test_cli_dump_config(site: Path) -> None:
    result = run_cli(["-p", _page(site), "-d", str(site), "--dump-config"])

    assert result.returncode == 0, result.stderr
    data = json.loads(result.stdout)
    assert data["log_level"] == "info"
    scope = data["scopes"]["/2024/autumn-term/"]
    assert scope["levels"] == 3
    assert scope["exclusions"] == ["*draft*"]
    assert scope["special_mappings"][0]["collapsed"] is True


def test_cli_log_file(site: Path, tmp_path: Path) -> None:
    log_file = tmp_path / "logs" / "autonavbar.log"
    result = run_cli(["-p", _page(site), "-d", str(site), "--debug", "--log-file", str(log_file)])

    assert result.returncode == 0, result.stderr
    assert log_file.exists()
    assert "Resolving navigation" in log_file.read_text(encoding="utf-8")
