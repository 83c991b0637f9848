from __future__ import annotations

"""
Unit tests for the CLI Application Controller.

Collaborators (logging bootstrap, navigation engine) are patched so the exit
code mapping can be checked in-process.
"""

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from autonavbar.domain.nav_models import NavigationConfig
from autonavbar.domain.pipeline_models import create_error_result, create_inactive_result
from autonavbar.interface.cli import app

APP = "autonavbar.interface.cli.app"


@pytest.fixture
def project(tmp_path: Path, make_qmd) -> Path:
    make_qmd(tmp_path / "docs" / "index.qmd", 'title: "Docs"')
    (tmp_path / "_quarto.yml").write_text("auto-navbar:\n  /docs/:\n    levels: 1\n", encoding="utf-8")
    return tmp_path


def _argv(project: Path, *extra: str):
    return ["-p", str(project / "docs" / "index.qmd"), "-d", str(project), *extra]


@patch(f"{APP}.configure_logging")
def test_success_prints_tree(mock_logging: MagicMock, project: Path, capsys: pytest.CaptureFixture) -> None:
    assert app.main(_argv(project)) == app.EXIT_OK
    out = capsys.readouterr().out
    assert out.startswith("docs\n")
    assert "Docs  *" in out
    mock_logging.assert_called_once()


@patch(f"{APP}.configure_logging")
@patch(f"{APP}.run_navigation")
def test_engine_error_result_exits_with_failure(
        mock_run: MagicMock, _mock_logging: MagicMock, project: Path, capsys: pytest.CaptureFixture
) -> None:
    mock_run.return_value = create_error_result("scan exploded", "/docs/index.html", [])

    assert app.main(_argv(project)) == app.EXIT_FAILURE
    assert "ERROR: scan exploded" in capsys.readouterr().err


@patch(f"{APP}.configure_logging")
@patch(f"{APP}.run_navigation", side_effect=RuntimeError("unexpected"))
def test_engine_crash_exits_with_failure(
        _mock_run: MagicMock, _mock_logging: MagicMock, project: Path, capsys: pytest.CaptureFixture
) -> None:
    assert app.main(_argv(project)) == app.EXIT_FAILURE
    assert "unexpected" in capsys.readouterr().err


@patch(f"{APP}.configure_logging")
@patch(f"{APP}.run_navigation", side_effect=KeyboardInterrupt)
def test_interrupt_exit_code(_mock_run: MagicMock, _mock_logging: MagicMock, project: Path) -> None:
    assert app.main(_argv(project)) == 130


@patch(f"{APP}.configure_logging")
def test_malformed_config_is_bad_input(_mock_logging: MagicMock, project: Path, capsys: pytest.CaptureFixture) -> None:
    (project / "_quarto.yml").write_text("auto-navbar: [\n", encoding="utf-8")
    assert app.main(_argv(project)) == app.EXIT_BAD_INPUT
    assert "Malformed YAML" in capsys.readouterr().err


@patch(f"{APP}.configure_logging")
@patch(f"{APP}.run_navigation")
def test_engine_receives_the_validated_config(
        mock_run: MagicMock, _mock_logging: MagicMock, project: Path
) -> None:
    """The engine gets the normalized config and its warnings, not the raw mapping."""
    (project / "_quarto.yml").write_text(
        "auto-navbar:\n  /docs/:\n    levels: 1\n  /other/:\n    levels: 0\n", encoding="utf-8"
    )
    mock_run.return_value = create_inactive_result("/docs/index.html", [])

    with patch(f"{APP}.validate_config", wraps=app.validate_config) as spy:
        assert app.main(_argv(project)) == app.EXIT_OK

    spy.assert_called_once()
    config = mock_run.call_args.args[0]
    assert isinstance(config, NavigationConfig)
    assert config.scopes["/docs/"].levels == 1
    assert "/other/" in config.disabled_scopes
    warnings = mock_run.call_args.kwargs["config_warnings"]
    assert len(warnings) == 1
    assert "/other/" in warnings[0]
