from __future__ import annotations

"""
Unit tests for the Content Discovery Service.

Uses an in-memory directory lister so that depth limits, listing failures
and unreadable metadata can be exercised deterministically.
"""

import os
from typing import Dict, List, Optional

import pytest

from autonavbar.core.services.scanner import resolve_scan_root, scan_scope
from autonavbar.domain.diagnostics import DiagnosticCollector, DiagnosticKind
from autonavbar.domain.nav_models import DirectoryEntry, EmbeddedMetadata

PROJECT = os.path.abspath("/project")


def _path(*parts: str) -> str:
    return os.path.normpath(os.path.join(PROJECT, *parts))


class FakeTree:
    """In-memory filesystem: directory path -> entries."""

    def __init__(self, layout: Dict[str, List[DirectoryEntry]], broken: tuple = ()) -> None:
        self.layout = layout
        self.broken = set(broken)

    def list(self, path: str) -> List[DirectoryEntry]:
        if path in self.broken:
            raise PermissionError(f"denied: {path}")
        return self.layout.get(path, [])

    def is_dir(self, path: str) -> bool:
        return path in self.layout or path in self.broken


def _d(name: str) -> DirectoryEntry:
    return DirectoryEntry(name=name, is_directory=True, is_file=False)


def _f(name: str) -> DirectoryEntry:
    return DirectoryEntry(name=name, is_directory=False)


@pytest.fixture
def fake_tree() -> FakeTree:
    return FakeTree({
        _path("course"): [_f("index.qmd"), _f("notes.md"), _f("style.css"), _d("weeks")],
        _path("course", "weeks"): [_d("week01"), _f("overview.qmd")],
        _path("course", "weeks", "week01"): [_f("lecture.qmd")],
    })


def test_scan_collects_only_content_documents(fake_tree: FakeTree) -> None:
    result = scan_scope(
        "/course/", PROJECT, None, lister=fake_tree.list, is_directory=fake_tree.is_dir
    )

    assert result.scope == "/course/"
    assert [i.web_path for i in result.items] == [
        "/course/index.html",
        "/course/weeks/overview.html",
        "/course/weeks/week01/lecture.html",
    ]
    lecture = result.items[-1]
    assert lecture.raw_name == "lecture.qmd"
    assert lecture.relative_path == "weeks/week01/lecture.html"
    assert lecture.hierarchy_path == ("weeks", "week01", "lecture.html")
    assert lecture.level == 3


def test_scan_respects_levels(fake_tree: FakeTree) -> None:
    result = scan_scope(
        "/course/", PROJECT, 2, lister=fake_tree.list, is_directory=fake_tree.is_dir
    )
    assert max(i.level for i in result.items) <= 2
    assert "/course/weeks/week01/lecture.html" not in [i.web_path for i in result.items]


def test_unlistable_directory_skips_only_its_subtree(fake_tree: FakeTree) -> None:
    fake_tree.broken.add(_path("course", "weeks"))
    del fake_tree.layout[_path("course", "weeks")]
    diagnostics = DiagnosticCollector()

    result = scan_scope(
        "/course/", PROJECT, None,
        lister=fake_tree.list, diagnostics=diagnostics, is_directory=fake_tree.is_dir,
    )

    assert [i.web_path for i in result.items] == ["/course/index.html"]
    found = diagnostics.of_kind(DiagnosticKind.DIRECTORY_UNLISTABLE)
    assert len(found) == 1
    assert found[0].subject == _path("course", "weeks")


def test_unexpected_lister_error_skips_only_its_subtree(fake_tree: FakeTree) -> None:
    def lister(path: str) -> List[DirectoryEntry]:
        if path == _path("course", "weeks", "week01"):
            raise ValueError("malformed directory entry")
        return fake_tree.list(path)

    diagnostics = DiagnosticCollector()
    result = scan_scope(
        "/course/", PROJECT, None,
        lister=lister, diagnostics=diagnostics, is_directory=fake_tree.is_dir,
    )

    assert [i.web_path for i in result.items] == ["/course/index.html", "/course/weeks/overview.html"]
    found = diagnostics.of_kind(DiagnosticKind.DIRECTORY_UNLISTABLE)
    assert len(found) == 1
    assert "malformed directory entry" in found[0].message


def test_symlinked_directory_loop_is_scanned_once(tmp_path, make_qmd) -> None:
    course = tmp_path / "course"
    make_qmd(course / "index.qmd")
    make_qmd(course / "weeks" / "week01" / "lecture.qmd")
    try:
        os.symlink(str(course), str(course / "weeks" / "loop"), target_is_directory=True)
    except (OSError, NotImplementedError):
        pytest.skip("symlinks are not supported here")

    result = scan_scope("/course/", str(tmp_path), None)

    assert [i.web_path for i in result.items] == [
        "/course/index.html",
        "/course/weeks/week01/lecture.html",
    ]


def test_unreadable_metadata_is_recorded(fake_tree: FakeTree) -> None:
    def provider(path: str) -> Optional[EmbeddedMetadata]:
        if path.endswith("overview.qmd"):
            return None
        return EmbeddedMetadata(title="T")

    diagnostics = DiagnosticCollector()
    result = scan_scope(
        "/course/", PROJECT, None,
        lister=fake_tree.list,
        metadata_source=provider,
        diagnostics=diagnostics,
        is_directory=fake_tree.is_dir,
    )

    by_path = {i.web_path: i for i in result.items}
    assert by_path["/course/weeks/overview.html"].metadata == EmbeddedMetadata()
    assert by_path["/course/index.html"].metadata.title == "T"
    assert len(diagnostics.of_kind(DiagnosticKind.METADATA_UNREADABLE)) == 1


def test_page_scope_scans_parent_directory(fake_tree: FakeTree) -> None:
    root_dir, web_scope = resolve_scan_root("/course/index.html", PROJECT, fake_tree.is_dir)
    assert root_dir == _path("course")
    assert web_scope == "/course/"


def test_missing_scope_root_yields_no_items(fake_tree: FakeTree) -> None:
    diagnostics = DiagnosticCollector()
    result = scan_scope(
        "/nowhere/", PROJECT, None,
        lister=fake_tree.list, diagnostics=diagnostics, is_directory=fake_tree.is_dir,
    )
    assert result.items == []
