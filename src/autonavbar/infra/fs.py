from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Provides the default directory lister used by the scanner and the conversions
between filesystem paths and normalized site (web) paths. Web paths always use
forward slashes, carry a leading slash, and name rendered pages ('.html').
"""

import os
import re
from typing import List, Optional

from autonavbar.domain.nav_models import (
    RENDERED_EXTENSION,
    SOURCE_EXTENSION,
    DirectoryEntry,
)

_MULTI_SLASH_RX = re.compile(r"/{2,}")

# -----------------------------------------------------------------------------
# PATH RESOLUTION API
# -----------------------------------------------------------------------------

def normalize_path(path: Optional[str], fallback: str) -> str:
    """
    Normalize a directory path string into an absolute filesystem path.

    Handles environment variable expansion ($VAR/%VAR%) and user home
    shortcuts (~/). Reverts to fallback if the input is empty.

    Args:
        path: Raw input path string.
        fallback: Default path to use if the input is empty.

    Returns:
        str: Normalized absolute path.
    """
    p = (path or "").strip()
    if not p:
        p = fallback
    p = os.path.expandvars(os.path.expanduser(p))
    return os.path.abspath(p)


def normalize_href(href: Optional[str]) -> str:
    """
    Normalize a web path for comparison and output.

    Collapses repeated slashes, guarantees a leading slash and drops the
    trailing slash of page paths ('.html').

    Args:
        href: Raw web path.

    Returns:
        str: Normalized web path ('/' for empty input).
    """
    if not href:
        return "/"
    s = _MULTI_SLASH_RX.sub("/", str(href).replace("\\", "/"))
    if not s.startswith("/"):
        s = "/" + s
    if re.search(r"\.html/*$", s):
        s = s.rstrip("/")
    return s


def web_path_to_fs_path(web_path: str) -> str:
    """
    Convert a site path into a filesystem path relative to the project root.

    Args:
        web_path: Web path such as '/2024/autumn-term/'.

    Returns:
        str: Relative, OS-normalized path ('.' for the site root).
    """
    clean = _MULTI_SLASH_RX.sub("/", web_path.replace("\\", "/")).strip("/")
    if not clean:
        return os.curdir
    return os.path.normpath(clean.replace("/", os.sep))


def extract_web_path(fs_path: str, project_dir: str) -> str:
    """
    Compute the site path of a document or directory inside the project.

    Files map to their rendered page ('.qmd' -> '.html'); directories keep a
    trailing slash. Paths that do not exist lose their extension and are
    treated as directories.

    Args:
        fs_path: Filesystem path of the page (absolute or relative to cwd).
        project_dir: Project root directory.

    Returns:
        str: Normalized web path.
    """
    abs_path = os.path.abspath(fs_path)
    relative = os.path.relpath(abs_path, os.path.abspath(project_dir))
    web_relative = relative.replace(os.sep, "/")
    if web_relative == ".":
        return "/"

    if os.path.isfile(abs_path):
        stem, _ = os.path.splitext(web_relative)
        if not stem:
            return "/"
        return normalize_href("/" + stem + RENDERED_EXTENSION)

    if os.path.isdir(abs_path):
        return normalize_href("/" + web_relative + "/")

    stem, _ = os.path.splitext(web_relative)
    return normalize_href("/" + stem + "/")


def to_rendered_path(path: str) -> str:
    """Swap a trailing source extension for the rendered one."""
    if path.endswith(SOURCE_EXTENSION):
        return path[: -len(SOURCE_EXTENSION)] + RENDERED_EXTENSION
    return path


def to_source_path(path: str) -> str:
    """Swap a trailing rendered extension for the source one."""
    if path.endswith(RENDERED_EXTENSION):
        return path[: -len(RENDERED_EXTENSION)] + SOURCE_EXTENSION
    return path

# -----------------------------------------------------------------------------
# DIRECTORY LISTING API
# -----------------------------------------------------------------------------

def list_directory(path: str) -> List[DirectoryEntry]:
    """
    List the entries of a directory.

    Symlinks are followed. Entries that are neither regular files nor
    directories are reported with both flags cleared.

    Args:
        path: Directory to list.

    Returns:
        List[DirectoryEntry]: Entries in name order.

    Raises:
        OSError: If the directory cannot be listed.
    """
    entries: List[DirectoryEntry] = []
    with os.scandir(path) as it:
        for entry in it:
            try:
                is_dir = entry.is_dir()
                is_file = entry.is_file()
            except OSError:
                is_dir = is_file = False
            entries.append(DirectoryEntry(name=entry.name, is_directory=is_dir, is_file=is_file))
    entries.sort(key=lambda e: e.name)
    return entries
