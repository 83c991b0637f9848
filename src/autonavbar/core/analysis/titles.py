from __future__ import annotations

"""
Name-to-Title Conversion.

Turns raw file and directory names into readable navigation titles when no
explicit title is available. The generic rule handles snake_case, kebab-case,
camelCase and trailing numerals ('week01-lecture' -> 'Week 01 Lecture'); a
file-only rule keeps short week codes compact ('w01-practice' -> 'W01 Practice').
"""

import os
import re

from autonavbar.domain.nav_models import SOURCE_EXTENSION

# -----------------------------------------------------------------------------
# REGEX CONSTANTS
# -----------------------------------------------------------------------------

_WEEK_CODE_RX = re.compile(r"^w(\d+)-?(.*)$", re.DOTALL)
_SEPARATOR_RX = re.compile(r"[_-]")
_WHITESPACE_RX = re.compile(r"\s+")
_WORD_START_RX = re.compile(r"(^| )([^\W\d_])")

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def convert_name_to_title(name: str, is_file: bool = False) -> str:
    """
    Smart conversion of a raw name into a display title.

    Args:
        name: File name (extension allowed) or directory name.
        is_file: Enables the file-only week code rule.

    Returns:
        str: Converted title; empty if nothing readable remains.
    """
    stem = strip_source_extension(name) if is_file else name

    if is_file:
        match = _WEEK_CODE_RX.match(stem)
        if match:
            digits, rest = match.groups()
            return f"W{digits} {title_case(rest)}".rstrip()

    title = _SEPARATOR_RX.sub(" ", stem)
    return title_case(split_word_boundaries(title))


def title_case(text: str) -> str:
    """
    Collapse whitespace and upper-case the first letter of every word.

    Separators ('_', '-') count as spaces. Letters that are already upper-case
    and the rest of each word are left untouched.
    """
    text = _SEPARATOR_RX.sub(" ", text)
    text = _WHITESPACE_RX.sub(" ", text).strip()
    return _WORD_START_RX.sub(lambda m: m.group(1) + m.group(2).upper(), text)


def split_word_boundaries(text: str) -> str:
    """
    Insert a space at camelCase and letter/number boundaries.

    Case and digit tests use the Unicode character properties, so
    'überNotes2' becomes 'über Notes 2'.
    """
    out = []
    prev = ""
    for ch in text:
        if prev and (
                (ch.isupper() and (prev.islower() or prev.isdecimal()))
                or (ch.isdecimal() and prev.isalpha())
        ):
            out.append(" ")
        out.append(ch)
        prev = ch
    return "".join(out)


def clean_name(name: str) -> str:
    """
    Last-resort title: drop the extension, turn separators into spaces and
    capitalize the first letter.
    """
    stem, _ = os.path.splitext(name)
    cleaned = _SEPARATOR_RX.sub(" ", stem or name).strip()
    if not cleaned:
        return name
    return cleaned[0].upper() + cleaned[1:]


def strip_source_extension(name: str) -> str:
    if name.endswith(SOURCE_EXTENSION):
        return name[: -len(SOURCE_EXTENSION)]
    return name
