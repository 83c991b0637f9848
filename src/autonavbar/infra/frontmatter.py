from __future__ import annotations

"""
Front-Matter Metadata Provider.

Reads the YAML header of a content document and extracts the fields that
drive navigation ('title', 'title-nav', 'order-nav'). The provider never
raises: unreadable or unparseable documents yield None.
"""

import logging
from typing import Any, Dict, List, Optional

import yaml

from autonavbar.domain.nav_models import EmbeddedMetadata

logger = logging.getLogger(__name__)

_OPEN_FENCE = "---"
_CLOSE_FENCES = ("---", "...")

TITLE_KEY = "title"
NAV_TITLE_KEY = "title-nav"
NAV_ORDER_KEY = "order-nav"

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def read_front_matter(path: str) -> Optional[EmbeddedMetadata]:
    """
    Extract navigation metadata from a document's YAML front matter.

    Args:
        path: Absolute path to the document.

    Returns:
        Optional[EmbeddedMetadata]: Parsed metadata (empty if the document has
        no front matter), or None if the file cannot be read or parsed.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            content = f.read()
    except (OSError, UnicodeDecodeError) as e:
        logger.debug(f"Unable to read '{path}': {e}")
        return None

    header = extract_front_matter_block(content)
    if header is None:
        return EmbeddedMetadata()

    try:
        data = yaml.safe_load(header)
    except yaml.YAMLError as e:
        logger.debug(f"Malformed front matter in '{path}': {e}")
        return None

    if data is None:
        return EmbeddedMetadata()
    if not isinstance(data, dict):
        logger.debug(f"Front matter in '{path}' is not a mapping.")
        return None

    return metadata_from_mapping(data)


def metadata_from_mapping(data: Dict[str, Any]) -> EmbeddedMetadata:
    """Build EmbeddedMetadata from an already parsed front-matter mapping."""
    return EmbeddedMetadata(
        title=stringify(data.get(TITLE_KEY)),
        nav_title=stringify(data.get(NAV_TITLE_KEY)),
        nav_order=stringify(data.get(NAV_ORDER_KEY)),
    )


def extract_front_matter_block(content: str) -> Optional[str]:
    """
    Return the raw YAML between the opening and closing fences.

    Args:
        content: Full document text.

    Returns:
        Optional[str]: YAML text, or None if the document has no front matter.
    """
    lines = content.lstrip("\ufeff").splitlines()
    if not lines or lines[0].rstrip() != _OPEN_FENCE:
        return None

    body: List[str] = []
    for line in lines[1:]:
        if line.rstrip() in _CLOSE_FENCES:
            return "\n".join(body)
        body.append(line)

    # Unterminated header
    return None


def stringify(value: Any) -> Optional[str]:
    """
    Flatten a YAML scalar or list into a plain string.

    Empty results are reported as None so that blank fields count as absent.
    """
    if value is None or isinstance(value, dict):
        return None
    if isinstance(value, bool):
        text = "true" if value else "false"
    elif isinstance(value, (list, tuple)):
        parts = [stringify(v) for v in value]
        text = " ".join(p for p in parts if p)
    else:
        text = str(value)
    text = text.strip()
    return text or None
