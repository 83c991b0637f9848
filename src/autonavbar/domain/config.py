from __future__ import annotations

"""
Navigation Configuration Loading.

Reads the navigation settings from a YAML project file. In a Quarto project
file ('_quarto.yml') the settings live under the 'auto-navbar' key; a
standalone file may contain the mapping directly.
"""

import logging
import os
from typing import Any, Dict

import yaml

from autonavbar.domain.errors import ConfigInvalidError

logger = logging.getLogger(__name__)

CONFIG_SECTION_KEY = "auto-navbar"
DEFAULT_CONFIG_FILES = ("_quarto.yml", "_quarto.yaml")


def load_navigation_config(path: str) -> Dict[str, Any]:
    """
    Load the raw navigation configuration from a YAML file.

    Args:
        path: Path to the YAML file.

    Returns:
        Dict[str, Any]: Raw configuration (scope key -> settings); empty if
        the file defines no navigation.

    Raises:
        ConfigInvalidError: If the file cannot be read or is not valid YAML.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigInvalidError(f"Cannot read config file '{path}': {e}") from e
    except yaml.YAMLError as e:
        raise ConfigInvalidError(f"Malformed YAML in '{path}': {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigInvalidError(
            f"Config file '{path}' must contain a mapping, found {type(data).__name__}."
        )

    if CONFIG_SECTION_KEY in data:
        section = data[CONFIG_SECTION_KEY]
        logger.debug(f"Using '{CONFIG_SECTION_KEY}' section of '{path}'")
        if section is None:
            return {}
        if not isinstance(section, dict):
            raise ConfigInvalidError(
                f"'{CONFIG_SECTION_KEY}' in '{path}' must be a mapping, "
                f"found {type(section).__name__}."
            )
        return section

    if os.path.basename(path) in DEFAULT_CONFIG_FILES:
        logger.debug(f"No '{CONFIG_SECTION_KEY}' section in '{path}'")
        return {}
    return data


def find_config_file(project_dir: str) -> str:
    """
    Locate the default project file in a directory.

    Returns:
        str: Path of the first existing candidate, or '' if none exists.
    """
    for name in DEFAULT_CONFIG_FILES:
        candidate = os.path.join(project_dir, name)
        if os.path.isfile(candidate):
            return candidate
    return ""
