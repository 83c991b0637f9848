from __future__ import annotations

"""
Configuration Validation Service.

Acts as the gatekeeper between raw navigation configuration (parsed YAML) and
the resolution pipeline. Loosely typed values (numeric strings, 'true'/'false'
strings) are coerced exactly once here into the frozen domain models, so no
later stage has to inspect raw configuration values.

A scope whose configuration is malformed is disabled rather than dropped: it
still claims the pages below it, which then render without generated
navigation.
"""

import logging
from typing import Any, Dict, List, Optional, Set, Tuple

from autonavbar.domain.errors import ConfigInvalidError
from autonavbar.domain.nav_models import (
    NavigationConfig,
    ScopeConfig,
    SpecialMapping,
    coerce_order,
)
from autonavbar.infra.frontmatter import stringify

logger = logging.getLogger(__name__)

LOG_LEVEL_KEY = "_logLevel"
VALID_LOG_LEVELS = ("error", "warning", "info", "debug", "trace")
DEFAULT_LOG_LEVEL = "info"

_SCOPE_FIELDS = ("levels", "exclude", "special-mappings")
_MAPPING_FIELDS = ("path", "title", "order", "collapsed")


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def validate_config(
        config: Any,
        *,
        strict: bool = False,
) -> Tuple[NavigationConfig, List[str]]:
    """
    Validate and normalize a raw navigation configuration mapping.

    Args:
        config: Raw configuration (scope key -> scope settings).
        strict: If True, raise ConfigInvalidError on the first problem instead
                of disabling the offending scope.

    Returns:
        Tuple[NavigationConfig, List[str]]: The normalized configuration and a
                                            list of warnings.

    Raises:
        ConfigInvalidError: Only in strict mode.
    """
    warnings: List[str] = []

    # 1. Base Type Validation
    if not isinstance(config, dict):
        msg = f"Invalid config type: expected mapping, received {type(config).__name__}."
        if strict:
            raise ConfigInvalidError(msg)
        warnings.append(f"{msg} Navigation disabled.")
        logger.warning(msg)
        return NavigationConfig(), warnings

    scopes: Dict[str, ScopeConfig] = {}
    disabled: Set[str] = set()
    log_level: Optional[str] = None

    # 2. Per-scope normalization
    for key, value in config.items():
        if key == LOG_LEVEL_KEY:
            log_level = _as_log_level(value, warnings, strict)
            continue

        if not isinstance(key, str) or not key.strip():
            msg = f"Invalid scope key {key!r}: expected a non-empty string."
            if strict:
                raise ConfigInvalidError(msg)
            warnings.append(f"{msg} Entry ignored.")
            continue

        scope_key = key.strip()
        try:
            scopes[scope_key] = parse_scope(scope_key, value, warnings)
        except ConfigInvalidError as e:
            if strict:
                raise
            warnings.append(f"{e} Scope '{scope_key}' disabled.")
            disabled.add(scope_key)

    return NavigationConfig(
        scopes=scopes,
        disabled_scopes=frozenset(disabled),
        log_level=log_level,
    ), warnings


def parse_scope(key: str, value: Any, warnings: List[str]) -> ScopeConfig:
    """
    Normalize the settings block of a single scope.

    Args:
        key: Scope key.
        value: Raw settings (mapping, or None for an all-defaults scope).
        warnings: Accumulator for non-fatal notices.

    Returns:
        ScopeConfig: Normalized scope.

    Raises:
        ConfigInvalidError: If any field is malformed.
    """
    if value is None:
        value = {}
    if not isinstance(value, dict):
        raise ConfigInvalidError(
            f"Scope '{key}': settings must be a mapping, received {type(value).__name__}.",
            scope_key=key,
        )

    for field in value:
        if field not in _SCOPE_FIELDS:
            warnings.append(f"Scope '{key}': unknown field '{field}' ignored.")

    return ScopeConfig(
        key=key,
        levels=_as_levels(value.get("levels"), key),
        exclusions=_as_patterns(value.get("exclude"), key),
        special_mappings=_as_mappings(value.get("special-mappings"), key, warnings),
    )


# -----------------------------------------------------------------------------
# PRIVATE HELPERS: FIELD COERCION
# -----------------------------------------------------------------------------

def _as_log_level(value: Any, warnings: List[str], strict: bool) -> str:
    """Validate the run log level flag."""
    level = stringify(value)
    if level and level.lower() in VALID_LOG_LEVELS:
        return level.lower()

    msg = f"Invalid {LOG_LEVEL_KEY} {value!r}: expected one of {', '.join(VALID_LOG_LEVELS)}."
    if strict:
        raise ConfigInvalidError(msg)
    warnings.append(f"{msg} Using '{DEFAULT_LOG_LEVEL}'.")
    return DEFAULT_LOG_LEVEL


def _as_levels(value: Any, key: str) -> Optional[int]:
    """Coerce 'levels' into a positive integer (None means unbounded)."""
    if value is None:
        return None

    number: Optional[float] = None
    if not isinstance(value, bool):
        number = coerce_order(value)

    if number is None or number != int(number) or number < 1:
        raise ConfigInvalidError(
            f"Scope '{key}': levels must be a positive integer, received {value!r}.",
            scope_key=key,
        )
    return int(number)


def _as_patterns(value: Any, key: str) -> Tuple[str, ...]:
    """Coerce 'exclude' into a tuple of non-empty pattern strings."""
    if value is None:
        return ()
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        raise ConfigInvalidError(
            f"Scope '{key}': exclude must be a list, received {type(value).__name__}.",
            scope_key=key,
        )

    out: List[str] = []
    for i, item in enumerate(value):
        if isinstance(item, (dict, list, bool)) or item is None:
            raise ConfigInvalidError(
                f"Scope '{key}': exclude[{i}] must be a string.", scope_key=key
            )
        pattern = str(item).strip()
        if pattern:
            out.append(pattern)
    return tuple(out)


def _as_mappings(value: Any, key: str, warnings: List[str]) -> Tuple[SpecialMapping, ...]:
    """Coerce 'special-mappings' into SpecialMapping objects."""
    if value is None:
        return ()
    if not isinstance(value, list):
        raise ConfigInvalidError(
            f"Scope '{key}': special-mappings must be a list, received {type(value).__name__}.",
            scope_key=key,
        )

    mappings: List[SpecialMapping] = []
    seen: Set[str] = set()
    for i, raw in enumerate(value):
        mapping = _as_mapping(raw, i, key, warnings)
        if mapping.path in seen:
            warnings.append(
                f"Scope '{key}': duplicate special mapping for '{mapping.path}' ignored."
            )
            continue
        seen.add(mapping.path)
        mappings.append(mapping)
    return tuple(mappings)


def _as_mapping(raw: Any, index: int, key: str, warnings: List[str]) -> SpecialMapping:
    """Validate one special mapping entry."""
    where = f"Scope '{key}': special-mappings[{index}]"
    if not isinstance(raw, dict):
        raise ConfigInvalidError(f"{where} must be a mapping.", scope_key=key)

    for field in raw:
        if field not in _MAPPING_FIELDS:
            warnings.append(f"{where}: unknown field '{field}' ignored.")

    path = raw.get("path")
    if not isinstance(path, str) or not path.strip():
        raise ConfigInvalidError(f"{where} is missing a valid 'path'.", scope_key=key)

    title = raw.get("title")
    if isinstance(title, (dict, list)):
        raise ConfigInvalidError(f"{where}: 'title' must be a string.", scope_key=key)

    order = None
    if raw.get("order") is not None:
        order = None if isinstance(raw["order"], bool) else coerce_order(raw["order"])
        if order is None:
            raise ConfigInvalidError(
                f"{where}: 'order' must be a finite number, received {raw['order']!r}.",
                scope_key=key,
            )

    return SpecialMapping(
        path=path.strip(),
        title=stringify(title),
        order=order,
        collapsed=_as_collapsed(raw.get("collapsed"), where, key),
    )


def _as_collapsed(value: Any, where: str, key: str) -> Optional[bool]:
    """Accept booleans and the literal strings 'true'/'false'."""
    if value is None or isinstance(value, bool):
        return value
    if isinstance(value, str):
        s = value.strip().lower()
        if s == "true":
            return True
        if s == "false":
            return False
    raise ConfigInvalidError(
        f"{where}: 'collapsed' must be true or false, received {value!r}.", scope_key=key
    )
