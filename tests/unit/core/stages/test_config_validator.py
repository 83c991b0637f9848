from __future__ import annotations

"""
Unit tests for the Configuration Validation Service.

Verifies that raw YAML-shaped configuration is normalized into frozen domain
models, that loosely typed values are coerced once, and that malformed scopes
are disabled (or rejected in strict mode).
"""

import pytest

from autonavbar.core.pipeline.stages.validator import (
    DEFAULT_LOG_LEVEL,
    parse_scope,
    validate_config,
)
from autonavbar.domain.errors import ConfigInvalidError
from autonavbar.domain.nav_models import SpecialMapping


def test_validate_config_happy_path() -> None:
    raw = {
        "_logLevel": "DEBUG",
        "/2024/autumn-term/": {
            "levels": "2",
            "exclude": ["*draft*", "/private/"],
            "special-mappings": [
                {"path": "/index.qmd", "title": "Home", "order": "1"},
                {"path": "/weeks/", "collapsed": "true"},
            ],
        },
    }
    cfg, warnings = validate_config(raw)

    assert warnings == []
    assert cfg.log_level == "debug"
    assert cfg.disabled_scopes == frozenset()

    scope = cfg.scopes["/2024/autumn-term/"]
    assert scope.levels == 2
    assert scope.exclusions == ("*draft*", "/private/")
    assert scope.special_mappings == (
        SpecialMapping(path="/index.qmd", title="Home", order=1),
        SpecialMapping(path="/weeks/", collapsed=True),
    )


def test_none_scope_uses_defaults() -> None:
    cfg, warnings = validate_config({"/docs/": None})
    scope = cfg.scopes["/docs/"]
    assert scope.levels is None
    assert scope.exclusions == ()
    assert scope.special_mappings == ()
    assert warnings == []


@pytest.mark.parametrize("levels", [0, -1, "abc", 1.5, True, [1]])
def test_invalid_levels_disable_scope(levels) -> None:
    cfg, warnings = validate_config({"/a/": {"levels": levels}, "/b/": {"levels": 1}})

    assert "/a/" in cfg.disabled_scopes
    assert "/a/" not in cfg.scopes
    assert "/b/" in cfg.scopes
    assert any("levels must be a positive integer" in w for w in warnings)


def test_invalid_mapping_disables_scope() -> None:
    raw = {"/a/": {"special-mappings": [{"title": "No path"}]}}
    cfg, warnings = validate_config(raw)
    assert cfg.disabled_scopes == frozenset({"/a/"})
    assert any("missing a valid 'path'" in w for w in warnings)


@pytest.mark.parametrize("mapping, fragment", [
    ({"path": "/x.qmd", "order": "first"}, "'order' must be a finite number"),
    ({"path": "/x.qmd", "order": True}, "'order' must be a finite number"),
    ({"path": "/x/", "collapsed": "maybe"}, "'collapsed' must be true or false"),
    ({"path": "/x.qmd", "title": 42}, None),
    ({"path": "/x.qmd", "title": {"nested": True}}, "'title' must be a string"),
])
def test_mapping_field_validation(mapping, fragment) -> None:
    cfg, warnings = validate_config({"/a/": {"special-mappings": [mapping]}})
    if fragment is None:
        assert "/a/" in cfg.scopes
    else:
        assert "/a/" in cfg.disabled_scopes
        assert any(fragment in w for w in warnings)


def test_exclude_accepts_single_string_and_rejects_mappings() -> None:
    cfg, _ = validate_config({"/a/": {"exclude": "*draft*"}})
    assert cfg.scopes["/a/"].exclusions == ("*draft*",)

    cfg, warnings = validate_config({"/a/": {"exclude": [{"glob": "*"}]}})
    assert "/a/" in cfg.disabled_scopes


def test_duplicate_mappings_and_unknown_fields_warn() -> None:
    raw = {
        "/a/": {
            "colour": "red",
            "special-mappings": [
                {"path": "/x.qmd", "title": "First", "icon": "star"},
                {"path": "/x.qmd", "title": "Second"},
            ],
        }
    }
    cfg, warnings = validate_config(raw)

    mappings = cfg.scopes["/a/"].special_mappings
    assert len(mappings) == 1 and mappings[0].title == "First"
    assert any("unknown field 'colour'" in w for w in warnings)
    assert any("unknown field 'icon'" in w for w in warnings)
    assert any("duplicate special mapping" in w for w in warnings)


def test_invalid_log_level_falls_back() -> None:
    cfg, warnings = validate_config({"_logLevel": "loud"})
    assert cfg.log_level == DEFAULT_LOG_LEVEL
    assert warnings


def test_non_mapping_config() -> None:
    cfg, warnings = validate_config(["not", "a", "dict"])
    assert cfg.scopes == {}
    assert warnings

    with pytest.raises(ConfigInvalidError):
        validate_config("nope", strict=True)


def test_strict_mode_raises_with_scope_key() -> None:
    with pytest.raises(ConfigInvalidError) as exc:
        validate_config({"/a/": {"levels": 0}}, strict=True)
    assert exc.value.scope_key == "/a/"


def test_parse_scope_rejects_non_mapping() -> None:
    with pytest.raises(ConfigInvalidError, match="settings must be a mapping"):
        parse_scope("/a/", ["levels", 2], [])
