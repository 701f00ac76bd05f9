"""Tests for build target parsing and workspace lookups."""

from __future__ import annotations

import pytest

from elementgen.build import BuildTargetSpec, parse_build_target, resolve_source_root
from elementgen.errors import BuildTargetError


def test_parse_project_and_target() -> None:
    spec = parse_build_target("shop:build")
    assert spec == BuildTargetSpec(project="shop", target="build")
    assert str(spec) == "shop:build"


def test_parse_with_configuration() -> None:
    spec = parse_build_target("shop:build:production")
    assert spec.configuration == "production"
    assert str(spec) == "shop:build:production"


@pytest.mark.parametrize("value", ["shop", ":build", "shop:", ""])
def test_parse_rejects_incomplete_targets(value: str) -> None:
    with pytest.raises(BuildTargetError):
        parse_build_target(value)


def test_source_root_from_angular_json(workspace) -> None:
    workspace.write_json("angular.json", {"projects": {"shop": {"sourceRoot": "projects/shop/src"}}})
    assert resolve_source_root(workspace.path(), "shop") == "projects/shop/src"


def test_source_root_defaults_to_src(workspace) -> None:
    assert resolve_source_root(workspace.path(), "shop") == "src"
    workspace.write_json("angular.json", {"projects": {"other": {}}})
    assert resolve_source_root(workspace.path(), "shop") == "src"
