"""Tests for generator config loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from elementgen.config import DEFAULT_OUT_DIR, GeneratorConfig, load_config
from elementgen.errors import ConfigError


def test_load_json_config(workspace) -> None:
    path = workspace.write_json(
        "elements.config.json",
        {
            "elements": {"app-card": "src/card.ts#CardComponent"},
            "tsconfig": "tsconfig.app.json",
            "outDir": "dist/elements",
            "elementOutputs": ["manifest", "module"],
            "importExtension": "js",
            "inlineComponents": True,
            "discovery": {"marker": "Element", "selectorFallback": True},
        },
    )

    config = load_config(path)

    assert config.root == workspace.path()
    assert config.elements == {"app-card": "src/card.ts#CardComponent"}
    assert config.tsconfig == workspace.path("tsconfig.app.json")
    assert config.resolved_out_dir == workspace.path("dist/elements")
    assert config.element_outputs == ["manifest", "module"]
    assert config.import_extension == "js"
    assert config.inline_components is True
    assert config.discovery.marker == "Element"
    assert config.discovery.selector_fallback is True
    assert config.build.target is None


def test_load_yaml_config_with_build_settings(workspace) -> None:
    workspace.write(
        {
            "elements.yaml": """
            elements:
              - tag: app-card
                component: src/card.ts#CardComponent
            elementOutputs: browser
            buildTarget:
              project: shop
              target: build
              configuration: production
            sourceMap: true
            outputHashing: none
            outputFileName: elements.js
            buildTargetOptions:
              optimization: false
            browserEntryDir: src/generated
            """
        }
    )

    config = load_config(workspace.path("elements.yaml"))

    assert config.elements == [{"tag": "app-card", "component": "src/card.ts#CardComponent"}]
    assert config.element_outputs == ["browser"]
    assert config.build.target == "shop:build:production"
    assert config.build.source_map is True
    assert config.build.output_hashing == "none"
    assert config.build.output_file_name == "elements.js"
    assert config.build.options == {"optimization": False}
    assert config.build.entry_dir == workspace.path("src/generated")
    assert config.inline_components is None


def test_defaults_without_optional_keys(workspace) -> None:
    path = workspace.write_json("elements.json", {})
    config = load_config(path)

    assert config.elements is None
    assert config.element_outputs == ["manifest"]
    assert config.resolved_out_dir == workspace.path(DEFAULT_OUT_DIR)
    assert config.discovery.marker == "RegisterWebComponent"
    assert config.discovery.selector_fallback is False


def test_duplicate_tags_in_json_mapping_are_preserved(workspace) -> None:
    workspace.write(
        {"elements.json": '{"elements": {"my-tag": "a.ts#A", "my-tag": "b.ts#B"}}'}
    )
    config = load_config(workspace.path("elements.json"))
    assert config.elements == [("my-tag", "a.ts#A"), ("my-tag", "b.ts#B")]


def test_duplicate_tags_in_yaml_mapping_are_preserved(workspace) -> None:
    workspace.write(
        {
            "elements.yml": """
            elements:
              my-tag: a.ts#A
              my-tag: b.ts#B
            """
        }
    )
    config = load_config(workspace.path("elements.yml"))
    assert config.elements == [("my-tag", "a.ts#A"), ("my-tag", "b.ts#B")]


@pytest.mark.parametrize(
    ("filename", "content", "message"),
    [
        ("elements.json", "{ not json", "Registry could not be parsed"),
        ("elements.yaml", "elements:\n  ? [a, b]\n  : x.ts#X\n", "Registry could not be parsed"),
        ("elements.yaml", "elements: [unclosed", "Registry could not be parsed"),
        ("elements.json", "[1, 2]", "mapping at the root"),
        ("elements.json", '{"elements": "app-card"}', "'elements' must be"),
        ("elements.toml", "elements = 1", "unsupported config format"),
        ("elements.json", '{"buildTarget": {"project": "shop"}}', "buildTarget needs both"),
    ],
)
def test_invalid_configs_raise_config_error(workspace, filename: str, content: str, message: str) -> None:
    workspace.write({filename: content})
    with pytest.raises(ConfigError, match=message):
        load_config(workspace.path(filename))


def test_missing_config_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="does not exist"):
        load_config(tmp_path / "missing.json")


def test_resolve_relative_to_root(tmp_path: Path) -> None:
    config = GeneratorConfig(root=tmp_path)
    assert config.resolve("src") == tmp_path.resolve() / "src"
    assert config.resolve(None) is None
