"""Tests for the tsconfig reader."""

from __future__ import annotations

import pytest

from elementgen.analyzers.tsconfig import load_tsconfig
from elementgen.errors import ConfigError


def _names(settings) -> list[str]:
    return sorted(path.name for path in settings.iter_source_files())


def test_default_include_covers_workspace_without_excluded_dirs(workspace) -> None:
    workspace.write(
        {
            "tsconfig.json": "{}",
            "src/card.ts": "export class Card {}\n",
            "src/view.tsx": "export class View {}\n",
            "src/types.d.ts": "export declare const x: number;\n",
            "node_modules/lib/index.ts": "export class Lib {}\n",
        }
    )
    settings = load_tsconfig(workspace.path("tsconfig.json"))
    assert _names(settings) == ["card.ts", "view.tsx"]


def test_comments_and_trailing_commas_are_accepted(workspace) -> None:
    workspace.write(
        {
            "tsconfig.json": """
            {
              // sources only
              "include": ["src/**/*.ts",],
              /* generated output */
              "compilerOptions": { "outDir": "out-tsc", },
            }
            """,
            "src/card.ts": "export class Card {}\n",
            "out-tsc/card.ts": "export class Card {}\n",
        }
    )
    settings = load_tsconfig(workspace.path("tsconfig.json"))
    assert _names(settings) == ["card.ts"]
    assert settings.out_dir == workspace.path("out-tsc")


def test_extends_inherits_file_selection(workspace) -> None:
    workspace.write(
        {
            "tsconfig.base.json": '{"include": ["lib/**/*.ts"]}',
            "tsconfig.json": '{"extends": "./tsconfig.base.json"}',
            "lib/util.ts": "export class Util {}\n",
            "src/card.ts": "export class Card {}\n",
        }
    )
    settings = load_tsconfig(workspace.path("tsconfig.json"))
    assert _names(settings) == ["util.ts"]


def test_explicit_files_come_first(workspace) -> None:
    workspace.write(
        {
            "tsconfig.json": '{"files": ["src/main.ts"], "include": ["src/lib/*.ts"]}',
            "src/main.ts": "export class Main {}\n",
            "src/lib/a.ts": "export class A {}\n",
        }
    )
    settings = load_tsconfig(workspace.path("tsconfig.json"))
    assert [path.name for path in settings.iter_source_files()] == ["main.ts", "a.ts"]


def test_circular_extends_fails(workspace) -> None:
    workspace.write(
        {
            "a.json": '{"extends": "./b.json"}',
            "b.json": '{"extends": "./a.json"}',
        }
    )
    with pytest.raises(ConfigError, match="circular"):
        load_tsconfig(workspace.path("a.json"))


def test_invalid_json_fails(workspace) -> None:
    workspace.write({"tsconfig.json": "{ not json"})
    with pytest.raises(ConfigError, match="could not be parsed"):
        load_tsconfig(workspace.path("tsconfig.json"))
