"""CLI behaviour tests."""

from __future__ import annotations

import pytest

from elementgen.cli import _build_parser, main
from elementgen.logging import configure_logging


CARD_SOURCE = """
@RegisterWebComponent("app-card")
export class CardComponent {
  title = input<string>();
}
"""


def test_cli_parses_repeated_outputs() -> None:
    parser = _build_parser()
    args = parser.parse_args(["--output", "manifest", "--output", "module", "-v"])
    assert args.outputs == ["manifest", "module"]
    assert args.verbose is True


def test_cli_rejects_unknown_output() -> None:
    parser = _build_parser()
    with pytest.raises(SystemExit):
        parser.parse_args(["--output", "bundle"])


def test_cli_generates_from_config(workspace, monkeypatch, capsys) -> None:
    workspace.write({"src/card.ts": CARD_SOURCE})
    workspace.write_json("elements.json", {"elements": {"app-card": "src/card.ts#CardComponent"}})
    monkeypatch.chdir(workspace.path())

    main(["--config", "elements.json", "--out-dir", "out", "--output", "module"])

    assert workspace.path("out/custom-elements.json").is_file()
    assert workspace.path("out/custom-elements.d.ts").is_file()
    assert workspace.path("out/elements.ts").is_file()
    assert "Generated 1 element(s)" in capsys.readouterr().out


def test_cli_discovers_without_config(workspace, monkeypatch) -> None:
    workspace.write({"src/card.ts": CARD_SOURCE})
    monkeypatch.chdir(workspace.path())

    main(["--root-dir", "src"])

    manifest = workspace.path("dist/custom-elements.json").read_text(encoding="utf-8")
    assert '"tagName": "app-card"' in manifest


def test_cli_exits_non_zero_on_generator_error(workspace, monkeypatch, capsys) -> None:
    workspace.write(
        {"elements.json": '{"elements": {"my-tag": "a.ts#A", "my-tag": "b.ts#B"}}'}
    )
    monkeypatch.chdir(workspace.path())

    with pytest.raises(SystemExit) as excinfo:
        main(["-c", "elements.json"])

    assert excinfo.value.code == 1
    assert "Tag is duplicated: my-tag" in capsys.readouterr().err


def test_cli_requires_build_target_for_browser_output(workspace, monkeypatch, capsys) -> None:
    monkeypatch.chdir(workspace.path())

    with pytest.raises(SystemExit) as excinfo:
        main(["--output", "browser"])

    assert excinfo.value.code == 1
    assert "build target" in capsys.readouterr().err
    assert not workspace.path("dist").exists()


def test_cli_writes_debug_run_log(workspace, monkeypatch) -> None:
    workspace.write({"src/card.ts": CARD_SOURCE})
    monkeypatch.chdir(workspace.path())

    main(["--root-dir", "src", "--log-file", "logs/run.log"])
    configure_logging()

    log_text = workspace.path("logs/run.log").read_text(encoding="utf-8")
    assert "INFO elementgen.orchestrator: Analyzing 1 component(s)" in log_text
    assert "DEBUG elementgen.discovery: Discovered <app-card>" in log_text


def test_cli_normalizes_component_sources_in_place(workspace, monkeypatch, capsys) -> None:
    workspace.write(
        {
            "src/card.ts": '@Component({ selector: "app-card" })\nexport class CardComponent {}\n',
            "src/done.ts": (
                '@Component({ selector: "app-done", styles: [], animations: [], imports: [], schemas: [] })\n'
                "export class DoneComponent {}\n"
            ),
        }
    )
    monkeypatch.chdir(workspace.path())

    main(["--normalize", "src/card.ts", "--normalize", "src/done.ts"])

    assert workspace.path("src/card.ts").read_text(encoding="utf-8").startswith(
        '@Component({ selector: "app-card", styles: [], animations: [], imports: [], schemas: [] })'
    )
    out = capsys.readouterr().out
    assert "normalized: src/card.ts" in out
    assert "unchanged: src/done.ts" in out
    assert not workspace.path("dist").exists()


def test_cli_normalize_fails_for_missing_source(workspace, monkeypatch, capsys) -> None:
    monkeypatch.chdir(workspace.path())

    with pytest.raises(SystemExit) as excinfo:
        main(["--normalize", "src/missing.ts"])

    assert excinfo.value.code == 1
    assert "could not be read" in capsys.readouterr().err
