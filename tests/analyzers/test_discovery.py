"""Tests for discovery of classes marked for custom element registration."""

from __future__ import annotations

import pytest

from elementgen.analyzers import discover_elements
from elementgen.errors import (
    DuplicateTagError,
    MissingRegistrationTagError,
    UnnamedRegisteredComponentError,
)
from elementgen.models import NormalizedElementEntry


def test_discovers_marked_classes_in_declaration_order(workspace) -> None:
    workspace.write(
        {
            "src/a.ts": """
            @RegisterWebComponent("app-first")
            @Component({ selector: "app-first", template: "" })
            export class FirstComponent {}

            @Component({ selector: "app-plain", template: "" })
            export class PlainComponent {}

            @RegisterWebComponent({ tag: "app-second" })
            export class SecondComponent {}
            """,
            "src/b.ts": """
            @RegisterWebComponent({ selector: "app-third" })
            class ThirdComponent {}
            """,
        }
    )
    project = workspace.project("src")
    a_path = workspace.path("src/a.ts").as_posix()
    b_path = workspace.path("src/b.ts").as_posix()

    entries = discover_elements(project)

    assert entries == [
        NormalizedElementEntry(tag="app-first", component=f"{a_path}#FirstComponent"),
        NormalizedElementEntry(tag="app-second", component=f"{a_path}#SecondComponent"),
        NormalizedElementEntry(tag="app-third", component=f"{b_path}#ThirdComponent"),
    ]


def test_namespaced_marker_is_recognized(workspace) -> None:
    workspace.write(
        {
            "src/a.ts": """
            @elements.RegisterWebComponent("app-first")
            export class FirstComponent {}
            """
        }
    )
    entries = discover_elements(workspace.project("src"))
    assert [entry.tag for entry in entries] == ["app-first"]


def test_custom_marker_name(workspace) -> None:
    workspace.write(
        {
            "src/a.ts": """
            @Element("app-first")
            export class FirstComponent {}

            @RegisterWebComponent("app-ignored")
            export class IgnoredComponent {}
            """
        }
    )
    entries = discover_elements(workspace.project("src"), marker="Element")
    assert [entry.tag for entry in entries] == ["app-first"]


def test_missing_tag_fails(workspace) -> None:
    workspace.write(
        {
            "src/a.ts": """
            @RegisterWebComponent()
            @Component({ selector: "app-first", template: "" })
            export class FirstComponent {}
            """
        }
    )
    with pytest.raises(MissingRegistrationTagError, match="FirstComponent"):
        discover_elements(workspace.project("src"))


def test_selector_fallback_borrows_component_selector(workspace) -> None:
    workspace.write(
        {
            "src/a.ts": """
            @RegisterWebComponent()
            @Component({ selector: "app-first", template: "" })
            export class FirstComponent {}
            """
        }
    )
    entries = discover_elements(workspace.project("src"), selector_fallback=True)
    assert [entry.tag for entry in entries] == ["app-first"]


def test_anonymous_marked_class_fails(workspace) -> None:
    workspace.write(
        {
            "src/a.ts": """
            @RegisterWebComponent("app-anon")
            export default class {}
            """
        }
    )
    with pytest.raises(UnnamedRegisteredComponentError):
        discover_elements(workspace.project("src"))


def test_duplicate_discovered_tag_fails(workspace) -> None:
    workspace.write(
        {
            "src/a.ts": """
            @RegisterWebComponent("app-card")
            export class FirstCard {}
            """,
            "src/b.ts": """
            @RegisterWebComponent("app-card")
            export class SecondCard {}
            """,
        }
    )
    with pytest.raises(DuplicateTagError) as excinfo:
        discover_elements(workspace.project("src"))

    assert excinfo.value.tag == "app-card"
    assert "FirstCard" in str(excinfo.value)
    assert "SecondCard" in str(excinfo.value)


def test_no_marked_classes_yields_empty_list(workspace) -> None:
    workspace.write({"src/a.ts": "export class Plain {}\n"})
    assert discover_elements(workspace.project("src")) == []
