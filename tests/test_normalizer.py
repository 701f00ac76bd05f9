"""Tests for JIT default insertion into @Component metadata."""

from __future__ import annotations

import textwrap

from elementgen.normalizer import normalize_component_source


def _source(text: str) -> str:
    return textwrap.dedent(text).lstrip("\n")


def test_adds_missing_defaults_to_multiline_metadata() -> None:
    source = _source(
        """
        @Component({
          selector: "app-card",
          template: "<p>card</p>"
        })
        export class CardComponent {}
        """
    )

    assert normalize_component_source(source) == _source(
        """
        @Component({
          selector: "app-card",
          template: "<p>card</p>",
          styles: [],
          animations: [],
          imports: [],
          schemas: []
        })
        export class CardComponent {}
        """
    )


def test_keeps_existing_properties_and_trailing_comma() -> None:
    source = _source(
        """
        @Component({
          selector: "app-card",
          styles: [":host { display: block; }"],
          imports: [CommonModule],
        })
        export class CardComponent {}
        """
    )

    assert normalize_component_source(source) == _source(
        """
        @Component({
          selector: "app-card",
          styles: [":host { display: block; }"],
          imports: [CommonModule],
          animations: [],
          schemas: [],
        })
        export class CardComponent {}
        """
    )


def test_single_line_metadata() -> None:
    source = '@Component({ selector: "app-card" })\nexport class CardComponent {}\n'
    assert normalize_component_source(source) == (
        '@Component({ selector: "app-card", styles: [], animations: [], imports: [], schemas: [] })\n'
        "export class CardComponent {}\n"
    )


def test_empty_metadata_object() -> None:
    source = "@Component({})\nclass CardComponent {}\n"
    assert normalize_component_source(source) == (
        "@Component({ styles: [], animations: [], imports: [], schemas: [] })\nclass CardComponent {}\n"
    )


def test_complete_or_unrelated_sources_are_unchanged() -> None:
    complete = _source(
        """
        @Component({ selector: "a", styles: [], animations: [], imports: [], schemas: [] })
        export class A {}

        @Injectable({ providedIn: "root" })
        export class Service {}

        @Component(metadata)
        export class B {}

        export class Plain {}
        """
    )
    assert normalize_component_source(complete) == complete


def test_every_component_in_a_file_is_normalized() -> None:
    source = _source(
        """
        @Component({ selector: "a", styles: [], animations: [], imports: [] })
        export class A {}

        @Component({ selector: "b", schemas: [], animations: [], imports: [], styles: [] })
        export class B {}

        @Component({ selector: "c", styles: [], animations: [], schemas: [] })
        export class C {}
        """
    )
    result = normalize_component_source(source)

    assert '@Component({ selector: "a", styles: [], animations: [], imports: [], schemas: [] })' in result
    assert '@Component({ selector: "b", schemas: [], animations: [], imports: [], styles: [] })' in result
    assert '@Component({ selector: "c", styles: [], animations: [], schemas: [], imports: [] })' in result
