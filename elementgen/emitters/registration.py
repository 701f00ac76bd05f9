"""Registration source emitter for custom element entry modules."""

from __future__ import annotations

import json
import os
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Sequence

from jinja2 import Environment, FileSystemLoader

from ..errors import UnsupportedOutputKindError
from ..models import ComponentMetadata

BROWSER_MODE = "browser"
MODULE_MODE = "module"
READY_GLOBAL = "ngElementsReady"

_TEMPLATE_NAME = "registration.ts.j2"
_SOURCE_EXTENSION = re.compile(r"\.[^/.]+$")


@dataclass
class ComponentImport:
    """How one component is imported and listed in ``elementDefinitions``."""

    definition: str
    import_lines: List[str] = field(default_factory=list)


class ImportStrategy(ABC):
    """Materializes component references into import expressions."""

    #: Statements inside the registration loop that bind ``component``.
    resolve_lines: Sequence[str] = ()

    @abstractmethod
    def materialize(self, index: int, component: ComponentMetadata, specifier: str) -> ComponentImport:
        """Return the import statements and definition entry for one component."""


class InlineImportStrategy(ImportStrategy):
    """Static imports so the bundler emits a single file."""

    resolve_lines = ('const component = def.component as import("@angular/core").Type<unknown>;',)

    def materialize(self, index: int, component: ComponentMetadata, specifier: str) -> ComponentImport:
        var_name = f"Component{index}"
        return ComponentImport(
            definition=f"{{ tag: {_ts_string(component.tag)}, component: {var_name} }}",
            import_lines=[
                f"import * as {var_name}Module from {_ts_string(specifier)};",
                f"const {var_name} = ({var_name}Module as Record<string, unknown>)"
                f"[{_ts_string(component.class_name)}];",
            ],
        )


class LazyImportStrategy(ImportStrategy):
    """One dynamic-import loader per component, resolved at registration time."""

    resolve_lines = (
        "const module = await def.load();",
        "const component = module[def.className] ?? module.default;",
        "if (!component) {",
        "  throw new Error(`RegisterWebComponent: ${def.className} not found in module for ${def.tag}`);",
        "}",
    )

    def materialize(self, index: int, component: ComponentMetadata, specifier: str) -> ComponentImport:
        loader_name = f"loadComponent{index}"
        return ComponentImport(
            definition=(
                f"{{ tag: {_ts_string(component.tag)}, "
                f"className: {_ts_string(component.class_name)}, load: {loader_name} }}"
            ),
            import_lines=[f"const {loader_name} = () => import({_ts_string(specifier)});"],
        )


def to_module_specifier(
    file_path: str | Path, out_dir: str | Path, import_extension: str | None = None
) -> str:
    """Return the import path of ``file_path`` as seen from ``out_dir``."""
    relative = os.path.relpath(os.fspath(file_path), os.fspath(out_dir))
    relative = relative.replace(os.sep, "/")
    relative = _SOURCE_EXTENSION.sub("", relative)
    if import_extension:
        relative = f"{relative}.{import_extension.lstrip('.')}"
    if not relative.startswith("."):
        return f"./{relative}"
    return relative


def emit_elements_registration(
    components: Sequence[ComponentMetadata],
    *,
    mode: str,
    out_dir: str | Path,
    import_extension: str | None = None,
    inline_components: bool = False,
) -> str:
    """Render the module that registers every component as a custom element.

    ``browser`` mode also runs the registration on load and publishes the
    resulting promise as ``window.ngElementsReady``.
    """
    if mode not in {BROWSER_MODE, MODULE_MODE}:
        raise UnsupportedOutputKindError(f"Unsupported registration mode: {mode}")
    strategy: ImportStrategy = InlineImportStrategy() if inline_components else LazyImportStrategy()

    import_lines: List[str] = []
    definitions: List[str] = []
    for index, component in enumerate(components):
        specifier = to_module_specifier(component.file_path, out_dir, import_extension)
        materialized = strategy.materialize(index, component, specifier)
        import_lines.extend(materialized.import_lines)
        definitions.append(materialized.definition)

    template = _environment().get_template(_TEMPLATE_NAME)
    return template.render(
        import_lines=import_lines,
        definitions=definitions,
        resolve_lines=strategy.resolve_lines,
        self_register=mode == BROWSER_MODE,
        ready_global=READY_GLOBAL,
    )


def _environment() -> Environment:
    loader = FileSystemLoader(str(Path(__file__).with_name("templates")))
    env = Environment(loader=loader, autoescape=False, trim_blocks=True, lstrip_blocks=True)
    env.filters["ts_string"] = _ts_string
    return env


def _ts_string(value: str) -> str:
    return json.dumps(value)


__all__ = [
    "BROWSER_MODE",
    "InlineImportStrategy",
    "ImportStrategy",
    "LazyImportStrategy",
    "MODULE_MODE",
    "READY_GLOBAL",
    "emit_elements_registration",
    "to_module_specifier",
]
