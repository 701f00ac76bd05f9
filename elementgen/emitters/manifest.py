"""Custom elements manifest (``custom-elements.json``) emitter."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Sequence

from ..models import ComponentMetadata, ReactiveMember

SCHEMA_VERSION = "1.0.0"


def emit_custom_elements_manifest(
    components: Sequence[ComponentMetadata], *, root: Path | None = None
) -> Dict[str, Any]:
    """Describe each component's public surface.

    ``attributes`` mirrors ``members``: the manifest schema keeps separate
    property and attribute views and every input is exposed as both.
    """
    return {
        "schemaVersion": SCHEMA_VERSION,
        "readme": "",
        "modules": [
            {
                "kind": "javascript-module",
                "path": _module_path(component.file_path, root),
                "declarations": [
                    {
                        "kind": "class",
                        "name": component.class_name,
                        "tagName": component.tag,
                        "customElement": True,
                        "members": [
                            {"kind": "field", **_describe(member)} for member in component.inputs
                        ],
                        "events": [_describe(member) for member in component.outputs],
                        "attributes": [_describe(member) for member in component.inputs],
                    }
                ],
            }
            for component in components
        ],
    }


def render_manifest(manifest: Dict[str, Any]) -> str:
    return json.dumps(manifest, indent=2) + "\n"


def _describe(member: ReactiveMember) -> Dict[str, Any]:
    return {"name": member.effective_name, "type": {"text": member.type_text}}


def _module_path(file_path: Path, root: Path | None) -> str:
    if root is not None:
        try:
            return file_path.relative_to(root).as_posix()
        except ValueError:
            pass
    return file_path.as_posix()


__all__ = ["SCHEMA_VERSION", "emit_custom_elements_manifest", "render_manifest"]
