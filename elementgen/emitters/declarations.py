"""Ambient type declaration (``custom-elements.d.ts``) emitter."""

from __future__ import annotations

import re
from typing import List, Sequence

from ..models import ComponentMetadata

_SEGMENT_SPLIT = re.compile(r"[^a-zA-Z0-9]+")
_IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")

HANDLER_PREFIX = "on"


def to_pascal_case(value: str) -> str:
    """``"my-app-card"`` -> ``"MyAppCard"``."""
    return "".join(
        segment[0].upper() + segment[1:] for segment in _SEGMENT_SPLIT.split(value) if segment
    )


def emit_type_declarations(components: Sequence[ComponentMetadata]) -> str:
    lines: List[str] = ["export {};", ""]

    for component in components:
        base_name = to_pascal_case(component.tag)
        element_name = f"{base_name}Element"
        props_name = f"{base_name}Props"

        lines.append(f"export interface {element_name} extends HTMLElement {{}}")
        lines.append(f"export interface {props_name} {{")
        for member in component.inputs:
            optional_flag = "" if member.required else "?"
            lines.append(f"  {_property_name(member.effective_name)}{optional_flag}: {member.type_text};")
        for member in component.outputs:
            handler_name = HANDLER_PREFIX + to_pascal_case(member.effective_name)
            lines.append(f"  {handler_name}?: (e: CustomEvent<{member.type_text}>) => void;")
        lines.append("}")
        lines.append("")

        lines.append("declare global {")
        lines.append("  interface HTMLElementTagNameMap {")
        lines.append(f'    "{component.tag}": {element_name};')
        lines.append("  }")
        lines.append("")
        lines.append("  namespace JSX {")
        lines.append("    interface IntrinsicElements {")
        lines.append(f'      "{component.tag}": {props_name};')
        lines.append("    }")
        lines.append("  }")
        lines.append("}")
        lines.append("")

    return "\n".join(lines)


def _property_name(name: str) -> str:
    return name if _IDENTIFIER.match(name) else f'"{name}"'


__all__ = ["HANDLER_PREFIX", "emit_type_declarations", "to_pascal_case"]
