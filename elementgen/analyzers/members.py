"""Reactive member extraction for ``input``/``output`` signal properties."""

from __future__ import annotations

from enum import Enum
from typing import List, Optional

from tree_sitter import Node

from ..models import MemberKind, ReactiveMember
from .source import ClassHandle, PropertyDeclaration
from .tree_sitter import (
    call_arguments,
    call_type_arguments,
    node_text,
    object_property,
    string_literal_value,
)

UNKNOWN_TYPE = "unknown"

# Signal types the factories produce when no value type can be inferred.
_UNRESOLVED_SIGNAL_TYPES = ("InputSignal<unknown>", "OutputEmitterRef<unknown>")

_LITERAL_TYPES = {
    "number": "number",
    "string": "string",
    "template_string": "string",
    "true": "boolean",
    "false": "boolean",
    "null": "null",
    "undefined": "undefined",
}


class CallShape(Enum):
    """Closed set of recognized factory call shapes."""

    BARE_INPUT = ("input", False)
    BARE_OUTPUT = ("output", False)
    REQUIRED_INPUT = ("input", True)
    OTHER = (None, False)

    @property
    def kind(self) -> Optional[MemberKind]:
        return self.value[0]

    @property
    def required(self) -> bool:
        return self.value[1]


def classify_call(node: Optional[Node], source_bytes: bytes) -> CallShape:
    """Map a property initializer onto a CallShape."""
    if node is None or node.type != "call_expression":
        return CallShape.OTHER
    callee = node.child_by_field_name("function")
    if callee is None:
        return CallShape.OTHER
    if callee.type == "identifier":
        name = node_text(callee, source_bytes)
        if name == "input":
            return CallShape.BARE_INPUT
        if name == "output":
            return CallShape.BARE_OUTPUT
        return CallShape.OTHER
    if callee.type == "member_expression":
        target = callee.child_by_field_name("object")
        prop = callee.child_by_field_name("property")
        if (
            target is not None
            and prop is not None
            and target.type == "identifier"
            and node_text(target, source_bytes) == "input"
            and node_text(prop, source_bytes) == "required"
        ):
            return CallShape.REQUIRED_INPUT
    return CallShape.OTHER


def extract_members(class_handle: ClassHandle) -> List[ReactiveMember]:
    """Return one ReactiveMember per property initialized by a recognized factory."""
    source_bytes = class_handle.source_file.source_bytes
    members: List[ReactiveMember] = []
    for prop in class_handle.properties:
        shape = classify_call(prop.initializer, source_bytes)
        if prop.initializer is None or shape.kind is None:
            continue
        members.append(
            ReactiveMember(
                name=prop.name,
                kind=shape.kind,
                required=shape.required,
                type_text=_member_type_text(prop, prop.initializer, shape, source_bytes),
                alias=_alias_from_arguments(prop.initializer, source_bytes),
            )
        )
    return members


def _member_type_text(
    prop: PropertyDeclaration, call: Node, shape: CallShape, source_bytes: bytes
) -> str:
    type_arguments = call_type_arguments(call)
    if type_arguments:
        return node_text(type_arguments[0], source_bytes)
    if prop.type_node is not None:
        return node_text(prop.type_node, source_bytes)
    return sanitize_inferred_type(_infer_signal_type(call, shape))


def sanitize_inferred_type(type_text: str) -> str:
    """Collapse unresolved placeholders, ``any`` and empty text to ``unknown``."""
    text = type_text.strip()
    if any(placeholder in text for placeholder in _UNRESOLVED_SIGNAL_TYPES):
        return UNKNOWN_TYPE
    if not text or text == "any":
        return UNKNOWN_TYPE
    return text


def _infer_signal_type(call: Node, shape: CallShape) -> str:
    value_type = UNKNOWN_TYPE
    if shape is CallShape.BARE_INPUT:
        arguments = call_arguments(call)
        if arguments:
            value_type = _LITERAL_TYPES.get(arguments[0].type, UNKNOWN_TYPE)
    if shape.kind == "output":
        return f"OutputEmitterRef<{value_type}>"
    return f"InputSignal<{value_type}>"


def _alias_from_arguments(call: Node, source_bytes: bytes) -> Optional[str]:
    for argument in call_arguments(call)[:2]:
        if argument.type != "object":
            continue
        alias = string_literal_value(object_property(argument, "alias", source_bytes), source_bytes)
        if alias:
            return alias
    return None


__all__ = ["CallShape", "UNKNOWN_TYPE", "classify_call", "extract_members", "sanitize_inferred_type"]
