"""Tree-sitter helpers for parsing TypeScript component sources."""

from __future__ import annotations

from typing import Dict, Iterator, List, Optional

import tree_sitter_typescript
from tree_sitter import Language, Node, Parser, Tree

_LANGUAGE_FACTORIES = {
    "typescript": tree_sitter_typescript.language_typescript,
    "tsx": tree_sitter_typescript.language_tsx,
}

_ESCAPES = {
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "0": "\0",
}


class TypeScriptParser:
    """Lazily builds one tree-sitter parser per TypeScript dialect."""

    def __init__(self) -> None:
        self._parsers: Dict[str, Parser] = {}

    def parse(self, source_bytes: bytes, *, tsx: bool = False) -> Tree:
        return self._get_parser("tsx" if tsx else "typescript").parse(source_bytes)

    def _get_parser(self, language_key: str) -> Parser:
        parser = self._parsers.get(language_key)
        if parser is not None:
            return parser
        language = Language(_LANGUAGE_FACTORIES[language_key]())
        parser = Parser(language)
        self._parsers[language_key] = parser
        return parser


def node_text(node: Node, source_bytes: bytes) -> str:
    return source_bytes[node.start_byte : node.end_byte].decode("utf-8", errors="ignore")


def named_children(node: Optional[Node]) -> List[Node]:
    """Return named children without interleaved comments."""
    if node is None:
        return []
    return [child for child in node.named_children if child.type != "comment"]


def iter_children_of_type(node: Node, *types: str) -> Iterator[Node]:
    for child in node.children:
        if child.type in types:
            yield child


def string_literal_value(node: Optional[Node], source_bytes: bytes) -> Optional[str]:
    """Return the unescaped value of a plain string literal node, else None."""
    if node is None or node.type != "string":
        return None
    parts: List[str] = []
    for child in node.named_children:
        text = node_text(child, source_bytes)
        if child.type == "escape_sequence":
            parts.append(_unescape(text))
        elif child.type == "string_fragment":
            parts.append(text)
    return "".join(parts)


def property_key(node: Node, source_bytes: bytes) -> Optional[str]:
    """Return the name of an object pair key or class property name node."""
    if node.type == "string":
        return string_literal_value(node, source_bytes)
    if node.type in {"property_identifier", "private_property_identifier", "identifier", "number"}:
        return node_text(node, source_bytes)
    return None


def object_property(obj: Node, key: str, source_bytes: bytes) -> Optional[Node]:
    """Return the value node of ``key: value`` inside an object literal."""
    if obj.type != "object":
        return None
    for child in named_children(obj):
        if child.type != "pair":
            continue
        key_node = child.child_by_field_name("key")
        if key_node is not None and property_key(key_node, source_bytes) == key:
            return child.child_by_field_name("value")
    return None


def call_type_arguments(call: Node) -> List[Node]:
    type_arguments = call.child_by_field_name("type_arguments")
    if type_arguments is None:
        type_arguments = next(iter_children_of_type(call, "type_arguments"), None)
    return named_children(type_arguments)


def call_arguments(call: Node) -> List[Node]:
    arguments = call.child_by_field_name("arguments")
    if arguments is None or arguments.type != "arguments":
        return []
    return named_children(arguments)


def _unescape(sequence: str) -> str:
    body = sequence[1:]
    if body in _ESCAPES:
        return _ESCAPES[body]
    if body.startswith("u{") and body.endswith("}"):
        return chr(int(body[2:-1], 16))
    if body.startswith(("u", "x")) and len(body) > 1:
        try:
            return chr(int(body[1:], 16))
        except ValueError:
            return body
    if body.startswith(("\r\n", "\n")):
        return ""
    return body


__all__ = [
    "TypeScriptParser",
    "call_arguments",
    "call_type_arguments",
    "iter_children_of_type",
    "named_children",
    "node_text",
    "object_property",
    "property_key",
    "string_literal_value",
]
