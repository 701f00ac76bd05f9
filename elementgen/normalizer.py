"""Adds JIT-safe defaults to ``@Component`` metadata in component sources."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Tuple

from tree_sitter import Node

from .analyzers.source import SourceFile
from .analyzers.tree_sitter import TypeScriptParser, named_children, node_text, object_property
from .errors import ComponentSourceNotFoundError
from .logging import get_logger

COMPONENT_DECORATOR = "Component"

# The JIT compiler reads ``.length`` on these, so they must never be undefined.
JIT_DEFAULTS: Tuple[Tuple[str, str], ...] = (
    ("styles", "[]"),
    ("animations", "[]"),
    ("imports", "[]"),
    ("schemas", "[]"),
)

logger = get_logger("normalizer")


def normalize_component_source(
    source_text: str,
    *,
    tsx: bool = False,
    parser: TypeScriptParser | None = None,
) -> str:
    """Return ``source_text`` with missing JIT defaults added to each ``@Component({...})``.

    Existing properties are never touched and all other text is kept as is.
    """
    source_bytes = source_text.encode("utf-8")
    tree = (parser or TypeScriptParser()).parse(source_bytes, tsx=tsx)
    source_file = SourceFile(Path("<memory>"), source_bytes, tree)

    insertions: List[Tuple[int, str]] = []
    for class_handle in source_file.classes:
        decorator = class_handle.get_decorator(COMPONENT_DECORATOR)
        if decorator is None or not decorator.arguments:
            continue
        metadata = decorator.arguments[0]
        if metadata.type != "object":
            continue
        missing = [
            (name, initializer)
            for name, initializer in JIT_DEFAULTS
            if not _has_property(metadata, name, source_bytes)
        ]
        if not missing:
            continue
        logger.debug(
            "Adding %s to @Component of %s",
            ", ".join(name for name, _ in missing),
            class_handle.name,
        )
        insertions.append(_build_insertion(metadata, missing, source_bytes))

    if not insertions:
        return source_text
    result = source_bytes
    for offset, text in sorted(insertions, reverse=True):
        result = result[:offset] + text.encode("utf-8") + result[offset:]
    return result.decode("utf-8")


def normalize_component_file(path: Path, *, parser: TypeScriptParser | None = None) -> bool:
    """Normalize a component source file in place; return True when it changed."""
    try:
        original = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ComponentSourceNotFoundError(f"Component source file could not be read: {path}: {exc}") from exc
    normalized = normalize_component_source(original, tsx=path.suffix == ".tsx", parser=parser)
    if normalized == original:
        return False
    path.write_text(normalized, encoding="utf-8")
    logger.info("Added JIT defaults to %s", path)
    return True


def _has_property(obj: Node, name: str, source_bytes: bytes) -> bool:
    if object_property(obj, name, source_bytes) is not None:
        return True
    # Shorthand (``{ styles }``) and method forms count as present too.
    for child in named_children(obj):
        if child.type == "shorthand_property_identifier" and node_text(child, source_bytes) == name:
            return True
        if child.type == "method_definition":
            key = child.child_by_field_name("name")
            if key is not None and node_text(key, source_bytes) == name:
                return True
    return False


def _build_insertion(
    obj: Node, missing: List[Tuple[str, str]], source_bytes: bytes
) -> Tuple[int, str]:
    closing = obj.end_byte - 1
    members = named_children(obj)
    last = members[-1] if members else None
    multiline = obj.start_point[0] != obj.end_point[0]

    if last is None:
        entries = ", ".join(f"{name}: {value}" for name, value in missing)
        return closing, f"  {entries}\n" if multiline else f" {entries} "

    anchor, has_trailing_comma = _after_last_member(last, closing, source_bytes)
    if multiline:
        indent = " " * last.start_point[1]
        body = "".join(f"\n{indent}{name}: {value}," for name, value in missing)
        if not has_trailing_comma:
            body = "," + body.rstrip(",")
        return anchor, body

    entries = ", ".join(f"{name}: {value}" for name, value in missing)
    if has_trailing_comma:
        return anchor, f" {entries},"
    return anchor, f", {entries}"


def _after_last_member(last: Node, closing: int, source_bytes: bytes) -> Tuple[int, bool]:
    """Return the insertion offset after the last member and whether a comma follows it."""
    between = source_bytes[last.end_byte : closing]
    comma = _find_comma(between)
    if comma is None:
        return last.end_byte, False
    return last.end_byte + comma + 1, True


def _find_comma(segment: bytes) -> Optional[int]:
    index = 0
    while index < len(segment):
        char = segment[index : index + 1]
        if segment.startswith(b"//", index):
            newline = segment.find(b"\n", index)
            index = len(segment) if newline == -1 else newline
            continue
        if segment.startswith(b"/*", index):
            end = segment.find(b"*/", index + 2)
            index = len(segment) if end == -1 else end + 2
            continue
        if char == b",":
            return index
        index += 1
    return None


__all__ = ["JIT_DEFAULTS", "normalize_component_file", "normalize_component_source"]
