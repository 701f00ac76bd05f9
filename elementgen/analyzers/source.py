"""Source analyzer: parsed component files and class resolution."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, List, Optional

from tree_sitter import Node, Tree

from ..errors import (
    ComponentClassNotResolvedError,
    ComponentReferenceUnparsableError,
    ComponentSourceNotFoundError,
)
from ..logging import get_logger
from ..models import ComponentRef
from .tree_sitter import (
    TypeScriptParser,
    call_arguments,
    iter_children_of_type,
    node_text,
    property_key,
)
from .tsconfig import SOURCE_SUFFIXES, load_tsconfig

_CLASS_NODE_TYPES = {"class_declaration", "abstract_class_declaration"}
_FIELD_NODE_TYPES = {"public_field_definition", "field_definition"}
_SKIPPED_DIRS = {"node_modules", "dist", "build", "out", "coverage"}

logger = get_logger("source")


def parse_component_ref(component: str) -> ComponentRef:
    """Split ``"path#Class"`` or a bare ``"Class"`` into a ComponentRef."""
    text = component.strip() if isinstance(component, str) else ""
    if not text:
        raise ComponentReferenceUnparsableError(f"Component reference could not be parsed: {component!r}")
    if "#" not in text:
        return ComponentRef(class_name=text)
    parts = text.split("#")
    if len(parts) != 2 or not parts[0].strip() or not parts[1].strip():
        raise ComponentReferenceUnparsableError(f"Component reference could not be parsed: {component}")
    return ComponentRef(class_name=parts[1].strip(), file_path=parts[0].strip())


@dataclass
class Decorator:
    """A decorator applied to a class, reduced to its name and arguments."""

    name: str
    arguments: List[Node]
    node: Node


@dataclass
class PropertyDeclaration:
    """A class property with its optional annotation and initializer nodes."""

    name: str
    type_node: Optional[Node]
    initializer: Optional[Node]
    node: Node


class ClassHandle:
    """Queryable view of one top-level class declaration."""

    def __init__(self, source_file: "SourceFile", node: Node, decorator_nodes: List[Node]) -> None:
        self.source_file = source_file
        self.node = node
        self._decorator_nodes = decorator_nodes

    @property
    def name(self) -> Optional[str]:
        name_node = self.node.child_by_field_name("name")
        return self.source_file.text(name_node) if name_node is not None else None

    @property
    def decorators(self) -> List[Decorator]:
        decorators: List[Decorator] = []
        for node in self._decorator_nodes:
            decorator = _parse_decorator(node, self.source_file)
            if decorator is not None:
                decorators.append(decorator)
        return decorators

    def get_decorator(self, name: str) -> Optional[Decorator]:
        return next((item for item in self.decorators if item.name == name), None)

    @property
    def properties(self) -> List[PropertyDeclaration]:
        body = self.node.child_by_field_name("body")
        if body is None:
            return []
        properties: List[PropertyDeclaration] = []
        for member in body.named_children:
            if member.type not in _FIELD_NODE_TYPES:
                continue
            name_node = member.child_by_field_name("name") or member.child_by_field_name("property")
            if name_node is None:
                continue
            name = property_key(name_node, self.source_file.source_bytes)
            if name is None:
                name = self.source_file.text(name_node)
            type_node = None
            annotation = member.child_by_field_name("type")
            if annotation is not None and annotation.named_child_count:
                type_node = annotation.named_children[0]
            properties.append(
                PropertyDeclaration(
                    name=name,
                    type_node=type_node,
                    initializer=member.child_by_field_name("value"),
                    node=member,
                )
            )
        return properties

    def text(self, node: Node) -> str:
        return self.source_file.text(node)

    def __repr__(self) -> str:
        return f"ClassHandle({self.name!r}, {str(self.source_file.path)!r})"


class SourceFile:
    """A parsed TypeScript file and its top-level class declarations."""

    def __init__(self, path: Path, source_bytes: bytes, tree: Tree) -> None:
        self.path = path
        self.source_bytes = source_bytes
        self.tree = tree
        self._classes: Optional[List[ClassHandle]] = None

    @property
    def classes(self) -> List[ClassHandle]:
        if self._classes is None:
            self._classes = list(self._collect_classes())
        return self._classes

    def get_class(self, name: str) -> Optional[ClassHandle]:
        return next((klass for klass in self.classes if klass.name == name), None)

    def text(self, node: Node) -> str:
        return node_text(node, self.source_bytes)

    def _collect_classes(self) -> Iterator[ClassHandle]:
        for child in self.tree.root_node.named_children:
            if child.type in _CLASS_NODE_TYPES:
                yield ClassHandle(self, child, list(iter_children_of_type(child, "decorator")))
            elif child.type == "export_statement":
                exported = child.child_by_field_name("declaration") or child.child_by_field_name("value")
                if exported is None or exported.type not in _CLASS_NODE_TYPES | {"class"}:
                    continue
                decorators = list(iter_children_of_type(child, "decorator"))
                decorators.extend(iter_children_of_type(exported, "decorator"))
                yield ClassHandle(self, exported, decorators)


class Project:
    """An explicitly populated set of parsed source files.

    Nothing is loaded implicitly: callers add files one by one, from a
    directory scan, or from a tsconfig.
    """

    def __init__(self, root: Path | None = None, parser: TypeScriptParser | None = None) -> None:
        self.root = (root or Path.cwd()).expanduser().resolve()
        self._parser = parser or TypeScriptParser()
        self._files: Dict[Path, SourceFile] = {}

    @classmethod
    def from_tsconfig(
        cls,
        tsconfig_path: Path,
        *,
        root: Path | None = None,
        parser: TypeScriptParser | None = None,
    ) -> "Project":
        settings = load_tsconfig(tsconfig_path)
        project = cls(root=root or settings.path.parent, parser=parser)
        for path in settings.iter_source_files():
            project.add_source_file(path, strict=False)
        logger.debug("Loaded %d source files from %s", len(project.source_files), settings.path)
        return project

    @property
    def source_files(self) -> List[SourceFile]:
        return list(self._files.values())

    def resolve_path(self, file_path: str | Path) -> Path:
        path = Path(file_path).expanduser()
        if not path.is_absolute():
            path = self.root / path
        return path.resolve()

    def get_source_file(self, file_path: str | Path) -> Optional[SourceFile]:
        return self._files.get(self.resolve_path(file_path))

    def add_source_file(self, file_path: str | Path, *, strict: bool = True) -> Optional[SourceFile]:
        """Load and cache a source file.

        With ``strict`` (the default) unreadable or unparsable files raise
        ComponentSourceNotFoundError; bulk loaders pass ``strict=False`` to
        skip them with a warning instead.
        """
        path = self.resolve_path(file_path)
        cached = self._files.get(path)
        if cached is not None:
            return cached
        try:
            source_file = self._parse(path)
        except ComponentSourceNotFoundError as exc:
            if strict:
                raise
            logger.warning("%s", exc)
            return None
        self._files[path] = source_file
        return source_file

    def add_directory(self, directory: str | Path) -> List[SourceFile]:
        """Add every TypeScript source under ``directory``."""
        base = self.resolve_path(directory)
        added: List[SourceFile] = []
        for dirpath, dirnames, filenames in os.walk(base):
            dirnames[:] = sorted(
                name for name in dirnames if name not in _SKIPPED_DIRS and not name.startswith(".")
            )
            for filename in sorted(filenames):
                if not filename.endswith(SOURCE_SUFFIXES) or filename.endswith(".d.ts"):
                    continue
                source_file = self.add_source_file(Path(dirpath) / filename, strict=False)
                if source_file is not None:
                    added.append(source_file)
        return added

    def _parse(self, path: Path) -> SourceFile:
        if not path.is_file():
            raise ComponentSourceNotFoundError(f"Component source file not found: {path}")
        try:
            source_bytes = path.read_bytes()
            source_bytes.decode("utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise ComponentSourceNotFoundError(f"Component source file could not be read: {path}: {exc}") from exc
        tree = self._parser.parse(source_bytes, tsx=path.suffix == ".tsx")
        if tree.root_node.has_error:
            raise ComponentSourceNotFoundError(f"Component source file could not be parsed: {path}")
        return SourceFile(path, source_bytes, tree)


def resolve_component_class(project: Project, ref: ComponentRef) -> ClassHandle:
    """Resolve ``ref`` to exactly one class or fail."""
    if ref.file_path:
        source_file = project.add_source_file(ref.file_path)
        if source_file is None:
            raise ComponentSourceNotFoundError(f"Component source file not found: {ref.file_path}")
        class_handle = source_file.get_class(ref.class_name)
        if class_handle is None:
            raise ComponentClassNotResolvedError(
                f"Component symbol cannot be resolved to class: {ref.class_name} (in {source_file.path})"
            )
        return class_handle

    matches = [
        klass
        for source_file in project.source_files
        for klass in source_file.classes
        if klass.name == ref.class_name
    ]
    if len(matches) != 1:
        detail = "no matching class" if not matches else f"{len(matches)} matching classes"
        raise ComponentClassNotResolvedError(
            f"Component symbol cannot be resolved to class: {ref.class_name} ({detail})"
        )
    return matches[0]


def _parse_decorator(node: Node, source_file: SourceFile) -> Optional[Decorator]:
    expression = next((child for child in node.named_children if child.type != "comment"), None)
    if expression is None:
        return None
    arguments: List[Node] = []
    callee = expression
    if expression.type in {"call_expression", "decorator_call_expression"}:
        callee = expression.child_by_field_name("function") or expression
        arguments = call_arguments(expression)
    if callee.type == "identifier":
        name = source_file.text(callee)
    elif callee.type in {"member_expression", "decorator_member_expression"}:
        property_node = callee.child_by_field_name("property")
        if property_node is None:
            return None
        name = source_file.text(property_node)
    else:
        return None
    return Decorator(name=name, arguments=arguments, node=node)


__all__ = [
    "ClassHandle",
    "Decorator",
    "Project",
    "PropertyDeclaration",
    "SourceFile",
    "parse_component_ref",
    "resolve_component_class",
]
