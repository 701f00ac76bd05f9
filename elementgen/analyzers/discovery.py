"""Source-wide discovery of classes carrying the registration marker."""

from __future__ import annotations

from typing import Dict, List, Optional

from ..errors import DuplicateTagError, MissingRegistrationTagError, UnnamedRegisteredComponentError
from ..logging import get_logger
from ..models import NormalizedElementEntry
from .source import ClassHandle, Decorator, Project
from .tree_sitter import object_property, string_literal_value

REGISTRATION_MARKER = "RegisterWebComponent"
COMPONENT_DECORATOR = "Component"

logger = get_logger("discovery")


def discover_elements(
    project: Project,
    *,
    marker: str = REGISTRATION_MARKER,
    selector_fallback: bool = False,
) -> List[NormalizedElementEntry]:
    """Return a ``tag -> "<file>#<Class>"`` entry for every marked class.

    Files are visited in load order and classes in declaration order. When
    ``selector_fallback`` is set, a marker without a tag borrows the
    ``selector`` of the class's ``@Component`` metadata.
    """
    entries: List[NormalizedElementEntry] = []
    owners: Dict[str, str] = {}
    for source_file in project.source_files:
        for class_handle in source_file.classes:
            decorator = class_handle.get_decorator(marker)
            if decorator is None:
                continue
            name = class_handle.name
            if not name:
                raise UnnamedRegisteredComponentError(
                    f"@{marker} found on an anonymous class in {source_file.path}; give the class a name"
                )
            tag = _resolve_tag(class_handle, decorator, selector_fallback=selector_fallback)
            if tag is None:
                raise MissingRegistrationTagError(
                    f"@{marker} on {name} ({source_file.path}) does not declare a tag"
                )
            reference = f"{source_file.path.as_posix()}#{name}"
            if tag in owners:
                raise DuplicateTagError(tag, f"{owners[tag]} and {reference}")
            owners[tag] = reference
            logger.debug("Discovered <%s> -> %s", tag, reference)
            entries.append(NormalizedElementEntry(tag=tag, component=reference))
    return entries


def _resolve_tag(
    class_handle: ClassHandle, decorator: Decorator, *, selector_fallback: bool
) -> Optional[str]:
    source_bytes = class_handle.source_file.source_bytes
    if decorator.arguments:
        first = decorator.arguments[0]
        tag = string_literal_value(first, source_bytes)
        if tag:
            return tag
        for key in ("tag", "selector"):
            tag = string_literal_value(object_property(first, key, source_bytes), source_bytes)
            if tag:
                return tag
    if not selector_fallback:
        return None
    component = class_handle.get_decorator(COMPONENT_DECORATOR)
    if component is None or not component.arguments:
        return None
    selector = string_literal_value(
        object_property(component.arguments[0], "selector", source_bytes), source_bytes
    )
    return selector or None


__all__ = ["COMPONENT_DECORATOR", "REGISTRATION_MARKER", "discover_elements"]
