"""Component source analysis: parsing, class resolution, members and discovery."""

from __future__ import annotations

from .discovery import REGISTRATION_MARKER, discover_elements
from .members import CallShape, classify_call, extract_members
from .source import ClassHandle, Project, SourceFile, parse_component_ref, resolve_component_class

__all__ = [
    "CallShape",
    "ClassHandle",
    "Project",
    "REGISTRATION_MARKER",
    "SourceFile",
    "classify_call",
    "discover_elements",
    "extract_members",
    "parse_component_ref",
    "resolve_component_class",
]
