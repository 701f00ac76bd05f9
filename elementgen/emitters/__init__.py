"""Artifact emitters. Each is a pure function of the analyzed component list."""

from __future__ import annotations

from .declarations import emit_type_declarations, to_pascal_case
from .manifest import emit_custom_elements_manifest, render_manifest
from .registration import (
    BROWSER_MODE,
    MODULE_MODE,
    emit_elements_registration,
    to_module_specifier,
)

__all__ = [
    "BROWSER_MODE",
    "MODULE_MODE",
    "emit_custom_elements_manifest",
    "emit_elements_registration",
    "emit_type_declarations",
    "render_manifest",
    "to_module_specifier",
    "to_pascal_case",
]
