"""Downstream build delegation for the browser bundle."""

from .runner import AngularCliBuildRunner, BuildResult, BuildRunner, rename_main_bundle
from .target import BuildTargetSpec, parse_build_target, resolve_source_root

__all__ = [
    "AngularCliBuildRunner",
    "BuildResult",
    "BuildRunner",
    "BuildTargetSpec",
    "parse_build_target",
    "rename_main_bundle",
    "resolve_source_root",
]
