"""Build target parsing and Angular workspace lookups."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..errors import BuildTargetError
from ..logging import get_logger

_WORKSPACE_FILE = "angular.json"
_DEFAULT_SOURCE_ROOT = "src"

logger = get_logger("build.target")


@dataclass(frozen=True)
class BuildTargetSpec:
    """``project:target[:configuration]`` reference to an Angular build target."""

    project: str
    target: str
    configuration: Optional[str] = None

    def __str__(self) -> str:
        parts = [self.project, self.target]
        if self.configuration:
            parts.append(self.configuration)
        return ":".join(parts)


def parse_build_target(value: str) -> BuildTargetSpec:
    parts = value.split(":")
    if len(parts) < 2 or not parts[0] or not parts[1]:
        raise BuildTargetError(
            f'Invalid buildTarget "{value}"; expected "project:target" or "project:target:configuration".'
        )
    configuration = ":".join(parts[2:]) or None
    return BuildTargetSpec(project=parts[0], target=parts[1], configuration=configuration)


def resolve_source_root(workspace_root: Path, project: str) -> str:
    """Return the ``sourceRoot`` of ``project`` from angular.json, or ``src``."""
    workspace_file = workspace_root / _WORKSPACE_FILE
    try:
        data = json.loads(workspace_file.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return _DEFAULT_SOURCE_ROOT
    except (OSError, json.JSONDecodeError) as exc:
        logger.warning("Could not read %s (%s); assuming sourceRoot '%s'", workspace_file, exc, _DEFAULT_SOURCE_ROOT)
        return _DEFAULT_SOURCE_ROOT
    projects = data.get("projects") if isinstance(data, dict) else None
    metadata = projects.get(project) if isinstance(projects, dict) else None
    source_root = metadata.get("sourceRoot") if isinstance(metadata, dict) else None
    return source_root if isinstance(source_root, str) and source_root else _DEFAULT_SOURCE_ROOT


__all__ = ["BuildTargetSpec", "parse_build_target", "resolve_source_root"]
