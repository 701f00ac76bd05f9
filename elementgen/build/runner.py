"""Delegation of the browser bundle to an external Angular build."""

from __future__ import annotations

import json
import re
import subprocess
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Iterable, List, Mapping, Optional, Sequence

from ..logging import get_logger
from .target import BuildTargetSpec

MAIN_JS_PREFIX = "main"
MAIN_JS_SUFFIX = ".js"
# The application builder writes browser bundles below this folder of the output path.
BROWSER_SUBDIR = "browser"

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


@dataclass
class BuildResult:
    """Outcome reported by the downstream build."""

    success: bool
    error: Optional[str] = None
    output: str = ""


class BuildRunner(ABC):
    """Contract for collaborators that bundle the generated browser entry."""

    @abstractmethod
    def run(
        self,
        target: BuildTargetSpec,
        *,
        entry: Path,
        output_path: Path,
        options: Mapping[str, Any],
        cwd: Path,
    ) -> BuildResult:
        """Build ``entry`` into ``output_path`` and report success or failure."""


class AngularCliBuildRunner(BuildRunner):
    """Runs ``ng run <target>`` with the entry point and output path overridden."""

    def __init__(
        self,
        command: Sequence[str] = ("npx", "ng"),
        runner: Callable[..., subprocess.CompletedProcess] | None = None,
    ) -> None:
        self.command = list(command)
        self._runner = runner or self._default_runner
        self.logger = get_logger("build")

    def run(
        self,
        target: BuildTargetSpec,
        *,
        entry: Path,
        output_path: Path,
        options: Mapping[str, Any],
        cwd: Path,
    ) -> BuildResult:
        args = self.build_args(target, entry=entry, output_path=output_path, options=options, cwd=cwd)
        self.logger.info("Running %s", " ".join(args))
        try:
            completed = self._runner(args, cwd=cwd)
        except OSError as exc:
            return BuildResult(success=False, error=f"Build command could not be started: {exc}")
        output = (completed.stdout or "") + (completed.stderr or "")
        if completed.returncode != 0:
            return BuildResult(
                success=False,
                error=f"Build target {target} failed with exit code {completed.returncode}",
                output=output,
            )
        return BuildResult(success=True, output=output)

    def build_args(
        self,
        target: BuildTargetSpec,
        *,
        entry: Path,
        output_path: Path,
        options: Mapping[str, Any],
        cwd: Path,
    ) -> List[str]:
        args = [*self.command, "run", str(target)]
        overrides = dict(options)
        overrides["browser"] = _relative_to(entry, cwd)
        overrides["outputPath"] = _relative_to(output_path, cwd)
        overrides["deleteOutputPath"] = False
        args.extend(_format_flags(overrides.items()))
        return args

    @staticmethod
    def _default_runner(args: Iterable[str], *, cwd: Path) -> subprocess.CompletedProcess:
        return subprocess.run(
            list(args),
            cwd=str(cwd),
            check=False,
            text=True,
            capture_output=True,
        )


def rename_main_bundle(out_dir: Path, output_file_name: str) -> Optional[Path]:
    """Rename ``main.js``/``main-*.js`` (and its source map) to ``output_file_name``.

    The bundle is looked up in ``out_dir/browser`` first, where the Angular
    application builder places it, then in ``out_dir`` itself. The renamed
    file stays in the directory it was found in. Returns the new bundle path,
    or None when no main bundle exists.
    """
    logger = get_logger("build")
    normalized = output_file_name if output_file_name.lower().endswith(".js") else f"{output_file_name}.js"
    for bundle_dir in (out_dir / BROWSER_SUBDIR, out_dir):
        candidates = _main_bundles(bundle_dir)
        if candidates:
            break
    else:
        logger.warning("No main bundle (main.js or main-*.js) found in %s; skipping rename.", out_dir)
        return None
    main_js = candidates[0]
    destination = bundle_dir / normalized
    (bundle_dir / main_js).rename(destination)
    source_map = bundle_dir / f"{main_js}.map"
    if source_map.is_file():
        source_map.rename(bundle_dir / f"{normalized}.map")
    logger.info('Renamed main bundle to %s. Load with <script type="module" src="%s">.', normalized, normalized)
    return destination


def _main_bundles(directory: Path) -> List[str]:
    if not directory.is_dir():
        return []
    return sorted(
        path.name
        for path in directory.iterdir()
        if path.is_file() and path.name.startswith(MAIN_JS_PREFIX) and path.name.endswith(MAIN_JS_SUFFIX)
    )


def _format_flags(items: Iterable[tuple[str, Any]]) -> List[str]:
    flags: List[str] = []
    for key, value in items:
        if value is None:
            continue
        name = _CAMEL_BOUNDARY.sub("-", key).lower()
        if isinstance(value, bool):
            rendered = "true" if value else "false"
        elif isinstance(value, (dict, list)):
            rendered = json.dumps(value, separators=(",", ":"))
        else:
            rendered = str(value)
        flags.append(f"--{name}={rendered}")
    return flags


def _relative_to(path: Path, base: Path) -> str:
    try:
        return path.relative_to(base).as_posix()
    except ValueError:
        return path.as_posix()


__all__ = [
    "AngularCliBuildRunner",
    "BROWSER_SUBDIR",
    "BuildResult",
    "BuildRunner",
    "MAIN_JS_PREFIX",
    "rename_main_bundle",
]
