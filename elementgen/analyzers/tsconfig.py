"""Minimal tsconfig.json reader used to seed a project's file set."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Set, Tuple

from ..errors import ConfigError
from ..logging import get_logger

SOURCE_SUFFIXES = (".ts", ".tsx")

_DEFAULT_EXCLUDES = ("node_modules", "bower_components", "jspm_packages")

logger = get_logger("tsconfig")


@dataclass
class TsconfigSettings:
    """File selection rules gathered from a tsconfig and its ``extends`` chain."""

    path: Path
    files: List[Path] = field(default_factory=list)
    include: List[Tuple[Path, str]] = field(default_factory=list)
    exclude: List[Tuple[Path, str]] = field(default_factory=list)
    out_dir: Optional[Path] = None

    def iter_source_files(self) -> Iterator[Path]:
        """Yield matched source files once each, explicit ``files`` first."""
        seen: Set[Path] = set()
        for path in self.files:
            if path not in seen and path.is_file():
                seen.add(path)
                yield path
        for base, pattern in self.include:
            for path in _expand_pattern(base, pattern):
                if path in seen or self.is_excluded(path):
                    continue
                seen.add(path)
                yield path

    def is_excluded(self, path: Path) -> bool:
        if self.out_dir is not None and _is_relative_to(path, self.out_dir):
            return True
        for base, pattern in self.exclude:
            if not _is_relative_to(path, base):
                continue
            rel = path.relative_to(base).as_posix()
            pattern = pattern.rstrip("/")
            candidates = {pattern}
            if pattern.startswith("**/"):
                candidates.add(pattern[3:])
            for candidate in candidates:
                if fnmatchcase(rel, candidate) or fnmatchcase(rel, f"{candidate}/*"):
                    return True
        return False


def load_tsconfig(path: Path) -> TsconfigSettings:
    """Read ``path`` and resolve its file selection rules."""
    return _load(path.expanduser().resolve(), set())


def _load(path: Path, seen: Set[Path]) -> TsconfigSettings:
    if path in seen:
        raise ConfigError(f"tsconfig extends chain is circular at {path}")
    seen.add(path)

    data = _read_jsonc(path)
    base_dir = path.parent
    settings = TsconfigSettings(path=path)

    parent = _load_parent(data.get("extends"), base_dir, seen)
    if parent is not None:
        settings.files = list(parent.files)
        settings.include = list(parent.include)
        settings.exclude = list(parent.exclude)
        settings.out_dir = parent.out_dir

    compiler_options = data.get("compilerOptions")
    if isinstance(compiler_options, dict) and isinstance(compiler_options.get("outDir"), str):
        settings.out_dir = (base_dir / compiler_options["outDir"]).resolve()

    files = data.get("files")
    include = data.get("include")
    exclude = data.get("exclude")
    if isinstance(files, list):
        settings.files = [(base_dir / str(item)).resolve() for item in files]
    if isinstance(include, list):
        settings.include = [(base_dir, str(item)) for item in include]
    if isinstance(exclude, list):
        settings.exclude = [(base_dir, str(item)) for item in exclude]

    if parent is None:
        if not isinstance(files, list) and not isinstance(include, list):
            settings.include = [(base_dir, "**/*")]
        if not isinstance(exclude, list):
            settings.exclude = [(base_dir, item) for item in _DEFAULT_EXCLUDES]
    return settings


def _load_parent(value: Any, base_dir: Path, seen: Set[Path]) -> Optional[TsconfigSettings]:
    if isinstance(value, list):
        merged: Optional[TsconfigSettings] = None
        for item in value:
            loaded = _load_parent(item, base_dir, seen)
            if loaded is None:
                continue
            if merged is None:
                merged = loaded
                continue
            merged.files = loaded.files or merged.files
            merged.include = loaded.include or merged.include
            merged.exclude = loaded.exclude or merged.exclude
            merged.out_dir = loaded.out_dir or merged.out_dir
        return merged
    if not isinstance(value, str) or not value:
        return None
    if not value.startswith("."):
        # Package-provided bases only carry compiler options we do not need.
        logger.debug("Skipping non-relative tsconfig base %s", value)
        return None
    parent_path = (base_dir / value).resolve()
    if parent_path.suffix != ".json" and not parent_path.is_file():
        parent_path = parent_path.with_name(parent_path.name + ".json")
    return _load(parent_path, seen)


def _read_jsonc(path: Path) -> Dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"tsconfig could not be read: {path}: {exc}") from exc
    try:
        data = json.loads(_strip_trailing_commas(_strip_comments(text)) or "{}")
    except json.JSONDecodeError as exc:
        raise ConfigError(f"tsconfig could not be parsed: {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"tsconfig must contain an object at the root: {path}")
    return data


def _strip_comments(text: str) -> str:
    result: List[str] = []
    index = 0
    in_string = False
    while index < len(text):
        char = text[index]
        if in_string:
            result.append(char)
            if char == "\\" and index + 1 < len(text):
                result.append(text[index + 1])
                index += 2
                continue
            if char == '"':
                in_string = False
            index += 1
            continue
        if char == '"':
            in_string = True
            result.append(char)
            index += 1
        elif text.startswith("//", index):
            newline = text.find("\n", index)
            index = len(text) if newline == -1 else newline
        elif text.startswith("/*", index):
            end = text.find("*/", index + 2)
            index = len(text) if end == -1 else end + 2
        else:
            result.append(char)
            index += 1
    return "".join(result)


def _strip_trailing_commas(text: str) -> str:
    result: List[str] = []
    in_string = False
    for index, char in enumerate(text):
        if in_string:
            if char == '"' and not _is_escaped(text, index):
                in_string = False
            result.append(char)
            continue
        if char == '"':
            in_string = True
        elif char == ",":
            following = text[index + 1 :].lstrip()
            if following[:1] in {"}", "]"}:
                continue
        result.append(char)
    return "".join(result)


def _is_escaped(text: str, index: int) -> bool:
    backslashes = 0
    index -= 1
    while index >= 0 and text[index] == "\\":
        backslashes += 1
        index -= 1
    return backslashes % 2 == 1


def _expand_pattern(base: Path, pattern: str) -> Iterator[Path]:
    pattern = pattern.strip().rstrip("/")
    if not pattern:
        return
    has_wildcard = any(char in pattern for char in "*?[")
    target = base / pattern
    if not has_wildcard:
        if target.is_file():
            if _is_source(target):
                yield target.resolve()
            return
        if target.is_dir():
            pattern = f"{pattern}/**/*"
        else:
            return
    if pattern.endswith("**"):
        pattern = f"{pattern}/*"
    for path in sorted(base.glob(pattern)):
        if path.is_file() and _is_source(path) and "node_modules" not in path.parts:
            yield path.resolve()


def _is_source(path: Path) -> bool:
    name = path.name
    return name.endswith(SOURCE_SUFFIXES) and not name.endswith(".d.ts")


def _is_relative_to(path: Path, base: Path) -> bool:
    try:
        path.relative_to(base)
    except ValueError:
        return False
    return True


__all__ = ["SOURCE_SUFFIXES", "TsconfigSettings", "load_tsconfig"]
