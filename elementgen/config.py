"""Configuration loading for elementgen (JSON or YAML generator configs)."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

import yaml

from .analyzers.discovery import REGISTRATION_MARKER
from .errors import ConfigError

MANIFEST_OUTPUT = "manifest"
MODULE_OUTPUT = "module"
BROWSER_OUTPUT = "browser"
ELEMENT_OUTPUTS = (MANIFEST_OUTPUT, MODULE_OUTPUT, BROWSER_OUTPUT)

DEFAULT_OUT_DIR = "dist"

ElementsConfig = Union[
    Mapping[str, str],
    Sequence[Mapping[str, Any]],
    Sequence[Tuple[str, Any]],
]


@dataclass
class DiscoveryConfig:
    """How classes are found when no explicit element list is configured."""

    marker: str = REGISTRATION_MARKER
    selector_fallback: bool = False


@dataclass
class BuildConfig:
    """Downstream build delegation for the browser bundle."""

    target: Optional[str] = None
    source_map: bool = False
    output_hashing: Optional[str] = None
    output_file_name: Optional[str] = None
    options: Dict[str, Any] = field(default_factory=dict)
    entry_dir: Optional[Path] = None


@dataclass
class GeneratorConfig:
    """Aggregate input of one generation run.

    ``elements`` is either a ``tag -> "path#Class"`` mapping, a list of
    ``{"tag", "component"}`` entries, or ``None`` to discover marked classes.
    """

    root: Path = field(default_factory=Path.cwd)
    elements: Optional[ElementsConfig] = None
    tsconfig: Optional[Path] = None
    out_dir: Optional[Path] = None
    root_dir: Optional[Path] = None
    element_outputs: List[str] = field(default_factory=lambda: [MANIFEST_OUTPUT])
    import_extension: Optional[str] = None
    inline_components: Optional[bool] = None
    build: BuildConfig = field(default_factory=BuildConfig)
    discovery: DiscoveryConfig = field(default_factory=DiscoveryConfig)

    def resolve(self, value: Optional[Path | str]) -> Optional[Path]:
        """Resolve ``value`` against the config root."""
        if value is None:
            return None
        path = Path(value).expanduser()
        if not path.is_absolute():
            path = self.root / path
        return path.resolve()

    @property
    def resolved_out_dir(self) -> Path:
        path = Path(self.out_dir or DEFAULT_OUT_DIR).expanduser()
        if not path.is_absolute():
            path = self.root / path
        return path.resolve()


def load_config(config_path: Path) -> GeneratorConfig:
    """Load a generator config from a ``.json``, ``.yml`` or ``.yaml`` file."""
    config_file = config_path.expanduser().resolve()
    if not config_file.is_file():
        raise ConfigError(f"Registry could not be parsed: {config_file} does not exist")
    root = config_file.parent

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"Registry could not be parsed: {config_file.name} must contain a mapping at the root")

    elements = data.get("elements")
    if elements is not None and not isinstance(elements, (dict, list)):
        raise ConfigError("Registry could not be parsed: 'elements' must be a mapping or a list")

    outputs = _as_str_list(data.get("elementOutputs")) or [MANIFEST_OUTPUT]

    build = BuildConfig(
        target=_as_build_target(data.get("buildTarget")),
        source_map=_as_bool(data.get("sourceMap")) or False,
        output_hashing=_as_str(data.get("outputHashing")),
        output_file_name=_as_str(data.get("outputFileName")),
        options=_as_dict(data.get("buildTargetOptions")),
        entry_dir=_as_path(root, data.get("browserEntryDir")),
    )

    discovery_data = _as_dict(data.get("discovery"))
    discovery = DiscoveryConfig(
        marker=_as_str(discovery_data.get("marker")) or REGISTRATION_MARKER,
        selector_fallback=_as_bool(discovery_data.get("selectorFallback")) or False,
    )

    return GeneratorConfig(
        root=root,
        elements=elements,
        tsconfig=_as_path(root, data.get("tsconfig")),
        out_dir=_as_path(root, data.get("outDir")),
        root_dir=_as_path(root, data.get("rootDir")),
        element_outputs=outputs,
        import_extension=_as_str(data.get("importExtension")),
        inline_components=_as_bool(data.get("inlineComponents")),
        build=build,
        discovery=discovery,
    )


class _PairPreservingLoader(yaml.SafeLoader):
    """SafeLoader that keeps duplicate mapping keys instead of overwriting them."""


def _construct_mapping(loader: yaml.SafeLoader, node: yaml.MappingNode) -> Any:
    loader.flatten_mapping(node)
    pairs = loader.construct_pairs(node, deep=True)
    return _pairs_to_mapping(pairs)


_PairPreservingLoader.add_constructor(
    yaml.resolver.BaseResolver.DEFAULT_MAPPING_TAG, _construct_mapping
)


def _pairs_to_mapping(pairs: List[Tuple[Any, Any]]) -> Any:
    # Duplicate keys survive as a pair list so tag collisions stay detectable.
    keys = [key for key, _ in pairs]
    if len(set(keys)) != len(keys):
        return list(pairs)
    return dict(pairs)


def _read_config(path: Path) -> Any:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Registry could not be parsed: {exc}") from exc
    if not text.strip():
        return {}

    suffix = path.suffix.lower()
    if suffix == ".json":
        try:
            return json.loads(text, object_pairs_hook=_pairs_to_mapping)
        except json.JSONDecodeError as exc:
            raise ConfigError(f"Registry could not be parsed: {path.name}: {exc}") from exc
    if suffix in {".yml", ".yaml"}:
        try:
            return yaml.load(text, Loader=_PairPreservingLoader)
        except (yaml.YAMLError, TypeError) as exc:
            # TypeError comes from complex keys such as ``? [a, b]`` that cannot be hashed.
            raise ConfigError(f"Registry could not be parsed: {path.name}: {exc}") from exc
    raise ConfigError(f"Registry could not be parsed: unsupported config format '{path.suffix}'")


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


def _as_build_target(value: Any) -> Optional[str]:
    if isinstance(value, dict):
        parts = [_as_str(value.get(key)) for key in ("project", "target", "configuration")]
        if not parts[0] or not parts[1]:
            raise ConfigError("Registry could not be parsed: buildTarget needs both project and target")
        return ":".join(part for part in parts if part)
    return _as_str(value)


def _as_path(root: Path, value: Any) -> Optional[Path]:
    text = _as_str(value)
    if not text:
        return None
    path = Path(text).expanduser()
    if not path.is_absolute():
        path = root / path
    return path.resolve()


__all__ = [
    "BROWSER_OUTPUT",
    "BuildConfig",
    "DEFAULT_OUT_DIR",
    "DiscoveryConfig",
    "ELEMENT_OUTPUTS",
    "GeneratorConfig",
    "MANIFEST_OUTPUT",
    "MODULE_OUTPUT",
    "load_config",
]
