"""Pipeline orchestration: config -> metadata -> artifacts -> optional build."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

from .analyzers import (
    Project,
    discover_elements,
    extract_members,
    parse_component_ref,
    resolve_component_class,
)
from .analyzers.tree_sitter import TypeScriptParser
from .build import (
    AngularCliBuildRunner,
    BuildResult,
    BuildRunner,
    BuildTargetSpec,
    parse_build_target,
    rename_main_bundle,
    resolve_source_root,
)
from .config import BROWSER_OUTPUT, ELEMENT_OUTPUTS, MANIFEST_OUTPUT, MODULE_OUTPUT, GeneratorConfig
from .emitters import (
    emit_custom_elements_manifest,
    emit_elements_registration,
    emit_type_declarations,
    render_manifest,
)
from .errors import (
    BrowserOutputRequiresBuildTargetError,
    ConfigError,
    DuplicateTagError,
    UnsupportedOutputKindError,
)
from .logging import get_logger
from .models import ComponentMetadata, NormalizedElementEntry
from .stores import ArtifactStore

MANIFEST_FILENAME = "custom-elements.json"
TYPES_FILENAME = "custom-elements.d.ts"
MODULE_FILENAME = "elements.ts"
BROWSER_ENTRY_FILENAME = "elements.browser.entry.ts"

_ANGULAR_WORKSPACE = "angular.json"
_TSCONFIG = "tsconfig.json"


@dataclass
class GenerationResult:
    """Artifacts written by one run and the downstream build outcome."""

    components: List[ComponentMetadata]
    artifacts: Dict[str, Path] = field(default_factory=dict)
    build: Optional[BuildResult] = None
    bundle: Optional[Path] = None

    @property
    def success(self) -> bool:
        return self.build is None or self.build.success


def normalize_elements_config(elements: Any) -> List[NormalizedElementEntry]:
    """Turn a mapping or list of elements into entries with unique tags."""
    if isinstance(elements, Mapping):
        pairs = list(elements.items())
    elif isinstance(elements, Sequence) and not isinstance(elements, (str, bytes)):
        pairs = []
        for item in elements:
            if isinstance(item, Mapping):
                pairs.append((item.get("tag"), item.get("component")))
            elif isinstance(item, (tuple, list)) and len(item) == 2:
                pairs.append((item[0], item[1]))
            else:
                raise ConfigError(f"Element entry must be {{tag, component}}, got: {item!r}")
    else:
        raise ConfigError("'elements' must be a mapping of tag to component or a list of entries")

    entries: List[NormalizedElementEntry] = []
    seen: set[str] = set()
    for tag, component in pairs:
        if not isinstance(tag, str) or not tag.strip():
            raise ConfigError(f"Element entry is missing a tag: {component!r}")
        if not isinstance(component, str) or not component.strip():
            raise ConfigError(f"Element <{tag}> is missing a component reference")
        if tag in seen:
            raise DuplicateTagError(tag)
        seen.add(tag)
        entries.append(NormalizedElementEntry(tag=tag, component=component))
    return entries


class Orchestrator:
    """Drives discovery, analysis and artifact emission for one config."""

    def __init__(
        self,
        store: ArtifactStore | None = None,
        build_runner: BuildRunner | None = None,
        parser: TypeScriptParser | None = None,
    ) -> None:
        self.store = store or ArtifactStore()
        self.build_runner = build_runner
        self._parser = parser
        self.logger = get_logger("orchestrator")

    def generate(self, config: GeneratorConfig) -> GenerationResult:
        """Run the pipeline; any GeneratorError aborts the remaining stages."""
        outputs = self._validate_outputs(config)
        build_target = parse_build_target(config.build.target) if config.build.target else None
        if BROWSER_OUTPUT in outputs and build_target is None:
            raise BrowserOutputRequiresBuildTargetError(
                "browser output requires a build target so the Angular build produces the bundle. "
                'Set buildTarget (e.g. "myApp:build") in the generator config.'
            )

        explicit = (
            normalize_elements_config(config.elements) if config.elements is not None else None
        )

        project = self.create_project(config)
        if explicit is None:
            entries = discover_elements(
                project,
                marker=config.discovery.marker,
                selector_fallback=config.discovery.selector_fallback,
            )
            if not entries:
                self.logger.warning("No @%s components discovered", config.discovery.marker)
        else:
            entries = explicit
        self.logger.info("Analyzing %d component(s)", len(entries))

        components = [self._extract_component(project, entry) for entry in entries]

        out_dir = config.resolved_out_dir
        result = GenerationResult(components=components)

        manifest = emit_custom_elements_manifest(components, root=config.root)
        result.artifacts[MANIFEST_OUTPUT] = self.store.write_text(
            out_dir / MANIFEST_FILENAME, render_manifest(manifest)
        )
        result.artifacts["types"] = self.store.write_text(
            out_dir / TYPES_FILENAME, emit_type_declarations(components)
        )

        for kind in outputs:
            if kind == MODULE_OUTPUT:
                result.artifacts[MODULE_OUTPUT] = self._write_registration(
                    components, config, out_dir / MODULE_FILENAME, kind
                )
            elif kind == BROWSER_OUTPUT and build_target is not None:
                entry_dir = self._browser_entry_dir(config, build_target, out_dir)
                entry = self._write_registration(
                    components, config, entry_dir / BROWSER_ENTRY_FILENAME, kind
                )
                result.artifacts[BROWSER_OUTPUT] = entry
                self._run_build(config, build_target, entry, out_dir, result)

        self.logger.info("Wrote %d artifact(s) to %s", len(result.artifacts), out_dir)
        return result

    def create_project(self, config: GeneratorConfig) -> Project:
        """Build the analysis project from the tsconfig and optional source root."""
        tsconfig = config.resolve(config.tsconfig)
        if tsconfig is None and (config.root / _TSCONFIG).is_file():
            tsconfig = config.root / _TSCONFIG
        if tsconfig is not None:
            self.logger.debug("Loading project from %s", tsconfig)
            project = Project.from_tsconfig(tsconfig, root=config.root, parser=self._parser)
        else:
            project = Project(root=config.root, parser=self._parser)
        root_dir = config.resolve(config.root_dir)
        if root_dir is not None:
            project.add_directory(root_dir)
        return project

    # ------------------------------------------------------------------
    # Internal helpers

    @staticmethod
    def _validate_outputs(config: GeneratorConfig) -> List[str]:
        outputs: List[str] = []
        for kind in config.element_outputs:
            if kind not in ELEMENT_OUTPUTS:
                supported = ", ".join(ELEMENT_OUTPUTS)
                raise UnsupportedOutputKindError(f"Unsupported element output '{kind}' (expected one of: {supported})")
            if kind not in outputs:
                outputs.append(kind)
        return outputs

    def _extract_component(self, project: Project, entry: NormalizedElementEntry) -> ComponentMetadata:
        ref = parse_component_ref(entry.component)
        class_handle = resolve_component_class(project, ref)
        members = extract_members(class_handle)
        self.logger.debug(
            "<%s> %s: %d input(s), %d output(s)",
            entry.tag,
            class_handle.name,
            sum(1 for member in members if member.kind == "input"),
            sum(1 for member in members if member.kind == "output"),
        )
        return ComponentMetadata(
            tag=entry.tag,
            class_name=class_handle.name or ref.class_name,
            file_path=class_handle.source_file.path,
            members=tuple(members),
        )

    def _write_registration(
        self,
        components: Sequence[ComponentMetadata],
        config: GeneratorConfig,
        path: Path,
        kind: str,
    ) -> Path:
        inline = config.inline_components
        if inline is None:
            inline = kind == BROWSER_OUTPUT
        source = emit_elements_registration(
            components,
            mode=kind,
            out_dir=path.parent,
            import_extension=config.import_extension,
            inline_components=inline,
        )
        return self.store.write_text(path, source)

    @staticmethod
    def _browser_entry_dir(config: GeneratorConfig, target: BuildTargetSpec, out_dir: Path) -> Path:
        if config.build.entry_dir is not None:
            return config.resolve(config.build.entry_dir) or out_dir
        if (config.root / _ANGULAR_WORKSPACE).is_file():
            # Inside the source root so the Angular build compiles component styles with it.
            return config.root / resolve_source_root(config.root, target.project) / "generated"
        return out_dir

    def _run_build(
        self,
        config: GeneratorConfig,
        target: BuildTargetSpec,
        entry: Path,
        out_dir: Path,
        result: GenerationResult,
    ) -> None:
        runner = self.build_runner or AngularCliBuildRunner()
        options: Dict[str, Any] = {"sourceMap": config.build.source_map}
        if config.build.output_hashing is not None:
            options["outputHashing"] = config.build.output_hashing
        options.update(config.build.options)

        self.logger.info("Delegating browser bundle to build target %s", target)
        build = runner.run(target, entry=entry, output_path=out_dir, options=options, cwd=config.root)
        result.build = build
        if not build.success:
            self.logger.error("Build target %s failed: %s", target, build.error or "unknown error")
            return
        if config.build.output_file_name:
            result.bundle = rename_main_bundle(out_dir, config.build.output_file_name)
        else:
            self.logger.info(
                'Browser bundle emitted by Angular (main-*.js). Load with <script type="module" src="main-*.js">.'
            )


__all__ = [
    "BROWSER_ENTRY_FILENAME",
    "GenerationResult",
    "MANIFEST_FILENAME",
    "MODULE_FILENAME",
    "Orchestrator",
    "TYPES_FILENAME",
    "normalize_elements_config",
]
