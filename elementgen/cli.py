"""CLI entrypoint for elementgen."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import ELEMENT_OUTPUTS, GeneratorConfig, load_config
from .errors import GeneratorError
from .logging import configure_logging
from .normalizer import normalize_component_file
from .orchestrator import GenerationResult, Orchestrator


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="elementgen",
        description="Generate custom element manifests, typings and registration modules for Angular components.",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        help="Generator config (.json, .yml or .yaml). Without one, marked classes are discovered.",
    )
    parser.add_argument(
        "-o",
        "--out-dir",
        type=Path,
        help="Directory receiving the generated artifacts (defaults to dist/).",
    )
    parser.add_argument(
        "-t",
        "--tsconfig",
        type=Path,
        help="tsconfig.json used to locate component sources.",
    )
    parser.add_argument(
        "--root-dir",
        type=Path,
        help="Additional source directory to scan for components.",
    )
    parser.add_argument(
        "--output",
        action="append",
        choices=ELEMENT_OUTPUTS,
        dest="outputs",
        help="Element output to produce; repeat for several (defaults to manifest).",
    )
    parser.add_argument(
        "--build-target",
        help="Angular build target used for the browser bundle, e.g. myApp:build.",
    )
    parser.add_argument(
        "--normalize",
        action="append",
        type=Path,
        metavar="SOURCE",
        help="Add missing JIT defaults to the @Component metadata of SOURCE in place and exit; repeatable.",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        help="Also write a debug-level run log to this file.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Increase log verbosity for troubleshooting.",
    )
    return parser


def _resolve_config(args: argparse.Namespace) -> GeneratorConfig:
    if args.config is not None:
        config = load_config(args.config)
    else:
        config = GeneratorConfig(root=Path.cwd().resolve())

    # Command-line flags override the config file.
    if args.out_dir is not None:
        config.out_dir = args.out_dir.expanduser().resolve()
    if args.tsconfig is not None:
        config.tsconfig = args.tsconfig.expanduser().resolve()
    if args.root_dir is not None:
        config.root_dir = args.root_dir.expanduser().resolve()
    if args.outputs:
        config.element_outputs = list(args.outputs)
    if args.build_target:
        config.build.target = args.build_target
    return config


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for elementgen."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    if args.normalize:
        _normalize_sources(parser, args.normalize)
        return

    try:
        config = _resolve_config(args)
        result = Orchestrator().generate(config)
    except GeneratorError as exc:
        parser.exit(1, f"elementgen failed: {exc}\nRun with --verbose for more details.\n")

    _report(result)
    if not result.success:
        error = result.build.error if result.build is not None else None
        parser.exit(1, f"elementgen build failed: {error or 'unknown error'}\n")


def _normalize_sources(parser: argparse.ArgumentParser, sources: list[Path]) -> None:
    for source in sources:
        try:
            changed = normalize_component_file(source)
        except GeneratorError as exc:
            parser.exit(1, f"elementgen failed: {exc}\n")
        status = "normalized" if changed else "unchanged"
        print(f"{status}: {_relativize(source.resolve())}")


def _report(result: GenerationResult) -> None:
    print(f"Generated {len(result.components)} element(s)")
    for kind, path in result.artifacts.items():
        print(f"  {kind}: {_relativize(path)}")
    if result.bundle is not None:
        print(f"  bundle: {_relativize(result.bundle)}")


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
