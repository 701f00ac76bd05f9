"""Error taxonomy for elementgen runs.

Every error here is fatal to a generation run. The CLI reports the message of
the first one raised and exits non-zero.
"""

from __future__ import annotations


class GeneratorError(RuntimeError):
    """Base class for authoring and configuration mistakes."""


class ConfigError(GeneratorError):
    """Raised when the generator configuration cannot be loaded or parsed."""


class ComponentReferenceUnparsableError(GeneratorError):
    """Raised when a ``path#Class`` reference cannot be split into both parts."""


class ComponentSourceNotFoundError(GeneratorError):
    """Raised when a component source file is missing or cannot be parsed."""


class ComponentClassNotResolvedError(GeneratorError):
    """Raised when a class name is absent or ambiguous."""


class UnnamedRegisteredComponentError(GeneratorError):
    """Raised when the registration marker sits on an anonymous class."""


class MissingRegistrationTagError(GeneratorError):
    """Raised when no tag can be determined for a marked class."""


class DuplicateTagError(GeneratorError):
    """Raised when two components in one run resolve to the same tag."""

    def __init__(self, tag: str, detail: str | None = None) -> None:
        message = f"Tag is duplicated: {tag}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)
        self.tag = tag


class BrowserOutputRequiresBuildTargetError(GeneratorError):
    """Raised when a browser bundle is requested without a build target."""


class UnsupportedOutputKindError(GeneratorError):
    """Raised when an unknown element output kind is requested."""


class BuildTargetError(GeneratorError):
    """Raised when a build target string cannot be parsed."""


__all__ = [
    "BrowserOutputRequiresBuildTargetError",
    "BuildTargetError",
    "ComponentClassNotResolvedError",
    "ComponentReferenceUnparsableError",
    "ComponentSourceNotFoundError",
    "ConfigError",
    "DuplicateTagError",
    "GeneratorError",
    "MissingRegistrationTagError",
    "UnnamedRegisteredComponentError",
    "UnsupportedOutputKindError",
]
