"""Storage backends used by the orchestrator."""

from .artifacts import ArtifactStore

__all__ = ["ArtifactStore"]
