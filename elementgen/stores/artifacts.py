"""Storage collaborator for generated artifacts."""

from __future__ import annotations

from pathlib import Path
from typing import List

from ..logging import get_logger


class ArtifactStore:
    """Writes generated artifacts to disk, creating parent directories on demand."""

    def __init__(self) -> None:
        self.logger = get_logger("store")
        self._written: List[Path] = []

    def write_text(self, path: Path, content: str) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        self._written.append(path)
        self.logger.debug("Wrote %s (%d bytes)", path, len(content.encode("utf-8")))
        return path

    @property
    def written(self) -> List[Path]:
        """Paths written by this store, in write order."""
        return list(self._written)


__all__ = ["ArtifactStore"]
