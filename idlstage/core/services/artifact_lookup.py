"""
Artifact lookup — find the staged copy of an IDL file by artifact ID.

Staged files live under ``<staging>/<artifactId>/...``, so a file
belongs to an artifact when one of its path components is the artifact
ID. The index is built once per run and then answers every include
mapping without re-splitting paths.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path


class ArtifactIndex:
    """Map of ``(artifact ID, file name)`` to the first matching path.

    Paths are indexed in sorted order, so ties resolve the same way on
    every run.
    """

    def __init__(self) -> None:
        self._entries: dict[tuple[str, str], Path] = {}

    @classmethod
    def build(cls, files: Iterable[Path]) -> ArtifactIndex:
        index = cls()
        for path in sorted(files):
            for component in path.parts:
                index._entries.setdefault((component, path.name), path)
        return index

    def lookup(self, artifact_id: str, file_name: str) -> Path | None:
        """Path of ``file_name`` provided by ``artifact_id``, or None."""
        return self._entries.get((artifact_id, file_name))


def find_artifact_file(artifact_id: str, file_name: str, files: Iterable[Path]) -> Path | None:
    """One-off lookup without keeping an index around."""
    return ArtifactIndex.build(files).lookup(artifact_id, file_name)
