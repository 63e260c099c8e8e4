"""
Host project model — the read-only view of the build graph.

The build tool owns dependency resolution and the module graph; we only
read them. A ProjectNode carries the resolved artifacts, the declared
artifacts and the references to sibling/child projects of one module.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class ArtifactRef(BaseModel):
    """A dependency artifact as resolved by the host build tool.

    ``file`` is None for declared artifacts the build tool never
    resolved to a file.
    """

    model_config = ConfigDict(populate_by_name=True)

    artifact_id: str = Field(alias="artifactId")
    file: Path | None = None
    scope: str = "compile"

    @property
    def key(self) -> tuple[str, str]:
        return (self.artifact_id, str(self.file) if self.file else "")


class ProjectNode(BaseModel):
    """One project of the multi-module build.

    ``file`` is the project's declaration file (e.g. pom.xml); the
    project's build output lives under ``<file's directory>/target``.
    """

    model_config = ConfigDict(populate_by_name=True)

    artifact_id: str = Field(alias="artifactId")
    file: Path = Path("pom.xml")
    artifacts: list[ArtifactRef] = Field(default_factory=list)
    dependency_artifacts: list[ArtifactRef] = Field(
        default_factory=list, alias="dependencyArtifacts"
    )
    references: dict[str, ProjectNode] = Field(default_factory=dict)

    @property
    def base_dir(self) -> Path:
        """Directory containing the declaration file."""
        return self.file.parent

    def iter_artifact_ids(self) -> set[str]:
        """Artifact IDs reachable from this node (itself, deps, references)."""
        seen: set[int] = set()
        ids: set[str] = set()
        stack = [self]
        while stack:
            node = stack.pop()
            if id(node) in seen:
                continue
            seen.add(id(node))
            ids.add(node.artifact_id)
            ids.update(a.artifact_id for a in node.artifacts)
            ids.update(a.artifact_id for a in node.dependency_artifacts)
            stack.extend(node.references.values())
        return ids


ProjectNode.model_rebuild()
