"""Pick the dependency artifacts whose IDL files should be extracted."""

from __future__ import annotations

from collections.abc import Iterable

from idlstage.core.models.project import ArtifactRef


def filter_dependencies(
    whitelist: Iterable[str],
    artifacts: Iterable[ArtifactRef],
    dependency_artifacts: Iterable[ArtifactRef] = (),
) -> list[ArtifactRef]:
    """Intersect resolved + declared artifacts with the artifact-ID whitelist.

    Declared artifacts are consulted as well because, depending on the
    build tool's state, a declared-but-not-transitively-resolved entry may
    still carry a usable file. Duplicates (same ID and file) collapse.
    """
    allowed = set(whitelist)
    selected: dict[tuple[str, str], ArtifactRef] = {}
    for artifact in [*artifacts, *dependency_artifacts]:
        if artifact.artifact_id in allowed:
            selected.setdefault(artifact.key, artifact)
    return list(selected.values())
