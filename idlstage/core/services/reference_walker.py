"""
Reference walker — stage IDL files from sibling projects of the build.

In a multi-module build the referenced projects may not be packaged
yet, so their IDL files are taken straight from their build output
directory (``<project dir>/target/<output dir>``) and copied into the
staging area under ``<staging>/<artifactId>/<relative path>``.

The whitelist is checked per node: a project that is not whitelisted
is still traversed, so its whitelisted references are staged.
"""

from __future__ import annotations

import logging
import shutil
from collections.abc import Iterable
from pathlib import Path
from urllib.parse import unquote

from idlstage.core.models.config import DEFAULT_INCLUDES
from idlstage.core.models.project import ProjectNode
from idlstage.core.services.file_matching import match_files

logger = logging.getLogger(__name__)

# Build output directory of every project, relative to its declaration file
BUILD_DIRECTORY = "target"


class StagingError(Exception):
    """Raised when referenced IDL files cannot be staged."""


def walk_references(
    project: ProjectNode,
    output_directory: str,
    whitelist: Iterable[str],
    staging_root: Path,
    files: list[Path] | None = None,
    *,
    includes: Iterable[str] = (DEFAULT_INCLUDES,),
    excludes: Iterable[str] = (),
) -> list[Path]:
    """Walk ``project`` and its references, staging whitelisted IDL outputs.

    Args:
        project: Node to start from (itself included).
        output_directory: Name of the output dir below ``target``
            (``classes`` or ``test-classes``).
        whitelist: Artifact IDs whose IDL files should be staged.
        staging_root: Root of the staging area.
        files: Accumulator to append to (a new list if None).
        includes: Patterns selecting IDL files in an output directory.
        excludes: Patterns removing files from the selection.

    Returns:
        The accumulator, with the staged copies appended.

    Raises:
        StagingError: If a file URI cannot be formed or a copy fails.
    """
    if files is None:
        files = []
    allowed = set(whitelist)
    includes = list(includes)
    excludes = list(excludes)

    visited: set[int] = set()
    stack = [project]
    while stack:
        node = stack.pop()
        if id(node) in visited:
            logger.debug("Already visited %s, skipping", node.artifact_id)
            continue
        visited.add(id(node))

        if node.artifact_id in allowed:
            files.extend(
                _stage_project(node, output_directory, staging_root, includes, excludes)
            )

        # Reverse so references are visited in name order
        for name in sorted(node.references, reverse=True):
            stack.append(node.references[name])

    return files


def _stage_project(
    node: ProjectNode,
    output_directory: str,
    staging_root: Path,
    includes: list[str],
    excludes: list[str],
) -> list[Path]:
    source_dir = node.base_dir / BUILD_DIRECTORY / output_directory
    if not source_dir.is_dir():
        logger.debug("No output directory %s for %s", source_dir, node.artifact_id)
        return []

    base_uri = file_uri(source_dir)
    dest_folder = staging_root / node.artifact_id
    staged: list[Path] = []
    for source in sorted(match_files(source_dir, includes, excludes)):
        rel_path = relativize(base_uri, file_uri(source))
        destination = dest_folder / rel_path
        logger.info("copying %s to %s", source, destination)
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(source, destination)
        except OSError as e:
            raise StagingError(f"Cannot copy {source} to {destination}: {e}") from e
        staged.append(destination)
    return staged


def file_uri(path: Path) -> str:
    """Canonical ``file://`` URI of a path (symlinks resolved)."""
    try:
        return path.resolve().as_uri()
    except (OSError, ValueError) as e:
        raise StagingError(f"error forming URI for {path}: {e}") from e


def relativize(base_uri: str, uri: str) -> str:
    """Relative path of ``uri`` below ``base_uri``.

    Raises:
        StagingError: If ``uri`` is not below ``base_uri``.
    """
    prefix = base_uri.rstrip("/") + "/"
    if not uri.startswith(prefix) or uri == prefix:
        raise StagingError(f"{uri} is not below {base_uri}")
    return unquote(uri[len(prefix):])
