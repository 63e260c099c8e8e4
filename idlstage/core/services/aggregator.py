"""
Source aggregation — the full set of IDL files for one build phase.

Three origins are merged:

    1. the local source root (e.g. src/main/thrift)
    2. the staging area, after whitelisted dependency jars are extracted
    3. IDL files staged from referenced projects of the build

Deduplication is by path. The same logical file reached through two
different paths stays two entries.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from idlstage.core.models.config import BuildConfig, PhasePaths
from idlstage.core.services.archive_extractor import extract_dependencies
from idlstage.core.services.dependency_filter import filter_dependencies
from idlstage.core.services.file_matching import match_files
from idlstage.core.services.reference_walker import walk_references

logger = logging.getLogger(__name__)


@dataclass
class AggregatedSources:
    """IDL files of one phase, with per-origin counts for reporting."""

    files: set[Path] = field(default_factory=set)
    local: int = 0
    extracted: int = 0
    referenced: int = 0

    @property
    def total(self) -> int:
        return len(self.files)

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "local": self.local,
            "extracted": self.extracted,
            "referenced": self.referenced,
        }


def find_idl_files(
    directory: Path,
    includes: Iterable[str],
    excludes: Iterable[str] = (),
) -> set[Path]:
    """Find IDL files in a directory.

    Raises:
        NotADirectoryError: If ``directory`` is missing or not a directory.
    """
    if not directory.is_dir():
        raise NotADirectoryError(f"{directory} is not a directory")
    return match_files(directory, includes, excludes)


def aggregate_sources(config: BuildConfig, phase: PhasePaths) -> AggregatedSources:
    """Build the complete, deduplicated IDL file set for a phase.

    Side effects: populates ``phase.resources_output_directory`` with
    files extracted from dependencies and copied from references.
    """
    result = AggregatedSources()
    staging = phase.resources_output_directory

    # ── Local sources ────────────────────────────────────────────
    if phase.source_root.exists():
        local = find_idl_files(phase.source_root, config.includes, config.excludes)
        result.files |= local
        result.local = len(local)
    else:
        logger.debug("No local source root at %s", phase.source_root)

    # ── Dependency archives ──────────────────────────────────────
    logger.info("finding thrift files in dependencies")
    project = config.project
    dependencies = filter_dependencies(
        config.dependency_includes,
        project.artifacts,
        project.dependency_artifacts,
    )
    extract_dependencies(dependencies, staging)
    if staging.exists():
        staged = find_idl_files(staging, config.includes, config.excludes)
        result.files |= staged
        result.extracted = len(staged)

    # ── Referenced projects ──────────────────────────────────────
    logger.info("finding thrift files in referenced (reactor) projects")
    referenced = walk_references(
        project,
        phase.reference_output_directory,
        config.dependency_includes,
        staging,
        includes=config.includes,
        excludes=config.excludes,
    )
    result.files.update(referenced)
    result.referenced = len(referenced)

    logger.info(
        "Aggregated %d thrift files (local=%d, staged=%d, referenced=%d)",
        result.total, result.local, result.extracted, result.referenced,
    )
    return result
