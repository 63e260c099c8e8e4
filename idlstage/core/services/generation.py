"""
Generation coordinator — the single, serialized generator invocation.

The generator's thread-safety is unknown, so every invocation in the
process goes through one lock owned by this class. Aggregation runs
outside the lock; only the clean + compile critical section is
serialized.
"""

from __future__ import annotations

import logging
import shutil
import threading
from collections.abc import Iterable
from pathlib import Path
from typing import ClassVar

from idlstage.adapters.base import CompileRequest, GeneratorAdapter
from idlstage.core.models.config import GENERATOR_OUTPUT_SUBDIR, BuildConfig
from idlstage.core.models.receipt import Receipt
from idlstage.core.services.artifact_lookup import ArtifactIndex

logger = logging.getLogger(__name__)


class GenerationError(Exception):
    """Raised when the output directory or the generator fails."""


class GenerationCoordinator:
    """Invoke the generator exactly once per call, one call at a time."""

    _lock: ClassVar[threading.Lock] = threading.Lock()

    def __init__(self, generator: GeneratorAdapter):
        self._generator = generator

    def generate(
        self,
        inputs: Iterable[Path],
        output_directory: Path,
        staging_root: Path,
        config: BuildConfig,
        index: ArtifactIndex | None = None,
    ) -> Receipt:
        """Clean ``output_directory`` and run the generator on ``inputs``.

        Args:
            inputs: Aggregated IDL files.
            output_directory: Phase output dir; the generator writes into
                its ``scrooge`` subdirectory.
            staging_root: Staging area, always on the include path.
            config: Options (includes, mappings, language, opts).
            index: Prebuilt artifact index over ``inputs``.

        Returns:
            The generator's success receipt.

        Raises:
            GenerationError: If cleaning fails or the generator fails.
        """
        files = sorted(inputs)
        if index is None:
            index = ArtifactIndex.build(files)

        with self._lock:
            prepare_output_directory(output_directory)
            request = build_compile_request(
                files, output_directory / GENERATOR_OUTPUT_SUBDIR, staging_root, config, index
            )
            logger.info("compiling thrift files %s with %s", [str(f) for f in files], self._generator.name)
            receipt = self._generator.compile(request)

        if receipt.failed:
            raise GenerationError(f"{self._generator.name} failed: {receipt.error}")
        return receipt


def prepare_output_directory(directory: Path) -> None:
    """Create ``directory`` if needed and delete everything inside it.

    Raises:
        GenerationError: On any filesystem failure.
    """
    try:
        directory.mkdir(parents=True, exist_ok=True)
        for child in directory.iterdir():
            if child.is_dir() and not child.is_symlink():
                shutil.rmtree(child)
            else:
                child.unlink()
    except OSError as e:
        raise GenerationError(f"Cannot prepare output directory {directory}: {e}") from e


def build_namespace_map(config: BuildConfig) -> dict[str, str]:
    # Later mappings for the same namespace win
    return {m.from_: m.to for m in config.thrift_namespace_mappings}


def build_include_map(config: BuildConfig, index: ArtifactIndex) -> dict[str, str]:
    """Resolve include mappings; unresolved ones are left out."""
    include_map: dict[str, str] = {}
    for mapping in config.include_mappings:
        found = index.lookup(mapping.artifact_id, mapping.include)
        if found is None:
            logger.debug(
                "include mapping %s -> %s not found, skipping",
                mapping.include, mapping.artifact_id,
            )
            continue
        include_map[mapping.include] = str(found)
    return include_map


def build_compile_request(
    files: list[Path],
    output_dir: Path,
    staging_root: Path,
    config: BuildConfig,
    index: ArtifactIndex,
) -> CompileRequest:
    include_dirs = list(dict.fromkeys([*config.thrift_includes, staging_root]))
    return CompileRequest(
        output_dir=output_dir,
        input_files=files,
        include_dirs=include_dirs,
        namespace_map=build_namespace_map(config),
        include_map=build_include_map(config, index),
        language=config.language,
        opts=list(config.thrift_opts),
    )
