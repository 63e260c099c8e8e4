"""
Generate use case — stage IDL files and regenerate sources if stale.

This is the top-level orchestrator for one build phase: it loads
config, aggregates IDL files from all origins, checks staleness, and
invokes the generator through the coordinator when needed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from idlstage.adapters.base import GeneratorAdapter
from idlstage.core.config.loader import ConfigError, load_config
from idlstage.core.models.config import BuildConfig, PhasePaths
from idlstage.core.models.receipt import Receipt
from idlstage.core.services.aggregator import AggregatedSources, aggregate_sources
from idlstage.core.services.archive_extractor import ExtractionError
from idlstage.core.services.artifact_lookup import ArtifactIndex
from idlstage.core.services.generation import GenerationCoordinator, GenerationError
from idlstage.core.services.reference_walker import StagingError
from idlstage.core.services.staleness import (
    StalenessDecision,
    check_staleness,
    find_generated_files,
)

logger = logging.getLogger(__name__)

STATUS_GENERATED = "generated"
STATUS_UP_TO_DATE = "up-to-date"
STATUS_NOTHING = "nothing-to-compile"
STATUS_FAILED = "failed"


@dataclass
class GenerateResult:
    """Result of running one build phase."""

    phase: str = ""
    status: str = ""
    sources: AggregatedSources | None = None
    staleness: StalenessDecision | None = None
    receipt: Receipt | None = None
    compile_roots: list[Path] = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict:
        result: dict = {"phase": self.phase, "status": self.status}
        if self.error:
            result["error"] = self.error
            return result

        result["compile_roots"] = [str(p) for p in self.compile_roots]
        if self.sources:
            result["sources"] = self.sources.to_dict()
            result["files"] = sorted(str(f) for f in self.sources.files)
        if self.staleness:
            result["staleness"] = self.staleness.to_dict()
        if self.receipt:
            result["receipt"] = self.receipt.model_dump()
        return result


def run_generation(
    config_path: Path | None = None,
    *,
    config: BuildConfig | None = None,
    phase: str = "compile",
    generator: GeneratorAdapter | None = None,
    mock_mode: bool = False,
) -> GenerateResult:
    """Run the staging + generation pipeline for one phase.

    Args:
        config_path: Optional explicit path to idlstage.yml.
        config: Already-loaded config (takes precedence over config_path).
        phase: Build phase name ('compile' or 'test-compile').
        generator: Optional pre-built generator adapter.
        mock_mode: If True and no generator is given, use MockGenerator.

    Returns:
        GenerateResult. Build failures are reported in ``error``.
    """
    result = GenerateResult(phase=phase)

    # ── Load config ──────────────────────────────────────────────
    try:
        if config is None:
            config = load_config(config_path)
        paths = config.phase_paths(phase)
    except (ConfigError, ValueError) as e:
        result.status = STATUS_FAILED
        result.error = str(e)
        return result

    if generator is None:
        generator = _default_generator(config, mock_mode)

    try:
        _run_phase(config, paths, generator, result)
    except (NotADirectoryError, StagingError, ExtractionError, GenerationError) as e:
        result.status = STATUS_FAILED
        result.error = str(e)
    except OSError as e:
        result.status = STATUS_FAILED
        result.error = f"An IO error occurred: {e}"

    return result


def _run_phase(
    config: BuildConfig,
    paths: PhasePaths,
    generator: GeneratorAdapter,
    result: GenerateResult,
) -> None:
    sources = aggregate_sources(config, paths)
    result.sources = sources
    compile_roots = [paths.generator_output_directory]

    if not sources.files:
        logger.info("No thrift files to compile.")
        result.status = STATUS_NOTHING
        return

    outputs = find_generated_files(paths.output_directory)
    decision = check_staleness(
        sources.files,
        outputs,
        check=config.check_staleness,
        stale_millis=config.stale_millis,
    )
    result.staleness = decision

    if decision.up_to_date:
        logger.info("Generated thrift files up to date, skipping compile.")
        result.status = STATUS_UP_TO_DATE
        result.receipt = Receipt.skip(adapter=generator.name, reason="up to date")
        result.compile_roots = compile_roots
        return

    coordinator = GenerationCoordinator(generator)
    result.receipt = coordinator.generate(
        sources.files,
        paths.output_directory,
        paths.resources_output_directory,
        config,
        index=ArtifactIndex.build(sources.files),
    )
    result.status = STATUS_GENERATED
    result.compile_roots = compile_roots


def _default_generator(config: BuildConfig, mock_mode: bool) -> GeneratorAdapter:
    if mock_mode:
        from idlstage.adapters.mock import MockGenerator

        return MockGenerator()

    from idlstage.adapters.scrooge import ScroogeCommandAdapter

    return ScroogeCommandAdapter(
        command=config.generator.command,
        timeout=config.generator.timeout,
    )
