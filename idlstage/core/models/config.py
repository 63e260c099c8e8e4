"""
Build configuration — the options that drive one staging/generation run.

Loaded from idlstage.yml by the config loader. Option names follow the
snake_case form; the camelCase names used by the Maven plugin are
accepted as aliases so existing plugin configuration can be pasted in.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from idlstage.core.models.project import ProjectNode

IDL_FILE_SUFFIX = ".thrift"
DEFAULT_INCLUDES = "**/*" + IDL_FILE_SUFFIX

# Subdirectory of the output directory the generator writes into
GENERATOR_OUTPUT_SUBDIR = "scrooge"


class ThriftNamespaceMapping(BaseModel):
    """Namespace remap passed verbatim to the generator."""

    model_config = ConfigDict(populate_by_name=True)

    from_: str = Field(alias="from")
    to: str


class IncludeMapping(BaseModel):
    """Maps an ``include`` file name to the artifact that provides it."""

    model_config = ConfigDict(populate_by_name=True)

    include: str
    artifact_id: str = Field(alias="artifactId")


class GeneratorSettings(BaseModel):
    """How to launch the generator process."""

    command: list[str] = Field(default_factory=lambda: ["scrooge"])
    timeout: int = Field(default=600, gt=0)


class PhaseSettings(BaseModel):
    """Per-phase directory overrides. Unset fields fall back to defaults."""

    model_config = ConfigDict(populate_by_name=True)

    source_root: str | None = Field(default=None, alias="thriftSourceRoot")
    output_directory: str | None = Field(default=None, alias="outputDirectory")
    resources_output_directory: str | None = Field(
        default=None, alias="resourcesOutputDirectory"
    )
    reference_output_directory: str | None = Field(
        default=None, alias="referenceOutputDirectory"
    )


# Relative to the project's base directory
DEFAULT_PHASES: dict[str, PhaseSettings] = {
    "compile": PhaseSettings(
        source_root="src/main/thrift",
        output_directory="target/generated-sources/scrooge",
        resources_output_directory="target/thrift_dependency",
        reference_output_directory="classes",
    ),
    "test-compile": PhaseSettings(
        source_root="src/test/thrift",
        output_directory="target/generated-test-sources/scrooge",
        resources_output_directory="target/thrift_test_dependency",
        reference_output_directory="test-classes",
    ),
}


@dataclass(frozen=True)
class PhasePaths:
    """Absolute directories for one build phase."""

    name: str
    source_root: Path
    output_directory: Path
    resources_output_directory: Path
    reference_output_directory: str

    @property
    def generator_output_directory(self) -> Path:
        return self.output_directory / GENERATOR_OUTPUT_SUBDIR


class BuildConfig(BaseModel):
    """Root configuration — loaded from idlstage.yml."""

    model_config = ConfigDict(populate_by_name=True)

    project: ProjectNode
    generator: GeneratorSettings = Field(default_factory=GeneratorSettings)

    # ── Generator options ────────────────────────────────────────
    thrift_includes: list[Path] = Field(default_factory=list, alias="thriftIncludes")
    language: str = "scala"
    thrift_opts: list[str] = Field(default_factory=list, alias="thriftOpts")
    thrift_namespace_mappings: list[ThriftNamespaceMapping] = Field(
        default_factory=list, alias="thriftNamespaceMappings"
    )
    include_mappings: list[IncludeMapping] = Field(
        default_factory=list, alias="includeMappings"
    )

    # ── Source selection ─────────────────────────────────────────
    dependency_includes: set[str] = Field(default_factory=set, alias="dependencyIncludes")
    includes: list[str] = Field(default_factory=lambda: [DEFAULT_INCLUDES])
    excludes: list[str] = Field(default_factory=list)

    # ── Staleness ────────────────────────────────────────────────
    fix_hashcode: bool = Field(default=False, alias="fixHashcode")
    check_staleness: bool = Field(default=True, alias="checkStaleness")
    stale_millis: int = Field(default=0, alias="staleMillis")

    phases: dict[str, PhaseSettings] = Field(default_factory=dict)

    def phase_names(self) -> list[str]:
        return sorted(set(DEFAULT_PHASES) | set(self.phases))

    def phase_paths(self, name: str) -> PhasePaths:
        """Resolve the directories of a phase against the project base dir.

        Raises:
            ValueError: If the phase is unknown or incompletely configured.
        """
        default = DEFAULT_PHASES.get(name, PhaseSettings())
        override = self.phases.get(name)
        if name not in DEFAULT_PHASES and override is None:
            raise ValueError(
                f"Unknown phase '{name}'. Known: {', '.join(self.phase_names())}"
            )

        merged = default.model_copy(
            update=override.model_dump(exclude_none=True) if override else {}
        )
        values = merged.model_dump()
        missing = [k for k, v in values.items() if v is None]
        if missing:
            raise ValueError(f"Phase '{name}' is missing: {', '.join(sorted(missing))}")

        base = self.project.base_dir
        return PhasePaths(
            name=name,
            source_root=base / values["source_root"],
            output_directory=base / values["output_directory"],
            resources_output_directory=base / values["resources_output_directory"],
            reference_output_directory=values["reference_output_directory"],
        )
