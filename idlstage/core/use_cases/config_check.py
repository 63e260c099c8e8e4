"""
Config check use case — validate idlstage.yml and report issues.
"""

from __future__ import annotations

import shutil
from dataclasses import dataclass, field
from pathlib import Path

from idlstage.core.config.loader import ConfigError, find_config_file, load_config
from idlstage.core.models.config import BuildConfig


@dataclass
class ConfigCheckResult:
    """Result of configuration validation."""

    valid: bool = False
    config: BuildConfig | None = None
    config_path: Path | None = None
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "valid": self.valid,
            "config_path": str(self.config_path) if self.config_path else None,
            "errors": self.errors,
            "warnings": self.warnings,
            "artifact_id": self.config.project.artifact_id if self.config else None,
            "dependency_includes": sorted(self.config.dependency_includes) if self.config else [],
            "phases": self.config.phase_names() if self.config else [],
        }


def check_config(config_path: Path | None = None) -> ConfigCheckResult:
    """Validate build configuration and report issues.

    Args:
        config_path: Optional explicit path to idlstage.yml.

    Returns:
        ConfigCheckResult with validation status and any issues.
    """
    result = ConfigCheckResult()

    if config_path is None:
        config_path = find_config_file()
    if config_path is None:
        result.errors.append("No idlstage.yml found.")
        return result
    result.config_path = config_path

    # Load and validate
    try:
        config = load_config(config_path)
        result.config = config
    except ConfigError as e:
        result.errors.append(str(e))
        return result

    # Phases must resolve
    for name in config.phase_names():
        try:
            config.phase_paths(name)
        except ValueError as e:
            result.errors.append(str(e))

    # Semantic checks
    known_ids = config.project.iter_artifact_ids()
    unknown = sorted(config.dependency_includes - known_ids)
    if unknown:
        result.warnings.append(
            f"Dependency includes not found in the project model: {', '.join(unknown)}"
        )

    for mapping in config.include_mappings:
        if mapping.artifact_id not in config.dependency_includes:
            result.warnings.append(
                f"Include mapping '{mapping.include}' points at '{mapping.artifact_id}', "
                "which is not in dependency_includes"
            )

    namespaces = [m.from_ for m in config.thrift_namespace_mappings]
    dupes = {n for n in namespaces if namespaces.count(n) > 1}
    if dupes:
        result.warnings.append(
            f"Duplicate namespace mappings (last one wins): {', '.join(sorted(dupes))}"
        )

    for include_dir in config.thrift_includes:
        if not include_dir.is_dir():
            result.warnings.append(f"Thrift include directory does not exist: {include_dir}")

    if config.stale_millis < 0:
        result.warnings.append(
            f"stale_millis is negative ({config.stale_millis}); outputs must be newer by that much"
        )

    if config.fix_hashcode:
        result.warnings.append("fix_hashcode is accepted but has no effect.")

    command = config.generator.command
    if not command:
        result.errors.append("generator.command is empty.")
    elif shutil.which(command[0]) is None:
        result.warnings.append(f"Generator command not found on PATH: {command[0]}")

    result.valid = len(result.errors) == 0
    return result
