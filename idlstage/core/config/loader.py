"""
Configuration loader — reads idlstage.yml into a BuildConfig.

This is the primary entry point for loading build configuration.
It reads YAML, validates against Pydantic schemas, and resolves every
relative path against the directory holding the config file.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from idlstage.core.models.config import BuildConfig
from idlstage.core.models.project import ArtifactRef, ProjectNode

logger = logging.getLogger(__name__)

# Default config filename
CONFIG_FILE = "idlstage.yml"


class ConfigError(Exception):
    """Raised when build configuration is invalid or missing."""


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Search for idlstage.yml starting from the given directory, walking up.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to idlstage.yml, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / CONFIG_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def load_config(path: Path | None = None) -> BuildConfig:
    """Load and validate build configuration.

    Args:
        path: Explicit path to idlstage.yml. If None, searches upward.

    Returns:
        Validated BuildConfig with absolute paths.

    Raises:
        ConfigError: If the file is missing or invalid.
    """
    if path is None:
        path = find_config_file()

    if path is None:
        raise ConfigError(f"No {CONFIG_FILE} found. Specify one with --config.")

    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading build config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    if "project" not in data:
        raise ConfigError(f"Missing 'project' section in {path}")

    try:
        config = BuildConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid build configuration: {e}") from e

    config = resolve_paths(config, path.parent.resolve())
    logger.info(
        "Loaded config for '%s' (%d dependency includes)",
        config.project.artifact_id,
        len(config.dependency_includes),
    )
    return config


def resolve_paths(config: BuildConfig, base_dir: Path) -> BuildConfig:
    """Return a copy of ``config`` with every relative path made absolute."""
    return config.model_copy(
        update={
            "project": _resolve_project(config.project, base_dir),
            "thrift_includes": [_absolute(p, base_dir) for p in config.thrift_includes],
        }
    )


def _resolve_project(node: ProjectNode, base_dir: Path) -> ProjectNode:
    return node.model_copy(
        update={
            "file": _absolute(node.file, base_dir),
            "artifacts": [_resolve_artifact(a, base_dir) for a in node.artifacts],
            "dependency_artifacts": [
                _resolve_artifact(a, base_dir) for a in node.dependency_artifacts
            ],
            "references": {
                name: _resolve_project(ref, base_dir)
                for name, ref in node.references.items()
            },
        }
    )


def _resolve_artifact(artifact: ArtifactRef, base_dir: Path) -> ArtifactRef:
    if artifact.file is None:
        return artifact
    return artifact.model_copy(update={"file": _absolute(artifact.file, base_dir)})


def _absolute(path: Path, base_dir: Path) -> Path:
    path = path.expanduser()
    return path if path.is_absolute() else (base_dir / path).resolve()
