"""
Domain models — Pydantic types for the staging pipeline.

All models are re-exported here for convenient access:

    from idlstage.core.models import BuildConfig, ProjectNode, Receipt
"""

from idlstage.core.models.config import (
    BuildConfig,
    GeneratorSettings,
    IncludeMapping,
    PhasePaths,
    PhaseSettings,
    ThriftNamespaceMapping,
)
from idlstage.core.models.project import ArtifactRef, ProjectNode
from idlstage.core.models.receipt import Receipt

__all__ = [
    # project.py
    "ArtifactRef",
    # config.py
    "BuildConfig",
    "GeneratorSettings",
    "IncludeMapping",
    "PhasePaths",
    "PhaseSettings",
    "ProjectNode",
    # receipt.py
    "Receipt",
    "ThriftNamespaceMapping",
]
