"""Adapters — bindings to the IDL generator.

Public re-exports for convenient access.
"""

from idlstage.adapters.base import CompileRequest, GeneratorAdapter
from idlstage.adapters.mock import MockGenerator
from idlstage.adapters.scrooge import ScroogeCommandAdapter

__all__ = [
    "CompileRequest",
    "GeneratorAdapter",
    "MockGenerator",
    "ScroogeCommandAdapter",
]
