"""
Generator adapter base — the contract between the coordinator and the
IDL compiler.

The coordinator only talks to the compiler through this protocol, never
directly to a process or library. The compiler itself is a black box.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from pydantic import BaseModel, Field

from idlstage.core.models.receipt import Receipt


class CompileRequest(BaseModel):
    """Everything a generator needs for one invocation."""

    output_dir: Path
    input_files: list[Path] = Field(default_factory=list)
    include_dirs: list[Path] = Field(default_factory=list)
    namespace_map: dict[str, str] = Field(default_factory=dict)
    include_map: dict[str, str] = Field(default_factory=dict)
    language: str = "scala"
    opts: list[str] = Field(default_factory=list)


class GeneratorAdapter(ABC):
    """Abstract base class for IDL generators.

    Adapters NEVER raise from ``compile`` — failures are captured in
    the Receipt.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """The adapter identifier (e.g., 'scrooge', 'mock')."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the underlying generator can be launched.

        Should be fast and never raise.
        """

    @abstractmethod
    def validate(self, request: CompileRequest) -> tuple[bool, str]:
        """Validate that the request can be compiled.

        Returns:
            (is_valid, error_message). error_message is empty if valid.
        """

    @abstractmethod
    def compile(self, request: CompileRequest) -> Receipt:
        """Run the generator and return a receipt.

        MUST never raise exceptions.
        """

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
