"""
Mock generator — test double for the IDL compiler.

Records every request and returns a configurable receipt. Optionally
writes one placeholder source per input so staleness checks see output.
"""

from __future__ import annotations

from idlstage.adapters.base import CompileRequest, GeneratorAdapter
from idlstage.core.models.receipt import Receipt


class MockGenerator(GeneratorAdapter):
    """Generator that never launches anything.

    By default returns success. ``set_failure`` makes the next calls fail.
    """

    def __init__(
        self,
        adapter_name: str = "mock",
        available: bool = True,
        write_outputs: bool = True,
    ):
        self._name = adapter_name
        self._available = available
        self._write_outputs = write_outputs
        self._response: Receipt | None = None
        self._call_log: list[CompileRequest] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def call_log(self) -> list[CompileRequest]:
        """All requests this mock has received."""
        return self._call_log

    @property
    def call_count(self) -> int:
        return len(self._call_log)

    def is_available(self) -> bool:
        return self._available

    def set_failure(self, error: str = "Mock failure") -> None:
        """Configure subsequent compiles to fail."""
        self._response = Receipt.failure(adapter=self._name, error=error)

    def reset(self) -> None:
        self._response = None
        self._call_log.clear()

    def validate(self, request: CompileRequest) -> tuple[bool, str]:
        return True, ""

    def compile(self, request: CompileRequest) -> Receipt:
        self._call_log.append(request)
        if self._response is not None:
            return self._response

        written = []
        if self._write_outputs:
            request.output_dir.mkdir(parents=True, exist_ok=True)
            suffix = ".java" if request.language == "java" else ".scala"
            for source in request.input_files:
                target = request.output_dir / (source.stem.capitalize() + suffix)
                target.write_text(f"// generated from {source.name}\n", encoding="utf-8")
                written.append(str(target))

        return Receipt.success(
            adapter=self._name,
            output=f"[mock] compiled {len(request.input_files)} files",
            metadata={"written": written},
        )
