"""
Scrooge adapter — run the Scrooge code generator as a subprocess.

The command line is built from a CompileRequest:

    <command> --dest <out> --language <lang>
              [--import-path a:b] [--namespace-map from->to ...]
              [--include-map name=path ...] <opts> <files>
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import time

from idlstage.adapters.base import CompileRequest, GeneratorAdapter
from idlstage.core.models.receipt import Receipt

logger = logging.getLogger(__name__)


class ScroogeCommandAdapter(GeneratorAdapter):
    """Invoke Scrooge through its command-line launcher.

    Args:
        command: argv prefix launching Scrooge (e.g. ``["scrooge"]`` or
            ``["java", "-jar", "scrooge-generator.jar"]``).
        timeout: Seconds before the process is abandoned.
    """

    def __init__(self, command: list[str] | None = None, timeout: int = 600):
        self._command = list(command or ["scrooge"])
        self._timeout = timeout

    @property
    def name(self) -> str:
        return "scrooge"

    def is_available(self) -> bool:
        return bool(self._command) and shutil.which(self._command[0]) is not None

    def validate(self, request: CompileRequest) -> tuple[bool, str]:
        if not self._command:
            return False, "No generator command configured"
        if not request.input_files:
            return False, "No input files to compile"
        if not request.language:
            return False, "No target language"
        return True, ""

    def build_command(self, request: CompileRequest) -> list[str]:
        """Translate a request into the generator's argv."""
        argv = [*self._command, "--dest", str(request.output_dir), "--language", request.language]
        if request.include_dirs:
            argv += ["--import-path", os.pathsep.join(str(d) for d in request.include_dirs)]
        for src, dst in request.namespace_map.items():
            argv += ["--namespace-map", f"{src}->{dst}"]
        for include, path in request.include_map.items():
            argv += ["--include-map", f"{include}={path}"]
        argv += request.opts
        argv += [str(f) for f in request.input_files]
        return argv

    def compile(self, request: CompileRequest) -> Receipt:
        valid, message = self.validate(request)
        if not valid:
            return Receipt.failure(adapter=self.name, error=message)

        argv = self.build_command(request)
        logger.debug("Executing: %s", " ".join(argv))
        start = time.monotonic()

        try:
            result = subprocess.run(
                argv,
                capture_output=True,
                text=True,
                timeout=self._timeout,
            )
        except subprocess.TimeoutExpired:
            return Receipt.failure(
                adapter=self.name,
                error=f"Generator timed out after {self._timeout}s",
                metadata={"command": argv, "timeout": self._timeout},
            )
        except OSError as e:
            return Receipt.failure(
                adapter=self.name,
                error=f"Generator execution error: {e}",
                metadata={"command": argv},
            )

        elapsed_ms = int((time.monotonic() - start) * 1000)
        output = result.stdout.strip()
        stderr = result.stderr.strip()

        if result.returncode == 0:
            return Receipt.success(
                adapter=self.name,
                output=output,
                duration_ms=elapsed_ms,
                metadata={"command": argv, "return_code": 0, "stderr": stderr},
            )
        return Receipt.failure(
            adapter=self.name,
            error=stderr or f"Generator exited with code {result.returncode}",
            duration_ms=elapsed_ms,
            metadata={"command": argv, "return_code": result.returncode, "stdout": output},
        )
