"""
Shared test fixtures and helpers.
"""

from __future__ import annotations

import os
import zipfile
from collections.abc import Callable
from pathlib import Path

import pytest

from idlstage.core.models.config import BuildConfig
from idlstage.core.models.project import ProjectNode


def set_mtime_ms(path: Path, millis: int) -> None:
    """Set a file's mtime (and atime) in epoch milliseconds."""
    ns = millis * 1_000_000
    os.utime(path, ns=(ns, ns))


@pytest.fixture
def touch_ms() -> Callable[[Path, int], None]:
    """Set a file's mtime in epoch milliseconds."""
    return set_mtime_ms


@pytest.fixture
def mtime_ms() -> Callable[[Path], int]:
    """Read a file's mtime in epoch milliseconds."""
    return lambda path: path.stat().st_mtime_ns // 1_000_000


@pytest.fixture
def write_file() -> Callable[..., Path]:
    """Write a file (creating parents), optionally with a fixed mtime."""

    def _write(path: Path, content: str = "namespace java test\n", millis: int | None = None) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        if millis is not None:
            set_mtime_ms(path, millis)
        return path

    return _write


@pytest.fixture
def make_jar() -> Callable[..., Path]:
    """Build a jar from a mapping of entry name to content."""

    def _make(path: Path, entries: dict[str, str], millis: int | None = None) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        with zipfile.ZipFile(path, "w") as jar:
            for name, content in entries.items():
                jar.writestr(name, content)
        if millis is not None:
            set_mtime_ms(path, millis)
        return path

    return _make


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """A module directory with an (empty) declaration file."""
    root = tmp_path / "service"
    root.mkdir()
    (root / "pom.xml").write_text("<project/>\n")
    return root


@pytest.fixture
def build_config(project_dir: Path) -> Callable[..., BuildConfig]:
    """Factory for a BuildConfig rooted at ``project_dir``."""

    def _make(project: ProjectNode | None = None, **options) -> BuildConfig:
        if project is None:
            project = ProjectNode(artifact_id="service", file=project_dir / "pom.xml")
        return BuildConfig(project=project, **options)

    return _make


@pytest.fixture
def damaged_jar(make_jar) -> Callable[..., Path]:
    """Build a one-entry stored jar, then damage it.

    ``damage="crc"`` flips a payload byte so the entry fails its CRC check;
    ``damage="method"`` rewrites the central directory to an unknown
    compression method.
    """

    def _make(path: Path, name: str = "user.thrift", content: str = "struct User {}", damage: str = "crc") -> Path:
        make_jar(path, {name: content})
        data = bytearray(path.read_bytes())
        if damage == "crc":
            at = data.index(content.encode())
            data[at] ^= 0xFF
        elif damage == "method":
            at = data.index(b"PK\x01\x02") + 10
            data[at : at + 2] = (99).to_bytes(2, "little")
        else:
            raise ValueError(f"unknown damage: {damage}")
        path.write_bytes(bytes(data))
        return path

    return _make
