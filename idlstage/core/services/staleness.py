"""
Staleness check — decide whether generated sources are still current.

Generation is skipped when every input is older than the newest
generated file, allowing for ``stale_millis`` of clock slack:

    skip  iff  check_staleness and newest_input + stale_millis < newest_output

All timestamps are epoch milliseconds.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from idlstage.core.services.file_matching import match_files

GENERATED_PATTERNS = ("**/*.java", "**/*.scala")


@dataclass(frozen=True)
class StalenessDecision:
    """Outcome of comparing input and output timestamps."""

    newest_input: int
    newest_output: int
    stale_millis: int
    checked: bool

    @property
    def up_to_date(self) -> bool:
        return self.checked and self.newest_input + self.stale_millis < self.newest_output

    @property
    def needs_generation(self) -> bool:
        return not self.up_to_date

    def to_dict(self) -> dict:
        return {
            "newest_input": self.newest_input,
            "newest_output": self.newest_output,
            "stale_millis": self.stale_millis,
            "checked": self.checked,
            "needs_generation": self.needs_generation,
        }


def mtime_millis(path: Path) -> int:
    return path.stat().st_mtime_ns // 1_000_000


def last_modified(files: Iterable[Path]) -> int:
    """Newest mtime among ``files`` in milliseconds (0 when empty)."""
    return max((mtime_millis(f) for f in files), default=0)


def find_generated_files(directory: Path | None) -> set[Path]:
    """Previously generated Java/Scala sources below ``directory``."""
    if directory is None or not directory.is_dir():
        return set()
    return match_files(directory, GENERATED_PATTERNS)


def check_staleness(
    inputs: Iterable[Path],
    outputs: Iterable[Path],
    *,
    check: bool = True,
    stale_millis: int = 0,
) -> StalenessDecision:
    """Compare the newest input against the newest output."""
    return StalenessDecision(
        newest_input=last_modified(inputs),
        newest_output=last_modified(outputs),
        stale_millis=stale_millis,
        checked=check,
    )
