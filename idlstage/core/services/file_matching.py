"""
Ant-style file matching — include/exclude globs below a root directory.

Patterns are relative to the root and use ``/`` separators:

    **/*.thrift        every .thrift file at any depth (including the root)
    api/*.thrift       .thrift files directly inside api/
    legacy/            everything below legacy/ (same as legacy/**)

``**`` spans zero or more directories, ``*`` and ``?`` stay inside one
path segment.
"""

from __future__ import annotations

import functools
import logging
import re
from collections.abc import Iterable
from pathlib import Path

logger = logging.getLogger(__name__)

# Version-control noise never considered a source file
DEFAULT_EXCLUDES: tuple[str, ...] = (
    "**/.git/**",
    "**/.svn/**",
    "**/.hg/**",
    "**/CVS/**",
    "**/.DS_Store",
)


@functools.lru_cache(maxsize=256)
def compile_pattern(pattern: str) -> re.Pattern[str]:
    """Translate an Ant-style pattern into an anchored regex."""
    pattern = pattern.strip().replace("\\", "/")
    if pattern.endswith("/"):
        pattern += "**"

    segments = pattern.split("/")
    regex = ""
    for i, segment in enumerate(segments):
        last = i == len(segments) - 1
        if segment == "**":
            regex += ".*" if last else "(?:.*/)?"
        else:
            regex += _segment_regex(segment) + ("" if last else "/")
    return re.compile(regex + r"\Z")


def _segment_regex(segment: str) -> str:
    out = []
    for ch in segment:
        if ch == "*":
            out.append("[^/]*")
        elif ch == "?":
            out.append("[^/]")
        else:
            out.append(re.escape(ch))
    return "".join(out)


def matches(relative_path: str, patterns: Iterable[str]) -> bool:
    """Whether a ``/``-separated relative path matches any pattern."""
    return any(compile_pattern(p).match(relative_path) for p in patterns if p.strip())


def match_files(
    root: Path,
    includes: Iterable[str],
    excludes: Iterable[str] = (),
) -> set[Path]:
    """Return regular files below ``root`` selected by the patterns.

    Args:
        root: Directory to scan.
        includes: Ant-style include patterns (a file must match one).
        excludes: Ant-style exclude patterns (a match removes the file).

    Returns:
        Set of paths, each ``root / <relative path>``.
    """
    includes = list(includes)
    excludes = [*excludes, *DEFAULT_EXCLUDES]

    found: set[Path] = set()
    if not root.is_dir():
        return found

    for path in root.rglob("*"):
        if not path.is_file():
            continue
        rel = path.relative_to(root).as_posix()
        if matches(rel, includes) and not matches(rel, excludes):
            found.add(root / rel)

    logger.debug("Matched %d files under %s", len(found), root)
    return found
