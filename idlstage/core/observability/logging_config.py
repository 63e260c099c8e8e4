"""
Logging configuration for idlstage runs.

idlstage usually runs inside a host build, so setup only ever touches the
handlers it installed itself; handlers the host (or pytest) attached to
the root logger are left alone.

The level comes from the CLI flags, then ``IDLSTAGE_LOG_LEVEL``, then
WARNING. ``IDLSTAGE_LOG_FILE`` adds a file handler, optionally at its own
level (``IDLSTAGE_LOG_FILE_LEVEL``); the file always gets the detailed
format so a parallel build's interleaved phases can be told apart.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Mapping
from dataclasses import dataclass

ENV_LEVEL = "IDLSTAGE_LOG_LEVEL"
ENV_FILE = "IDLSTAGE_LOG_FILE"
ENV_FILE_LEVEL = "IDLSTAGE_LOG_FILE_LEVEL"

# Marks the handlers setup_logging owns
_HANDLER_TAG = "_idlstage_handler"

# (upper bound, format, datefmt), checked in order
_CONSOLE_FORMATS: tuple[tuple[int, str, str | None], ...] = (
    (logging.DEBUG, "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d %(message)s", "%H:%M:%S"),
    (logging.INFO, "[idlstage] %(message)s", None),
)
_CONSOLE_DEFAULT = "[idlstage] %(levelname)s: %(message)s"

_FILE_FORMAT = "%(asctime)s %(levelname)-5s [%(threadName)s] %(name)s:%(lineno)d %(message)s"
_FILE_DATEFMT = "%Y-%m-%d %H:%M:%S"


@dataclass(frozen=True)
class LogSettings:
    """Resolved logging options for one process."""

    level: int = logging.WARNING
    log_file: str | None = None
    file_level: int | None = None

    @classmethod
    def from_options(
        cls,
        debug: bool = False,
        verbose: bool = False,
        quiet: bool = False,
        environ: Mapping[str, str] | None = None,
    ) -> LogSettings:
        """Combine CLI flags with the IDLSTAGE_* environment variables.

        ``--debug`` wins over ``--verbose``, which wins over ``--quiet``.
        """
        env = os.environ if environ is None else environ
        if debug:
            level = logging.DEBUG
        elif verbose:
            level = logging.INFO
        elif quiet:
            level = logging.ERROR
        else:
            level = parse_level(env.get(ENV_LEVEL))

        file_level = env.get(ENV_FILE_LEVEL)
        return cls(
            level=level,
            log_file=env.get(ENV_FILE) or None,
            file_level=parse_level(file_level) if file_level else None,
        )


def setup_logging(settings: LogSettings) -> None:
    """Install idlstage's console (stderr) and optional file handlers.

    Calling it again replaces the handlers from the previous call.
    """
    root = logging.getLogger()
    for handler in [h for h in root.handlers if getattr(h, _HANDLER_TAG, False)]:
        root.removeHandler(handler)
        handler.close()

    fmt, datefmt = console_format(settings.level)
    console = logging.StreamHandler(sys.stderr)
    console.setLevel(settings.level)
    console.setFormatter(logging.Formatter(fmt, datefmt=datefmt))
    _install(root, console)

    effective = settings.level
    if settings.log_file:
        file_level = settings.file_level if settings.file_level is not None else settings.level
        effective = min(effective, file_level)
        fh = logging.FileHandler(settings.log_file, encoding="utf-8")
        fh.setLevel(file_level)
        fh.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt=_FILE_DATEFMT))
        _install(root, fh)

    root.setLevel(effective)
    logging.raiseExceptions = False


def console_format(level: int) -> tuple[str, str | None]:
    """Pick the console format for a level: chattier levels get more context."""
    for bound, fmt, datefmt in _CONSOLE_FORMATS:
        if level <= bound:
            return fmt, datefmt
    return _CONSOLE_DEFAULT, None


def parse_level(level: str | None) -> int:
    """Convert a level name to its numeric value; unknown names mean WARNING."""
    if not level:
        return logging.WARNING
    numeric = logging.getLevelName(level.strip().upper())
    return numeric if isinstance(numeric, int) else logging.WARNING


def _install(root: logging.Logger, handler: logging.Handler) -> None:
    setattr(handler, _HANDLER_TAG, True)
    root.addHandler(handler)
