"""
Archive extraction — copy IDL files out of dependency jars.

Each artifact gets its own subdirectory of the staging area, so two
jars shipping a file with the same name never collide:

    <staging>/<artifactId>/<entry name inside the jar>

Every extracted copy gets the jar's mtime, not the entry's own
timestamp. Packaging tools often normalize entry timestamps, the jar
file's mtime is what actually changes when the dependency changes.
"""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
import zipfile
import zlib
from collections.abc import Iterable
from pathlib import Path

from idlstage.core.models.config import IDL_FILE_SUFFIX
from idlstage.core.models.project import ArtifactRef

logger = logging.getLogger(__name__)

ARCHIVE_SUFFIX = ".jar"


class ExtractionError(Exception):
    """Raised when an IDL entry of a readable jar cannot be extracted."""


def extract_idl_files(artifact: ArtifactRef, destination: Path) -> list[Path]:
    """Copy every IDL entry of one artifact's jar into the staging area.

    Missing, unreadable or non-jar artifacts, and jars whose directory
    cannot be opened, are skipped with a warning; some declared
    dependencies simply have nothing to extract. A jar that opens but
    has an entry that cannot be read is fatal: the entry is required and
    nothing partial is left behind.

    Args:
        artifact: The dependency to extract from.
        destination: Staging root; files land in ``destination/<artifactId>``.

    Returns:
        Paths of the extracted copies.

    Raises:
        ExtractionError: If an IDL entry cannot be read or written.
    """
    archive = artifact.file
    if archive is None or not _is_readable_archive(archive):
        logger.warning("dep %s isn't a file or can't be read", archive or artifact.artifact_id)
        return []

    logger.info("extracting thrift files from %s", archive)
    try:
        jar = zipfile.ZipFile(archive)
    except (zipfile.BadZipFile, OSError) as e:
        logger.warning("dep %s is not a readable archive: %s", archive, e)
        return []

    dest_folder = destination / artifact.artifact_id
    archive_mtime_ns = archive.stat().st_mtime_ns
    extracted: list[Path] = []
    with jar:
        for entry in jar.infolist():
            if entry.is_dir() or not entry.filename.endswith(IDL_FILE_SUFFIX):
                continue

            target = _entry_target(dest_folder, entry.filename)
            if target is None:
                logger.warning("skipping %s in %s: escapes staging dir", entry.filename, archive)
                continue

            logger.info("extracting %s to %s", entry.filename, target)
            _copy_entry(jar, entry, target, archive)
            set_mtime(target, archive_mtime_ns)
            extracted.append(target)

    return extracted


def extract_dependencies(artifacts: Iterable[ArtifactRef], destination: Path) -> list[Path]:
    """Extract IDL files from each artifact in turn, one jar open at a time."""
    extracted: list[Path] = []
    for artifact in artifacts:
        extracted.extend(extract_idl_files(artifact, destination))
    return extracted


def set_mtime(path: Path, mtime_ns: int) -> bool:
    """Set a file's mtime; failure is logged, not raised.

    If this fails the copy keeps its extraction-time mtime, which is
    never older than the archive, so the file can only look newer.
    """
    try:
        os.utime(path, ns=(mtime_ns, mtime_ns))
    except OSError as e:
        logger.warning("fail to set last modified time for %s: %s", path, e)
        return False
    return True


def _is_readable_archive(archive: Path) -> bool:
    return (
        archive.is_file()
        and os.access(archive, os.R_OK)
        and archive.name.endswith(ARCHIVE_SUFFIX)
    )


def _entry_target(dest_folder: Path, entry_name: str) -> Path | None:
    root = dest_folder.resolve()
    target = (root / entry_name).resolve()
    if not target.is_relative_to(root):
        return None
    return dest_folder / target.relative_to(root)


def _copy_entry(jar: zipfile.ZipFile, entry: zipfile.ZipInfo, target: Path, archive: Path) -> None:
    """Write one entry beside ``target``, moving it into place once fully read."""
    partial: Path | None = None
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            dir=target.parent, prefix=f".{target.name}.", suffix=".part", delete=False
        ) as dst:
            partial = Path(dst.name)
            with jar.open(entry) as src:
                shutil.copyfileobj(src, dst)
        os.replace(partial, target)
    except (zipfile.BadZipFile, zlib.error, NotImplementedError, RuntimeError, OSError) as e:
        if partial is not None:
            partial.unlink(missing_ok=True)
        raise ExtractionError(f"Cannot extract {entry.filename} from {archive}: {e}") from e
