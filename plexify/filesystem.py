"""Filesystem operations used by the scanner and the plan applier.

Every OSError is translated into a FileSystemError subclass so callers can
tell a missing path from an occupied one, a permission problem, or any
other I/O failure.
"""

import errno
import logging
import os
import shutil
from pathlib import Path

from .errors import (
    FileSystemError,
    FileSystemIOError,
    PathExistsError,
    PathNotFoundError,
    PermissionDeniedError,
)

log = logging.getLogger(__name__)


def _translate(exc: OSError, path: Path) -> FileSystemError:
    if isinstance(exc, FileNotFoundError):
        return PathNotFoundError(path, "No such file or directory")
    if isinstance(exc, FileExistsError) or exc.errno == errno.ENOTEMPTY:
        return PathExistsError(path, "Already exists")
    if isinstance(exc, PermissionError):
        return PermissionDeniedError(path, "Permission denied")
    return FileSystemIOError(path, exc.strerror or str(exc))


def exists(path: Path) -> bool:
    """True if *path* exists. Broken symlinks count as existing."""
    return os.path.lexists(path)


def is_directory(path: Path) -> bool:
    return path.is_dir()


def same_file(first: Path, second: Path) -> bool:
    """
    Check whether two paths name the same filesystem object.

    Compares device and inode, so aliases created by symlinks, bind mounts
    or case-insensitive filesystems are detected.
    """
    try:
        a = os.stat(first)
        b = os.stat(second)
    except FileNotFoundError:
        return False
    except OSError as e:
        raise _translate(e, first) from e
    return (a.st_dev, a.st_ino) == (b.st_dev, b.st_ino)


def file_size(path: Path) -> int:
    try:
        return path.stat().st_size
    except OSError as e:
        raise _translate(e, path) from e


def list_directory(path: Path) -> list[Path]:
    """Immediate children of *path*, hidden entries skipped, sorted by name."""
    try:
        with os.scandir(path) as entries:
            names = sorted(entry.name for entry in entries if not entry.name.startswith('.'))
    except OSError as e:
        raise _translate(e, path) from e
    return [path / name for name in names]


def create_directory(path: Path) -> None:
    try:
        path.mkdir()
    except OSError as e:
        raise _translate(e, path) from e
    log.debug("Created directory %s", path)


def move(source: Path, destination: Path) -> None:
    """
    Move a file or folder.

    Raises:
        PathExistsError: If *destination* exists (nothing is overwritten)
        PathNotFoundError: If *source* does not exist
    """
    if exists(destination) and not _is_case_rename(source, destination):
        raise PathExistsError(destination, "Destination already exists")
    try:
        os.rename(source, destination)
    except OSError as e:
        if e.errno != errno.EXDEV:
            raise _translate(e, source) from e
        # Different device: fall back to copy + delete.
        try:
            shutil.move(str(source), str(destination))
        except OSError as e2:
            raise _translate(e2, source) from e2
    log.debug("Moved %s -> %s", source, destination)


def remove_empty_directory(path: Path) -> None:
    try:
        path.rmdir()
    except OSError as e:
        raise _translate(e, path) from e
    log.debug("Removed directory %s", path)


def _is_case_rename(source: Path, destination: Path) -> bool:
    """'movie.mkv' -> 'Movie.mkv' on a case-insensitive filesystem."""
    return (
        source.parent == destination.parent
        and source.name != destination.name
        and source.name.lower() == destination.name.lower()
        and same_file(source, destination)
    )
