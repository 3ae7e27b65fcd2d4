"""
Cross-platform removal primitives.

Thin wrappers over os and shutil used by delete_or_trash and the trash
facilities. OSError propagates to the caller, which classifies it.
"""

import os
import shutil
import stat
import sys
from pathlib import Path

from . import IS_WINDOWS
from .paths import PathLike


def remove(path: PathLike) -> bool:
    """
    Remove a single file.

    Returns False if there was nothing to remove.
    """
    try:
        os.remove(os.fspath(path))
    except FileNotFoundError:
        return False
    except PermissionError:
        if not IS_WINDOWS:
            raise
        # Windows refuses to delete read-only files
        _clear_readonly(path)
        os.remove(os.fspath(path))
    return True


def rmtree(path: PathLike) -> None:
    """Remove a directory tree, including read-only entries on Windows."""
    if sys.version_info >= (3, 12):
        shutil.rmtree(os.fspath(path), onexc=_retry_writable)
    else:
        shutil.rmtree(os.fspath(path), onerror=_retry_writable)


def _retry_writable(func, path, exc) -> None:
    # onerror passes an exc_info tuple, onexc the exception itself
    if isinstance(exc, tuple):
        exc = exc[1]
    if not IS_WINDOWS or func not in (os.remove, os.unlink, os.rmdir):
        raise exc
    _clear_readonly(path)
    func(path)


def _clear_readonly(path: PathLike) -> None:
    os.chmod(os.fspath(path), stat.S_IWRITE)


def move(src: PathLike, dst: PathLike) -> None:
    """Move a file or directory, copying across devices when needed."""
    shutil.move(os.fspath(src), os.fspath(dst))


def numbered_name(name: str, number: int) -> str:
    """Number a name before its extension: sketch.pde, 2 -> sketch 2.pde."""
    if name.startswith(".") or "." not in name:
        return f"{name} {number}"
    stem, _, suffix = name.partition(".")
    return f"{stem} {number}.{suffix}"


def unique_name(directory: PathLike, name: str) -> str:
    """First of name, "name 2", "name 3", ... not yet taken in directory."""
    directory = Path(directory)
    candidate = name
    number = 1
    while os.path.lexists(directory / candidate):
        number += 1
        candidate = numbered_name(name, number)
    return candidate
