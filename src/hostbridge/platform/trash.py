"""
OS trash facilities.

Each facility moves a file or directory somewhere the user can restore it
from. Which one applies is decided by the platform variant:

    Linux/BSD   freedesktop.org home trash ($XDG_DATA_HOME/Trash)
    macOS       ~/.Trash
    Windows     Recycle Bin via SHFileOperationW

Facilities raise OSError on failure; the service turns that into
IOFailureError.
"""

import configparser
import ctypes
import os
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Tuple
from urllib.parse import quote, unquote

from hostbridge.errors import SettingsUnavailableError

from . import IS_WINDOWS, fs
from .paths import PathLike, abspath, get_home_dir


DELETION_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"


@dataclass
class TrashEntry:
    """An item currently sitting in a trash facility."""
    name: str
    original_path: Optional[str]
    deleted_at: Optional[datetime]


class Trash:
    """Base class for trash facilities."""

    name = "trash"
    listable = False

    def available(self) -> bool:
        """Check if the facility can be used in this session."""
        raise NotImplementedError

    def move_to_trash(self, path: PathLike) -> str:
        """
        Move path (file or directory) into the trash.

        Returns the name the item was stored under.
        """
        raise NotImplementedError

    def list(self) -> List[TrashEntry]:
        """List items in the trash. Only facilities marked listable can."""
        raise NotImplementedError(f"{self.name} cannot be listed")

    def contains(self, original_path: PathLike) -> bool:
        """
        Check if an item trashed from original_path is in the trash.

        Always False for facilities that are not listable.
        """
        if not self.listable:
            return False
        target = abspath(original_path)
        return any(entry.original_path == target for entry in self.list())


class FreedesktopTrash(Trash):
    """
    Home trash as described by the freedesktop.org Trash specification.

    Trashed items live in ``files/``; for each one an ``info/<name>.trashinfo``
    file records the original location and deletion time.
    """

    name = "freedesktop trash"
    listable = True

    def __init__(self, root: Optional[PathLike] = None):
        self._root = Path(root) if root is not None else None

    @property
    def root(self) -> Path:
        if self._root is not None:
            return self._root
        data_home = os.environ.get("XDG_DATA_HOME")
        if not data_home or not os.path.isabs(data_home):
            data_home = os.fspath(get_home_dir("trash") / ".local" / "share")
        return Path(data_home) / "Trash"

    @property
    def files_dir(self) -> Path:
        return self.root / "files"

    @property
    def info_dir(self) -> Path:
        return self.root / "info"

    def available(self) -> bool:
        try:
            self._ensure_dirs()
        except (OSError, ValueError, SettingsUnavailableError):
            return False
        return os.access(self.files_dir, os.W_OK) and os.access(self.info_dir, os.W_OK)

    def _ensure_dirs(self) -> None:
        os.makedirs(self.files_dir, mode=0o700, exist_ok=True)
        os.makedirs(self.info_dir, mode=0o700, exist_ok=True)

    def move_to_trash(self, path: PathLike) -> str:
        source = abspath(path)
        self._ensure_dirs()

        name, info_path = self._reserve(source)
        target = self.files_dir / name
        try:
            fs.move(source, target)
        except OSError:
            # A move across filesystems copies first; whatever reached files/
            # keeps its info file so it can still be listed and restored
            if not os.path.lexists(target):
                os.remove(info_path)
            raise
        return name

    def _reserve(self, source: str) -> Tuple[str, Path]:
        """
        Claim a free name by creating its .trashinfo file exclusively.

        Another process may be trashing an item with the same name, so
        O_EXCL on the info file decides who owns the name.
        """
        basename = os.path.basename(source)
        number = 1
        while True:
            name = basename if number == 1 else fs.numbered_name(basename, number)
            number += 1
            if os.path.lexists(self.files_dir / name):
                continue

            info_path = self.info_dir / f"{name}.trashinfo"
            try:
                fd = os.open(info_path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o600)
            except FileExistsError:
                continue

            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(
                        "[Trash Info]\n"
                        f"Path={quote(source)}\n"
                        f"DeletionDate={datetime.now().strftime(DELETION_DATE_FORMAT)}\n"
                    )
            except OSError:
                os.remove(info_path)
                raise
            return name, info_path

    def list(self) -> List[TrashEntry]:
        if not self.info_dir.is_dir():
            return []

        entries = []
        for info_path in sorted(self.info_dir.glob("*.trashinfo")):
            name = info_path.name[: -len(".trashinfo")]
            if not os.path.lexists(self.files_dir / name):
                continue
            entries.append(self._read_info(name, info_path))
        return entries

    def _read_info(self, name: str, info_path: Path) -> TrashEntry:
        parser = configparser.ConfigParser(interpolation=None)
        try:
            parser.read(info_path, encoding="utf-8")
        except configparser.Error:
            return TrashEntry(name, None, None)

        original = parser.get("Trash Info", "Path", fallback=None)
        stamp = parser.get("Trash Info", "DeletionDate", fallback=None)
        deleted_at = None
        if stamp:
            try:
                deleted_at = datetime.strptime(stamp, DELETION_DATE_FORMAT)
            except ValueError:
                deleted_at = None
        if original is not None:
            original = unquote(original)
            if not os.path.isabs(original):
                # Relative paths are relative to the trash's top directory
                original = abspath(self.root.parent / original)
        return TrashEntry(name, original, deleted_at)

    def __repr__(self) -> str:
        return f"FreedesktopTrash({str(self.root)!r})"


class MacTrash(Trash):
    """The per-user ``~/.Trash`` folder of macOS."""

    name = "macOS Trash"
    listable = True

    def __init__(self, root: Optional[PathLike] = None):
        self._root = Path(root) if root is not None else None

    @property
    def root(self) -> Path:
        if self._root is not None:
            return self._root
        return get_home_dir("trash") / ".Trash"

    def available(self) -> bool:
        try:
            return self.root.is_dir()
        except (OSError, ValueError, SettingsUnavailableError):
            return False

    def move_to_trash(self, path: PathLike) -> str:
        source = abspath(path)
        name = fs.unique_name(self.root, os.path.basename(source))
        fs.move(source, self.root / name)
        return name

    def list(self) -> List[TrashEntry]:
        # Finder keeps no record of where trashed items came from
        return [
            TrashEntry(name, None, None)
            for name in sorted(os.listdir(self.root))
            if name != ".DS_Store"
        ]

    def contains(self, original_path: PathLike) -> bool:
        basename = os.path.basename(abspath(original_path))
        names = {entry.name for entry in self.list()}
        return basename in names or any(
            fs.numbered_name(basename, n) in names for n in range(2, len(names) + 2)
        )

    def __repr__(self) -> str:
        return f"MacTrash({str(self.root)!r})"


# SHFileOperationW constants
FO_DELETE = 0x0003
FOF_SILENT = 0x0004
FOF_NOCONFIRMATION = 0x0010
FOF_ALLOWUNDO = 0x0040
FOF_NOERRORUI = 0x0400


class RecycleBin(Trash):
    """
    The Windows Recycle Bin.

    SHFileOperationW with FOF_ALLOWUNDO sends items to the bin instead of
    deleting them. The bin's contents are not listed.
    """

    name = "Recycle Bin"
    listable = False

    def available(self) -> bool:
        return IS_WINDOWS

    def move_to_trash(self, path: PathLike) -> str:
        source = abspath(path)
        if not os.path.lexists(source):
            raise FileNotFoundError(2, "No such file or directory", source)

        from ctypes import wintypes

        class SHFILEOPSTRUCTW(ctypes.Structure):
            _fields_ = [
                ("hwnd", wintypes.HWND),
                ("wFunc", wintypes.UINT),
                ("pFrom", wintypes.LPCWSTR),
                ("pTo", wintypes.LPCWSTR),
                ("fFlags", ctypes.c_uint16),
                ("fAnyOperationsAborted", wintypes.BOOL),
                ("hNameMappings", ctypes.c_void_p),
                ("lpszProgressTitle", wintypes.LPCWSTR),
            ]

        # pFrom is a list of paths terminated by an empty string
        buffer = ctypes.create_unicode_buffer(source + "\0")
        op = SHFILEOPSTRUCTW()
        op.hwnd = None
        op.wFunc = FO_DELETE
        op.pFrom = ctypes.cast(buffer, wintypes.LPCWSTR)
        op.pTo = None
        op.fFlags = FOF_ALLOWUNDO | FOF_NOCONFIRMATION | FOF_NOERRORUI | FOF_SILENT

        result = ctypes.windll.shell32.SHFileOperationW(ctypes.byref(op))
        if result != 0:
            raise OSError(result, f"SHFileOperationW failed with code {result:#x}", source)
        if op.fAnyOperationsAborted:
            raise OSError(0, "Recycle operation was aborted", source)
        return os.path.basename(source)

    def __repr__(self) -> str:
        return "RecycleBin()"
