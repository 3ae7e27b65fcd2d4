"""
Cross-platform handler launching.

Runs the OS opener commands (open, xdg-open, a configured launcher) that
hand URLs and folders to the desktop.
"""

import os
import shutil
import subprocess
import tempfile
from typing import IO, List, Optional, Sequence, Union

from . import IS_WINDOWS


CommandArg = Union[str, "os.PathLike[str]"]

# Tried in order on freedesktop systems
LINUX_OPENERS = (
    ("xdg-open",),
    ("gio", "open"),
    ("gnome-open",),
    ("kde-open",),
)

# Set by bundlers (PyInstaller, conda) for the app's own libraries; they
# break system binaries such as /bin/sh and xdg-open
_BUNDLER_ENV_VARS = (
    "LD_LIBRARY_PATH",
    "LD_PRELOAD",
    "PYTHONHOME",
    "PYTHONPATH",
)


class ProcessResult:
    """Result of a process execution."""

    def __init__(
        self,
        returncode: int,
        stdout: str,
        stderr: str,
        command: Sequence[CommandArg],
    ):
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        self.command = command

    @property
    def success(self) -> bool:
        """Check if process exited successfully."""
        return self.returncode == 0

    @property
    def failed(self) -> bool:
        """Check if process failed."""
        return self.returncode != 0

    def __repr__(self) -> str:
        return f"ProcessResult(returncode={self.returncode}, stdout={len(self.stdout)} chars)"


def run(
    cmd: Sequence[CommandArg],
    *,
    encoding: str = "utf-8",
) -> ProcessResult:
    """
    Run a command to completion and capture its output.

    The child inherits the process environment minus bundler variables.
    Output is collected in temporary files rather than pipes, so the call
    returns when the command exits even if it left a handler running in
    the background with our stdout/stderr.

    Raises:
        FileNotFoundError: If the executable does not exist
        OSError: If the process could not be started
    """
    env = dict(os.environ)
    for key in _BUNDLER_ENV_VARS:
        env.pop(key, None)

    with tempfile.TemporaryFile() as out, tempfile.TemporaryFile() as err:
        try:
            result = subprocess.run(
                [os.fspath(arg) for arg in cmd],
                env=env,
                stdin=subprocess.DEVNULL,
                stdout=out,
                stderr=err,
            )
        except FileNotFoundError as e:
            raise FileNotFoundError(f"Command not found: {os.fspath(cmd[0])}") from e

        stdout = _read_back(out, encoding)
        stderr = _read_back(err, encoding)

    return ProcessResult(
        returncode=result.returncode,
        stdout=stdout,
        stderr=stderr,
        command=cmd,
    )


def _read_back(f: IO[bytes], encoding: str) -> str:
    f.seek(0)
    return f.read().decode(encoding, errors="replace")


def start_file(target: str) -> None:
    """
    Open target with its Windows file association.

    Raises OSError if Windows has no association or cannot start it.
    """
    if not IS_WINDOWS:
        raise OSError("os.startfile is only available on Windows")
    os.startfile(target)  # type: ignore[attr-defined]


def which(program: str) -> Optional[str]:
    """
    Find the full path to an executable.

    Returns None if not found.
    """
    return shutil.which(program)


def is_command_available(program: str) -> bool:
    """Check if a command is available on the system."""
    return which(program) is not None


def find_linux_opener() -> Optional[List[str]]:
    """
    First desktop opener command installed, as an argument prefix.

    Returns None if none of them is on PATH.
    """
    for opener in LINUX_OPENERS:
        if is_command_available(opener[0]):
            return list(opener)
    return None


def has_desktop_session() -> bool:
    """Check if an X11 or Wayland display is reachable."""
    return bool(os.environ.get("DISPLAY") or os.environ.get("WAYLAND_DISPLAY"))
