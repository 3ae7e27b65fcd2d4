"""
Native process environment table.

os.environ is a snapshot taken at interpreter startup: variables changed by
native code (a loaded library, an embedding host) never show up in it. Reads
here go to the C runtime's table through ctypes, so they always see the live
value. Writes go through os.environ, which forwards them to the native
putenv/unsetenv and keeps the mapping that subprocess hands to children in
step.

This is the only module in hostbridge that calls into native code for the
environment.

No locking is done. The environment is process-wide shared state: concurrent
writers to one name race with last-writer-wins, and readers may observe
either value.
"""

import ctypes
import os
from typing import Optional

from . import IS_WINDOWS


ERROR_ENVVAR_NOT_FOUND = 203


class EnvironmentTable:
    """Interface of an environment adapter."""

    def get(self, name: str) -> Optional[str]:
        raise NotImplementedError

    def set(self, name: str, value: str) -> None:
        raise NotImplementedError

    def unset(self, name: str) -> None:
        raise NotImplementedError


class NativeEnvironment(EnvironmentTable):
    """
    The real process environment.

    set() and unset() raise ValueError for names or values the OS cannot
    store and OSError when the native call fails.
    """

    def __init__(self):
        self._lib = None

    def _load(self):
        if self._lib is None:
            if IS_WINDOWS:
                lib = ctypes.WinDLL("kernel32", use_last_error=True)
                lib.GetEnvironmentVariableW.argtypes = [
                    ctypes.c_wchar_p,
                    ctypes.c_wchar_p,
                    ctypes.c_uint32,
                ]
                lib.GetEnvironmentVariableW.restype = ctypes.c_uint32
            else:
                # The running process's own symbols include libc
                lib = ctypes.CDLL(None, use_errno=True)
                lib.getenv.argtypes = [ctypes.c_char_p]
                lib.getenv.restype = ctypes.c_char_p
            self._lib = lib
        return self._lib

    def get(self, name: str) -> Optional[str]:
        if IS_WINDOWS:
            return self._get_windows(name)
        value = self._load().getenv(os.fsencode(name))
        if value is None:
            return None
        return os.fsdecode(value)

    def _get_windows(self, name: str) -> Optional[str]:
        lib = self._load()
        size = 256
        while True:
            buffer = ctypes.create_unicode_buffer(size)
            ctypes.set_last_error(0)
            length = lib.GetEnvironmentVariableW(name, buffer, size)
            if length == 0:
                if ctypes.get_last_error() == ERROR_ENVVAR_NOT_FOUND:
                    return None
                # Set to the empty string
                return ""
            if length < size:
                return buffer.value
            # Too small; length is the required size including the terminator
            size = length

    def set(self, name: str, value: str) -> None:
        os.environ[name] = value

    def unset(self, name: str) -> None:
        os.environ.pop(name, None)
        # The variable may exist natively without being in the snapshot
        os.unsetenv(name)
