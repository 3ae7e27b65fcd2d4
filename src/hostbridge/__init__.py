# Copyright (c) 2024 Hostbridge Contributors
# MIT License

"""
Hostbridge: platform seam for a desktop sketch editor.

One service object hides the OS-specific parts of a desktop application:

    - settings and sketchbook folder locations
    - opening URLs and folders with the OS handler
    - moving files to the Trash / Recycle Bin
    - reading and writing process environment variables

This package exposes the service accessors and release metadata.
"""

from __future__ import annotations

from hostbridge.release import __version__, __author__, __codename__
from hostbridge.service import PlatformService, get_service, init

__all__ = [
    "__version__",
    "__author__",
    "__codename__",
    "PlatformService",
    "get_service",
    "init",
]
