# Copyright (c) 2024 Hostbridge Contributors
# MIT License

"""Hostbridge release metadata."""

from __future__ import annotations

__version__ = "0.1.0"
__author__ = "Hostbridge Contributors"
__codename__ = "Doorstep"

# Version info tuple for programmatic comparison
VERSION_INFO = (0, 1, 0)
