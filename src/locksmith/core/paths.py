"""Executable-path discovery used to pick a default key file location."""

from __future__ import annotations

import os
import sys
from typing import Optional

from .exceptions import PathResolutionError


KEY_FILE_EXTENSION = ".key"


def executable_path() -> str:
    """Return the absolute path of the running program.

    Frozen applications (PyInstaller and friends) report their binary through
    ``sys.executable``; a regular interpreter run is identified by the script
    in ``sys.argv[0]``.
    """
    if getattr(sys, "frozen", False) and sys.executable:
        return os.path.abspath(sys.executable)

    argv0 = sys.argv[0] if sys.argv else ""
    # "-c" and "" mean there is no script on disk to sit next to
    if not argv0 or argv0 == "-c":
        raise PathResolutionError("executable path not found")
    return os.path.abspath(argv0)


def default_key_path(executable: Optional[str] = None) -> str:
    """
    Return the key file path that sits next to ``executable``.

    The file name is the executable's base name up to its first dot with
    ``.key`` appended, e.g. ``/opt/app/server.bin`` -> ``/opt/app/server.key``.
    """
    if executable is None:
        executable = executable_path()

    directory = os.path.dirname(executable)
    stem = os.path.basename(executable).split(".", 1)[0]
    return os.path.join(directory, stem + KEY_FILE_EXTENSION)
