"""Executable discovery for Quill.

Stylesheets are compiled by an external ``lessc`` binary, which may be
installed globally or as a dev dependency of the site.

Functions:
    find_executable: Locate an executable in PATH or node_modules.
"""

from __future__ import annotations

import shutil
from pathlib import Path


def find_executable(name: str, project_root: Path | None = None) -> str | None:
    """Find an executable in PATH or in the site's node_modules.

    Args:
        name: Name of the executable (e.g., 'lessc').
        project_root: Optional site root whose ``node_modules/.bin`` is
            searched after PATH.

    Returns:
        Full path to the executable if found, None otherwise.
    """
    found = shutil.which(name)
    if found:
        return found

    if project_root is not None:
        local = project_root / "node_modules" / ".bin" / name
        if local.exists():
            return str(local)

    return None
