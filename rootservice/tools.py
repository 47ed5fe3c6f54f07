"""Small path and file helpers."""

from __future__ import annotations

import os
import sys
from pathlib import Path


def exe_dir(path: str | None = None) -> str:
    """Directory part of ``path`` (the running program by default).

    Both ``/`` and ``\\`` count as separators; a path without one gives "".
    """
    if path is None:
        path = os.path.abspath(sys.argv[0] if sys.argv and sys.argv[0] else sys.executable)
    cut = max(path.rfind("/"), path.rfind("\\"))
    return path[:cut] if cut >= 0 else ""


def read_file(path: str | os.PathLike[str]) -> str:
    """Whole contents of a UTF-8 file, or "" if it cannot be opened."""
    try:
        data = Path(path).read_bytes()
    except OSError:
        return ""
    return data.decode("utf-8", errors="replace")