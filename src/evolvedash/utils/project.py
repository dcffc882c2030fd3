"""
Project root discovery.

The project root is the directory holding evolvedash state (`.evolvedash/`
or `.evolvedash.json`) or, failing that, the enclosing git checkout.
Configured relative paths resolve against it.
"""

from pathlib import Path

# Checked in order at each level
PROJECT_ROOT_MARKERS = [
    ".evolvedash",  # State directory (database, spec, manifest)
    ".evolvedash.json",  # Project configuration
    ".git",  # Git repository
]


def find_project_root(start: Path | None = None) -> Path | None:
    """
    Search upward from `start` for a directory containing a project marker.

    Args:
        start: Directory to start from. Defaults to the current directory.

    Returns:
        The project root, or None if no marker was found up to the filesystem root.

    Example:
        >>> find_project_root(Path("/work/dash/frontend/src"))
        PosixPath('/work/dash')
    """
    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        if any((directory / marker).exists() for marker in PROJECT_ROOT_MARKERS):
            return directory
    return None


def resolve_project_dir(start: Path | None = None) -> Path:
    """
    Project root for `start`, or `start` itself when there is none.

    A fresh directory without markers is treated as its own project so
    `evolvedash init` can create the state directory there.
    """
    base = (start or Path.cwd()).resolve()
    return find_project_root(base) or base
