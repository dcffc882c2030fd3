"""Utility modules for evolvedash."""

from .project import PROJECT_ROOT_MARKERS, find_project_root, resolve_project_dir

__all__ = [
    "PROJECT_ROOT_MARKERS",
    "find_project_root",
    "resolve_project_dir",
]
