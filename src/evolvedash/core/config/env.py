"""Environment loading helpers.

Generator credentials (API keys for the code-generation CLI) and EVOLVEDASH_*
overrides usually live in .env files rather than the shell.

Precedence:
  os.environ (pre-existing) > project .env files > user .env files

Later files in each group override earlier ones.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable

from dotenv import dotenv_values


def _merge_env_files(paths: Iterable[Path]) -> dict[str, str]:
    merged: dict[str, str] = {}
    for path in paths:
        path = Path(path)
        if not path.is_file():
            continue
        merged.update(
            {str(k): str(v) for k, v in dotenv_values(path).items() if k and v is not None}
        )
    return merged


def default_user_env_paths() -> list[Path]:
    """`$XDG_CONFIG_HOME/evolvedash/.env`."""
    xdg_home = Path(os.environ.get("XDG_CONFIG_HOME", str(Path.home() / ".config")))
    return [xdg_home / "evolvedash" / ".env"]


def load_layered_env(
    *,
    project_dir: Path | None = None,
    user_env_paths: Iterable[Path] | None = None,
    project_env_paths: Iterable[Path] | None = None,
) -> dict[str, str]:
    """Export variables from user and project .env files into os.environ.

    Args:
        project_dir: base directory for `.env` and `.env.local` (defaults to cwd)
        user_env_paths: explicit user env file paths
        project_env_paths: explicit project env file paths

    Returns:
        The variables this call exported.
    """
    if user_env_paths is None:
        user_env_paths = default_user_env_paths()
    if project_env_paths is None:
        base = project_dir or Path.cwd()
        project_env_paths = [base / ".env", base / ".env.local"]

    layered = _merge_env_files(user_env_paths)
    layered.update(_merge_env_files(project_env_paths))

    # Snapshot before exporting so one file can't shadow the shell
    applied = {k: v for k, v in layered.items() if k not in os.environ}
    os.environ.update(applied)
    return applied
