"""
Subprocess execution shared by the CLI-based backends.
"""

import logging
import os
import subprocess
import time
from pathlib import Path

from .models import HarnessResult

logger = logging.getLogger(__name__)


def run_tool(
    argv: list[str],
    prompt: str,
    *,
    working_dir: Path,
    timeout: float,
    env: dict[str, str] | None = None,
) -> HarnessResult:
    """
    Run a generator tool with the prompt on stdin.

    Launch failures, timeouts and non-zero exits are reported in the
    returned HarnessResult rather than raised.

    Args:
        argv: Command and arguments
        prompt: Text written to the tool's stdin
        working_dir: Directory the tool runs in
        timeout: Seconds before the tool is killed
        env: Extra environment variables for the tool

    Returns:
        HarnessResult with raw stdout as `output`
    """
    subprocess_env = os.environ.copy()
    subprocess_env["EVOLVEDASH_GENERATOR_ACTIVE"] = "1"
    if env:
        subprocess_env.update(env)

    logger.debug("Running generator: %s (cwd=%s, timeout=%ss)", argv[0], working_dir, timeout)
    start_time = time.time()

    try:
        result = subprocess.run(
            argv,
            input=prompt,
            text=True,
            capture_output=True,
            check=False,
            cwd=working_dir,
            env=subprocess_env,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired as e:
        return HarnessResult(
            output=_as_text(e.stdout),
            stderr=_as_text(e.stderr),
            duration_seconds=time.time() - start_time,
            exit_code=-1,
            error=f"{argv[0]} timed out after {timeout:g} seconds",
            timed_out=True,
        )
    except OSError as e:
        return HarnessResult(
            duration_seconds=time.time() - start_time,
            exit_code=127,
            error=f"Failed to launch {argv[0]}: {e}",
        )

    duration = time.time() - start_time
    error = None
    if result.returncode != 0:
        detail = (result.stderr or result.stdout).strip()
        error = f"{argv[0]} exited with code {result.returncode}"
        if detail:
            error = f"{error}: {detail}"

    return HarnessResult(
        output=result.stdout,
        stderr=result.stderr,
        duration_seconds=duration,
        exit_code=result.returncode,
        error=error,
    )


def _as_text(value: str | bytes | None) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return value
