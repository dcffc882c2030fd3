"""
Generic command generator backend.

Runs a configured argument vector, e.g. `["kiro", "generate", "{prompt}"]`.
Every `{prompt}` placeholder is replaced with the request text, and the
request is also written to the command's stdin for tools that read it there.
"""

import shutil
import subprocess
from pathlib import Path

from .backend import register_backend
from .models import HarnessResult
from .process import run_tool

PROMPT_PLACEHOLDER = "{prompt}"


@register_backend("command")
class CommandBackend:
    """Generator backend for an arbitrary command line."""

    def __init__(self, command: list[str] | None = None) -> None:
        if not command:
            raise ValueError("The 'command' generator backend needs generator.command set")
        self.command = list(command)

    @property
    def name(self) -> str:
        """Return 'command' as the backend name."""
        return "command"

    def is_available(self) -> bool:
        """True if the command's executable can be found."""
        return shutil.which(self.command[0]) is not None

    def build_command(self, prompt: str) -> list[str]:
        """Substitute the prompt into the configured arguments."""
        return [arg.replace(PROMPT_PLACEHOLDER, prompt) for arg in self.command]

    def invoke(self, prompt: str, *, working_dir: Path, timeout: float) -> HarnessResult:
        """Run the command and wait for it to finish."""
        return run_tool(
            self.build_command(prompt), prompt, working_dir=working_dir, timeout=timeout
        )

    def get_version(self) -> str:
        """Ask the command for `--version`; 'unknown' if it can't say."""
        try:
            result = subprocess.run(
                [self.command[0], "--version"],
                capture_output=True,
                text=True,
                check=False,
                timeout=10,
            )
            return result.stdout.strip() or "unknown"
        except (OSError, subprocess.SubprocessError):
            return "unknown"
