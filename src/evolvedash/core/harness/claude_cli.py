"""
Claude Code generator backend (CLI shell-out).

Wraps the `claude` CLI in print mode. The feature request goes to stdin,
the generation instructions are appended to Claude's system prompt, and
JSON output mode gives us the result text and token usage.
"""

import json
import logging
import os
import shutil
import subprocess
from pathlib import Path

from .backend import register_backend
from .models import HarnessResult, TokenUsage
from .process import run_tool

logger = logging.getLogger(__name__)

CLAUDE_EXECUTABLE = "claude"


@register_backend("claude-cli")
class ClaudeCLIBackend:
    """
    Claude Code CLI generator backend.

    Features:
    - System prompt support via --append-system-prompt
    - Unattended mode via --dangerously-skip-permissions
    - Token usage reporting from --output-format json
    - Model selection via --model flag
    """

    def __init__(self, model: str | None = None, system_prompt: str = "") -> None:
        self.model = model
        self.system_prompt = system_prompt

    @property
    def name(self) -> str:
        """Return 'claude-cli' as the backend name."""
        return "claude-cli"

    def is_available(self) -> bool:
        """
        Check if claude CLI is available.

        Returns:
            True if 'claude' command exists in PATH
        """
        return shutil.which(CLAUDE_EXECUTABLE) is not None

    def build_command(self) -> list[str]:
        """Build the claude argv (the prompt itself goes to stdin)."""
        flags = [
            "-p",  # Pipe mode (read from stdin)
            "--append-system-prompt",
            self.system_prompt,
            "--dangerously-skip-permissions",
            "--output-format",
            "json",
        ]

        if self.model:
            flags.extend(["--model", self.model])

        # Add extra flags from environment
        extra_flags = os.environ.get("CLAUDE_FLAGS", "").strip()
        if extra_flags:
            flags.extend(extra_flags.split())

        return [CLAUDE_EXECUTABLE] + flags

    def invoke(self, prompt: str, *, working_dir: Path, timeout: float) -> HarnessResult:
        """
        Invoke Claude with blocking execution.

        Args:
            prompt: Feature request text
            working_dir: Project root the tool runs in
            timeout: Seconds before the run is abandoned

        Returns:
            HarnessResult whose output is Claude's result text
        """
        result = run_tool(
            self.build_command(), prompt, working_dir=working_dir, timeout=timeout
        )
        if result.timed_out or result.exit_code == 127:
            return result

        try:
            output_json = json.loads(result.output)
        except json.JSONDecodeError:
            # Not JSON: keep raw output (likely an error message)
            return result

        if not isinstance(output_json, dict):
            return result

        update: dict[str, object] = {
            "output": output_json.get("result") or output_json.get("content", "") or "",
        }

        usage_data = output_json.get("usage")
        if isinstance(usage_data, dict):
            update["usage"] = TokenUsage(
                input_tokens=usage_data.get("input_tokens", 0),
                output_tokens=usage_data.get("output_tokens", 0),
                cost_usd=output_json.get("total_cost_usd"),
            )

        # Claude reports failures inside the JSON envelope too
        if output_json.get("is_error") and result.error is None:
            update["error"] = f"Claude reported an error: {update['output']}"

        return result.model_copy(update=update)

    def get_version(self) -> str:
        """
        Get Claude CLI version.

        Returns:
            Version string or 'unknown' if unavailable
        """
        try:
            result = subprocess.run(
                [CLAUDE_EXECUTABLE, "--version"],
                capture_output=True,
                text=True,
                check=False,
                timeout=10,
            )
            return result.stdout.strip() or "unknown"
        except (OSError, subprocess.SubprocessError):
            return "unknown"
