"""
Tests for generator backends and the backend registry.
"""

import json
import subprocess
from unittest.mock import MagicMock, patch

import pytest

from evolvedash.core.harness import (
    ClaudeCLIBackend,
    CommandBackend,
    GeneratorBackend,
    HarnessResult,
    get_backend,
)
from evolvedash.core.harness.process import run_tool


def completed(stdout="", stderr="", returncode=0):
    result = MagicMock()
    result.stdout = stdout
    result.stderr = stderr
    result.returncode = returncode
    return result


class TestRegistry:
    def test_builtin_backends_registered(self):
        assert isinstance(get_backend("claude-cli"), ClaudeCLIBackend)

    def test_get_backend_with_options(self):
        backend = get_backend("command", command=["kiro", "generate"])
        assert isinstance(backend, CommandBackend)
        assert isinstance(backend, GeneratorBackend)

    def test_unknown_backend(self):
        with pytest.raises(ValueError, match="not registered"):
            get_backend("gemini")

    def test_claude_cli_availability(self):
        with patch("shutil.which", return_value="/usr/bin/claude"):
            assert get_backend("claude-cli").is_available() is True
        with patch("shutil.which", return_value=None):
            assert get_backend("claude-cli").is_available() is False


class TestHarnessResult:
    def test_success(self):
        assert HarnessResult(output="ok").success is True
        assert HarnessResult(exit_code=1).failed is True
        assert HarnessResult(error="boom").success is False


class TestRunTool:
    def test_passes_prompt_on_stdin(self, tmp_path):
        with patch("subprocess.run", return_value=completed(stdout="done")) as mock_run:
            result = run_tool(["gen"], "Add a clock", working_dir=tmp_path, timeout=5)

        assert result.success
        assert result.output == "done"
        kwargs = mock_run.call_args.kwargs
        assert kwargs["input"] == "Add a clock"
        assert kwargs["cwd"] == tmp_path
        assert kwargs["timeout"] == 5
        assert kwargs["env"]["EVOLVEDASH_GENERATOR_ACTIVE"] == "1"

    def test_nonzero_exit(self, tmp_path):
        with patch("subprocess.run", return_value=completed(stderr="bad prompt", returncode=2)):
            result = run_tool(["gen"], "x", working_dir=tmp_path, timeout=5)

        assert result.failed
        assert result.exit_code == 2
        assert "bad prompt" in result.error

    def test_timeout(self, tmp_path):
        with patch(
            "subprocess.run", side_effect=subprocess.TimeoutExpired(cmd="gen", timeout=5)
        ):
            result = run_tool(["gen"], "x", working_dir=tmp_path, timeout=5)

        assert result.failed
        assert result.timed_out is True
        assert "timed out" in result.error

    def test_launch_failure(self, tmp_path):
        with patch("subprocess.run", side_effect=FileNotFoundError("no such file")):
            result = run_tool(["gen"], "x", working_dir=tmp_path, timeout=5)

        assert result.failed
        assert "Failed to launch gen" in result.error


class TestClaudeCLIBackend:
    def test_build_command(self, monkeypatch):
        monkeypatch.delenv("CLAUDE_FLAGS", raising=False)
        backend = ClaudeCLIBackend(model="sonnet", system_prompt="write components")

        argv = backend.build_command()

        assert argv[:2] == ["claude", "-p"]
        assert argv[argv.index("--append-system-prompt") + 1] == "write components"
        assert "--dangerously-skip-permissions" in argv
        assert argv[argv.index("--output-format") + 1] == "json"
        assert argv[argv.index("--model") + 1] == "sonnet"

    def test_extra_flags_from_env(self, monkeypatch):
        monkeypatch.setenv("CLAUDE_FLAGS", "--verbose --max-turns 5")
        argv = ClaudeCLIBackend().build_command()
        assert argv[-3:] == ["--verbose", "--max-turns", "5"]
        assert "--model" not in argv

    def test_invoke_parses_json_output(self, tmp_path):
        stdout = json.dumps(
            {
                "result": 'Created it.\n{"generated_files": ["ClockPanel.tsx"]}',
                "usage": {"input_tokens": 100, "output_tokens": 50},
                "total_cost_usd": 0.01,
            }
        )
        with patch("subprocess.run", return_value=completed(stdout=stdout)):
            result = ClaudeCLIBackend().invoke("Add a clock", working_dir=tmp_path, timeout=30)

        assert result.success
        assert result.output.startswith("Created it.")
        assert result.usage.total_tokens == 150
        assert result.usage.cost_usd == 0.01

    def test_invoke_reports_error_envelope(self, tmp_path):
        stdout = json.dumps({"result": "Credit balance too low", "is_error": True})
        with patch("subprocess.run", return_value=completed(stdout=stdout)):
            result = ClaudeCLIBackend().invoke("x", working_dir=tmp_path, timeout=30)

        assert result.failed
        assert "Credit balance too low" in result.error

    def test_invoke_non_json_failure(self, tmp_path):
        with patch(
            "subprocess.run", return_value=completed(stderr="not logged in", returncode=1)
        ):
            result = ClaudeCLIBackend().invoke("x", working_dir=tmp_path, timeout=30)

        assert result.failed
        assert "not logged in" in result.error

    def test_get_version(self):
        with patch("subprocess.run", return_value=completed(stdout="2.0.1 (Claude Code)\n")):
            assert ClaudeCLIBackend().get_version() == "2.0.1 (Claude Code)"
        with patch("subprocess.run", side_effect=FileNotFoundError()):
            assert ClaudeCLIBackend().get_version() == "unknown"


class TestCommandBackend:
    def test_requires_command(self):
        with pytest.raises(ValueError):
            CommandBackend([])

    def test_prompt_substitution(self):
        backend = CommandBackend(["kiro", "generate", "--prompt={prompt}"])
        assert backend.build_command("Add a clock") == [
            "kiro",
            "generate",
            "--prompt=Add a clock",
        ]

    def test_invoke(self, tmp_path):
        backend = CommandBackend(["kiro", "generate", "{prompt}"])
        with patch("subprocess.run", return_value=completed(stdout="ok")) as mock_run:
            result = backend.invoke("Add a clock", working_dir=tmp_path, timeout=10)

        assert result.success
        assert mock_run.call_args.args[0] == ["kiro", "generate", "Add a clock"]
        assert mock_run.call_args.kwargs["input"] == "Add a clock"

    def test_is_available(self):
        with patch("shutil.which", return_value=None):
            assert CommandBackend(["kiro"]).is_available() is False

    def test_get_version(self):
        with patch("subprocess.run", return_value=completed(stdout="kiro 1.4\n")) as mock_run:
            assert CommandBackend(["kiro", "generate"]).get_version() == "kiro 1.4"
        assert mock_run.call_args.args[0] == ["kiro", "--version"]
