"""
Generator service.

Turns a feature request into files in the components directory by running
the configured generator backend, then works out which files it produced.

Generated files are taken from the tool's own report when it prints a JSON
object with a `generated_files` list; otherwise they are the files created
or modified in the components directory while the tool ran.
"""

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from evolvedash.core.config.models import GeneratorConfig
from evolvedash.core.errors import GeneratorError
from evolvedash.core.harness import GeneratorBackend, HarnessResult, get_backend

logger = logging.getLogger(__name__)

DEFAULT_SYSTEM_PROMPT = """\
You extend a React + TypeScript dashboard with new UI components.

Write each new component as a single .tsx file in {components_dir}.
Name the file after the component in PascalCase (ClockPanel.tsx) and export
the component both by name (export const ClockPanel) and as the default export.
Start each file with a /** ... */ comment whose first line describes the component.
Do not modify files outside that directory.

When you are done, end your reply with one line of JSON:
{"generated_files": ["ClockPanel.tsx"]}
"""

FileSnapshot = dict[str, tuple[int, int]]


class GenerationOutcome(BaseModel):
    """Result of a successful generator run."""

    generated_files: list[str] = Field(
        default_factory=list,
        description="Paths relative to the components directory, in generator order",
    )
    output: str = Field(default="", description="Generator output text")
    duration_seconds: float = 0.0


def render_system_prompt(config: GeneratorConfig, components_dir: Path) -> str:
    """Fill the generation instructions with the components directory."""
    template = config.system_prompt or DEFAULT_SYSTEM_PROMPT
    return template.replace("{components_dir}", str(components_dir))


def build_backend(config: GeneratorConfig, components_dir: Path) -> GeneratorBackend:
    """
    Instantiate the configured backend.

    Raises:
        ValueError: If the backend is unknown or misconfigured
    """
    if config.backend == "command":
        return get_backend("command", command=config.command)
    return get_backend(
        config.backend,
        model=config.model,
        system_prompt=render_system_prompt(config, components_dir),
    )


def snapshot_directory(directory: Path) -> FileSnapshot:
    """Record (mtime_ns, size) for every file under a directory."""
    if not directory.is_dir():
        return {}
    snapshot: FileSnapshot = {}
    for path in directory.rglob("*"):
        try:
            if path.is_file():
                stat = path.stat()
                snapshot[path.relative_to(directory).as_posix()] = (stat.st_mtime_ns, stat.st_size)
        except OSError:
            continue
    return snapshot


def changed_files(before: FileSnapshot, after: FileSnapshot) -> list[str]:
    """Files created or modified between two snapshots, sorted."""
    return sorted(name for name, stamp in after.items() if before.get(name) != stamp)


def parse_reported_files(output: str) -> list[str] | None:
    """
    Extract a `generated_files` list the tool printed as JSON.

    The whole output is tried first, then its last non-empty line.

    Returns:
        The reported paths, or None if the tool reported nothing
    """
    candidates = [output.strip()]
    lines = [line.strip() for line in output.splitlines() if line.strip()]
    if lines:
        candidates.append(lines[-1])

    for candidate in candidates:
        if not candidate.startswith("{"):
            continue
        try:
            data: Any = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(data, dict) and isinstance(data.get("generated_files"), list):
            return [str(item) for item in data["generated_files"]]
    return None


class GeneratorService:
    """
    Run the generator for one prompt at a time.

    Example:
        >>> service = GeneratorService(backend, components_dir, project_dir)
        >>> outcome = service.generate("Add a clock panel")
        >>> outcome.generated_files
        ['ClockPanel.tsx']
    """

    def __init__(
        self,
        backend: GeneratorBackend,
        components_dir: Path,
        project_dir: Path,
        timeout_seconds: float = 300,
    ) -> None:
        self.backend = backend
        self.components_dir = components_dir
        self.project_dir = project_dir
        self.timeout_seconds = timeout_seconds
        self._version: str | None = None

    @property
    def name(self) -> str:
        """Name of the backend in use."""
        return self.backend.name

    def is_available(self) -> bool:
        """Whether the backend's tool can be run."""
        return self.backend.is_available()

    def version(self) -> str:
        """Version reported by the backend's tool, asked once and then remembered."""
        if self._version is None:
            self._version = self.backend.get_version()
        return self._version

    def generate(self, prompt: str) -> GenerationOutcome:
        """
        Run the generator with a prompt.

        Args:
            prompt: Feature request text

        Returns:
            GenerationOutcome with the generated file list

        Raises:
            GeneratorError: If the tool is unavailable, fails to launch,
                exits non-zero, or times out
        """
        if not self.backend.is_available():
            raise GeneratorError(f"Generator '{self.backend.name}' is not available")

        before = snapshot_directory(self.components_dir)
        result = self.backend.invoke(
            prompt, working_dir=self.project_dir, timeout=self.timeout_seconds
        )
        self._raise_for_failure(result)
        after = snapshot_directory(self.components_dir)

        reported = parse_reported_files(result.output)
        generated = reported if reported else changed_files(before, after)

        logger.info(
            "Generator %s produced %d file(s) in %.1fs",
            self.backend.name,
            len(generated),
            result.duration_seconds,
        )
        if result.usage.total_tokens:
            logger.debug(
                "Generator token usage: %d in / %d out",
                result.usage.input_tokens,
                result.usage.output_tokens,
            )

        return GenerationOutcome(
            generated_files=generated,
            output=result.output,
            duration_seconds=result.duration_seconds,
        )

    def _raise_for_failure(self, result: HarnessResult) -> None:
        if result.success:
            return
        message = result.error or f"Generator exited with code {result.exit_code}"
        logger.warning("Generator %s failed: %s", self.backend.name, message)
        raise GeneratorError(message, exit_code=result.exit_code, output=result.output)
