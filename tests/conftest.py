"""
Pytest configuration and shared fixtures.

Provides an isolated project directory, a configurable fake generator
backend, a wired Services bundle, and an API test client.
"""

import json
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from evolvedash.api.app import create_app
from evolvedash.core.config import DashConfig, clear_cache
from evolvedash.core.harness import HarnessResult
from evolvedash.core.services import open_services

ENV_VARS = [
    "EVOLVEDASH_PORT",
    "EVOLVEDASH_GENERATOR",
    "EVOLVEDASH_GENERATOR_TIMEOUT",
    "EVOLVEDASH_COMPONENTS_DIR",
    "EVOLVEDASH_DB_PATH",
    "EVOLVEDASH_SPEC_PATH",
    "EVOLVEDASH_LOG_LEVEL",
]


# ==============================================================================
# Environment Isolation
# ==============================================================================


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Keep user config, env overrides and the config cache out of every test."""
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    clear_cache()
    yield
    clear_cache()


# ==============================================================================
# Directory Fixtures
# ==============================================================================


@pytest.fixture
def project_dir(tmp_path):
    """
    Provide a temporary project directory.

    Creates:
    - .evolvedash/ state directory
    - frontend/src/components/generated/ components directory
    """
    project = tmp_path / "project"
    (project / ".evolvedash").mkdir(parents=True)
    (project / "frontend" / "src" / "components" / "generated").mkdir(parents=True)
    return project


@pytest.fixture
def components_dir(project_dir):
    """The default components directory inside project_dir."""
    return project_dir / "frontend" / "src" / "components" / "generated"


@pytest.fixture
def config():
    """Default configuration."""
    return DashConfig()


# ==============================================================================
# Fake Generator
# ==============================================================================


def component_source(name: str, description: str = "A generated component") -> str:
    """TSX source with a doc comment, a named export and a default export."""
    return (
        f"/**\n * {description}\n */\n"
        f"export const {name} = () => <div>{name}</div>;\n"
        f"export default {name};\n"
    )


class FakeBackend:
    """
    Generator backend double.

    On invoke it writes `files` into the components directory and reports
    `report` (if set) as a JSON `generated_files` list. Setting `error`
    makes the run fail.
    """

    name = "fake"

    def __init__(self, components_dir: Path) -> None:
        self.components_dir = components_dir
        self.available = True
        self.files: dict[str, str] = {}
        self.report: list[str] | None = None
        self.error: str | None = None
        self.exit_code = 0
        self.prompts: list[str] = []

    def is_available(self) -> bool:
        return self.available

    def invoke(self, prompt: str, *, working_dir: Path, timeout: float) -> HarnessResult:
        self.prompts.append(prompt)
        if self.error is not None:
            return HarnessResult(exit_code=self.exit_code or 1, error=self.error)

        self.components_dir.mkdir(parents=True, exist_ok=True)
        for filename, content in self.files.items():
            (self.components_dir / filename).write_text(content)

        output = "done"
        if self.report is not None:
            output = json.dumps({"generated_files": self.report})
        return HarnessResult(output=output, duration_seconds=0.01)

    def get_version(self) -> str:
        return "fake 1.0"


@pytest.fixture
def fake_backend(components_dir):
    """A fake generator that succeeds without producing files."""
    return FakeBackend(components_dir)


# ==============================================================================
# Services and API
# ==============================================================================


@pytest.fixture
def services(config, project_dir, fake_backend):
    """Fully wired Services bundle using the fake generator."""
    with open_services(config, project_dir, backend=fake_backend) as bundle:
        yield bundle


@pytest.fixture
def client(config, project_dir, fake_backend):
    """API test client with the lifespan running."""
    app = create_app(config=config, project_dir=project_dir, backend=fake_backend)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_component():
    """Factory for TSX component source."""
    return component_source
