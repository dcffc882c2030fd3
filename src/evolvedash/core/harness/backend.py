"""
Generator backend protocol and registry.

This module defines the GeneratorBackend protocol that all generator
backends must implement, so the code generator behind feature requests is
pluggable (the `claude` CLI, an arbitrary command, or a test double).
"""

from collections.abc import Callable
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from .models import HarnessResult


@runtime_checkable
class GeneratorBackend(Protocol):
    """
    Protocol for generator backend implementations.

    Backends are responsible for:
    - Detecting availability (CLI tool installed)
    - Running the tool with a prompt in the project directory
    - Enforcing the timeout and reporting failures in the HarnessResult
    """

    @property
    def name(self) -> str:
        """
        Backend name (e.g., 'claude-cli', 'command').

        Returns:
            Lowercase backend identifier
        """
        ...

    def is_available(self) -> bool:
        """
        Check if the generator tool is available on the system.

        Returns:
            True if the backend can be invoked (executable found in PATH)
        """
        ...

    def invoke(self, prompt: str, *, working_dir: Path, timeout: float) -> HarnessResult:
        """
        Run the generator and wait for it to finish.

        Backends do not raise for tool failures; launch errors, non-zero
        exits and timeouts are reported through `HarnessResult.error`.

        Args:
            prompt: Feature request text
            working_dir: Directory the tool runs in (the project root)
            timeout: Seconds before the run is abandoned

        Returns:
            HarnessResult with output, exit code and timing info
        """
        ...

    def get_version(self) -> str:
        """
        Get the generator tool version.

        Returns:
            Version string (e.g., '1.0.0') or 'unknown'
        """
        ...


# Backend registry
_backends: dict[str, type[Any]] = {}


def register_backend(name: str) -> Callable[[type[Any]], type[Any]]:
    """
    Decorator to register a generator backend implementation.

    Usage:
        @register_backend('claude-cli')
        class ClaudeCLIBackend:
            @property
            def name(self) -> str:
                return 'claude-cli'
            ...

    Args:
        name: Backend name (e.g., 'claude-cli', 'command')

    Returns:
        Decorator function
    """

    def decorator(backend_class: type[Any]) -> type[Any]:
        _backends[name] = backend_class
        return backend_class

    return decorator


def get_backend(name: str, **options: Any) -> GeneratorBackend:
    """
    Instantiate a registered backend.

    Args:
        name: Backend name ('claude-cli', 'command', ...)
        **options: Keyword arguments for the backend's constructor

    Returns:
        GeneratorBackend instance

    Raises:
        ValueError: If no backend is registered under this name
    """
    backend_class = _backends.get(name)
    if backend_class is None:
        raise ValueError(
            f"Backend '{name}' not registered. Available backends: {', '.join(_backends.keys())}"
        )
    backend: GeneratorBackend = backend_class(**options)
    return backend
