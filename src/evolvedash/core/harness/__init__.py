"""
Generator backends.

Importing this package registers the built-in backends:

- claude-cli: the `claude` CLI in print mode
- command: any configured command line
"""

from . import claude_cli, command  # noqa: F401  (registers backends)
from .backend import (
    GeneratorBackend,
    get_backend,
    register_backend,
)
from .claude_cli import ClaudeCLIBackend
from .command import CommandBackend
from .models import HarnessResult, TokenUsage

__all__ = [
    "ClaudeCLIBackend",
    "CommandBackend",
    "GeneratorBackend",
    "HarnessResult",
    "TokenUsage",
    "get_backend",
    "register_backend",
]
