"""
Typed exceptions shared across evolvedash.

The API layer maps these onto HTTP responses:

- ValidationError -> 400
- NotFoundError -> 404
- StoreError -> 500
- GeneratorError -> never an HTTP error; the orchestrator records it as a
  failed feature request and returns a failure payload.
"""


class EvolveDashError(Exception):
    """Base exception for evolvedash errors."""


class ValidationError(EvolveDashError):
    """Input rejected before anything was persisted."""


class NotFoundError(EvolveDashError):
    """An entity with the given id does not exist."""

    def __init__(self, kind: str, entity_id: str) -> None:
        self.kind = kind
        self.entity_id = entity_id
        super().__init__(f"{kind} '{entity_id}' not found")


class GeneratorError(EvolveDashError):
    """The external generator failed, timed out, or could not be launched."""

    def __init__(self, message: str, *, exit_code: int | None = None, output: str = "") -> None:
        self.exit_code = exit_code
        self.output = output
        super().__init__(message)


class StoreError(EvolveDashError):
    """The spec document could not be read, parsed, or rewritten."""
