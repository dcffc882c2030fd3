"""HTTP API for evolvedash (FastAPI)."""

from evolvedash.api.app import ErrorCode, create_app

__all__ = ["ErrorCode", "create_app"]
