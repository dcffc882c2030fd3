"""
Configuration models and loading.

This module provides Pydantic models for evolvedash configuration
with multi-layer merging: defaults < user < project < env vars.
"""

from .loader import (
    clear_cache,
    get_project_config_path,
    get_user_config_path,
    get_xdg_config_home,
    load_config,
)
from .models import (
    DashConfig,
    DiscoveryConfig,
    GeneratorConfig,
    LoggingConfig,
    OperationLogConfig,
    RequestsConfig,
    ServerConfig,
    StorageConfig,
)

__all__ = [
    # Models
    "DashConfig",
    "DiscoveryConfig",
    "GeneratorConfig",
    "LoggingConfig",
    "OperationLogConfig",
    "RequestsConfig",
    "ServerConfig",
    "StorageConfig",
    # Loader functions
    "clear_cache",
    "get_project_config_path",
    "get_user_config_path",
    "get_xdg_config_home",
    "load_config",
]
