"""
templatekit configuration.

- Pydantic-based settings (environment variables, .env files)
- Deploy options loaded from YAML (overrides and declared apps)
"""

from templatekit.config.loader import (
    AppDescriptor,
    DeployOptions,
    load_deploy_options,
)
from templatekit.config.settings import Settings, get_settings

__all__ = [
    "AppDescriptor",
    "DeployOptions",
    "Settings",
    "get_settings",
    "load_deploy_options",
]
