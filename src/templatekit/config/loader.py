"""
Deploy options loading.

Options come from a YAML file and from CLI flags; flags win.

Example file:

    naming_registry: "0x5f6f7e8cc7346a11ca2def8f827b7a0b612c56a1"
    verbose: true
    apps:
      - name: voting
        resource_type: Voting
      - name: dot-voting
        resource_type: DotVoting
        uses_secondary_registry: true
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

import structlog
import yaml

from templatekit.core.errors import ConfigurationError
from templatekit.resources.handles import Dependency

logger = structlog.get_logger()

OVERRIDE_KEYS = tuple(dependency.value for dependency in Dependency)


@dataclass(frozen=True)
class AppDescriptor:
    """Sub-application that should be registered alongside a template."""

    name: str
    resource_type: str
    uses_secondary_registry: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AppDescriptor":
        if not isinstance(data, dict):
            raise ConfigurationError(f"App entry must be a mapping, got {type(data).__name__}")
        name = data.get("name")
        resource_type = data.get("resource_type") or data.get("contract_name")
        if not name or not resource_type:
            raise ConfigurationError(
                "App entry requires 'name' and 'resource_type'",
                details={"entry": data},
            )
        return cls(
            name=str(name),
            resource_type=str(resource_type),
            uses_secondary_registry=bool(data.get("uses_secondary_registry", False)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "resource_type": self.resource_type,
            "uses_secondary_registry": self.uses_secondary_registry,
        }


@dataclass(frozen=True)
class DeployOptions:
    """Recognized options for one orchestration run."""

    overrides: dict[Dependency, str] = field(default_factory=dict)
    apps: tuple[AppDescriptor, ...] = ()
    verbose: bool = False

    def override_for(self, dependency: Dependency) -> str | None:
        return self.overrides.get(dependency)

    def merged_with(
        self,
        *,
        overrides: dict[Dependency, str | None] | None = None,
        apps: tuple[AppDescriptor, ...] | None = None,
        verbose: bool | None = None,
    ) -> "DeployOptions":
        """Return a copy where the given values take precedence."""
        merged = dict(self.overrides)
        for dependency, address in (overrides or {}).items():
            if address:
                merged[dependency] = address
        return replace(
            self,
            overrides=merged,
            apps=self.apps if apps is None else apps,
            verbose=self.verbose if verbose is None else verbose,
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DeployOptions":
        unknown = set(data) - set(OVERRIDE_KEYS) - {"apps", "verbose"}
        if unknown:
            raise ConfigurationError(
                "Unknown deploy options",
                details={"keys": ", ".join(sorted(unknown))},
            )
        overrides = {}
        for key in OVERRIDE_KEYS:
            value = data.get(key)
            if value:
                overrides[Dependency(key)] = str(value)
        apps_data = data.get("apps") or []
        if not isinstance(apps_data, list):
            raise ConfigurationError("'apps' must be a list")
        return cls(
            overrides=overrides,
            apps=tuple(AppDescriptor.from_dict(app) for app in apps_data),
            verbose=bool(data.get("verbose", False)),
        )


def load_deploy_options(path: str | Path | None) -> DeployOptions:
    """
    Load deploy options from a YAML file.

    Args:
        path: Options file; None yields default options

    Returns:
        DeployOptions instance

    Raises:
        ConfigurationError: If the file is missing or malformed
    """
    if path is None:
        return DeployOptions()

    options_path = Path(path).expanduser()
    if not options_path.exists():
        raise ConfigurationError(f"Options file not found: {options_path}")

    try:
        with open(options_path) as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {options_path}", details={"error": str(e)}) from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Options file {options_path} must contain a mapping")

    logger.debug("loaded_deploy_options", path=str(options_path))
    return DeployOptions.from_dict(data)
