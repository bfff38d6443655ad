from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

import structlog

from templatekit.core.errors import ConfigurationError

logger = structlog.get_logger()

DEFAULT_RECORD_PATH = Path("templates.json")


@dataclass(frozen=True)
class TemplateRecord:
    """Identity of a deployed template on one network."""

    network: str
    template_name: str
    address: str
    resource_type: str
    naming_registry: str

    def to_dict(self) -> dict[str, str]:
        return {
            "address": self.address,
            "resourceType": self.resource_type,
            "namingRegistry": self.naming_registry,
        }

    @classmethod
    def from_dict(cls, network: str, template_name: str, data: dict[str, Any]) -> "TemplateRecord":
        return cls(
            network=network,
            template_name=template_name,
            address=data["address"],
            resource_type=data["resourceType"],
            naming_registry=data["namingRegistry"],
        )


class RecordStore:
    """JSON file holding one record per network and template name.

    Writes overwrite the previous record for the same template name; no
    history is kept. Each network also keeps a single naming registry entry,
    set by the latest write for that network.
    """

    def __init__(self, path: Path | str | None = None) -> None:
        self.path = Path(path).expanduser() if path else DEFAULT_RECORD_PATH

    def read(self, network: str, template_name: str) -> TemplateRecord | None:
        entry = self._load()["environments"].get(network, {}).get(template_name)
        if entry is None:
            return None
        return TemplateRecord.from_dict(network, template_name, entry)

    def naming_registry(self, network: str) -> str | None:
        """Naming registry address recorded for ``network``, if any."""
        return self._load()["registries"].get(network) or None

    def write(self, record: TemplateRecord) -> None:
        data = self._load()
        data["environments"].setdefault(record.network, {})[record.template_name] = record.to_dict()
        data["registries"][record.network] = record.naming_registry
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2, sort_keys=True) + "\n")
        logger.debug(
            "template_record_written",
            path=str(self.path),
            network=record.network,
            template=record.template_name,
        )

    def _load(self) -> Dict[str, Dict[str, Any]]:
        if not self.path.exists():
            return {"environments": {}, "registries": {}}
        try:
            data = json.loads(self.path.read_text())
        except json.JSONDecodeError as exc:
            raise ConfigurationError(
                f"Record file {self.path} is not valid JSON",
                details={"error": str(exc)},
            ) from exc
        environments = data.get("environments", {})
        return {
            "environments": {network: dict(entries) for network, entries in environments.items()},
            "registries": dict(data.get("registries", {})),
        }
