"""Result types for template deployment."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List

from templatekit.orchestration.apps import AppReport, AppStatus
from templatekit.orchestration.state import Tier
from templatekit.records import TemplateRecord
from templatekit.resources.handles import Dependency, ResourceHandle


@dataclass
class DeploymentResult:
    """Result of deploying one template."""

    template_name: str
    template: ResourceHandle
    record: TemplateRecord
    record_path: Path
    dependencies: Dict[Dependency, ResourceHandle] = field(default_factory=dict)
    tiers: Dict[Dependency, Tier] = field(default_factory=dict)
    apps: List[AppReport] = field(default_factory=list)
    template_registered: bool = False

    @property
    def deployed(self) -> List[Dependency]:
        """Dependencies that were freshly deployed in this run."""
        return [dependency for dependency, tier in self.tiers.items() if tier == Tier.DEPLOYED]

    @property
    def absent_apps(self) -> List[str]:
        """Apps that are neither registered nor deployable here."""
        return [report.name for report in self.apps if report.status == AppStatus.ABSENT]
