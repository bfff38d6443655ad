"""Reconciliation of the sub-applications declared for a template."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable

import structlog

from templatekit.config.loader import AppDescriptor
from templatekit.ledger.base import INITIAL_VERSION
from templatekit.orchestration.context import ProvisioningContext
from templatekit.orchestration.state import ResolutionState
from templatekit.resources.handles import Dependency

logger = structlog.get_logger()


class AppStatus(str, Enum):
    REGISTERED = "registered"
    DEPLOYED = "deployed"
    ABSENT = "absent"


@dataclass(frozen=True)
class AppReport:
    """Outcome of reconciling one app."""

    name: str
    status: AppStatus
    registry_name: str
    address: str | None = None


class AppReconciler:
    """Makes sure every declared app is registered, deploying it when local.

    Apps are only checked against the registry tier they declare. A missing
    app on a non-local network is reported as absent and does not fail the
    run.
    """

    def __init__(self, ctx: ProvisioningContext) -> None:
        self._ctx = ctx

    def reconcile(self, apps: Iterable[AppDescriptor], state: ResolutionState) -> list[AppReport]:
        naming = self._ctx.naming_client(state.address(Dependency.NAMING_REGISTRY))
        reports = []
        for app in apps:
            registry_name = self._ctx.names.package_name(app.name, secondary=app.uses_secondary_registry)
            if naming.is_registered(registry_name):
                logger.info("app_already_registered", app=app.name, name=registry_name)
                reports.append(AppReport(app.name, AppStatus.REGISTERED, registry_name, naming.resolve(registry_name)))
            elif self._ctx.environment.is_local:
                address = self._register_app(app, state)
                reports.append(AppReport(app.name, AppStatus.DEPLOYED, registry_name, address))
            else:
                logger.info("app_absent", app=app.name, name=registry_name)
                reports.append(AppReport(app.name, AppStatus.ABSENT, registry_name))
        return reports

    def _register_app(self, app: AppDescriptor, state: ResolutionState) -> str:
        ledger = self._ctx.ledger
        registry = (
            state.get(Dependency.SECONDARY_REGISTRY)
            if app.uses_secondary_registry
            else state.get(Dependency.PRIMARY_REGISTRY)
        )
        address = ledger.deploy_contract(app.resource_type, [], self._ctx.owner)
        registry_name = self._ctx.names.package_name(app.name, secondary=app.uses_secondary_registry)
        logger.info("registering_app", app=app.name, resource_type=app.resource_type, name=registry_name)
        ledger.new_repo_with_version(
            registry.address,
            app.name,
            self._ctx.owner,
            INITIAL_VERSION,
            address,
            "",
            self._ctx.owner,
        )
        return address
