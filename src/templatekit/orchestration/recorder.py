"""Registration and persistence of a deployed template."""

from __future__ import annotations

from pathlib import Path

import structlog

from templatekit.ledger.base import INITIAL_VERSION
from templatekit.orchestration.context import ProvisioningContext
from templatekit.orchestration.state import ResolutionState
from templatekit.records import TemplateRecord
from templatekit.resources.handles import Dependency, ResourceHandle

logger = structlog.get_logger()


class RegistrationRecorder:
    """Registers the template package and writes its record.

    The registration is check-then-act against a shared registry. A
    concurrent writer can still win the race, in which case the registry's
    RegistrationConflict propagates unchanged.
    """

    def __init__(self, ctx: ProvisioningContext, state: ResolutionState) -> None:
        self._ctx = ctx
        self._state = state
        self.registered = False

    def register_template(self, name: str, handle: ResourceHandle) -> TemplateRecord:
        if self._ctx.environment.is_local:
            self._register_package(name, handle)
        return self._write_record(name, handle)

    @property
    def record_path(self) -> Path:
        return self._ctx.records.path

    def _register_package(self, name: str, handle: ResourceHandle) -> None:
        naming = self._ctx.naming_client(self._state.address(Dependency.NAMING_REGISTRY))
        package_name = self._ctx.names.package_name(name)
        if naming.is_registered(package_name):
            logger.info("template_already_registered", name=package_name)
            return

        logger.info(
            "registering_template",
            name=package_name,
            resource_type=handle.resource_type,
            version=".".join(str(part) for part in INITIAL_VERSION),
        )
        self._ctx.ledger.new_repo_with_version(
            self._state.address(Dependency.PRIMARY_REGISTRY),
            name,
            self._ctx.owner,
            INITIAL_VERSION,
            handle.address,
            "",
            self._ctx.owner,
        )
        self.registered = True

    def _write_record(self, name: str, handle: ResourceHandle) -> TemplateRecord:
        record = TemplateRecord(
            network=self._ctx.environment.network,
            template_name=name,
            address=handle.address,
            resource_type=handle.resource_type,
            naming_registry=self._state.address(Dependency.NAMING_REGISTRY),
        )
        self._ctx.records.write(record)
        logger.info("template_record_saved", path=str(self.record_path), template=name)
        return record
