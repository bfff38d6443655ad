"""Three-tier resolution policy applied to each dependency."""

from __future__ import annotations

import structlog

from templatekit.config.loader import DeployOptions
from templatekit.core.errors import DeploymentFailure, ProvisioningError
from templatekit.naming import NamingRegistryClient
from templatekit.orchestration.context import ProvisioningContext
from templatekit.orchestration.state import ResolutionState, Tier
from templatekit.orchestration.steps import ResolutionStep
from templatekit.resources.handles import Dependency, ResourceHandle, handle_for

logger = structlog.get_logger()

UNRESOLVABLE_REASON = "no override, not registered, and not running locally"


class ResolutionPolicy:
    """Resolves one dependency: override, then registry lookup, then local deploy.

    The first tier that yields an address wins. Local deployment is only
    attempted after the registry has been checked, and its result is read
    back from the registry before it is accepted.
    """

    def __init__(self, ctx: ProvisioningContext, options: DeployOptions) -> None:
        self._ctx = ctx
        self._options = options

    def resolve(self, step: ResolutionStep, state: ResolutionState) -> ResourceHandle:
        dependency = step.dependency
        log = logger.bind(dependency=dependency.value)

        override = self._options.override_for(dependency)
        if override:
            handle = handle_for(dependency, override, domain=step.canonical_name)
            tier = Tier.OVERRIDE
            log.info("using_provided_dependency", address=override)
        else:
            naming = self._naming(step, state)
            found = self._lookup(step, naming)
            if found:
                handle = handle_for(dependency, found, domain=step.canonical_name)
                tier = Tier.REGISTRY
                log.info("using_registered_dependency", name=step.canonical_name, address=found)
            elif self._ctx.environment.is_local:
                handle = self._deploy(step, state, naming)
                tier = Tier.DEPLOYED
                log.info("deployed_dependency", address=handle.address)
            else:
                log.error("dependency_unresolvable", name=step.canonical_name)
                raise ProvisioningError(dependency, UNRESOLVABLE_REASON)

        state.add(dependency, handle, tier)
        return handle

    def _naming(self, step: ResolutionStep, state: ResolutionState) -> NamingRegistryClient | None:
        if not step.uses_naming_registry:
            return None
        return self._ctx.naming_client(state.address(Dependency.NAMING_REGISTRY))

    def _lookup(self, step: ResolutionStep, naming: NamingRegistryClient | None) -> str | None:
        if step.lookup == "record":
            return self._ctx.records.naming_registry(self._ctx.environment.network)
        assert naming is not None and step.canonical_name
        if step.lookup == "owner":
            return naming.owner_of(step.canonical_name)
        return naming.resolve(step.canonical_name)

    def _deploy(
        self,
        step: ResolutionStep,
        state: ResolutionState,
        naming: NamingRegistryClient | None,
    ) -> ResourceHandle:
        dependency = step.dependency
        inputs = state.inputs(step.requires, naming)
        handle = step.deploy(self._ctx, inputs)
        if not handle.address:
            raise DeploymentFailure(dependency, "deploy routine returned no address")

        if not step.uses_naming_registry:
            return handle

        assert naming is not None and step.canonical_name
        if step.claim_after_deploy:
            naming.claim(step.canonical_name, self._ctx.owner, handle.address)

        registered = self._lookup(step, naming)
        if not registered:
            raise DeploymentFailure(dependency, f"not registered under {step.canonical_name} after deployment")
        if registered.lower() != handle.address.lower():
            raise DeploymentFailure(
                dependency,
                f"{step.canonical_name} points to {registered}, expected {handle.address}",
            )
        return handle
