"""Ordered resolution steps and the deploy routine behind each one."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterator, Literal, Sequence

import structlog

from templatekit.core.errors import ConfigurationError, DeploymentFailure
from templatekit.ledger.base import CREATE_NAME_ROLE
from templatekit.orchestration.context import NameScheme, ProvisioningContext
from templatekit.orchestration.state import ResolvedInputs
from templatekit.resources.handles import (
    RESOURCE_TYPES,
    Dependency,
    RegistryHandle,
    ResourceHandle,
    handle_for,
)

logger = structlog.get_logger()

# How the registry tier looks a dependency up:
# - "resolve": address the canonical name resolves to
# - "owner": owner of the canonical name
# - "record": naming registry address kept in the record file
LookupMode = Literal["resolve", "owner", "record"]

DeployRoutine = Callable[[ProvisioningContext, ResolvedInputs], ResourceHandle]

DEPLOY_REGISTRY_EVENT = "DeployRegistry"


@dataclass(frozen=True)
class ResolutionStep:
    """One dependency and how to resolve it."""

    dependency: Dependency
    lookup: LookupMode
    deploy: DeployRoutine
    canonical_name: str | None = None
    requires: tuple[Dependency, ...] = ()
    claim_after_deploy: bool = False

    @property
    def uses_naming_registry(self) -> bool:
        return self.lookup != "record"


class ResolutionPlan:
    """Ordered resolution steps, validated on construction.

    Each step may only require dependencies resolved by an earlier step.
    Steps looked up through the naming registry implicitly require it.
    """

    def __init__(self, steps: Sequence[ResolutionStep]) -> None:
        self._steps = tuple(steps)
        self._validate()

    def _validate(self) -> None:
        seen: list[Dependency] = []
        for position, step in enumerate(self._steps):
            if step.dependency in seen:
                raise ConfigurationError(
                    f"{step.dependency} appears more than once in the resolution plan",
                    details={"position": position},
                )
            needed = list(step.requires)
            if step.uses_naming_registry:
                needed.append(Dependency.NAMING_REGISTRY)
            for requirement in needed:
                if requirement not in seen:
                    raise ConfigurationError(
                        f"{step.dependency} requires {requirement}, which is not resolved earlier in the plan",
                        details={"position": position},
                    )
            if step.uses_naming_registry and not step.canonical_name:
                raise ConfigurationError(f"{step.dependency} is looked up by name but has no canonical name")
            seen.append(step.dependency)

    @property
    def dependencies(self) -> list[Dependency]:
        return [step.dependency for step in self._steps]

    def __iter__(self) -> Iterator[ResolutionStep]:
        return iter(self._steps)

    def __len__(self) -> int:
        return len(self._steps)


def deploy_naming_registry(ctx: ProvisioningContext, inputs: ResolvedInputs) -> ResourceHandle:
    address = ctx.ledger.deploy_naming_registry(ctx.owner)
    return handle_for(Dependency.NAMING_REGISTRY, address)


def deploy_primary_registry(ctx: ProvisioningContext, inputs: ResolvedInputs) -> ResourceHandle:
    naming_registry = inputs[Dependency.NAMING_REGISTRY]
    deployment = ctx.ledger.deploy_primary_registry(naming_registry.address, ctx.owner, ctx.names.primary_domain)
    return handle_for(
        Dependency.PRIMARY_REGISTRY,
        deployment.registry,
        constructor_args=(naming_registry,),
        domain=ctx.names.primary_domain,
        factory_address=deployment.factory,
    )


def deploy_secondary_registry(ctx: ProvisioningContext, inputs: ResolvedInputs) -> ResourceHandle:
    """Mint the secondary registry under a label of the primary domain.

    Grants the owner CREATE_NAME_ROLE on the primary registry's subdomain
    registrar, assigns the label to the primary registry factory, then asks
    the factory for a new registry. Steps already completed by an earlier,
    interrupted run are skipped.

    A primary registry found in the registry or given as an override carries
    no factory, so the factory is then read from the ledger.
    """
    dependency = Dependency.SECONDARY_REGISTRY
    ledger = ctx.ledger
    primary = inputs[Dependency.PRIMARY_REGISTRY]
    factory = primary.factory_address if isinstance(primary, RegistryHandle) else None
    if not factory:
        factory = ledger.registry_factory(primary.address)
    if not factory:
        raise DeploymentFailure(dependency, f"no registry factory known for the primary registry {primary.address}")
    if inputs.naming is None:
        raise DeploymentFailure(dependency, "no naming registry available")

    names = ctx.names
    domain = names.secondary_domain
    registrar = ledger.registry_registrar(primary.address)
    acl = ledger.registry_acl(primary.address)

    if ledger.has_permission(acl, ctx.owner, registrar, CREATE_NAME_ROLE):
        logger.debug("permission_already_granted", role=CREATE_NAME_ROLE, grantee=ctx.owner)
    else:
        logger.info("granting_permission", role=CREATE_NAME_ROLE, grantee=ctx.owner, target=registrar)
        ledger.grant_permission(acl, ctx.owner, registrar, CREATE_NAME_ROLE, ctx.owner)

    current_owner = inputs.naming.owner_of(domain)
    if current_owner is None:
        logger.info("assigning_name", name=domain, owner=factory)
        ledger.create_name(registrar, names.secondary_label, factory, ctx.owner)
    elif current_owner.lower() == factory.lower():
        logger.debug("name_already_assigned", name=domain, owner=factory)
    else:
        raise DeploymentFailure(
            dependency,
            f"{domain} is owned by {current_owner}, not by the registry factory {factory}",
        )

    logger.info("minting_registry", domain=domain, factory=factory)
    outcome = ledger.new_registry(factory, names.primary_domain, names.secondary_label, ctx.owner, ctx.owner)
    event = outcome.find_event(DEPLOY_REGISTRY_EVENT)
    if event is None or not event.args.get("registry"):
        raise DeploymentFailure(
            dependency,
            f"{DEPLOY_REGISTRY_EVENT} event missing from transaction {outcome.tx_hash}",
        )
    logger.info("registry_minted", domain=domain, address=event.args["registry"], tx=outcome.tx_hash)
    return handle_for(
        dependency,
        event.args["registry"],
        constructor_args=(primary,),
        domain=domain,
    )


def deploy_identity_registrar(ctx: ProvisioningContext, inputs: ResolvedInputs) -> ResourceHandle:
    naming_registry = inputs[Dependency.NAMING_REGISTRY]
    address = ctx.ledger.deploy_identity_registrar(naming_registry.address, ctx.owner, ctx.names.identity_domain)
    return handle_for(Dependency.IDENTITY_REGISTRAR, address, constructor_args=(naming_registry,))


def deploy_resource_factory(ctx: ProvisioningContext, inputs: ResolvedInputs) -> ResourceHandle:
    resource_type = RESOURCE_TYPES[Dependency.RESOURCE_FACTORY]
    address = ctx.ledger.deploy_contract(resource_type, [], ctx.owner)
    return handle_for(Dependency.RESOURCE_FACTORY, address)


def deploy_token_factory(ctx: ProvisioningContext, inputs: ResolvedInputs) -> ResourceHandle:
    resource_type = RESOURCE_TYPES[Dependency.TOKEN_FACTORY]
    address = ctx.ledger.deploy_contract(resource_type, [], ctx.owner)
    return handle_for(Dependency.TOKEN_FACTORY, address)


def default_plan(names: NameScheme) -> ResolutionPlan:
    """The fixed chain every template deployment resolves.

    Later deploy routines take earlier handles as constructor arguments, so
    the order is load-bearing.
    """
    return ResolutionPlan(
        [
            ResolutionStep(
                dependency=Dependency.NAMING_REGISTRY,
                lookup="record",
                deploy=deploy_naming_registry,
            ),
            ResolutionStep(
                dependency=Dependency.PRIMARY_REGISTRY,
                lookup="resolve",
                deploy=deploy_primary_registry,
                canonical_name=names.primary_domain,
                requires=(Dependency.NAMING_REGISTRY,),
            ),
            ResolutionStep(
                dependency=Dependency.SECONDARY_REGISTRY,
                lookup="resolve",
                deploy=deploy_secondary_registry,
                canonical_name=names.secondary_domain,
                requires=(Dependency.PRIMARY_REGISTRY,),
            ),
            ResolutionStep(
                dependency=Dependency.IDENTITY_REGISTRAR,
                lookup="owner",
                deploy=deploy_identity_registrar,
                canonical_name=names.identity_domain,
                requires=(Dependency.NAMING_REGISTRY,),
            ),
            ResolutionStep(
                dependency=Dependency.RESOURCE_FACTORY,
                lookup="resolve",
                deploy=deploy_resource_factory,
                canonical_name=names.resource_factory_name,
                claim_after_deploy=True,
            ),
            ResolutionStep(
                dependency=Dependency.TOKEN_FACTORY,
                lookup="resolve",
                deploy=deploy_token_factory,
                canonical_name=names.token_factory_name,
                claim_after_deploy=True,
            ),
        ]
    )
