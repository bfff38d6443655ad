"""Typed references to resources living on the ledger."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ResourceKind(str, Enum):
    """Fixed set of resource kinds the orchestrator deals with."""

    NAMING_REGISTRY = "naming_registry"
    PRIMARY_REGISTRY = "primary_registry"
    SECONDARY_REGISTRY = "secondary_registry"
    IDENTITY_REGISTRAR = "identity_registrar"
    RESOURCE_FACTORY = "resource_factory"
    TOKEN_FACTORY = "token_factory"
    APP = "app"
    TEMPLATE = "template"


class Dependency(str, Enum):
    """Dependencies a template needs before it can be instantiated."""

    NAMING_REGISTRY = "naming_registry"
    PRIMARY_REGISTRY = "primary_registry"
    SECONDARY_REGISTRY = "secondary_registry"
    IDENTITY_REGISTRAR = "identity_registrar"
    RESOURCE_FACTORY = "resource_factory"
    TOKEN_FACTORY = "token_factory"

    @property
    def kind(self) -> ResourceKind:
        return ResourceKind(self.value)

    @property
    def display_name(self) -> str:
        return self.value.replace("_", " ")

    def __str__(self) -> str:
        return self.value


# Contract names used when a dependency is deployed or wrapped
RESOURCE_TYPES: dict[Dependency, str] = {
    Dependency.NAMING_REGISTRY: "ENS",
    Dependency.PRIMARY_REGISTRY: "APMRegistry",
    Dependency.SECONDARY_REGISTRY: "APMRegistry",
    Dependency.IDENTITY_REGISTRAR: "FIFSResolvingRegistrar",
    Dependency.RESOURCE_FACTORY: "DAOFactory",
    Dependency.TOKEN_FACTORY: "MiniMeTokenFactory",
}


@dataclass(frozen=True)
class ResourceHandle:
    """Reference to an instantiated resource."""

    address: str
    kind: ResourceKind
    resource_type: str
    constructor_args: tuple["ResourceHandle", ...] = ()

    def __post_init__(self) -> None:
        if not self.address:
            raise ValueError(f"{self.kind.value} handle requires an address")


@dataclass(frozen=True)
class RegistryHandle(ResourceHandle):
    """Handle to a package registry rooted under a naming-registry domain.

    ``factory_address`` is only known when the registry was deployed during
    the current run; it is the factory able to mint sub-registries.
    """

    domain: str = ""
    factory_address: str | None = None


def handle_for(
    dependency: Dependency,
    address: str,
    *,
    constructor_args: tuple[ResourceHandle, ...] = (),
    domain: str | None = None,
    factory_address: str | None = None,
) -> ResourceHandle:
    """Wrap an address as the handle type expected for ``dependency``."""
    resource_type = RESOURCE_TYPES[dependency]
    if dependency in (Dependency.PRIMARY_REGISTRY, Dependency.SECONDARY_REGISTRY):
        return RegistryHandle(
            address=address,
            kind=dependency.kind,
            resource_type=resource_type,
            constructor_args=constructor_args,
            domain=domain or "",
            factory_address=factory_address,
        )
    return ResourceHandle(
        address=address,
        kind=dependency.kind,
        resource_type=resource_type,
        constructor_args=constructor_args,
    )
