"""Shared context passed to every orchestration component."""

from __future__ import annotations

from dataclasses import dataclass

from templatekit.config.settings import Settings
from templatekit.core.errors import ConfigurationError
from templatekit.environment import Environment, classify_environment
from templatekit.ledger.base import Ledger
from templatekit.naming import NamingRegistryClient
from templatekit.records import RecordStore


@dataclass(frozen=True)
class NameScheme:
    """Canonical names under which dependencies and packages are registered."""

    primary_domain: str = "aragonpm.eth"
    secondary_label: str = "open"
    identity_domain: str = "aragonid.eth"
    resource_factory_name: str = "daofactory.eth"
    token_factory_name: str = "minimefactory.eth"

    @property
    def secondary_domain(self) -> str:
        return f"{self.secondary_label}.{self.primary_domain}"

    def package_name(self, name: str, *, secondary: bool = False) -> str:
        """Full name of a package in the primary or secondary registry."""
        domain = self.secondary_domain if secondary else self.primary_domain
        return f"{name}.{domain}"

    @classmethod
    def from_settings(cls, settings: Settings) -> "NameScheme":
        return cls(
            primary_domain=settings.primary_registry_domain,
            secondary_label=settings.secondary_registry_label,
            identity_domain=settings.identity_registrar_domain,
            resource_factory_name=settings.resource_factory_name,
            token_factory_name=settings.token_factory_name,
        )


@dataclass(frozen=True)
class ProvisioningContext:
    """Values computed once at the start of a run and never recomputed."""

    ledger: Ledger
    environment: Environment
    owner: str
    records: RecordStore
    names: NameScheme = NameScheme()

    def naming_client(self, naming_registry: str) -> NamingRegistryClient:
        return NamingRegistryClient(self.ledger, naming_registry)


def build_context(
    ledger: Ledger,
    settings: Settings,
    *,
    network: str | None = None,
    owner: str | None = None,
    record_file: str | None = None,
) -> ProvisioningContext:
    """Build the run context; explicit arguments take precedence over settings."""
    account = owner or settings.owner or ledger.default_account()
    if not account:
        raise ConfigurationError("No owner account configured and the ledger backend has no default account")
    return ProvisioningContext(
        ledger=ledger,
        environment=classify_environment(network or settings.network),
        owner=account,
        records=RecordStore(record_file or settings.record_file),
        names=NameScheme.from_settings(settings),
    )
