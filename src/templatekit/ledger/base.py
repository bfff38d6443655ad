from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol, Sequence

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

# Role allowing its holder to assign names below a registry's domain
CREATE_NAME_ROLE = "CREATE_NAME_ROLE"

INITIAL_VERSION: tuple[int, int, int] = (1, 0, 0)


def is_zero_address(address: str | None) -> bool:
    """Return True for null, empty or all-zero addresses."""
    if not address:
        return True
    digits = address[2:] if address.lower().startswith("0x") else address
    return not digits or set(digits) == {"0"}


@dataclass(frozen=True)
class LedgerEvent:
    """Event emitted by a finalized transaction."""

    name: str
    args: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class TxOutcome:
    """Finalized transaction with the events it emitted."""

    tx_hash: str
    method: str
    events: tuple[LedgerEvent, ...] = ()

    def find_event(self, name: str) -> LedgerEvent | None:
        for event in self.events:
            if event.name == name:
                return event
        return None


@dataclass(frozen=True)
class RegistryDeployment:
    """Addresses produced when a package registry is deployed from scratch."""

    registry: str
    factory: str


class Ledger(Protocol):
    """Opaque deploy and naming primitives the orchestrator builds on.

    Every call blocks until the underlying transaction is finalized and
    either succeeds or raises a LedgerError.
    """

    name: str

    def default_account(self) -> str | None:
        ...

    # Naming registry reads and writes

    def owner_of(self, naming_registry: str, name: str) -> str | None:
        ...

    def resolve(self, naming_registry: str, name: str) -> str | None:
        ...

    def set_name(self, naming_registry: str, name: str, owner: str, address: str) -> TxOutcome:
        ...

    # Deploy routines

    def deploy_naming_registry(self, owner: str) -> str:
        ...

    def deploy_primary_registry(self, naming_registry: str, owner: str, domain: str) -> RegistryDeployment:
        ...

    def deploy_identity_registrar(self, naming_registry: str, owner: str, domain: str) -> str:
        ...

    def deploy_contract(self, resource_type: str, args: Sequence[str], sender: str) -> str:
        ...

    # Registry administration

    def registry_registrar(self, registry: str) -> str:
        ...

    def registry_acl(self, registry: str) -> str:
        ...

    def registry_factory(self, registry: str) -> str | None:
        """Factory that deployed the registry, None when unknown."""
        ...

    def has_permission(self, acl: str, grantee: str, target: str, role: str) -> bool:
        ...

    def grant_permission(self, acl: str, grantee: str, target: str, role: str, sender: str) -> TxOutcome:
        ...

    def create_name(self, registrar: str, label: str, owner: str, sender: str) -> TxOutcome:
        ...

    def new_registry(self, factory: str, parent_domain: str, label: str, owner: str, sender: str) -> TxOutcome:
        ...

    def new_repo_with_version(
        self,
        registry: str,
        name: str,
        owner: str,
        version: Sequence[int],
        content_address: str,
        content_uri: str,
        sender: str,
    ) -> TxOutcome:
        ...

    def close(self) -> None:
        ...
