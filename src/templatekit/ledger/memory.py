"""In-process simulated ledger.

Implements the naming registry, package registries, permissions and
contract deployment with deterministic addresses. Useful for local
development and for exercising the orchestrator end to end. State can be
persisted to a JSON file so consecutive CLI runs see the same chain.
"""

from __future__ import annotations

import hashlib
import json
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Sequence

import structlog

from templatekit.core.errors import LedgerError, RegistrationConflict
from templatekit.ledger.base import (
    CREATE_NAME_ROLE,
    LedgerEvent,
    RegistryDeployment,
    TxOutcome,
    is_zero_address,
)
from templatekit.ledger.registry import register_backend

logger = structlog.get_logger()

DEFAULT_ACCOUNT = "0xb4124ceb3451635dacedd11767f004d8a28c6ee7"


@dataclass
class NameEntry:
    owner: str
    address: str | None = None


@dataclass
class ContractEntry:
    resource_type: str
    args: list[str] = field(default_factory=list)


@dataclass
class RegistryEntry:
    naming_registry: str
    domain: str
    registrar: str
    acl: str
    factory: str | None = None


@dataclass
class RepoEntry:
    name: str
    versions: list[dict[str, Any]] = field(default_factory=list)


@dataclass
class _ChainState:
    nonce: int = 0
    names: dict[str, dict[str, NameEntry]] = field(default_factory=dict)
    contracts: dict[str, ContractEntry] = field(default_factory=dict)
    registries: dict[str, RegistryEntry] = field(default_factory=dict)
    registrars: dict[str, RegistryEntry] = field(default_factory=dict)
    factories: dict[str, str] = field(default_factory=dict)
    repos: dict[str, RepoEntry] = field(default_factory=dict)
    permissions: list[list[str]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "_ChainState":
        return cls(
            nonce=data.get("nonce", 0),
            names={
                registry: {name: NameEntry(**entry) for name, entry in entries.items()}
                for registry, entries in data.get("names", {}).items()
            },
            contracts={addr: ContractEntry(**entry) for addr, entry in data.get("contracts", {}).items()},
            registries={addr: RegistryEntry(**entry) for addr, entry in data.get("registries", {}).items()},
            registrars={addr: RegistryEntry(**entry) for addr, entry in data.get("registrars", {}).items()},
            factories=dict(data.get("factories", {})),
            repos={addr: RepoEntry(**entry) for addr, entry in data.get("repos", {}).items()},
            permissions=[list(p) for p in data.get("permissions", [])],
        )


class MemoryLedger:
    """Ledger backend holding all state in process memory."""

    name = "memory"

    def __init__(
        self,
        *,
        state_path: str | Path | None = None,
        account: str = DEFAULT_ACCOUNT,
    ) -> None:
        self._account = account
        self._state_path = Path(state_path).expanduser() if state_path else None
        self._state = self._load_state()
        self.transactions: list[TxOutcome] = []

    def default_account(self) -> str | None:
        return self._account

    # Naming registry

    def owner_of(self, naming_registry: str, name: str) -> str | None:
        entry = self._names(naming_registry).get(name)
        return entry.owner if entry else None

    def resolve(self, naming_registry: str, name: str) -> str | None:
        entry = self._names(naming_registry).get(name)
        return entry.address if entry else None

    def set_name(self, naming_registry: str, name: str, owner: str, address: str) -> TxOutcome:
        self._claim(naming_registry, name, owner, address)
        return self._finalize("setName", LedgerEvent("NewOwner", {"name": name, "owner": owner}))

    # Deploy routines

    def deploy_naming_registry(self, owner: str) -> str:
        address = self._new_contract("ENS", [owner])
        self._state.names[address] = {}
        self._finalize("deployNamingRegistry", LedgerEvent("DeployENS", {"ens": address}))
        return address

    def deploy_primary_registry(self, naming_registry: str, owner: str, domain: str) -> RegistryDeployment:
        self._names(naming_registry)
        factory = self._new_contract("APMRegistryFactory", [naming_registry])
        self._state.factories[factory] = naming_registry
        registry = self._create_registry(naming_registry, domain, owner, factory=factory)
        self._finalize("deployPrimaryRegistry", LedgerEvent("DeployAPM", {"apm": registry}))
        return RegistryDeployment(registry=registry, factory=factory)

    def deploy_identity_registrar(self, naming_registry: str, owner: str, domain: str) -> str:
        registrar = self._new_contract("FIFSResolvingRegistrar", [naming_registry, domain])
        self._claim(naming_registry, domain, registrar, registrar)
        self._finalize("deployIdentityRegistrar", LedgerEvent("DeployRegistrar", {"registrar": registrar}))
        return registrar

    def deploy_contract(self, resource_type: str, args: Sequence[str], sender: str) -> str:
        address = self._new_contract(resource_type, list(args))
        self._finalize("deployContract", LedgerEvent("Deploy", {"address": address, "type": resource_type}))
        return address

    # Registry administration

    def registry_registrar(self, registry: str) -> str:
        return self._registry(registry).registrar

    def registry_acl(self, registry: str) -> str:
        return self._registry(registry).acl

    def registry_factory(self, registry: str) -> str | None:
        return self._registry(registry).factory

    def has_permission(self, acl: str, grantee: str, target: str, role: str) -> bool:
        return [acl, grantee, target, role] in self._state.permissions

    def grant_permission(self, acl: str, grantee: str, target: str, role: str, sender: str) -> TxOutcome:
        if [acl, sender, target, role] not in self._state.permissions and not self._is_acl_manager(acl, sender):
            raise LedgerError(f"{sender} cannot grant {role} on {target}")
        if not self.has_permission(acl, grantee, target, role):
            self._state.permissions.append([acl, grantee, target, role])
        return self._finalize("grantPermission", LedgerEvent("SetPermission", {"entity": grantee, "role": role}))

    def create_name(self, registrar: str, label: str, owner: str, sender: str) -> TxOutcome:
        entry = self._state.registrars.get(registrar)
        if entry is None:
            raise LedgerError(f"No subdomain registrar at {registrar}")
        if not self.has_permission(entry.acl, sender, registrar, CREATE_NAME_ROLE):
            raise LedgerError(f"{sender} lacks {CREATE_NAME_ROLE} on {registrar}")
        name = f"{label}.{entry.domain}"
        self._claim(entry.naming_registry, name, owner, None)
        return self._finalize("createName", LedgerEvent("NewName", {"name": name, "owner": owner}))

    def new_registry(self, factory: str, parent_domain: str, label: str, owner: str, sender: str) -> TxOutcome:
        naming_registry = self._state.factories.get(factory)
        if naming_registry is None:
            raise LedgerError(f"No registry factory at {factory}")
        domain = f"{label}.{parent_domain}"
        current = self._names(naming_registry).get(domain)
        if current is None or current.owner != factory:
            raise LedgerError(f"Factory {factory} does not own {domain}")
        if not is_zero_address(current.address):
            raise RegistrationConflict(f"{domain} already resolves to {current.address}")
        del self._names(naming_registry)[domain]
        registry = self._create_registry(naming_registry, domain, owner, factory=factory)
        return self._finalize("newRegistry", LedgerEvent("DeployRegistry", {"registry": registry}))

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
        entry = self._registry(registry)
        full_name = f"{name}.{entry.domain}"
        repo = self._new_contract("Repo", [registry, owner])
        self._claim(entry.naming_registry, full_name, entry.registrar, repo)
        self._state.repos[repo] = RepoEntry(
            name=full_name,
            versions=[
                {
                    "version": list(version),
                    "content_address": content_address,
                    "content_uri": content_uri,
                }
            ],
        )
        return self._finalize("newRepoWithVersion", LedgerEvent("NewRepo", {"name": full_name, "repo": repo}))

    def close(self) -> None:
        self._save_state()

    # Inspection helpers

    def contract(self, address: str) -> ContractEntry | None:
        return self._state.contracts.get(address)

    def repo_versions(self, repo: str) -> list[dict[str, Any]]:
        entry = self._state.repos.get(repo)
        return list(entry.versions) if entry else []

    def writes(self, method: str | None = None) -> list[TxOutcome]:
        if method is None:
            return list(self.transactions)
        return [tx for tx in self.transactions if tx.method == method]

    # Internals

    def _names(self, naming_registry: str) -> dict[str, NameEntry]:
        names = self._state.names.get(naming_registry)
        if names is None:
            raise LedgerError(f"No naming registry at {naming_registry}")
        return names

    def _registry(self, registry: str) -> RegistryEntry:
        entry = self._state.registries.get(registry)
        if entry is None:
            raise LedgerError(f"No package registry at {registry}")
        return entry

    def _claim(self, naming_registry: str, name: str, owner: str, address: str | None) -> None:
        names = self._names(naming_registry)
        current = names.get(name)
        if current is not None and not is_zero_address(current.owner):
            raise RegistrationConflict(
                f"Name {name} is already owned by {current.owner}",
                details={"name": name},
            )
        names[name] = NameEntry(owner=owner, address=address)

    def _create_registry(self, naming_registry: str, domain: str, owner: str, *, factory: str | None) -> str:
        registry = self._new_contract("APMRegistry", [naming_registry, domain])
        registrar = self._new_contract("ENSSubdomainRegistrar", [naming_registry, domain])
        acl = self._new_contract("ACL", [registry])
        entry = RegistryEntry(
            naming_registry=naming_registry,
            domain=domain,
            registrar=registrar,
            acl=acl,
            factory=factory,
        )
        self._state.registries[registry] = entry
        self._state.registrars[registrar] = entry
        self._state.permissions.append([acl, owner, acl, "CREATE_PERMISSIONS_ROLE"])
        self._claim(naming_registry, domain, registrar, registry)
        return registry

    def _is_acl_manager(self, acl: str, sender: str) -> bool:
        return [acl, sender, acl, "CREATE_PERMISSIONS_ROLE"] in self._state.permissions

    def _new_contract(self, resource_type: str, args: list[str]) -> str:
        self._state.nonce += 1
        seed = f"{self._account}:{self._state.nonce}".encode()
        address = "0x" + hashlib.sha256(seed).hexdigest()[:40]
        self._state.contracts[address] = ContractEntry(resource_type=resource_type, args=args)
        return address

    def _finalize(self, method: str, *events: LedgerEvent) -> TxOutcome:
        seed = f"tx:{self._state.nonce}:{len(self.transactions)}:{method}".encode()
        outcome = TxOutcome(tx_hash="0x" + hashlib.sha256(seed).hexdigest(), method=method, events=events)
        self.transactions.append(outcome)
        logger.debug("ledger_transaction", backend=self.name, method=method, tx=outcome.tx_hash)
        self._save_state()
        return outcome

    def _load_state(self) -> _ChainState:
        if self._state_path is None or not self._state_path.exists():
            return _ChainState()
        data = json.loads(self._state_path.read_text())
        return _ChainState.from_dict(data)

    def _save_state(self) -> None:
        if self._state_path is None:
            return
        self._state_path.parent.mkdir(parents=True, exist_ok=True)
        self._state_path.write_text(json.dumps(self._state.to_dict(), indent=2, sort_keys=True) + "\n")


def _factory(**kwargs: Any) -> MemoryLedger:
    return MemoryLedger(**kwargs)


register_backend(
    MemoryLedger.name,
    _factory,
    description="In-process simulated ledger for local development",
)

__all__ = ["MemoryLedger", "DEFAULT_ACCOUNT"]
