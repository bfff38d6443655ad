"""JSON-RPC ledger backend.

Talks to a deployment gateway node exposing the ledger primitives as
``deployer_*`` JSON-RPC 2.0 methods. Calls block until the gateway reports
the transaction as finalized.
"""

from __future__ import annotations

import itertools
from typing import Any, Sequence

import httpx
import structlog

from templatekit.core.errors import LedgerError, RegistrationConflict
from templatekit.ledger.base import LedgerEvent, RegistryDeployment, TxOutcome, is_zero_address
from templatekit.ledger.registry import register_backend

logger = structlog.get_logger()

DEFAULT_RPC_URL = "http://localhost:8545"
DEFAULT_USER_AGENT = "templatekit-ledger-rpc/0.1.0"

# Gateway error code for a name that is already registered
REGISTRATION_CONFLICT_CODE = -32010


class RpcLedger:
    """Ledger backend backed by a JSON-RPC gateway over HTTP."""

    name = "rpc"

    def __init__(
        self,
        url: str = DEFAULT_RPC_URL,
        *,
        timeout: float = 120.0,
        account: str | None = None,
        user_agent: str = DEFAULT_USER_AGENT,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._url = url
        self._account = account
        self._ids = itertools.count(1)
        self._client = httpx.Client(
            timeout=timeout,
            transport=transport,
            headers={"Content-Type": "application/json", "User-Agent": user_agent},
        )

    def default_account(self) -> str | None:
        if self._account is None:
            accounts = self._call("deployer_accounts")
            self._account = accounts[0] if accounts else None
        return self._account

    def owner_of(self, naming_registry: str, name: str) -> str | None:
        return _address_or_none(self._call("deployer_ownerOf", naming_registry, name))

    def resolve(self, naming_registry: str, name: str) -> str | None:
        return _address_or_none(self._call("deployer_resolve", naming_registry, name))

    def set_name(self, naming_registry: str, name: str, owner: str, address: str) -> TxOutcome:
        return self._transact("deployer_setName", naming_registry, name, owner, address)

    def deploy_naming_registry(self, owner: str) -> str:
        return self._call("deployer_deployNamingRegistry", owner)["address"]

    def deploy_primary_registry(self, naming_registry: str, owner: str, domain: str) -> RegistryDeployment:
        result = self._call("deployer_deployPrimaryRegistry", naming_registry, owner, domain)
        return RegistryDeployment(registry=result["registry"], factory=result["factory"])

    def deploy_identity_registrar(self, naming_registry: str, owner: str, domain: str) -> str:
        return self._call("deployer_deployIdentityRegistrar", naming_registry, owner, domain)["address"]

    def deploy_contract(self, resource_type: str, args: Sequence[str], sender: str) -> str:
        return self._call("deployer_deployContract", resource_type, list(args), sender)["address"]

    def registry_registrar(self, registry: str) -> str:
        return self._call("deployer_registryRegistrar", registry)

    def registry_acl(self, registry: str) -> str:
        return self._call("deployer_registryAcl", registry)

    def registry_factory(self, registry: str) -> str | None:
        return _address_or_none(self._call("deployer_registryFactory", registry))

    def has_permission(self, acl: str, grantee: str, target: str, role: str) -> bool:
        return bool(self._call("deployer_hasPermission", acl, grantee, target, role))

    def grant_permission(self, acl: str, grantee: str, target: str, role: str, sender: str) -> TxOutcome:
        return self._transact("deployer_grantPermission", acl, grantee, target, role, sender)

    def create_name(self, registrar: str, label: str, owner: str, sender: str) -> TxOutcome:
        return self._transact("deployer_createName", registrar, label, owner, sender)

    def new_registry(self, factory: str, parent_domain: str, label: str, owner: str, sender: str) -> TxOutcome:
        return self._transact("deployer_newRegistry", factory, parent_domain, label, owner, sender)

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
        return self._transact(
            "deployer_newRepoWithVersion",
            registry,
            name,
            owner,
            list(version),
            content_address,
            content_uri,
            sender,
        )

    def close(self) -> None:
        self._client.close()

    def _transact(self, method: str, *params: Any) -> TxOutcome:
        result = self._call(method, *params)
        events = tuple(
            LedgerEvent(name=event.get("event", ""), args=dict(event.get("args") or {}))
            for event in result.get("events", [])
        )
        return TxOutcome(tx_hash=result.get("tx", ""), method=method, events=events)

    def _call(self, method: str, *params: Any) -> Any:
        payload = {"jsonrpc": "2.0", "id": next(self._ids), "method": method, "params": list(params)}
        try:
            response = self._client.post(self._url, json=payload)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.error("ledger_rpc_http_error", method=method, url=self._url, error=str(exc))
            raise LedgerError(f"{method} failed: {exc}", details={"url": self._url}) from exc

        try:
            body = response.json()
        except ValueError as exc:
            raise LedgerError(f"{method} returned a non-JSON response") from exc

        error = body.get("error")
        if error:
            message = error.get("message", "unknown error")
            if error.get("code") == REGISTRATION_CONFLICT_CODE:
                raise RegistrationConflict(message, details={"method": method})
            raise LedgerError(f"{method} failed: {message}", details={"code": error.get("code")})

        logger.debug("ledger_rpc_call", method=method)
        return body.get("result")


def _address_or_none(value: Any) -> str | None:
    if not isinstance(value, str) or is_zero_address(value):
        return None
    return value


def _factory(**kwargs: Any) -> RpcLedger:
    return RpcLedger(**kwargs)


register_backend(
    RpcLedger.name,
    _factory,
    description="JSON-RPC deployment gateway over HTTP",
)

__all__ = ["RpcLedger", "DEFAULT_RPC_URL"]
