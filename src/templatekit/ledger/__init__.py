"""Ledger backends and built-in registrations."""

# Import built-in backends for side effects (registration)
from templatekit.ledger import memory as _memory  # noqa: F401
from templatekit.ledger import rpc as _rpc  # noqa: F401
from templatekit.ledger.base import (
    CREATE_NAME_ROLE,
    INITIAL_VERSION,
    ZERO_ADDRESS,
    Ledger,
    LedgerEvent,
    RegistryDeployment,
    TxOutcome,
    is_zero_address,
)
from templatekit.ledger.registry import (
    create_backend,
    list_backends,
    register_backend,
)

__all__ = [
    "CREATE_NAME_ROLE",
    "INITIAL_VERSION",
    "ZERO_ADDRESS",
    "Ledger",
    "LedgerEvent",
    "RegistryDeployment",
    "TxOutcome",
    "create_backend",
    "is_zero_address",
    "list_backends",
    "register_backend",
]
