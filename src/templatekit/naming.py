"""Client for the shared hierarchical naming registry."""

from __future__ import annotations

import structlog

from templatekit.ledger.base import Ledger, TxOutcome, is_zero_address

logger = structlog.get_logger()


class NamingRegistryClient:
    """Resolves hierarchical names against one naming registry instance.

    A name counts as registered iff its owner is a non-null, non-zero
    address. Name hashing is left to the ledger backend.
    """

    def __init__(self, ledger: Ledger, address: str) -> None:
        self._ledger = ledger
        self.address = address

    def resolve(self, name: str) -> str | None:
        address = self._ledger.resolve(self.address, name)
        return None if is_zero_address(address) else address

    def owner_of(self, name: str) -> str | None:
        owner = self._ledger.owner_of(self.address, name)
        return None if is_zero_address(owner) else owner

    def is_registered(self, name: str) -> bool:
        return self.owner_of(name) is not None

    def claim(self, name: str, owner: str, address: str) -> TxOutcome:
        """Assign ``name`` to ``owner`` and point it at ``address``."""
        logger.debug("naming_claim", name=name, owner=owner, address=address)
        return self._ledger.set_name(self.address, name, owner, address)
