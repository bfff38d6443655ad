"""Classification of the target network.

Only local networks allow missing dependencies to be deployed on the fly.
The classification is computed once at the start of a run and passed down.
"""

from __future__ import annotations

from dataclasses import dataclass

LOCAL_NETWORKS = frozenset({"development", "devnet", "rpc", "coverage", "local"})


@dataclass(frozen=True)
class Environment:
    """Target network and whether it is local."""

    network: str
    is_local: bool

    def __str__(self) -> str:
        kind = "local" if self.is_local else "non-local"
        return f"{self.network} ({kind})"


def is_local_network(network: str) -> bool:
    """Check whether a network name denotes a local development chain.

    Examples:
        development -> True
        devnet -> True
        mainnet -> False
        rinkeby -> False
    """
    if not network:
        return False
    return network.strip().lower() in LOCAL_NETWORKS


def classify_environment(network: str, *, force_local: bool | None = None) -> Environment:
    """Build the Environment for ``network``.

    ``force_local`` overrides the name-based classification when set.
    """
    is_local = is_local_network(network) if force_local is None else force_local
    return Environment(network=network, is_local=is_local)
