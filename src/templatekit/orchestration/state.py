"""Per-run resolution state."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Mapping

from templatekit.naming import NamingRegistryClient
from templatekit.resources.handles import Dependency, ResourceHandle


class Tier(str, Enum):
    """Resolution tier that produced a handle, in the order they are tried."""

    OVERRIDE = "override"
    REGISTRY = "registry"
    DEPLOYED = "deployed"


class ResolutionState:
    """Handles resolved so far in the current run.

    Grows strictly in dependency order and never shrinks. Created fresh for
    each run.
    """

    def __init__(self) -> None:
        self._handles: dict[Dependency, ResourceHandle] = {}
        self._tiers: dict[Dependency, Tier] = {}

    def add(self, dependency: Dependency, handle: ResourceHandle, tier: Tier) -> None:
        if dependency in self._handles:
            raise ValueError(f"{dependency} is already resolved")
        self._handles[dependency] = handle
        self._tiers[dependency] = tier

    def get(self, dependency: Dependency) -> ResourceHandle:
        try:
            return self._handles[dependency]
        except KeyError:
            raise LookupError(f"{dependency} has not been resolved yet") from None

    def tier(self, dependency: Dependency) -> Tier:
        return self._tiers[dependency]

    @property
    def tiers(self) -> dict[Dependency, Tier]:
        return dict(self._tiers)

    def address(self, dependency: Dependency) -> str:
        return self.get(dependency).address

    def inputs(
        self,
        dependencies: tuple[Dependency, ...],
        naming: NamingRegistryClient | None,
    ) -> "ResolvedInputs":
        """Read-only view restricted to ``dependencies``."""
        return ResolvedInputs(
            handles={dependency: self.get(dependency) for dependency in dependencies},
            naming=naming,
        )

    def __contains__(self, dependency: object) -> bool:
        return dependency in self._handles

    def __iter__(self) -> Iterator[Dependency]:
        return iter(self._handles)

    def __len__(self) -> int:
        return len(self._handles)


@dataclass(frozen=True)
class ResolvedInputs:
    """Handles a deploy routine declared as inputs, plus the naming client."""

    handles: Mapping[Dependency, ResourceHandle]
    naming: NamingRegistryClient | None = None

    def __getitem__(self, dependency: Dependency) -> ResourceHandle:
        try:
            return self.handles[dependency]
        except KeyError:
            raise LookupError(f"{dependency} is not a declared input") from None
