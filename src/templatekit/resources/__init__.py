"""Resource handles and dependency kinds."""

from templatekit.resources.handles import (
    RESOURCE_TYPES,
    Dependency,
    RegistryHandle,
    ResourceHandle,
    ResourceKind,
    handle_for,
)

__all__ = [
    "RESOURCE_TYPES",
    "Dependency",
    "RegistryHandle",
    "ResourceHandle",
    "ResourceKind",
    "handle_for",
]
