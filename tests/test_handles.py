"""Tests for resources/handles.py."""

import pytest
from templatekit.resources.handles import (
    Dependency,
    RegistryHandle,
    ResourceHandle,
    ResourceKind,
    handle_for,
)

ADDRESS = "0x1111111111111111111111111111111111111111"


class TestHandleFor:
    def test_registry_dependencies_get_registry_handles(self):
        handle = handle_for(
            Dependency.PRIMARY_REGISTRY,
            ADDRESS,
            domain="aragonpm.eth",
            factory_address="0xfac",
        )

        assert isinstance(handle, RegistryHandle)
        assert handle.kind is ResourceKind.PRIMARY_REGISTRY
        assert handle.resource_type == "APMRegistry"
        assert handle.domain == "aragonpm.eth"
        assert handle.factory_address == "0xfac"

    def test_plain_dependencies_get_resource_handles(self):
        handle = handle_for(Dependency.TOKEN_FACTORY, ADDRESS)

        assert type(handle) is ResourceHandle
        assert handle.kind is ResourceKind.TOKEN_FACTORY
        assert handle.resource_type == "MiniMeTokenFactory"
        assert handle.constructor_args == ()

    def test_constructor_args_are_kept(self):
        naming = handle_for(Dependency.NAMING_REGISTRY, ADDRESS)
        registrar = handle_for(Dependency.IDENTITY_REGISTRAR, "0x2", constructor_args=(naming,))

        assert registrar.constructor_args == (naming,)


class TestResourceHandle:
    def test_requires_address(self):
        with pytest.raises(ValueError):
            ResourceHandle(address="", kind=ResourceKind.APP, resource_type="Voting")

    def test_is_frozen(self):
        handle = handle_for(Dependency.NAMING_REGISTRY, ADDRESS)

        with pytest.raises(AttributeError):
            handle.address = "0x2"  # type: ignore[misc]


def test_dependency_kind_matches_value():
    for dependency in Dependency:
        assert dependency.kind.value == dependency.value
        assert str(dependency) == dependency.value
