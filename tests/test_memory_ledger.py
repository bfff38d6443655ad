"""Tests for the in-memory ledger backend."""

import pytest
from templatekit.core.errors import LedgerError, RegistrationConflict
from templatekit.ledger import create_backend
from templatekit.ledger.base import CREATE_NAME_ROLE, is_zero_address
from templatekit.ledger.memory import DEFAULT_ACCOUNT, MemoryLedger

OWNER = DEFAULT_ACCOUNT


@pytest.fixture
def naming_registry(ledger):
    return ledger.deploy_naming_registry(OWNER)


class TestIsZeroAddress:
    def test_zero_forms(self):
        assert is_zero_address(None)
        assert is_zero_address("")
        assert is_zero_address("0x")
        assert is_zero_address("0x0000000000000000000000000000000000000000")

    def test_non_zero(self):
        assert not is_zero_address("0x5f6f7e8cc7346a11ca2def8f827b7a0b612c56a1")


class TestNaming:
    def test_unknown_name(self, ledger, naming_registry):
        assert ledger.owner_of(naming_registry, "nothing.eth") is None
        assert ledger.resolve(naming_registry, "nothing.eth") is None

    def test_set_name(self, ledger, naming_registry):
        ledger.set_name(naming_registry, "daofactory.eth", OWNER, "0xabc")

        assert ledger.owner_of(naming_registry, "daofactory.eth") == OWNER
        assert ledger.resolve(naming_registry, "daofactory.eth") == "0xabc"

    def test_set_name_twice_conflicts(self, ledger, naming_registry):
        ledger.set_name(naming_registry, "daofactory.eth", OWNER, "0xabc")

        with pytest.raises(RegistrationConflict):
            ledger.set_name(naming_registry, "daofactory.eth", OWNER, "0xdef")

    def test_unknown_naming_registry(self, ledger):
        with pytest.raises(LedgerError):
            ledger.owner_of("0xdead", "aragonpm.eth")


class TestRegistries:
    def test_primary_registry_resolves_domain(self, ledger, naming_registry):
        deployment = ledger.deploy_primary_registry(naming_registry, OWNER, "aragonpm.eth")

        assert ledger.resolve(naming_registry, "aragonpm.eth") == deployment.registry
        assert ledger.owner_of(naming_registry, "aragonpm.eth") == ledger.registry_registrar(deployment.registry)
        assert ledger.contract(deployment.factory).resource_type == "APMRegistryFactory"

    def test_registry_factory_survives_reload(self, tmp_path):
        state_path = tmp_path / "chain.json"
        first = MemoryLedger(state_path=state_path)
        naming_registry = first.deploy_naming_registry(OWNER)
        deployment = first.deploy_primary_registry(naming_registry, OWNER, "aragonpm.eth")

        assert MemoryLedger(state_path=state_path).registry_factory(deployment.registry) == deployment.factory

    def test_mint_sub_registry(self, ledger, naming_registry):
        deployment = ledger.deploy_primary_registry(naming_registry, OWNER, "aragonpm.eth")
        registrar = ledger.registry_registrar(deployment.registry)
        acl = ledger.registry_acl(deployment.registry)

        ledger.grant_permission(acl, OWNER, registrar, CREATE_NAME_ROLE, OWNER)
        ledger.create_name(registrar, "open", deployment.factory, OWNER)
        outcome = ledger.new_registry(deployment.factory, "aragonpm.eth", "open", OWNER, OWNER)

        minted = outcome.find_event("DeployRegistry").args["registry"]
        assert ledger.resolve(naming_registry, "open.aragonpm.eth") == minted

    def test_create_name_requires_permission(self, ledger, naming_registry):
        deployment = ledger.deploy_primary_registry(naming_registry, OWNER, "aragonpm.eth")
        registrar = ledger.registry_registrar(deployment.registry)

        with pytest.raises(LedgerError):
            ledger.create_name(registrar, "open", deployment.factory, OWNER)

    def test_new_registry_requires_factory_to_own_name(self, ledger, naming_registry):
        deployment = ledger.deploy_primary_registry(naming_registry, OWNER, "aragonpm.eth")

        with pytest.raises(LedgerError):
            ledger.new_registry(deployment.factory, "aragonpm.eth", "open", OWNER, OWNER)

    def test_new_repo_with_version(self, ledger, naming_registry):
        deployment = ledger.deploy_primary_registry(naming_registry, OWNER, "aragonpm.eth")
        app = ledger.deploy_contract("Voting", [], OWNER)

        ledger.new_repo_with_version(deployment.registry, "voting", OWNER, (1, 0, 0), app, "", OWNER)

        repo = ledger.resolve(naming_registry, "voting.aragonpm.eth")
        versions = ledger.repo_versions(repo)
        assert versions == [{"version": [1, 0, 0], "content_address": app, "content_uri": ""}]

    def test_duplicate_repo_conflicts(self, ledger, naming_registry):
        deployment = ledger.deploy_primary_registry(naming_registry, OWNER, "aragonpm.eth")
        ledger.new_repo_with_version(deployment.registry, "voting", OWNER, (1, 0, 0), "0x1", "", OWNER)

        with pytest.raises(RegistrationConflict):
            ledger.new_repo_with_version(deployment.registry, "voting", OWNER, (1, 0, 0), "0x2", "", OWNER)


class TestTransactions:
    def test_writes_are_recorded(self, ledger, naming_registry):
        ledger.deploy_contract("MiniMeTokenFactory", [], OWNER)

        assert [tx.method for tx in ledger.writes()] == ["deployNamingRegistry", "deployContract"]
        assert len(ledger.writes("deployContract")) == 1

    def test_addresses_are_deterministic(self):
        first = MemoryLedger().deploy_naming_registry(OWNER)
        second = MemoryLedger().deploy_naming_registry(OWNER)

        assert first == second


class TestPersistence:
    def test_state_survives_reload(self, tmp_path):
        state_path = tmp_path / "chain.json"
        ledger = MemoryLedger(state_path=state_path)
        naming_registry = ledger.deploy_naming_registry(OWNER)
        ledger.deploy_primary_registry(naming_registry, OWNER, "aragonpm.eth")
        ledger.close()

        reloaded = MemoryLedger(state_path=state_path)

        assert reloaded.resolve(naming_registry, "aragonpm.eth") is not None
        assert reloaded.contract(naming_registry).resource_type == "ENS"
        new_address = reloaded.deploy_contract("Voting", [], OWNER)
        assert reloaded.contract(naming_registry).resource_type == "ENS"
        assert reloaded.contract(new_address).resource_type == "Voting"


def test_registered_as_backend():
    ledger = create_backend("memory")

    assert isinstance(ledger, MemoryLedger)
    assert ledger.default_account() == DEFAULT_ACCOUNT
