"""Tests for settings and deploy options loading."""

import pytest
from templatekit.config import AppDescriptor, DeployOptions, Settings, load_deploy_options
from templatekit.core.errors import ConfigurationError
from templatekit.resources.handles import Dependency


class TestLoadDeployOptions:
    def test_none_gives_defaults(self):
        options = load_deploy_options(None)

        assert options == DeployOptions()
        assert options.override_for(Dependency.NAMING_REGISTRY) is None

    def test_full_file(self, tmp_path):
        path = tmp_path / "deploy.yaml"
        path.write_text(
            """
naming_registry: "0xens"
token_factory: "0xminime"
verbose: true
apps:
  - name: voting
    resource_type: Voting
  - name: dot-voting
    resource_type: DotVoting
    uses_secondary_registry: true
"""
        )

        options = load_deploy_options(path)

        assert options.override_for(Dependency.NAMING_REGISTRY) == "0xens"
        assert options.override_for(Dependency.TOKEN_FACTORY) == "0xminime"
        assert options.override_for(Dependency.PRIMARY_REGISTRY) is None
        assert options.verbose is True
        assert options.apps == (
            AppDescriptor("voting", "Voting"),
            AppDescriptor("dot-voting", "DotVoting", uses_secondary_registry=True),
        )

    def test_contract_name_alias(self, tmp_path):
        path = tmp_path / "deploy.yaml"
        path.write_text("apps:\n  - name: vault\n    contract_name: Vault\n")

        assert load_deploy_options(path).apps[0].resource_type == "Vault"

    def test_empty_file(self, tmp_path):
        path = tmp_path / "deploy.yaml"
        path.write_text("")

        assert load_deploy_options(path) == DeployOptions()

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            load_deploy_options(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "deploy.yaml"
        path.write_text("apps: [unclosed")

        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            load_deploy_options(path)

    def test_unknown_keys(self, tmp_path):
        path = tmp_path / "deploy.yaml"
        path.write_text("ens: 0x1\n")

        with pytest.raises(ConfigurationError):
            load_deploy_options(path)

    def test_app_without_resource_type(self, tmp_path):
        path = tmp_path / "deploy.yaml"
        path.write_text("apps:\n  - name: voting\n")

        with pytest.raises(ConfigurationError):
            load_deploy_options(path)

    def test_apps_must_be_list(self, tmp_path):
        path = tmp_path / "deploy.yaml"
        path.write_text("apps: voting\n")

        with pytest.raises(ConfigurationError):
            load_deploy_options(path)


class TestMergedWith:
    def test_flags_take_precedence(self):
        options = DeployOptions(overrides={Dependency.NAMING_REGISTRY: "0xfile"})

        merged = options.merged_with(
            overrides={Dependency.NAMING_REGISTRY: "0xflag", Dependency.PRIMARY_REGISTRY: None},
        )

        assert merged.override_for(Dependency.NAMING_REGISTRY) == "0xflag"
        assert Dependency.PRIMARY_REGISTRY not in merged.overrides

    def test_keeps_values_when_not_given(self):
        apps = (AppDescriptor("voting", "Voting"),)
        options = DeployOptions(apps=apps, verbose=True)

        merged = options.merged_with()

        assert merged.apps == apps
        assert merged.verbose is True

    def test_original_is_unchanged(self):
        options = DeployOptions()
        options.merged_with(overrides={Dependency.TOKEN_FACTORY: "0x1"}, verbose=True)

        assert options.overrides == {}
        assert options.verbose is False


class TestSettings:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("TEMPLATEKIT_NETWORK", raising=False)
        settings = Settings(_env_file=None)

        assert settings.network == "development"
        assert settings.backend == "memory"
        assert settings.primary_registry_domain == "aragonpm.eth"

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("TEMPLATEKIT_NETWORK", "mainnet")
        monkeypatch.setenv("TEMPLATEKIT_BACKEND", "rpc")

        settings = Settings(_env_file=None)

        assert settings.network == "mainnet"
        assert settings.backend == "rpc"
