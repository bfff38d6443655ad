"""
Application settings using Pydantic.

Provides environment-based configuration loading with TEMPLATEKIT_ prefix.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="TEMPLATEKIT_",
        extra="ignore",
    )

    # Target network
    network: str = "development"

    # Ledger backend
    backend: str = "memory"
    rpc_url: str = "http://localhost:8545"
    rpc_timeout: float = 120.0
    memory_state_file: str | None = ".templatekit/memory-chain.json"

    # Account used to sign deployments (backend default when unset)
    owner: str | None = None

    # Template record file
    record_file: str = "templates.json"

    # Naming
    primary_registry_domain: str = "aragonpm.eth"
    secondary_registry_label: str = "open"
    identity_registrar_domain: str = "aragonid.eth"
    resource_factory_name: str = "daofactory.eth"
    token_factory_name: str = "minimefactory.eth"

    # Logging
    verbose: bool = False


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
