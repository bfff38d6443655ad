"""Root test configuration."""

import logging

import pytest
import structlog
from templatekit.environment import classify_environment
from templatekit.ledger.memory import DEFAULT_ACCOUNT, MemoryLedger
from templatekit.orchestration.context import ProvisioningContext
from templatekit.records import RecordStore


def pytest_configure(config):
    """Configure structlog for tests to suppress debug/info output."""
    logging.basicConfig(level=logging.WARNING, force=True)
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.processors.add_log_level,
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )


@pytest.fixture
def ledger():
    """Fresh in-memory ledger."""
    return MemoryLedger()


@pytest.fixture
def records(tmp_path):
    """Record store backed by a temporary file."""
    return RecordStore(tmp_path / "templates.json")


@pytest.fixture
def make_context(ledger, records):
    """Factory for provisioning contexts sharing the same ledger and record file."""

    def _make(network: str = "development") -> ProvisioningContext:
        return ProvisioningContext(
            ledger=ledger,
            environment=classify_environment(network),
            owner=DEFAULT_ACCOUNT,
            records=records,
        )

    return _make
