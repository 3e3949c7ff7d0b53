"""
Root conftest.py - Global fixtures and configuration for all test layers.

Test Layers:
    - component/  : Component tests (in-memory ledger, mocked event bus, TestClient)
    - unit/       : Unit tests (pure functions, no I/O)
"""
import os
import sys

import pytest

# Set testing environment BEFORE any service imports
os.environ.setdefault("ENV", "testing")
os.environ.setdefault("NATS_ENABLED", "false")

# Add project root to path
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, PROJECT_ROOT)

from tests.contracts.crowdfunding.data_contract import (  # noqa: E402
    ANONYMOUS_PRINCIPAL,
    T0,
    CrowdfundingTestDataFactory,
)


# =============================================================================
# Test Configuration
# =============================================================================

class TestConfig:
    """Centralized test configuration"""

    __test__ = False

    SERVICE_NAME = "crowdfunding_service"
    SERVICE_PORT = int(os.getenv("SERVICE_PORT", "8250"))
    NATS_URL = os.getenv("NATS_URL", "nats://localhost:4222")

    # Fixed epoch used by clock fixtures
    T0 = T0
    ANONYMOUS_PRINCIPAL = ANONYMOUS_PRINCIPAL

    # Timeouts
    HTTP_TIMEOUT = 30

    @classmethod
    def get_service_url(cls) -> str:
        return f"http://localhost:{cls.SERVICE_PORT}"


@pytest.fixture(scope="session")
def test_config() -> TestConfig:
    """Provide test configuration"""
    return TestConfig()


@pytest.fixture
def factory() -> CrowdfundingTestDataFactory:
    """Provide test data factory"""
    return CrowdfundingTestDataFactory()


def pytest_configure(config):
    """Configure custom markers"""
    config.addinivalue_line("markers", "unit: pure function tests")
    config.addinivalue_line("markers", "component: tests with in-memory dependencies")
