"""
Component Test Fixtures for Crowdfunding Service

Wires the real registry, query service and facade over the in-memory
ledger, with a fixed clock and a recording event bus.
Uses FastAPI TestClient for API testing.
"""

import os
import sys

import pytest

# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "../../.."))

from microservices.crowdfunding_service.campaign_query import CampaignQueryService
from microservices.crowdfunding_service.campaign_registry import CampaignRegistry
from microservices.crowdfunding_service.campaign_repository import CampaignRepository
from microservices.crowdfunding_service.clock import FixedClock
from microservices.crowdfunding_service.crowdfunding_service import CrowdfundingService
from microservices.crowdfunding_service.events.publishers import CrowdfundingEventPublisher
from tests.component.mocks import MockEventBus
from tests.contracts.crowdfunding.data_contract import (
    ANONYMOUS_PRINCIPAL,
    T0,
    CrowdfundingTestDataFactory,
)


@pytest.fixture
def clock() -> FixedClock:
    """Clock pinned at T0; tests advance it explicitly"""
    return FixedClock(T0)


@pytest.fixture
def repository() -> CampaignRepository:
    return CampaignRepository()


@pytest.fixture
def registry(repository) -> CampaignRegistry:
    return CampaignRegistry(repository)


@pytest.fixture
def query(registry) -> CampaignQueryService:
    return CampaignQueryService(registry)


@pytest.fixture
def mock_event_bus() -> MockEventBus:
    return MockEventBus()


@pytest.fixture
def event_publisher(mock_event_bus) -> CrowdfundingEventPublisher:
    return CrowdfundingEventPublisher(mock_event_bus)


@pytest.fixture
def service(registry, query, clock, event_publisher) -> CrowdfundingService:
    return CrowdfundingService(
        registry=registry,
        query=query,
        clock=clock,
        event_publisher=event_publisher,
        anonymous_principal=ANONYMOUS_PRINCIPAL,
    )


@pytest.fixture
def alice() -> str:
    return CrowdfundingTestDataFactory.make_principal()


@pytest.fixture
def bob() -> str:
    return CrowdfundingTestDataFactory.make_principal()


@pytest.fixture
def api_client(service):
    """TestClient with the app's service dependency bound to the fixture service"""
    from fastapi.testclient import TestClient

    from microservices.crowdfunding_service import main

    main.app.dependency_overrides[main.get_service] = lambda: service
    with TestClient(main.app) as client:
        yield client
    main.app.dependency_overrides.clear()
