"""
Crowdfunding Service Factory

Factory for creating crowdfunding service instances with proper dependency injection.
"""

import logging
from typing import Optional

from core.config import CrowdfundingConfig, get_settings
from core.nats_client import NATSEventBus

from .campaign_query import CampaignQueryService
from .campaign_registry import CampaignRegistry
from .campaign_repository import CampaignRepository
from .clock import SystemClock
from .crowdfunding_service import CrowdfundingService
from .events.publishers import CrowdfundingEventPublisher
from .protocols import ClockProtocol

logger = logging.getLogger(__name__)


class CrowdfundingServiceFactory:
    """Factory for creating crowdfunding service components"""

    def __init__(
        self,
        config: Optional[CrowdfundingConfig] = None,
        clock: Optional[ClockProtocol] = None,
    ):
        self.config = config or get_settings()
        self.clock = clock or SystemClock()
        self._repository: Optional[CampaignRepository] = None
        self._service: Optional[CrowdfundingService] = None
        self._nats_client: Optional[NATSEventBus] = None
        self._event_publisher: Optional[CrowdfundingEventPublisher] = None

    async def initialize(self) -> None:
        """Initialize all components"""
        logger.info("Initializing Crowdfunding Service components...")

        # Initialize repository
        self._repository = CampaignRepository()
        await self._repository.initialize()

        # Initialize NATS client
        if self.config.nats.enabled:
            try:
                self._nats_client = NATSEventBus(
                    service_name=self.config.service_name,
                    config=self.config.nats,
                )
                await self._nats_client.connect()
                logger.info("NATS client connected")
            except Exception as e:
                logger.warning(f"NATS client initialization failed: {e}")
                self._nats_client = None
        else:
            logger.info("NATS disabled, events will not be published")

        self._event_publisher = CrowdfundingEventPublisher(self._nats_client)

        # Initialize main service
        registry = CampaignRegistry(self._repository)
        self._service = CrowdfundingService(
            registry=registry,
            query=CampaignQueryService(registry),
            clock=self.clock,
            event_publisher=self._event_publisher,
            anonymous_principal=self.config.anonymous_principal,
        )

        logger.info("Crowdfunding Service components initialized")

    async def close(self) -> None:
        """Close all components"""
        logger.info("Closing Crowdfunding Service components...")

        if self._nats_client:
            await self._nats_client.close()

        if self._repository:
            await self._repository.close()

        logger.info("Crowdfunding Service components closed")

    @property
    def repository(self) -> CampaignRepository:
        """Get campaign repository"""
        if not self._repository:
            raise RuntimeError("Factory not initialized. Call initialize() first.")
        return self._repository

    @property
    def service(self) -> CrowdfundingService:
        """Get crowdfunding service"""
        if not self._service:
            raise RuntimeError("Factory not initialized. Call initialize() first.")
        return self._service

    @property
    def nats_client(self) -> Optional[NATSEventBus]:
        """Get NATS client"""
        return self._nats_client

    @property
    def event_publisher(self) -> Optional[CrowdfundingEventPublisher]:
        """Get event publisher"""
        return self._event_publisher


__all__ = ["CrowdfundingServiceFactory"]
