"""
Crowdfunding Event Publishers

Publishes ledger events to NATS JetStream.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from core.nats_client import Event, EventType, ServiceSource

from ..models import Campaign
from ..protocols import EventBusProtocol
from .models import (
    CrowdfundingEventType,
    CampaignCreatedEventData,
    ContributionReceivedEventData,
    GoalReachedEventData,
)

logger = logging.getLogger(__name__)


class CrowdfundingEventPublisher:
    """Publisher for crowdfunding service events"""

    def __init__(self, event_bus: Optional[EventBusProtocol] = None):
        self.event_bus = event_bus
        self.source = ServiceSource.CROWDFUNDING_SERVICE

    async def publish(
        self,
        event_type: CrowdfundingEventType,
        data: Dict[str, Any],
    ) -> bool:
        """
        Publish an event to NATS.

        Args:
            event_type: The event type enum
            data: Event data payload

        Returns:
            True if published successfully, False otherwise
        """
        if not self.event_bus:
            logger.debug(f"Event bus not configured, skipping publish: {event_type.value}")
            return False

        try:
            event = Event(
                event_type=EventType(event_type.value),
                source=self.source,
                data=data,
            )
            published = await self.event_bus.publish_event(event)
            if published:
                logger.debug(f"Published event: {event_type.value}")
            return bool(published)

        except Exception as e:
            logger.error(f"Failed to publish event {event_type.value}: {e}")
            return False

    async def publish_campaign_created(self, campaign: Campaign) -> bool:
        """Publish campaign.created event"""
        data = CampaignCreatedEventData(
            campaign_id=campaign.id,
            creator=campaign.creator,
            name=campaign.name,
            goal_amount=campaign.goal_amount,
            deadline=campaign.deadline,
            timestamp=datetime.now(timezone.utc),
        )
        return await self.publish(
            CrowdfundingEventType.CAMPAIGN_CREATED, data.model_dump(mode="json")
        )

    async def publish_contribution_received(
        self,
        campaign: Campaign,
        contributor: str,
        amount: int,
    ) -> bool:
        """Publish campaign.contribution.received event"""
        data = ContributionReceivedEventData(
            campaign_id=campaign.id,
            contributor=contributor,
            amount=amount,
            contributor_total=campaign.contributors.get(contributor, 0),
            current_amount=campaign.current_amount,
            timestamp=datetime.now(timezone.utc),
        )
        return await self.publish(
            CrowdfundingEventType.CONTRIBUTION_RECEIVED, data.model_dump(mode="json")
        )

    async def publish_goal_reached(self, campaign: Campaign) -> bool:
        """Publish campaign.goal.reached event"""
        data = GoalReachedEventData(
            campaign_id=campaign.id,
            goal_amount=campaign.goal_amount,
            current_amount=campaign.current_amount,
            contributor_count=len(campaign.contributors),
            timestamp=datetime.now(timezone.utc),
        )
        return await self.publish(
            CrowdfundingEventType.GOAL_REACHED, data.model_dump(mode="json")
        )


__all__ = ["CrowdfundingEventPublisher"]
