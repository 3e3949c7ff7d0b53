"""
Crowdfunding Service Events

Event models and publishers for crowdfunding service.
"""

from .models import (
    CrowdfundingEventType,
    CampaignCreatedEventData,
    ContributionReceivedEventData,
    GoalReachedEventData,
)
from .publishers import CrowdfundingEventPublisher

__all__ = [
    # Event Types
    "CrowdfundingEventType",
    # Event Data Models
    "CampaignCreatedEventData",
    "ContributionReceivedEventData",
    "GoalReachedEventData",
    # Publisher
    "CrowdfundingEventPublisher",
]
