"""
Crowdfunding Event Data Models

Event type definitions and data structures for crowdfunding service events.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


# =============================================================================
# Event Type Definitions
# =============================================================================


class CrowdfundingEventType(str, Enum):
    """
    Events published by crowdfunding_service.

    These are the authoritative event types for this service.
    Other services should reference these when subscribing.
    """
    CAMPAIGN_CREATED = "campaign.created"
    CONTRIBUTION_RECEIVED = "campaign.contribution.received"
    GOAL_REACHED = "campaign.goal.reached"


# =============================================================================
# Event Data Models - Published Events
# =============================================================================


class CampaignCreatedEventData(BaseModel):
    """campaign.created event data"""
    campaign_id: int = Field(..., description="Campaign ID")
    creator: str = Field(..., description="Principal that created the campaign")
    name: str = Field(..., description="Campaign name")
    goal_amount: int = Field(..., description="Goal in minor units")
    deadline: int = Field(..., description="Deadline in nanoseconds since epoch")
    timestamp: Optional[datetime] = Field(None, description="Event timestamp")


class ContributionReceivedEventData(BaseModel):
    """campaign.contribution.received event data"""
    campaign_id: int = Field(..., description="Campaign ID")
    contributor: str = Field(..., description="Contributing principal")
    amount: int = Field(..., description="Contributed amount in minor units")
    contributor_total: int = Field(..., description="Contributor's cumulative amount")
    current_amount: int = Field(..., description="Campaign total after the contribution")
    timestamp: Optional[datetime] = Field(None, description="Event timestamp")


class GoalReachedEventData(BaseModel):
    """campaign.goal.reached event data"""
    campaign_id: int = Field(..., description="Campaign ID")
    goal_amount: int = Field(..., description="Goal in minor units")
    current_amount: int = Field(..., description="Campaign total when the goal was crossed")
    contributor_count: int = Field(..., description="Distinct contributors so far")
    timestamp: Optional[datetime] = Field(None, description="Event timestamp")


__all__ = [
    "CrowdfundingEventType",
    "CampaignCreatedEventData",
    "ContributionReceivedEventData",
    "GoalReachedEventData",
]
