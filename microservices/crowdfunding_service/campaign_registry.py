"""
Campaign Registry

Single source of truth for campaigns: validates creation requests,
assigns ids and applies contributions. Nothing else mutates a
campaign's running total or its contribution ledger.
"""

import logging
from typing import Dict, List

from .models import NANOS_PER_DAY, Campaign
from .protocols import (
    CampaignClosedError,
    CampaignNotFoundError,
    CampaignStoreProtocol,
    CampaignValidationError,
)
from .status import effective_active, is_expired

logger = logging.getLogger(__name__)


class CampaignRegistry:
    """Validated, atomic mutations over the campaign store"""

    MIN_DESCRIPTION_LENGTH = 20
    MIN_DURATION_DAYS = 1
    MAX_DURATION_DAYS = 90

    def __init__(self, store: CampaignStoreProtocol):
        self._store = store

    async def create(
        self,
        creator: str,
        name: str,
        description: str,
        goal_amount: int,
        duration_days: int,
        now: int,
    ) -> Campaign:
        """
        Create a campaign that runs for duration_days from now.

        Raises:
            CampaignValidationError: listing every failing field
        """
        errors = self._validate_create(name, description, goal_amount, duration_days)
        if errors:
            logger.warning(f"Rejected campaign from {creator}: {errors}")
            raise CampaignValidationError(errors)

        deadline = now + duration_days * NANOS_PER_DAY

        def build(campaign_id: int) -> Campaign:
            return Campaign(
                id=campaign_id,
                creator=creator,
                name=name,
                description=description,
                goal_amount=goal_amount,
                current_amount=0,
                deadline=deadline,
                created_at=now,
                is_active=True,
                contributors={},
            )

        campaign = await self._store.insert_campaign(build)
        logger.info(
            f"Campaign created: id={campaign.id} creator={creator} "
            f"goal={goal_amount} deadline={deadline}"
        )
        return campaign

    async def contribute(
        self,
        campaign_id: int,
        contributor: str,
        amount: int,
        now: int,
    ) -> Campaign:
        """
        Add amount to the campaign total and the contributor's ledger entry.

        Raises:
            CampaignNotFoundError: unknown campaign
            CampaignValidationError: amount is not positive
            CampaignClosedError: campaign not accepting contributions at now
        """
        if await self._store.get_campaign(campaign_id) is None:
            raise CampaignNotFoundError(campaign_id)

        if not self._is_int(amount) or amount <= 0:
            raise CampaignValidationError({"amount": "Contribution must be greater than 0"})

        def ensure_open(campaign: Campaign) -> None:
            if effective_active(campaign, now):
                return
            if is_expired(campaign, now):
                raise CampaignClosedError("Campaign has ended", campaign.id)
            raise CampaignClosedError("Campaign is not active", campaign.id)

        try:
            campaign = await self._store.apply_contribution(
                campaign_id, contributor, amount, ensure_open
            )
        except CampaignClosedError as e:
            logger.warning(f"Contribution to campaign {campaign_id} rejected: {e}")
            raise

        if campaign is None:
            raise CampaignNotFoundError(campaign_id)

        logger.info(
            f"Contribution applied: campaign={campaign_id} contributor={contributor} "
            f"amount={amount} total={campaign.current_amount}"
        )
        return campaign

    async def get(self, campaign_id: int) -> Campaign:
        """Get campaign snapshot"""
        campaign = await self._store.get_campaign(campaign_id)
        if campaign is None:
            raise CampaignNotFoundError(campaign_id)
        return campaign

    async def get_contribution(self, campaign_id: int, contributor: str) -> int:
        """Contributor's cumulative amount, 0 when they have not contributed"""
        campaign = await self.get(campaign_id)
        return campaign.contributors.get(contributor, 0)

    async def list_all(self) -> List[Campaign]:
        """All campaigns in creation order"""
        return await self._store.list_campaigns()

    # ====================
    # Validation Helpers
    # ====================

    def _validate_create(
        self,
        name: str,
        description: str,
        goal_amount: int,
        duration_days: int,
    ) -> Dict[str, str]:
        errors: Dict[str, str] = {}

        if not isinstance(name, str) or not name.strip():
            errors["name"] = "Campaign name is required"

        if not isinstance(description, str) or not description.strip():
            errors["description"] = "Campaign description is required"
        elif len(description.strip()) < self.MIN_DESCRIPTION_LENGTH:
            errors["description"] = (
                f"Description must be at least {self.MIN_DESCRIPTION_LENGTH} characters long"
            )

        if not self._is_int(goal_amount) or goal_amount <= 0:
            errors["goal_amount"] = "Funding goal must be greater than 0"

        if (
            not self._is_int(duration_days)
            or duration_days < self.MIN_DURATION_DAYS
            or duration_days > self.MAX_DURATION_DAYS
        ):
            errors["duration_days"] = (
                f"Duration must be between {self.MIN_DURATION_DAYS} "
                f"and {self.MAX_DURATION_DAYS} days"
            )

        return errors

    @staticmethod
    def _is_int(value) -> bool:
        return isinstance(value, int) and not isinstance(value, bool)


__all__ = ["CampaignRegistry"]
