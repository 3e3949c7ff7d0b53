"""
Crowdfunding Service Data Repository

In-process campaign store (arena keyed by campaign id).

Concurrency model:
- one asyncio.Lock guards id allocation
- one asyncio.Lock per campaign serializes its contributions
- commits are copy-on-write: an updated copy replaces the committed
  campaign in a single assignment, so readers never see a total that
  disagrees with the ledger
"""

import asyncio
import logging
from typing import Callable, Dict, List, Optional

from .models import Campaign
from .protocols import LedgerConcurrencyError

logger = logging.getLogger(__name__)


class CampaignRepository:
    """Campaign store - in-memory, asyncio-safe"""

    def __init__(self):
        self._campaigns: Dict[int, Campaign] = {}
        self._locks: Dict[int, asyncio.Lock] = {}
        self._id_lock = asyncio.Lock()
        self._next_id = 1

    async def initialize(self):
        """Initialize store"""
        logger.info("Campaign repository initialized (in-memory ledger)")

    async def close(self):
        """Release store resources"""
        logger.info(f"Campaign repository closed with {len(self._campaigns)} campaigns")

    async def health_check(self) -> bool:
        """Check repository health"""
        return True

    # ====================
    # Campaign CRUD
    # ====================

    async def insert_campaign(self, build: Callable[[int], Campaign]) -> Campaign:
        """
        Allocate the next id and insert the campaign built for it.

        The id is only consumed if build succeeds, so ids stay gap-free
        and strictly increasing in creation order.
        """
        async with self._id_lock:
            campaign_id = self._next_id
            campaign = build(campaign_id)
            if campaign.id != campaign_id:
                raise LedgerConcurrencyError(
                    f"Built campaign id {campaign.id} does not match allocated id {campaign_id}"
                )
            self._locks[campaign_id] = asyncio.Lock()
            self._campaigns[campaign_id] = campaign.model_copy(deep=True)
            self._next_id = campaign_id + 1

        return campaign.model_copy(deep=True)

    async def get_campaign(self, campaign_id: int) -> Optional[Campaign]:
        """Get a copy of the committed campaign"""
        campaign = self._campaigns.get(campaign_id)
        if campaign is None:
            return None
        return campaign.model_copy(deep=True)

    async def list_campaigns(self) -> List[Campaign]:
        """Copies of all campaigns in ascending id order"""
        return [
            self._campaigns[campaign_id].model_copy(deep=True)
            for campaign_id in sorted(self._campaigns)
        ]

    async def get_contribution(self, campaign_id: int, contributor: str) -> Optional[int]:
        """Contributor's cumulative amount; None if the campaign is unknown"""
        campaign = self._campaigns.get(campaign_id)
        if campaign is None:
            return None
        return campaign.contributors.get(contributor, 0)

    async def count(self) -> int:
        return len(self._campaigns)

    # ====================
    # Ledger Mutation
    # ====================

    async def apply_contribution(
        self,
        campaign_id: int,
        contributor: str,
        amount: int,
        precondition: Callable[[Campaign], None],
    ) -> Optional[Campaign]:
        """
        Atomically add amount to the campaign total and the contributor's entry.

        precondition runs against the committed campaign while the
        campaign lock is held and may raise to reject the contribution.
        Returns None if the campaign does not exist.
        """
        lock = self._locks.get(campaign_id)
        if lock is None:
            return None

        async with lock:
            committed = self._campaigns[campaign_id]
            precondition(committed)

            contributors = dict(committed.contributors)
            contributors[contributor] = contributors.get(contributor, 0) + amount
            updated = committed.model_copy(
                update={
                    "current_amount": committed.current_amount + amount,
                    "contributors": contributors,
                }
            )

            if updated.current_amount != updated.ledger_total:
                raise LedgerConcurrencyError(
                    f"Ledger for campaign {campaign_id} does not balance "
                    f"({updated.current_amount} != {updated.ledger_total})"
                )
            if updated.current_amount < committed.current_amount:
                raise LedgerConcurrencyError(
                    f"Total for campaign {campaign_id} would decrease"
                )

            self._campaigns[campaign_id] = updated

        return updated.model_copy(deep=True)


__all__ = ["CampaignRepository"]
