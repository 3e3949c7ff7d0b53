"""
Campaign Query Service

Read-only projections over the registry: search, status filters,
sorting, single lookups and derived views. Never mutates anything.
"""

from decimal import Decimal
from typing import Callable, Dict, List, Optional, Tuple

from .campaign_registry import CampaignRegistry
from .models import Campaign, CampaignView, SortKey, StatusFilter
from .protocols import CampaignStillActiveError
from . import status

# Views show progress in hundredths of a percent, truncated
PERCENT_PLACES = 2


def matches_search(campaign: Campaign, search_text: Optional[str]) -> bool:
    """Case-insensitive substring match on name or description"""
    if not search_text or not search_text.strip():
        return True
    needle = search_text.strip().casefold()
    return needle in campaign.name.casefold() or needle in campaign.description.casefold()


def matches_status(campaign: Campaign, status_filter: StatusFilter, now: int) -> bool:
    """Status filter; funded and ended may both match an expired funded campaign"""
    if status_filter == StatusFilter.ACTIVE:
        return status.effective_active(campaign, now)
    if status_filter == StatusFilter.FUNDED:
        return status.is_funded(campaign)
    if status_filter == StatusFilter.ENDED:
        return not status.effective_active(campaign, now)
    return True


# Each key sorts ascending; ties fall back to ascending id
SORT_KEYS: Dict[SortKey, Callable[[Campaign], Tuple[int, int]]] = {
    SortKey.NEWEST: lambda c: (-c.id, c.id),
    SortKey.ENDING_SOON: lambda c: (c.deadline, c.id),
    SortKey.MOST_FUNDED: lambda c: (-c.current_amount, c.id),
    SortKey.GOAL_AMOUNT: lambda c: (-c.goal_amount, c.id),
}


def filter_and_sort(
    campaigns: List[Campaign],
    search_text: Optional[str],
    status_filter: StatusFilter,
    sort_key: SortKey,
    now: int,
) -> List[Campaign]:
    """Search, then status filter, then a total-order sort"""
    result = [
        c for c in campaigns
        if matches_search(c, search_text) and matches_status(c, status_filter, now)
    ]
    result.sort(key=SORT_KEYS[sort_key])
    return result


def truncated_percent(campaign: Campaign, places: int = PERCENT_PLACES) -> Decimal:
    """
    Progress percent truncated to places decimals.

    Integer arithmetic throughout; exact for amounts of any size.
    """
    scaled = campaign.current_amount * 100 * 10 ** places // campaign.goal_amount
    return Decimal(f"{scaled}E-{places}")


class CampaignQueryService:
    """Read-only views over the campaign registry"""

    def __init__(self, registry: CampaignRegistry):
        self._registry = registry

    async def list_filtered(
        self,
        search_text: Optional[str],
        status_filter: StatusFilter,
        sort_key: SortKey,
        now: int,
    ) -> List[Campaign]:
        campaigns = await self._registry.list_all()
        return filter_and_sort(campaigns, search_text, status_filter, sort_key, now)

    async def get_campaign(self, campaign_id: int) -> Campaign:
        return await self._registry.get(campaign_id)

    async def get_contribution(self, campaign_id: int, contributor: str) -> int:
        return await self._registry.get_contribution(campaign_id, contributor)

    async def is_campaign_successful(self, campaign_id: int, now: int) -> bool:
        """
        Whether the campaign met its goal.

        Raises:
            CampaignStillActiveError: the deadline has not passed yet
        """
        campaign = await self._registry.get(campaign_id)
        if now < campaign.deadline:
            raise CampaignStillActiveError("Campaign is still active", campaign_id)
        return status.is_funded(campaign)

    @staticmethod
    def progress_percent(campaign: Campaign) -> Decimal:
        return status.progress_percent(campaign)

    @staticmethod
    def view(campaign: Campaign, now: int) -> CampaignView:
        """Snapshot plus status derived at now"""
        return CampaignView(
            campaign=campaign,
            display_status=status.display_status(campaign, now),
            days_remaining=status.days_remaining(campaign, now),
            is_active_now=status.effective_active(campaign, now),
            is_funded=status.is_funded(campaign),
            progress_percent=truncated_percent(campaign),
            evaluated_at=now,
        )


__all__ = [
    "CampaignQueryService",
    "matches_search",
    "matches_status",
    "filter_and_sort",
    "truncated_percent",
    "SORT_KEYS",
]
