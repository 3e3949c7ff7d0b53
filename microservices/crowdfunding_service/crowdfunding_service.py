"""
Crowdfunding Service Business Logic

Boundary facade over the campaign registry and query service. Enforces
the write authorization policy, reads the clock once per call, publishes
ledger events after commits, and returns explicit Ok/Err results.
"""

import logging
from typing import List, Optional, Union

from core.auth_dependencies import is_anonymous

from .campaign_query import CampaignQueryService
from .campaign_registry import CampaignRegistry
from .events.publishers import CrowdfundingEventPublisher
from .models import (
    Campaign,
    CampaignCreateRequest,
    CampaignView,
    ContributionReceipt,
    Err,
    Ok,
    Result,
    SortKey,
    StatusFilter,
)
from .protocols import (
    ClockProtocol,
    CrowdfundingServiceError,
    CampaignValidationError,
    UnauthorizedError,
)

logger = logging.getLogger(__name__)


class CrowdfundingService:
    """Crowdfunding service business logic layer"""

    def __init__(
        self,
        registry: CampaignRegistry,
        query: CampaignQueryService,
        clock: ClockProtocol,
        event_publisher: Optional[CrowdfundingEventPublisher] = None,
        anonymous_principal: str = "2vxsx-fae",
    ):
        self.registry = registry
        self.query = query
        self.clock = clock
        self.event_publisher = event_publisher
        self.anonymous_principal = anonymous_principal

    # ====================
    # Write Operations
    # ====================

    async def create_campaign(
        self,
        caller: Optional[str],
        request: CampaignCreateRequest,
    ) -> Result[int]:
        """Create a campaign owned by caller; Ok carries the new campaign id"""
        try:
            self._require_principal(caller, "create a campaign")
            campaign = await self.registry.create(
                creator=caller,
                name=request.name,
                description=request.description,
                goal_amount=request.goal_amount,
                duration_days=request.duration_days,
                now=self.clock.now_ns(),
            )
        except CrowdfundingServiceError as e:
            return self._fail("create_campaign", e)

        if self.event_publisher:
            await self.event_publisher.publish_campaign_created(campaign)

        return Ok(campaign.id)

    async def contribute(
        self,
        caller: Optional[str],
        campaign_id: int,
        amount: int,
    ) -> Result[ContributionReceipt]:
        """Contribute amount minor units from caller to a campaign"""
        try:
            self._require_principal(caller, "contribute")
            campaign = await self.registry.contribute(
                campaign_id=campaign_id,
                contributor=caller,
                amount=amount,
                now=self.clock.now_ns(),
            )
        except CrowdfundingServiceError as e:
            return self._fail("contribute", e)

        receipt = ContributionReceipt(
            campaign_id=campaign.id,
            contributor=caller,
            amount=amount,
            contributor_total=campaign.contributors.get(caller, 0),
            current_amount=campaign.current_amount,
            goal_amount=campaign.goal_amount,
            goal_reached=campaign.current_amount >= campaign.goal_amount,
        )

        if self.event_publisher:
            await self.event_publisher.publish_contribution_received(campaign, caller, amount)
            previous_total = campaign.current_amount - amount
            if previous_total < campaign.goal_amount <= campaign.current_amount:
                await self.event_publisher.publish_goal_reached(campaign)

        return Ok(receipt)

    # ====================
    # Read Operations
    # ====================

    async def get_campaign(self, campaign_id: int) -> Result[Campaign]:
        """Get campaign snapshot"""
        try:
            return Ok(await self.query.get_campaign(campaign_id))
        except CrowdfundingServiceError as e:
            return self._fail("get_campaign", e)

    async def list_campaigns(
        self,
        search: Optional[str] = None,
        status_filter: Optional[Union[StatusFilter, str]] = None,
        sort_key: Optional[Union[SortKey, str]] = None,
    ) -> Result[List[Campaign]]:
        """List campaigns matching search and status, in sort_key order"""
        try:
            status_value = self._parse_enum(StatusFilter, status_filter, StatusFilter.ALL, "status")
            sort_value = self._parse_enum(SortKey, sort_key, SortKey.NEWEST, "sort")
            campaigns = await self.query.list_filtered(
                search_text=search,
                status_filter=status_value,
                sort_key=sort_value,
                now=self.clock.now_ns(),
            )
        except CrowdfundingServiceError as e:
            return self._fail("list_campaigns", e)
        return Ok(campaigns)

    async def get_my_contribution(
        self,
        caller: Optional[str],
        campaign_id: int,
    ) -> Result[int]:
        """Caller's cumulative contribution; anonymous callers have none"""
        try:
            if is_anonymous(caller, self.anonymous_principal):
                await self.query.get_campaign(campaign_id)
                return Ok(0)
            return Ok(await self.query.get_contribution(campaign_id, caller))
        except CrowdfundingServiceError as e:
            return self._fail("get_my_contribution", e)

    async def is_campaign_successful(self, campaign_id: int) -> Result[bool]:
        """Whether a campaign past its deadline reached its goal"""
        try:
            return Ok(await self.query.is_campaign_successful(campaign_id, self.clock.now_ns()))
        except CrowdfundingServiceError as e:
            return self._fail("is_campaign_successful", e)

    def view(self, campaign: Campaign) -> CampaignView:
        """Campaign with status derived at the current instant"""
        return self.query.view(campaign, self.clock.now_ns())

    # ====================
    # Helpers
    # ====================

    def _require_principal(self, caller: Optional[str], action: str) -> None:
        if is_anonymous(caller, self.anonymous_principal):
            raise UnauthorizedError(f"Authentication required to {action}")

    @staticmethod
    def _parse_enum(enum_cls, value, default, field: str):
        if value is None or value == "":
            return default
        if isinstance(value, enum_cls):
            return value
        try:
            return enum_cls(value)
        except ValueError:
            allowed = ", ".join(member.value for member in enum_cls)
            raise CampaignValidationError({field: f"Must be one of: {allowed}"})

    @staticmethod
    def _fail(operation: str, error: CrowdfundingServiceError) -> Err:
        logger.warning(f"{operation} failed [{error.error_kind.value}]: {error}")
        return Err(error)


__all__ = ["CrowdfundingService"]
