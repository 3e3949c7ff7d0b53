"""
Component Tests for Crowdfunding Service

Tests the facade: authorization ordering, Ok/Err results, derived
status over time, listings and published events.
"""

import os
import sys
from decimal import Decimal

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "../../.."))

from microservices.crowdfunding_service.models import (
    NANOS_PER_DAY,
    DisplayStatus,
    ErrorKind,
    Err,
    Ok,
    SortKey,
    StatusFilter,
)
from microservices.crowdfunding_service.protocols import CampaignStillActiveError
from tests.contracts.crowdfunding.data_contract import (
    ANONYMOUS_PRINCIPAL,
    T0,
    CampaignCreateRequestBuilder,
    CrowdfundingTestDataFactory,
)


class TestCreateCampaign:
    """Tests for create_campaign"""

    @pytest.mark.asyncio
    async def test_create_returns_ok_with_id(self, service, alice):
        result = await service.create_campaign(alice, CampaignCreateRequestBuilder().build())

        assert isinstance(result, Ok)
        assert result.value == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("caller", [None, "", ANONYMOUS_PRINCIPAL])
    async def test_anonymous_create_unauthorized(self, service, caller):
        result = await service.create_campaign(caller, CampaignCreateRequestBuilder().build())

        assert isinstance(result, Err)
        assert result.kind == ErrorKind.UNAUTHORIZED
        assert result.retryable is False

    @pytest.mark.asyncio
    async def test_unauthorized_checked_before_validation(self, service):
        """An anonymous caller with an invalid request is told unauthorized"""
        request = CrowdfundingTestDataFactory.make_invalid_create_request()

        result = await service.create_campaign(ANONYMOUS_PRINCIPAL, request)

        assert result.kind == ErrorKind.UNAUTHORIZED

    @pytest.mark.asyncio
    async def test_invalid_request_reports_fields(self, service, alice):
        request = CrowdfundingTestDataFactory.make_invalid_create_request()

        result = await service.create_campaign(alice, request)

        assert result.kind == ErrorKind.VALIDATION
        assert set(result.error.field_errors) == {"name", "description", "goal_amount", "duration_days"}

    @pytest.mark.asyncio
    async def test_create_publishes_event(self, service, alice, mock_event_bus):
        request = CampaignCreateRequestBuilder().with_name("Solar Roof").with_goal_amount(5000).build()

        await service.create_campaign(alice, request)

        event = mock_event_bus.assert_event_published("campaign.created", {"campaign_id": 1})
        assert event["source"] == "crowdfunding_service"
        assert event["data"]["creator"] == alice
        assert event["data"]["goal_amount"] == 5000

    @pytest.mark.asyncio
    async def test_rejected_create_publishes_nothing(self, service, mock_event_bus):
        await service.create_campaign(None, CampaignCreateRequestBuilder().build())
        mock_event_bus.assert_no_events_published()


class TestContribute:
    """Tests for contribute"""

    @pytest.mark.asyncio
    async def test_contribute_returns_receipt(self, service, alice, bob):
        await service.create_campaign(alice, CampaignCreateRequestBuilder().with_goal_amount(1000).build())

        result = await service.contribute(bob, 1, 400)

        assert isinstance(result, Ok)
        receipt = result.value
        assert receipt.contributor == bob
        assert receipt.amount == 400
        assert receipt.contributor_total == 400
        assert receipt.current_amount == 400
        assert receipt.goal_reached is False

    @pytest.mark.asyncio
    async def test_anonymous_contribute_unauthorized(self, service, alice):
        await service.create_campaign(alice, CampaignCreateRequestBuilder().build())

        result = await service.contribute(ANONYMOUS_PRINCIPAL, 1, 10)

        assert result.kind == ErrorKind.UNAUTHORIZED
        assert (await service.get_campaign(1)).value.current_amount == 0

    @pytest.mark.asyncio
    async def test_unauthorized_before_not_found(self, service):
        result = await service.contribute(None, 99, 10)
        assert result.kind == ErrorKind.UNAUTHORIZED

    @pytest.mark.asyncio
    async def test_contribute_unknown_campaign(self, service, bob):
        result = await service.contribute(bob, 99, 10)
        assert result.kind == ErrorKind.NOT_FOUND

    @pytest.mark.asyncio
    async def test_contribute_zero_amount(self, service, alice, bob):
        await service.create_campaign(alice, CampaignCreateRequestBuilder().build())

        result = await service.contribute(bob, 1, 0)

        assert result.kind == ErrorKind.VALIDATION
        assert result.error.fields == ["amount"]

    @pytest.mark.asyncio
    async def test_contribute_after_deadline_closed(self, service, clock, alice, bob):
        await service.create_campaign(alice, CampaignCreateRequestBuilder().with_duration_days(1).build())
        clock.advance(NANOS_PER_DAY)

        result = await service.contribute(bob, 1, 10)

        assert result.kind == ErrorKind.CAMPAIGN_CLOSED
        assert result.retryable is False

    @pytest.mark.asyncio
    async def test_contribution_events(self, service, alice, bob, mock_event_bus):
        """Goal crossing publishes goal.reached exactly once"""
        await service.create_campaign(alice, CampaignCreateRequestBuilder().with_goal_amount(100).build())
        mock_event_bus.clear()

        await service.contribute(bob, 1, 60)
        mock_event_bus.assert_no_events_published("campaign.goal.reached")

        await service.contribute(alice, 1, 40)
        await service.contribute(bob, 1, 5)

        received = mock_event_bus.get_published("campaign.contribution.received")
        assert [e["data"]["amount"] for e in received] == [60, 40, 5]
        assert received[-1]["data"]["contributor_total"] == 65

        reached = mock_event_bus.get_published("campaign.goal.reached")
        assert len(reached) == 1
        assert reached[0]["data"]["current_amount"] == 100
        assert reached[0]["data"]["contributor_count"] == 2

    @pytest.mark.asyncio
    async def test_event_bus_failure_does_not_fail_contribution(self, service, alice, bob, mock_event_bus):
        await service.create_campaign(alice, CampaignCreateRequestBuilder().build())
        mock_event_bus.set_error(ConnectionError("nats down"))

        result = await service.contribute(bob, 1, 10)

        assert isinstance(result, Ok)
        assert (await service.get_campaign(1)).value.current_amount == 10


class TestLedgerScenario:
    """End-to-end ledger walk-through on a fixed clock"""

    @pytest.mark.asyncio
    async def test_funding_lifecycle(self, service, clock, alice, bob):
        # Given: goal 1000 over 30 days, created at T0
        request = CampaignCreateRequestBuilder().with_goal_amount(1000).with_duration_days(30).build()
        assert (await service.create_campaign(alice, request)).value == 1
        campaign = (await service.get_campaign(1)).value
        assert campaign.current_amount == 0
        assert campaign.deadline == T0 + 30 * NANOS_PER_DAY

        # When: A gives 400 on day 1
        clock.set(T0 + NANOS_PER_DAY)
        await service.contribute(alice, 1, 400)
        campaign = (await service.get_campaign(1)).value
        assert campaign.contributors == {alice: 400}
        assert service.view(campaign).display_status == DisplayStatus.ACTIVE

        # When: B gives 600 on day 2; funded but still running, so Active
        clock.set(T0 + 2 * NANOS_PER_DAY)
        await service.contribute(bob, 1, 600)
        view = service.view((await service.get_campaign(1)).value)
        assert view.campaign.current_amount == 1000
        assert view.is_funded is True
        assert view.display_status == DisplayStatus.ACTIVE
        assert view.days_remaining == 28

        # Then: After the deadline the campaign is Funded and closed
        clock.set(T0 + 31 * NANOS_PER_DAY)
        result = await service.contribute(alice, 1, 1)
        assert result.kind == ErrorKind.CAMPAIGN_CLOSED

        view = service.view((await service.get_campaign(1)).value)
        assert view.campaign.current_amount == 1000
        assert view.display_status == DisplayStatus.FUNDED
        assert view.days_remaining == 0
        assert view.progress_percent == Decimal("100.00")


class TestListCampaigns:
    """Tests for list_campaigns"""

    async def _seed(self, service, clock, owner):
        # ids 1,2,3 with totals 50,200,100 and durations 30,10,20
        for goal, days, name in [(100, 30, "Garden Beds"), (150, 10, "Solar Roof"), (1000, 20, "Library Books")]:
            request = (
                CampaignCreateRequestBuilder()
                .with_name(name)
                .with_goal_amount(goal)
                .with_duration_days(days)
                .build()
            )
            await service.create_campaign(owner, request)
        for campaign_id, amount in [(1, 50), (2, 200), (3, 100)]:
            await service.contribute(owner, campaign_id, amount)

    @pytest.mark.asyncio
    async def test_most_funded_order(self, service, clock, alice):
        await self._seed(service, clock, alice)

        result = await service.list_campaigns(sort_key="mostFunded")

        assert [c.id for c in result.value] == [2, 3, 1]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "sort_key,expected",
        [
            (SortKey.NEWEST, [3, 2, 1]),
            (SortKey.ENDING_SOON, [2, 3, 1]),
            (SortKey.GOAL_AMOUNT, [3, 2, 1]),
            (None, [3, 2, 1]),
        ],
    )
    async def test_sort_orders(self, service, clock, alice, sort_key, expected):
        await self._seed(service, clock, alice)

        result = await service.list_campaigns(sort_key=sort_key)

        assert [c.id for c in result.value] == expected

    @pytest.mark.asyncio
    async def test_search_is_case_insensitive(self, service, clock, alice):
        await self._seed(service, clock, alice)

        result = await service.list_campaigns(search="  SOLAR ")

        assert [c.id for c in result.value] == [2]

    @pytest.mark.asyncio
    async def test_status_filters_over_time(self, service, clock, alice):
        await self._seed(service, clock, alice)

        # Day 15: campaign 2 has ended funded, 1 and 3 still run
        clock.set(T0 + 15 * NANOS_PER_DAY)

        active = await service.list_campaigns(status_filter=StatusFilter.ACTIVE, sort_key=SortKey.ENDING_SOON)
        funded = await service.list_campaigns(status_filter="funded", sort_key=SortKey.ENDING_SOON)
        ended = await service.list_campaigns(status_filter="ended")

        assert [c.id for c in active.value] == [3, 1]
        assert [c.id for c in funded.value] == [2]
        assert [c.id for c in ended.value] == [2]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("kwargs,field", [({"status_filter": "live"}, "status"), ({"sort_key": "oldest"}, "sort")])
    async def test_unknown_filter_or_sort(self, service, kwargs, field):
        result = await service.list_campaigns(**kwargs)

        assert result.kind == ErrorKind.VALIDATION
        assert result.error.fields == [field]


class TestContributionLookup:
    """Tests for get_my_contribution"""

    @pytest.mark.asyncio
    async def test_own_contribution(self, service, alice, bob):
        await service.create_campaign(alice, CampaignCreateRequestBuilder().build())
        await service.contribute(bob, 1, 30)
        await service.contribute(bob, 1, 12)

        assert (await service.get_my_contribution(bob, 1)).value == 42
        assert (await service.get_my_contribution(alice, 1)).value == 0

    @pytest.mark.asyncio
    async def test_anonymous_lookup_is_zero(self, service, alice):
        await service.create_campaign(alice, CampaignCreateRequestBuilder().build())
        assert (await service.get_my_contribution(None, 1)).value == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize("caller", [None, "someone"])
    async def test_lookup_unknown_campaign(self, service, caller):
        result = await service.get_my_contribution(caller, 5)
        assert result.kind == ErrorKind.NOT_FOUND


class TestCampaignOutcome:
    """Tests for is_campaign_successful"""

    @pytest.mark.asyncio
    async def test_outcome_unavailable_while_running(self, service, alice):
        await service.create_campaign(alice, CampaignCreateRequestBuilder().build())

        result = await service.is_campaign_successful(1)

        assert result.kind == ErrorKind.CAMPAIGN_CLOSED
        assert isinstance(result.error, CampaignStillActiveError)

    @pytest.mark.asyncio
    async def test_outcome_after_deadline(self, service, clock, alice, bob):
        request = CampaignCreateRequestBuilder().with_goal_amount(100).with_duration_days(5).build()
        await service.create_campaign(alice, request)
        await service.create_campaign(alice, request)
        await service.contribute(bob, 1, 100)
        await service.contribute(bob, 2, 99)

        clock.advance(5 * NANOS_PER_DAY)

        assert (await service.is_campaign_successful(1)).value is True
        assert (await service.is_campaign_successful(2)).value is False

    @pytest.mark.asyncio
    async def test_outcome_unknown_campaign(self, service):
        result = await service.is_campaign_successful(3)
        assert result.kind == ErrorKind.NOT_FOUND
