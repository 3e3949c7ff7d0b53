"""
Crowdfunding Service Client

Client for other services (and the web front end's BFF) to call
crowdfunding_service.
"""

import logging
import os
from decimal import Decimal
from typing import Any, Dict, Optional, Union

import httpx

from .units import to_minor_units

logger = logging.getLogger(__name__)


class CrowdfundingClient:
    """Client for crowdfunding_service"""

    def __init__(
        self,
        base_url: Optional[str] = None,
        principal: Optional[str] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if base_url is None:
            host = os.getenv("CROWDFUNDING_SERVICE_HOST", "localhost")
            port = os.getenv("CROWDFUNDING_SERVICE_PORT", "8250")
            base_url = f"http://{host}:{port}"
        self.base_url = base_url.rstrip("/")
        self.principal = principal
        self.timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

    def _headers(self) -> Dict[str, str]:
        if self.principal:
            return {"X-User-Id": self.principal}
        return {}

    # ====================
    # Campaigns
    # ====================

    async def create_campaign(
        self,
        name: str,
        description: str,
        goal_amount: int,
        duration_days: int,
    ) -> Dict[str, Any]:
        """
        Create a campaign as the client's principal.

        Args:
            name: Campaign name
            description: At least 20 characters
            goal_amount: Goal in minor units
            duration_days: 1 to 90

        Returns:
            {"campaign_id": ..., "message": ...}

        Raises:
            httpx.HTTPStatusError: on validation (422) or auth (401) failures
        """
        try:
            async with self._client() as client:
                response = await client.post(
                    f"{self.base_url}/api/v1/campaigns",
                    json={
                        "name": name,
                        "description": description,
                        "goal_amount": goal_amount,
                        "duration_days": duration_days,
                    },
                    headers=self._headers(),
                )
                response.raise_for_status()
                return response.json()

        except httpx.HTTPStatusError as e:
            logger.error(f"Error creating campaign: {e.response.text}")
            raise

    async def get_campaign(self, campaign_id: int) -> Optional[Dict[str, Any]]:
        """
        Get campaign view by ID.

        Returns:
            Campaign view or None if not found
        """
        try:
            async with self._client() as client:
                response = await client.get(f"{self.base_url}/api/v1/campaigns/{campaign_id}")

                if response.status_code == 404:
                    return None

                response.raise_for_status()
                return response.json()

        except httpx.HTTPStatusError as e:
            logger.error(f"Error getting campaign: {e.response.text}")
            raise

    async def list_campaigns(
        self,
        search: Optional[str] = None,
        status: Optional[str] = None,
        sort: Optional[str] = None,
    ) -> Dict[str, Any]:
        """List campaigns; status is all/active/funded/ended, sort is newest/endingSoon/mostFunded/goalAmount"""
        params = {}
        if search:
            params["search"] = search
        if status:
            params["status"] = status
        if sort:
            params["sort"] = sort

        try:
            async with self._client() as client:
                response = await client.get(f"{self.base_url}/api/v1/campaigns", params=params)
                response.raise_for_status()
                return response.json()

        except httpx.HTTPStatusError as e:
            logger.error(f"Error listing campaigns: {e.response.text}")
            raise

    async def is_campaign_successful(self, campaign_id: int) -> Optional[bool]:
        """True/False once the deadline has passed, None while still running"""
        try:
            async with self._client() as client:
                response = await client.get(
                    f"{self.base_url}/api/v1/campaigns/{campaign_id}/success"
                )

                if response.status_code == 409:
                    return None

                response.raise_for_status()
                return response.json()["successful"]

        except httpx.HTTPStatusError as e:
            logger.error(f"Error getting campaign outcome: {e.response.text}")
            raise

    # ====================
    # Contributions
    # ====================

    async def contribute(self, campaign_id: int, amount: int) -> Dict[str, Any]:
        """Contribute amount minor units; returns the contribution receipt"""
        try:
            async with self._client() as client:
                response = await client.post(
                    f"{self.base_url}/api/v1/campaigns/{campaign_id}/contributions",
                    json={"amount": amount},
                    headers=self._headers(),
                )
                response.raise_for_status()
                return response.json()

        except httpx.HTTPStatusError as e:
            logger.error(f"Error contributing to campaign {campaign_id}: {e.response.text}")
            raise

    async def contribute_major(
        self,
        campaign_id: int,
        amount: Union[str, Decimal],
    ) -> Dict[str, Any]:
        """Contribute a major-unit amount such as "1.5", truncated to minor units"""
        return await self.contribute(campaign_id, to_minor_units(amount))

    async def get_my_contribution(self, campaign_id: int) -> int:
        """Client principal's cumulative contribution in minor units"""
        try:
            async with self._client() as client:
                response = await client.get(
                    f"{self.base_url}/api/v1/campaigns/{campaign_id}/contributions/me",
                    headers=self._headers(),
                )
                response.raise_for_status()
                return response.json()["amount"]

        except httpx.HTTPStatusError as e:
            logger.error(f"Error getting contribution: {e.response.text}")
            raise

    async def health_check(self) -> bool:
        """Check if crowdfunding_service is healthy"""
        try:
            async with httpx.AsyncClient(timeout=5.0, transport=self._transport) as client:
                response = await client.get(f"{self.base_url}/health")
                return response.status_code == 200
        except Exception:
            return False


__all__ = ["CrowdfundingClient"]
