"""
Crowdfunding Service Protocols

Defines interfaces for dependency injection and testing, plus the
service error hierarchy.
NO import-time I/O dependencies - safe to import anywhere.
"""

from typing import Any, Callable, Dict, List, Optional, Protocol, runtime_checkable

from .models import Campaign, ErrorKind


# ====================
# Custom Exceptions
# ====================


class CrowdfundingServiceError(Exception):
    """Base exception for crowdfunding service errors"""

    error_kind: ErrorKind = ErrorKind.VALIDATION
    retryable: bool = False


class CampaignValidationError(CrowdfundingServiceError):
    """Raised when input is malformed or out of range

    field_errors maps each failing field to a message safe to show users.
    """

    error_kind = ErrorKind.VALIDATION

    def __init__(self, field_errors: Dict[str, str]):
        self.field_errors = dict(field_errors)
        message = "; ".join(f"{field}: {msg}" for field, msg in self.field_errors.items())
        super().__init__(message or "Invalid input")

    @property
    def fields(self) -> List[str]:
        return list(self.field_errors)


class CampaignNotFoundError(CrowdfundingServiceError):
    """Raised when campaign is not found"""

    error_kind = ErrorKind.NOT_FOUND

    def __init__(self, campaign_id: int):
        super().__init__(f"Campaign not found: {campaign_id}")
        self.campaign_id = campaign_id


class CampaignClosedError(CrowdfundingServiceError):
    """Raised when a contribution arrives outside the active window"""

    error_kind = ErrorKind.CAMPAIGN_CLOSED

    def __init__(self, message: str, campaign_id: Optional[int] = None):
        super().__init__(message)
        self.campaign_id = campaign_id


class CampaignStillActiveError(CampaignClosedError):
    """Raised when a campaign outcome is requested before its deadline"""


class UnauthorizedError(CrowdfundingServiceError):
    """Raised when an anonymous caller attempts a write"""

    error_kind = ErrorKind.UNAUTHORIZED


class LedgerConcurrencyError(CrowdfundingServiceError):
    """Raised when an atomic ledger update cannot be committed; safe to retry"""

    error_kind = ErrorKind.CONCURRENCY
    retryable = True


# ====================
# Clock Protocol
# ====================


@runtime_checkable
class ClockProtocol(Protocol):
    """Source of the current instant"""

    def now_ns(self) -> int:
        """Current instant in nanoseconds since epoch"""
        ...


# ====================
# Store Protocol
# ====================


@runtime_checkable
class CampaignStoreProtocol(Protocol):
    """
    Interface for the campaign store.

    Implementations hand out copies only; the committed campaigns are
    never reachable from outside the store.
    """

    async def initialize(self) -> None:
        ...

    async def close(self) -> None:
        ...

    async def health_check(self) -> bool:
        ...

    async def insert_campaign(self, build: Callable[[int], Campaign]) -> Campaign:
        """Allocate the next id and insert the campaign built for it"""
        ...

    async def get_campaign(self, campaign_id: int) -> Optional[Campaign]:
        ...

    async def list_campaigns(self) -> List[Campaign]:
        """All campaigns in ascending id order"""
        ...

    async def apply_contribution(
        self,
        campaign_id: int,
        contributor: str,
        amount: int,
        precondition: Callable[[Campaign], None],
    ) -> Optional[Campaign]:
        """Atomically add amount to the total and the contributor's entry"""
        ...

    async def count(self) -> int:
        ...


# ====================
# Event Bus Protocol
# ====================


class EventBusProtocol(Protocol):
    """Protocol for event bus operations"""

    async def publish_event(self, event: Any) -> bool:
        """Publish an event to the event bus"""
        ...

    async def close(self) -> None:
        """Close event bus connection"""
        ...


__all__ = [
    "CrowdfundingServiceError",
    "CampaignValidationError",
    "CampaignNotFoundError",
    "CampaignClosedError",
    "CampaignStillActiveError",
    "UnauthorizedError",
    "LedgerConcurrencyError",
    "ClockProtocol",
    "CampaignStoreProtocol",
    "EventBusProtocol",
]
