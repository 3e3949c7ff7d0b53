"""
Crowdfunding Service Data Models

Canonical data structures for the campaign ledger: campaigns, requests,
derived views, HTTP responses and the Ok/Err result type returned by the
service facade.

All monetary amounts are integer minor units. All instants are integer
nanoseconds since the Unix epoch.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, Dict, Generic, List, Optional, TypeVar, Union

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from .protocols import CrowdfundingServiceError


NANOS_PER_SECOND = 1_000_000_000
NANOS_PER_DAY = 24 * 60 * 60 * NANOS_PER_SECOND


# ====================
# Enums
# ====================


class DisplayStatus(str, Enum):
    """Derived campaign status shown to users"""
    ACTIVE = "Active"
    FUNDED = "Funded"
    ENDED = "Ended"


class StatusFilter(str, Enum):
    """Status filter for campaign listings"""
    ALL = "all"
    ACTIVE = "active"
    FUNDED = "funded"
    ENDED = "ended"


class SortKey(str, Enum):
    """Sort order for campaign listings"""
    NEWEST = "newest"
    ENDING_SOON = "endingSoon"
    MOST_FUNDED = "mostFunded"
    GOAL_AMOUNT = "goalAmount"


class ErrorKind(str, Enum):
    """Failure classification carried by every service error"""
    VALIDATION = "validation_error"
    NOT_FOUND = "not_found"
    CAMPAIGN_CLOSED = "campaign_closed"
    UNAUTHORIZED = "unauthorized"
    CONCURRENCY = "concurrency_error"


# ====================
# Core Models
# ====================


class BaseContract(BaseModel):
    """Base model for all contracts"""

    model_config = {
        "from_attributes": True,
    }


class Campaign(BaseContract):
    """Campaign snapshot including its contribution ledger"""
    id: int = Field(..., ge=1)
    creator: str
    name: str = Field(..., min_length=1)
    description: str
    goal_amount: int = Field(..., gt=0, description="Goal in minor units")
    current_amount: int = Field(default=0, ge=0, description="Raised so far in minor units")
    deadline: int = Field(..., description="Deadline in nanoseconds since epoch")
    created_at: int = Field(..., description="Creation instant in nanoseconds since epoch")
    is_active: bool = True
    contributors: Dict[str, int] = Field(default_factory=dict)

    @property
    def ledger_total(self) -> int:
        """Sum of all contributor entries"""
        return sum(self.contributors.values())


# ====================
# Request Models
# ====================


class CampaignCreateRequest(BaseContract):
    """Campaign creation request

    Field rules (non-empty name, description length, goal, duration bounds)
    are enforced by the registry so every failing field is reported at once.
    """
    name: str
    description: str
    goal_amount: int = Field(..., description="Goal in minor units")
    duration_days: int = Field(..., description="Campaign duration in days")


class ContributeRequest(BaseContract):
    """Contribution request"""
    amount: int = Field(..., description="Contribution in minor units")


# ====================
# Derived Views / Responses
# ====================


class ContributionReceipt(BaseContract):
    """Totals after an applied contribution"""
    campaign_id: int
    contributor: str
    amount: int
    contributor_total: int
    current_amount: int
    goal_amount: int
    goal_reached: bool


class CampaignView(BaseContract):
    """Campaign snapshot with status derived at a given instant"""
    campaign: Campaign
    display_status: DisplayStatus
    days_remaining: int
    is_active_now: bool
    is_funded: bool
    progress_percent: Decimal
    evaluated_at: int


class CampaignCreatedResponse(BaseContract):
    """Campaign creation response"""
    campaign_id: int
    message: str = "Campaign created successfully"


class CampaignListResponse(BaseContract):
    """Campaign list response"""
    campaigns: List[CampaignView]
    total: int


class ContributionLookupResponse(BaseContract):
    """Caller's cumulative contribution to a campaign"""
    campaign_id: int
    contributor: str
    amount: int


class CampaignSuccessResponse(BaseContract):
    """Outcome of a campaign whose deadline has passed"""
    campaign_id: int
    successful: bool


class HealthResponse(BaseModel):
    """Health check response"""
    status: str
    service: str
    port: int
    version: str
    dependencies: Dict[str, str] = Field(default_factory=dict)


class ReadinessResponse(BaseModel):
    """Readiness check response"""
    ready: bool
    checks: Dict[str, bool] = Field(default_factory=dict)
    details: Dict[str, str] = Field(default_factory=dict)


class LivenessResponse(BaseModel):
    """Liveness check response"""
    alive: bool
    uptime_seconds: float


class ErrorResponse(BaseModel):
    """Standard error response"""
    detail: str
    error_code: Optional[str] = None
    retryable: bool = False
    field_errors: Dict[str, str] = Field(default_factory=dict)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


# ====================
# Result Type
# ====================

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful outcome carrying its payload"""
    value: T

    @property
    def is_ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    """Failed outcome carrying the classified service error"""
    error: "CrowdfundingServiceError"

    @property
    def is_ok(self) -> bool:
        return False

    @property
    def kind(self) -> ErrorKind:
        return self.error.error_kind

    @property
    def retryable(self) -> bool:
        return self.error.retryable


Result = Union[Ok[T], Err]


__all__ = [
    "NANOS_PER_SECOND",
    "NANOS_PER_DAY",
    # Enums
    "DisplayStatus",
    "StatusFilter",
    "SortKey",
    "ErrorKind",
    # Core Models
    "Campaign",
    # Requests
    "CampaignCreateRequest",
    "ContributeRequest",
    # Views / Responses
    "ContributionReceipt",
    "CampaignView",
    "CampaignCreatedResponse",
    "CampaignListResponse",
    "ContributionLookupResponse",
    "CampaignSuccessResponse",
    "HealthResponse",
    "ReadinessResponse",
    "LivenessResponse",
    "ErrorResponse",
    # Results
    "Ok",
    "Err",
    "Result",
]
