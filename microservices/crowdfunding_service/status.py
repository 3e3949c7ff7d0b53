"""
Campaign Status Derivation

Pure functions of (current_amount, goal_amount, deadline, is_active, now).
Status is never stored; every reader derives it at its own instant.
"""

from decimal import Decimal

from .models import NANOS_PER_DAY, Campaign, DisplayStatus


def days_remaining(campaign: Campaign, now: int) -> int:
    """Whole days left until the deadline, rounded up, never negative"""
    remaining = campaign.deadline - now
    if remaining <= 0:
        return 0
    # ceil for positive integers
    return -(-remaining // NANOS_PER_DAY)


def is_expired(campaign: Campaign, now: int) -> bool:
    return days_remaining(campaign, now) == 0


def effective_active(campaign: Campaign, now: int) -> bool:
    """Accepting contributions at this instant"""
    return campaign.is_active and not is_expired(campaign, now)


def is_funded(campaign: Campaign) -> bool:
    return campaign.current_amount >= campaign.goal_amount


def display_status(campaign: Campaign, now: int) -> DisplayStatus:
    """Active wins while true; once not active, Funded wins over Ended."""
    if effective_active(campaign, now):
        return DisplayStatus.ACTIVE
    if is_funded(campaign):
        return DisplayStatus.FUNDED
    return DisplayStatus.ENDED


def progress_percent(campaign: Campaign) -> Decimal:
    """Raised amount as a percentage of the goal; exceeds 100 when over-funded"""
    return Decimal(campaign.current_amount) * 100 / Decimal(campaign.goal_amount)


__all__ = [
    "days_remaining",
    "is_expired",
    "effective_active",
    "is_funded",
    "display_status",
    "progress_percent",
]
