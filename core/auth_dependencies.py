"""
FastAPI Authentication Dependencies for Microservices

The identity provider sits in front of the gateway and forwards the
authenticated principal id in a header. These dependencies only read it;
authorization policy is enforced by the services themselves.
"""

from fastapi import Header
from typing import Optional
import logging

logger = logging.getLogger(__name__)


async def optional_principal(
    x_user_id: Optional[str] = Header(None, alias="X-User-Id"),
    user_id: Optional[str] = Header(None, alias="user-id"),
) -> Optional[str]:
    """
    Optional principal dependency: anonymous callers get None.

    Usage:
        @app.post("/api/resource")
        async def create_resource(
            principal: Optional[str] = Depends(optional_principal)
        ):
            ...
    """
    principal = x_user_id or user_id
    if principal is not None:
        principal = principal.strip()
    return principal or None


def is_anonymous(principal: Optional[str], anonymous_principal: str) -> bool:
    """Check whether a principal id denotes an anonymous caller"""
    return not principal or principal == anonymous_principal


__all__ = [
    "optional_principal",
    "is_anonymous",
]
