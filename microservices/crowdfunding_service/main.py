"""
Crowdfunding Service Main Application

FastAPI application for the campaign and contribution ledger.
Port: 8250
"""

import logging
import time
import traceback
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Request, status
from fastapi.responses import JSONResponse

from core.auth_dependencies import optional_principal
from core.config import configure_logging, get_settings

from .crowdfunding_service import CrowdfundingService
from .factory import CrowdfundingServiceFactory
from .models import (
    CampaignCreateRequest,
    CampaignCreatedResponse,
    CampaignListResponse,
    CampaignSuccessResponse,
    CampaignView,
    ContributeRequest,
    ContributionLookupResponse,
    ContributionReceipt,
    ErrorKind,
    ErrorResponse,
    HealthResponse,
    LivenessResponse,
    ReadinessResponse,
    Result,
)
from .protocols import CampaignValidationError, CrowdfundingServiceError

settings = get_settings()

# Configure logging
configure_logging(settings.logging)
logger = logging.getLogger(__name__)

# Service configuration
SERVICE_NAME = settings.service_name
SERVICE_PORT = settings.service_port
SERVICE_VERSION = settings.service_version

# Track startup time for uptime calculation
startup_time = time.time()

# Global factory instance
factory: Optional[CrowdfundingServiceFactory] = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    global factory

    logger.info(f"Starting {SERVICE_NAME} on port {SERVICE_PORT}")

    factory = CrowdfundingServiceFactory(settings)
    await factory.initialize()

    yield

    logger.info(f"Shutting down {SERVICE_NAME}")
    await factory.close()
    factory = None


# Create FastAPI application
app = FastAPI(
    title="Crowdfunding Service",
    description="Campaign and contribution ledger with derived funding status",
    version=SERVICE_VERSION,
    lifespan=lifespan,
)


# ====================
# Exception Handlers
# ====================

STATUS_BY_KIND = {
    ErrorKind.VALIDATION: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.CAMPAIGN_CLOSED: status.HTTP_409_CONFLICT,
    ErrorKind.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.CONCURRENCY: status.HTTP_503_SERVICE_UNAVAILABLE,
}


@app.exception_handler(CrowdfundingServiceError)
async def service_error_handler(request: Request, exc: CrowdfundingServiceError):
    body = ErrorResponse(
        detail=str(exc),
        error_code=exc.error_kind.value,
        retryable=exc.retryable,
        field_errors=exc.field_errors if isinstance(exc, CampaignValidationError) else {},
    )
    return JSONResponse(
        status_code=STATUS_BY_KIND.get(exc.error_kind, status.HTTP_400_BAD_REQUEST),
        content=body.model_dump(mode="json"),
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Catch-all exception handler"""
    error_traceback = traceback.format_exc()
    logger.error(f"Unhandled exception: {exc}\n{error_traceback}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "detail": "Internal server error",
            "type": type(exc).__name__,
        },
    )


# ====================
# Dependencies
# ====================


def get_service() -> CrowdfundingService:
    """Get crowdfunding service from factory"""
    if not factory:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service not initialized",
        )
    return factory.service


def unwrap(result: Result):
    """Return the Ok payload or raise the Err's service error"""
    if result.is_ok:
        return result.value
    raise result.error


# ====================
# Health Endpoints
# ====================


@app.get("/api/v1/campaigns/health")
@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check():
    """Health check endpoint"""
    dependencies = {}

    if factory:
        try:
            store_healthy = await factory.repository.health_check()
            dependencies["ledger"] = "healthy" if store_healthy else "unhealthy"
        except Exception:
            dependencies["ledger"] = "unhealthy"

        if factory.nats_client:
            dependencies["nats"] = "healthy" if factory.nats_client.is_connected else "unhealthy"
        else:
            dependencies["nats"] = "not_configured"

    return HealthResponse(
        status="healthy",
        service=SERVICE_NAME,
        port=SERVICE_PORT,
        version=SERVICE_VERSION,
        dependencies=dependencies,
    )


@app.get("/health/ready", response_model=ReadinessResponse, tags=["Health"])
async def readiness_check():
    """Readiness check endpoint"""
    checks = {}
    details = {}

    if factory:
        try:
            store_healthy = await factory.repository.health_check()
            checks["ledger"] = store_healthy
            details["ledger"] = "Available" if store_healthy else "Unavailable"
        except Exception as e:
            checks["ledger"] = False
            details["ledger"] = str(e)

        if factory.nats_client:
            checks["nats"] = factory.nats_client.is_connected
            details["nats"] = "Connected" if factory.nats_client.is_connected else "Disconnected"
        else:
            checks["nats"] = True  # Optional
            details["nats"] = "Not configured (optional)"
    else:
        checks["factory"] = False
        details["factory"] = "Factory not initialized"

    ready = all(checks.get(k, False) for k in ["ledger"])

    return ReadinessResponse(
        ready=ready,
        checks=checks,
        details=details,
    )


@app.get("/health/live", response_model=LivenessResponse, tags=["Health"])
async def liveness_check():
    """Liveness check endpoint"""
    return LivenessResponse(
        alive=True,
        uptime_seconds=time.time() - startup_time,
    )


# ====================
# Campaign Endpoints
# ====================


@app.post(
    "/api/v1/campaigns",
    response_model=CampaignCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["Campaigns"],
)
async def create_campaign(
    request: CampaignCreateRequest,
    service: CrowdfundingService = Depends(get_service),
    principal: Optional[str] = Depends(optional_principal),
):
    """
    Create a new campaign

    Requires an authenticated principal. Goal is in minor units and the
    deadline is duration_days from now.
    """
    campaign_id = unwrap(await service.create_campaign(principal, request))
    return CampaignCreatedResponse(campaign_id=campaign_id)


@app.get(
    "/api/v1/campaigns",
    response_model=CampaignListResponse,
    tags=["Campaigns"],
)
async def list_campaigns(
    search: Optional[str] = Query(None, description="Match name or description"),
    status_filter: Optional[str] = Query(None, alias="status", description="all, active, funded or ended"),
    sort: Optional[str] = Query(None, description="newest, endingSoon, mostFunded or goalAmount"),
    service: CrowdfundingService = Depends(get_service),
):
    """List campaigns with search, status filter and sort order"""
    campaigns = unwrap(await service.list_campaigns(search, status_filter, sort))
    return CampaignListResponse(
        campaigns=[service.view(c) for c in campaigns],
        total=len(campaigns),
    )


@app.get(
    "/api/v1/campaigns/{campaign_id}",
    response_model=CampaignView,
    tags=["Campaigns"],
)
async def get_campaign(
    campaign_id: int,
    service: CrowdfundingService = Depends(get_service),
):
    """Get campaign by ID with derived status"""
    campaign = unwrap(await service.get_campaign(campaign_id))
    return service.view(campaign)


@app.get(
    "/api/v1/campaigns/{campaign_id}/success",
    response_model=CampaignSuccessResponse,
    tags=["Campaigns"],
)
async def is_campaign_successful(
    campaign_id: int,
    service: CrowdfundingService = Depends(get_service),
):
    """Whether a finished campaign reached its goal; 409 while still running"""
    successful = unwrap(await service.is_campaign_successful(campaign_id))
    return CampaignSuccessResponse(campaign_id=campaign_id, successful=successful)


# ====================
# Contribution Endpoints
# ====================


@app.post(
    "/api/v1/campaigns/{campaign_id}/contributions",
    response_model=ContributionReceipt,
    tags=["Contributions"],
)
async def contribute(
    campaign_id: int,
    request: ContributeRequest,
    service: CrowdfundingService = Depends(get_service),
    principal: Optional[str] = Depends(optional_principal),
):
    """Contribute to a campaign; amount is in minor units"""
    return unwrap(await service.contribute(principal, campaign_id, request.amount))


@app.get(
    "/api/v1/campaigns/{campaign_id}/contributions/me",
    response_model=ContributionLookupResponse,
    tags=["Contributions"],
)
async def get_my_contribution(
    campaign_id: int,
    service: CrowdfundingService = Depends(get_service),
    principal: Optional[str] = Depends(optional_principal),
):
    """Caller's cumulative contribution to a campaign"""
    amount = unwrap(await service.get_my_contribution(principal, campaign_id))
    return ContributionLookupResponse(
        campaign_id=campaign_id,
        contributor=principal or service.anonymous_principal,
        amount=amount,
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "microservices.crowdfunding_service.main:app",
        host="0.0.0.0",
        port=SERVICE_PORT,
        log_level=settings.logging.log_level.lower(),
    )
