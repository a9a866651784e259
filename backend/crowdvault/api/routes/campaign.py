"""Campaign Routes — deployment, ledger reads, contributions and refunds.

Invariants:
    - Routes never contain business logic (delegate to CampaignService)
    - Domain failures propagate as CrowdVaultError to the global handler

Design Decisions:
    - Singular resource (/campaign): exactly one campaign per deployment
"""

from fastapi import APIRouter, Depends, Query, status

from crowdvault.api.dependencies import get_caller, get_campaign_service
from crowdvault.core.domain_types import Address, Amount, Duration
from crowdvault.schemas.campaign import (
    CampaignDeploy,
    CampaignOverview,
    ContributionCreate,
    ContributorBalance,
    RefundResponse,
)
from crowdvault.services.campaign_service import CampaignService

router = APIRouter(prefix="/api/v1/campaign", tags=["campaign"])


@router.post(
    "", response_model=CampaignOverview, status_code=status.HTTP_201_CREATED,
)
async def deploy_campaign(
    body: CampaignDeploy,
    caller: Address = Depends(get_caller),
    service: CampaignService = Depends(get_campaign_service),
):
    """Deploy the campaign. The caller becomes its admin."""
    return await service.deploy(
        caller, Amount(body.goal), Duration(body.deadline_offset_seconds),
    )


@router.get("", response_model=CampaignOverview)
async def get_campaign(service: CampaignService = Depends(get_campaign_service)):
    return await service.overview()


@router.get("/contributors/{address}", response_model=ContributorBalance)
async def get_contribution(
    address: str, service: CampaignService = Depends(get_campaign_service),
):
    contribution = await service.contribution_of(Address(address))
    return ContributorBalance(address=address, contribution=contribution)


@router.post("/contributions", response_model=CampaignOverview)
async def contribute(
    body: ContributionCreate,
    caller: Address = Depends(get_caller),
    service: CampaignService = Depends(get_campaign_service),
):
    return await service.contribute(caller, Amount(body.amount))


@router.post("/refunds", response_model=RefundResponse)
async def refund(
    caller: Address = Depends(get_caller),
    service: CampaignService = Depends(get_campaign_service),
):
    """Pull the caller's full contribution back after a missed goal."""
    refunded = await service.refund(caller)
    return RefundResponse(address=caller, refunded=refunded)


@router.get("/events")
async def list_events(
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
    service: CampaignService = Depends(get_campaign_service),
):
    """Delivered events in emission order."""
    events = await service.list_events(limit, offset)
    return {
        "events": events,
        "pagination": {"limit": limit, "offset": offset},
    }
