"""Spending Request Routes — request registry, votes and payments.

Invariants:
    - Only request metadata is returned; voter sets stay internal
    - Admin and contributor checks happen in the core, not here
"""

from fastapi import APIRouter, Depends, status

from crowdvault.api.dependencies import get_caller, get_campaign_service
from crowdvault.core.domain_types import Address, Amount
from crowdvault.schemas.campaign import (
    SpendingRequestCreate,
    SpendingRequestResponse,
)
from crowdvault.services.campaign_service import CampaignService

router = APIRouter(prefix="/api/v1/campaign/requests", tags=["spending-requests"])


@router.get("", response_model=list[SpendingRequestResponse])
async def list_requests(service: CampaignService = Depends(get_campaign_service)):
    return await service.list_requests()


@router.post(
    "", response_model=SpendingRequestResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_request(
    body: SpendingRequestCreate,
    caller: Address = Depends(get_caller),
    service: CampaignService = Depends(get_campaign_service),
):
    index = await service.create_request(
        caller, body.description, Address(body.recipient), Amount(body.value),
    )
    return await service.get_request(index)


@router.get("/{request_index}", response_model=SpendingRequestResponse)
async def get_request(
    request_index: int, service: CampaignService = Depends(get_campaign_service),
):
    return await service.get_request(request_index)


@router.post("/{request_index}/votes", response_model=SpendingRequestResponse)
async def vote_request(
    request_index: int,
    caller: Address = Depends(get_caller),
    service: CampaignService = Depends(get_campaign_service),
):
    return await service.vote(caller, request_index)


@router.post("/{request_index}/payments", response_model=SpendingRequestResponse)
async def make_payment(
    request_index: int,
    caller: Address = Depends(get_caller),
    service: CampaignService = Depends(get_campaign_service),
):
    """Pay the request's recipient. Admin only; needs goal reached and quorum."""
    return await service.make_payment(caller, request_index)
