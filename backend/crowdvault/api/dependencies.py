"""API Dependencies — caller identity, clock and service wiring for routes.

Invariants:
    - Caller identity comes only from the X-Caller-Address header (set by the trusted
      gateway in front of this service, which also verifies signatures)
    - Every request gets a fresh CampaignService bound to its own DB session

Design Decisions:
    - get_clock and get_settings as dependencies: tests override them to move time
      past the deadline and to configure the transfer denylist
"""

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from crowdvault.config import Settings, get_settings
from crowdvault.core.capability_protocols import Clock
from crowdvault.core.domain_types import Address
from crowdvault.infrastructure.campaign_repository import SqlCampaignRepository
from crowdvault.infrastructure.clock import SystemClock
from crowdvault.infrastructure.database import get_db
from crowdvault.services.campaign_service import CampaignService


def get_clock() -> Clock:
    return SystemClock()


def get_caller(
    x_caller_address: str = Header(min_length=1, max_length=128),
) -> Address:
    caller = x_caller_address.strip()
    if not caller:
        raise HTTPException(
            status.HTTP_400_BAD_REQUEST,
            detail="X-Caller-Address cannot be empty or whitespace",
        )
    return Address(caller)


def get_campaign_service(
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
    settings: Settings = Depends(get_settings),
) -> CampaignService:
    return CampaignService(SqlCampaignRepository(db), clock, settings)
