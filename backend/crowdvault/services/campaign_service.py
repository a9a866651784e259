"""Campaign Service — imperative shell around the Campaign state machine.

Invariants:
    - Every mutating call runs load -> core call -> persist under one writer lock,
      so calls are totally ordered by arrival
    - The clock is read after the lock is held, so a queued call sees the time it runs at
    - A rejected call persists nothing
    - TransferFailed persists the transfer attempt log (state was already rolled back
      by the core), then re-raises
    - The campaign snapshot, its events and its transfer attempts commit together

Design Decisions:
    - asyncio.Lock over DB row locks: single-process uvicorn, one campaign
    - The lock is created per event loop on first use; asyncio primitives must not
      outlive the loop they were first awaited on
    - The core never logs; this layer logs each committed and each rejected call
"""

import asyncio
import logging
import weakref
from collections.abc import Callable
from typing import TypeVar

from crowdvault.config import Settings
from crowdvault.core.campaign import Campaign
from crowdvault.core.campaign_events import CampaignEvent
from crowdvault.core.campaign_snapshot import (
    campaign_state_from_snapshot,
    campaign_state_to_snapshot,
)
from crowdvault.core.capability_protocols import CampaignRepository, Clock
from crowdvault.core.domain_types import (
    Address, Amount, Duration, RequestIndex, Timestamp,
)
from crowdvault.core.errors import (
    CampaignExistsError,
    CampaignNotFoundError,
    CrowdVaultError,
    TransferFailedError,
)
from crowdvault.infrastructure.transfer_gateway import LedgerTransferGateway

logger = logging.getLogger(__name__)

T = TypeVar("T")

_campaign_locks: weakref.WeakKeyDictionary = weakref.WeakKeyDictionary()


def _campaign_lock() -> asyncio.Lock:
    """One campaign, one writer at a time, for the running event loop."""
    loop = asyncio.get_running_loop()
    lock = _campaign_locks.get(loop)
    if lock is None:
        lock = _campaign_locks[loop] = asyncio.Lock()
    return lock


class CollectingEventSink:
    """EventSink that buffers delivered events for persistence."""

    def __init__(self):
        self.events: list[CampaignEvent] = []

    def emit(self, event: CampaignEvent) -> None:
        self.events.append(event)


class CampaignService:
    """Use-case layer: one method per campaign operation."""

    def __init__(
        self, repository: CampaignRepository, clock: Clock, settings: Settings,
    ):
        self._repo = repository
        self._clock = clock
        self._settings = settings

    # --- Deployment -------------------------------------------------------------

    async def deploy(
        self, admin: Address, goal: Amount, deadline_offset: Duration,
    ) -> dict:
        async with _campaign_lock():
            if await self._repo.exists():
                raise CampaignExistsError()
            sink = CollectingEventSink()
            gateway = self._new_gateway()
            campaign = Campaign.deploy(
                admin=admin,
                goal=goal,
                deadline_offset=deadline_offset,
                now=self._clock.now(),
                transfer=gateway,
                sink=sink,
                minimum_contribution=Amount(self._settings.minimum_contribution),
            )
            await self._repo.create(campaign_state_to_snapshot(campaign.state))
            await self._repo.append_events(sink.events)
            await self._repo.commit()
            logger.info(
                f"Campaign deployed: goal={goal} deadline={campaign.deadline}",
                extra={"caller": admin, "operation": "deploy"},
            )
            return self._overview(campaign)

    # --- Reads ------------------------------------------------------------------

    async def overview(self) -> dict:
        campaign, _, _ = await self._load()
        return self._overview(campaign)

    async def contribution_of(self, address: Address) -> int:
        campaign, _, _ = await self._load()
        return campaign.contribution_of(address)

    async def list_requests(self) -> list[dict]:
        campaign, _, _ = await self._load()
        return campaign.list_requests()

    async def get_request(self, request_index: int) -> dict:
        campaign, _, _ = await self._load()
        return campaign.get_request(request_index)

    async def list_events(self, limit: int, offset: int) -> list[dict]:
        if not await self._repo.exists():
            raise CampaignNotFoundError()
        return await self._repo.list_events(limit, offset)

    # --- Mutations --------------------------------------------------------------

    async def contribute(self, caller: Address, amount: Amount) -> dict:
        def call(campaign: Campaign, now: Timestamp) -> dict:
            campaign.contribute(caller, amount, now)
            return self._overview(campaign)

        return await self._execute("contribute", caller, call)

    async def refund(self, caller: Address) -> int:
        return await self._execute(
            "refund", caller, lambda c, now: c.get_refund(caller, now),
        )

    async def create_request(
        self, caller: Address, description: str, recipient: Address, value: Amount,
    ) -> RequestIndex:
        return await self._execute(
            "create_request", caller,
            lambda c, _now: c.create_request(caller, description, recipient, value),
        )

    async def vote(self, caller: Address, request_index: int) -> dict:
        def call(campaign: Campaign, _now: Timestamp) -> dict:
            campaign.vote_request(caller, request_index)
            return campaign.get_request(request_index)

        return await self._execute(
            "vote_request", caller, call, request_index=request_index,
        )

    async def make_payment(self, caller: Address, request_index: int) -> dict:
        def call(campaign: Campaign, _now: Timestamp) -> dict:
            campaign.make_payment(caller, request_index)
            return campaign.get_request(request_index)

        return await self._execute(
            "make_payment", caller, call, request_index=request_index,
        )

    # --- Internals --------------------------------------------------------------

    def _new_gateway(self) -> LedgerTransferGateway:
        return LedgerTransferGateway(self._settings.transfer_denylist)

    async def _load(
        self,
    ) -> tuple[Campaign, CollectingEventSink, LedgerTransferGateway]:
        snapshot = await self._repo.load_snapshot()
        if snapshot is None:
            raise CampaignNotFoundError()
        sink = CollectingEventSink()
        gateway = self._new_gateway()
        campaign = Campaign(campaign_state_from_snapshot(snapshot), gateway, sink)
        return campaign, sink, gateway

    async def _persist(
        self,
        campaign: Campaign,
        sink: CollectingEventSink,
        gateway: LedgerTransferGateway,
    ) -> None:
        await self._repo.save_snapshot(campaign_state_to_snapshot(campaign.state))
        await self._repo.append_events(sink.events)
        for attempt in gateway.attempts:
            await self._repo.record_transfer(
                attempt.recipient, attempt.amount, attempt.succeeded,
            )
        await self._repo.commit()

    async def _execute(
        self,
        operation: str,
        caller: Address,
        call: Callable[[Campaign, Timestamp], T],
        request_index: int | None = None,
    ) -> T:
        """Run one core call under the lock and persist its effects."""
        extra = {"caller": caller, "operation": operation, "request_index": request_index}
        async with _campaign_lock():
            now = self._clock.now()
            campaign, sink, gateway = await self._load()
            try:
                result = call(campaign, now)
            except TransferFailedError as e:
                await self._persist(campaign, sink, gateway)
                logger.error(
                    f"{operation} rolled back: {e.message}",
                    extra={**extra, "error_code": e.code},
                )
                raise
            except CrowdVaultError as e:
                logger.warning(
                    f"{operation} rejected: {e.message}",
                    extra={**extra, "error_code": e.code},
                )
                raise
            await self._persist(campaign, sink, gateway)
            for event in sink.events:
                logger.info(
                    f"{operation} committed",
                    extra={**extra, "event_type": event.event_type.value},
                )
            return result

    def _overview(self, campaign: Campaign) -> dict:
        now = self._clock.now()
        return {
            "admin": campaign.admin,
            "goal": campaign.goal,
            "deadline": campaign.deadline,
            "minimum_contribution": campaign.minimum_contribution,
            "raised_amount": campaign.raised_amount,
            "number_of_contributors": campaign.number_of_contributors,
            "balance": campaign.get_balance(),
            "request_count": campaign.state.request_count,
            "status": campaign.status(now).value,
            "now": now,
        }
