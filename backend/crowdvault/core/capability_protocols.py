"""Boundary Protocols — capabilities the core borrows from its environment.

Invariants:
    - Core NEVER imports from shell: dependency arrows point inward only
    - Time, value transfer and event emission reach the core only through these Protocols
    - Implementations provided by shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, test fakes need no inheritance
    - Clock / ValueTransfer / EventSink are synchronous: the state machine runs one
      call to completion, including the transfer, before the next is observed
    - CampaignRepository is async because implementations do IO; the shell
      orchestrates it around the synchronous core
"""

from typing import Protocol

from crowdvault.core.campaign_events import CampaignEvent
from crowdvault.core.domain_types import Address, Amount, Timestamp


class Clock(Protocol):
    """Trusted source of the current time."""
    def now(self) -> Timestamp: ...


class ValueTransfer(Protocol):
    """Atomic value transfer. Returns False on failure with nothing transferred.

    May synchronously call back into the campaign before returning.
    """
    def transfer(self, to: Address, amount: Amount) -> bool: ...


class EventSink(Protocol):
    """Fire-and-forget notification sink. Must not affect control flow."""
    def emit(self, event: CampaignEvent) -> None: ...


class CampaignRepository(Protocol):
    """Contract for campaign persistence: implemented by shell."""
    async def exists(self) -> bool: ...
    async def create(self, snapshot: dict) -> object: ...
    async def load_snapshot(self) -> dict | None: ...
    async def save_snapshot(self, snapshot: dict) -> None: ...
    async def append_events(self, events: list[CampaignEvent]) -> None: ...
    async def record_transfer(
        self, recipient: Address, amount: Amount, succeeded: bool,
    ) -> None: ...
    async def list_events(self, limit: int, offset: int) -> list[dict]: ...
    async def commit(self) -> None: ...
