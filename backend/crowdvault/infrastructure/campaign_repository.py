"""SQL Campaign Repository — SQLAlchemy implementation of CampaignRepository.

Invariants:
    - Reads and writes only the single campaign row (oldest by created_at)
    - Event sequence numbers continue from the highest persisted one
    - Nothing is committed until commit() is called

Design Decisions:
    - Repository owns the AsyncSession it was given; the service decides when to commit
"""

import uuid

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from crowdvault.core.campaign_events import CampaignEvent
from crowdvault.core.domain_types import Address, Amount
from crowdvault.core.errors import CampaignNotFoundError
from crowdvault.models.campaign import Campaign as CampaignModel
from crowdvault.models.campaign_event import CampaignEventRecord
from crowdvault.models.transfer import TransferRecord


class SqlCampaignRepository:
    """Persists the campaign snapshot plus its event and transfer logs."""

    def __init__(self, db: AsyncSession):
        self._db = db
        self._row: CampaignModel | None = None

    async def _get_row(self) -> CampaignModel | None:
        if self._row is None:
            result = await self._db.execute(
                select(CampaignModel).order_by(CampaignModel.created_at).limit(1),
            )
            self._row = result.scalar_one_or_none()
        return self._row

    async def _require_row(self) -> CampaignModel:
        row = await self._get_row()
        if row is None:
            raise CampaignNotFoundError()
        return row

    async def exists(self) -> bool:
        return await self._get_row() is not None

    async def create(self, snapshot: dict) -> uuid.UUID:
        row = CampaignModel(
            admin=snapshot["admin"],
            goal=snapshot["goal"],
            deadline=snapshot["deadline"],
            minimum_contribution=snapshot["minimum_contribution"],
            state_snapshot=snapshot,
        )
        self._db.add(row)
        await self._db.flush()
        self._row = row
        return row.id

    async def load_snapshot(self) -> dict | None:
        row = await self._get_row()
        return row.state_snapshot if row else None

    async def save_snapshot(self, snapshot: dict) -> None:
        row = await self._require_row()
        # New dict object: JSON columns only track reassignment, not in-place edits
        row.state_snapshot = dict(snapshot)

    async def append_events(self, events: list[CampaignEvent]) -> None:
        if not events:
            return
        row = await self._require_row()
        result = await self._db.execute(
            select(func.max(CampaignEventRecord.sequence)).where(
                CampaignEventRecord.campaign_id == row.id,
            ),
        )
        sequence = result.scalar() or 0
        for event in events:
            sequence += 1
            self._db.add(CampaignEventRecord(
                campaign_id=row.id,
                sequence=sequence,
                event_type=event.event_type.value,
                payload=dict(event.payload),
                event_timestamp=event.timestamp,
            ))

    async def record_transfer(
        self, recipient: Address, amount: Amount, succeeded: bool,
    ) -> None:
        row = await self._require_row()
        self._db.add(TransferRecord(
            campaign_id=row.id,
            recipient=recipient,
            amount=amount,
            succeeded=succeeded,
        ))

    async def list_events(self, limit: int, offset: int) -> list[dict]:
        row = await self._require_row()
        result = await self._db.execute(
            select(CampaignEventRecord)
            .where(CampaignEventRecord.campaign_id == row.id)
            .order_by(CampaignEventRecord.sequence)
            .limit(limit)
            .offset(offset),
        )
        return [
            {
                "sequence": e.sequence,
                "event_type": e.event_type,
                "payload": e.payload,
                "timestamp": e.event_timestamp,
                "occurred_at": e.occurred_at.isoformat(),
            }
            for e in result.scalars().all()
        ]

    async def commit(self) -> None:
        await self._db.commit()
