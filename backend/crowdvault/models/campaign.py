"""Campaign ORM — persists the singleton campaign and its state snapshot.

Invariants:
    - At most one row exists (the service refuses a second deployment)
    - admin / goal / deadline / minimum_contribution mirror the snapshot and never change
    - state_snapshot is the source of truth for ledger and request registry

Design Decisions:
    - JSON snapshot column over normalized ledger tables: the core owns the
      invariants, the database only stores what the core produced
    - Immutable parameters denormalized into columns for listing/inspection
    - cascade delete for events and transfers
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import BigInteger, DateTime, JSON, String
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from crowdvault.db.base import Base


class Campaign(Base):
    """Campaign aggregate root: owns its event log and transfer log."""
    __tablename__ = "campaigns"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    admin: Mapped[str] = mapped_column(String(128), nullable=False)
    goal: Mapped[int] = mapped_column(BigInteger, nullable=False)
    deadline: Mapped[int] = mapped_column(BigInteger, nullable=False)
    minimum_contribution: Mapped[int] = mapped_column(BigInteger, nullable=False)
    state_snapshot: Mapped[dict] = mapped_column(JSON, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    events: Mapped[list["CampaignEventRecord"]] = relationship(
        "CampaignEventRecord", back_populates="campaign",
        cascade="all, delete-orphan", lazy="noload",
    )
    transfers: Mapped[list["TransferRecord"]] = relationship(
        "TransferRecord", back_populates="campaign",
        cascade="all, delete-orphan", lazy="noload",
    )
