"""ORM Models — SQLAlchemy declarative models for persisted campaign data.

Invariants:
    - All models inherit from Base (db/base.py)
    - Campaign is the aggregate root; events and transfers scoped by campaign_id

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from crowdvault.models.campaign import Campaign  # noqa: F401
from crowdvault.models.campaign_event import CampaignEventRecord  # noqa: F401
from crowdvault.models.transfer import TransferRecord  # noqa: F401
