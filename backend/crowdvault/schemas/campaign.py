"""Campaign Schemas — Pydantic models with field-level validation for API boundaries.

Invariants:
    - Amounts are positive integers (no floats, no strings)
    - Addresses are stripped and non-empty
    - Request descriptions are at most 2000 chars

Design Decisions:
    - Business thresholds (minimum contribution, deadline) are NOT checked here:
      the core owns them and reports typed errors
"""

from pydantic import BaseModel, Field, field_validator


def _strip_address(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("address cannot be empty or whitespace")
    return v


class CampaignDeploy(BaseModel):
    """Deployment parameters. The caller becomes admin."""
    goal: int = Field(gt=0)
    deadline_offset_seconds: int = Field(gt=0)


class CampaignOverview(BaseModel):
    """Public read surface of the campaign."""
    admin: str
    goal: int
    deadline: int
    minimum_contribution: int
    raised_amount: int
    number_of_contributors: int
    balance: int
    request_count: int
    status: str
    now: int


class ContributionCreate(BaseModel):
    amount: int = Field(gt=0)


class ContributorBalance(BaseModel):
    address: str
    contribution: int


class RefundResponse(BaseModel):
    address: str
    refunded: int


class SpendingRequestCreate(BaseModel):
    """Admin proposal to disburse funds."""
    description: str = Field(max_length=2000)
    recipient: str = Field(min_length=1, max_length=128)
    value: int = Field(gt=0)

    @field_validator("recipient")
    @classmethod
    def strip_recipient(cls, v: str) -> str:
        return _strip_address(v)


class SpendingRequestResponse(BaseModel):
    """Request metadata: the voter set is never exposed."""
    index: int
    description: str
    recipient: str
    value: int
    completed: bool
    vote_count: int
