"""Campaign Snapshot — serialization / deserialization for CampaignState.

Invariants:
    - to_snapshot produces a JSON-safe dict (no sets, no Enums)
    - from_snapshot reconstructs a CampaignState from any valid snapshot dict
    - Missing optional keys fall back to CampaignState defaults (forward-compatible)
    - vote_count is restored from the snapshot, never recomputed silently

Design Decisions:
    - Extracted from campaign_state.py: persistence shape is a separate concern
    - Voter sets stored as sorted lists: stable diffs in the JSON column
"""

from crowdvault.core.campaign_state import CampaignState, SpendingRequest
from crowdvault.core.domain_types import (
    Address, Amount, MINIMUM_CONTRIBUTION, Timestamp,
)

SNAPSHOT_VERSION = 1


def _serialize_request(request: SpendingRequest) -> dict:
    return {
        "description": request.description,
        "recipient": request.recipient,
        "value": request.value,
        "completed": request.completed,
        "voters": sorted(request.voters),
        "vote_count": request.vote_count,
    }


def _deserialize_request(data: dict) -> SpendingRequest:
    voters = {Address(v) for v in data.get("voters", [])}
    return SpendingRequest(
        description=data.get("description", ""),
        recipient=Address(data["recipient"]),
        value=Amount(data["value"]),
        completed=data.get("completed", False),
        voters=voters,
        vote_count=data.get("vote_count", len(voters)),
    )


def campaign_state_to_snapshot(state: CampaignState) -> dict:
    """Serialize CampaignState to JSON-safe dict. Pure, no IO."""
    return {
        "version": SNAPSHOT_VERSION,
        "admin": state.admin,
        "goal": state.goal,
        "deadline": state.deadline,
        "minimum_contribution": state.minimum_contribution,
        "created_at": state.created_at,
        "raised_amount": state.raised_amount,
        "number_of_contributors": state.number_of_contributors,
        "balance": state.balance,
        # Zero entries kept: zero is the "refunded" sentinel, not absence
        "contributions": dict(state.contributions),
        "requests": [_serialize_request(r) for r in state.requests],
    }


def campaign_state_from_snapshot(data: dict) -> CampaignState:
    """Reconstruct CampaignState from snapshot dict. Pure, no IO.

    admin, goal and deadline are required; everything else defaults.
    """
    return CampaignState(
        admin=Address(data["admin"]),
        goal=Amount(data["goal"]),
        deadline=Timestamp(data["deadline"]),
        minimum_contribution=Amount(
            data.get("minimum_contribution", MINIMUM_CONTRIBUTION),
        ),
        created_at=Timestamp(data.get("created_at", 0)),
        raised_amount=Amount(data.get("raised_amount", 0)),
        number_of_contributors=data.get("number_of_contributors", 0),
        balance=Amount(data.get("balance", data.get("raised_amount", 0))),
        contributions={
            Address(k): Amount(v)
            for k, v in data.get("contributions", {}).items()
        },
        requests=[_deserialize_request(r) for r in data.get("requests", [])],
    )
