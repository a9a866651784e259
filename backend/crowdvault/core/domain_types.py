"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - Address wraps str, Amount/Timestamp wrap int: no floats anywhere near money
    - Timestamps are integer Unix seconds supplied by the Clock capability
    - All valid states encoded as Enums: no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: event payloads and status serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

Address = NewType("Address", str)
RequestIndex = NewType("RequestIndex", int)


# ─── Value Types ─────────────────────────────────────────────────

Amount = NewType("Amount", int)         # smallest value unit, >= 0
Timestamp = NewType("Timestamp", int)   # Unix seconds
Duration = NewType("Duration", int)     # seconds


# ─── Constants ───────────────────────────────────────────────────

MINIMUM_CONTRIBUTION = Amount(100)
QUORUM_PERCENT = 50
QUORUM_PRECISION = 2


# ─── Enums ───────────────────────────────────────────────────────

class CampaignStatus(str, Enum):
    """Derived campaign phase: never stored, always computed from state + now."""
    FUNDING = "funding"
    GOAL_REACHED = "goal_reached"
    GOAL_MISSED = "goal_missed"


class EventType(str, Enum):
    """Notifications delivered to the EventSink."""
    CAMPAIGN_CREATED = "campaign_created"
    CONTRIBUTION = "contribution"
    REFUND = "refund"
    REQUEST_CREATED = "request_created"
    VOTE_CAST = "vote_cast"
    PAYMENT = "payment"
