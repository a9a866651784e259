"""Campaign Events — notifications emitted by the state machine.

Invariants:
    - Events are immutable once constructed
    - payload is JSON-safe (str / int / bool only)
    - Events of a rolled-back call are never delivered

Design Decisions:
    - Frozen dataclass + factory functions: one place defines each payload shape
"""

from dataclasses import dataclass, field

from crowdvault.core.domain_types import (
    Address, Amount, EventType, RequestIndex, Timestamp,
)


@dataclass(frozen=True, eq=False)
class CampaignEvent:
    """A single emitted notification. Identity equality: two equal-looking events are distinct."""
    event_type: EventType
    payload: dict = field(default_factory=dict)
    timestamp: Timestamp | None = None

    def to_dict(self) -> dict:
        return {
            "event_type": self.event_type.value,
            "payload": dict(self.payload),
            "timestamp": self.timestamp,
        }


def campaign_created(
    admin: Address, goal: Amount, deadline: Timestamp, now: Timestamp,
) -> CampaignEvent:
    return CampaignEvent(
        EventType.CAMPAIGN_CREATED,
        {"admin": admin, "goal": goal, "deadline": deadline},
        now,
    )


def contribution(caller: Address, amount: Amount, now: Timestamp) -> CampaignEvent:
    return CampaignEvent(
        EventType.CONTRIBUTION, {"contributor": caller, "amount": amount}, now,
    )


def refund(caller: Address, amount: Amount, now: Timestamp) -> CampaignEvent:
    return CampaignEvent(
        EventType.REFUND, {"contributor": caller, "amount": amount}, now,
    )


def request_created(
    index: RequestIndex, description: str, recipient: Address, value: Amount,
) -> CampaignEvent:
    return CampaignEvent(
        EventType.REQUEST_CREATED,
        {
            "request_index": index,
            "description": description,
            "recipient": recipient,
            "value": value,
        },
    )


def vote_cast(index: RequestIndex, voter: Address, vote_count: int) -> CampaignEvent:
    return CampaignEvent(
        EventType.VOTE_CAST,
        {"request_index": index, "voter": voter, "vote_count": vote_count},
    )


def payment(index: RequestIndex, recipient: Address, value: Amount) -> CampaignEvent:
    return CampaignEvent(
        EventType.PAYMENT,
        {"request_index": index, "recipient": recipient, "value": value},
    )
