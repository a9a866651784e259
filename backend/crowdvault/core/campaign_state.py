"""Campaign State — the ledger and request registry as plain data.

Invariants:
    - raised_amount == sum of nonzero entries in contributions
    - number_of_contributors == count of nonzero entries in contributions
    - A contribution entry never decreases except to exactly zero (refund)
    - requests is append-only; index == position
    - SpendingRequest.vote_count == len(SpendingRequest.voters)
    - Open requests only hold votes of addresses with a nonzero contribution
    - completed flips false -> true once (rolled back only when the transfer fails)

Design Decisions:
    - Pure dataclasses, no IO: Campaign (campaign.py) owns all mutation
    - Each SpendingRequest owns its voter set (arena of records, no nested storage)
    - balance tracks custodied value separately from raised_amount, because
      completed payments reduce what is held but not what was raised
"""

from dataclasses import dataclass, field

from crowdvault.core.domain_types import (
    Address, Amount, Timestamp, MINIMUM_CONTRIBUTION,
)


@dataclass
class SpendingRequest:
    """One admin proposal to disburse funds to a recipient."""
    description: str
    recipient: Address
    value: Amount
    completed: bool = False
    voters: set[Address] = field(default_factory=set)
    vote_count: int = 0

    def has_voted(self, address: Address) -> bool:
        return address in self.voters

    def to_view(self, index: int) -> dict:
        """Public metadata. The raw voter set is never exposed."""
        return {
            "index": index,
            "description": self.description,
            "recipient": self.recipient,
            "value": self.value,
            "completed": self.completed,
            "vote_count": self.vote_count,
        }


@dataclass
class CampaignState:
    """Singleton campaign ledger: pure dataclass, no IO."""

    # === Immutable after deployment ===
    admin: Address
    goal: Amount
    deadline: Timestamp
    minimum_contribution: Amount = MINIMUM_CONTRIBUTION
    created_at: Timestamp = Timestamp(0)

    # === Ledger ===
    raised_amount: Amount = Amount(0)
    number_of_contributors: int = 0
    balance: Amount = Amount(0)
    contributions: dict[Address, Amount] = field(default_factory=dict)

    # === Request registry ===
    requests: list[SpendingRequest] = field(default_factory=list)

    # --- Computed properties ---------------------------------------------------

    @property
    def goal_reached(self) -> bool:
        return self.raised_amount >= self.goal

    @property
    def request_count(self) -> int:
        return len(self.requests)

    def contribution_of(self, address: Address) -> Amount:
        """Current ledger balance; zero for unknown or refunded addresses."""
        return self.contributions.get(address, Amount(0))

    def holds_stake(self, address: Address) -> bool:
        """Stake strictly above the minimum: gates both voting and refunds."""
        return self.contribution_of(address) > self.minimum_contribution

    def deadline_passed(self, now: Timestamp) -> bool:
        return now > self.deadline

    def goal_missed(self, now: Timestamp) -> bool:
        return self.deadline_passed(now) and not self.goal_reached
