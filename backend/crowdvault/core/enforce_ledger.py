"""Ledger Enforcement — preconditions for contributions and refunds.

Invariants:
    - All functions are PURE: no IO, no state mutation
    - Raise a typed CrowdVaultError on violation, return None on success
    - validate_* helpers chain checks: first violation wins

Design Decisions:
    - Raise instead of returning error dicts: callers are Python code, and a
      failed precondition must abort the call before any mutation
"""

from crowdvault.core.campaign_state import CampaignState
from crowdvault.core.domain_types import Address, Amount, Timestamp
from crowdvault.core.errors import (
    ContributionTooSmallError,
    DeadlinePassedError,
    ErrorContext,
    NotEligibleForRefundError,
)


def check_before_deadline(state: CampaignState, now: Timestamp) -> None:
    """Contributions close at the deadline (strict: now < deadline)."""
    if now >= state.deadline:
        raise DeadlinePassedError(state.deadline)


def check_minimum_contribution(
    state: CampaignState, caller: Address, amount: Amount,
) -> None:
    if amount < state.minimum_contribution:
        raise ContributionTooSmallError(
            amount, state.minimum_contribution, ErrorContext(caller=caller),
        )


def validate_contribution(
    state: CampaignState, caller: Address, amount: Amount, now: Timestamp,
) -> None:
    check_before_deadline(state, now)
    check_minimum_contribution(state, caller, amount)


def validate_refund(state: CampaignState, caller: Address, now: Timestamp) -> None:
    """Refunds need: deadline passed, goal missed, stake above the minimum."""
    ctx = ErrorContext(caller=caller)
    if not state.deadline_passed(now):
        raise NotEligibleForRefundError("deadline has not passed", ctx)
    if state.goal_reached:
        raise NotEligibleForRefundError("funding goal was reached", ctx)
    if not state.holds_stake(caller):
        raise NotEligibleForRefundError("no refundable contribution", ctx)
