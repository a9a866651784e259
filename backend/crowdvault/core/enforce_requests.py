"""Request Enforcement — admin gate, voting and payment preconditions.

Invariants:
    - All functions are PURE: no IO, no state mutation
    - Raise a typed CrowdVaultError on violation, return None (or the request) on success
    - validate_payment order: admin, goal, existence, completion, quorum, funds

Design Decisions:
    - Explicit check_admin at the top of every admin operation instead of a
      decorator: the capability check is visible at each call site
"""

from crowdvault.core.campaign_state import CampaignState, SpendingRequest
from crowdvault.core.domain_types import Address, Amount
from crowdvault.core.errors import (
    AlreadyCompletedError,
    AlreadyVotedError,
    ErrorContext,
    GoalNotReachedError,
    InsufficientFundsError,
    InvalidRequestError,
    NotAdminError,
    NotContributorError,
    QuorumNotMetError,
    RequestNotFoundError,
)
from crowdvault.core.vote_tally import quorum_reached


def check_admin(state: CampaignState, caller: Address) -> None:
    if caller != state.admin:
        raise NotAdminError(ErrorContext(caller=caller))


def get_request_or_raise(state: CampaignState, request_index: int) -> SpendingRequest:
    """Bounds-checked registry lookup. Negative indices are never valid."""
    if not 0 <= request_index < state.request_count:
        raise RequestNotFoundError(
            request_index, ErrorContext(request_index=request_index),
        )
    return state.requests[request_index]


def validate_new_request(
    state: CampaignState, caller: Address, recipient: Address, value: Amount,
) -> None:
    check_admin(state, caller)
    if value <= 0:
        raise InvalidRequestError("Request value must be positive.")
    if not recipient:
        raise InvalidRequestError("Request recipient must not be empty.")


def validate_vote(
    state: CampaignState, caller: Address, request_index: int,
) -> SpendingRequest:
    ctx = ErrorContext(caller=caller, request_index=request_index)
    if not state.holds_stake(caller):
        raise NotContributorError(ctx)
    request = get_request_or_raise(state, request_index)
    if request.has_voted(caller):
        raise AlreadyVotedError(request_index, ctx)
    return request


def validate_payment(
    state: CampaignState, caller: Address, request_index: int,
) -> SpendingRequest:
    check_admin(state, caller)
    ctx = ErrorContext(caller=caller, request_index=request_index)
    if not state.goal_reached:
        raise GoalNotReachedError(state.raised_amount, state.goal, ctx)
    request = get_request_or_raise(state, request_index)
    if request.completed:
        raise AlreadyCompletedError(request_index, ctx)
    if not quorum_reached(request.vote_count, state.number_of_contributors):
        raise QuorumNotMetError(
            request.vote_count, state.number_of_contributors, ctx,
        )
    if request.value > state.balance:
        raise InsufficientFundsError(request.value, state.balance, ctx)
    return request
