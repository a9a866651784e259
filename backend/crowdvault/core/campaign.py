"""Campaign — the contribution / voting / disbursement state machine.

Invariants:
    - Preconditions are checked before any mutation; a rejected call changes nothing
    - Paying operations mutate local state and queue their event BEFORE invoking
      the transfer (check-effects-interact), so reentrant calls see post-mutation state
    - A failed transfer rolls back exactly the effects of its own call and drops its event
    - Events are delivered to the sink when the outermost call returns
    - raised_amount / number_of_contributors track the nonzero ledger entries exactly
    - A refund retracts the refunder's votes on open requests, so no vote_count
      exceeds number_of_contributors

Design Decisions:
    - One long-lived instance over one CampaignState: no hidden globals
    - Capabilities (ValueTransfer, EventSink) injected at construction, caller and
      time passed per call: the core never asks "who" or "when" on its own
    - On payment transfer failure the request returns to retryable
      (completed=False) instead of being frozen as done with no funds sent
"""

from collections.abc import Callable, Iterator
from contextlib import contextmanager

from crowdvault.core import campaign_events as events
from crowdvault.core.campaign_events import CampaignEvent
from crowdvault.core.campaign_state import CampaignState, SpendingRequest
from crowdvault.core.capability_protocols import EventSink, ValueTransfer
from crowdvault.core.domain_types import (
    Address, Amount, CampaignStatus, Duration, MINIMUM_CONTRIBUTION,
    RequestIndex, Timestamp,
)
from crowdvault.core.enforce_ledger import validate_contribution, validate_refund
from crowdvault.core.enforce_requests import (
    get_request_or_raise,
    validate_new_request,
    validate_payment,
    validate_vote,
)
from crowdvault.core.errors import (
    ErrorContext,
    InvalidCampaignParametersError,
    TransferFailedError,
)


class Campaign:
    """Singleton fund-custody state machine. Driven one call at a time."""

    def __init__(
        self, state: CampaignState, transfer: ValueTransfer, sink: EventSink,
    ):
        self._state = state
        self._transfer = transfer
        self._sink = sink
        self._pending_events: list[CampaignEvent] = []
        self._call_depth = 0

    @classmethod
    def deploy(
        cls,
        admin: Address,
        goal: Amount,
        deadline_offset: Duration,
        now: Timestamp,
        transfer: ValueTransfer,
        sink: EventSink,
        minimum_contribution: Amount = MINIMUM_CONTRIBUTION,
    ) -> "Campaign":
        """Create the campaign. deadline = now + deadline_offset."""
        if not admin:
            raise InvalidCampaignParametersError("Admin address must not be empty.")
        if goal <= 0:
            raise InvalidCampaignParametersError("Goal must be positive.")
        if deadline_offset <= 0:
            raise InvalidCampaignParametersError("Deadline offset must be positive.")
        if minimum_contribution <= 0:
            raise InvalidCampaignParametersError("Minimum contribution must be positive.")

        state = CampaignState(
            admin=admin,
            goal=goal,
            deadline=Timestamp(now + deadline_offset),
            minimum_contribution=minimum_contribution,
            created_at=now,
        )
        campaign = cls(state, transfer, sink)
        with campaign._call():
            campaign._record(
                events.campaign_created(admin, goal, state.deadline, now),
            )
        return campaign

    # --- Read surface -----------------------------------------------------------

    @property
    def state(self) -> CampaignState:
        return self._state

    @property
    def admin(self) -> Address:
        return self._state.admin

    @property
    def goal(self) -> Amount:
        return self._state.goal

    @property
    def deadline(self) -> Timestamp:
        return self._state.deadline

    @property
    def minimum_contribution(self) -> Amount:
        return self._state.minimum_contribution

    @property
    def raised_amount(self) -> Amount:
        return self._state.raised_amount

    @property
    def number_of_contributors(self) -> int:
        return self._state.number_of_contributors

    def contribution_of(self, address: Address) -> Amount:
        return self._state.contribution_of(address)

    def get_balance(self) -> Amount:
        """Value currently held: contributions minus refunds and completed payments."""
        return self._state.balance

    def get_request(self, request_index: int) -> dict:
        request = get_request_or_raise(self._state, request_index)
        return request.to_view(request_index)

    def list_requests(self) -> list[dict]:
        return [r.to_view(i) for i, r in enumerate(self._state.requests)]

    def status(self, now: Timestamp) -> CampaignStatus:
        if self._state.goal_reached:
            return CampaignStatus.GOAL_REACHED
        if self._state.goal_missed(now):
            return CampaignStatus.GOAL_MISSED
        return CampaignStatus.FUNDING

    # --- Campaign ledger --------------------------------------------------------

    def contribute(self, caller: Address, amount: Amount, now: Timestamp) -> None:
        with self._call():
            validate_contribution(self._state, caller, amount, now)
            state = self._state
            prior = state.contribution_of(caller)
            if prior == 0:
                state.number_of_contributors += 1
            state.contributions[caller] = Amount(prior + amount)
            state.raised_amount = Amount(state.raised_amount + amount)
            state.balance = Amount(state.balance + amount)
            self._record(events.contribution(caller, amount, now))

    # --- Disbursement: refund path ---------------------------------------------

    def get_refund(self, caller: Address, now: Timestamp) -> Amount:
        """Pull the caller's whole contribution back after a goal-miss."""
        with self._call():
            validate_refund(self._state, caller, now)
            state = self._state
            amount = state.contribution_of(caller)

            state.contributions[caller] = Amount(0)
            state.number_of_contributors -= 1
            state.raised_amount = Amount(state.raised_amount - amount)
            state.balance = Amount(state.balance - amount)
            # A refunded address no longer counts toward any open quorum
            retracted = [
                r for r in state.requests
                if not r.completed and r.has_voted(caller)
            ]
            for request in retracted:
                request.voters.discard(caller)
                request.vote_count -= 1
            event = self._record(events.refund(caller, amount, now))

            def rollback() -> None:
                state.contributions[caller] = amount
                state.number_of_contributors += 1
                state.raised_amount = Amount(state.raised_amount + amount)
                state.balance = Amount(state.balance + amount)
                for request in retracted:
                    request.voters.add(caller)
                    request.vote_count += 1

            self._pay_out(caller, amount, event, rollback)
            return amount

    # --- Request registry -------------------------------------------------------

    def create_request(
        self, caller: Address, description: str, recipient: Address, value: Amount,
    ) -> RequestIndex:
        with self._call():
            validate_new_request(self._state, caller, recipient, value)
            index = RequestIndex(self._state.request_count)
            self._state.requests.append(
                SpendingRequest(
                    description=description, recipient=recipient, value=value,
                ),
            )
            self._record(
                events.request_created(index, description, recipient, value),
            )
            return index

    # --- Vote tally -------------------------------------------------------------

    def vote_request(self, caller: Address, request_index: int) -> None:
        """One address, one unweighted yes-vote per request. No un-voting."""
        with self._call():
            request = validate_vote(self._state, caller, request_index)
            request.voters.add(caller)
            request.vote_count += 1
            self._record(
                events.vote_cast(
                    RequestIndex(request_index), caller, request.vote_count,
                ),
            )

    # --- Disbursement: payment path --------------------------------------------

    def make_payment(self, caller: Address, request_index: int) -> None:
        with self._call():
            request = validate_payment(self._state, caller, request_index)
            state = self._state

            request.completed = True
            state.balance = Amount(state.balance - request.value)
            event = self._record(
                events.payment(
                    RequestIndex(request_index), request.recipient, request.value,
                ),
            )

            def rollback() -> None:
                request.completed = False
                state.balance = Amount(state.balance + request.value)

            self._pay_out(
                request.recipient, request.value, event, rollback,
                ErrorContext(caller=caller, request_index=request_index),
            )

    # --- Internals --------------------------------------------------------------

    @contextmanager
    def _call(self) -> Iterator[None]:
        """Scope one public call. The outermost scope delivers queued events."""
        self._call_depth += 1
        try:
            yield
        finally:
            self._call_depth -= 1
            if self._call_depth == 0:
                self._flush_events()

    def _record(self, event: CampaignEvent) -> CampaignEvent:
        self._pending_events.append(event)
        return event

    def _flush_events(self) -> None:
        pending, self._pending_events = self._pending_events, []
        for event in pending:
            self._sink.emit(event)

    def _pay_out(
        self,
        to: Address,
        amount: Amount,
        event: CampaignEvent,
        rollback: Callable[[], None],
        context: ErrorContext | None = None,
    ) -> None:
        """Invoke the transfer after local effects are applied; undo them on failure."""
        try:
            sent = self._transfer.transfer(to, amount)
        except Exception:
            rollback()
            self._pending_events.remove(event)
            raise
        if not sent:
            rollback()
            self._pending_events.remove(event)
            raise TransferFailedError(
                to, amount, context or ErrorContext(caller=to),
            )
