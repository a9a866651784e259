"""Campaign transfers — tests for reentrancy, rollback and event delivery.

Tests cover:
    - A recipient re-entering get_refund / make_payment from inside the
      transfer is rejected because effects were applied first
    - A refused transfer rolls back exactly its own call and drops its event
    - A transfer that raises is treated like a refusal, original error preserved
    - Events queued during a nested call are delivered once the outer call returns
"""

import pytest

from crowdvault.core.domain_types import Amount
from crowdvault.core.errors import (
    AlreadyCompletedError,
    NotEligibleForRefundError,
    TransferFailedError,
)
from tests.core.campaign_fakes import (
    ADMIN, AFTER_DEADLINE, ALICE, BEFORE_DEADLINE, BOB, RECIPIENT,
    funded_campaign,
)


def _goal_missed(contributions=None):
    return funded_campaign(
        goal=5000, contributions=contributions or {ALICE: 400, BOB: 300},
    )


def _approved_request(value: int = 700):
    campaign, transfer, sink = funded_campaign()
    index = campaign.create_request(ADMIN, "parts", RECIPIENT, Amount(value))
    campaign.vote_request(ALICE, index)
    return campaign, transfer, sink, index


# ─── Reentrancy ──────────────────────────────────────────────────

def test_reentrant_refund_rejected():
    campaign, transfer, _ = _goal_missed()
    reentry_errors = []

    def reenter(to, amount):
        if len(transfer.calls) > 1:
            return
        try:
            campaign.get_refund(ALICE, AFTER_DEADLINE)
        except NotEligibleForRefundError as e:
            reentry_errors.append(e)

    transfer.on_transfer = reenter
    assert campaign.get_refund(ALICE, AFTER_DEADLINE) == 400

    assert len(reentry_errors) == 1
    assert transfer.calls == [(ALICE, 400)]
    assert campaign.get_balance() == 300


def test_reentrant_refund_sees_zeroed_ledger():
    campaign, transfer, _ = _goal_missed()
    seen = {}

    def observe(to, amount):
        seen["contribution"] = campaign.contribution_of(ALICE)
        seen["contributors"] = campaign.number_of_contributors
        seen["raised"] = campaign.raised_amount

    transfer.on_transfer = observe
    campaign.get_refund(ALICE, AFTER_DEADLINE)
    assert seen == {"contribution": 0, "contributors": 1, "raised": 300}


def test_reentrant_payment_rejected():
    campaign, transfer, _, index = _approved_request(value=300)
    reentry_errors = []

    def reenter(to, amount):
        try:
            campaign.make_payment(ADMIN, index)
        except AlreadyCompletedError as e:
            reentry_errors.append(e)

    transfer.on_transfer = reenter
    campaign.make_payment(ADMIN, index)

    assert len(reentry_errors) == 1
    assert transfer.calls == [(RECIPIENT, 300)]
    assert campaign.get_balance() == 800


# ─── Rollback ────────────────────────────────────────────────────

def test_refused_refund_restores_ledger():
    campaign, transfer, sink = _goal_missed()
    transfer.succeed = False
    before = len(sink.events)

    with pytest.raises(TransferFailedError) as exc_info:
        campaign.get_refund(ALICE, AFTER_DEADLINE)

    assert exc_info.value.recipient == ALICE
    assert exc_info.value.amount == 400
    assert campaign.contribution_of(ALICE) == 400
    assert campaign.number_of_contributors == 2
    assert campaign.raised_amount == 700
    assert campaign.get_balance() == 700
    assert len(sink.events) == before


def test_refused_refund_restores_votes():
    campaign, transfer, _ = _goal_missed()
    campaign.create_request(ADMIN, "parts", RECIPIENT, Amount(100))
    campaign.vote_request(ALICE, 0)
    transfer.succeed = False

    with pytest.raises(TransferFailedError):
        campaign.get_refund(ALICE, AFTER_DEADLINE)

    assert campaign.get_request(0)["vote_count"] == 1
    assert ALICE in campaign.state.requests[0].voters


def test_refused_refund_can_be_retried():
    campaign, transfer, _ = _goal_missed()
    transfer.succeed = False
    with pytest.raises(TransferFailedError):
        campaign.get_refund(ALICE, AFTER_DEADLINE)

    transfer.succeed = True
    assert campaign.get_refund(ALICE, AFTER_DEADLINE) == 400
    assert campaign.contribution_of(ALICE) == 0


def test_refused_payment_stays_retryable():
    campaign, transfer, sink, index = _approved_request()
    transfer.succeed = False
    before = len(sink.events)

    with pytest.raises(TransferFailedError) as exc_info:
        campaign.make_payment(ADMIN, index)

    assert exc_info.value.context.request_index == index
    assert campaign.get_request(index)["completed"] is False
    assert campaign.get_balance() == 1100
    assert len(sink.events) == before

    transfer.succeed = True
    campaign.make_payment(ADMIN, index)
    assert campaign.get_request(index)["completed"] is True
    assert sink.types[-1] == "payment"


def test_raising_transfer_rolls_back_and_propagates():
    campaign, transfer, sink = _goal_missed()
    transfer.raise_error = RuntimeError("gateway down")
    before = len(sink.events)

    with pytest.raises(RuntimeError, match="gateway down"):
        campaign.get_refund(ALICE, AFTER_DEADLINE)

    assert campaign.contribution_of(ALICE) == 400
    assert campaign.raised_amount == 700
    assert len(sink.events) == before


def test_raising_payment_transfer_rolls_back():
    campaign, transfer, _, index = _approved_request()
    transfer.raise_error = ConnectionError("reset")
    with pytest.raises(ConnectionError):
        campaign.make_payment(ADMIN, index)
    assert campaign.get_request(index)["completed"] is False
    assert campaign.get_balance() == 1100


# ─── Event delivery ──────────────────────────────────────────────

def test_events_delivered_after_outer_call_returns():
    campaign, transfer, sink, index = _approved_request(value=300)
    delivered_during_transfer = []

    def observe(to, amount):
        delivered_during_transfer.append(list(sink.types))

    transfer.on_transfer = observe
    campaign.make_payment(ADMIN, index)

    assert "payment" not in delivered_during_transfer[0]
    assert sink.types[-1] == "payment"


def test_nested_contribution_event_follows_payment():
    campaign, transfer, sink, index = _approved_request(value=300)

    def contribute_back(to, amount):
        campaign.contribute(to, Amount(150), BEFORE_DEADLINE)

    transfer.on_transfer = contribute_back
    campaign.make_payment(ADMIN, index)

    assert sink.types[-2:] == ["payment", "contribution"]
    assert campaign.contribution_of(RECIPIENT) == 150
    assert campaign.get_balance() == 950


def test_rollback_keeps_nested_call_effects():
    campaign, transfer, sink, index = _approved_request(value=300)

    def contribute_then_refuse(to, amount):
        campaign.contribute(to, Amount(150), BEFORE_DEADLINE)

    transfer.on_transfer = contribute_then_refuse
    transfer.succeed = False
    with pytest.raises(TransferFailedError):
        campaign.make_payment(ADMIN, index)

    assert campaign.contribution_of(RECIPIENT) == 150
    assert campaign.get_balance() == 1250
    assert sink.types[-1] == "contribution"
    assert "payment" not in sink.types
