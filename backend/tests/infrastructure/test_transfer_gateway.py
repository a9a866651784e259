"""Ledger transfer gateway — denylist refusal and attempt log."""

from crowdvault.core.domain_types import Address, Amount
from crowdvault.infrastructure.transfer_gateway import (
    LedgerTransferGateway,
    TransferAttempt,
)


def test_settles_and_records():
    gateway = LedgerTransferGateway()
    assert gateway.transfer(Address("vendor"), Amount(300)) is True
    assert gateway.attempts == [TransferAttempt("vendor", 300, True)]


def test_denylisted_recipient_refused():
    gateway = LedgerTransferGateway(["vendor"])
    assert gateway.transfer(Address("vendor"), Amount(300)) is False
    assert gateway.attempts[0].succeeded is False


def test_non_positive_amount_refused():
    assert LedgerTransferGateway().transfer(Address("vendor"), Amount(0)) is False


def test_attempts_kept_in_call_order():
    gateway = LedgerTransferGateway(["b"])
    gateway.transfer(Address("a"), Amount(1))
    gateway.transfer(Address("b"), Amount(2))
    assert [(a.recipient, a.succeeded) for a in gateway.attempts] == [
        ("a", True), ("b", False),
    ]
