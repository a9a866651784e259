"""Ledger Transfer Gateway — the shell's ValueTransfer capability.

Invariants:
    - transfer() is synchronous and returns False on refusal, with nothing recorded as sent
    - Every attempt (sent or refused) is appended to attempts, in call order
    - Addresses on the denylist are always refused

Design Decisions:
    - Settlement is bookkeeping: the service persists attempts to the transfers table
      in the same DB transaction as the campaign snapshot, so a payout and the state
      change that authorised it commit together
"""

import logging
from dataclasses import dataclass

from crowdvault.core.domain_types import Address, Amount

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransferAttempt:
    recipient: Address
    amount: Amount
    succeeded: bool


class LedgerTransferGateway:
    """Records payouts; refuses denylisted recipients."""

    def __init__(self, denylist: list[str] | None = None):
        self._denylist = frozenset(denylist or ())
        self.attempts: list[TransferAttempt] = []

    def transfer(self, to: Address, amount: Amount) -> bool:
        succeeded = to not in self._denylist and amount > 0
        self.attempts.append(TransferAttempt(to, amount, succeeded))
        if succeeded:
            logger.info(
                f"Transfer of {amount} to {to} settled",
                extra={"recipient": to, "amount": amount},
            )
        else:
            logger.warning(
                f"Transfer of {amount} to {to} refused",
                extra={"recipient": to, "amount": amount},
            )
        return succeeded
