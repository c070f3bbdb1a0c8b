"""In-memory value transfer used by simulations and tests."""

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Hashable, Optional

from qdes_pricing.core.interfaces import ValueTransfer


@dataclass
class Ledger(ValueTransfer):
    """Records refunds per recipient.

    Recipients listed in rejecting refuse incoming transfers, the way a
    receiving contract without a payable fallback would.
    """
    rejecting: set = field(default_factory=set)
    balances: dict = field(default_factory=lambda: defaultdict(int))
    total_transferred: int = 0
    transfer_count: int = 0
    rejected_count: int = 0

    def transfer(self, recipient: Optional[Hashable], amount: int) -> bool:
        if amount <= 0:
            raise ValueError(f"amount must be > 0, got {amount}")
        if recipient is None or recipient in self.rejecting:
            self.rejected_count += 1
            return False
        self.balances[recipient] += amount
        self.total_transferred += amount
        self.transfer_count += 1
        return True

    def balance_of(self, recipient: Hashable) -> int:
        return self.balances.get(recipient, 0)
