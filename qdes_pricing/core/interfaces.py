"""Capabilities the pricing engine needs from its host."""

from abc import ABC, abstractmethod
from typing import Hashable, Optional


class Clock(ABC):
    """Source of the current wall-clock second.

    The engine never reads system time directly; hosts inject a clock so
    tests and simulations can hold time fixed or move it deterministically.
    """

    @abstractmethod
    def now(self) -> int:
        """Return the current time in whole seconds."""
        pass


class ValueTransfer(ABC):
    """Moves value back to a payer.

    The engine calls this only to return excess payment. Implementations
    report failure by returning False or raising; either way the engine
    aborts the whole purchase.
    """

    @abstractmethod
    def transfer(self, recipient: Optional[Hashable], amount: int) -> bool:
        """Send amount to recipient.

        Args:
            recipient: Payer identity supplied to the purchase
            amount: Value to return, always > 0

        Returns:
            True if the transfer completed
        """
        pass
