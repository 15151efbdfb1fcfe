"""
Balance oracle and clock interfaces.

The governance engine never owns token balances or time. It reads both
through the two small interfaces defined here, so the same state machine can
run against an in-memory ledger in tests or against a live chain.
"""

import logging

logger = logging.getLogger(__name__)
import threading
import time
from abc import ABC, abstractmethod
from typing import Dict, Optional, Tuple

from ..errors.exceptions import ValidationError


class BalanceOracle(ABC):
    """Read-only view of membership token balances."""

    @abstractmethod
    def balance_of(self, holder: str, token_id: int) -> int:
        """Return how many units of ``token_id`` ``holder`` owns."""
        pass


class Clock(ABC):
    """Monotonic, non-decreasing integer time or height source."""

    @abstractmethod
    def now(self) -> int:
        """Return the current clock value."""
        pass


class InMemoryBalanceOracle(BalanceOracle):
    """Dictionary-backed balance oracle."""

    def __init__(self, balances: Optional[Dict[Tuple[str, int], int]] = None):
        self._balances: Dict[Tuple[str, int], int] = dict(balances or {})
        self._lock = threading.Lock()

    def set_balance(self, holder: str, token_id: int, amount: int) -> None:
        """Set the balance of ``holder`` for ``token_id``."""
        if amount < 0:
            raise ValidationError(
                "Balance cannot be negative", field="amount", value=amount
            )
        with self._lock:
            if amount == 0:
                self._balances.pop((holder, token_id), None)
            else:
                self._balances[(holder, token_id)] = amount

    def balance_of(self, holder: str, token_id: int) -> int:
        with self._lock:
            return self._balances.get((holder, token_id), 0)


class ManualClock(Clock):
    """A clock that only moves when told to."""

    def __init__(self, start: int = 0):
        if start < 0:
            raise ValidationError("Clock cannot start below zero", value=start)
        self._value = start
        self._lock = threading.Lock()

    def now(self) -> int:
        with self._lock:
            return self._value

    def set(self, value: int) -> None:
        """Jump to ``value``; moving backwards is rejected."""
        with self._lock:
            if value < self._value:
                raise ValidationError(
                    f"Clock is monotonic: {value} < {self._value}",
                    field="value",
                    value=value,
                    expected=f">= {self._value}",
                )
            self._value = value

    def advance(self, delta: int = 1) -> int:
        """Move forward by ``delta`` and return the new value."""
        if delta < 0:
            raise ValidationError("Cannot advance by a negative delta", value=delta)
        with self._lock:
            self._value += delta
            return self._value


class SystemClock(Clock):
    """Wall-clock unix seconds, clamped so it never goes backwards."""

    def __init__(self):
        self._last = 0
        self._lock = threading.Lock()

    def now(self) -> int:
        with self._lock:
            current = int(time.time())
            if current < self._last:
                logger.warning(
                    f"System clock moved backwards ({current} < {self._last}); holding"
                )
                current = self._last
            self._last = current
            return current
