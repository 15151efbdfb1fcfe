"""
Token gate: membership-token eligibility.

An address is eligible when it holds at least one unit of any token id in
the eligible token set. The set is an ordered list; removal swaps the last
entry into the removed slot, so indices are not stable identifiers and must
be looked up again before every removal.
"""

import logging

logger = logging.getLogger(__name__)
import threading
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Iterable, List, Optional, Tuple

from ..errors.exceptions import IndexOutOfRange, OracleUnavailable, ValidationError
from ..oracle.base import BalanceOracle
from .core import GovernanceConfig, require_owner


class TokenGate:
    """Eligible token set plus the eligibility query against the oracle."""

    def __init__(
        self,
        config: GovernanceConfig,
        oracle: BalanceOracle,
        token_ids: Iterable[int] = (),
        max_oracle_workers: int = 4,
    ):
        self.config = config
        self.oracle = oracle
        self._tokens: List[int] = []
        self._lock = threading.RLock()
        self._max_oracle_workers = max_oracle_workers
        self._executor: Optional[ThreadPoolExecutor] = None

        for token_id in token_ids:
            self._tokens.append(self._check_token_id(token_id))

    @staticmethod
    def _check_token_id(token_id: int) -> int:
        if isinstance(token_id, bool) or not isinstance(token_id, int) or token_id < 0:
            raise ValidationError(
                f"Token ids are unsigned integers, got {token_id!r}",
                field="token_id",
                value=token_id,
            )
        return token_id

    @property
    def lock(self) -> threading.RLock:
        """Lock guarding the token set; hold it to pair a mutation with its event."""
        return self._lock

    def tokens(self) -> List[int]:
        """Get a copy of the eligible token set in its current order."""
        with self._lock:
            return list(self._tokens)

    def __len__(self) -> int:
        with self._lock:
            return len(self._tokens)

    def is_eligible(self, address: str) -> bool:
        """Check whether ``address`` holds any eligible token.

        Raises OracleUnavailable if the oracle fails or does not answer within
        ``config.oracle_timeout`` seconds.
        """
        # Snapshot so the oracle is never called with the set lock held.
        tokens = self.tokens()
        for token_id in tokens:
            if self._query_balance(address, token_id) >= 1:
                logger.debug(f"{address} eligible via token {token_id}")
                return True
        return False

    def _query_balance(self, holder: str, token_id: int) -> int:
        timeout = self.config.oracle_timeout
        future = None
        try:
            if timeout is None:
                balance = self.oracle.balance_of(holder, token_id)
            else:
                future = self._get_executor().submit(
                    self.oracle.balance_of, holder, token_id
                )
                balance = future.result(timeout=timeout)
        except OracleUnavailable:
            raise
        except FutureTimeoutError as e:
            # A timed-out call must not reach the oracle later.
            future.cancel()
            logger.warning(
                f"Balance oracle timed out after {timeout}s for {holder}/{token_id}"
            )
            raise OracleUnavailable(
                f"Balance oracle did not answer within {timeout}s",
                holder=holder,
                token_id=token_id,
                cause=e,
            ) from e
        except Exception as e:
            logger.warning(f"Balance oracle failed for {holder}/{token_id}: {e}")
            raise OracleUnavailable(
                f"Balance oracle failed: {e}",
                holder=holder,
                token_id=token_id,
                cause=e,
            ) from e

        if isinstance(balance, bool) or not isinstance(balance, int) or balance < 0:
            logger.warning(
                f"Balance oracle returned {balance!r} for {holder}/{token_id}"
            )
            raise OracleUnavailable(
                f"Balance oracle returned a malformed balance: {balance!r}",
                holder=holder,
                token_id=token_id,
                metadata={"balance": repr(balance)},
            )
        return balance

    def _get_executor(self) -> ThreadPoolExecutor:
        with self._lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=self._max_oracle_workers,
                    thread_name_prefix="tokengov-oracle",
                )
            return self._executor

    def add_token(self, caller: str, token_id: int) -> int:
        """Append ``token_id`` to the set and return its index.

        Duplicates are accepted.
        """
        require_owner(self.config, caller, "add eligible tokens", component="gate")
        token_id = self._check_token_id(token_id)
        with self._lock:
            self._tokens.append(token_id)
            index = len(self._tokens) - 1
        logger.info(f"Eligible token {token_id} added at index {index}")
        return index

    def remove_token(self, caller: str, index: int) -> Tuple[int, int]:
        """Swap-delete the entry at ``index``.

        The last entry moves into ``index``, so any index previously held for
        the tail now points at a different slot. Returns the removed token id
        and the new size.
        """
        require_owner(self.config, caller, "remove eligible tokens", component="gate")
        with self._lock:
            size = len(self._tokens)
            if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < size:
                raise IndexOutOfRange(
                    f"Index {index!r} out of range for {size} eligible tokens",
                    field="index",
                    value=index,
                    expected=f"0 <= index < {size}",
                )
            removed = self._tokens[index]
            self._tokens[index] = self._tokens[-1]
            self._tokens.pop()
            new_size = len(self._tokens)
        logger.info(f"Eligible token {removed} removed from index {index}")
        return removed, new_size

    def shutdown(self) -> None:
        """Release the oracle worker threads, if any were started."""
        with self._lock:
            if self._executor is not None:
                self._executor.shutdown(wait=False)
                self._executor = None
