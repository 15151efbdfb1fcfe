"""
Owner-only administration: eligible tokens and the quorum percentage.

A quorum change applies to every proposal resolved afterwards, including
proposals that are currently open.
"""

import logging

logger = logging.getLogger(__name__)
import threading
from typing import Tuple

from .core import GovernanceConfig, require_owner, validate_quorum
from .gate import TokenGate
from .observability import EventType, GovernanceEvents


class AdminControls:
    """Restricted mutations of the governance configuration."""

    def __init__(
        self,
        config: GovernanceConfig,
        gate: TokenGate,
        events: GovernanceEvents,
    ):
        self.config = config
        self.gate = gate
        self.events = events
        self._lock = threading.Lock()

    def change_quorum(self, caller: str, new_value: int) -> int:
        """Replace the quorum percentage and return the previous value."""
        require_owner(self.config, caller, "change the quorum")
        validate_quorum(new_value)
        with self._lock:
            old_value = self.config.quorum_percent
            self.config.quorum_percent = new_value
            self.events.emit(
                EventType.QUORUM_CHANGED, {"old": old_value, "new": new_value}
            )
        logger.info(f"Quorum changed from {old_value}% to {new_value}%")
        return old_value

    def add_token(self, caller: str, token_id: int) -> int:
        # Emitted under the token-set lock: audit order equals mutation order.
        with self.gate.lock:
            index = self.gate.add_token(caller, token_id)
            self.events.emit(
                EventType.TOKEN_ADDED, {"token_id": token_id, "index": index}
            )
        return index

    def remove_token(self, caller: str, index: int) -> Tuple[int, int]:
        """Swap-delete the token at ``index``; see TokenGate.remove_token."""
        with self.gate.lock:
            removed, size = self.gate.remove_token(caller, index)
            self.events.emit(
                EventType.TOKEN_REMOVED, {"index": index, "token_id": removed}
            )
        return removed, size
