"""
Observability and audit trail for governance.

Every successful state transition emits exactly one event. Events are kept in
a hash-chained audit trail and forwarded to subscribed listeners.
"""

import logging

logger = logging.getLogger(__name__)
import hashlib
import itertools
import json
import threading
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional


class EventType(Enum):
    """Types of governance events."""

    PROPOSAL_CREATED = "proposal_created"
    VOTE_CAST = "vote_cast"
    PROPOSAL_RESOLVED = "proposal_resolved"

    TOKEN_ADDED = "token_added"
    TOKEN_REMOVED = "token_removed"
    QUORUM_CHANGED = "quorum_changed"


@dataclass
class GovernanceEvent:
    """A governance event for audit trail."""

    sequence: int
    event_type: EventType
    payload: Dict[str, Any]
    clock: Optional[int] = None
    timestamp: float = field(default_factory=time.time)

    # Cryptographic integrity
    previous_event_hash: Optional[str] = None
    event_hash: Optional[str] = None

    def __post_init__(self):
        """Calculate event hash after initialization."""
        self.event_hash = self.calculate_hash()

    @property
    def proposal_id(self) -> Optional[int]:
        if "proposal_id" in self.payload:
            return self.payload["proposal_id"]
        if self.event_type in (EventType.PROPOSAL_CREATED, EventType.PROPOSAL_RESOLVED):
            return self.payload.get("id")
        return None

    @property
    def address(self) -> Optional[str]:
        return self.payload.get("voter") or self.payload.get("proposer")

    def calculate_hash(self) -> str:
        """Calculate hash of this event."""
        event_data = {
            "sequence": self.sequence,
            "event_type": self.event_type.value,
            "payload": self.payload,
            "clock": self.clock,
            "timestamp": self.timestamp,
            "previous_event_hash": self.previous_event_hash,
        }

        event_json = json.dumps(event_data, sort_keys=True, default=str)
        return hashlib.sha256(event_json.encode()).hexdigest()

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary."""
        return {
            "sequence": self.sequence,
            "event_type": self.event_type.value,
            "payload": dict(self.payload),
            "clock": self.clock,
            "timestamp": self.timestamp,
            "event_hash": self.event_hash,
            "previous_event_hash": self.previous_event_hash,
        }


class AuditTrail:
    """Append-only, hash-chained record of governance events."""

    def __init__(self):
        """Initialize audit trail."""
        self.events: List[GovernanceEvent] = []
        self.proposal_events: Dict[int, List[GovernanceEvent]] = {}
        self.address_events: Dict[str, List[GovernanceEvent]] = {}
        self._lock = threading.Lock()

    def add_event(self, event: GovernanceEvent) -> None:
        """Add an event to the audit trail."""
        with self._lock:
            # Set previous event hash for chain integrity
            if self.events:
                event.previous_event_hash = self.events[-1].event_hash
            event.event_hash = event.calculate_hash()

            self.events.append(event)

            if event.proposal_id is not None:
                self.proposal_events.setdefault(event.proposal_id, []).append(event)

            if event.address:
                self.address_events.setdefault(event.address, []).append(event)

    def get_proposal_events(self, proposal_id: int) -> List[GovernanceEvent]:
        """Get all events for a proposal."""
        return list(self.proposal_events.get(proposal_id, []))

    def get_address_events(self, address: str) -> List[GovernanceEvent]:
        """Get all events emitted by or about an address."""
        return list(self.address_events.get(address, []))

    def get_events_by_type(self, event_type: EventType) -> List[GovernanceEvent]:
        return [event for event in self.events if event.event_type == event_type]

    def verify_integrity(self) -> bool:
        """Verify the integrity of the audit trail."""
        for i, event in enumerate(self.events):
            if event.event_hash != event.calculate_hash():
                return False

            if i > 0:
                if event.previous_event_hash != self.events[i - 1].event_hash:
                    return False
            elif event.previous_event_hash is not None:
                return False

        return True

    def summary(self) -> Dict[str, Any]:
        """Get audit trail summary."""
        event_counts: Dict[str, int] = {}
        for event in self.events:
            event_type = event.event_type.value
            event_counts[event_type] = event_counts.get(event_type, 0) + 1

        return {
            "total_events": len(self.events),
            "event_counts": event_counts,
            "unique_proposals": len(self.proposal_events),
            "unique_addresses": len(self.address_events),
            "integrity_verified": self.verify_integrity(),
        }


Listener = Callable[[GovernanceEvent], None]


class GovernanceEvents:
    """Event bus for governance observers."""

    def __init__(self, audit_trail: Optional[AuditTrail] = None):
        """Initialize governance events system."""
        self.audit_trail = audit_trail or AuditTrail()
        self.listeners: Dict[Optional[EventType], List[Listener]] = {}
        self._sequence = itertools.count(1)
        self._lock = threading.Lock()

    def subscribe(self, listener: Listener, event_type: Optional[EventType] = None) -> None:
        """Register ``listener`` for ``event_type``, or for every event if None."""
        with self._lock:
            self.listeners.setdefault(event_type, []).append(listener)

    def unsubscribe(self, listener: Listener, event_type: Optional[EventType] = None) -> None:
        with self._lock:
            listeners = self.listeners.get(event_type, [])
            if listener in listeners:
                listeners.remove(listener)

    def emit(
        self,
        event_type: EventType,
        payload: Dict[str, Any],
        clock: Optional[int] = None,
    ) -> GovernanceEvent:
        """Record an event and notify listeners."""
        with self._lock:
            event = GovernanceEvent(
                sequence=next(self._sequence),
                event_type=event_type,
                payload=dict(payload),
                clock=clock,
            )
            self.audit_trail.add_event(event)
            listeners = list(self.listeners.get(event_type, [])) + list(
                self.listeners.get(None, [])
            )

        for listener in listeners:
            try:
                listener(event)
            except Exception as e:
                logger.error(
                    f"Error in {event_type.value} listener {listener!r}: {e}",
                    exc_info=True,
                )

        return event

    def verify_audit_integrity(self) -> bool:
        """Verify the integrity of the audit trail."""
        return self.audit_trail.verify_integrity()
