"""
Proposal registry.

The registry exclusively owns every Proposal record, including each
proposal's set of addresses that already voted. It allocates sequential ids
and hands out the per-proposal locks that voting and resolution share.
"""

import logging

logger = logging.getLogger(__name__)
import threading
from typing import Dict, List, Sequence

from ..errors.exceptions import (
    EmptyDescription,
    EmptyVoterList,
    ErrorContext,
    NotEligible,
    ProposalNotFound,
)
from ..oracle.base import Clock
from .core import GovernanceConfig, Proposal
from .gate import TokenGate
from .observability import EventType, GovernanceEvents


class ProposalRegistry:
    """Arena of proposals keyed by id."""

    def __init__(
        self,
        config: GovernanceConfig,
        gate: TokenGate,
        clock: Clock,
        events: GovernanceEvents,
    ):
        self.config = config
        self.gate = gate
        self.clock = clock
        self.events = events
        self._proposals: Dict[int, Proposal] = {}
        self._locks: Dict[int, threading.RLock] = {}
        self._lock = threading.RLock()

    def create(
        self,
        caller: str,
        description: str,
        eligible_voters: Sequence[str],
    ) -> int:
        """Create a proposal and return its id."""
        context = ErrorContext(
            component="registry", operation="create_proposal", caller=caller
        )
        if not self.gate.is_eligible(caller):
            logger.debug(f"Rejected proposal from ineligible {caller}")
            raise NotEligible(
                f"{caller} holds no eligible membership token",
                address=caller,
                context=context,
            )

        if not description or not description.strip():
            raise EmptyDescription(
                "Proposal description cannot be empty",
                field="description",
                context=context,
            )

        voters = list(eligible_voters)
        if not voters:
            raise EmptyVoterList(
                "Proposal needs at least one eligible voter",
                address=caller,
                context=context,
            )

        with self._lock:
            proposal_id = self.config.next_proposal_id
            now = self.clock.now()
            proposal = Proposal(
                id=proposal_id,
                proposer=caller,
                description=description,
                created_at=now,
                deadline=now + self.config.voting_window,
                eligible_voters=voters,
            )
            self._proposals[proposal_id] = proposal
            self._locks[proposal_id] = threading.RLock()
            self.config.next_proposal_id = proposal_id + 1

            self.events.emit(
                EventType.PROPOSAL_CREATED,
                {
                    "proposer": caller,
                    "description": description,
                    "id": proposal_id,
                    "max_votes": proposal.max_votes,
                },
                clock=now,
            )

        logger.info(
            f"Proposal {proposal_id} created by {caller} "
            f"({proposal.max_votes} voters, deadline {proposal.deadline})"
        )
        return proposal_id

    def get(self, proposal_id: int) -> Proposal:
        """Get a proposal by id."""
        with self._lock:
            proposal = self._proposals.get(proposal_id)
        if proposal is None:
            raise ProposalNotFound(
                f"Proposal {proposal_id} not found", proposal_id=proposal_id
            )
        return proposal

    def lock_for(self, proposal_id: int) -> threading.RLock:
        """Get the lock serializing mutations of one proposal."""
        with self._lock:
            lock = self._locks.get(proposal_id)
        if lock is None:
            raise ProposalNotFound(
                f"Proposal {proposal_id} not found", proposal_id=proposal_id
            )
        return lock

    def exists(self, proposal_id: int) -> bool:
        with self._lock:
            return proposal_id in self._proposals

    def count(self) -> int:
        with self._lock:
            return len(self._proposals)

    def ids(self) -> List[int]:
        with self._lock:
            return sorted(self._proposals)
