"""
Voting engine.

Each address in a proposal's voter snapshot may vote once, while the
proposal is open. The deadline is inclusive: a vote cast when the clock
equals the deadline is accepted.
"""

import logging

logger = logging.getLogger(__name__)

from ..errors.exceptions import (
    AlreadyVoted,
    DeadlinePassed,
    ErrorContext,
    NotAuthorizedVoter,
)
from ..oracle.base import Clock
from .observability import EventType, GovernanceEvents
from .registry import ProposalRegistry


class VotingEngine:
    """Validates and records votes."""

    def __init__(
        self,
        registry: ProposalRegistry,
        clock: Clock,
        events: GovernanceEvents,
    ):
        self.registry = registry
        self.clock = clock
        self.events = events

    def vote(self, caller: str, proposal_id: int, in_favor: bool) -> None:
        """Cast ``caller``'s vote on ``proposal_id``.

        Checks run in a fixed order, each with its own error:
        ProposalNotFound, NotAuthorizedVoter, AlreadyVoted, DeadlinePassed.
        A rejected call leaves the proposal untouched.
        """
        context = ErrorContext(
            component="voting",
            operation="vote",
            caller=caller,
            proposal_id=proposal_id,
        )
        proposal = self.registry.get(proposal_id)

        with self.registry.lock_for(proposal_id):
            if not proposal.is_authorized(caller):
                raise NotAuthorizedVoter(
                    f"{caller} is not an eligible voter on proposal {proposal_id}",
                    proposal_id=proposal_id,
                    address=caller,
                    context=context,
                )

            if proposal.has_voted(caller):
                raise AlreadyVoted(
                    f"{caller} already voted on proposal {proposal_id}",
                    proposal_id=proposal_id,
                    address=caller,
                    context=context,
                )

            now = self.clock.now()
            if now > proposal.deadline:
                raise DeadlinePassed(
                    f"Voting on proposal {proposal_id} closed at {proposal.deadline}",
                    proposal_id=proposal_id,
                    address=caller,
                    context=context,
                    metadata={"now": now, "deadline": proposal.deadline},
                )

            proposal.record_vote(caller, in_favor)

            self.events.emit(
                EventType.VOTE_CAST,
                {
                    "votes_up": proposal.votes_up,
                    "votes_down": proposal.votes_down,
                    "proposal_id": proposal_id,
                    "voter": caller,
                    "in_favor": in_favor,
                },
                clock=now,
            )

        logger.info(
            f"Vote {'for' if in_favor else 'against'} proposal {proposal_id} "
            f"by {caller} ({proposal.votes_up} up / {proposal.votes_down} down)"
        )

    def has_voted(self, proposal_id: int, address: str) -> bool:
        """Check whether ``address`` already voted on ``proposal_id``."""
        return self.registry.get(proposal_id).has_voted(address)
