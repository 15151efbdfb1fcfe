"""
Quorum resolution.

Resolution is the terminal transition of a proposal: the owner tallies the
votes once the deadline has passed (strictly greater than), fixes the
outcome, and the proposal can never be voted on or resolved again.

Two quorum formulas are supported. With ``votes = up + down``:

* corrected: ``votes * 100 // max_votes >= quorum_percent``
* legacy:    ``votes // max_votes >= quorum_percent // 100``

The legacy form truncates both sides before comparing, so for any quorum
below 100 the check always holds, and for quorum 100 it holds only when every
voter took part. Both require strictly more up votes than down votes.
"""

import logging

logger = logging.getLogger(__name__)

from ..errors.exceptions import AlreadyResolved, DeadlineNotReached, ErrorContext
from ..oracle.base import Clock
from .core import GovernanceConfig, Proposal, QuorumFormula, require_owner
from .observability import EventType, GovernanceEvents
from .registry import ProposalRegistry


def participation(votes_cast: int, max_votes: int) -> int:
    """Percentage of voters who took part, rounded down."""
    if max_votes <= 0:
        return 0
    return votes_cast * 100 // max_votes


def quorum_met(
    votes_cast: int,
    max_votes: int,
    quorum_percent: int,
    formula: QuorumFormula = QuorumFormula.CORRECTED,
) -> bool:
    if max_votes <= 0:
        return False
    if formula is QuorumFormula.LEGACY:
        return votes_cast // max_votes >= quorum_percent // 100
    return participation(votes_cast, max_votes) >= quorum_percent


def evaluate(
    votes_up: int,
    votes_down: int,
    max_votes: int,
    quorum_percent: int,
    formula: QuorumFormula = QuorumFormula.CORRECTED,
) -> bool:
    """Decide whether a tally passes."""
    return votes_down < votes_up and quorum_met(
        votes_up + votes_down, max_votes, quorum_percent, formula
    )


class QuorumResolver:
    """Performs the one-way tally-and-resolve step."""

    def __init__(
        self,
        config: GovernanceConfig,
        registry: ProposalRegistry,
        clock: Clock,
        events: GovernanceEvents,
    ):
        self.config = config
        self.registry = registry
        self.clock = clock
        self.events = events

    def participation(self, proposal: Proposal) -> int:
        return participation(proposal.total_votes, proposal.max_votes)

    def resolve(self, caller: str, proposal_id: int) -> bool:
        """Resolve ``proposal_id`` and return whether it passed."""
        require_owner(
            self.config,
            caller,
            "resolve proposals",
            component="resolution",
            proposal_id=proposal_id,
        )
        proposal = self.registry.get(proposal_id)
        context = ErrorContext(
            component="resolution",
            operation="resolve",
            caller=caller,
            proposal_id=proposal_id,
        )

        with self.registry.lock_for(proposal_id):
            if proposal.resolved:
                raise AlreadyResolved(
                    f"Proposal {proposal_id} is already resolved",
                    proposal_id=proposal_id,
                    context=context,
                )

            now = self.clock.now()
            if now <= proposal.deadline:
                raise DeadlineNotReached(
                    f"Proposal {proposal_id} is open until {proposal.deadline}",
                    proposal_id=proposal_id,
                    context=context,
                    metadata={"now": now, "deadline": proposal.deadline},
                )

            # Quorum is read now, not snapshotted at creation.
            quorum_percent = self.config.quorum_percent
            passed = evaluate(
                proposal.votes_up,
                proposal.votes_down,
                proposal.max_votes,
                quorum_percent,
                self.config.quorum_formula,
            )
            proposal.resolved = True
            if passed:
                proposal.passed = True

            self.events.emit(
                EventType.PROPOSAL_RESOLVED,
                {"id": proposal_id, "passed": passed},
                clock=now,
            )

        logger.info(
            f"Proposal {proposal_id} resolved: {'passed' if passed else 'failed'} "
            f"({proposal.votes_up} up / {proposal.votes_down} down of "
            f"{proposal.max_votes}, quorum {quorum_percent}%, "
            f"{self.config.quorum_formula.value})"
        )
        return passed
