"""
Governance engine.

Wires the token gate, proposal registry, voting engine, quorum resolver and
admin controls to one configuration, one oracle, one clock and one event
bus. This is the entry point applications use.
"""

import logging

logger = logging.getLogger(__name__)
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from ..oracle.base import BalanceOracle, Clock
from .admin import AdminControls
from .core import GovernanceConfig, Proposal, ProposalState
from .gate import TokenGate
from .observability import GovernanceEvents
from .registry import ProposalRegistry
from .resolution import QuorumResolver
from .voting import VotingEngine


class GovernanceEngine:
    """Token-gated proposal and voting engine."""

    def __init__(
        self,
        config: GovernanceConfig,
        oracle: BalanceOracle,
        clock: Clock,
        token_ids: Iterable[int] = (),
        events: Optional[GovernanceEvents] = None,
    ):
        """Initialize governance engine."""
        config.validate()
        self.config = config
        self.clock = clock
        self.events = events or GovernanceEvents()

        self.gate = TokenGate(config, oracle, token_ids)
        self.registry = ProposalRegistry(config, self.gate, clock, self.events)
        self.voting = VotingEngine(self.registry, clock, self.events)
        self.resolver = QuorumResolver(config, self.registry, clock, self.events)
        self.admin = AdminControls(config, self.gate, self.events)

        logger.info(
            f"Governance engine ready: owner={config.owner}, "
            f"quorum={config.quorum_percent}%, tokens={self.gate.tokens()}"
        )

    @property
    def owner(self) -> str:
        return self.config.owner

    @property
    def quorum_percent(self) -> int:
        return self.config.quorum_percent

    # Proposal flow

    def create_proposal(
        self, caller: str, description: str, eligible_voters: Sequence[str]
    ) -> int:
        return self.registry.create(caller, description, eligible_voters)

    def get_proposal(self, proposal_id: int) -> Proposal:
        return self.registry.get(proposal_id)

    def vote(self, caller: str, proposal_id: int, in_favor: bool) -> None:
        self.voting.vote(caller, proposal_id, in_favor)

    def resolve(self, caller: str, proposal_id: int) -> bool:
        return self.resolver.resolve(caller, proposal_id)

    def has_voted(self, proposal_id: int, address: str) -> bool:
        return self.voting.has_voted(proposal_id, address)

    def state_of(self, proposal_id: int) -> ProposalState:
        """Get the lifecycle state of a proposal at the current clock value."""
        return self.registry.get(proposal_id).state_at(self.clock.now())

    def proposals_in_state(self, state: ProposalState) -> List[Proposal]:
        now = self.clock.now()
        proposals = [self.registry.get(pid) for pid in self.registry.ids()]
        return [p for p in proposals if p.state_at(now) is state]

    # Token gate and admin surface

    def is_eligible(self, address: str) -> bool:
        return self.gate.is_eligible(address)

    def eligible_tokens(self) -> List[int]:
        return self.gate.tokens()

    def add_token(self, caller: str, token_id: int) -> int:
        return self.admin.add_token(caller, token_id)

    def remove_token(self, caller: str, index: int) -> Tuple[int, int]:
        return self.admin.remove_token(caller, index)

    def change_quorum(self, caller: str, new_value: int) -> int:
        return self.admin.change_quorum(caller, new_value)

    # Introspection

    def snapshot(self) -> Dict[str, Any]:
        """Get a JSON-serializable view of the whole governance state."""
        return {
            "config": self.config.to_dict(),
            "eligible_tokens": self.gate.tokens(),
            "proposals": [
                self.registry.get(pid).to_dict() for pid in self.registry.ids()
            ],
            "audit": self.events.audit_trail.summary(),
        }

    def close(self) -> None:
        """Release background resources held by the token gate."""
        self.gate.shutdown()
