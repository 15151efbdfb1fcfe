"""
Token-gated governance.

Holders of designated membership tokens create proposals, each authorized
voter casts one vote, and the owner resolves every proposal exactly once
after its deadline by tallying votes against a quorum percentage.
"""

from .admin import AdminControls
from .core import (
    DEFAULT_VOTING_WINDOW,
    GovernanceConfig,
    Proposal,
    ProposalState,
    QuorumFormula,
)
from .engine import GovernanceEngine
from .gate import TokenGate
from .observability import (
    AuditTrail,
    EventType,
    GovernanceEvent,
    GovernanceEvents,
)
from .registry import ProposalRegistry
from .resolution import QuorumResolver, evaluate, participation
from .voting import VotingEngine

__all__ = [
    # Core
    "GovernanceEngine",
    "GovernanceConfig",
    "Proposal",
    "ProposalState",
    "QuorumFormula",
    "DEFAULT_VOTING_WINDOW",
    # Components
    "TokenGate",
    "ProposalRegistry",
    "VotingEngine",
    "QuorumResolver",
    "AdminControls",
    "evaluate",
    "participation",
    # Observability
    "EventType",
    "GovernanceEvent",
    "GovernanceEvents",
    "AuditTrail",
]
