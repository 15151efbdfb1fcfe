"""
Core governance types and data structures.

This module defines the proposal record, the process-wide governance
configuration and the enums describing proposal lifecycle and quorum
arithmetic.
"""

import logging

logger = logging.getLogger(__name__)
import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Set

from ..errors.exceptions import (
    ConfigurationError,
    ErrorContext,
    InvalidQuorum,
    Unauthorized,
    ValidationError,
)

# Twelve hours on a seconds clock.
DEFAULT_VOTING_WINDOW = 12 * 60 * 60

MAX_QUORUM_PERCENT = 100


class ProposalState(Enum):
    """Lifecycle state of a proposal relative to the clock."""

    OPEN = "open"
    CLOSED = "closed"
    RESOLVED = "resolved"


class QuorumFormula(Enum):
    """Quorum arithmetic used when resolving a proposal.

    ``CORRECTED`` multiplies participation by 100 before dividing by the
    voter count. ``LEGACY`` divides both sides first, reproducing the
    truncating comparison of early token-gated DAO contracts.
    """

    CORRECTED = "corrected"
    LEGACY = "legacy"


def validate_quorum(value: Any) -> int:
    """Return ``value`` if it is an integer percentage, else raise InvalidQuorum."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidQuorum(
            f"Quorum must be an integer, got {value!r}",
            field="quorum_percent",
            value=value,
            expected="int in 0..100",
        )
    if not 0 <= value <= MAX_QUORUM_PERCENT:
        raise InvalidQuorum(
            f"Quorum must be between 0 and {MAX_QUORUM_PERCENT}, got {value}",
            field="quorum_percent",
            value=value,
            expected="int in 0..100",
        )
    return value


@dataclass
class Proposal:
    """A governance proposal."""

    id: int
    proposer: str
    description: str
    created_at: int
    deadline: int
    eligible_voters: List[str]
    votes_up: int = 0
    votes_down: int = 0
    voted: Set[str] = field(default_factory=set)
    resolved: bool = False
    passed: bool = False

    def __post_init__(self):
        """Validate proposal after initialization."""
        if self.id < 1:
            raise ValidationError("Proposal ids start at 1", field="id", value=self.id)
        if self.deadline < self.created_at:
            raise ValidationError("Deadline precedes creation", field="deadline")
        self.eligible_voters = list(self.eligible_voters)
        self._voter_set = frozenset(self.eligible_voters)

    @property
    def max_votes(self) -> int:
        return len(self.eligible_voters)

    @property
    def total_votes(self) -> int:
        return self.votes_up + self.votes_down

    def is_authorized(self, address: str) -> bool:
        """Check whether ``address`` is in the voter snapshot."""
        return address in self._voter_set

    def has_voted(self, address: str) -> bool:
        return address in self.voted

    def state_at(self, now: int) -> ProposalState:
        """Get the lifecycle state at clock value ``now``."""
        if self.resolved:
            return ProposalState.RESOLVED
        if now <= self.deadline:
            return ProposalState.OPEN
        return ProposalState.CLOSED

    def record_vote(self, voter: str, in_favor: bool) -> None:
        """Count a vote. Callers must have validated the voter already."""
        if in_favor:
            self.votes_up += 1
        else:
            self.votes_down += 1
        self.voted.add(voter)

    def to_dict(self) -> Dict[str, Any]:
        """Convert proposal to dictionary."""
        return {
            "id": self.id,
            "proposer": self.proposer,
            "description": self.description,
            "created_at": self.created_at,
            "deadline": self.deadline,
            "eligible_voters": list(self.eligible_voters),
            "max_votes": self.max_votes,
            "votes_up": self.votes_up,
            "votes_down": self.votes_down,
            "voted": sorted(self.voted),
            "resolved": self.resolved,
            "passed": self.passed,
        }


@dataclass
class GovernanceConfig:
    """Process-wide governance configuration.

    ``owner`` is fixed once the engine is built. ``quorum_percent`` is read at
    resolve time, so changing it affects every proposal not yet resolved.
    """

    owner: str
    quorum_percent: int = 50
    next_proposal_id: int = 1
    voting_window: int = DEFAULT_VOTING_WINDOW
    quorum_formula: QuorumFormula = QuorumFormula.CORRECTED
    oracle_timeout: Optional[float] = None

    def __post_init__(self):
        """Validate configuration after initialization."""
        if isinstance(self.quorum_formula, str):
            self.quorum_formula = _parse_formula(self.quorum_formula)
        self.validate()

    def validate(self) -> None:
        """Validate configuration."""
        if not self.owner:
            raise ConfigurationError("Owner address is required", config_key="owner")

        validate_quorum(self.quorum_percent)

        for key in ("next_proposal_id", "voting_window"):
            value = getattr(self, key)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigurationError(
                    f"{key} must be an integer, got {value!r}", config_key=key
                )

        if self.next_proposal_id < 1:
            raise ConfigurationError(
                "Proposal ids start at 1", config_key="next_proposal_id"
            )

        if self.voting_window <= 0:
            raise ConfigurationError(
                "Voting window must be positive", config_key="voting_window"
            )

        if self.oracle_timeout is not None and (
            isinstance(self.oracle_timeout, bool)
            or not isinstance(self.oracle_timeout, (int, float))
        ):
            raise ConfigurationError(
                f"Oracle timeout must be a number, got {self.oracle_timeout!r}",
                config_key="oracle_timeout",
            )

        if self.oracle_timeout is not None and self.oracle_timeout <= 0:
            raise ConfigurationError(
                "Oracle timeout must be positive", config_key="oracle_timeout"
            )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "owner": self.owner,
            "quorum_percent": self.quorum_percent,
            "next_proposal_id": self.next_proposal_id,
            "voting_window": self.voting_window,
            "quorum_formula": self.quorum_formula.value,
            "oracle_timeout": self.oracle_timeout,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GovernanceConfig":
        """Create configuration from dictionary."""
        known = {
            "owner",
            "quorum_percent",
            "next_proposal_id",
            "voting_window",
            "quorum_formula",
            "oracle_timeout",
        }
        unknown = set(data) - known
        if unknown:
            raise ConfigurationError(
                f"Unknown configuration keys: {sorted(unknown)}",
                config_key=sorted(unknown)[0],
            )
        return cls(**data)

    @classmethod
    def from_env(
        cls, environ: Optional[Dict[str, str]] = None, **defaults: Any
    ) -> "GovernanceConfig":
        """Build configuration from ``TOKENGOV_*`` environment variables.

        Keyword arguments supply values for variables that are not set.
        """
        environ = os.environ if environ is None else environ
        env_mappings = {
            "TOKENGOV_OWNER": ("owner", str),
            "TOKENGOV_QUORUM_PERCENT": ("quorum_percent", int),
            "TOKENGOV_VOTING_WINDOW": ("voting_window", int),
            "TOKENGOV_QUORUM_FORMULA": ("quorum_formula", _parse_formula),
            "TOKENGOV_ORACLE_TIMEOUT": ("oracle_timeout", float),
        }

        values = dict(defaults)
        for env_var, (attr_name, attr_type) in env_mappings.items():
            env_value = environ.get(env_var)
            if env_value is None:
                continue
            try:
                values[attr_name] = attr_type(env_value)
            except (ValueError, TypeError) as e:
                raise ConfigurationError(
                    f"Invalid environment variable {env_var}={env_value}: {e}",
                    config_key=env_var,
                    cause=e,
                ) from e
            logger.debug(f"Config override from {env_var}")

        if "owner" not in values:
            raise ConfigurationError("TOKENGOV_OWNER is not set", config_key="owner")
        return cls(**values)


def _parse_formula(value: str) -> QuorumFormula:
    try:
        return QuorumFormula(value.strip().lower())
    except ValueError as e:
        raise ConfigurationError(
            f"Unknown quorum formula: {value}", config_key="quorum_formula", cause=e
        ) from e


def require_owner(
    config: GovernanceConfig,
    caller: str,
    operation: str,
    component: str = "admin",
    proposal_id: Optional[int] = None,
) -> None:
    """Raise Unauthorized unless ``caller`` is the configured owner."""
    if caller != config.owner:
        logger.warning(f"Rejected {operation} from non-owner {caller}")
        raise Unauthorized(
            f"Only the owner may {operation}",
            proposal_id=proposal_id,
            address=caller,
            context=ErrorContext(
                component=component,
                operation=operation,
                caller=caller,
                proposal_id=proposal_id,
            ),
        )
