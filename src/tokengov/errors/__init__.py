"""tokengov error handling.

This module exposes the exception hierarchy raised by the governance
components. Every exception derives from :class:`TokenGovError` and carries a
stable ``error_code`` that callers can match on.
"""

from .exceptions import (
    AlreadyResolved,
    AlreadyVoted,
    ConfigurationError,
    DeadlineNotReached,
    DeadlinePassed,
    EmptyDescription,
    EmptyVoterList,
    ErrorCategory,
    ErrorContext,
    ErrorSeverity,
    GovernanceError,
    IndexOutOfRange,
    InvalidQuorum,
    NotAuthorizedVoter,
    NotEligible,
    OracleUnavailable,
    ProposalNotFound,
    TokenGovError,
    Unauthorized,
    ValidationError,
)

__all__ = [
    # Base
    "TokenGovError",
    "ErrorSeverity",
    "ErrorCategory",
    "ErrorContext",
    "ValidationError",
    "ConfigurationError",
    "GovernanceError",
    # Governance rejections
    "Unauthorized",
    "ProposalNotFound",
    "NotEligible",
    "EmptyDescription",
    "EmptyVoterList",
    "NotAuthorizedVoter",
    "AlreadyVoted",
    "DeadlinePassed",
    "DeadlineNotReached",
    "AlreadyResolved",
    "InvalidQuorum",
    "IndexOutOfRange",
    # External collaborators
    "OracleUnavailable",
]
