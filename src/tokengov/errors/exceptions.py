"""Exception hierarchy for tokengov.

Every rejected governance call raises one of the exceptions below. Errors are
scoped to the single failed call: none of them leave partial state behind and
none are fatal to the process.
"""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class ErrorSeverity(Enum):
    """Error severity levels."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorCategory(Enum):
    """Error categories."""

    VALIDATION = "validation"
    AUTHORIZATION = "authorization"
    GOVERNANCE = "governance"
    CONFIGURATION = "configuration"
    NETWORK = "network"
    SYSTEM = "system"


@dataclass
class ErrorContext:
    """Context information for an error."""

    timestamp: float = field(default_factory=time.time)
    component: Optional[str] = None
    operation: Optional[str] = None
    caller: Optional[str] = None
    proposal_id: Optional[int] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert context to dictionary."""
        return {
            "timestamp": self.timestamp,
            "component": self.component,
            "operation": self.operation,
            "caller": self.caller,
            "proposal_id": self.proposal_id,
            "metadata": self.metadata,
        }


class TokenGovError(Exception):
    """Base exception for all tokengov errors."""

    default_code: Optional[str] = None

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        category: ErrorCategory = ErrorCategory.SYSTEM,
        context: Optional[ErrorContext] = None,
        cause: Optional[Exception] = None,
        retryable: bool = False,
        metadata: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.default_code
        self.severity = severity
        self.category = category
        self.context = context or ErrorContext()
        self.cause = cause
        self.retryable = retryable
        self.metadata = metadata or {}
        self.timestamp = time.time()

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary."""
        return {
            "type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "severity": self.severity.value,
            "category": self.category.value,
            "context": self.context.to_dict(),
            "cause": str(self.cause) if self.cause else None,
            "retryable": self.retryable,
            "metadata": self.metadata,
            "timestamp": self.timestamp,
        }

    def __str__(self) -> str:
        """String representation of the error."""
        parts = [f"{self.__class__.__name__}: {self.message}"]

        if self.error_code:
            parts.append(f"Code: {self.error_code}")

        if self.severity != ErrorSeverity.MEDIUM:
            parts.append(f"Severity: {self.severity.value}")

        if self.retryable:
            parts.append("Retryable: Yes")

        return " | ".join(parts)


class ValidationError(TokenGovError):
    """Validation error."""

    default_code = "VALIDATION_FAILED"

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        expected: Optional[Any] = None,
        **kwargs,
    ):
        kwargs.setdefault("category", ErrorCategory.VALIDATION)
        super().__init__(message, **kwargs)
        self.field = field
        self.value = value
        self.expected = expected

    def to_dict(self) -> Dict[str, Any]:
        """Convert validation error to dictionary."""
        data = super().to_dict()
        data.update(
            {
                "field": self.field,
                "value": str(self.value) if self.value is not None else None,
                "expected": str(self.expected) if self.expected is not None else None,
            }
        )
        return data


class ConfigurationError(TokenGovError):
    """Configuration error."""

    default_code = "INVALID_CONFIGURATION"

    def __init__(self, message: str, config_key: Optional[str] = None, **kwargs):
        super().__init__(
            message,
            category=ErrorCategory.CONFIGURATION,
            severity=ErrorSeverity.HIGH,
            **kwargs,
        )
        self.config_key = config_key

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["config_key"] = self.config_key
        return data


class GovernanceError(TokenGovError):
    """A governance call was rejected by the proposal state machine."""

    default_code = "GOVERNANCE_REJECTED"

    def __init__(
        self,
        message: str,
        proposal_id: Optional[int] = None,
        address: Optional[str] = None,
        **kwargs,
    ):
        kwargs.setdefault("category", ErrorCategory.GOVERNANCE)
        super().__init__(message, **kwargs)
        self.proposal_id = proposal_id
        self.address = address

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({"proposal_id": self.proposal_id, "address": self.address})
        return data


class Unauthorized(GovernanceError):
    """Caller is not the governance owner."""

    default_code = "UNAUTHORIZED"

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault("category", ErrorCategory.AUTHORIZATION)
        super().__init__(message, **kwargs)


class NotEligible(GovernanceError):
    """Caller holds none of the eligible membership tokens."""

    default_code = "NOT_ELIGIBLE"

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault("category", ErrorCategory.AUTHORIZATION)
        super().__init__(message, **kwargs)


class NotAuthorizedVoter(GovernanceError):
    """Caller is not in the proposal's voter snapshot."""

    default_code = "NOT_AUTHORIZED_VOTER"

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault("category", ErrorCategory.AUTHORIZATION)
        super().__init__(message, **kwargs)


class ProposalNotFound(GovernanceError):
    default_code = "PROPOSAL_NOT_FOUND"


class EmptyVoterList(GovernanceError, ValidationError):
    """A proposal was submitted without any eligible voters."""

    default_code = "EMPTY_VOTER_LIST"

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault("category", ErrorCategory.VALIDATION)
        super().__init__(message, **kwargs)
        self.field = "eligible_voters"
        self.value = None
        self.expected = "at least one address"


class AlreadyVoted(GovernanceError):
    default_code = "ALREADY_VOTED"


class DeadlinePassed(GovernanceError):
    default_code = "DEADLINE_PASSED"


class DeadlineNotReached(GovernanceError):
    default_code = "DEADLINE_NOT_REACHED"


class AlreadyResolved(GovernanceError):
    default_code = "ALREADY_RESOLVED"


class EmptyDescription(ValidationError):
    default_code = "EMPTY_DESCRIPTION"


class InvalidQuorum(ValidationError):
    """Quorum percentage outside 0..100."""

    default_code = "INVALID_QUORUM"


class IndexOutOfRange(ValidationError):
    """Token set index does not address an existing entry."""

    default_code = "INDEX_OUT_OF_RANGE"


class OracleUnavailable(TokenGovError):
    """The balance oracle failed or did not answer in time."""

    default_code = "ORACLE_UNAVAILABLE"

    def __init__(
        self,
        message: str,
        holder: Optional[str] = None,
        token_id: Optional[int] = None,
        **kwargs,
    ):
        kwargs.setdefault("category", ErrorCategory.NETWORK)
        kwargs.setdefault("severity", ErrorSeverity.HIGH)
        kwargs.setdefault("retryable", True)
        super().__init__(message, **kwargs)
        self.holder = holder
        self.token_id = token_id

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({"holder": self.holder, "token_id": self.token_id})
        return data
