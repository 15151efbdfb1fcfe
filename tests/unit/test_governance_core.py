"""
Unit tests for governance core types.

This module tests the proposal record, the governance configuration and its
environment overrides, and quorum validation.
"""

import logging

logger = logging.getLogger(__name__)
import pytest

from tokengov.governance.core import (
    DEFAULT_VOTING_WINDOW,
    GovernanceConfig,
    Proposal,
    ProposalState,
    QuorumFormula,
    require_owner,
    validate_quorum,
)
from tokengov.errors.exceptions import (
    ConfigurationError,
    InvalidQuorum,
    Unauthorized,
    ValidationError,
)


def make_proposal(**overrides):
    fields = dict(
        id=1,
        proposer="0xproposer",
        description="Raise the treasury cap",
        created_at=100,
        deadline=200,
        eligible_voters=["0xa", "0xb", "0xc"],
    )
    fields.update(overrides)
    return Proposal(**fields)


class TestProposal:
    """Test Proposal class."""

    def test_proposal_creation(self):
        """Test creating a proposal."""
        proposal = make_proposal()

        assert proposal.id == 1
        assert proposal.max_votes == 3
        assert proposal.votes_up == 0
        assert proposal.votes_down == 0
        assert proposal.voted == set()
        assert proposal.resolved is False
        assert proposal.passed is False

    def test_max_votes_counts_duplicate_voters(self):
        proposal = make_proposal(eligible_voters=["0xa", "0xa", "0xb"])
        assert proposal.max_votes == 3

    def test_proposal_id_starts_at_one(self):
        with pytest.raises(ValidationError):
            make_proposal(id=0)

    def test_deadline_before_creation_rejected(self):
        with pytest.raises(ValidationError):
            make_proposal(created_at=300, deadline=200)

    def test_voter_snapshot_is_copied(self):
        voters = ["0xa", "0xb"]
        proposal = make_proposal(eligible_voters=voters)
        voters.append("0xc")

        assert proposal.max_votes == 2
        assert not proposal.is_authorized("0xc")

    def test_record_vote(self):
        proposal = make_proposal()
        proposal.record_vote("0xa", True)
        proposal.record_vote("0xb", False)

        assert proposal.votes_up == 1
        assert proposal.votes_down == 1
        assert proposal.total_votes == 2
        assert proposal.has_voted("0xa")
        assert proposal.has_voted("0xb")
        assert not proposal.has_voted("0xc")

    def test_state_transitions(self):
        proposal = make_proposal()

        assert proposal.state_at(150) is ProposalState.OPEN
        assert proposal.state_at(200) is ProposalState.OPEN
        assert proposal.state_at(201) is ProposalState.CLOSED

        proposal.resolved = True
        assert proposal.state_at(150) is ProposalState.RESOLVED
        assert proposal.state_at(500) is ProposalState.RESOLVED

    def test_to_dict(self):
        proposal = make_proposal()
        proposal.record_vote("0xc", True)
        proposal.record_vote("0xa", True)

        data = proposal.to_dict()

        assert data["id"] == 1
        assert data["max_votes"] == 3
        assert data["votes_up"] == 2
        assert data["voted"] == ["0xa", "0xc"]
        assert data["resolved"] is False


class TestGovernanceConfig:
    """Test GovernanceConfig class."""

    def test_defaults(self):
        config = GovernanceConfig(owner="0xowner")

        assert config.quorum_percent == 50
        assert config.next_proposal_id == 1
        assert config.voting_window == DEFAULT_VOTING_WINDOW == 43200
        assert config.quorum_formula is QuorumFormula.CORRECTED
        assert config.oracle_timeout is None

    def test_owner_required(self):
        with pytest.raises(ConfigurationError):
            GovernanceConfig(owner="")

    @pytest.mark.parametrize("quorum", [-1, 101, 250])
    def test_quorum_out_of_range(self, quorum):
        with pytest.raises(InvalidQuorum):
            GovernanceConfig(owner="0xowner", quorum_percent=quorum)

    @pytest.mark.parametrize("quorum", [0, 1, 99, 100])
    def test_quorum_bounds_inclusive(self, quorum):
        assert GovernanceConfig(owner="0xowner", quorum_percent=quorum).quorum_percent == quorum

    def test_voting_window_must_be_positive(self):
        with pytest.raises(ConfigurationError):
            GovernanceConfig(owner="0xowner", voting_window=0)

    @pytest.mark.parametrize("key", ["voting_window", "next_proposal_id"])
    @pytest.mark.parametrize("value", ["10", 10.5, True, None])
    def test_integer_fields_type_checked(self, key, value):
        with pytest.raises(ConfigurationError) as exc_info:
            GovernanceConfig.from_dict({"owner": "0xowner", key: value})
        assert exc_info.value.config_key == key

    @pytest.mark.parametrize("value", ["1", True])
    def test_oracle_timeout_type_checked(self, value):
        with pytest.raises(ConfigurationError):
            GovernanceConfig(owner="0xowner", oracle_timeout=value)

    def test_oracle_timeout_must_be_positive(self):
        with pytest.raises(ConfigurationError):
            GovernanceConfig(owner="0xowner", oracle_timeout=0)

    def test_formula_from_string(self):
        config = GovernanceConfig(owner="0xowner", quorum_formula="Legacy")
        assert config.quorum_formula is QuorumFormula.LEGACY

    def test_unknown_formula(self):
        with pytest.raises(ConfigurationError):
            GovernanceConfig(owner="0xowner", quorum_formula="median")

    def test_dict_conversion(self):
        config = GovernanceConfig(
            owner="0xowner",
            quorum_percent=60,
            voting_window=10,
            quorum_formula=QuorumFormula.LEGACY,
        )

        data = config.to_dict()
        assert data["quorum_formula"] == "legacy"
        assert GovernanceConfig.from_dict(data) == config

    def test_from_dict_rejects_unknown_keys(self):
        with pytest.raises(ConfigurationError) as exc_info:
            GovernanceConfig.from_dict({"owner": "0xowner", "admins": ["0xb"]})
        assert exc_info.value.config_key == "admins"

    def test_from_env(self):
        environ = {
            "TOKENGOV_OWNER": "0xenv",
            "TOKENGOV_QUORUM_PERCENT": "75",
            "TOKENGOV_VOTING_WINDOW": "3600",
            "TOKENGOV_QUORUM_FORMULA": "legacy",
            "TOKENGOV_ORACLE_TIMEOUT": "2.5",
        }

        config = GovernanceConfig.from_env(environ)

        assert config.owner == "0xenv"
        assert config.quorum_percent == 75
        assert config.voting_window == 3600
        assert config.quorum_formula is QuorumFormula.LEGACY
        assert config.oracle_timeout == 2.5

    def test_from_env_defaults(self):
        config = GovernanceConfig.from_env({}, owner="0xdefault", quorum_percent=10)
        assert config.owner == "0xdefault"
        assert config.quorum_percent == 10

    def test_from_env_overrides_defaults(self):
        config = GovernanceConfig.from_env(
            {"TOKENGOV_QUORUM_PERCENT": "30"}, owner="0xdefault", quorum_percent=10
        )
        assert config.quorum_percent == 30

    def test_from_env_invalid_value(self):
        with pytest.raises(ConfigurationError) as exc_info:
            GovernanceConfig.from_env(
                {"TOKENGOV_OWNER": "0xenv", "TOKENGOV_QUORUM_PERCENT": "half"}
            )
        assert exc_info.value.config_key == "TOKENGOV_QUORUM_PERCENT"

    def test_from_env_requires_owner(self):
        with pytest.raises(ConfigurationError):
            GovernanceConfig.from_env({})


class TestHelpers:
    """Test quorum validation and owner checks."""

    @pytest.mark.parametrize("value", [1.5, "50", None, True])
    def test_validate_quorum_rejects_non_integers(self, value):
        with pytest.raises(InvalidQuorum):
            validate_quorum(value)

    def test_require_owner(self):
        config = GovernanceConfig(owner="0xowner")
        require_owner(config, "0xowner", "test")

        with pytest.raises(Unauthorized) as exc_info:
            require_owner(config, "0xmallory", "test")
        assert exc_info.value.address == "0xmallory"
        assert exc_info.value.error_code == "UNAUTHORIZED"
        assert exc_info.value.context.operation == "test"
        assert exc_info.value.context.caller == "0xmallory"
