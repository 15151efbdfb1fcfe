"""
Token-gated governance demonstration.

This script walks through the governance engine end to end: token-gated
proposal creation, voting, the deadline, quorum resolution, admin changes
to the token set and quorum, and the audit trail left behind.
"""

import sys

from tokengov import GovernanceConfig, GovernanceEngine, InMemoryBalanceOracle, ManualClock
from tokengov.errors import AlreadyVoted, DeadlineNotReached, NotEligible
from tokengov.governance import EventType
from tokengov.logging import LogConfig, LogLevel, get_logger, setup_logging

logger = get_logger("demo")

OWNER = "0xdao_owner"
ALICE = "0xalice"
BOB = "0xbob"
CAROL = "0xcarol"
DAVE = "0xdave"

MEMBERSHIP = 1
FOUNDERS = 7


def print_section(title: str):
    """Print a section header."""
    logger.info(f"\n{'='*60}")
    logger.info(f"🎯 {title}")
    logger.info('='*60)


def build_engine():
    """Create an engine backed by an in-memory oracle and a manual clock."""
    print_section("Governance Configuration")

    oracle = InMemoryBalanceOracle()
    oracle.set_balance(ALICE, MEMBERSHIP, 1)
    oracle.set_balance(BOB, FOUNDERS, 3)

    clock = ManualClock(1_700_000_000)
    config = GovernanceConfig(owner=OWNER, quorum_percent=50, voting_window=3600)
    engine = GovernanceEngine(config, oracle, clock, token_ids=[MEMBERSHIP, FOUNDERS])

    logger.info(f"   Owner: {engine.owner}")
    logger.info(f"   Quorum: {engine.quorum_percent}%")
    logger.info(f"   Voting window: {config.voting_window}s")
    logger.info(f"   Eligible tokens: {engine.eligible_tokens()}")
    return engine, oracle, clock


def demo_proposal_lifecycle(engine, clock):
    """Demonstrate create, vote and resolve."""
    print_section("Proposal Lifecycle")

    try:
        engine.create_proposal(CAROL, "Carol holds no token", [ALICE])
    except NotEligible as e:
        logger.info(f"   ❌ Rejected: {e.message}")

    voters = [ALICE, BOB, CAROL, DAVE]
    proposal_id = engine.create_proposal(ALICE, "Fund the community garden", voters)
    logger.info(f"   ✅ Proposal {proposal_id} created, state={engine.state_of(proposal_id).value}")

    engine.vote(ALICE, proposal_id, True)
    engine.vote(BOB, proposal_id, True)
    engine.vote(CAROL, proposal_id, False)
    try:
        engine.vote(ALICE, proposal_id, False)
    except AlreadyVoted as e:
        logger.info(f"   ❌ Rejected: {e.message}")

    try:
        engine.resolve(OWNER, proposal_id)
    except DeadlineNotReached as e:
        logger.info(f"   ⏳ {e.message}")

    clock.advance(engine.config.voting_window + 1)
    passed = engine.resolve(OWNER, proposal_id)
    proposal = engine.get_proposal(proposal_id)
    logger.info(
        f"   🗳️  {proposal.votes_up} up / {proposal.votes_down} down "
        f"of {proposal.max_votes}: {'passed' if passed else 'failed'}"
    )
    return proposal_id


def demo_admin_controls(engine, oracle, clock):
    """Demonstrate token set rotation and quorum changes."""
    print_section("Admin Controls")

    oracle.set_balance(DAVE, 42, 1)
    index = engine.add_token(OWNER, 42)
    logger.info(f"   ➕ Token 42 added at index {index}: {engine.eligible_tokens()}")

    removed, size = engine.remove_token(OWNER, engine.eligible_tokens().index(MEMBERSHIP))
    logger.info(f"   ➖ Token {removed} removed, {size} left: {engine.eligible_tokens()}")
    logger.info(f"   Alice eligible: {engine.is_eligible(ALICE)}, Dave eligible: {engine.is_eligible(DAVE)}")

    proposal_id = engine.create_proposal(DAVE, "Extend garden hours", [ALICE, BOB, CAROL, DAVE])
    engine.vote(DAVE, proposal_id, True)

    old = engine.change_quorum(OWNER, 25)
    logger.info(f"   Quorum changed {old}% -> {engine.quorum_percent}%")

    clock.advance(engine.config.voting_window + 1)
    passed = engine.resolve(OWNER, proposal_id)
    logger.info(f"   🗳️  Proposal {proposal_id} with 25% turnout: {'passed' if passed else 'failed'}")


def demo_audit_trail(engine):
    """Demonstrate the event stream and audit trail."""
    print_section("Audit Trail")

    summary = engine.events.audit_trail.summary()
    logger.info(f"   Events recorded: {summary['total_events']}")
    for event_type, count in summary["event_counts"].items():
        logger.info(f"   - {event_type}: {count}")
    logger.info(f"   Integrity verified: {summary['integrity_verified']}")

    for event in engine.events.audit_trail.get_events_by_type(EventType.PROPOSAL_RESOLVED):
        logger.info(f"   Resolved: {event.payload}")


def main():
    """Main demonstration function."""
    setup_logging(LogConfig(level=LogLevel.INFO, format_type="text"))
    logger.info("🎯 Token-Gated Governance Demonstration")

    engine, oracle, clock = build_engine()
    try:
        demo_proposal_lifecycle(engine, clock)
        demo_admin_controls(engine, oracle, clock)
        demo_audit_trail(engine)
    except Exception as e:
        logger.error(f"\n❌ Demonstration failed: {e}", exc_info=True)
        return 1
    finally:
        engine.close()

    print_section("Demonstration Complete")
    return 0


if __name__ == "__main__":
    sys.exit(main())
