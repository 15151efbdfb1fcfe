"""
Unit tests for admin controls.
"""

import logging

logger = logging.getLogger(__name__)
import threading
import pytest

from tokengov.governance.admin import AdminControls
from tokengov.governance.core import GovernanceConfig
from tokengov.governance.gate import TokenGate
from tokengov.governance.observability import EventType, GovernanceEvents
from tokengov.oracle.base import InMemoryBalanceOracle
from tokengov.errors.exceptions import IndexOutOfRange, InvalidQuorum, Unauthorized

OWNER = "0xowner"


class TestAdminControls:
    """Test AdminControls."""

    @pytest.fixture
    def admin(self):
        config = GovernanceConfig(owner=OWNER, quorum_percent=40)
        gate = TokenGate(config, InMemoryBalanceOracle(), [5, 6, 7])
        return AdminControls(config, gate, GovernanceEvents())

    def test_change_quorum(self, admin):
        assert admin.change_quorum(OWNER, 80) == 40
        assert admin.config.quorum_percent == 80

        changed = admin.events.audit_trail.get_events_by_type(EventType.QUORUM_CHANGED)
        assert changed[0].payload == {"old": 40, "new": 80}

    @pytest.mark.parametrize("value", [0, 100])
    def test_change_quorum_bounds(self, admin, value):
        admin.change_quorum(OWNER, value)
        assert admin.config.quorum_percent == value

    @pytest.mark.parametrize("value", [101, -5, 50.5])
    def test_invalid_quorum(self, admin, value):
        with pytest.raises(InvalidQuorum):
            admin.change_quorum(OWNER, value)
        assert admin.config.quorum_percent == 40
        assert admin.events.audit_trail.events == []

    def test_change_quorum_requires_owner(self, admin):
        with pytest.raises(Unauthorized):
            admin.change_quorum("0xmallory", 10)
        assert admin.config.quorum_percent == 40

    def test_owner_checked_before_value(self, admin):
        with pytest.raises(Unauthorized):
            admin.change_quorum("0xmallory", 500)

    def test_add_token_emits_event(self, admin):
        index = admin.add_token(OWNER, 9)

        assert index == 3
        assert admin.gate.tokens() == [5, 6, 7, 9]
        added = admin.events.audit_trail.get_events_by_type(EventType.TOKEN_ADDED)
        assert added[0].payload == {"token_id": 9, "index": 3}

    def test_remove_token_emits_event(self, admin):
        assert admin.remove_token(OWNER, 0) == (5, 2)

        assert admin.gate.tokens() == [7, 6]
        removed = admin.events.audit_trail.get_events_by_type(EventType.TOKEN_REMOVED)
        assert removed[0].payload == {"index": 0, "token_id": 5}

    def test_failed_removal_emits_nothing(self, admin):
        with pytest.raises(IndexOutOfRange):
            admin.remove_token(OWNER, 3)
        with pytest.raises(Unauthorized):
            admin.remove_token("0xmallory", 0)
        assert admin.events.audit_trail.events == []

    def test_token_events_follow_mutation_order(self, admin):
        paused = threading.Event()
        resume = threading.Event()

        def hold_first_add(event):
            if event.payload["token_id"] == 9:
                paused.set()
                resume.wait(5)

        admin.events.subscribe(hold_first_add, EventType.TOKEN_ADDED)

        first = threading.Thread(target=admin.add_token, args=(OWNER, 9))
        second = threading.Thread(target=admin.add_token, args=(OWNER, 10))
        first.start()
        assert paused.wait(5)
        second.start()
        second.join(0.05)

        # The second add waits until the first one's event is recorded.
        assert second.is_alive()

        resume.set()
        first.join(5)
        second.join(5)

        added = admin.events.audit_trail.get_events_by_type(EventType.TOKEN_ADDED)
        assert [e.payload for e in added] == [
            {"token_id": 9, "index": 3},
            {"token_id": 10, "index": 4},
        ]
        assert admin.gate.tokens() == [5, 6, 7, 9, 10]

    def test_unauthorized_carries_context(self, admin):
        with pytest.raises(Unauthorized) as exc_info:
            admin.change_quorum("0xmallory", 10)

        context = exc_info.value.to_dict()["context"]
        assert context["component"] == "admin"
        assert context["operation"] == "change the quorum"
        assert context["caller"] == "0xmallory"

        with pytest.raises(Unauthorized) as exc_info:
            admin.add_token("0xmallory", 1)
        assert exc_info.value.context.component == "gate"
