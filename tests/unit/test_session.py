"""
Tests for session state transitions
"""

from sentichat.core.session import SessionState


class TestSessionState:
    """Test active conversation transitions"""

    def test_starts_without_conversation(self):
        session = SessionState()

        assert session.active_conversation_id is None
        assert not session.has_active
        assert not session.is_active(None)

    def test_adopt_created(self):
        session = SessionState()

        assert session.adopt_created("c1") is True
        assert session.active_conversation_id == "c1"
        assert session.is_active("c1")

    def test_adopt_created_same_id_is_noop(self):
        session = SessionState("c1")

        assert session.adopt_created("c1") is False
        assert session.active_conversation_id == "c1"

    def test_adopt_created_ignores_empty_id(self):
        session = SessionState("c1")

        assert session.adopt_created(None) is False
        assert session.adopt_created("") is False
        assert session.active_conversation_id == "c1"

    def test_reset_to_is_unconditional(self):
        session = SessionState("c1")

        session.reset_to("c2")
        assert session.active_conversation_id == "c2"

        session.reset_to("c2")
        assert session.active_conversation_id == "c2"

    def test_select_different(self):
        session = SessionState("c1")

        assert session.select("c2") is True
        assert session.active_conversation_id == "c2"

    def test_select_active_is_noop(self):
        session = SessionState("c1")

        assert session.select("c1") is False
        assert session.active_conversation_id == "c1"

    def test_repr(self):
        assert repr(SessionState("c1")) == "SessionState(active_conversation_id='c1')"
