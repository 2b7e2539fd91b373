"""
Pytest configuration and shared fixtures
"""

import asyncio
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional

import pytest

from sentichat.core.flows import ChatController
from sentichat.core.models import (ChatReply, Conversation, HistoryEntry,
                                   Message, Sender, Sentiment,
                                   SentimentVerdict)
from sentichat.core.session import SessionState
from sentichat.integrations.api.base import ChatBackend


class FakeBackend(ChatBackend):
    """Scriptable in-memory backend that records every call"""

    def __init__(self):
        super().__init__({})
        self.calls: List[tuple] = []
        self.replies: List = []
        self.reset_ids: List[str] = []
        self.history: List[HistoryEntry] = []
        self.conversations: Dict[str, Conversation] = {}
        self.verdict: Optional[SentimentVerdict] = None
        self.failures: Dict[str, Exception] = {}
        self.before_send: Optional[Callable[[str, Optional[str]], None]] = None

    def _record(self, name: str, *args):
        self.calls.append((name,) + args)
        if name in self.failures:
            raise self.failures[name]

    def calls_to(self, name: str) -> List[tuple]:
        return [call for call in self.calls if call[0] == name]

    def send_message(self, message, conversation_id):
        if self.before_send:
            self.before_send(message, conversation_id)
        self._record('send_message', message, conversation_id)
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply

    def analyze(self, conversation_id):
        self._record('analyze', conversation_id)
        return self.verdict

    def reset(self):
        self._record('reset')
        conversation_id = self.reset_ids.pop(0)
        self.history.insert(0, HistoryEntry(id=conversation_id))
        return conversation_id

    def list_conversations(self):
        self._record('list_conversations')
        return list(self.history)

    def get_conversation(self, conversation_id):
        self._record('get_conversation', conversation_id)
        return self.conversations[conversation_id]


@pytest.fixture
def loop():
    """Create event loop for async flows."""
    loop = asyncio.new_event_loop()
    yield loop
    loop.close()


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def session():
    return SessionState()


@pytest.fixture
def controller(backend, session):
    return ChatController(backend, session=session)


@pytest.fixture
def stored_conversation():
    """A stored conversation with mixed senders and sentiment tags"""
    return Conversation(
        id="c2",
        created_at=datetime(2024, 3, 1, 9, 30, tzinfo=timezone.utc),
        messages=[
            Message(Sender.USER, "The delivery was late", Sentiment.NEGATIVE),
            Message(Sender.BOT, "I'm sorry to hear that."),
            Message(Sender.USER, "But support fixed it", Sentiment.POSITIVE),
            Message(Sender.BOT, "Glad it worked out!"),
            Message(Sender.USER, "ok"),
        ],
    )


@pytest.fixture
def positive_reply():
    return ChatReply(
        conversation_id="c1",
        user_sentiment=Sentiment.POSITIVE,
        response="**Great!**",
    )
