"""
Asynchronous user-action flows and the controller that ties them together.

Each flow suspends only itself while a backend call is in flight: blocking
HTTP calls run in a worker thread, while session and view mutations stay on
the event loop thread. Flows never raise backend errors; they log them and
report the outcome through a FlowResult.
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

from sentichat.core.models import Message, Sender, Sentiment
from sentichat.core.session import SessionState
from sentichat.core.views import HistoryListView, SentimentPanel, TranscriptView
from sentichat.integrations.api.base import BackendError, ChatBackend

logger = logging.getLogger(__name__)

APOLOGY = "Sorry, something went wrong."
GREETING = "Hello! I'm ready to chat. I'll analyze our conversation sentiment when you're done."


class FlowStatus(Enum):
    """How a flow ended"""
    SUCCESS = "success"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass
class FlowResult:
    """Completion signal returned by every flow"""
    status: FlowStatus
    value: Any = None
    error: Optional[Exception] = None
    reason: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == FlowStatus.SUCCESS

    @property
    def skipped(self) -> bool:
        return self.status == FlowStatus.SKIPPED

    @property
    def failed(self) -> bool:
        return self.status == FlowStatus.FAILED

    @classmethod
    def success(cls, value: Any = None) -> 'FlowResult':
        return cls(FlowStatus.SUCCESS, value=value)

    @classmethod
    def failure(cls, error: Exception) -> 'FlowResult':
        return cls(FlowStatus.FAILED, error=error)

    @classmethod
    def skip(cls, reason: str) -> 'FlowResult':
        return cls(FlowStatus.SKIPPED, reason=reason)


async def run_blocking(func: Callable[..., Any], *args: Any) -> Any:
    """Run a blocking backend call without stalling the event loop"""
    return await asyncio.to_thread(func, *args)


class HistorySynchronizer:
    """Keeps the history list in step with the server and the active conversation"""

    def __init__(self, backend: ChatBackend, session: SessionState,
                 history: HistoryListView, transcript: TranscriptView,
                 panel: SentimentPanel):
        self.backend = backend
        self.session = session
        self.history = history
        self.transcript = transcript
        self.panel = panel

    async def refresh(self) -> FlowResult:
        """Rebuild the history list from the server"""
        try:
            entries = await run_blocking(self.backend.list_conversations)
        except BackendError as e:
            logger.error(f"Error loading history: {e}")
            return FlowResult.failure(e)

        # Highlight follows whatever is active when the list lands
        self.history.replace(entries, self.session.active_conversation_id)
        return FlowResult.success(entries)

    async def select_entry(self, conversation_id: str) -> FlowResult:
        """Switch the transcript to another stored conversation"""
        if self.session.is_active(conversation_id):
            return FlowResult.skip("conversation already active")

        try:
            conversation = await run_blocking(self.backend.get_conversation, conversation_id)
        except BackendError as e:
            logger.error(f"Error loading conversation {conversation_id}: {e}")
            return FlowResult.failure(e)

        # Another switch to the same conversation may have landed first
        if not self.session.select(conversation_id):
            return FlowResult.skip("conversation already active")

        self.panel.hide()
        self.transcript.replace(conversation.messages)

        await self.refresh()
        return FlowResult.success(conversation)


class MessageDispatcher:
    """Sends user turns and reconciles the optimistic transcript with the reply"""

    def __init__(self, backend: ChatBackend, session: SessionState,
                 transcript: TranscriptView, history: HistorySynchronizer):
        self.backend = backend
        self.session = session
        self.transcript = transcript
        self.history = history

    async def send(self, text: Optional[str]) -> FlowResult:
        """
        Send a user turn.

        The user turn is on screen before this coroutine first suspends.
        Empty input is ignored.

        Args:
            text: Raw input text

        Returns:
            FlowResult whose value is the ChatReply on success
        """
        text = (text or "").strip()
        if not text:
            return FlowResult.skip("empty message")

        self.transcript.append_user(text)

        try:
            reply = await run_blocking(
                self.backend.send_message, text, self.session.active_conversation_id
            )
        except BackendError as e:
            logger.error(f"Error sending message: {e}")
            self.transcript.append_bot(APOLOGY)
            return FlowResult.failure(e)

        if self.session.adopt_created(reply.conversation_id):
            await self.history.refresh()

        self.attach_sentiment(reply.user_sentiment)
        self.transcript.append_bot(reply.response)
        return FlowResult.success(reply)

    def attach_sentiment(self, sentiment: Optional[Sentiment]) -> bool:
        """Tag the latest user turn; repeated calls leave an existing tag alone"""
        return self.transcript.attach_badge(sentiment)


class SentimentSummary:
    """On-demand aggregate verdict for the active conversation"""

    def __init__(self, backend: ChatBackend, session: SessionState,
                 panel: SentimentPanel, transcript: TranscriptView):
        self.backend = backend
        self.session = session
        self.panel = panel
        self.transcript = transcript

    async def analyze(self) -> FlowResult:
        conversation_id = self.session.active_conversation_id
        if conversation_id is None:
            return FlowResult.skip("no active conversation")

        try:
            verdict = await run_blocking(self.backend.analyze, conversation_id)
        except BackendError as e:
            logger.error(f"Error analyzing sentiment: {e}")
            return FlowResult.failure(e)

        self.panel.show(verdict)
        self.transcript.pin_to_bottom()
        return FlowResult.success(verdict)


class ChatController:
    """
    Session controller for the chat client.

    Owns one SessionState and the three views, and hands the same session
    to every flow so they all agree on which conversation is active.
    """

    def __init__(self, backend: ChatBackend,
                 session: Optional[SessionState] = None,
                 transcript: Optional[TranscriptView] = None,
                 history: Optional[HistoryListView] = None,
                 panel: Optional[SentimentPanel] = None):
        self.backend = backend
        self.session = session if session is not None else SessionState()
        self.transcript = transcript if transcript is not None else TranscriptView()
        self.history = history if history is not None else HistoryListView()
        self.panel = panel if panel is not None else SentimentPanel()

        self.history_sync = HistorySynchronizer(
            backend, self.session, self.history, self.transcript, self.panel
        )
        self.dispatcher = MessageDispatcher(
            backend, self.session, self.transcript, self.history_sync
        )
        self.summary = SentimentSummary(backend, self.session, self.panel, self.transcript)

    async def start(self) -> FlowResult:
        """Initial load: populate the history list"""
        return await self.history_sync.refresh()

    async def send(self, text: Optional[str]) -> FlowResult:
        return await self.dispatcher.send(text)

    async def analyze(self) -> FlowResult:
        return await self.summary.analyze()

    async def select(self, conversation_id: str) -> FlowResult:
        return await self.history_sync.select_entry(conversation_id)

    async def refresh_history(self) -> FlowResult:
        return await self.history_sync.refresh()

    async def reset(self) -> FlowResult:
        """Start a fresh conversation and discard what is on screen"""
        try:
            conversation_id = await run_blocking(self.backend.reset)
        except BackendError as e:
            logger.error(f"Error resetting conversation: {e}")
            return FlowResult.failure(e)

        self.session.reset_to(conversation_id)
        self.transcript.replace([Message(sender=Sender.BOT, text=GREETING)])
        self.panel.hide()

        await self.history_sync.refresh()
        return FlowResult.success(conversation_id)

    new_conversation = reset

    @property
    def active_conversation_id(self) -> Optional[str]:
        return self.session.active_conversation_id
