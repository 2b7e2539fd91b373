"""
SentiChat - chat client that tags every exchange with sentiment
"""

__version__ = "0.3.0"
__author__ = "SentiChat Contributors"

from .core.models import (
    Sentiment,
    Sender,
    Message,
    Conversation,
    HistoryEntry,
    ChatReply,
    SentimentVerdict,
)
from .core.session import SessionState
from .core.views import TranscriptView, HistoryListView, SentimentPanel
from .core.flows import ChatController, FlowResult, FlowStatus
from .integrations.api import (
    ChatBackend,
    HTTPChatBackend,
    BackendError,
    TransportError,
    ConversationNotFoundError,
    MalformedResponseError,
)

__all__ = [
    # Core models
    'Sentiment',
    'Sender',
    'Message',
    'Conversation',
    'HistoryEntry',
    'ChatReply',
    'SentimentVerdict',
    # Session and views
    'SessionState',
    'TranscriptView',
    'HistoryListView',
    'SentimentPanel',
    # Controller
    'ChatController',
    'FlowResult',
    'FlowStatus',
    # Backends
    'ChatBackend',
    'HTTPChatBackend',
    'BackendError',
    'TransportError',
    'ConversationNotFoundError',
    'MalformedResponseError',
]
