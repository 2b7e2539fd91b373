"""
Backend abstractions for the sentiment chat service.
"""

from sentichat.integrations.api.base import (
    ChatBackend,
    BackendError,
    TransportError,
    ConversationNotFoundError,
    MalformedResponseError,
)
from sentichat.integrations.api.http import HTTPChatBackend

__all__ = [
    'ChatBackend',
    'HTTPChatBackend',
    'BackendError',
    'TransportError',
    'ConversationNotFoundError',
    'MalformedResponseError',
]
