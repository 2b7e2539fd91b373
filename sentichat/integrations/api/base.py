"""
Base backend abstraction for the sentiment chat service.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Any

from sentichat.core.models import (
    ChatReply,
    Conversation,
    HistoryEntry,
    SentimentVerdict,
)


class ChatBackend(ABC):
    """
    Base class for chat service backends.

    The backend is the sole authority on conversation identifiers,
    persistence and sentiment computation. The client only consumes it.
    """

    def __init__(self, config: Dict[str, Any]):
        """
        Initialize backend with configuration.

        Args:
            config: Backend-specific configuration (base URL, timeout, etc.)
        """
        self.config = config

    @abstractmethod
    def send_message(self, message: str, conversation_id: Optional[str]) -> ChatReply:
        """
        Send a user turn and get the bot reply.

        Args:
            message: User text (already trimmed)
            conversation_id: Active conversation, or None to start one

        Returns:
            ChatReply with the server-assigned conversation id,
            the user turn's sentiment and the Markdown response

        Raises:
            BackendError: On transport failures or malformed responses
        """
        pass

    @abstractmethod
    def analyze(self, conversation_id: str) -> SentimentVerdict:
        """
        Get the aggregate sentiment verdict for a whole conversation.

        Raises:
            BackendError: On transport failures or malformed responses
        """
        pass

    @abstractmethod
    def reset(self) -> str:
        """
        Start a fresh conversation.

        Returns:
            The new conversation identifier

        Raises:
            BackendError: On transport failures or malformed responses
        """
        pass

    @abstractmethod
    def list_conversations(self) -> List[HistoryEntry]:
        """
        List stored conversations in server order.

        Raises:
            BackendError: On transport failures or malformed responses
        """
        pass

    @abstractmethod
    def get_conversation(self, conversation_id: str) -> Conversation:
        """
        Fetch a stored conversation with its messages in stored order.

        Raises:
            BackendError: On transport failures or malformed responses
        """
        pass

    def is_available(self) -> bool:
        """
        Check if the backend is reachable.

        Default implementation: assume it is.
        """
        return True

    @property
    def name(self) -> str:
        """Backend name (e.g., 'http')"""
        return self.__class__.__name__.replace('ChatBackend', '').lower()


# ==================== Exceptions ====================

class BackendError(Exception):
    """Base exception for backend errors"""
    pass


class TransportError(BackendError):
    """Network failure, timeout or non-2xx response"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ConversationNotFoundError(TransportError):
    """Requested conversation does not exist"""
    pass


class MalformedResponseError(BackendError):
    """Response body could not be parsed into the expected shape"""
    pass
