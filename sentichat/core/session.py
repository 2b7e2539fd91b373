"""
Session state: the single source of truth for which conversation is active
"""

import logging
from typing import Optional

logger = logging.getLogger(__name__)


class SessionState:
    """
    Holds the active conversation identifier and its transition rules.

    One instance is shared by reference between every flow of a controller.
    None means no conversation has started yet.
    """

    def __init__(self, active_conversation_id: Optional[str] = None):
        self._active_conversation_id = active_conversation_id

    @property
    def active_conversation_id(self) -> Optional[str]:
        return self._active_conversation_id

    @property
    def has_active(self) -> bool:
        return self._active_conversation_id is not None

    def is_active(self, conversation_id: Optional[str]) -> bool:
        return conversation_id is not None and conversation_id == self._active_conversation_id

    def adopt_created(self, conversation_id: Optional[str]) -> bool:
        """Adopt an identifier the server assigned on send.

        Returns:
            True if the active conversation changed
        """
        if not conversation_id or conversation_id == self._active_conversation_id:
            return False
        logger.debug(f"Adopting created conversation {conversation_id}")
        self._active_conversation_id = conversation_id
        return True

    def reset_to(self, conversation_id: str) -> None:
        """Adopt a fresh identifier unconditionally (reset / new conversation)"""
        logger.debug(f"Resetting to conversation {conversation_id}")
        self._active_conversation_id = conversation_id

    def select(self, conversation_id: str) -> bool:
        """Switch to a conversation picked from the history list.

        Selecting the already-active conversation is a no-op.

        Returns:
            True if the active conversation changed
        """
        if conversation_id == self._active_conversation_id:
            return False
        logger.debug(f"Selecting conversation {conversation_id}")
        self._active_conversation_id = conversation_id
        return True

    def __repr__(self) -> str:
        return f"SessionState(active_conversation_id={self._active_conversation_id!r})"
