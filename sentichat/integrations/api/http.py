"""
HTTP backend for the sentiment chat service.
"""

import logging
from typing import Any, Callable, Dict, List, Optional
from urllib.parse import quote

import requests

from sentichat.core.models import (
    ChatReply,
    Conversation,
    HistoryEntry,
    Message,
    SentimentVerdict,
)
from sentichat.integrations.api.base import (
    BackendError,
    ChatBackend,
    ConversationNotFoundError,
    MalformedResponseError,
    TransportError,
)

logger = logging.getLogger(__name__)


class HTTPChatBackend(ChatBackend):
    """
    JSON-over-HTTP backend.

    Endpoints:
        POST /api/chat          send a user turn
        GET  /api/analyze       aggregate sentiment for a conversation
        POST /api/reset         start a new conversation
        GET  /api/history       list conversations
        GET  /api/history/<id>  messages of one conversation
    """

    def __init__(self, config: Dict[str, Any]):
        """
        Initialize HTTP backend.

        Args:
            config: Configuration dict with keys:
                - base_url: Server base URL (default: http://localhost:5000)
                - timeout: Request timeout in seconds (default: 30)
        """
        super().__init__(config)
        self.base_url = config.get("base_url", "http://localhost:5000").rstrip("/")
        self.timeout = config.get("timeout", 30)

    def _get_headers(self) -> Dict[str, str]:
        return {
            "Accept": "application/json",
            "Content-Type": "application/json",
        }

    def _handle_error_response(self, response: requests.Response) -> None:
        """Raise the matching TransportError for a non-2xx response."""
        try:
            error_data = response.json()
            error_msg = error_data.get("error", response.text) if isinstance(error_data, dict) else response.text
        except ValueError:
            error_msg = response.text

        if response.status_code == 404:
            raise ConversationNotFoundError(f"Not found: {error_msg}", status_code=404)
        raise TransportError(
            f"Server error ({response.status_code}): {error_msg}",
            status_code=response.status_code,
        )

    def _request(self, method: str, path: str, **kwargs) -> Any:
        """Perform a request and return the decoded JSON body."""
        url = f"{self.base_url}{path}"
        sender: Callable[..., requests.Response] = requests.post if method == "POST" else requests.get
        logger.debug(f"{method} {url}")

        try:
            response = sender(url, headers=self._get_headers(), timeout=self.timeout, **kwargs)
        except requests.exceptions.ConnectionError:
            raise TransportError(f"Cannot connect to chat server at {self.base_url}")
        except requests.exceptions.Timeout:
            raise TransportError(f"Request timed out after {self.timeout}s")
        except requests.exceptions.RequestException as e:
            raise TransportError(f"Request failed: {e}")

        if not response.ok:
            self._handle_error_response(response)

        try:
            return response.json()
        except ValueError as e:
            raise MalformedResponseError(f"Invalid JSON from {path}: {e}")

    def _parse(self, path: str, parser: Callable[[Any], Any], data: Any) -> Any:
        """Run a model parser, turning shape errors into MalformedResponseError."""
        try:
            return parser(data)
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise MalformedResponseError(f"Unexpected response from {path}: {e}")

    def send_message(self, message: str, conversation_id: Optional[str]) -> ChatReply:
        path = "/api/chat"
        data = self._request("POST", path, json={
            "message": message,
            "conversation_id": conversation_id,
        })
        return self._parse(path, ChatReply.from_dict, data)

    def analyze(self, conversation_id: str) -> SentimentVerdict:
        path = "/api/analyze"
        data = self._request("GET", path, params={"conversation_id": conversation_id})
        return self._parse(path, SentimentVerdict.from_dict, data)

    def reset(self) -> str:
        path = "/api/reset"
        data = self._request("POST", path)

        def conversation_id(body: Dict[str, Any]) -> str:
            conv_id = body["conversation_id"]
            if not conv_id:
                raise ValueError("empty conversation_id")
            return str(conv_id)

        return self._parse(path, conversation_id, data)

    def list_conversations(self) -> List[HistoryEntry]:
        path = "/api/history"
        data = self._request("GET", path)

        def entries(body: Any) -> List[HistoryEntry]:
            if not isinstance(body, list):
                raise TypeError("expected a list of conversations")
            return [HistoryEntry.from_dict(item) for item in body]

        return self._parse(path, entries, data)

    def get_conversation(self, conversation_id: str) -> Conversation:
        path = f"/api/history/{quote(conversation_id, safe='')}"
        data = self._request("GET", path)

        def conversation(body: Any) -> Conversation:
            if not isinstance(body, list):
                raise TypeError("expected a list of messages")
            return Conversation(
                id=conversation_id,
                messages=[Message.from_dict(item) for item in body],
            )

        return self._parse(path, conversation, data)

    def is_available(self) -> bool:
        """
        Check if the chat server answers the history endpoint.

        Returns:
            True if the server is reachable, False otherwise
        """
        try:
            self.list_conversations()
            return True
        except BackendError as e:
            logger.debug(f"Chat server unavailable: {e}")
            return False
