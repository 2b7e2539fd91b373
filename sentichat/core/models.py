"""
Core data models for the chat client
"""

from typing import Dict, List, Optional, Any
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


DEFAULT_PREVIEW = "New Conversation"
NO_SUMMARY = "No summary available."


class Sentiment(Enum):
    """Sentiment labels assigned by the server"""
    POSITIVE = "Positive"
    NEGATIVE = "Negative"
    NEUTRAL = "Neutral"

    @classmethod
    def from_string(cls, label: Optional[str]) -> Optional['Sentiment']:
        """Convert a server label to a Sentiment.

        Missing labels stay unknown (None). Labels outside the three known
        values are treated as neutral.
        """
        if not label or not isinstance(label, str):
            return None

        normalized = label.strip().lower()
        for sentiment in cls:
            if sentiment.value.lower() == normalized:
                return sentiment
        return cls.NEUTRAL


class Sender(Enum):
    """Who produced a message"""
    USER = "user"
    BOT = "bot"

    @classmethod
    def from_string(cls, sender: Optional[str]) -> 'Sender':
        """Anything that is not the user is the bot"""
        if isinstance(sender, str) and sender.strip().lower() == "user":
            return cls.USER
        return cls.BOT


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp, tolerating a trailing 'Z'"""
    if isinstance(value, datetime):
        return value
    if not value or not isinstance(value, str):
        return None
    text = value.strip()
    if text.endswith('Z'):
        text = text[:-1] + '+00:00'
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


@dataclass
class Message:
    """A single turn in a conversation"""
    sender: Sender
    text: str
    sentiment: Optional[Sentiment] = None

    @property
    def is_user(self) -> bool:
        return self.sender == Sender.USER

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Message':
        """Create Message from a stored-history record"""
        text = data.get('text')
        if not isinstance(text, str):
            raise ValueError("message record has no text")
        return cls(
            sender=Sender.from_string(data.get('sender')),
            text=text,
            sentiment=Sentiment.from_string(data.get('sentiment')),
        )

    def to_dict(self) -> Dict[str, Any]:
        result = {'sender': self.sender.value, 'text': self.text}
        if self.sentiment:
            result['sentiment'] = self.sentiment.value
        return result


@dataclass
class Conversation:
    """A persisted, server-identified sequence of messages"""
    id: str
    created_at: Optional[datetime] = None
    messages: List[Message] = field(default_factory=list)
    last_message: Optional[str] = None


@dataclass
class HistoryEntry:
    """List-view projection of a conversation"""
    id: str
    created_at: Optional[datetime] = None
    last_message: Optional[str] = None

    @property
    def preview(self) -> str:
        return self.last_message or DEFAULT_PREVIEW

    def date_label(self, fmt: str = "%Y-%m-%d") -> str:
        if self.created_at is None:
            return "Unknown date"
        return self.created_at.strftime(fmt)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'HistoryEntry':
        conv_id = data.get('id')
        if not conv_id:
            raise ValueError("history record has no id")
        last_message = data.get('last_message')
        return cls(
            id=str(conv_id),
            created_at=parse_timestamp(data.get('created_at')),
            last_message=last_message if isinstance(last_message, str) and last_message else None,
        )


@dataclass
class ChatReply:
    """Server response to a sent user turn"""
    conversation_id: Optional[str]
    user_sentiment: Optional[Sentiment]
    response: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ChatReply':
        response = data.get('response')
        if not isinstance(response, str):
            raise ValueError("chat reply has no response text")
        conv_id = data.get('conversation_id')
        return cls(
            conversation_id=str(conv_id) if conv_id else None,
            user_sentiment=Sentiment.from_string(data.get('user_sentiment')),
            response=response,
        )


@dataclass
class SentimentVerdict:
    """Aggregate sentiment for a whole conversation"""
    label: str
    score: float
    summary: Optional[str] = None

    @property
    def tone(self) -> Sentiment:
        return Sentiment.from_string(self.label) or Sentiment.NEUTRAL

    @property
    def summary_text(self) -> str:
        return self.summary or NO_SUMMARY

    def format_score(self, precision: int = 4) -> str:
        return f"{self.score:.{precision}f}"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SentimentVerdict':
        score = data.get('score')
        # bool is an int subclass but never a valid score
        if isinstance(score, bool) or not isinstance(score, (int, float)):
            raise ValueError("verdict has no numeric score")
        return cls(
            label=str(data.get('label') or ''),
            score=float(score),
            summary=data.get('summary') or None,
        )
