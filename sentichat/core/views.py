"""
View models for the chat client: transcript, history list and sentiment panel.

These hold what is on screen. Front-ends subscribe to them and draw.
"""

import html
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Union

from sentichat.core.markdown import render_markdown
from sentichat.core.models import (
    HistoryEntry,
    Message,
    Sender,
    Sentiment,
    SentimentVerdict,
)


# (event, turn) where event is 'append', 'badge' or 'clear'
TranscriptListener = Callable[[str, Optional['RenderedTurn']], None]

BADGE_CLASSES = {
    Sentiment.POSITIVE: "sentiment-positive",
    Sentiment.NEGATIVE: "sentiment-negative",
    Sentiment.NEUTRAL: "sentiment-neutral",
}

LABEL_COLORS = {
    Sentiment.POSITIVE: "#10b981",
    Sentiment.NEGATIVE: "#ef4444",
    Sentiment.NEUTRAL: "#f59e0b",
}


@dataclass
class SentimentBadge:
    """Visual tag attached to a user turn"""
    sentiment: Sentiment

    @property
    def label(self) -> str:
        return self.sentiment.value

    @property
    def css_class(self) -> str:
        return BADGE_CLASSES[self.sentiment]

    @property
    def color(self) -> str:
        return LABEL_COLORS[self.sentiment]

    def to_html(self) -> str:
        return f'<span class="sentiment-tag {self.css_class}">{html.escape(self.label)}</span>'


@dataclass
class RenderedTurn:
    """One message as it appears in the transcript"""
    sender: Sender
    text: str
    body: str
    badge: Optional[SentimentBadge] = None

    @property
    def is_user(self) -> bool:
        return self.sender == Sender.USER

    @property
    def css_class(self) -> str:
        return "user-message" if self.is_user else "bot-message"

    def to_html(self) -> str:
        content = self.body
        if self.badge:
            content += self.badge.to_html()
        return (
            f'<div class="message {self.css_class}">'
            f'<div class="message-content">{content}</div>'
            f'</div>'
        )


class TranscriptView:
    """
    Append-only transcript of the active conversation.

    Bot text goes through the safe Markdown renderer; user text is always
    literal. The scroll position follows the newest turn after every change.
    """

    def __init__(self, markdown_renderer: Callable[[str], str] = render_markdown):
        self.markdown_renderer = markdown_renderer
        self.turns: List[RenderedTurn] = []
        self.scroll_position = 0
        self._listeners: List[TranscriptListener] = []

    def subscribe(self, listener: TranscriptListener) -> None:
        self._listeners.append(listener)

    def _notify(self, event: str, turn: Optional[RenderedTurn] = None) -> None:
        for listener in self._listeners:
            listener(event, turn)

    def pin_to_bottom(self) -> None:
        self.scroll_position = len(self.turns)

    def append(self, message: Message) -> RenderedTurn:
        """Render a message as a new turn at the end of the transcript"""
        if message.is_user:
            turn = RenderedTurn(
                sender=Sender.USER,
                text=message.text,
                body=html.escape(message.text),
                badge=SentimentBadge(message.sentiment) if message.sentiment else None,
            )
        else:
            turn = RenderedTurn(
                sender=Sender.BOT,
                text=message.text,
                body=self.markdown_renderer(message.text),
            )

        self.turns.append(turn)
        self.pin_to_bottom()
        self._notify('append', turn)
        return turn

    def append_user(self, text: str, sentiment: Optional[Sentiment] = None) -> RenderedTurn:
        return self.append(Message(sender=Sender.USER, text=text, sentiment=sentiment))

    def append_bot(self, text: str) -> RenderedTurn:
        return self.append(Message(sender=Sender.BOT, text=text))

    @property
    def user_turns(self) -> List[RenderedTurn]:
        return [turn for turn in self.turns if turn.is_user]

    @property
    def last_user_turn(self) -> Optional[RenderedTurn]:
        for turn in reversed(self.turns):
            if turn.is_user:
                return turn
        return None

    def attach_badge(self, sentiment: Optional[Sentiment]) -> bool:
        """Tag the most recent user turn, unless it already carries a badge.

        Returns:
            True if a badge was attached
        """
        if sentiment is None:
            return False
        turn = self.last_user_turn
        if turn is None or turn.badge is not None:
            return False

        turn.badge = SentimentBadge(sentiment)
        self.pin_to_bottom()
        self._notify('badge', turn)
        return True

    def clear(self) -> None:
        self.turns = []
        self.pin_to_bottom()
        self._notify('clear')

    def replace(self, messages: Iterable[Message]) -> None:
        """Drop everything shown and render the given messages in order"""
        self.clear()
        for message in messages:
            self.append(message)

    def to_html(self) -> str:
        return "".join(turn.to_html() for turn in self.turns)

    def __len__(self) -> int:
        return len(self.turns)


@dataclass
class HistoryItem:
    """One row of the history list"""
    entry: HistoryEntry
    active: bool = False

    @property
    def id(self) -> str:
        return self.entry.id

    @property
    def preview(self) -> str:
        return self.entry.preview


class HistoryListView:
    """Sidebar list of conversations, rebuilt wholesale on every refresh"""

    def __init__(self, date_format: str = "%Y-%m-%d"):
        self.date_format = date_format
        self.items: List[HistoryItem] = []
        self._listeners: List[Callable[['HistoryListView'], None]] = []

    def subscribe(self, listener: Callable[['HistoryListView'], None]) -> None:
        self._listeners.append(listener)

    def replace(self, entries: Iterable[HistoryEntry], active_id: Optional[str]) -> None:
        self.items = [
            HistoryItem(entry=entry, active=active_id is not None and entry.id == active_id)
            for entry in entries
        ]
        for listener in self._listeners:
            listener(self)

    @property
    def ids(self) -> List[str]:
        return [item.id for item in self.items]

    @property
    def active_item(self) -> Optional[HistoryItem]:
        for item in self.items:
            if item.active:
                return item
        return None

    def date_label(self, item: HistoryItem) -> str:
        return item.entry.date_label(self.date_format)

    def find(self, key: Union[int, str]) -> Optional[HistoryItem]:
        """Look up a row by 1-based position or by (prefix of) identifier"""
        if isinstance(key, int) or (isinstance(key, str) and key.isdigit()):
            index = int(key) - 1
            if 0 <= index < len(self.items):
                return self.items[index]
            if isinstance(key, int):
                return None

        matches = [item for item in self.items if item.id == key]
        if not matches:
            matches = [item for item in self.items if item.id.startswith(str(key))]
        if len(matches) == 1:
            return matches[0]
        return None

    def __len__(self) -> int:
        return len(self.items)


class SentimentPanel:
    """Aggregate verdict display, hidden until first requested"""

    def __init__(self, score_precision: int = 4):
        self.score_precision = score_precision
        self.visible = False
        self.verdict: Optional[SentimentVerdict] = None
        self._listeners: List[Callable[['SentimentPanel'], None]] = []

    def subscribe(self, listener: Callable[['SentimentPanel'], None]) -> None:
        self._listeners.append(listener)

    def _notify(self) -> None:
        for listener in self._listeners:
            listener(self)

    def show(self, verdict: SentimentVerdict) -> None:
        self.verdict = verdict
        self.visible = True
        self._notify()

    def hide(self) -> None:
        if not self.visible:
            return
        self.visible = False
        self._notify()

    @property
    def label(self) -> str:
        return self.verdict.label if self.verdict else ""

    @property
    def tone(self) -> Sentiment:
        return self.verdict.tone if self.verdict else Sentiment.NEUTRAL

    @property
    def color(self) -> str:
        return LABEL_COLORS[self.tone]

    @property
    def score_text(self) -> str:
        return self.verdict.format_score(self.score_precision) if self.verdict else ""

    @property
    def summary_text(self) -> str:
        return self.verdict.summary_text if self.verdict else ""
