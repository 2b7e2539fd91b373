"""
Terminal UI for the sentiment chat client.
"""

import asyncio
import shlex
from typing import Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.auto_suggest import AutoSuggestFromHistory
from prompt_toolkit.formatted_text import HTML
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.styles import Style
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from sentichat.core.flows import ChatController
from sentichat.core.views import HistoryListView, RenderedTurn, SentimentPanel


class ChatTUI:
    """
    Terminal UI for chatting with the sentiment service.

    Features:
    - Plain input is sent as a message (Enter sends)
    - Sentiment tags appear under each user turn once the server answers
    - Conversation history with switching
    - On-demand sentiment summary for the whole conversation
    """

    COMMAND_HELP = {
        'help': 'Show this help',
        'new': 'Start a new conversation',
        'reset': 'Start a new conversation (same as new)',
        'analyze': 'Show the sentiment summary of the current conversation',
        'history': 'List stored conversations',
        'open': 'Open a conversation: /open <number|id>',
        'exit': 'Leave the chat (also /quit)',
    }

    def __init__(self, controller: ChatController, console: Optional[Console] = None,
                 render_markdown: bool = True):
        """
        Initialize chat TUI.

        Args:
            controller: Session controller driving the views
            console: Optional rich console (default: stdout)
            render_markdown: Whether to render bot replies as markdown (default: True)
        """
        self.controller = controller
        self.console = console or Console()
        self.render_markdown = render_markdown
        self.session: Optional[PromptSession] = None

        self.style = Style.from_dict({
            'prompt': '#00aa00 bold',
        })

        controller.transcript.subscribe(self._on_transcript)
        controller.panel.subscribe(self._on_panel)

    # ==================== Rendering ====================

    def print_header(self):
        """Print welcome header"""
        header_text = Text()
        header_text.append("SentiChat", style="bold cyan")
        header_text.append(" - sentiment-aware chat\n", style="dim")
        header_text.append("Server: ", style="dim")
        header_text.append(f"{getattr(self.controller.backend, 'base_url', self.controller.backend.name)}",
                           style="bold")

        self.console.print(Panel(header_text, border_style="cyan"))
        self.console.print("[dim]Type a message to chat, '/help' for commands, '/exit' to quit[/dim]\n")

    def print_error(self, message: str):
        self.console.print(Text("Error: ", style="red").append(message, style=""))

    def print_info(self, message: str):
        self.console.print(f"[cyan]i[/cyan] {message}")

    def print_turn(self, turn: RenderedTurn):
        """Print one transcript turn"""
        if turn.is_user:
            line = Text("You: ", style="bold cyan")
            line.append(turn.text)
            if turn.badge:
                line.append(f"  [{turn.badge.label}]", style=turn.badge.color)
            self.console.print(line)
        else:
            self.console.print(Text("Bot:", style="bold magenta"))
            if self.render_markdown:
                self.console.print(Markdown(turn.text))
            else:
                self.console.print(Text(turn.text))
        self.console.print()

    def _on_transcript(self, event: str, turn: Optional[RenderedTurn]):
        if event == 'clear':
            self.console.clear()
        elif event == 'append' and turn is not None:
            self.print_turn(turn)
        elif event == 'badge' and turn is not None and turn.badge:
            self.console.print(Text(f"  sentiment: {turn.badge.label}", style=turn.badge.color))

    def _on_panel(self, panel: SentimentPanel):
        if not panel.visible:
            return
        body = Text()
        body.append("Label: ", style="dim")
        body.append(f"{panel.label}\n", style=f"bold {panel.color}")
        body.append("Score: ", style="dim")
        body.append(f"{panel.score_text}\n")
        body.append("Summary: ", style="dim")
        body.append(panel.summary_text)
        self.console.print(Panel(body, title="Conversation sentiment", border_style=panel.color))

    def show_history(self, history: Optional[HistoryListView] = None):
        """Print the conversation list as a table"""
        if history is None:
            history = self.controller.history
        if not history.items:
            self.print_info("No conversations yet")
            return

        table = Table(show_header=True, header_style="bold")
        table.add_column("#", justify="right", style="dim")
        table.add_column("Date")
        table.add_column("Preview")
        table.add_column("ID", style="dim")

        for index, item in enumerate(history.items, start=1):
            style = "bold green" if item.active else None
            marker = "*" if item.active else ""
            table.add_row(
                f"{marker}{index}",
                history.date_label(item),
                Text(item.preview),
                item.id[:8],
                style=style,
            )

        self.console.print(table)
        self.console.print("[dim]Use '/open <number>' to switch conversations[/dim]")

    def print_help(self):
        for command, desc in self.COMMAND_HELP.items():
            self.console.print(f"  [bold cyan]/{command}[/bold cyan]  {desc}")

    # ==================== Input handling ====================

    async def handle_command(self, command: str) -> bool:
        """
        Run a slash command.

        Returns:
            False when the session should end
        """
        try:
            parts = shlex.split(command)
        except ValueError as e:
            self.print_error(f"Could not parse command: {e}")
            return True
        if not parts:
            return True

        name, args = parts[0].lower(), parts[1:]

        if name in ('exit', 'quit'):
            return False
        elif name == 'help':
            self.print_help()
        elif name in ('new', 'reset'):
            await self.controller.reset()
        elif name == 'analyze':
            result = await self.controller.analyze()
            if result.skipped:
                self.print_info("Nothing to analyze yet")
        elif name == 'history':
            await self.controller.refresh_history()
            self.show_history()
        elif name == 'open':
            if not args:
                self.print_error("Usage: /open <number|id>")
                return True
            item = self.controller.history.find(args[0])
            if item is None:
                self.print_error(f"No conversation matches '{args[0]}'")
                return True
            await self.controller.select(item.id)
        else:
            self.print_error(f"Unknown command: /{name}")
            self.console.print("Type [bold]/help[/bold] for a list of commands")
        return True

    async def handle_input(self, user_input: str) -> bool:
        """
        Route one line of input.

        Returns:
            False when the session should end
        """
        user_input = user_input.strip()
        if not user_input:
            return True
        if user_input.startswith('/'):
            return await self.handle_command(user_input[1:])
        await self.controller.send(user_input)
        return True

    async def run_async(self):
        """Run the chat loop on the current event loop"""
        if self.session is None:
            self.session = PromptSession(
                history=InMemoryHistory(),
                auto_suggest=AutoSuggestFromHistory(),
            )

        self.print_header()
        await self.controller.start()

        while True:
            try:
                user_input = await self.session.prompt_async(
                    HTML('<prompt>&gt; </prompt>'),
                    style=self.style,
                )
            except (EOFError, KeyboardInterrupt):
                break

            if not await self.handle_input(user_input):
                break

        self.console.print("\nGoodbye!")

    def run(self):
        """Run the chat interface"""
        asyncio.run(self.run_async())
