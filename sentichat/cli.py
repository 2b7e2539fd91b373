#!/usr/bin/env python3
"""
SentiChat command line interface
"""

import argparse
import asyncio
import logging
import sys
from typing import Optional, List

from sentichat.core.config import Config, get_config
from sentichat.core.flows import ChatController
from sentichat.core.views import HistoryListView, SentimentPanel
from sentichat.integrations.api.base import BackendError
from sentichat.integrations.api.http import HTTPChatBackend


def setup_logging(verbose: bool = False):
    """Setup logging configuration"""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def load_config(args) -> Config:
    if getattr(args, 'config', None):
        return Config(args.config)
    return get_config()


def build_backend(args, cfg: Config) -> HTTPChatBackend:
    """Backend from config, CLI args override config"""
    config = cfg.get_server_config()
    if getattr(args, 'url', None):
        config['base_url'] = args.url
    if getattr(args, 'timeout', None):
        config['timeout'] = args.timeout
    return HTTPChatBackend(config)


def build_controller(backend: HTTPChatBackend, cfg: Config) -> ChatController:
    return ChatController(
        backend,
        history=HistoryListView(date_format=cfg.get('display.date_format', '%Y-%m-%d')),
        panel=SentimentPanel(score_precision=int(cfg.get('display.score_precision', 4))),
    )


def cmd_chat(args):
    """Start interactive chat"""
    # Import here to avoid loading prompt_toolkit if not needed
    from sentichat.integrations.chat.tui import ChatTUI

    cfg = load_config(args)
    backend = build_backend(args, cfg)

    if not backend.is_available():
        print(f"Error: Cannot connect to chat server at {backend.base_url}")
        return 1

    render_markdown = cfg.get('display.render_markdown', True) and not args.no_markdown
    tui = ChatTUI(build_controller(backend, cfg), render_markdown=render_markdown)
    tui.run()
    return 0


def cmd_history(args):
    """List stored conversations"""
    from sentichat.integrations.chat.tui import ChatTUI

    cfg = load_config(args)
    controller = build_controller(build_backend(args, cfg), cfg)

    result = asyncio.run(controller.refresh_history())
    if not result.ok:
        print(f"Error: {result.error}")
        return 1

    ChatTUI(controller).show_history()
    return 0


def cmd_show(args):
    """Print the transcript of a stored conversation"""
    from sentichat.integrations.chat.tui import ChatTUI

    cfg = load_config(args)
    backend = build_backend(args, cfg)
    controller = build_controller(backend, cfg)
    ChatTUI(controller, render_markdown=not args.no_markdown)

    try:
        conversation = backend.get_conversation(args.id)
    except BackendError as e:
        print(f"Error: {e}")
        return 1

    # Appended one by one: replace() would clear the terminal first
    for message in conversation.messages:
        controller.transcript.append(message)
    return 0


def cmd_analyze(args):
    """Print the sentiment verdict for a conversation"""
    cfg = load_config(args)
    backend = build_backend(args, cfg)
    precision = int(cfg.get('display.score_precision', 4))

    try:
        verdict = backend.analyze(args.id)
    except BackendError as e:
        print(f"Error: {e}")
        return 1

    print(f"Label:   {verdict.label}")
    print(f"Score:   {verdict.format_score(precision)}")
    print(f"Summary: {verdict.summary_text}")
    return 0


def _add_server_args(parser: argparse.ArgumentParser):
    parser.add_argument('--url', help='Chat server base URL (overrides config)')
    parser.add_argument('--timeout', type=float, help='Request timeout in seconds')
    parser.add_argument('--config', help='Path to config file')


def main(argv: Optional[List[str]] = None):
    """Main CLI entry point"""
    parser = argparse.ArgumentParser(
        description='SentiChat - chat client with per-message sentiment tagging'
    )
    parser.add_argument('--verbose', '-v', action='store_true', help='Verbose output')

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    chat_parser = subparsers.add_parser('chat', help='Interactive chat (default)')
    _add_server_args(chat_parser)
    chat_parser.add_argument('--no-markdown', action='store_true',
                             help='Show bot replies as plain text')

    history_parser = subparsers.add_parser('history', help='List conversations')
    _add_server_args(history_parser)

    show_parser = subparsers.add_parser('show', help='Show a conversation transcript')
    show_parser.add_argument('id', help='Conversation ID')
    _add_server_args(show_parser)
    show_parser.add_argument('--no-markdown', action='store_true',
                             help='Show bot replies as plain text')

    analyze_parser = subparsers.add_parser('analyze', help='Sentiment summary of a conversation')
    analyze_parser.add_argument('id', help='Conversation ID')
    _add_server_args(analyze_parser)

    args = parser.parse_args(argv)

    setup_logging(verbose=args.verbose)

    if not args.command:
        verbose = args.verbose
        args = parser.parse_args(['chat'])
        args.verbose = verbose

    commands = {
        'chat': cmd_chat,
        'history': cmd_history,
        'show': cmd_show,
        'analyze': cmd_analyze,
    }

    return commands[args.command](args)


if __name__ == '__main__':
    sys.exit(main())
