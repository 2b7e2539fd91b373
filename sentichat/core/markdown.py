"""
Safe Markdown rendering for bot replies.

Raw HTML in the source is escaped rather than passed through, and
markdown-it's link validation drops javascript:/vbscript:/file: URLs.
"""

from markdown_it import MarkdownIt

_renderer = MarkdownIt("commonmark", {"html": False})


def render_markdown(text: str) -> str:
    """Convert Markdown text to HTML that cannot carry scripts"""
    return _renderer.render(text or "")
