"""
Tests for safe markdown rendering
"""

from sentichat.core.markdown import render_markdown


class TestRenderMarkdown:
    """Bot replies become HTML without any way to smuggle in scripts"""

    def test_bold(self):
        assert "<strong>Great!</strong>" in render_markdown("**Great!**")

    def test_list(self):
        html = render_markdown("- one\n- two")

        assert "<ul>" in html
        assert "<li>one</li>" in html

    def test_code_block_is_escaped(self):
        html = render_markdown("```\n<b>x</b>\n```")

        assert "&lt;b&gt;x&lt;/b&gt;" in html

    def test_raw_script_is_escaped(self):
        html = render_markdown("<script>alert(1)</script>")

        assert "<script>" not in html
        assert "&lt;script&gt;" in html

    def test_inline_html_is_escaped(self):
        html = render_markdown('hello <img src=x onerror="alert(1)">')

        assert "<img" not in html
        assert "&lt;img" in html

    def test_javascript_links_are_dropped(self):
        html = render_markdown("[click](javascript:alert(1))")

        assert 'href="javascript' not in html

    def test_none_renders_empty(self):
        assert render_markdown(None) == ""
