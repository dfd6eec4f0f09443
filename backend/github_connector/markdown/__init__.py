"""Markdown rendering helpers."""

from github_connector.markdown.plain_text import PlainTextRenderer, render_plain_text

__all__ = ["PlainTextRenderer", "render_plain_text"]
