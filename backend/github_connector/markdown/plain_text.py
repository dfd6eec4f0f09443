"""Markdown to plain text, for indexing issue bodies, comments and READMEs."""

from functools import lru_cache

from markdown_it import MarkdownIt
from markdown_it.token import Token


class PlainTextRenderer:
    """Renders markdown-it tokens as plain text.

    Formatting is dropped, links keep their target in parentheses, code blocks
    are set apart by blank lines and table cells are tab separated.
    """

    def __init__(self) -> None:
        self._md = MarkdownIt("commonmark").enable("table").enable("strikethrough")

    def render(self, markdown: str | None) -> str:
        if not markdown:
            return ""
        return self.render_tokens(self._md.parse(markdown))

    def render_tokens(self, tokens: list[Token]) -> str:
        parts: list[str] = []

        for token in tokens:
            token_type = token.type

            if token_type == "inline":
                parts.append(self._render_inline(token.children or []))
            elif token_type == "paragraph_open":
                # Paragraphs in tight lists are hidden
                if not token.hidden:
                    parts.append("\n")
            elif token_type == "paragraph_close":
                if not token.hidden:
                    parts.append("\n")
            elif token_type in ("fence", "code_block"):
                parts.append("\n\n" + token.content.rstrip("\n") + "\n\n")
            elif token_type == "html_block":
                parts.append(token.content)
            elif token_type == "hr":
                parts.append("\n\n")
            elif token_type == "blockquote_close":
                parts.append("\n")
            elif token_type == "list_item_open":
                parts.append("- ")
            elif token_type in ("list_item_close", "tr_close"):
                parts.append("\n")
            elif token_type in ("th_close", "td_close"):
                parts.append("\t")

        return "".join(parts)

    def _render_inline(self, children: list[Token]) -> str:
        parts: list[str] = []
        hrefs: list[str] = []

        for child in children:
            child_type = child.type

            if child_type in ("text", "code_inline", "html_inline"):
                parts.append(child.content)
            elif child_type == "softbreak":
                parts.append("\n")
            elif child_type == "hardbreak":
                parts.append("\n\n")
            elif child_type == "image":
                parts.append(child.content)
            elif child_type == "link_open":
                hrefs.append(str(child.attrGet("href") or ""))
            elif child_type == "link_close":
                href = hrefs.pop() if hrefs else ""
                parts.append(f" ({href})")

        return "".join(parts)


@lru_cache(maxsize=1)
def _default_renderer() -> PlainTextRenderer:
    return PlainTextRenderer()


def render_plain_text(markdown: str | None) -> str:
    """Convert markdown to plain text."""
    return _default_renderer().render(markdown)
