"""Tests for markdown to plain text rendering."""

from github_connector.markdown.plain_text import PlainTextRenderer, render_plain_text


class TestRenderPlainText:
    def test_empty(self):
        assert render_plain_text(None) == ""
        assert render_plain_text("") == ""

    def test_formatting_dropped(self):
        assert render_plain_text("Hello **bold** and _italic_ and ~~old~~") == (
            "\nHello bold and italic and old\n"
        )

    def test_heading(self):
        assert render_plain_text("# Title") == "Title"

    def test_paragraphs(self):
        assert render_plain_text("one\n\ntwo") == "\none\n\ntwo\n"

    def test_soft_break(self):
        assert render_plain_text("line one\nline two") == "\nline one\nline two\n"

    def test_link_keeps_target(self):
        assert render_plain_text("See [the docs](https://example.com/docs).") == (
            "\nSee the docs (https://example.com/docs).\n"
        )

    def test_image_alt_text(self):
        assert render_plain_text("![a cat](cat.png)") == "\na cat\n"

    def test_inline_code(self):
        assert render_plain_text("Run `make test`") == "\nRun make test\n"

    def test_fenced_code(self):
        assert render_plain_text("```python\nprint('hi')\n```") == "\n\nprint('hi')\n\n"

    def test_tight_list(self):
        assert render_plain_text("- first\n- second") == "- first\n- second\n"

    def test_table(self):
        markdown = "| a | b |\n| --- | --- |\n| 1 | 2 |"
        assert render_plain_text(markdown) == "a\tb\t\n1\t2\t\n"

    def test_horizontal_rule(self):
        assert render_plain_text("above\n\n---\n\nbelow") == "\nabove\n\n\n\nbelow\n"


class TestPlainTextRenderer:
    def test_instances_are_independent(self):
        renderer = PlainTextRenderer()
        assert renderer.render("text") == render_plain_text("text")
