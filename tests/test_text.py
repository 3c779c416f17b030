"""Tests for submission description summaries."""
from __future__ import annotations

import pytest

from pullscout.processing.text import PLACEHOLDER, render_links, summarize, summary_line


class TestSummaryLine:
    def test_scenario_body(self):
        body = "[Please write a quick summary of the package.]\n### Brief summary\n\nFixes bug X.\n###"

        assert summary_line(body) == "Fixes bug X."

    def test_pull_request_template(self):
        body = (
            "### Brief summary of what the package does\r\n\r\n"
            "   A tiny mode for editing widgets.  \r\n"
            "Second line.\r\n\r\n"
            "### Direct link to the package repository\r\n\r\n"
            "https://github.com/me/widget\r\n"
        )

        assert summary_line(body) == "A tiny mode for editing widgets."

    def test_untouched_template_has_no_summary(self):
        body = f"### Brief summary of what the package does\n\n{PLACEHOLDER}\n\n### Direct link\n\nhttps://x"

        assert summary_line(body) is None

    def test_without_heading_uses_first_line(self):
        assert summary_line("\n\n  Adds a recipe for foo.\nMore text") == "Adds a recipe for foo."

    @pytest.mark.parametrize("body", [None, "", "   \n\t\n", PLACEHOLDER])
    def test_nothing_usable(self, body):
        assert summary_line(body) is None

    def test_placeholder_requires_exact_match(self):
        assert summary_line("[please write a quick summary of the package]") == (
            "[please write a quick summary of the package]"
        )


class TestRenderLinks:
    def test_converts_markdown_links(self):
        rich = render_links("See [docs](https://example.org/docs) and [repo](https://git.example/r).")

        assert rich.text == "See docs and repo."
        assert [(link.label, link.target) for link in rich.links] == [
            ("docs", "https://example.org/docs"),
            ("repo", "https://git.example/r"),
        ]
        for link in rich.links:
            assert rich.text[link.start : link.end] == link.label

    def test_target_with_parentheses(self):
        rich = render_links("See [Emacs](https://en.wikipedia.org/wiki/Emacs_(editor)) now")

        assert rich.text == "See Emacs now"
        assert rich.links[0].target == "https://en.wikipedia.org/wiki/Emacs_(editor)"

    def test_text_without_links_is_untouched(self):
        rich = render_links("Plain [bracketed] text (with parens)")

        assert rich.text == "Plain [bracketed] text (with parens)"
        assert rich.links == []


def test_summarize_renders_links_in_summary():
    body = "### Brief summary\n\nWraps [libfoo](https://foo.example) for Emacs.\n"

    rich = summarize(body)

    assert rich.text == "Wraps libfoo for Emacs."
    assert rich.links[0].target == "https://foo.example"


def test_summarize_without_body():
    assert summarize(None) is None
