"""Tests for notionpost.converter.rich_text.

Covers:
- Markdown annotation wrapping, escaping and code suppression
- HTML escaping, annotation tags, colour styles and link sanitising
- render_spans accepting raw API segments
"""

from __future__ import annotations

import pytest

from notionpost.converter.rich_text import (
    RenderTarget,
    color_style,
    markdown_escape,
    markdown_url,
    render_spans,
    safe_href,
    spans_plain_text,
)
from notionpost.models import Annotations, RichTextSpan

MD = RenderTarget.MARKDOWN
HTML = RenderTarget.HTML


def span(text: str, href: str | None = None, **annotations) -> RichTextSpan:
    return RichTextSpan(text=text, annotations=Annotations(**annotations), href=href)


# ── Markdown ────────────────────────────────────────────────────────────

class TestMarkdownSpans:
    def test_plain(self):
        assert render_spans([span("Hi")], MD) == "Hi"

    @pytest.mark.parametrize(
        "annotations, expected",
        [
            ({"bold": True}, "**Hi**"),
            ({"italic": True}, "_Hi_"),
            ({"strikethrough": True}, "~~Hi~~"),
            ({"underline": True}, "<u>Hi</u>"),
            ({"bold": True, "italic": True}, "_**Hi**_"),
            ({"bold": True, "italic": True, "strikethrough": True}, "~~_**Hi**_~~"),
        ],
    )
    def test_annotation_wrapping_order(self, annotations, expected):
        assert render_spans([span("Hi", **annotations)], MD) == expected

    def test_code_suppresses_other_emphasis(self):
        assert render_spans([span("x*y", code=True, bold=True, italic=True)], MD) == "`x*y`"

    def test_special_characters_escaped(self):
        assert render_spans([span("a*b_c`d~e")], MD) == r"a\*b\_c\`d\~e"

    def test_link_wraps_annotated_text(self):
        out = render_spans([span("Hi", href="https://example.com", bold=True)], MD)
        assert out == "[**Hi**](https://example.com)"

    def test_link_parentheses_encoded(self):
        out = render_spans([span("wiki", href="https://x.org/a_(b)")], MD)
        assert out == "[wiki](https://x.org/a_%28b%29)"

    def test_spans_concatenate(self):
        out = render_spans([span("Hello "), span("world", bold=True)], MD)
        assert out == "Hello **world**"

    def test_empty_span_renders_nothing(self):
        assert render_spans([span("", bold=True)], MD) == ""


# ── HTML ────────────────────────────────────────────────────────────────

class TestHtmlSpans:
    def test_plain(self):
        assert render_spans([span("Hi")], HTML) == "Hi"

    def test_text_is_escaped(self):
        assert render_spans([span('<a & "b">')], HTML) == "&lt;a &amp; &quot;b&quot;&gt;"

    def test_newline_becomes_br(self):
        assert render_spans([span("a\nb")], HTML) == "a<br>b"

    def test_annotation_order(self):
        out = render_spans([span("x", code=True, bold=True, italic=True)], HTML)
        assert out == "<em><strong><code>x</code></strong></em>"

    def test_strikethrough_and_underline(self):
        out = render_spans([span("x", strikethrough=True, underline=True)], HTML)
        assert out == "<u><s>x</s></u>"

    def test_colour(self):
        assert render_spans([span("x", color="red")], HTML) == (
            '<span style="color: #d44c47">x</span>'
        )

    def test_background_colour(self):
        assert render_spans([span("x", color="blue_background")], HTML) == (
            '<span style="background-color: #e7f3f8">x</span>'
        )

    def test_link(self):
        out = render_spans([span("Hi", href="https://example.com/?a=1&b=2")], HTML)
        assert out == (
            '<a href="https://example.com/?a=1&amp;b=2" rel="noopener noreferrer">Hi</a>'
        )

    @pytest.mark.parametrize(
        "url", ["javascript:alert(1)", "JavaScript:alert(1)", "vbscript:x", "data:text/html,x"],
    )
    def test_harmful_link_neutralised(self, url):
        out = render_spans([span("x", href=url)], HTML)
        assert "alert" not in out
        assert 'href="#harmful-link"' in out


# ── Shared behaviour ────────────────────────────────────────────────────

class TestRenderSpans:
    @pytest.mark.parametrize("target", [MD, HTML])
    def test_empty_inputs(self, target):
        assert render_spans([], target) == ""
        assert render_spans(None, target) == ""

    def test_accepts_raw_api_segments(self):
        segments = [
            {
                "type": "text",
                "plain_text": "Hi",
                "annotations": {"bold": True},
                "href": None,
            },
            {
                "type": "text",
                "text": {"content": " there", "link": {"url": "https://e.com"}},
            },
        ]
        assert render_spans(segments, MD) == "**Hi**[ there](https://e.com)"

    def test_equation_segment_uses_expression(self):
        segments = [{"type": "equation", "equation": {"expression": "E=mc^2"}}]
        assert render_spans(segments, HTML) == "E=mc^2"

    def test_target_accepts_string(self):
        assert render_spans([span("x", bold=True)], "html") == "<strong>x</strong>"

    def test_plain_text_ignores_annotations(self):
        assert spans_plain_text([span("a", bold=True), span("b", code=True)]) == "ab"


class TestHelpers:
    def test_markdown_escape(self):
        assert markdown_escape("**") == r"\*\*"

    def test_markdown_url(self):
        assert markdown_url("a(b)") == "a%28b%29"

    def test_safe_href_keeps_https(self):
        assert safe_href("https://example.com") == "https://example.com"

    @pytest.mark.parametrize("color", ["", "default"])
    def test_default_colour_has_no_style(self, color):
        assert color_style(color) is None

    def test_unknown_colour_passes_through(self):
        assert color_style("teal") == "color: teal"
