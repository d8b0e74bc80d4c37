"""Unit tests for the content sanitizer."""

import pytest
from markupsafe import Markup

from feed_renderer.sanitize import UGC_POLICY, ContentSanitizer


class TestContentSanitizerUnit:
    """Unit tests for ContentSanitizer."""

    def setup_method(self):
        self.sanitizer = ContentSanitizer()

    def test_script_is_removed_and_safe_markup_kept(self):
        result = self.sanitizer.sanitize(
            "<p>Hello <script>alert(1)</script><b>world</b></p>"
        )

        assert result == "<p>Hello <b>world</b></p>"
        assert "<script" not in result
        assert "alert(1)" not in result

    def test_result_is_safe_markup(self):
        assert isinstance(self.sanitizer.sanitize("<p>x</p>"), Markup)

    @pytest.mark.parametrize("empty", [None, ""])
    def test_empty_input(self, empty):
        result = self.sanitizer.sanitize(empty)

        assert result == ""
        assert isinstance(result, Markup)

    def test_event_handlers_are_removed(self):
        result = self.sanitizer.sanitize(
            '<img src="https://example.com/a.png" alt="A" onerror="alert(1)">'
            '<p onclick="steal()">Text</p>'
        )

        assert "onerror" not in result
        assert "onclick" not in result
        assert 'src="https://example.com/a.png"' in result
        assert 'alt="A"' in result
        assert "<p>Text</p>" in result

    def test_javascript_links_lose_their_href(self):
        result = self.sanitizer.sanitize('<a href="javascript:alert(1)">click</a>')

        assert "javascript:" not in result
        assert "click" in result

    def test_links_are_kept_with_nofollow(self):
        result = self.sanitizer.sanitize(
            '<a href="https://example.com/post" rel="author" target="_blank">Post</a>'
        )

        assert 'href="https://example.com/post"' in result
        assert 'rel="nofollow"' in result
        assert "author" not in result
        assert "target" not in result

    @pytest.mark.parametrize(
        "html",
        [
            '<iframe src="https://evil.example.com">inside</iframe><p>after</p>',
            '<object data="x.swf">inside</object><p>after</p>',
            '<embed src="x.swf"><p>after</p>',
            "<style>body { display: none }</style><p>after</p>",
            "<svg><script>inside</script></svg><p>after</p>",
        ],
    )
    def test_embeds_and_styles_are_dropped_with_contents(self, html):
        result = self.sanitizer.sanitize(html)

        assert "inside" not in result
        assert "<p>after</p>" in result
        for tag in ("iframe", "object", "embed", "style", "svg", "script"):
            assert f"<{tag}" not in result

    def test_style_attributes_are_removed(self):
        result = self.sanitizer.sanitize('<p style="position:fixed">Text</p>')

        assert result == "<p>Text</p>"

    def test_formatting_lists_and_tables_survive(self):
        html = (
            "<h2>Title</h2><ul><li><em>one</em></li><li><strong>two</strong></li></ul>"
            "<blockquote>quote</blockquote><pre><code>x = 1</code></pre>"
            "<table><tbody><tr><td>cell</td></tr></tbody></table>"
        )

        assert self.sanitizer.sanitize(html) == html

    def test_unknown_tags_are_stripped_but_text_kept(self):
        result = self.sanitizer.sanitize("<form><input name='q'>Search <blink>now</blink></form>")

        assert result == "Search now"

    def test_comments_are_removed(self):
        assert self.sanitizer.sanitize("<p>a<!-- secret -->b</p>") == "<p>ab</p>"

    def test_plain_text_is_escaped(self):
        assert self.sanitizer.sanitize("1 < 2 & 3 > 2") == "1 &lt; 2 &amp; 3 &gt; 2"

    def test_sanitizer_is_callable(self):
        assert self.sanitizer("<b>x</b>") == "<b>x</b>"

    def test_policy_has_no_dangerous_tags(self):
        for tag in ("script", "style", "iframe", "object", "embed", "form"):
            assert tag not in UGC_POLICY.tags
        assert "javascript" not in UGC_POLICY.protocols
