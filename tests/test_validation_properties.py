"""Property-based tests for feed URL validation."""

from unittest.mock import Mock

import pytest
from hypothesis import given
from hypothesis import strategies as st

from feed_renderer.compose import PageComposer
from feed_renderer.errors import InvalidURL
from feed_renderer.renderer import FeedRenderer
from feed_renderer.sanitize import ContentSanitizer
from feed_renderer.validation import validate_feed_url

LABELS = st.text(
    alphabet="abcdefghijklmnopqrstuvwxyz0123456789",
    min_size=1,
    max_size=20,
)


class TestValidationProperties:
    """Property-based tests for validate_feed_url."""

    @given(
        st.sampled_from(["ftp", "file", "javascript", "data", "gopher", "mailto", "ws"]),
        st.text(alphabet="abcdefghijklmnopqrstuvwxyz/.()", max_size=40),
    )
    def test_non_http_schemes_are_rejected(self, scheme, rest):
        """For any non-HTTP(S) scheme, validation fails with InvalidURL."""
        with pytest.raises(InvalidURL):
            validate_feed_url(f"{scheme}:{rest}")

    @given(st.sampled_from(["http", "https"]), LABELS, LABELS)
    def test_http_urls_with_host_are_accepted(self, scheme, domain, path):
        url = f"{scheme}://{domain}.com/{path}"
        assert validate_feed_url(url) == url

    @given(
        st.sampled_from(
            ["ftp://x", "javascript:alert(1)", "file:///etc/passwd", "ftp://files.example.com/feed"]
        )
    )
    def test_rejected_urls_never_reach_the_fetcher(self, url):
        """Invalid URLs are answered with an error page and no fetch."""
        fetcher = Mock()
        renderer = FeedRenderer(fetcher, ContentSanitizer(), PageComposer())

        page = renderer.render_http_request(url)

        fetcher.fetch.assert_not_called()
        assert b"Error rendering the feed" in page
