"""Request pipeline: validate, fetch, sanitize and compose one page."""

from .compose import ERROR_TITLE, FOOTER, LANDING_TITLE, PageComposer
from .config import Config
from .errors import FetchError, InvalidURL
from .logging_config import create_request_logger
from .models import FeedRendered, FeedRequest, PageContext, RenderFailed, RenderResult
from .rss import FeedFetcher
from .sanitize import ContentSanitizer
from .validation import validate_feed_url


class FeedRenderer:
    """Turns a submitted URL into a complete HTML page.

    Collaborators are built once per process and shared read-only by all
    requests; tests pass fakes instead.
    """

    def __init__(
        self,
        fetcher: FeedFetcher,
        sanitizer: ContentSanitizer,
        composer: PageComposer,
    ):
        self.fetcher = fetcher
        self.sanitizer = sanitizer
        self.composer = composer

    def render(self, url: str, request_id: str | None = None) -> RenderResult:
        """Fetch and render the feed at a non-empty URL.

        InvalidURL, FetchTimeout and FetchError become a RenderFailed;
        CompositionFailure propagates.
        """
        logger = create_request_logger("renderer", request_id)
        try:
            feed_url = validate_feed_url(url)
            if feed_url is None:
                raise InvalidURL("invalid url")
            feed = self.fetcher.fetch(feed_url, request_id=logger.request_id)
        except (InvalidURL, FetchError) as e:
            logger.warning(
                f"Failed to render feed: {e}",
                feed_url=url,
                error=str(e),
                error_code=e.error_code,
            )
            return RenderFailed(message=str(e))

        body = self.composer.render_feed(feed, self.sanitizer.sanitize)
        logger.log_feed_rendered(url, len(feed.items))
        return FeedRendered(title=feed.title, body=body)

    def render_http_request(
        self, feed_request: FeedRequest | str, request_id: str | None = None
    ) -> bytes:
        """Render the full response page for a submitted URL.

        Args:
            feed_request: Submitted URL, empty for the landing page
            request_id: Request ID for logging context

        Returns:
            UTF-8 encoded HTML page

        Raises:
            CompositionFailure: If a page template fails to render
        """
        if isinstance(feed_request, str):
            feed_request = FeedRequest(url=feed_request)
        url = feed_request.url

        logger = create_request_logger("renderer", request_id)
        logger.log_request_start(feed_url=url)

        if not url:
            page = PageContext(
                header=self.composer.render_header(LANDING_TITLE, url),
                footer=FOOTER,
            )
            logger.log_request_end(success=True)
            return self.composer.compose(page)

        result = self.render(url, request_id=logger.request_id)
        if isinstance(result, FeedRendered):
            page = PageContext(
                header=self.composer.render_header(result.title, url),
                body=str(result.body).encode("utf-8"),
                footer=FOOTER,
            )
        else:
            page = PageContext(
                header=self.composer.render_header(ERROR_TITLE, url),
                body=self.composer.render_error(result.message, url),
                footer=FOOTER,
            )

        logger.log_request_end(success=isinstance(result, FeedRendered), feed_url=url)
        return self.composer.compose(page)


def build_renderer(config: Config | None = None) -> FeedRenderer:
    """Construct the process-wide renderer and its collaborators."""
    config = config or Config()
    return FeedRenderer(
        fetcher=FeedFetcher(config.get_fetcher_config()),
        sanitizer=ContentSanitizer(),
        composer=PageComposer(),
    )
