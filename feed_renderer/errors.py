"""Error taxonomy for the feed rendering pipeline.

InvalidURL, FetchError and FetchTimeout are user-facing: the pipeline turns
them into a rendered error panel. CompositionFailure signals a template defect
and is never rendered.
"""


class FeedRendererError(Exception):
    """Base class for feed renderer errors."""

    error_code = "feed_renderer_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class InvalidURL(FeedRendererError):
    """URL is malformed or uses a scheme other than http/https."""

    error_code = "invalid_url"


class FetchError(FeedRendererError):
    """Network or decode failure while fetching the feed."""

    error_code = "fetch_failed"


class FetchTimeout(FetchError):
    """Fetch plus decode exceeded the fetch deadline."""

    error_code = "fetch_timeout"


class CompositionFailure(FeedRendererError):
    """A page template failed to render."""

    error_code = "composition_failed"
