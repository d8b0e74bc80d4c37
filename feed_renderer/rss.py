"""RSS/Atom feed fetching and parsing for the feed renderer."""

import logging
import socket
import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import UTC, datetime
from typing import Any, Callable

import feedparser
import requests
import urllib3
from dateutil import parser as date_parser

from .config import FetcherConfig
from .errors import FetchError, FetchTimeout
from .logging_config import RequestLogger, create_request_logger
from .models import FeedItem, ParsedFeed

FEED_TYPE_UNKNOWN_MESSAGE = "Failed to detect feed type"


class InFlightFetch:
    """The live response of one fetch, shared between the worker and the caller.

    The caller aborts it at the deadline by shutting down the response socket,
    so a read blocked in the worker returns at once. The worker still owns
    closing the response and the session.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._response: requests.Response | None = None
        self.cancelled = threading.Event()

    def attach(self, response: requests.Response) -> None:
        """Register the live response; aborts it right away if already cancelled."""
        with self._lock:
            self._response = response
            if self.cancelled.is_set():
                _shutdown_socket(response)

    def abort(self) -> None:
        with self._lock:
            self.cancelled.set()
            if self._response is not None:
                _shutdown_socket(self._response)


def _shutdown_socket(response: requests.Response) -> None:
    connection = getattr(response.raw, "connection", None)
    sock = getattr(connection, "sock", None)
    if sock is None:
        return
    try:
        sock.shutdown(socket.SHUT_RDWR)
    except OSError as e:
        # Already closed by the peer or the worker
        logging.getLogger(__name__).debug(f"Socket shutdown skipped: {e}")


class FeedFetcher:
    """Fetches one feed URL and decodes it into a ParsedFeed.

    The whole fetch plus decode runs in a worker thread and the caller waits
    at most ``timeout`` seconds for it. On expiry the in-flight response is
    aborted and the caller gets FetchTimeout right away.
    """

    def __init__(
        self,
        config: FetcherConfig | None = None,
        session_factory: Callable[[], requests.Session] = requests.Session,
    ):
        """Initialize FeedFetcher.

        Args:
            config: Fetcher configuration (timeout, user agent, chunk size)
            session_factory: Builds one HTTP session per fetch
        """
        self.config = config or FetcherConfig()
        self.timeout = self.config.timeout
        self.session_factory = session_factory

    def fetch(self, feed_url: str, request_id: str | None = None) -> ParsedFeed:
        """Fetch and parse a feed within the fetch deadline.

        Args:
            feed_url: Validated http(s) feed URL
            request_id: Request ID for logging context

        Returns:
            ParsedFeed for the URL

        Raises:
            FetchTimeout: If fetch plus decode exceeds the timeout
            FetchError: If download or decoding fails
        """
        logger = create_request_logger("feed_fetcher", request_id)
        logger.info("Starting to fetch feed", feed_url=feed_url)

        in_flight = InFlightFetch()
        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="feed-fetch")
        future = executor.submit(self._fetch_and_parse, feed_url, in_flight, logger)
        try:
            return future.result(timeout=self.timeout)
        except TimeoutError as e:
            in_flight.abort()
            logger.warning(
                f"Timed out fetching feed after {self.timeout} seconds",
                feed_url=feed_url,
                error_code=FetchTimeout.error_code,
            )
            raise FetchTimeout(self.timeout_message) from e
        finally:
            executor.shutdown(wait=False)

    @property
    def timeout_message(self) -> str:
        return f"timeout fetching feed after {self.timeout} seconds"

    def _fetch_and_parse(
        self, feed_url: str, in_flight: InFlightFetch, logger: RequestLogger
    ) -> ParsedFeed:
        content, headers = self._download(feed_url, in_flight, logger)
        if in_flight.cancelled.is_set():
            raise FetchTimeout(self.timeout_message)
        return self.parse_feed(content, headers, feed_url, logger)

    def _download(
        self, feed_url: str, in_flight: InFlightFetch, logger: RequestLogger
    ) -> tuple[bytes, dict[str, str]]:
        """Download the feed body, stopping early once aborted."""
        session = self.session_factory()
        session.headers.update({"User-Agent": self.config.user_agent})
        response = None
        try:
            response = session.get(feed_url, timeout=self.timeout, stream=True)
            in_flight.attach(response=response)
            response.raise_for_status()

            chunks = []
            for chunk in response.iter_content(chunk_size=self.config.chunk_size):
                if in_flight.cancelled.is_set():
                    raise FetchTimeout(self.timeout_message)
                chunks.append(chunk)
            content = b"".join(chunks)
        except requests.Timeout as e:
            logger.error(f"Timed out downloading feed: {e}", feed_url=feed_url)
            raise FetchTimeout(self.timeout_message) from e
        except requests.RequestException as e:
            # Read timeouts while streaming the body arrive wrapped in ConnectionError
            if in_flight.cancelled.is_set() or (
                e.args and isinstance(e.args[0], urllib3.exceptions.TimeoutError)
            ):
                logger.error(f"Timed out downloading feed: {e}", feed_url=feed_url)
                raise FetchTimeout(self.timeout_message) from e
            logger.error(
                f"Failed to download feed {feed_url}: {e}",
                feed_url=feed_url,
                error=str(e),
            )
            raise FetchError(str(e)) from e
        except (urllib3.exceptions.HTTPError, ValueError) as e:
            # urllib3 URL parsing errors are raised through requests unwrapped
            logger.error(
                f"Failed to download feed {feed_url}: {e}",
                feed_url=feed_url,
                error=str(e),
            )
            raise FetchError(str(e)) from e
        finally:
            if response is not None:
                response.close()
            session.close()

        logger.info(
            "Feed downloaded successfully",
            feed_url=feed_url,
            status_code=response.status_code,
            content_length=len(content),
        )
        return content, dict(response.headers)

    def parse_feed(
        self,
        content: bytes,
        headers: dict[str, str],
        feed_url: str,
        logger: RequestLogger | None = None,
    ) -> ParsedFeed:
        """Decode a downloaded document into a ParsedFeed.

        Raises:
            FetchError: If the document is not a recognizable RSS/Atom feed
        """
        logger = logger or create_request_logger("feed_fetcher")
        feed = feedparser.parse(content, response_headers=headers)

        if not feed.get("version"):
            if feed.get("bozo") and feed.get("bozo_exception"):
                message = str(feed.bozo_exception) or FEED_TYPE_UNKNOWN_MESSAGE
            else:
                message = FEED_TYPE_UNKNOWN_MESSAGE
            logger.error(f"Failed to parse feed {feed_url}: {message}", feed_url=feed_url)
            raise FetchError(message)

        if feed.get("bozo") and feed.get("bozo_exception"):
            logger.warning(
                f"Feed parsing warning for {feed_url}: {feed.bozo_exception}",
                feed_url=feed_url,
                error=str(feed.bozo_exception),
            )

        items = tuple(self.normalize_item(entry) for entry in feed.entries)
        logger.info(
            "Successfully parsed feed",
            feed_url=feed_url,
            items_count=len(items),
        )
        return ParsedFeed(
            title=feed.feed.get("title", ""),
            link=feed.feed.get("link", ""),
            items=items,
        )

    def normalize_item(self, entry: dict[str, Any]) -> FeedItem:
        """Normalize a raw feedparser entry into a FeedItem."""
        content = None
        for content_block in entry.get("content") or []:
            value = content_block.get("value")
            if value:
                content = value
                break

        return FeedItem(
            title=entry.get("title", ""),
            link=entry.get("link", ""),
            content=content,
            description=entry.get("summary") or None,
            published=parse_published(entry),
        )


def parse_published(entry: dict[str, Any]) -> datetime | None:
    """Return the entry's publish time as an aware datetime, or None.

    The raw string keeps its original UTC offset; feedparser's normalized
    struct_time (always UTC) is the fallback.
    """
    published = None
    published_str = entry.get("published")
    if published_str:
        try:
            published = date_parser.parse(published_str)
        except (ValueError, OverflowError):
            published = None

    if published is not None and published.tzinfo is not None:
        return published

    published_parsed = entry.get("published_parsed")
    if published_parsed:
        return datetime(*published_parsed[:6], tzinfo=UTC)

    if published is not None:
        return published.replace(tzinfo=UTC)
    return None
