"""URL validation for submitted feed URLs.

Runs before any network access, so malformed or non-HTTP(S) input is rejected
without side effects.
"""

from urllib.parse import urlparse

from .errors import InvalidURL

ALLOWED_SCHEMES = frozenset({"http", "https"})

INVALID_URL_MESSAGE = "invalid url"
INVALID_PROTOCOL_MESSAGE = "invalid url protocol, only http and https are allowed"


def _has_control_characters(url: str) -> bool:
    return any(ord(char) < 0x20 or ord(char) == 0x7F for char in url)


def validate_feed_url(url: str) -> str | None:
    """Validate a submitted feed URL.

    Args:
        url: Raw URL string from the request

    Returns:
        None when no URL was supplied (landing page), otherwise the URL itself

    Raises:
        InvalidURL: If the URL is malformed or its scheme is not http/https
    """
    if url == "":
        return None

    if _has_control_characters(url):
        raise InvalidURL(INVALID_URL_MESSAGE)

    try:
        parsed_url = urlparse(url)
        # Accessing port validates it
        parsed_url.port
    except ValueError as e:
        raise InvalidURL(INVALID_URL_MESSAGE) from e

    if parsed_url.scheme not in ALLOWED_SCHEMES:
        raise InvalidURL(INVALID_PROTOCOL_MESSAGE)

    if not parsed_url.hostname:
        raise InvalidURL(INVALID_URL_MESSAGE)

    return url
