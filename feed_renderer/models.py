"""Data models for the feed renderer."""

from dataclasses import dataclass
from datetime import datetime

from markupsafe import Markup


@dataclass(frozen=True)
class FeedRequest:
    """Raw, untrusted URL string submitted by the client."""

    url: str = ""


@dataclass(frozen=True)
class FeedItem:
    """Represents a single RSS/Atom feed item."""

    title: str
    link: str
    content: str | None = None
    description: str | None = None
    published: datetime | None = None

    @property
    def body_html(self) -> str:
        """Untrusted HTML to render for this item; content wins over description."""
        return self.content or self.description or ""


@dataclass(frozen=True)
class ParsedFeed:
    """Read-only view of a fetched and decoded feed."""

    title: str
    link: str
    items: tuple[FeedItem, ...] = ()


@dataclass(frozen=True)
class FeedRendered:
    """Successful render: feed title plus sanitized body markup."""

    title: str
    body: Markup


@dataclass(frozen=True)
class RenderFailed:
    """Failed render: message shown in the error panel."""

    message: str


RenderResult = FeedRendered | RenderFailed


@dataclass(frozen=True)
class PageContext:
    """Regions of one response page, in output order."""

    header: bytes
    body: bytes = b""
    footer: bytes = b""
