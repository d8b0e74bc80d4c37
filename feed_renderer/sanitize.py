"""HTML sanitization for untrusted feed item content."""

from dataclasses import dataclass

import bleach
from bs4 import BeautifulSoup
from markupsafe import Markup


@dataclass(frozen=True)
class SanitizationPolicy:
    """Allowlist of tags, attributes and URL protocols kept in item content."""

    tags: frozenset[str]
    attributes: dict[str, list[str]]
    protocols: frozenset[str]
    # Removed together with everything inside them
    dropped_elements: tuple[str, ...]


# Typical user-generated-content allowlist: formatting, links, images, lists
UGC_POLICY = SanitizationPolicy(
    tags=frozenset(
        {
            "a", "abbr", "b", "blockquote", "br", "caption", "cite", "code",
            "dd", "del", "div", "dl", "dt", "em", "figcaption", "figure",
            "h1", "h2", "h3", "h4", "h5", "h6", "hr", "i", "img", "ins",
            "li", "mark", "ol", "p", "pre", "q", "s", "small", "span",
            "strike", "strong", "sub", "sup", "table", "tbody", "td",
            "tfoot", "th", "thead", "tr", "u", "ul",
        }
    ),
    attributes={
        "a": ["href", "title", "rel"],
        "abbr": ["title"],
        "img": ["src", "alt", "title", "width", "height"],
        "q": ["cite"],
        "blockquote": ["cite"],
        "td": ["colspan", "rowspan"],
        "th": ["colspan", "rowspan", "scope"],
    },
    protocols=frozenset({"http", "https", "mailto"}),
    dropped_elements=(
        "script", "style", "noscript", "template", "iframe", "frame",
        "frameset", "object", "embed", "applet", "svg", "math",
    ),
)


class ContentSanitizer:
    """Strips unsafe markup from untrusted HTML.

    Holds only the immutable policy, so one instance is shared by all
    concurrent requests.
    """

    def __init__(self, policy: SanitizationPolicy = UGC_POLICY):
        self.policy = policy

    def sanitize(self, html: str | None) -> Markup:
        """Return the safe subset of ``html`` as markup ready for templates."""
        if not html:
            return Markup("")

        soup = BeautifulSoup(html, "html.parser")

        for element in soup(list(self.policy.dropped_elements)):
            # Nested matches go away with their ancestor
            if not element.decomposed:
                element.decompose()

        for anchor in soup.find_all("a"):
            anchor["rel"] = "nofollow"

        cleaned = bleach.clean(
            str(soup),
            tags=self.policy.tags,
            attributes=self.policy.attributes,
            protocols=self.policy.protocols,
            strip=True,
            strip_comments=True,
        )
        return Markup(cleaned)

    __call__ = sanitize
