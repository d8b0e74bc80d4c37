"""Page composition for the feed renderer.

A page is three regions rendered independently and concatenated in order:
header (title and URL form), body (feed or error panel) and footer.

Every value reaching a template is escaped by Jinja's autoescaping. The only
exception is the sanitizer's output, which is a ``markupsafe.Markup`` and so
passes through as-is. Plain ``str`` values can never be emitted unescaped.
"""

import re
from datetime import datetime
from typing import Callable
from urllib.parse import urlparse

import jinja2
from markupsafe import Markup

from .errors import CompositionFailure
from .models import PageContext, ParsedFeed

LANDING_TITLE = "RSS/Atom feed renderer"
ERROR_TITLE = "Error rendering feed"

PUBLISHED_FORMAT = "%Y-%m-%d %H:%M:%S %z"

SAFE_URL_SCHEMES = frozenset({"http", "https", "mailto"})
# Replacement for URLs that must not end up in an href
UNSAFE_URL = "#ZgotmplZ"

_IGNORED_URL_CHARS = re.compile(r"[\t\r\n]")
_C0_CONTROL_OR_SPACE = "".join(chr(code) for code in range(0x21))

TEMPLATE_HEADER = """\
<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <title>{{ title }}</title>
  <link href="/static/main.css" rel="stylesheet">
</head>
<body>
<h1>RSS/Atom feed renderer</h1>
<form action="/" method="get">
  <label for="url">URL:</label>
  <input type="url" id="url" name="url" value="{{ url }}" size="50"><br/>
  <input type="submit" id="submit" value="Render">
</form>
"""

TEMPLATE_FEED = """\
<h2><a href="{{ feed.link|safe_href }}" rel="nofollow">{{ feed.title }}</a></h2>

{% for item in feed.items %}
<div class="entry">
  <h3><a href="{{ item.link|safe_href }}" rel="nofollow">{{ item.title }}</a></h3>
  <div class="content">
    {{ sanitize(item.body_html) }}
  </div>
  {% if item.published %}
  <small>
    Published: {{ item.published|format_published }}
  </small>
  {% endif %}
</div>
{% endfor %}
"""

TEMPLATE_ERROR = """\
<h1>Error rendering the feed</h1>

<div class="alert">
  {{ error }}<br/>
  <a href="{{ url|safe_href }}">{{ url }}</a>
</div>
"""

FOOTER = b"""
</body>
</html>
"""


def safe_href(url: str) -> str:
    """Pass relative and http/https/mailto URLs; replace anything else."""
    # Browsers ignore these when resolving a scheme
    candidate = _IGNORED_URL_CHARS.sub("", str(url)).lstrip(_C0_CONTROL_OR_SPACE)
    try:
        parsed_url = urlparse(candidate)
    except ValueError:
        return UNSAFE_URL
    if parsed_url.scheme and parsed_url.scheme not in SAFE_URL_SCHEMES:
        return UNSAFE_URL
    return str(url)


def format_published(published: datetime) -> str:
    return published.strftime(PUBLISHED_FORMAT)


def create_environment() -> jinja2.Environment:
    """Build the template environment shared by all requests."""
    environment = jinja2.Environment(
        loader=jinja2.DictLoader(
            {
                "header.html": TEMPLATE_HEADER,
                "feed.html": TEMPLATE_FEED,
                "error.html": TEMPLATE_ERROR,
            }
        ),
        autoescape=True,
        undefined=jinja2.StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
    )
    environment.filters["safe_href"] = safe_href
    environment.filters["format_published"] = format_published
    return environment


class PageComposer:
    """Renders the header, feed and error regions of a page."""

    def __init__(self, environment: jinja2.Environment | None = None):
        self.environment = environment or create_environment()
        self.template_header = self.environment.get_template("header.html")
        self.template_feed = self.environment.get_template("feed.html")
        self.template_error = self.environment.get_template("error.html")

    def _render(self, template: jinja2.Template, **context) -> str:
        try:
            return template.render(**context)
        except jinja2.TemplateError as e:
            raise CompositionFailure(
                f"Failed to render template {template.name}: {e}"
            ) from e

    def render_header(self, title: str, url: str) -> bytes:
        return self._render(self.template_header, title=title, url=url).encode("utf-8")

    def render_feed(
        self, feed: ParsedFeed, sanitize: Callable[[str | None], Markup]
    ) -> Markup:
        """Render the feed body.

        Args:
            feed: Parsed feed to render
            sanitize: Turns untrusted item HTML into safe markup

        Returns:
            Body markup for the page
        """
        return Markup(self._render(self.template_feed, feed=feed, sanitize=sanitize))

    def render_error(self, message: str, url: str) -> bytes:
        return self._render(self.template_error, error=message, url=url).encode("utf-8")

    def compose(self, page: PageContext) -> bytes:
        """Concatenate the page regions in output order."""
        return b"".join((page.header, page.body, page.footer))
