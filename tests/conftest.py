"""Shared fixtures: sample feed documents and fake HTTP sessions."""

from unittest.mock import Mock

import pytest

RSS_FEED = b"""<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0" xmlns:content="http://purl.org/rss/1.0/modules/content/">
  <channel>
    <title>Example Feed</title>
    <link>https://example.com/</link>
    <description>An example RSS feed</description>
    <item>
      <title>Hello</title>
      <link>https://example.com/hello</link>
      <description>Short description</description>
      <content:encoded><![CDATA[<p>Full <b>content</b></p>]]></content:encoded>
      <pubDate>Mon, 01 Jan 2024 10:00:00 +0200</pubDate>
    </item>
    <item>
      <title>Second</title>
      <link>https://example.com/second</link>
      <description><![CDATA[<p>Only a description</p>]]></description>
    </item>
  </channel>
</rss>
"""

ATOM_FEED = b"""<?xml version="1.0" encoding="utf-8"?>
<feed xmlns="http://www.w3.org/2005/Atom">
  <title>Atom Example</title>
  <link href="https://example.org/"/>
  <id>urn:uuid:60a76c80-d399-11d9-b93C-0003939e0af6</id>
  <updated>2024-03-01T12:00:00Z</updated>
  <entry>
    <title>Atom Entry</title>
    <link href="https://example.org/entry"/>
    <id>urn:uuid:1225c695-cfb8-4ebb-aaaa-80da344efa6a</id>
    <updated>2024-03-01T12:00:00Z</updated>
    <published>2024-03-01T12:00:00Z</published>
    <summary>Atom summary</summary>
    <content type="html">&lt;p&gt;Atom &lt;em&gt;content&lt;/em&gt;&lt;/p&gt;</content>
  </entry>
</feed>
"""


def make_response(content=RSS_FEED, status_code=200, headers=None):
    """Build a fake streaming requests.Response."""
    response = Mock()
    response.status_code = status_code
    response.headers = headers or {"Content-Type": "application/rss+xml"}
    response.iter_content.return_value = [content]
    response.raise_for_status.return_value = None
    return response


def make_session(response=None):
    """Build a fake requests.Session whose get returns ``response``."""
    session = Mock()
    session.headers = {}
    session.get.return_value = response if response is not None else make_response()
    return session


@pytest.fixture
def rss_feed():
    return RSS_FEED


@pytest.fixture
def atom_feed():
    return ATOM_FEED


@pytest.fixture(name="make_response")
def make_response_fixture():
    return make_response


@pytest.fixture(name="make_session")
def make_session_fixture():
    return make_session
