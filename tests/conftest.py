"""
Shared fixtures for feed cache tests.

Feed documents are built inline so every test shows exactly which elements
an entry carries.
"""

import os
import sys

import pytest

base_dir = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if base_dir not in sys.path:
    sys.path.insert(0, base_dir)


FEED_OPEN = (
    '<?xml version="1.0" encoding="UTF-8"?>\n'
    '<feed xmlns:yt="http://www.youtube.com/xml/schemas/2015" '
    'xmlns:media="http://search.yahoo.com/mrss/" '
    'xmlns="http://www.w3.org/2005/Atom">\n'
    ' <link rel="self" href="http://www.youtube.com/feeds/videos.xml?channel_id=c1"/>\n'
    ' <id>yt:channel:c1</id>\n'
    ' <title>Channel Title</title>\n'
    ' <author><name>Channel Author</name><uri>http://www.youtube.com/channel/c1</uri></author>\n'
)
FEED_CLOSE = '</feed>\n'


def build_entry(video_id="v1", channel_id="c1", title="T", author="A",
                published="2020-01-01T00:00:00Z", extra=""):
    """Build one <entry> element; a field passed as None is left out."""
    parts = [' <entry>\n', f'  <id>yt:video:{video_id}</id>\n']
    if video_id is not None:
        parts.append(f'  <yt:videoId>{video_id}</yt:videoId>\n')
    if channel_id is not None:
        parts.append(f'  <yt:channelId>{channel_id}</yt:channelId>\n')
    if title is not None:
        parts.append(f'  <title>{title}</title>\n')
    parts.append(f'  <link rel="alternate" href="https://www.youtube.com/watch?v={video_id}"/>\n')
    if author is not None:
        parts.append(f'  <author>\n   <name>{author}</name>\n   <uri>http://www.youtube.com/channel/{channel_id}</uri>\n  </author>\n')
    if published is not None:
        parts.append(f'  <published>{published}</published>\n')
    parts.append(extra)
    parts.append(' </entry>\n')
    return ''.join(parts)


def build_feed(*entries):
    """Wrap entry strings in a feed document and encode it."""
    return (FEED_OPEN + ''.join(entries) + FEED_CLOSE).encode('utf-8')


@pytest.fixture
def make_entry():
    """Fixture providing the entry builder function."""
    return build_entry


@pytest.fixture
def make_feed():
    """Fixture providing the feed document builder function."""
    return build_feed


@pytest.fixture
def media_group_xml():
    """A complete media:group block as YouTube publishes it."""
    return (
        '  <media:group>\n'
        '   <media:title>Media Title</media:title>\n'
        '   <media:content url="https://www.youtube.com/v/v1?version=3" type="application/x-shockwave-flash" width="640" height="390"/>\n'
        '   <media:thumbnail url="https://i1.ytimg.com/vi/v1/hqdefault.jpg" width="480" height="360"/>\n'
        '   <media:description>First line\nSecond line</media:description>\n'
        '   <media:community>\n'
        '    <media:starRating count="12" average="4.75" min="1" max="5"/>\n'
        '    <media:statistics views="1024"/>\n'
        '   </media:community>\n'
        '  </media:group>\n'
    )
