"""
Tests for the entry extractor: scanning, traversal rules and truncation.
"""

import pytest

from lxml import etree

from feed_cache.exceptions import FeedParsingError
from feed_cache.models import BASIC_FIELDS, EXTENDED_FIELDS
from feed_cache.parsing.event_source import EOF, END, START, FeedEvent
from feed_cache.parsing.feed_parser import FeedParser, ScopeWalker
from feed_cache.parsing.scope_handlers import AuthorScopeHandler, EntryScopeHandler


class TestFeedParserScanning:
    """Test how entries are located in a document."""

    @pytest.fixture
    def parser(self):
        """Fixture providing a FeedParser for the basic field set."""
        return FeedParser(BASIC_FIELDS)

    def test_entries_yielded_in_document_order(self, parser, make_feed, make_entry):
        data = make_feed(make_entry(video_id="a"), make_entry(video_id="b"), make_entry(video_id="c"))

        builders = parser.parse_entries(data)

        assert [b.get("video_id") for b in builders] == ["a", "b", "c"]
        assert parser.entries_seen == 3
        assert parser.documents_parsed == 1

    def test_feed_level_title_and_author_are_not_entry_fields(self, parser, make_feed, make_entry):
        builders = parser.parse_entries(make_feed(make_entry(title=None, author=None)))

        assert len(builders) == 1
        assert builders[0].get("title") is None
        assert builders[0].get("author") is None

    def test_document_without_entries(self, parser, make_feed):
        assert parser.parse_entries(make_feed()) == []

    def test_entry_found_below_a_wrapper_element(self, parser, make_entry):
        data = (
            '<feed xmlns="http://www.w3.org/2005/Atom" xmlns:yt="http://www.youtube.com/xml/schemas/2015">'
            '<wrapper>' + make_entry(video_id="deep") + '</wrapper></feed>'
        ).encode("utf-8")

        builders = parser.parse_entries(data)

        assert [b.get("video_id") for b in builders] == ["deep"]

    def test_unnamespaced_document_is_accepted(self, parser):
        data = b"<feed><entry><title>Plain</title></entry></feed>"
        builders = parser.parse_entries(data)
        assert builders[0].get("title") == "Plain"


class TestFeedParserTraversal:
    """Test last-wins, scope isolation and unknown subtree handling."""

    @pytest.fixture
    def parser(self):
        """Fixture providing a FeedParser for the extended field set."""
        return FeedParser(EXTENDED_FIELDS)

    def test_repeated_field_last_occurrence_wins(self, parser, make_feed, make_entry):
        entry = make_entry(title="First", extra="  <title>Second</title>\n")
        builder = parser.parse_entries(make_feed(entry))[0]
        assert builder.get("title") == "Second"

    def test_unknown_subtree_is_skipped_entirely(self, parser, make_feed, make_entry):
        extra = (
            '  <x:extension xmlns:x="urn:example">\n'
            '   <title>Bogus</title>\n'
            '   <yt:videoId>bogus</yt:videoId>\n'
            '   <author><name>Bogus</name></author>\n'
            '  </x:extension>\n'
        )
        builder = parser.parse_entries(make_feed(make_entry(extra=extra)))[0]

        assert builder.get("title") == "T"
        assert builder.get("video_id") == "v1"
        assert builder.get("author") == "A"
        assert parser.walker.elements_skipped >= 1

    def test_media_fields_outside_media_group_are_ignored(self, parser, make_feed, make_entry):
        extra = '  <media:thumbnail url="https://stray/1.jpg"/>\n  <media:statistics views="9"/>\n'
        builder = parser.parse_entries(make_feed(make_entry(extra=extra)))[0]

        assert builder.get("thumbnail") is None
        assert builder.get("views") is None

    def test_media_group_values_reach_the_entry(self, parser, make_feed, make_entry, media_group_xml):
        builder = parser.parse_entries(make_feed(make_entry(extra=media_group_xml)))[0]

        assert builder.get("thumbnail") == "https://i1.ytimg.com/vi/v1/hqdefault.jpg"
        assert builder.get("description") == "First line\nSecond line"
        assert builder.get("views") == "1024"
        assert builder.get("star_rating") == "4.75"
        assert builder.get("rating_count") == "12"
        # The entry title comes from <title>, not <media:title>
        assert builder.get("title") == "T"

    def test_nested_markup_inside_field_is_flattened(self, parser, make_feed, make_entry):
        entry = make_entry(title="Hello <x:b xmlns:x=\"urn:example\">bold</x:b> world")
        builder = parser.parse_entries(make_feed(entry))[0]
        assert builder.get("title") == "Hello bold world"

    def test_entries_do_not_share_state(self, parser, make_feed, make_entry):
        data = make_feed(make_entry(video_id="a", title="Only A"), make_entry(video_id="b", title=None))
        first, second = parser.parse_entries(data)
        assert first.get("title") == "Only A"
        assert second.get("title") is None


class TestFeedParserErrors:

    def test_truncated_document_raises(self, make_feed, make_entry):
        data = make_feed(make_entry(video_id="a"), make_entry(video_id="b"))
        truncated = data[:data.rindex(b"<author>")]

        with pytest.raises(FeedParsingError):
            FeedParser().parse_entries(truncated, "feeds/cut.xml")

    def test_iter_entries_yields_completed_entries_before_error(self, make_feed, make_entry):
        data = make_feed(make_entry(video_id="a"), make_entry(video_id="b"))
        truncated = data[:data.rindex(b"<author>")]

        seen = []
        with pytest.raises(FeedParsingError):
            for builder in FeedParser().iter_entries(truncated):
                seen.append(builder.get("video_id"))
        assert seen == ["a"]

    def test_performance_stats_and_reset(self, make_feed, make_entry):
        parser = FeedParser()
        parser.parse_entries(make_feed(make_entry()))

        stats = parser.get_performance_stats()
        assert stats["documents_parsed"] == 1
        assert stats["entries_seen"] == 1
        assert stats["fields_captured"] >= 5

        parser.reset_stats()
        assert parser.get_performance_stats()["entries_seen"] == 0


class TestScopeWalker:
    """Test the walker against hand-built event sequences."""

    def test_end_of_events_inside_scope_raises(self):
        root = etree.fromstring(b"<author><name>A</name></author>")
        name = root[0]
        events = iter([FeedEvent(START, "name", name), FeedEvent(END, "name", name), FeedEvent(EOF)])

        with pytest.raises(FeedParsingError, match="before closing <author>"):
            ScopeWalker().run(AuthorScopeHandler(), events, "feeds/a.xml")

    def test_exhausted_iterator_inside_nested_scope_raises(self):
        root = etree.fromstring(b"<entry><author/></entry>")
        author = root[0]
        events = iter([FeedEvent(START, "author", author)])

        with pytest.raises(FeedParsingError, match="before closing <author>"):
            ScopeWalker().run(EntryScopeHandler(), events)

    def test_unknown_element_sharing_a_scope_name_does_not_close_scope(self):
        # <entry><x><author/></x><yt:videoId>v1</yt:videoId></entry> with <x> unknown
        root = etree.fromstring(b"<entry><x><author/></x><videoId>v1</videoId></entry>")
        x, video = root[0], root[1]
        author = x[0]
        events = iter([
            FeedEvent(START, "x", x),
            FeedEvent(START, "author", author),
            FeedEvent(END, "author", author),
            FeedEvent(END, "x", x),
            FeedEvent(START, "yt:videoId", video),
            FeedEvent(END, "yt:videoId", video),
            FeedEvent(END, "entry", root),
        ])

        builder = ScopeWalker().run(EntryScopeHandler(), events)

        assert builder.get("video_id") == "v1"
        assert builder.get("author") is None
