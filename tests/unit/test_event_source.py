"""
Tests for the streaming event source: tag qualification, input cleaning and
error reporting.
"""

import pytest

from feed_cache.exceptions import FeedParsingError
from feed_cache.parsing.event_source import (
    EOF, END, START, clean_xml_bytes, element_text, iter_events, qualified_tag
)


class TestQualifiedTag:
    """Test namespace normalization of lxml tags."""

    def test_atom_namespace_maps_to_local_name(self):
        assert qualified_tag("{http://www.w3.org/2005/Atom}entry") == "entry"
        assert qualified_tag("{http://www.w3.org/2005/Atom}title") == "title"

    def test_youtube_namespace_maps_to_yt_prefix(self):
        assert qualified_tag("{http://www.youtube.com/xml/schemas/2015}videoId") == "yt:videoId"

    def test_media_namespace_maps_to_media_prefix(self):
        assert qualified_tag("{http://search.yahoo.com/mrss/}group") == "media:group"
        assert qualified_tag("{http://search.yahoo.com/mrss/}starRating") == "media:starRating"

    def test_unqualified_tag_is_unchanged(self):
        assert qualified_tag("entry") == "entry"

    def test_unknown_namespace_keeps_clark_notation(self):
        assert qualified_tag("{urn:example}title") == "{urn:example}title"

    def test_non_string_tag_maps_to_empty(self):
        assert qualified_tag(None) == ""


class TestCleanXmlBytes:

    def test_strips_bom_and_leading_whitespace(self):
        data = b"\xef\xbb\xbf\r\n  <?xml version='1.0'?><feed/>"
        assert clean_xml_bytes(data) == b"<?xml version='1.0'?><feed/>"

    def test_clean_document_is_unchanged(self):
        assert clean_xml_bytes(b"<feed/>") == b"<feed/>"


class TestIterEvents:
    """Test the event stream produced for feed documents."""

    def test_events_are_balanced_and_end_with_eof(self, make_feed, make_entry):
        events = list(iter_events(make_feed(make_entry())))

        assert events[-1].kind == EOF
        starts = [e for e in events if e.kind == START]
        ends = [e for e in events if e.kind == END]
        assert len(starts) == len(ends)
        assert starts[0].tag == "feed"
        assert "yt:videoId" in [e.tag for e in starts]

    def test_comments_and_processing_instructions_are_not_events(self):
        data = b"<feed><!-- note --><?pi data?><entry/></feed>"
        tags = [e.tag for e in iter_events(data) if e.kind == START]
        assert tags == ["feed", "entry"]

    def test_document_with_bom_parses(self):
        data = b"\xef\xbb\xbf<?xml version='1.0' encoding='UTF-8'?>\n<feed/>"
        kinds = [e.kind for e in iter_events(data)]
        assert kinds == [START, END, EOF]

    def test_empty_document_raises(self):
        with pytest.raises(FeedParsingError, match="empty"):
            list(iter_events(b"   \n", "feeds/empty.xml"))

    def test_truncated_document_raises_with_position(self, make_feed, make_entry):
        data = make_feed(make_entry())
        truncated = data[:data.index(b"<published>")]

        with pytest.raises(FeedParsingError) as exc_info:
            list(iter_events(truncated, "feeds/cut.xml"))

        error = exc_info.value
        assert error.source_path == "feeds/cut.xml"
        assert error.line is not None
        assert "feeds/cut.xml" in str(error)

    def test_syntax_error_reports_position_once(self):
        data = b"<feed><yt:videoId>v1</yt:videoId></feed>"

        with pytest.raises(FeedParsingError) as exc_info:
            list(iter_events(data, "feeds/undeclared.xml"))

        error = exc_info.value
        message = str(error)
        assert error.line == 1
        assert message.count("line ") == 1
        assert message.count("column ") == 1
        assert message.endswith(")")

    def test_undeclared_namespace_prefix_is_malformed(self):
        with pytest.raises(FeedParsingError, match="yt"):
            list(iter_events(b"<feed><entry><yt:videoId>v1</yt:videoId></entry></feed>"))

    def test_mismatched_tags_raise(self):
        with pytest.raises(FeedParsingError, match="XML syntax error"):
            list(iter_events(b"<feed><entry></feed></entry>"))


class TestElementText:

    def test_joins_descendant_text_and_strips(self):
        from lxml import etree
        element = etree.fromstring("<title>  Hello <b>big</b> world \n</title>")
        assert element_text(element) == "Hello big world"

    def test_none_element_is_empty(self):
        assert element_text(None) == ""
