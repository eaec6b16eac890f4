"""
Tests for RecordAssembler: required-field validation and partial record drop.
"""

import unittest

from feed_cache.assembly.record_assembler import RecordAssembler
from feed_cache.exceptions import ConfigurationError
from feed_cache.models import BASIC_FIELDS, EXTENDED_FIELDS, EntryBuilder, VideoEntry


def complete_builder(field_names=BASIC_FIELDS):
    builder = EntryBuilder(field_names)
    builder.update({
        "video_id": "v1",
        "channel_id": "c1",
        "title": "T",
        "author": "A",
        "published": "2020-01-01T00:00:00Z",
    })
    return builder


class TestRecordAssembler(unittest.TestCase):
    """Test RecordAssembler class."""

    def setUp(self):
        self.assembler = RecordAssembler(BASIC_FIELDS, BASIC_FIELDS)

    def test_complete_entry_is_assembled(self):
        entry = self.assembler.assemble(complete_builder())

        self.assertIsInstance(entry, VideoEntry)
        self.assertEqual(entry.video_id, "v1")
        self.assertEqual(self.assembler.assembled_count, 1)
        self.assertEqual(self.assembler.dropped_count, 0)

    def test_entry_missing_required_field_is_dropped(self):
        builder = complete_builder()
        builder.set("title", None)

        self.assertIsNone(self.assembler.assemble(builder, "feeds/a.xml"))
        self.assertEqual(self.assembler.dropped_count, 1)

    def test_empty_string_counts_as_present(self):
        builder = complete_builder()
        builder.set("title", "")

        entry = self.assembler.assemble(builder)
        self.assertIsNotNone(entry)
        self.assertEqual(entry.get("title"), "")

    def test_optional_extended_fields_may_be_absent(self):
        assembler = RecordAssembler(BASIC_FIELDS, EXTENDED_FIELDS)
        entry = assembler.assemble(complete_builder(EXTENDED_FIELDS))

        self.assertIsNotNone(entry)
        self.assertEqual(entry.field_names, EXTENDED_FIELDS)
        self.assertIsNone(entry.get("views"))

    def test_custom_required_fields(self):
        assembler = RecordAssembler(("video_id",), BASIC_FIELDS)
        builder = EntryBuilder(BASIC_FIELDS)
        builder.set("video_id", "v9")

        entry = assembler.assemble(builder)
        self.assertEqual(entry.to_dict()["video_id"], "v9")
        self.assertIsNone(entry.get("title"))

    def test_required_field_outside_field_set_rejected(self):
        with self.assertRaises(ConfigurationError):
            RecordAssembler(("video_id", "views"), BASIC_FIELDS)


class TestEntryBuilder(unittest.TestCase):
    """Test the per-entry accumulator."""

    def test_unknown_field_is_ignored(self):
        builder = EntryBuilder(BASIC_FIELDS)
        self.assertFalse(builder.set("media_title", "x"))
        self.assertTrue(builder.set("title", "x"))

    def test_last_set_wins(self):
        builder = EntryBuilder(BASIC_FIELDS)
        builder.set("title", "first")
        builder.set("title", "second")
        self.assertEqual(builder.get("title"), "second")

    def test_missing_preserves_requested_order(self):
        builder = EntryBuilder(BASIC_FIELDS)
        builder.set("channel_id", "c1")
        self.assertEqual(builder.missing(("title", "video_id", "channel_id")), ["title", "video_id"])

    def test_finalize_checks_required_fields(self):
        builder = complete_builder()
        self.assertIsInstance(builder.finalize(BASIC_FIELDS), VideoEntry)
        builder.set("author", None)
        self.assertIsNone(builder.finalize(BASIC_FIELDS))
        self.assertIsNotNone(builder.finalize(("video_id",)))

    def test_build_uses_field_set_order(self):
        builder = EntryBuilder(BASIC_FIELDS)
        builder.set("published", "p")
        builder.set("video_id", "v")
        self.assertEqual(builder.build().field_names, BASIC_FIELDS)


if __name__ == '__main__':
    unittest.main()
