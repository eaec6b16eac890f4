"""
Feed entry extraction engine.

This module turns the event stream of a YouTube-style Atom feed into one
EntryBuilder per <entry> scope. Nested scopes (author, media group, media
community) are handled with an explicit stack of frames instead of recursive
functions, so traversal depth never depends on how deeply a document nests.
"""

import logging

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Iterator, List, Optional

from .event_source import END, EOF, START, FeedEvent, iter_events
from .scope_handlers import EntryScopeHandler, ScopeHandler
from ..exceptions import FeedParsingError
from ..interfaces import FeedParserInterface
from ..models import BASIC_FIELDS, EntryBuilder


@dataclass
class _Frame:
    """An open scope on the walker stack."""
    handler: ScopeHandler
    accumulator: Any
    tag: str
    depth: int


class ScopeWalker:
    """
    Drives a scope handler over an event stream.

    The walker is entered right after the open event of the scope element and
    consumes events up to and including that element's close event. Inside
    the scope it keeps three pieces of state:

    - a stack of open frames (the scope itself plus any nested scopes)
    - the field element currently being captured, if any
    - the unknown element currently being skipped, if any

    Depth counting (not tag matching) decides which close event belongs to
    which open event, so an unknown child that happens to share a name with
    a field or scope never ends the wrong scope.
    """

    def __init__(self):
        self.logger = logging.getLogger(__name__)
        self.elements_skipped = 0
        self.fields_captured = 0

    def run(self, handler: ScopeHandler, events: Iterator[FeedEvent],
            source_path: Optional[str] = None, tag: Optional[str] = None) -> Any:
        """
        Consume one scope and return the handler's derived value.

        Args:
            handler: Handler for the scope whose open event was just consumed
            events: Shared event iterator positioned inside the scope
            source_path: Optional path used in error reports
            tag: Tag of the scope element (defaults to handler.tag)

        Returns:
            Whatever handler.close() returns for the scope

        Raises:
            FeedParsingError: If the events end before the scope closes
        """
        frames: List[_Frame] = [_Frame(handler, handler.open(), tag or handler.tag, 0)]
        depth = 0
        capture_tag: Optional[str] = None
        capture_depth: Optional[int] = None
        skip_depth: Optional[int] = None

        for event in events:
            if event.kind == START:
                depth += 1
                if skip_depth is not None or capture_depth is not None:
                    continue
                frame = frames[-1]
                if frame.handler.handles_field(event.tag):
                    capture_tag, capture_depth = event.tag, depth
                    continue
                child = frame.handler.nested_scope(event.tag)
                if child is not None:
                    frames.append(_Frame(child, child.open(), event.tag, depth))
                else:
                    skip_depth = depth
                    self.elements_skipped += 1
                    self.logger.debug(f"Skipping <{event.tag}> inside <{frame.tag}>")

            elif event.kind == END:
                if skip_depth is not None:
                    if depth == skip_depth:
                        skip_depth = None
                elif capture_depth is not None:
                    if depth == capture_depth:
                        frame = frames[-1]
                        frame.handler.capture(frame.accumulator, capture_tag, event.element)
                        self.fields_captured += 1
                        capture_tag, capture_depth = None, None
                else:
                    # Every open non-frame element is either captured or skipped,
                    # so this close belongs to the innermost frame.
                    frame = frames.pop()
                    value = frame.handler.close(frame.accumulator)
                    if not frames:
                        return value
                    frames[-1].handler.absorb(frames[-1].accumulator, frame.tag, value)
                depth -= 1

            elif event.kind == EOF:
                break

        raise FeedParsingError(
            f"Reached end of document before closing <{frames[-1].tag}>", source_path
        )


class FeedParser(FeedParserInterface):
    """
    Extracts video entries from YouTube-style Atom feed documents.

    The parser scans the document for <entry> open events. Each entry scope is
    handed to a ScopeWalker driving an EntryScopeHandler; the resulting builder
    is yielded and scanning resumes after the entry's close event. Elements of
    a finished entry are released so memory stays flat on large feeds.

    Per-file states:
        Scanning-for-entry -> Extracting-entry -> (yield builder) ->
        Scanning-for-entry -> ... -> End-of-document
    """

    def __init__(self, field_names: Iterable[str] = BASIC_FIELDS):
        """
        Initialize the feed parser.

        Args:
            field_names: Active field set; fields outside it are not retained
        """
        self.logger = logging.getLogger(__name__)
        self.field_names = tuple(field_names)
        self.entry_handler = EntryScopeHandler(self.field_names)
        self.walker = ScopeWalker()

        # Performance tracking
        self.documents_parsed = 0
        self.entries_seen = 0

    def iter_entries(self, source: bytes, source_path: Optional[str] = None) -> Iterator[EntryBuilder]:
        """
        Yield one builder per entry scope, in document order.

        Raises:
            FeedParsingError: If the document is malformed or truncated
        """
        events = iter_events(source, source_path)
        for event in events:
            if event.kind == START and event.tag == self.entry_handler.tag:
                self.entries_seen += 1
                builder = self.walker.run(self.entry_handler, events, source_path)
                self._release(event.element)
                yield builder
            elif event.kind == EOF:
                break
        self.documents_parsed += 1

    def parse_entries(self, source: bytes, source_path: Optional[str] = None) -> List[EntryBuilder]:
        """
        Parse a whole document before returning any entry.

        A malformed document raises before the caller sees a single builder.
        """
        return list(self.iter_entries(source, source_path))

    def _release(self, element: Any) -> None:
        """Free a finished entry element and its already-processed siblings."""
        if element is None:
            return
        element.clear()
        parent = element.getparent()
        if parent is not None:
            while element.getprevious() is not None:
                del parent[0]

    def get_performance_stats(self) -> Dict[str, Any]:
        """
        Get parser performance statistics.

        Returns:
            Dictionary containing parse counters
        """
        return {
            'documents_parsed': self.documents_parsed,
            'entries_seen': self.entries_seen,
            'fields_captured': self.walker.fields_captured,
            'elements_skipped': self.walker.elements_skipped,
            'field_set_size': len(self.field_names),
        }

    def reset_stats(self) -> None:
        """Reset performance statistics."""
        self.documents_parsed = 0
        self.entries_seen = 0
        self.walker.fields_captured = 0
        self.walker.elements_skipped = 0
        self.logger.debug("FeedParser statistics reset")
