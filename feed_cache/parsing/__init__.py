"""Feed parsing: event source, scope handlers and the entry extractor."""

from .event_source import FeedEvent, iter_events, qualified_tag
from .feed_parser import FeedParser, ScopeWalker
from .scope_handlers import (
    AuthorScopeHandler,
    EntryScopeHandler,
    MediaCommunityScopeHandler,
    MediaGroupScopeHandler,
    ScopeHandler,
)

__all__ = [
    'FeedEvent',
    'iter_events',
    'qualified_tag',
    'FeedParser',
    'ScopeWalker',
    'ScopeHandler',
    'EntryScopeHandler',
    'AuthorScopeHandler',
    'MediaGroupScopeHandler',
    'MediaCommunityScopeHandler',
]
