"""
Scope handlers for the feed entry extractor.

Each handler knows the element names that are meaningful inside one scope
of a YouTube feed entry:

    entry
    ├── yt:videoId, yt:channelId, title, published, updated   (fields)
    ├── author                                                (nested scope)
    │   └── name, uri
    └── media:group                                           (nested scope)
        ├── media:title, media:content, media:thumbnail, media:description
        └── media:community                                   (nested scope)
            └── media:statistics, media:starRating, media:category, media:keywords

A handler never reads events itself. The ScopeWalker in feed_parser drives
the event stream and calls back into the handler: capture() when a known
field element closes, nested_scope() when a child opens, absorb() when a
nested scope closes and close() when the handler's own element closes.
Anything not named here is skipped with its whole subtree.
"""

import logging

from typing import Any, Dict, Iterable, Optional, Tuple

from .event_source import element_text
from ..models import BASIC_FIELDS, EntryBuilder


# A field element maps to one or more (field_name, attribute) targets. When an
# attribute is named, its value is used and the element text is the fallback.
FieldTargets = Tuple[Tuple[str, Optional[str]], ...]


def read_field_value(element: Any, attribute: Optional[str] = None) -> str:
    """
    Read the value carried by a field element.

    Args:
        element: lxml element at its close event
        attribute: Attribute holding the value (e.g. "url" on media:thumbnail)

    Returns:
        Attribute value if present, otherwise the element's inner text
    """
    if attribute and element is not None:
        value = element.get(attribute)
        if value is not None:
            return value.strip()
    return element_text(element)


class ScopeHandler:
    """Base class for a single scope (entry, author, media group, media community)."""

    tag: str = ""
    fields: Dict[str, FieldTargets] = {}

    def __init__(self):
        self.logger = logging.getLogger(__name__)
        self.scopes: Dict[str, "ScopeHandler"] = {}

    def handles_field(self, tag: str) -> bool:
        return tag in self.fields

    def nested_scope(self, tag: str) -> Optional["ScopeHandler"]:
        return self.scopes.get(tag)

    def open(self) -> Any:
        """Create the accumulator for a fresh occurrence of this scope."""
        return {}

    def capture(self, accumulator: Any, tag: str, element: Any) -> None:
        """Store the value(s) of a closed field element. Later occurrences win."""
        for field_name, attribute in self.fields[tag]:
            self.assign(accumulator, field_name, read_field_value(element, attribute))

    def assign(self, accumulator: Any, field_name: str, value: str) -> None:
        accumulator[field_name] = value

    def absorb(self, accumulator: Any, tag: str, value: Any) -> None:
        """Fold the derived value of a closed nested scope into this scope."""
        if isinstance(value, dict):
            accumulator.update(value)

    def close(self, accumulator: Any) -> Any:
        """Return the derived value of this scope."""
        return accumulator


class AuthorScopeHandler(ScopeHandler):
    """Handles <author>; derives the author name. The uri child is observed only."""

    tag = "author"
    fields = {
        "name": (("name", None),),
        "uri": (("uri", None),),
    }

    def close(self, accumulator: Dict[str, str]) -> Optional[str]:
        if accumulator.get("uri"):
            self.logger.debug(f"Author uri observed: {accumulator['uri']}")
        return accumulator.get("name")


class MediaCommunityScopeHandler(ScopeHandler):
    """Handles <media:community>: view count, star rating, category and keywords."""

    tag = "media:community"
    fields = {
        "media:statistics": (("views", "views"),),
        "media:starRating": (("star_rating", "average"), ("rating_count", "count")),
        "media:category": (("category", None),),
        "media:keywords": (("keywords", None),),
    }


class MediaGroupScopeHandler(ScopeHandler):
    """
    Handles <media:group>.

    media:title and media:content are captured under their own names so they
    can be logged, but no field set retains them: the entry title comes from
    the Atom <title> element.
    """

    tag = "media:group"
    fields = {
        "media:title": (("media_title", None),),
        "media:content": (("content_url", "url"),),
        "media:thumbnail": (("thumbnail", "url"),),
        "media:description": (("description", None),),
    }

    def __init__(self):
        super().__init__()
        self.scopes = {MediaCommunityScopeHandler.tag: MediaCommunityScopeHandler()}


class EntryScopeHandler(ScopeHandler):
    """
    Handles <entry>; accumulates into an EntryBuilder.

    Args:
        field_names: Active field set. Values for fields outside it are dropped
                     by the builder.
    """

    tag = "entry"
    fields = {
        "yt:videoId": (("video_id", None),),
        "yt:channelId": (("channel_id", None),),
        "title": (("title", None),),
        "published": (("published", None),),
        "updated": (("updated", None),),
    }

    def __init__(self, field_names: Iterable[str] = BASIC_FIELDS):
        super().__init__()
        self.field_names = tuple(field_names)
        self.scopes = {
            AuthorScopeHandler.tag: AuthorScopeHandler(),
            MediaGroupScopeHandler.tag: MediaGroupScopeHandler(),
        }

    def open(self) -> EntryBuilder:
        return EntryBuilder(self.field_names)

    def assign(self, accumulator: EntryBuilder, field_name: str, value: str) -> None:
        accumulator.set(field_name, value)

    def absorb(self, accumulator: EntryBuilder, tag: str, value: Any) -> None:
        if tag == AuthorScopeHandler.tag:
            if value is not None:
                accumulator.set("author", value)
        elif isinstance(value, dict):
            accumulator.update(value)
