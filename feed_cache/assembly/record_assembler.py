"""
Record assembly: promote finished entry builders to completed entries.

An entry scope that closes with any required field unset is dropped. This is
a normal skip, not an error.
"""

import logging

from typing import Iterable, Optional, Tuple

from ..exceptions import ConfigurationError
from ..models import BASIC_FIELDS, EntryBuilder, VideoEntry


class RecordAssembler:
    """
    Validates entry builders against the required-field set.

    Args:
        required_fields: Fields that must be set for an entry to be kept
        field_names: Active field set; required fields must be a subset of it
    """

    def __init__(self, required_fields: Iterable[str] = BASIC_FIELDS,
                 field_names: Iterable[str] = BASIC_FIELDS):
        self.logger = logging.getLogger(__name__)
        self.field_names: Tuple[str, ...] = tuple(field_names)
        self.required_fields: Tuple[str, ...] = tuple(required_fields)

        unknown = [name for name in self.required_fields if name not in self.field_names]
        if unknown:
            raise ConfigurationError(f"Required fields not in active field set: {', '.join(unknown)}")

        self.assembled_count = 0
        self.dropped_count = 0

    def assemble(self, builder: EntryBuilder, source_path: Optional[str] = None) -> Optional[VideoEntry]:
        """
        Return the completed entry, or None when a required field is missing.

        Args:
            builder: Builder for one closed entry scope
            source_path: Optional path used in the drop log message
        """
        entry = builder.finalize(self.required_fields)
        if entry is None:
            self.dropped_count += 1
            video_id = builder.get("video_id") or "<unknown>"
            self.logger.debug(
                f"Dropping entry {video_id} from {source_path or '<memory>'}: "
                f"missing {', '.join(builder.missing(self.required_fields))}"
            )
            return None

        self.assembled_count += 1
        return entry
