"""SQLAlchemy TypeDecorators for JSON-in-text columns.

Company notes and tags are stored as JSON text. Malformed stored text is
a data-quality problem, not an error: it loads as empty and a warning is
logged so reports stay available on partially dirty data.
"""

import json

from loguru import logger
from sqlalchemy import Text, TypeDecorator

from .normalization_helpers import normalize_tags


def _load(value):
    try:
        return json.loads(value)
    except (TypeError, ValueError):
        logger.warning("Malformed JSON column value ignored: {!r}", str(value)[:80])
        return None


class JSONList(TypeDecorator):
    """Ordered list of JSON objects stored as text."""

    impl = Text
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return json.dumps(list(value))

    def process_result_value(self, value, dialect):
        if value is None or value == "":
            return []
        data = _load(value)
        if not isinstance(data, list):
            if data is not None:
                logger.warning("Expected JSON list, got {}", type(data).__name__)
            return []
        return data


class JSONTagSet(TypeDecorator):
    """Set of tag strings stored as a sorted JSON array.

    Assign a new set to change tags; in-place mutation is not tracked.
    """

    impl = Text
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return json.dumps(sorted(normalize_tags(value)))

    def process_result_value(self, value, dialect):
        if value is None or value == "":
            return set()
        data = _load(value)
        if not isinstance(data, list):
            if data is not None:
                logger.warning("Expected JSON tag array, got {}", type(data).__name__)
            return set()
        return normalize_tags(data)
