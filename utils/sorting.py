"""Stable sort and substring filter for table views."""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional

ASCENDING = "ascending"
DESCENDING = "descending"


@dataclass
class SortConfig:
    key: str
    direction: str = ASCENDING

    def flipped(self):
        return SortConfig(self.key, DESCENDING if self.direction == ASCENDING else ASCENDING)


def _plain(value):
    if isinstance(value, Enum):
        return value.value
    return value


def matches(value, text: str) -> bool:
    """Case-insensitive substring containment on the value's text form."""
    if value is None:
        return False
    return text.casefold() in str(_plain(value)).casefold()


class SortableFilterable:
    """Filtered-then-sorted view over a collection.

    Items may be objects or dicts. `accessors` overrides how a key is read,
    e.g. to sort severity by rank instead of by name. Items whose sort value
    is None always go last.
    """

    def __init__(self, key: Optional[str] = None, direction: str = ASCENDING,
                 accessors: Optional[Dict[str, Callable[[Any], Any]]] = None):
        if direction not in (ASCENDING, DESCENDING):
            raise ValueError(f"Invalid sort direction: {direction}")
        self.sort_config = SortConfig(key, direction) if key else None
        self.accessors = accessors or {}

    def request_sort(self, key: str) -> SortConfig:
        """Same key flips direction; a new key starts ascending."""
        if self.sort_config and self.sort_config.key == key:
            self.sort_config = self.sort_config.flipped()
        else:
            self.sort_config = SortConfig(key, ASCENDING)
        return self.sort_config

    def value(self, item, key: str):
        accessor = self.accessors.get(key)
        if accessor is not None:
            return accessor(item)
        if isinstance(item, dict):
            return item.get(key)
        return getattr(item, key, None)

    def apply(self, items: Iterable, filter_field: Optional[str] = None,
              filter_text: Optional[str] = None) -> List:
        result = list(items)
        if filter_field and filter_text:
            result = [i for i in result if matches(self.value(i, filter_field), filter_text)]

        if self.sort_config is None:
            return result

        key = self.sort_config.key
        present = [i for i in result if self.value(i, key) is not None]
        missing = [i for i in result if self.value(i, key) is None]
        present.sort(key=lambda i: _plain(self.value(i, key)),
                     reverse=self.sort_config.direction == DESCENDING)
        return present + missing
