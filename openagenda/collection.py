"""Ordered list of entities returned by collection endpoints."""
from typing import Any, Dict, List


class Collection(list):
    """List of entities with a few helpers."""

    def first(self):
        return self[0] if self else None

    def last(self):
        return self[-1] if self else None

    def to_dict(self) -> List[Dict[str, Any]]:
        """Export every item, entities are expanded to plain mappings."""
        return [item.to_dict() if hasattr(item, 'to_dict') else item for item in self]
