"""
Atomic counters and block flags on posts and profiles.

Counter increments can be keyed by a cause (the report for a post, the blocked
post for a profile) so that replaying the same cause never counts twice. Block
flags record the cause that set them in ``blocked_by``.
"""

from typing import Dict, Optional

from reportguard.cascade.policy import Level
from reportguard.clock import get_current_timestamp
from reportguard.storage.documents import JsonDocumentStore

# list of causes already counted, per level
COUNTED_CAUSES = {
    Level.ITEM: "counted_report_ids",
    Level.PROFILE: "blocked_item_ids",
}


class CounterStore:
    def __init__(self, store: JsonDocumentStore, collections: Dict[Level, str]):
        self.store = store
        self.collections = collections

    def increment_and_get(self, kind: Level, entity_id: str, field: str, once_for: Optional[str] = None) -> int:
        if once_for is None:
            return self.store.increment(self.collections[kind], entity_id, field)
        value, _ = self.store.increment_once(
            self.collections[kind], entity_id, field, COUNTED_CAUSES[kind], once_for
        )
        return value

    def mark_blocked(self, kind: Level, entity_id: str, cause: Optional[str] = None) -> bool:
        """Flip is_blocked false → true. Returns True only for the caller that flipped it."""
        return self.store.compare_and_set(
            self.collections[kind],
            entity_id,
            "is_blocked",
            expected=False,
            value=True,
            extra={"blocked_at": get_current_timestamp(), "blocked_by": cause},
            default=False,
        )
