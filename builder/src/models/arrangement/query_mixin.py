"""
Query Mixin for Arrangement Model

Read-only access to arrangement state for hosts and the renderer.

All query methods follow these conventions:
- Prefix with get_ for retrieving data
- Unknown instance ids return None rather than raising
- Return copies of mutable data (no direct access to internal state)
"""

from typing import List, Optional

from ._internal.item import Item


class ArrangementQueryMixin:
    """Mixin providing query API for ArrangementModel

    This mixin assumes the class has:
    - self._items: List[Item] in insertion order
    - self._find(instance_id) -> Optional[Item]
    """

    @property
    def item_count(self) -> int:
        return len(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def has_item(self, instance_id: str) -> bool:
        return self._find(instance_id) is not None

    def get_item(self, instance_id: str) -> Optional[Item]:
        """Copy of one item, or None if it does not exist"""
        item = self._find(instance_id)
        return None if item is None else item.copy()

    def get_items(self) -> List[Item]:
        """Copies of all items in insertion order"""
        return [item.copy() for item in self._items]

    def get_instance_ids(self) -> List[str]:
        return [item.instance_id for item in self._items]

    # ========================================
    # Stacking Queries
    # ========================================

    def get_draw_order(self) -> List[Item]:
        """Copies of all items in paint order, bottom first

        Ascending stack_order; equal stack orders keep insertion order
        (sorted() is stable).
        """
        return [item.copy() for item in sorted(self._items, key=lambda item: item.stack_order)]

    def get_max_stack_order(self) -> Optional[int]:
        if not self._items:
            return None
        return max(item.stack_order for item in self._items)

    def get_min_stack_order(self) -> Optional[int]:
        if not self._items:
            return None
        return min(item.stack_order for item in self._items)
