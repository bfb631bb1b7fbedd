"""
Transform Mixin for Arrangement Model

Quick-control operations on single items: step rotation and scale, relative
moves, restacking, duplication and flower swapping.

Every method treats an unknown instance id as a logged no-op and reports
it through its return value (False or None).
"""

from typing import Optional

from constants import ROTATE_STEP, SCALE_STEP, DUPLICATE_OFFSET
from models.flower import FlowerType

from ._internal.item import new_instance_id


class ArrangementTransformMixin:
    """Mixin providing item transform operations for ArrangementModel

    This mixin assumes the class has:
    - self._items: List[Item]
    - self._config: EngineConfig
    - self._logger: Logger
    - self._find(instance_id), self._check_capacity(extra)
    """

    def rotate_item(self, instance_id: str, step_degrees: float = ROTATE_STEP) -> bool:
        """Rotate by a step in degrees (negative for counter-clockwise)"""
        item = self._find(instance_id)
        if item is None:
            self._logger.debug("rotate_item: no item %s", instance_id)
            return False
        item.rotation = item.rotation + step_degrees
        return True

    def scale_item(self, instance_id: str, step: float = SCALE_STEP) -> bool:
        """Grow or shrink by a step, clamped to the configured bounds"""
        item = self._find(instance_id)
        if item is None:
            self._logger.debug("scale_item: no item %s", instance_id)
            return False
        # Round away float drift from repeated 0.1 steps
        item.scale = self._config.clamp_scale(round(item.scale + step, 6))
        return True

    def move_item_by(self, instance_id: str, dx: float, dy: float) -> bool:
        """Translate an item by a working-space delta"""
        item = self._find(instance_id)
        if item is None:
            self._logger.debug("move_item_by: no item %s", instance_id)
            return False
        item.pos = item.pos.offset(dx, dy)
        return True

    # ========================================
    # Stacking
    # ========================================

    def bring_to_front(self, instance_id: str) -> bool:
        """Stack an item above every other item"""
        item = self._find(instance_id)
        if item is None:
            self._logger.debug("bring_to_front: no item %s", instance_id)
            return False
        others = [other.stack_order for other in self._items if other is not item]
        if others:
            item.stack_order = max(max(others) + 1, item.stack_order)
        return True

    def send_to_back(self, instance_id: str) -> bool:
        """Stack an item below every other item"""
        item = self._find(instance_id)
        if item is None:
            self._logger.debug("send_to_back: no item %s", instance_id)
            return False
        others = [other.stack_order for other in self._items if other is not item]
        if others:
            item.stack_order = min(min(others) - 1, item.stack_order)
        return True

    # ========================================
    # Duplicate / Swap
    # ========================================

    def duplicate_item(self, instance_id: str) -> Optional[str]:
        """Copy an item under a new id, offset and stacked on top

        Returns:
            instance_id of the copy, or None if the source does not exist

        Raises:
            ValueError: If max_items is configured and already reached
        """
        source = self._find(instance_id)
        if source is None:
            self._logger.debug("duplicate_item: no item %s", instance_id)
            return None
        self._check_capacity(1)

        clone = source.copy(instance_id=new_instance_id())
        clone.pos = source.pos.offset(DUPLICATE_OFFSET, DUPLICATE_OFFSET)
        clone.stack_order = max(item.stack_order for item in self._items) + 1
        self._items.append(clone)
        self._logger.debug("Duplicated %s as %s", instance_id, clone.instance_id)
        return clone.instance_id

    def swap_flower(self, instance_id: str, flower_type: FlowerType) -> bool:
        """Point an item at another catalog flower, keeping its transform"""
        item = self._find(instance_id)
        if item is None:
            self._logger.debug("swap_flower: no item %s", instance_id)
            return False
        item.set_flower(flower_type)
        self._logger.debug("Swapped %s to %s", instance_id, flower_type.flower_type_id)
        return True
