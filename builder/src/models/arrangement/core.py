"""
Bouquet Builder - Arrangement Data Model

THE MODEL for one bouquet. Owns the ordered item list and the style
parameters, and is the only place they are mutated.

This class handles:
- Adding items at the next deterministic slot (or an explicit drop position)
- Partial updates, removal and clearing
- Style parameters: wrap style, ribbon color, size preset
- Quick item operations (rotate, scale, duplicate, swap, restack)
- Template and occasion preset application
- Snapshot API (for undo/redo support)
- Saved-design serialization

The model is INDEPENDENT of UI and of history:
- No Qt imports
- No rendering logic
- No undo stack (BuilderSession commits snapshots to a HistoryManager)

Usage:
    model = ArrangementModel()
    rose_id = model.add(red_rose)
    model.update(rose_id, rotation=30.0, scale=1.4)
    model.apply_preset(BUILTIN_PRESETS['romantic'], catalog)

    # Undo support
    snapshot = model.get_snapshot()
    model.set_snapshot(snapshot)
"""

import logging
from typing import List, Optional

from constants import (
    WRAP_STYLES, DEFAULT_WRAP_STYLE,
    DEFAULT_RIBBON_COLOR,
    SIZE_PRESETS, DEFAULT_SIZE,
)
from models.color import Color
from models.config import EngineConfig
from models.flower import FlowerType
from models.transform import Vec2
from services.slot_layout import SlotLayoutEngine

from ._internal.item import Item
from .query_mixin import ArrangementQueryMixin
from .transform_mixin import ArrangementTransformMixin
from .template_mixin import ArrangementTemplateMixin
from .serialization_mixin import ArrangementSerializationMixin


class ArrangementModel(ArrangementTransformMixin, ArrangementTemplateMixin,
                       ArrangementSerializationMixin, ArrangementQueryMixin):
    """Bouquet arrangement with full operation API

    Item identity is the instance_id returned by add(). Callers never get
    the stored Item objects back; every query hands out copies.

    Properties:
        config: EngineConfig with scale bounds and limits
        wrap_style: One of WRAP_STYLES
        ribbon_color: Color of ribbon and bow
        size: Size preset name
        size_scale: Render-time multiplier for the size preset
    """

    def __init__(self, config: EngineConfig = None, layout_engine: SlotLayoutEngine = None):
        """Create an empty arrangement

        Args:
            config: Limits and geometry, defaults to EngineConfig()
            layout_engine: Shared slot engine; built from config if omitted
        """
        self._logger = logging.getLogger('Arrangement')
        self._config = config or EngineConfig()
        self._layout = layout_engine or SlotLayoutEngine(self._config.slot_layout)

        # The list object lives as long as the model; mutations happen in place
        self._items: List[Item] = []

        self._wrap_style = DEFAULT_WRAP_STYLE
        self._ribbon_color = Color.from_name(DEFAULT_RIBBON_COLOR)
        self._size = DEFAULT_SIZE

    # ========================================
    # Properties
    # ========================================

    @property
    def config(self) -> EngineConfig:
        return self._config

    @property
    def layout_engine(self) -> SlotLayoutEngine:
        return self._layout

    @property
    def wrap_style(self) -> str:
        return self._wrap_style

    @wrap_style.setter
    def wrap_style(self, value: str):
        if value not in WRAP_STYLES:
            raise ValueError(f"Unknown wrap style {value!r}, expected one of {WRAP_STYLES}")
        self._wrap_style = value

    @property
    def ribbon_color(self) -> Color:
        return self._ribbon_color

    @ribbon_color.setter
    def ribbon_color(self, value):
        self._ribbon_color = Color.parse(value)

    @property
    def size(self) -> str:
        return self._size

    @size.setter
    def size(self, name: str):
        if name not in SIZE_PRESETS:
            raise ValueError(f"Unknown size {name!r}, expected one of {tuple(SIZE_PRESETS)}")
        self._size = name

    @property
    def size_scale(self) -> float:
        """Render-time multiplier; stored item scales are never touched"""
        return SIZE_PRESETS[self._size]

    # ========================================
    # Item Mutations
    # ========================================

    def add(self, flower_type: FlowerType, position=None) -> str:
        """Place a new item for a catalog flower

        The item takes the slot for the current item count. A drop position
        replaces the slot position but keeps its rotation, scale and stack
        order.

        Args:
            flower_type: Catalog entry to place
            position: Optional (x, y) or Vec2 in working space

        Returns:
            instance_id of the new item

        Raises:
            ValueError: If max_items is configured and already reached
        """
        self._check_capacity(1)

        slot = self._layout.slot_for(len(self._items))
        pos = slot.position if position is None else Vec2(*position)

        item = Item({
            'flower_type_id': flower_type.flower_type_id,
            'name': flower_type.name,
            'color': flower_type.color,
            'image_ref': flower_type.image_ref,
            'category': flower_type.category,
            'x': pos.x,
            'y': pos.y,
            'rotation': slot.rotation,
            'scale': self._config.clamp_scale(slot.scale),
            'stack_order': slot.stack_order,
        })
        self._items.append(item)
        self._logger.debug("Added %r", item)
        return item.instance_id

    def update(self, instance_id: str, position=None, rotation: Optional[float] = None,
               scale: Optional[float] = None, stack_order: Optional[int] = None) -> bool:
        """Merge a partial transform into an item

        Only the arguments that are not None are applied. Scale is clamped
        to the configured bounds.

        Returns:
            True if the item exists, False (logged, nothing changed) otherwise
        """
        item = self._find(instance_id)
        if item is None:
            self._logger.debug("update: no item %s", instance_id)
            return False

        if position is not None:
            item.pos = Vec2(*position)
        if rotation is not None:
            item.rotation = rotation
        if scale is not None:
            item.scale = self._config.clamp_scale(scale)
        if stack_order is not None:
            item.stack_order = stack_order
        return True

    def remove(self, instance_id: str) -> bool:
        """Remove an item; returns False if it does not exist"""
        index = self._index_of(instance_id)
        if index is None:
            self._logger.debug("remove: no item %s", instance_id)
            return False
        del self._items[index]
        self._logger.debug("Removed item %s", instance_id)
        return True

    def clear(self):
        """Remove every item. Style parameters are kept."""
        self._items.clear()
        self._logger.debug("Cleared arrangement")

    # ========================================
    # Snapshot API (for undo/redo)
    # ========================================

    def get_snapshot(self) -> List[dict]:
        """Get the item list as detached dicts (for history)

        Style parameters are not part of the snapshot.
        """
        return [item.to_dict() for item in self._items]

    def set_snapshot(self, snapshot: List[dict]):
        """Restore the item list from get_snapshot() output

        Instance ids are kept, so ids held by the host stay valid across
        undo and redo.
        """
        self._items[:] = [Item(dict(data)) for data in snapshot]
        self._logger.debug("Restored %d items from snapshot", len(self._items))

    # ========================================
    # Helper Methods (Internal)
    # ========================================

    def _find(self, instance_id: str) -> Optional[Item]:
        index = self._index_of(instance_id)
        return None if index is None else self._items[index]

    def _index_of(self, instance_id: str) -> Optional[int]:
        for index, item in enumerate(self._items):
            if item.instance_id == instance_id:
                return index
        return None

    def _check_capacity(self, extra: int, current: Optional[int] = None):
        """Raise ValueError if `extra` more items would exceed max_items"""
        limit = self._config.max_items
        if limit is None:
            return
        count = len(self._items) if current is None else current
        if count + extra > limit:
            raise ValueError(f"Arrangement is full ({limit} items)")

    def __repr__(self) -> str:
        return (f"ArrangementModel(items={len(self._items)}, wrap='{self._wrap_style}', "
                f"ribbon={self._ribbon_color!r}, size='{self._size}')")
