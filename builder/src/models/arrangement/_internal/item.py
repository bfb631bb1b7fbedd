"""
Bouquet Builder - Item Data Model

One placed flower instance on the composition surface. Provides:
- instance_id identity (distinct from the catalog flower_type_id, since the
  same flower type may be placed many times)
- Cached catalog fields needed to render without the catalog
  (color, image_ref, category, name)
- Transform access (position, rotation, scale, stack_order)
- Flat dict form used for snapshots and saved designs

This is part of the MODEL layer - pure data, no UI logic. Bounds such as
the scale range are enforced by ArrangementModel, which owns the
configuration; Item stores what it is given.
"""

import uuid as uuid_module
from typing import Any, Dict, Optional

from constants import (
    WORKING_CENTER_X, WORKING_CENTER_Y,
    CATEGORY_FOCAL,
)
from models.color import Color
from models.transform import Vec2, Transform


def new_instance_id() -> str:
    """Generate a fresh, globally unique instance id"""
    return str(uuid_module.uuid4())


class Item:
    """A placed flower with its transform.

    Properties:
        instance_id: Unique per placement (read-only)
        flower_type_id: Catalog key (read-only)
        color: Cached Color, used when the image is unavailable
        image_ref: Cached image reference, or None
        category: 'focal', 'filler' or 'greenery'
        pos: Position as Vec2 in working space
        rotation: Degrees, unbounded
        scale: Uniform scale
        stack_order: Higher draws on top
    """

    def __init__(self, data: Dict[str, Any]):
        """Create item from data dictionary

        Args:
            data: Flat dictionary as produced by to_dict(). A missing
                instance_id gets a freshly generated one.
        """
        if not data.get('flower_type_id'):
            raise ValueError("Item data requires a flower_type_id")

        self._instance_id = data.get('instance_id') or new_instance_id()
        self._flower_type_id = str(data['flower_type_id'])
        self._name = data.get('name', '')
        self.color = data.get('color', '#ffffff')
        self._image_ref = data.get('image_ref')
        self._category = data.get('category', CATEGORY_FOCAL)
        self._pos = Vec2(
            float(data.get('x', WORKING_CENTER_X)),
            float(data.get('y', WORKING_CENTER_Y))
        )
        self._rotation = float(data.get('rotation', 0.0))
        self._scale = float(data.get('scale', 1.0))
        self._stack_order = int(data.get('stack_order', 0))

    # ========================================
    # Identity and catalog cache
    # ========================================

    @property
    def instance_id(self) -> str:
        return self._instance_id

    @property
    def flower_type_id(self) -> str:
        return self._flower_type_id

    @property
    def name(self) -> str:
        return self._name

    @property
    def color(self) -> Color:
        return self._color

    @color.setter
    def color(self, value):
        self._color = Color.parse(value)

    @property
    def image_ref(self) -> Optional[str]:
        return self._image_ref

    @property
    def category(self) -> str:
        return self._category

    def set_flower(self, flower_type) -> None:
        """Point this item at another catalog entry, keeping its transform"""
        self._flower_type_id = flower_type.flower_type_id
        self._name = flower_type.name
        self._color = flower_type.color
        self._image_ref = flower_type.image_ref
        self._category = flower_type.category

    # ========================================
    # Transform
    # ========================================

    @property
    def pos(self) -> Vec2:
        """Position as Vec2 (working space)"""
        return Vec2(self._pos.x, self._pos.y)

    @pos.setter
    def pos(self, value: Vec2):
        self._pos = Vec2(float(value.x), float(value.y))

    @property
    def rotation(self) -> float:
        return self._rotation

    @rotation.setter
    def rotation(self, value: float):
        self._rotation = float(value)

    @property
    def display_rotation(self) -> float:
        """Rotation wrapped to [0, 360) for display only"""
        return self._rotation % 360.0

    @property
    def scale(self) -> float:
        return self._scale

    @scale.setter
    def scale(self, value: float):
        self._scale = float(value)

    @property
    def stack_order(self) -> int:
        return self._stack_order

    @stack_order.setter
    def stack_order(self, value: int):
        self._stack_order = int(value)

    def get_transform(self) -> Transform:
        """Snapshot of the transform as a detached Transform"""
        return Transform(pos=self.pos, rotation=self._rotation,
                         scale=self._scale, stack_order=self._stack_order)

    # ========================================
    # Serialization
    # ========================================

    def to_dict(self, include_id: bool = True) -> Dict[str, Any]:
        """Export to flat dictionary of primitives

        Args:
            include_id: False drops instance_id (saved designs regenerate ids)
        """
        data = {
            'flower_type_id': self._flower_type_id,
            'name': self._name,
            'color': self._color.to_design_value(),
            'image_ref': self._image_ref,
            'category': self._category,
            'x': self._pos.x,
            'y': self._pos.y,
            'rotation': self._rotation,
            'scale': self._scale,
            'stack_order': self._stack_order,
        }
        if include_id:
            data['instance_id'] = self._instance_id
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Item':
        return cls(data)

    def copy(self, instance_id: Optional[str] = None) -> 'Item':
        """Detached copy; pass an instance_id to re-key the copy"""
        data = self.to_dict()
        if instance_id is not None:
            data['instance_id'] = instance_id
        return Item(data)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Item):
            return False
        return self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        return (f"Item(id='{self._instance_id[:8]}', flower='{self._flower_type_id}', "
                f"pos=({self._pos.x:.1f}, {self._pos.y:.1f}), rot={self._rotation:.1f}, "
                f"scale={self._scale:.2f}, stack={self._stack_order})")
