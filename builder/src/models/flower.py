"""Catalog flower types as seen by the composition engine.

The catalog itself (search, pricing, stock management) lives outside the
engine. Only color, image_ref and category are read when placing and
rendering; the remaining fields ride along for display.
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional

from constants import CATEGORY_FOCAL, CATEGORY_STACK_ORDER
from models.color import Color


@dataclass(frozen=True)
class FlowerType:
    """One catalog entry: a kind of flower that can be placed many times."""
    flower_type_id: str
    name: str
    color: Color
    image_ref: Optional[str] = None
    category: str = CATEGORY_FOCAL
    stock: int = 0

    def __post_init__(self):
        if not self.flower_type_id:
            raise ValueError("flower_type_id must be a non-empty string")
        # Accept hex/palette strings for convenience
        if not isinstance(self.color, Color):
            object.__setattr__(self, 'color', Color.parse(self.color))
        if self.category not in CATEGORY_STACK_ORDER:
            raise ValueError(f"Unknown flower category: {self.category!r}")

    @property
    def in_stock(self) -> bool:
        return self.stock > 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'FlowerType':
        """Build from a catalog record.

        Accepts both snake_case and the catalog's camelCase keys
        (flowerTypeId, imageRef).
        """
        return cls(
            flower_type_id=data.get('flower_type_id') or data.get('flowerTypeId') or data.get('id'),
            name=data.get('name', ''),
            color=data.get('color', '#ffffff'),
            image_ref=data.get('image_ref', data.get('imageRef', data.get('image'))),
            category=data.get('category', CATEGORY_FOCAL),
            stock=int(data.get('stock', 0)),
        )
