"""
Serialization Mixin for Arrangement Model

Saved-design form of an arrangement: a JSON-safe dict of items (catalog id,
cached display fields and transform) plus the style parameters.

Instance ids are not saved. Loading always regenerates them, so a design
loaded twice never collides with itself.
"""

import json
from typing import Any, Dict

from constants import SIZE_PRESETS, DEFAULT_SIZE, DEFAULT_WRAP_STYLE, DEFAULT_RIBBON_COLOR

from ._internal.item import Item


class ArrangementSerializationMixin:
    """Mixin providing design serialization for ArrangementModel

    This mixin assumes the class has:
    - self._items: List[Item]
    - self._config: EngineConfig
    - self._logger: Logger
    - self._check_capacity(extra, current)
    - wrap_style, ribbon_color and size properties
    """

    def to_design_data(self) -> Dict[str, Any]:
        """Export the arrangement as a saved design

        Returns:
            {'items': [...], 'wrap_style': str, 'ribbon_color': str, 'size': str}
        """
        return {
            'items': [item.to_dict(include_id=False) for item in self._items],
            'wrap_style': self.wrap_style,
            'ribbon_color': self.ribbon_color.to_design_value(),
            'size': self.size,
        }

    def load_design_data(self, data: Dict[str, Any]):
        """Replace items and style with a saved design

        Everything is validated before the model changes, so a bad design
        leaves the arrangement untouched.

        Raises:
            ValueError: If the design is malformed or exceeds max_items
        """
        if not isinstance(data, dict):
            raise ValueError("Design data must be an object")
        raw_items = data.get('items', [])
        if not isinstance(raw_items, list):
            raise ValueError("Design 'items' must be a list")
        self._check_capacity(len(raw_items), current=0)

        items = []
        for raw in raw_items:
            if not isinstance(raw, dict):
                raise ValueError(f"Design item must be an object, got {raw!r}")
            fields = {k: v for k, v in raw.items() if k != 'instance_id'}
            item = Item(fields)
            item.scale = self._config.clamp_scale(item.scale)
            items.append(item)

        # Setters validate; roll back the style if any value is rejected
        previous = (self.wrap_style, self.ribbon_color, self.size)
        try:
            self.wrap_style = data.get('wrap_style', DEFAULT_WRAP_STYLE)
            self.ribbon_color = data.get('ribbon_color', DEFAULT_RIBBON_COLOR)
            size = data.get('size', DEFAULT_SIZE)
            self.size = size if size in SIZE_PRESETS else DEFAULT_SIZE
        except ValueError:
            self.wrap_style, self.ribbon_color, self.size = previous
            raise

        self._items[:] = items
        self._logger.info("Loaded design with %d items", len(items))

    @classmethod
    def from_design_data(cls, data: Dict[str, Any], config=None):
        """Build a new model from a saved design"""
        model = cls(config)
        model.load_design_data(data)
        return model

    # ========================================
    # JSON
    # ========================================

    def to_json(self, indent: int = None) -> str:
        return json.dumps(self.to_design_data(), indent=indent)

    @classmethod
    def from_json(cls, text: str, config=None):
        """Build a new model from to_json() output

        Raises:
            ValueError: If the text is not valid JSON or not a valid design
        """
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid design JSON: {e}") from e
        return cls.from_design_data(data, config)
